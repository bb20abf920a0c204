"""
DiaryPlus Backend — Yearbook Routes
=====================================

What:  Generate, list, download and delete PDF/EPUB yearbooks.

Downloads are served from storage by generated filename and only to the
user who generated the file; anyone else gets 404, as for an unknown name.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.schemas.common import ErrorResponse, MessageResponse
from diaryplus.schemas.yearbook import YearbookListResponse, YearbookRequest, YearbookResult
from diaryplus.services.yearbook_service import yearbook_service

router = APIRouter(prefix="/api/yearbook", tags=["Yearbook"])


@router.post(
    "/generate",
    response_model=YearbookResult,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "No entries in the selected range", "model": ErrorResponse}},
    summary="Compile journal entries into a PDF or EPUB",
)
async def generate_yearbook(
    body: YearbookRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> YearbookResult:
    return await yearbook_service.generate(db, user.id, body)


@router.get("", response_model=YearbookListResponse, summary="The caller's generated yearbooks")
async def list_yearbooks(
    project_id: UUID = Depends(require_project_id),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> YearbookListResponse:
    return await yearbook_service.list_generations(db, project_id, user.id)


@router.get(
    "/download/{filename}",
    response_class=Response,
    responses={
        200: {
            "content": {"application/pdf": {}, "application/epub+zip": {}},
            "description": "The generated file",
        },
        404: {"description": "Unknown file, or generated by someone else", "model": ErrorResponse},
    },
)
async def download_yearbook(
    filename: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    result = await yearbook_service.download(db, filename, user.id)
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            "Cache-Control": "private, no-store",
        },
    )


@router.delete("/{generation_id}", response_model=MessageResponse)
async def delete_yearbook(
    generation_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await yearbook_service.delete_generation(db, generation_id, user.id)
    return MessageResponse(message="Yearbook deleted")
