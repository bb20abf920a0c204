"""
Markdown export route: /api/export/markdown.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.services.export_service import export_service

router = APIRouter(prefix="/api/export", tags=["Export"])


@router.get(
    "/markdown",
    response_class=Response,
    responses={200: {"content": {"application/zip": {}}, "description": "Zip of markdown files"}},
    summary="Download the project's logs, reviews, goals and updates as markdown",
)
async def export_markdown(
    project_id: UUID = Depends(require_project_id),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    archive = await export_service.export_markdown(db, project_id, user.id)
    return Response(
        content=archive.content,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{archive.filename}"',
            "X-File-Count": str(archive.file_count),
        },
    )
