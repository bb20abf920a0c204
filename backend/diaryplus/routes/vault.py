"""
DiaryPlus Backend — Private Vault Routes
==========================================

What:  Vault setup/status, sealing and unsealing journal entries, and the
       project's data retention policy.

Passwords travel in request bodies only and are never logged (the access
log records method, path, status and timing).
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.schemas.common import ErrorResponse
from diaryplus.schemas.vault import (
    RetentionPolicyRequest,
    RetentionPolicyResponse,
    SealResponse,
    UnsealResponse,
    VaultPasswordRequest,
    VaultSetupRequest,
    VaultSetupResponse,
    VaultStatusResponse,
    VaultUnsealRequest,
)
from diaryplus.services.vault_service import vault_service

router = APIRouter(prefix="/api/vault", tags=["Vault"])

WRONG_PASSWORD = {401: {"description": "Incorrect vault password", "model": ErrorResponse}}


@router.post(
    "/setup",
    response_model=VaultSetupResponse,
    responses={
        400: {"description": "Passwords differ or the password is too weak", "model": ErrorResponse},
        403: {"description": "Only the project owner may set up the vault", "model": ErrorResponse},
    },
    summary="Enable the Private Vault for a project",
)
async def setup_vault(
    body: VaultSetupRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> VaultSetupResponse:
    return await vault_service.setup(db, user.id, body)


@router.get("/setup", response_model=VaultStatusResponse, summary="Vault status for the caller")
async def vault_status(
    project_id: UUID = Depends(require_project_id),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> VaultStatusResponse:
    return await vault_service.status(db, project_id, user.id)


@router.post(
    "/entries/{entry_id}/seal",
    response_model=SealResponse,
    responses=WRONG_PASSWORD,
    summary="Encrypt a journal entry in place",
)
async def seal_entry(
    entry_id: UUID,
    body: VaultPasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SealResponse:
    return await vault_service.seal_entry(db, entry_id, user.id, body.password)


@router.post(
    "/entries/{entry_id}/unseal",
    response_model=UnsealResponse,
    responses=WRONG_PASSWORD,
    summary="Decrypt a sealed entry",
    description="Returns the plaintext. With persist=true the entry is stored decrypted again.",
)
async def unseal_entry(
    entry_id: UUID,
    body: VaultUnsealRequest,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UnsealResponse:
    result = await vault_service.unseal_entry(
        db, entry_id, user.id, body.password, persist=body.persist
    )
    response.headers["Cache-Control"] = "no-store"
    return result


# ── Retention ─────────────────────────────────────────────────────────────

@router.get("/retention", response_model=RetentionPolicyResponse)
async def get_retention(
    project_id: UUID = Depends(require_project_id),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> RetentionPolicyResponse:
    return await vault_service.get_retention(db, project_id, user.id)


@router.put(
    "/retention",
    response_model=RetentionPolicyResponse,
    responses={400: {"description": "delete_after_months must exceed archive_after_months", "model": ErrorResponse}},
)
async def set_retention(
    body: RetentionPolicyRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> RetentionPolicyResponse:
    return await vault_service.set_retention(db, user.id, body)
