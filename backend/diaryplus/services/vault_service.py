"""
DiaryPlus Backend — Private Vault Service
===========================================

What:  Opt-in encryption of journal entries with a vault password, plus the
       project's data retention policy.

Key management:
    - Setup stores a random 32-byte salt (hex) and a key-check token, never
      the password or the derived key.
    - key = PBKDF2-HMAC-SHA256(password, salt, vault_kdf_iterations), 32 bytes
    - The key-check token is KEY_CHECK_PLAINTEXT sealed with that key; a
      password is correct when the token opens.

Sealed payload (stored as JSON text in the entry's content column):
    {"encrypted": hex, "iv": hex, "tag": hex, "algorithm": "aes-256-gcm"}
    AES-256-GCM with a 12-byte random IV and AAD "diary-plus-vault".
"""

import asyncio
import json
import logging
import os
import re
import uuid
from typing import Dict

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.config import settings
from diaryplus.database import utcnow
from diaryplus.exceptions import AuthenticationError, ValidationError
from diaryplus.models.journal import JournalEntry
from diaryplus.models.project import Project
from diaryplus.models.vault import RetentionPolicy, VaultConfiguration
from diaryplus.schemas.vault import (
    KeyStrength,
    RetentionPolicyRequest,
    RetentionPolicyResponse,
    SealResponse,
    UnsealResponse,
    VaultSetupRequest,
    VaultSetupResponse,
    VaultStatusResponse,
)
from diaryplus.services.project_service import load_scoped, require_membership

logger = logging.getLogger(__name__)

ALGORITHM = "aes-256-gcm"
AAD = b"diary-plus-vault"
KEY_LENGTH = 32
SALT_LENGTH = 32
IV_LENGTH = 12
TAG_LENGTH = 16
KEY_CHECK_PLAINTEXT = "diary-plus-vault-key-check"
MIN_STRENGTH_SCORE = 6


# ── Password strength ─────────────────────────────────────────────────────

def validate_key_strength(password: str) -> KeyStrength:
    """
    Score a vault password out of 8.

    Length (>=12: 2, >=8: 1), one point per character class (lower, upper,
    digit, symbol), one for no character repeated three times in a row and
    one for no "123", "abc" or "qwe" run. Valid from 6 points.
    """
    feedback = []
    score = 0

    if len(password) >= 12:
        score += 2
    elif len(password) >= 8:
        score += 1
        feedback.append("Consider using a longer password (12+ characters)")
    else:
        feedback.append("Password must be at least 8 characters long")

    classes = {
        "Add lowercase letters": r"[a-z]",
        "Add uppercase letters": r"[A-Z]",
        "Add numbers": r"[0-9]",
        "Add special characters": r"[^a-zA-Z0-9]",
    }
    missing = []
    for hint, pattern in classes.items():
        if re.search(pattern, password):
            score += 1
        else:
            missing.append(hint)

    if not re.search(r"(.)\1{2,}", password):
        score += 1
    if not re.search(r"123|abc|qwe", password, re.IGNORECASE):
        score += 1

    is_valid = score >= MIN_STRENGTH_SCORE
    if not is_valid:
        feedback.extend(missing)
    return KeyStrength(is_valid=is_valid, score=score, feedback=feedback)


# ── Key derivation and AES-GCM ────────────────────────────────────────────

def derive_key(password: str, salt_hex: str, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=bytes.fromhex(salt_hex),
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


def encrypt_content(content: str, key: bytes) -> str:
    iv = os.urandom(IV_LENGTH)
    sealed = AESGCM(key).encrypt(iv, content.encode("utf-8"), AAD)
    ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
    return json.dumps(
        {
            "encrypted": ciphertext.hex(),
            "iv": iv.hex(),
            "tag": tag.hex(),
            "algorithm": ALGORITHM,
        }
    )


def decrypt_content(payload: str, key: bytes) -> str:
    """
    Raises:
        ValueError: Unsupported algorithm, corrupted payload or wrong key.
    """
    try:
        data: Dict[str, str] = json.loads(payload)
        if data.get("algorithm") != ALGORITHM:
            raise ValueError("Unsupported encryption algorithm")
        sealed = bytes.fromhex(data["encrypted"]) + bytes.fromhex(data["tag"])
        plain = AESGCM(key).decrypt(bytes.fromhex(data["iv"]), sealed, AAD)
    except (InvalidTag, KeyError, TypeError, json.JSONDecodeError) as e:
        raise ValueError("Failed to decrypt content - invalid key or corrupted data") from e
    return plain.decode("utf-8")


class VaultService:
    async def _derive(self, password: str, salt_hex: str) -> bytes:
        # PBKDF2 is CPU-bound; keep it off the event loop
        return await asyncio.to_thread(derive_key, password, salt_hex, settings.vault_kdf_iterations)

    async def _config(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> VaultConfiguration | None:
        result = await db.execute(
            select(VaultConfiguration).where(
                VaultConfiguration.project_id == project_id,
                VaultConfiguration.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def _unlock(self, db: AsyncSession, entry: JournalEntry, user_id: uuid.UUID, password: str) -> bytes:
        config = await self._config(db, entry.project_id, user_id)
        if config is None or not config.is_enabled:
            raise ValidationError(message="Private Vault is not set up for this project")
        key = await self._derive(password, config.salt)
        try:
            decrypt_content(config.key_check, key)
        except ValueError:
            logger.warning("Wrong vault password for project %s", entry.project_id)
            raise AuthenticationError(message="Incorrect vault password")
        return key

    # ── Setup ─────────────────────────────────────────────────────────────

    async def setup(self, db: AsyncSession, user_id: uuid.UUID, body: VaultSetupRequest) -> VaultSetupResponse:
        await require_membership(db, body.project_id, user_id, ("owner",))
        if body.password != body.confirm_password:
            raise ValidationError(message="Passwords do not match", field="confirmPassword")

        strength = validate_key_strength(body.password)
        if not strength.is_valid:
            raise ValidationError(
                message="Password is too weak",
                field="password",
                context={"score": strength.score, "feedback": strength.feedback},
            )

        salt = os.urandom(SALT_LENGTH).hex()
        key = await self._derive(body.password, salt)
        key_check = encrypt_content(KEY_CHECK_PLAINTEXT, key)

        config = await self._config(db, body.project_id, user_id)
        if config is None:
            config = VaultConfiguration(project_id=body.project_id, user_id=user_id)
            db.add(config)
        elif config.is_enabled:
            sealed = await db.execute(
                select(JournalEntry.id).where(
                    JournalEntry.project_id == body.project_id,
                    JournalEntry.user_id == user_id,
                    JournalEntry.is_encrypted.is_(True),
                ).limit(1)
            )
            if sealed.first() is not None:
                raise ValidationError(message="Unseal all entries before resetting the vault password")

        config.salt = salt
        config.key_check = key_check
        config.is_enabled = True
        config.setup_at = utcnow()
        config.password_strength_score = strength.score

        project = await db.get(Project, body.project_id)
        project.private_vault = True
        await db.flush()
        logger.info("Private Vault configured for project %s", body.project_id)
        return VaultSetupResponse(
            message="Private Vault setup completed",
            password_strength_score=strength.score,
        )

    async def status(self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID) -> VaultStatusResponse:
        await require_membership(db, project_id, user_id)
        config = await self._config(db, project_id, user_id)
        if config is None:
            return VaultStatusResponse(is_enabled=False)
        return VaultStatusResponse(
            is_enabled=config.is_enabled,
            setup_at=config.setup_at,
            password_strength_score=config.password_strength_score,
        )

    # ── Seal / unseal ─────────────────────────────────────────────────────

    async def seal_entry(
        self, db: AsyncSession, entry_id: uuid.UUID, user_id: uuid.UUID, password: str
    ) -> SealResponse:
        entry = await load_scoped(db, JournalEntry, entry_id, user_id, "journal entry", author_only=True)
        if entry.is_encrypted:
            raise ValidationError(message="Entry is already sealed")
        key = await self._unlock(db, entry, user_id, password)
        entry.content = encrypt_content(entry.content, key)
        entry.is_encrypted = True
        await db.flush()
        logger.info("Journal entry %s sealed", entry.id)
        return SealResponse(entry_id=entry.id, is_encrypted=True)

    async def unseal_entry(
        self,
        db: AsyncSession,
        entry_id: uuid.UUID,
        user_id: uuid.UUID,
        password: str,
        persist: bool = False,
    ) -> UnsealResponse:
        entry = await load_scoped(db, JournalEntry, entry_id, user_id, "journal entry", author_only=True)
        if not entry.is_encrypted:
            raise ValidationError(message="Entry is not sealed")
        key = await self._unlock(db, entry, user_id, password)
        try:
            content = decrypt_content(entry.content, key)
        except ValueError:
            logger.error("Sealed entry %s could not be decrypted with a verified key", entry.id)
            raise ValidationError(message="Entry content is corrupted")

        if persist:
            entry.content = content
            entry.is_encrypted = False
            await db.flush()
            logger.info("Journal entry %s unsealed", entry.id)
        return UnsealResponse(entry_id=entry.id, content=content, is_encrypted=entry.is_encrypted)

    # ── Retention ─────────────────────────────────────────────────────────

    async def get_retention(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> RetentionPolicyResponse:
        await require_membership(db, project_id, user_id)
        result = await db.execute(select(RetentionPolicy).where(RetentionPolicy.project_id == project_id))
        policy = result.scalar_one_or_none()
        if policy is None:
            return RetentionPolicyResponse()
        return RetentionPolicyResponse(
            enabled=policy.enabled,
            delete_after_months=policy.delete_after_months,
            archive_after_months=policy.archive_after_months,
            notify_before_days=policy.notify_before_days,
            updated_at=policy.updated_at,
        )

    async def set_retention(
        self, db: AsyncSession, user_id: uuid.UUID, body: RetentionPolicyRequest
    ) -> RetentionPolicyResponse:
        await require_membership(db, body.project_id, user_id, ("owner",))
        if body.delete_after_months <= body.archive_after_months:
            raise ValidationError(
                message="delete_after_months must be greater than archive_after_months",
                field="delete_after_months",
            )
        result = await db.execute(
            select(RetentionPolicy).where(RetentionPolicy.project_id == body.project_id)
        )
        policy = result.scalar_one_or_none()
        if policy is None:
            policy = RetentionPolicy(project_id=body.project_id)
            db.add(policy)

        policy.enabled = body.enabled
        policy.delete_after_months = body.delete_after_months
        policy.archive_after_months = body.archive_after_months
        policy.notify_before_days = body.notify_before_days
        policy.updated_by = user_id
        await db.flush()
        logger.info("Retention policy updated for project %s (enabled=%s)", body.project_id, body.enabled)
        return RetentionPolicyResponse(
            enabled=policy.enabled,
            delete_after_months=policy.delete_after_months,
            archive_after_months=policy.archive_after_months,
            notify_before_days=policy.notify_before_days,
            updated_at=policy.updated_at,
        )


vault_service = VaultService()
