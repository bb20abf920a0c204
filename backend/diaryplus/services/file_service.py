"""
DiaryPlus Backend — Export File Storage
=========================================

What:  Writes, reads and removes generated export files (yearbook PDFs and
       EPUBs) below settings.storage_root.
Why:   Keeps every file system operation, and its error handling, in one place.
How:   Async file I/O through aiofiles. Callers pass a category directory
       ("yearbooks") and a generated filename; user input never reaches a path.

Directory Structure:
    storage/
    └── yearbooks/
        ├── yearbook-20250102-1a2b3c4d.pdf
        └── yearbook-20250102-5e6f7a8b.epub
"""

import logging
import os
import re
import uuid
from pathlib import Path
from typing import Optional

import aiofiles

from diaryplus.config import settings
from diaryplus.database import utcnow
from diaryplus.exceptions import FileStorageError, NotFoundError

logger = logging.getLogger(__name__)

# Generated names only: letters, digits, dash, underscore and one extension
SAFE_FILENAME = re.compile(r"^[A-Za-z0-9_-]+\.[a-z0-9]{2,5}$")


class FileService:
    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
        """
        self._storage_root = storage_root

    @property
    def storage_root(self) -> Path:
        # Resolved lazily so tests can point settings.storage_root at tmp_path
        return Path(self._storage_root or settings.storage_root).resolve()

    def ensure_root(self) -> None:
        self.storage_root.mkdir(parents=True, exist_ok=True)

    def new_filename(self, prefix: str, extension: str) -> str:
        stamp = utcnow().strftime("%Y%m%d")
        return f"{prefix}-{stamp}-{uuid.uuid4().hex[:12]}.{extension}"

    def path_for(self, category: str, filename: str) -> Path:
        """
        Absolute path of a stored file.

        Raises:
            NotFoundError: The name is not one this service could have generated.
        """
        if not SAFE_FILENAME.match(filename):
            raise NotFoundError(resource="file")
        return self.storage_root / category / filename

    async def store_file(self, category: str, filename: str, content: bytes) -> int:
        """
        Write file content to disk and return its size in bytes.

        Raises:
            FileStorageError if directory creation or file write fails.
        """
        path = self.path_for(category, filename)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save the generated file. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )
        logger.info("File stored: %s/%s (%d bytes)", category, filename, len(content))
        return len(content)

    async def read_file(self, category: str, filename: str) -> bytes:
        path = self.path_for(category, filename)
        if not path.exists():
            raise NotFoundError(resource="file", resource_id=filename)
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except OSError as e:
            logger.error("Failed to read file %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to read the requested file.",
                context={"path": str(path), "os_error": str(e)},
            )

    async def cleanup_file(self, category: str, filename: str) -> None:
        """
        Remove a stored file. Best effort: a missing file is not an error
        and other failures are logged, not raised.
        """
        try:
            path = self.path_for(category, filename)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except (OSError, NotFoundError) as e:
            logger.warning("Failed to clean up file %s: %s", filename, str(e))


file_service = FileService()
