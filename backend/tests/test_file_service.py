"""
DiaryPlus Backend — File Service Unit Tests
=============================================

What:  Tests for FileService naming, path safety and async read/write.
Why:   Download filenames come from the URL, so the name check is the
       boundary that keeps requests inside the storage root.
How:   Each test gets its own storage root under pytest's tmp_path.
"""

import re

import pytest

from diaryplus.exceptions import NotFoundError
from diaryplus.services.file_service import FileService


@pytest.fixture
def service(tmp_path):
    return FileService(storage_root=str(tmp_path / "storage"))


class TestFileNaming:

    def test_new_filename_shape(self, service):
        name = service.new_filename("yearbook", "pdf")
        assert re.match(r"^yearbook-\d{8}-[0-9a-f]{12}\.pdf$", name)

    def test_new_filenames_are_unique(self, service):
        names = {service.new_filename("yearbook", "epub") for _ in range(50)}
        assert len(names) == 50

    def test_path_for_stays_under_root(self, service):
        path = service.path_for("yearbooks", "yearbook-20240101-abcdef123456.pdf")
        assert path.parent == service.storage_root / "yearbooks"

    @pytest.mark.parametrize(
        "filename",
        ["../secrets.pdf", "..%2Fpasswd", "a/b.pdf", "no-extension", ".hidden.pdf", "x.PDF"],
    )
    def test_path_for_rejects_unsafe_names(self, service, filename):
        with pytest.raises(NotFoundError):
            service.path_for("yearbooks", filename)


class TestFileStorage:

    @pytest.mark.asyncio
    async def test_store_and_read(self, service):
        size = await service.store_file("yearbooks", "book-1.pdf", b"%PDF-1.4 test")
        assert size == 13
        assert await service.read_file("yearbooks", "book-1.pdf") == b"%PDF-1.4 test"

    @pytest.mark.asyncio
    async def test_read_missing_file(self, service):
        with pytest.raises(NotFoundError):
            await service.read_file("yearbooks", "missing.pdf")

    @pytest.mark.asyncio
    async def test_cleanup_removes_file(self, service):
        await service.store_file("yearbooks", "book-2.pdf", b"data")
        await service.cleanup_file("yearbooks", "book-2.pdf")
        assert not service.path_for("yearbooks", "book-2.pdf").exists()

    @pytest.mark.asyncio
    async def test_cleanup_missing_or_unsafe_does_not_raise(self, service):
        await service.cleanup_file("yearbooks", "never-written.pdf")
        await service.cleanup_file("yearbooks", "../escape.pdf")

    def test_ensure_root_creates_directory(self, service):
        service.ensure_root()
        assert service.storage_root.is_dir()
