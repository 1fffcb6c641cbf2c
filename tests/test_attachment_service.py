"""Tests for writing and discarding conversation attachments."""
import re

import pytest

from api.features.attachments.exceptions import AttachmentStorageError
from api.features.attachments.service import AttachmentService


@pytest.mark.asyncio
async def test_save_writes_file_under_subfolder(storage, upload_root):
    service = AttachmentService(storage_client=storage)

    stored = await service.save(b"hello", "my file!@#.pdf", 5, subfolder="task-conversations")

    assert re.fullmatch(r"/uploads/task-conversations/\d+-my_file___\.pdf", stored.url)
    assert stored.size == "5 B"
    on_disk = upload_root / stored.object_name
    assert on_disk.read_bytes() == b"hello"


@pytest.mark.asyncio
async def test_save_labels_size_from_argument(storage):
    service = AttachmentService(storage_client=storage)

    stored = await service.save(b"x" * 10, "big.bin", 5_242_880, subfolder="misc")

    assert stored.size == "5.00 MB"


@pytest.mark.asyncio
async def test_save_defaults_size_to_content_length(storage):
    service = AttachmentService(storage_client=storage)

    stored = await service.save(b"x" * 2048, "two.bin", subfolder="misc")

    assert stored.size == "2.00 KB"


@pytest.mark.asyncio
async def test_save_creates_missing_subfolder(storage, upload_root):
    service = AttachmentService(storage_client=storage)

    await service.save(b"data", "a.txt", subfolder="nested/deeper")

    assert (upload_root / "nested" / "deeper").is_dir()


@pytest.mark.asyncio
async def test_save_surfaces_write_failures(storage, upload_root):
    service = AttachmentService(storage_client=storage)
    # A plain file where the subfolder should be makes mkdir fail
    (upload_root / "blocked").write_bytes(b"")

    with pytest.raises(AttachmentStorageError):
        await service.save(b"data", "a.txt", subfolder="blocked")


@pytest.mark.asyncio
async def test_discard_removes_stored_file(storage, upload_root):
    service = AttachmentService(storage_client=storage)
    stored = await service.save(b"data", "a.txt", subfolder="misc")

    assert await service.discard(stored) is True
    assert not (upload_root / stored.object_name).exists()
    assert await service.discard(stored) is False
