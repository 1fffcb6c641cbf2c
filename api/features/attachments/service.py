"""Service layer for the Attachments feature."""
from typing import Optional

import structlog

from api.features.attachments.exceptions import AttachmentStorageError
from api.features.attachments.models import StoredFile
from api.shared.utils import format_bytes, generate_storage_path
from infra.resources import LocalStorageResource

logger = structlog.get_logger("ivy.attachments.service")


class AttachmentService:
    """Persists uploaded bytes under a timestamped, sanitized name."""

    def __init__(self, storage_client: LocalStorageResource):
        self.storage_client = storage_client

    async def save(
        self,
        content: bytes,
        original_name: str,
        size: Optional[int] = None,
        subfolder: str = "misc",
    ) -> StoredFile:
        """Write ``content`` as ``<subfolder>/<ms>-<sanitized name>``.

        Args:
            content: File bytes.
            original_name: Name the client uploaded the file with.
            size: Size in bytes used for the label; defaults to ``len(content)``.
            subfolder: Directory under the upload root, created on demand.

        Raises:
            AttachmentStorageError: The directory or file could not be written.
        """
        size = len(content) if size is None else size
        object_name = generate_storage_path(original_name, subfolder)
        try:
            url = await self.storage_client.put_object_bytes(object_name, content)
        except (RuntimeError, ValueError) as e:
            logger.error("attachment_write_failed", object_name=object_name, error=str(e))
            raise AttachmentStorageError(str(e), {"object_name": object_name}) from e

        logger.info("attachment_saved", object_name=object_name, size=size)
        return StoredFile(url=url, size=format_bytes(size), object_name=object_name)

    async def discard(self, stored: StoredFile) -> bool:
        """Remove a previously stored file; returns False if it was already gone."""
        try:
            removed = await self.storage_client.remove_object(stored.object_name)
        except OSError as e:
            raise AttachmentStorageError(str(e), {"object_name": stored.object_name}) from e
        logger.info("attachment_discarded", object_name=stored.object_name, removed=removed)
        return removed
