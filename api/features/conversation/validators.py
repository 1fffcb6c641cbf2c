"""Validators for conversation requests."""
import logging
from typing import Optional

from fastapi import File, UploadFile

from api.features.attachments.exceptions import AttachmentTooLargeError
from api.features.conversation.entities.task_conversation import (
    MessageSender,
    MessageType,
)
from api.features.conversation.exceptions import (
    ConversationValidationError,
    MissingFieldsError,
)
from api.features.conversation.models import PostMessageModel, TaskKey
from core.settings import SETTINGS

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


def _is_missing(value: Optional[str]) -> bool:
    return not value


class UploadedFile:
    """An upload read fully into memory after passing the size ceiling."""

    def __init__(self, filename: str, content: bytes):
        self.filename = filename
        self.content = content

    @property
    def size(self) -> int:
        return len(self.content)


async def read_limited_upload(
    file: Optional[UploadFile], max_bytes: int
) -> Optional[UploadedFile]:
    """Read an upload, refusing anything above ``max_bytes``."""
    if file is None or not file.filename:
        return None

    buffer = bytearray()
    while True:
        chunk = await file.read(_CHUNK_SIZE)
        if not chunk:
            break
        buffer.extend(chunk)
        if len(buffer) > max_bytes:
            logger.warning(
                f"Rejected upload {file.filename}: more than {max_bytes} bytes"
            )
            raise AttachmentTooLargeError(len(buffer), max_bytes)

    return UploadedFile(filename=file.filename, content=bytes(buffer))


async def message_file_upload(
    file: Optional[UploadFile] = File(default=None),
) -> Optional[UploadedFile]:
    """FastAPI dependency enforcing the per-file upload ceiling before the handler runs."""
    return await read_limited_upload(file, SETTINGS.UPLOADS.MAX_UPLOAD_BYTES)


class MessageValidator:
    """Checks message posts before anything is read or written."""

    REQUIRED_FIELDS = (
        ("studentIvyServiceId", "student_ivy_service_id"),
        ("selectionId", "selection_id"),
        ("taskTitle", "task_title"),
        ("sender", "sender"),
        ("senderName", "sender_name"),
    )

    @classmethod
    def validate_key(
        cls,
        selection_id: Optional[str],
        task_title: Optional[str],
        task_page: Optional[str] = None,
    ) -> TaskKey:
        if _is_missing(selection_id) or _is_missing(task_title):
            raise ConversationValidationError("selectionId and taskTitle are required")
        return TaskKey(
            selection_id=selection_id, task_title=task_title, task_page=task_page
        )

    @classmethod
    def validate_post(
        cls,
        *,
        student_ivy_service_id: Optional[str],
        selection_id: Optional[str],
        task_title: Optional[str],
        task_page: Optional[str],
        sender: Optional[str],
        sender_name: Optional[str],
        text: Optional[str],
        message_type: Optional[str],
        has_file: bool,
    ) -> PostMessageModel:
        values = {
            "student_ivy_service_id": student_ivy_service_id,
            "selection_id": selection_id,
            "task_title": task_title,
            "sender": sender,
            "sender_name": sender_name,
        }
        missing = [
            public for public, attr in cls.REQUIRED_FIELDS if _is_missing(values[attr])
        ]
        if missing:
            raise MissingFieldsError(missing)

        if not text and not has_file:
            raise ConversationValidationError(
                "Either text or file attachment is required"
            )

        try:
            sender_role = MessageSender(sender)
        except ValueError:
            raise ConversationValidationError(
                'sender must be "student" or "counselor"', {"sender": sender}
            )

        if _is_missing(message_type):
            category = MessageType.NORMAL
        else:
            try:
                category = MessageType(message_type)
            except ValueError:
                allowed = ", ".join(m.value for m in MessageType)
                raise ConversationValidationError(
                    f"messageType must be one of: {allowed}",
                    {"messageType": message_type},
                )

        return PostMessageModel(
            student_ivy_service_id=student_ivy_service_id,
            key=TaskKey(
                selection_id=selection_id, task_title=task_title, task_page=task_page
            ),
            sender=sender_role,
            sender_name=sender_name,
            text=text or "",
            message_type=category,
        )
