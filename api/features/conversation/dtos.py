"""DTOs for the Conversation feature."""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from api.features.conversation.entities.task_conversation import (
    MessageSender,
    MessageType,
)
from api.features.conversation.models import (
    AttachmentModel,
    ConversationModel,
    MessageModel,
)
from api.shared.dtos import BaseDTO, TimestampMixin


class AttachmentDTO(BaseDTO):
    """Attachment embedded in a message."""

    name: str = Field(description="Original file name")
    url: str = Field(description="Path the file is served from")
    size: str = Field(description="Human readable size")

    @classmethod
    def from_model(cls, model: AttachmentModel) -> "AttachmentDTO":
        return cls(name=model.name, url=model.url, size=model.size)


class MessageDTO(BaseDTO):
    """Conversation message DTO."""

    id: str = Field(description="Message identifier")
    sender: MessageSender = Field(description="Message author: student or counselor")
    sender_name: str = Field(description="Author display name")
    text: str = Field(default="", description="Message body")
    timestamp: datetime = Field(description="When the message was appended")
    message_type: MessageType = Field(
        default=MessageType.NORMAL,
        description="Message category: normal, feedback, action or resource",
    )
    attachment: Optional[AttachmentDTO] = Field(default=None)

    @classmethod
    def from_model(cls, model: MessageModel) -> "MessageDTO":
        return cls(
            id=model.id,
            sender=model.sender,
            sender_name=model.sender_name,
            text=model.text,
            timestamp=model.timestamp,
            message_type=model.message_type,
            attachment=(
                AttachmentDTO.from_model(model.attachment) if model.attachment else None
            ),
        )


class ConversationDTO(BaseDTO, TimestampMixin):
    """Task conversation thread DTO."""

    id: str = Field(description="Conversation identifier")
    student_ivy_service_id: str = Field(description="Owning student service")
    selection_id: str = Field(description="Counselor selection identifier")
    task_title: str = Field(description="Task title")
    task_page: Optional[str] = Field(default=None, description="Task page, if any")
    messages: List[MessageDTO] = Field(
        default_factory=list, description="Messages in append order"
    )

    @classmethod
    def from_model(cls, model: ConversationModel) -> "ConversationDTO":
        return cls(
            id=model.id,
            student_ivy_service_id=model.student_ivy_service_id,
            selection_id=model.selection_id,
            task_title=model.task_title,
            task_page=model.task_page,
            messages=[MessageDTO.from_model(m) for m in model.messages],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class EmptyConversationDTO(BaseDTO):
    """Returned when a task has no conversation yet."""

    messages: List[MessageDTO] = Field(default_factory=list)
