"""Models for the Conversation feature."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.features.conversation.entities.task_conversation import (
    MessageSender,
    MessageType,
    TaskConversation as TaskConversationEntity,
    TaskMessage as TaskMessageEntity,
)
from api.shared.entities.base import utcnow

# Placeholder some clients send for an unset page
UNDEFINED_TASK_PAGE = "undefined"


def normalize_task_page(task_page: Optional[str]) -> Optional[str]:
    """Collapse absent, blank and ``"undefined"`` task pages to ``None``.

    Every read and write goes through this function so that a thread stored
    without a page is found by all three spellings.
    """
    if task_page is None:
        return None
    if not task_page.strip() or task_page == UNDEFINED_TASK_PAGE:
        return None
    return task_page


class TaskKey(BaseModel):
    """Identity of a task conversation."""

    selection_id: str = Field(description="Counselor selection identifier")
    task_title: str = Field(description="Task title")
    task_page: Optional[str] = Field(default=None, description="Optional task page")

    model_config = ConfigDict(frozen=True)

    @field_validator("task_page", mode="before")
    @classmethod
    def _normalize_task_page(cls, v):
        return normalize_task_page(v)


class AttachmentModel(BaseModel):
    """File attached to a message."""

    name: str = Field(description="Original file name")
    url: str = Field(description="Retrieval path")
    size: str = Field(description="Human readable size")


class MessageModel(BaseModel):
    """Domain model for a conversation message."""

    id: str = Field(description="Message identifier")
    sender: MessageSender = Field(description="Message author role")
    sender_name: str = Field(description="Display name of the author")
    text: str = Field(default="", description="Message body")
    timestamp: datetime = Field(description="Append time")
    message_type: MessageType = Field(default=MessageType.NORMAL)
    attachment: Optional[AttachmentModel] = Field(default=None)

    @classmethod
    def from_entity(cls, entity: TaskMessageEntity) -> "MessageModel":
        attachment = None
        if entity.has_attachment:
            attachment = AttachmentModel(
                name=entity.attachment_name or "",
                url=entity.attachment_url,
                size=entity.attachment_size or "",
            )
        return cls(
            id=entity.id,
            sender=entity.sender,
            sender_name=entity.sender_name,
            text=entity.text,
            timestamp=entity.timestamp,
            message_type=entity.message_type,
            attachment=attachment,
        )


class ConversationModel(BaseModel):
    """Domain model for a task conversation thread."""

    id: str = Field(description="Conversation identifier")
    student_ivy_service_id: str = Field(description="Owning student service")
    selection_id: str = Field(description="Counselor selection identifier")
    task_title: str = Field(description="Task title")
    task_page: Optional[str] = Field(default=None, description="Task page, if any")
    messages: List[MessageModel] = Field(default_factory=list)
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    @classmethod
    def from_entity(cls, entity: TaskConversationEntity) -> "ConversationModel":
        """Create model from database entity."""
        return cls(
            id=entity.id,
            student_ivy_service_id=entity.student_ivy_service_id,
            selection_id=entity.selection_id,
            task_title=entity.task_title,
            task_page=entity.task_page,
            messages=[MessageModel.from_entity(m) for m in entity.messages],
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class EmptyConversationModel(BaseModel):
    """Stand-in returned when no thread exists yet; never persisted."""

    messages: List[MessageModel] = Field(default_factory=list)


class PostMessageModel(BaseModel):
    """Validated input for appending a message to a task conversation."""

    student_ivy_service_id: str
    key: TaskKey
    sender: MessageSender
    sender_name: str
    text: str = ""
    message_type: MessageType = MessageType.NORMAL

    def to_entity(self, attachment: Optional[AttachmentModel] = None) -> TaskMessageEntity:
        """Convert to a new message entity stamped with the current time."""
        entity = TaskMessageEntity(
            sender=self.sender,
            sender_name=self.sender_name,
            text=self.text,
            message_type=self.message_type,
            timestamp=utcnow(),
        )
        if attachment is not None:
            entity.attachment_name = attachment.name
            entity.attachment_url = attachment.url
            entity.attachment_size = attachment.size
        return entity
