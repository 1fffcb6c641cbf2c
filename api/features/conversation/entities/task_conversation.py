"""Task conversation entities: a thread per task and its messages."""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import (
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from api.shared.entities.base import BaseEntity, utcnow


class MessageSender(str, Enum):
    """Who wrote a message."""

    STUDENT = "student"
    COUNSELOR = "counselor"


class MessageType(str, Enum):
    """Message category shown to the reader."""

    NORMAL = "normal"
    FEEDBACK = "feedback"
    ACTION = "action"
    RESOURCE = "resource"


class TaskConversation(BaseEntity):
    """One conversation thread tied to a task (selection + title + optional page).

    A thread is unique on (selection_id, task_title, task_page) when the page
    is set, and on (selection_id, task_title) when it is not.
    """

    __tablename__ = "task_conversation"
    __table_args__ = (
        Index(
            "uq_task_conversation_task_page",
            "selection_id",
            "task_title",
            "task_page",
            unique=True,
            postgresql_where=text("task_page IS NOT NULL"),
            sqlite_where=text("task_page IS NOT NULL"),
        ),
        Index(
            "uq_task_conversation_task",
            "selection_id",
            "task_title",
            unique=True,
            postgresql_where=text("task_page IS NULL"),
            sqlite_where=text("task_page IS NULL"),
        ),
    )

    student_ivy_service_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True
    )
    selection_id: Mapped[str] = mapped_column(String(64), nullable=False)
    task_title: Mapped[str] = mapped_column(String(500), nullable=False)
    task_page: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    messages: Mapped[List["TaskMessage"]] = relationship(
        back_populates="conversation",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="[TaskMessage.timestamp, TaskMessage.position]",
    )


class TaskMessage(BaseEntity):
    """A single message in a task conversation, optionally with an attachment."""

    __tablename__ = "task_message"

    conversation_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("task_conversation.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender: Mapped[MessageSender] = mapped_column(
        SQLEnum(
            MessageSender,
            name="message_sender",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    sender_name: Mapped[str] = mapped_column(String(255), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    message_type: Mapped[MessageType] = mapped_column(
        SQLEnum(
            MessageType,
            name="message_type",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=MessageType.NORMAL,
    )
    # Index within the thread at append time; breaks timestamp ties
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Attachment value object
    attachment_name: Mapped[Optional[str]] = mapped_column(String(255))
    attachment_url: Mapped[Optional[str]] = mapped_column(String(1000))
    attachment_size: Mapped[Optional[str]] = mapped_column(String(32))

    conversation: Mapped[TaskConversation] = relationship(back_populates="messages")

    @property
    def has_attachment(self) -> bool:
        return self.attachment_url is not None
