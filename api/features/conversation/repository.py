"""Repository for task conversation persistence.

Uniqueness of a thread per task is left to the two partial unique indexes on
``task_conversation``; nothing here pre-checks before inserting.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from api.features.conversation.entities.task_conversation import (
    TaskConversation,
    TaskMessage,
)
from api.features.conversation.exceptions import ConversationPersistenceError
from api.features.conversation.models import TaskKey
from api.shared.base import BaseRepository
from api.shared.entities.base import utcnow


class TaskConversationRepository(BaseRepository[TaskConversation]):
    """Repository for task conversation threads and their messages."""

    model = TaskConversation

    async def find_thread(self, key: TaskKey) -> Optional[TaskConversation]:
        """Find the thread for a task; a page-less key only matches page-less threads."""
        return await self.get_one_by_fields(
            selection_id=key.selection_id,
            task_title=key.task_title,
            task_page=key.task_page,
        )

    def build_thread(self, owner_id: str, key: TaskKey) -> TaskConversation:
        """Construct an unsaved thread for ``key``."""
        return TaskConversation(
            student_ivy_service_id=owner_id,
            selection_id=key.selection_id,
            task_title=key.task_title,
            task_page=key.task_page,
            messages=[],
        )

    async def create_thread(self, owner_id: str, key: TaskKey) -> TaskConversation:
        """Insert a new thread; fails if the key is already taken."""
        thread = self.build_thread(owner_id, key)
        try:
            thread = await self.create(thread)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise ConversationPersistenceError(
                str(e), {"selection_id": key.selection_id, "task_title": key.task_title}
            ) from e
        return thread

    async def append_and_save(
        self, thread: TaskConversation, message: TaskMessage
    ) -> TaskConversation:
        """Append ``message`` and persist the thread in one transaction."""
        details = {"selection_id": thread.selection_id, "task_title": thread.task_title}
        message.position = len(thread.messages)
        thread.messages.append(message)
        thread.updated_at = utcnow()
        try:
            await self.update(thread)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise ConversationPersistenceError(str(e), details) from e
        return thread
