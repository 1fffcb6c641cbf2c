"""Service layer for task conversations."""
from typing import Optional, Union

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.attachments.exceptions import AttachmentStorageError
from api.features.attachments.models import StoredFile
from api.features.attachments.service import AttachmentService
from api.features.conversation.models import (
    AttachmentModel,
    ConversationModel,
    EmptyConversationModel,
)
from api.features.conversation.repository import TaskConversationRepository
from api.features.conversation.validators import MessageValidator, UploadedFile

logger = structlog.get_logger("ivy.conversation.service")


class ConversationService:
    """Looks up task threads and appends messages to them."""

    def __init__(
        self,
        attachment_service: AttachmentService,
        attachment_subfolder: str = "task-conversations",
    ):
        self.attachment_service = attachment_service
        self.attachment_subfolder = attachment_subfolder

    async def get_or_empty(
        self,
        selection_id: Optional[str],
        task_title: Optional[str],
        task_page: Optional[str] = None,
        *,
        db_session: AsyncSession,
    ) -> Union[ConversationModel, EmptyConversationModel]:
        """Return the thread for a task, or an unsaved empty result."""
        key = MessageValidator.validate_key(selection_id, task_title, task_page)
        repository = TaskConversationRepository(db_session)
        thread = await repository.find_thread(key)
        if thread is None:
            return EmptyConversationModel()
        return ConversationModel.from_entity(thread)

    async def post_message(
        self,
        *,
        student_ivy_service_id: Optional[str],
        selection_id: Optional[str],
        task_title: Optional[str],
        task_page: Optional[str] = None,
        sender: Optional[str],
        sender_name: Optional[str],
        text: Optional[str] = None,
        message_type: Optional[str] = None,
        file: Optional[UploadedFile] = None,
        db_session: AsyncSession,
    ) -> ConversationModel:
        """Append a message to the task's thread, creating the thread on first post."""
        post = MessageValidator.validate_post(
            student_ivy_service_id=student_ivy_service_id,
            selection_id=selection_id,
            task_title=task_title,
            task_page=task_page,
            sender=sender,
            sender_name=sender_name,
            text=text,
            message_type=message_type,
            has_file=file is not None,
        )

        repository = TaskConversationRepository(db_session)
        thread = await repository.find_thread(post.key)
        is_new = thread is None
        if is_new:
            thread = repository.build_thread(post.student_ivy_service_id, post.key)

        stored: Optional[StoredFile] = None
        attachment: Optional[AttachmentModel] = None
        if file is not None:
            stored = await self.attachment_service.save(
                file.content,
                file.filename,
                file.size,
                subfolder=self.attachment_subfolder,
            )
            attachment = AttachmentModel(
                name=file.filename, url=stored.url, size=stored.size
            )

        try:
            thread = await repository.append_and_save(thread, post.to_entity(attachment))
        except Exception:
            if stored is not None:
                await self._discard_orphan(stored)
            raise

        logger.info(
            "task_message_appended",
            conversation_id=thread.id,
            created=is_new,
            sender=post.sender.value,
            has_attachment=attachment is not None,
            message_count=len(thread.messages),
        )
        return ConversationModel.from_entity(thread)

    async def _discard_orphan(self, stored: StoredFile) -> None:
        try:
            await self.attachment_service.discard(stored)
        except AttachmentStorageError as e:
            logger.warning(
                "orphaned_attachment", object_name=stored.object_name, error=str(e)
            )
