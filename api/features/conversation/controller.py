"""Controller for the Conversation feature."""
import logging
from typing import Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from api.features.conversation.dtos import ConversationDTO, EmptyConversationDTO
from api.features.conversation.models import ConversationModel
from api.features.conversation.service import ConversationService
from api.features.conversation.validators import UploadedFile

logger = logging.getLogger(__name__)


class ConversationController:
    """Controller translating conversation service results into DTOs."""

    def __init__(self, conversation_service: ConversationService):
        self.conversation_service = conversation_service

    async def get_conversation(
        self,
        *,
        selection_id: Optional[str],
        task_title: Optional[str],
        task_page: Optional[str],
        db_session: AsyncSession,
    ) -> Union[ConversationDTO, EmptyConversationDTO]:
        result = await self.conversation_service.get_or_empty(
            selection_id, task_title, task_page, db_session=db_session
        )
        if isinstance(result, ConversationModel):
            return ConversationDTO.from_model(result)
        return EmptyConversationDTO()

    async def post_message(
        self,
        *,
        student_ivy_service_id: Optional[str],
        selection_id: Optional[str],
        task_title: Optional[str],
        task_page: Optional[str],
        sender: Optional[str],
        sender_name: Optional[str],
        text: Optional[str],
        message_type: Optional[str],
        file: Optional[UploadedFile],
        db_session: AsyncSession,
    ) -> ConversationDTO:
        conversation = await self.conversation_service.post_message(
            student_ivy_service_id=student_ivy_service_id,
            selection_id=selection_id,
            task_title=task_title,
            task_page=task_page,
            sender=sender,
            sender_name=sender_name,
            text=text,
            message_type=message_type,
            file=file,
            db_session=db_session,
        )
        logger.debug(
            f"Conversation {conversation.id} now has {len(conversation.messages)} messages"
        )
        return ConversationDTO.from_model(conversation)
