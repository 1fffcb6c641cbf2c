"""Router for the Conversation feature."""
import logging
from typing import Optional, Union

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Form, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.conversation.controller import ConversationController
from api.features.conversation.dtos import ConversationDTO, EmptyConversationDTO
from api.features.conversation.exceptions import ConversationValidationError
from api.features.conversation.validators import UploadedFile, message_file_upload
from api.shared.db import get_db_session
from api.shared.dtos import HealthCheckResponse
from api.shared.exceptions import IvyServiceException
from api.shared.response import ResponseModel
from di.container import ApplicationContainer as DependencyContainer

router = APIRouter()
logger = logging.getLogger("ivy.conversation.router")


@router.get("/conversation/health", response_model=ResponseModel[HealthCheckResponse])
async def health_check():
    """Health check endpoint for the conversation service."""
    return ResponseModel.ok(
        data=HealthCheckResponse(
            status="healthy", dependencies={"storage": "ok", "database": "ok"}
        ),
        message="Conversation service is healthy",
    )


@router.get(
    "/conversation",
    response_model=ResponseModel[Union[ConversationDTO, EmptyConversationDTO]],
    response_model_exclude_none=True,
)
@inject
async def get_task_conversation(
    selection_id: Optional[str] = Query(None, alias="selectionId"),
    task_title: Optional[str] = Query(None, alias="taskTitle"),
    task_page: Optional[str] = Query(None, alias="taskPage"),
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Fetch the conversation for a task; a task without one yields no messages."""
    try:
        result = await controller.get_conversation(
            selection_id=selection_id,
            task_title=task_title,
            task_page=task_page,
            db_session=db_session,
        )
        return ResponseModel.ok(data=result)
    except ConversationValidationError:
        raise
    except IvyServiceException:
        logger.exception("Error fetching task conversation")
        raise
    except Exception as e:
        logger.exception("Error fetching task conversation")
        raise HTTPException(status_code=500, detail=str(e))


@router.post(
    "/conversation/message",
    response_model=ResponseModel[ConversationDTO],
    response_model_exclude_none=True,
)
@inject
async def add_task_message(
    student_ivy_service_id: Optional[str] = Form(None, alias="studentIvyServiceId"),
    selection_id: Optional[str] = Form(None, alias="selectionId"),
    task_title: Optional[str] = Form(None, alias="taskTitle"),
    task_page: Optional[str] = Form(None, alias="taskPage"),
    sender: Optional[str] = Form(None),
    sender_name: Optional[str] = Form(None, alias="senderName"),
    text: Optional[str] = Form(None),
    message_type: Optional[str] = Form(None, alias="messageType"),
    file: Optional[UploadedFile] = Depends(message_file_upload),
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Append a message, with an optional file, to a task conversation."""
    try:
        result = await controller.post_message(
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
        return ResponseModel.ok(data=result)
    except ConversationValidationError:
        raise
    except IvyServiceException:
        logger.exception("Error adding task message")
        raise
    except Exception as e:
        logger.exception("Error adding task message")
        raise HTTPException(status_code=500, detail=str(e))
