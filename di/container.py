from __future__ import annotations

from dependency_injector import containers, providers

from core.settings import SETTINGS
from infra.resources import DatabaseResource, LocalStorageResource


class InfrastructureContainer(containers.DeclarativeContainer):
    # Database
    database = providers.Resource(
        DatabaseResource,
        database_url=str(SETTINGS.DATABASE.DATABASE_URL),
    )

    # Uploaded files
    storage = providers.Resource(
        LocalStorageResource,
        root_dir=SETTINGS.UPLOADS.UPLOAD_ROOT,
        url_prefix=SETTINGS.UPLOADS.UPLOAD_URL_PREFIX,
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Application services - depends on infrastructure."""

    infrastructure = providers.DependenciesContainer()

    # Services
    attachment_service = providers.Factory(
        "api.features.attachments.service.AttachmentService",
        storage_client=infrastructure.storage,
    )

    conversation_service = providers.Factory(
        "api.features.conversation.service.ConversationService",
        attachment_service=attachment_service,
        attachment_subfolder=SETTINGS.UPLOADS.CONVERSATION_SUBFOLDER,
    )


class ControllerContainer(containers.DeclarativeContainer):
    """Controller-specific dependencies."""

    services = providers.DependenciesContainer()

    # Controllers
    conversation_controller = providers.Factory(
        "api.features.conversation.controller.ConversationController",
        conversation_service=services.conversation_service,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Main application container composing all sub-containers."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "api.main",
            "api.shared.db",
            "api.features.conversation.router",
        ]
    )

    infrastructure = providers.Container(InfrastructureContainer)
    services = providers.Container(ServiceContainer, infrastructure=infrastructure)
    controllers = providers.Container(ControllerContainer, services=services)
