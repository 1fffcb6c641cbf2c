import logging
import sys
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from starlette.exceptions import HTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request

from api.features.attachments.exceptions import AttachmentTooLargeError
from api.features.conversation.exceptions import ConversationValidationError
from api.shared.entities.registry import BaseEntity
from api.shared.exceptions import IvyServiceException
from api.shared.response import ErrorResponse
from core.settings import SETTINGS
from di.container import ApplicationContainer as DependencyContainer

# Configure logging
logging.basicConfig(
    level=SETTINGS.APP.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("ivy")


class CustomFastAPI(FastAPI):
    container: DependencyContainer


@asynccontextmanager
async def lifespan(_app: CustomFastAPI):
    logger.info(f"Starting application initialization ({SETTINGS.APP.ENVIRONMENT})...")
    start_time = time.time()

    try:
        logger.info("Initializing database connection...")
        db_start = time.time()
        db_resource = _app.container.infrastructure.database()
        await db_resource.init()
        async with db_resource.engine.begin() as _conn:
            if _conn.dialect.name == "postgresql":
                await _conn.execute(text("SET lock_timeout = '4s'"))
                await _conn.execute(text("SET statement_timeout = '8s'"))
            # Verify database connection
            await _conn.execute(text("SELECT 1"))
            if SETTINGS.DATABASE.AUTO_CREATE_SCHEMA:
                await _conn.run_sync(BaseEntity.metadata.create_all)
                logger.info("Database schema ensured")
        logger.info(
            f"Database connection established in {time.time() - db_start:.2f}s"
        )

        logger.info("Initializing attachment storage...")
        storage_resource = _app.container.infrastructure.storage()
        await storage_resource.init()
        logger.info(f"Attachment storage ready at {storage_resource.root_dir}")

        logger.info(
            f"Application startup completed in {time.time() - start_time:.2f}s"
        )
    except Exception as e:
        logger.exception(f"Failed to initialize application: {str(e)}")
        raise

    yield

    db_resource = _app.container.infrastructure.database()
    if db_resource:
        await db_resource.shutdown()
    storage_resource = _app.container.infrastructure.storage()
    if storage_resource:
        await storage_resource.shutdown()
    logger.info("Application shutdown complete")


def create_fastapi_app() -> CustomFastAPI:
    _app = CustomFastAPI(
        title="Ivy Task Conversation API",
        description="Task conversations between students and counselors",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Initialize dependency container
    _app.container = DependencyContainer()
    _app.container.wire(modules=[sys.modules[__name__]])
    _app.container.init_resources()

    # Add CORS middleware
    _app.add_middleware(
        CORSMiddleware,
        allow_origins=SETTINGS.APP.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include feature routers
    from api.features.conversation.router import router as conversation_router

    _app.include_router(
        conversation_router, prefix=SETTINGS.APP.API_PREFIX, tags=["Conversation"]
    )

    # Serve uploaded attachments
    _app.mount(
        SETTINGS.UPLOADS.UPLOAD_URL_PREFIX,
        StaticFiles(directory=SETTINGS.UPLOADS.UPLOAD_ROOT, check_dir=False),
        name="uploads",
    )

    return _app


app = create_fastapi_app()


def _error(status_code: int, message: str, error_code: str) -> JSONResponse:
    body = ErrorResponse(message=message, error_code=error_code)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


# Health check endpoints
@app.get("/")
async def root():
    return {"message": "API is running!", "status": "ok"}


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/ready")
async def ready():
    return {"status": "ok"}


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return _error(exc.status_code, str(exc.detail), f"HTTP_{exc.status_code}")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error(400, str(exc), "VALIDATION_ERROR")


@app.exception_handler(ConversationValidationError)
async def conversation_validation_handler(
    request: Request, exc: ConversationValidationError
):
    return _error(400, exc.message, exc.error_code)


@app.exception_handler(AttachmentTooLargeError)
async def attachment_too_large_handler(request: Request, exc: AttachmentTooLargeError):
    return _error(413, exc.message, exc.error_code)


@app.exception_handler(IvyServiceException)
async def service_exception_handler(request: Request, exc: IvyServiceException):
    logger.error(f"Unhandled service error on {request.url.path}: {exc.message}")
    return _error(500, exc.message, exc.error_code)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception: {exc}")
    return _error(500, str(exc), "INTERNAL_ERROR")
