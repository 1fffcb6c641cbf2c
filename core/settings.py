from functools import lru_cache
from typing import List, Literal

from pydantic import BaseModel, Field, PostgresDsn, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CustomSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class AppSettings(CustomSettings):
    ENVIRONMENT: Literal["local", "dev", "prod"] = Field(default="local")
    LOG_LEVEL: str = Field(default="INFO")
    API_PREFIX: str = Field(default="/api/task")
    CORS_ORIGINS: List[str] = Field(
        default=[
            "*",
            "http://localhost",
            "http://localhost:3000",
            "http://localhost:5000",
        ]
    )


class PgDbSettings(CustomSettings):
    POSTGRES_ENGINE: str = Field(default="postgresql+asyncpg")
    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: SecretStr = Field(default="postgres")
    POSTGRES_DB: str = Field(default="ivy")
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)
    DATABASE_URL: PostgresDsn | str = Field(default="")
    # Local development and tests; production schemas come from Alembic
    AUTO_CREATE_SCHEMA: bool = Field(default=False)

    @model_validator(mode="before")
    @classmethod
    def validate_postgres_dsn(cls, data: dict):
        if isinstance(data, dict) and not data.get("DATABASE_URL"):
            _built_uri = PostgresDsn.build(
                scheme=data.get("POSTGRES_ENGINE", "postgresql+asyncpg"),
                username=data.get("POSTGRES_USER", "postgres"),
                password=data.get("POSTGRES_PASSWORD", "postgres"),
                host=data.get("POSTGRES_HOST", "localhost"),
                port=int(data.get("POSTGRES_PORT", 5432)),
                path=data.get("POSTGRES_DB", "ivy"),
            ).unicode_string()
            data["DATABASE_URL"] = _built_uri
        return data


class UploadSettings(CustomSettings):
    """Configuration for uploaded attachments.

    Set via env vars:
    - UPLOAD_ROOT: directory files are written under
    - UPLOAD_URL_PREFIX: public path the directory is served from
    - MAX_UPLOAD_BYTES: per-file ceiling for multipart uploads
    - CONVERSATION_SUBFOLDER: directory for task conversation attachments
    """

    UPLOAD_ROOT: str = Field(default="uploads")
    UPLOAD_URL_PREFIX: str = Field(default="/uploads")
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024)
    CONVERSATION_SUBFOLDER: str = Field(default="task-conversations")


class Settings(BaseModel):
    APP: AppSettings = Field(default_factory=AppSettings)
    DATABASE: PgDbSettings = Field(default_factory=PgDbSettings)
    UPLOADS: UploadSettings = Field(default_factory=UploadSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()


SETTINGS = get_settings()
