"""Models for the Attachments feature."""
from pydantic import BaseModel, Field


class StoredFile(BaseModel):
    """Result of writing one uploaded file."""

    url: str = Field(description="Public path the file is served from")
    size: str = Field(description="Human readable size label")
    object_name: str = Field(description="Storage key relative to the upload root")
