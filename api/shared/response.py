from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ResponseModel(BaseModel, Generic[T]):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = Field(default=True, description="Whether the request succeeded")
    data: Optional[T] = Field(description="Response data", default=None)
    message: Optional[str] = Field(
        description="Response message", default=None, examples=["Success"]
    )

    @classmethod
    def ok(
        cls, data: Optional[T] = None, message: Optional[str] = None
    ) -> "ResponseModel[T]":
        """Create a successful response."""
        return cls(success=True, data=data, message=message)


class ErrorResponse(BaseModel):
    """Body rendered by the application exception handlers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = Field(default=False)
    message: str = Field(description="Error message")
    error_code: Optional[str] = Field(default=None, description="Error code")
