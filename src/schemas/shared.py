"""Shared base schemas and common models."""

from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(CamelModel):
    """Standard error response schema."""

    error: str
    error_code: Optional[str] = None


class MessageResponse(BaseModel):
    """Standard success response schema."""

    message: str
