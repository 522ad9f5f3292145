"""
Base models for API requests and responses.
"""
from typing import Optional, Any, Dict, List, TypeVar, Generic
from pydantic import BaseModel, Field, ConfigDict

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class APIResponse(BaseSchema, Generic[T]):
    """Standard API response wrapper."""
    success: bool = Field(description="Operation success flag")
    data: Optional[T] = Field(None, description="Response data")
    message: Optional[str] = Field(None, description="Response message")
    errors: Optional[List[Dict[str, Any]]] = Field(None, description="Error details")

    @classmethod
    def success_response(cls, data: Optional[T] = None, message: Optional[str] = None) -> "APIResponse[T]":
        """Create a success response."""
        return cls(success=True, data=data, message=message)


def error_response(
    message: str,
    errors: Optional[list] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Format an error response body."""
    return {
        "success": False,
        "message": message,
        "errors": errors or [],
        "data": None,
        "metadata": metadata or {}
    }
