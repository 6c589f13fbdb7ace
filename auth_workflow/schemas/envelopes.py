"""
Uniform response envelopes shared by every endpoint.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ApiSuccess(BaseModel):
    """Success envelope returned by workflow operations."""

    success: bool = True
    status_code: int = Field(..., description="HTTP status code")
    message: str = Field(..., description="Human readable outcome")
    data: Optional[Any] = Field(None, description="Operation payload")

    @classmethod
    def ok(cls, message: str, data: Optional[Any] = None) -> "ApiSuccess":
        return cls(status_code=200, message=message, data=data)

    @classmethod
    def created(cls, message: str, data: Optional[Any] = None) -> "ApiSuccess":
        return cls(status_code=201, message=message, data=data)


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope rendered at the HTTP boundary."""

    success: bool = False
    status: str = Field(..., description="Status label, e.g. 'Not Found'")
    status_code: int
    message: str
    errors: Optional[List[FieldError]] = None
    stack: Optional[str] = Field(None, description="Traceback, omitted in production")

    def to_content(self) -> Dict[str, Any]:
        content = self.model_dump()
        if content["errors"] is None:
            content.pop("errors")
        return content
