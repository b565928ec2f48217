"""Pydantic request/response models for the HTTP Client Manager API."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..errors import ErrorCategory


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(..., description="Service health status")
    version: str = Field(..., description="Service version")
    uptime: str = Field(..., description="Service uptime in human readable format")
    timestamp: datetime = Field(..., description="Current timestamp")
    services: int = Field(0, description="Number of registered service apis")


class ServiceSummary(BaseModel):
    """Service api listing entry."""

    id: str = Field(..., description="Service api identifier")
    title: str = Field(..., description="Human readable service api name")
    provider: str = Field(..., description="Provider of the service api")
    base_url: Optional[str] = Field(None, description="Service API base url")


class ExecuteRequest(BaseModel):
    """Request model for executing an operation."""

    params: Dict[str, Any] = Field(default_factory=dict, description="Operation parameters")


class CommandResponse(BaseModel):
    """Response model for an executed operation."""

    service_api: str = Field(..., description="Service api identifier")
    operation: str = Field(..., description="Operation name")
    status_code: int = Field(..., description="Remote response status code")
    data: Any = Field(None, description="Decoded remote response body")


class SavedRequestInput(BaseModel):
    """Request model for creating or updating a saved request.

    Parameter values may be given as operator text; they are converted
    using the declared parameter types unless ``coerce`` is disabled.
    """

    label: str = Field(..., min_length=1, max_length=255, description="Human readable label")
    service_api: str = Field(..., description="Service api identifier")
    command_name: str = Field(..., description="Operation name")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Operation parameters")
    coerce: bool = Field(True, description="Convert text input using declared parameter types")


class SavedRequestResponse(BaseModel):
    """Saved request with the outcome of the last save."""

    id: str
    label: str
    service_api: str
    command_name: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    status: Optional[str] = Field(None, description="new or updated after a save")


class ErrorResponse(BaseModel):
    """Error response model with actionable information."""

    error_category: ErrorCategory = Field(..., description="Error category for classification")
    error_code: str = Field(..., description="Specific error code")
    user_message: str = Field(..., description="User-friendly error message")
    technical_details: Dict[str, Any] = Field(
        default_factory=dict, description="Technical error details"
    )
    suggested_actions: List[str] = Field(
        default_factory=list, description="Suggested actions to fix the error"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Error timestamp"
    )
