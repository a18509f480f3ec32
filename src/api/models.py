"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Field-level rules (email shape, password length, confirmation) are enforced
by the domain service so every failure comes back in the SignupResponse
shape with the offending field named.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field


class SignupRequest(BaseModel):
    """Request model for account signup."""

    email: str = Field(..., description="Email address (case-sensitive, stored as given)")
    password: str = Field(..., description="Password (min 8 characters)")
    password_confirmation: str = Field(
        ...,
        validation_alias=AliasChoices("password_confirmation", "confirmPassword"),
        description="Must equal password",
    )


class AccountResponse(BaseModel):
    """Public account fields. The password hash is never serialized."""

    id: int
    email: str
    created_at: datetime


class SignupResponse(BaseModel):
    """Response model for every signup outcome."""

    success: bool
    message: str
    account: AccountResponse | None = None
    field: str | None = Field(default=None, description="Input field that failed validation")


class EmailAvailabilityResponse(BaseModel):
    """Response model for the email availability check."""

    available: bool
    message: str


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
