"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Request fields are plain optional strings: the domain validates them, so a
missing or malformed field yields a stable error code rather than a 422.
"""

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Request model for account signup."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, description="Lowercase, URL-safe account name")
    email: str | None = Field(default=None, description="Email address to verify")
    password: str | None = None
    account_type: str | None = Field(default=None, alias="type", description="Account classification")


class ResendRequest(BaseModel):
    """Request model for resending the verification email."""

    email: str | None = None


class ErrorDetail(BaseModel):
    code: str


class ErrorResponse(BaseModel):
    """Error response carrying a stable signup error code."""

    error: ErrorDetail


class UnavailableResponse(BaseModel):
    """Response model for infrastructure failures."""

    detail: str
