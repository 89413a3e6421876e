"""
Pydantic schemas for users and authentication.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional


class UserRegisterRequest(BaseModel):
    """Request schema for self-registration (never creates an admin)."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(
        ...,
        min_length=5,
        max_length=72,  # bcrypt limit
    )
    first_name: str = Field(..., min_length=1, max_length=30, alias="firstName")
    last_name: str = Field(..., min_length=1, max_length=30, alias="lastName")
    email: EmailStr


class UserCreateRequest(UserRegisterRequest):
    """Request schema for admin-created users."""
    is_admin: bool = Field(False, alias="isAdmin")


class UserLoginRequest(BaseModel):
    """Request schema for user login."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=1)


class UserUpdateRequest(BaseModel):
    """
    Partial user update. The username cannot be changed; `isAdmin` may only
    be set by an admin.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    password: Optional[str] = Field(None, min_length=5, max_length=72)
    first_name: Optional[str] = Field(None, min_length=1, max_length=30, alias="firstName")
    last_name: Optional[str] = Field(None, min_length=1, max_length=30, alias="lastName")
    email: Optional[EmailStr] = None
    is_admin: Optional[bool] = Field(None, alias="isAdmin")

    @field_validator("password", "first_name", "last_name", "email", "is_admin")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """User profile response (no password)."""
    model_config = ConfigDict(populate_by_name=True)

    username: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str
    is_admin: bool = Field(..., alias="isAdmin")


class UserCreateResponse(BaseModel):
    """Admin-created user plus a token for it."""
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
