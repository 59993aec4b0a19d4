"""
User data schemas for Codivio

Pydantic models for user data validation and serialization.
"""

from typing import Optional
from datetime import datetime
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


EMAIL_MAX_LENGTH = 100  # users.email column width


def check_email_length(email: str) -> str:
    if len(email) > EMAIL_MAX_LENGTH:
        raise ValueError(f'Email must be at most {EMAIL_MAX_LENGTH} characters')
    return email


class UserStatus(IntEnum):
    """User status enumeration"""
    DISABLED = 0
    ACTIVE = 1


class UserCreateSchema(BaseModel):
    """Schema for registering a new user"""
    username: str = Field(..., min_length=3, max_length=50, pattern=r'^[A-Za-z0-9_]+$')
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=20)
    confirm_password: str = Field(..., min_length=6, max_length=20)
    nickname: Optional[str] = Field(None, max_length=50)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return check_email_length(v).lower()


class UserLoginSchema(BaseModel):
    """Schema for user login, by username or email"""
    login_id: str = Field(..., min_length=3, max_length=EMAIL_MAX_LENGTH)
    password: str = Field(..., min_length=6, max_length=20)

    @field_validator('login_id')
    @classmethod
    def strip_login_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Login id must not be blank')
        return v


class RefreshTokenSchema(BaseModel):
    """Schema for exchanging a refresh token"""
    refresh_token: str = Field(..., min_length=1)


class UserUpdateSchema(BaseModel):
    """
    Schema for partial profile updates

    Every field is optional; only the provided ones are applied.
    """
    email: Optional[EmailStr] = None
    nickname: Optional[str] = Field(None, max_length=50)
    avatar_url: Optional[str] = Field(None, max_length=500)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return check_email_length(v).lower() if v else v


class UserResponseSchema(BaseModel):
    """Schema for user API responses, never carries the password hash"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    nickname: Optional[str] = None
    avatar_url: Optional[str] = None
    status: int
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoginResponseSchema(BaseModel):
    """Schema returned by login and token refresh"""
    token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user_info: UserResponseSchema


class UserValidationSchema(BaseModel):
    """Result of a service-to-service user lookup"""
    user_id: Optional[int] = None
    username: Optional[str] = None
    email: Optional[str] = None
    exists: bool = False

    @classmethod
    def found(cls, user_id: int, username: str, email: str) -> "UserValidationSchema":
        return cls(user_id=user_id, username=username, email=email, exists=True)

    @classmethod
    def not_found(cls) -> "UserValidationSchema":
        return cls()

    @model_validator(mode='after')
    def check_consistency(self):
        if self.exists and self.user_id is None:
            raise ValueError('An existing user must carry its id')
        return self
