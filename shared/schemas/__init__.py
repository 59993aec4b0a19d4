"""
Shared data schemas for Codivio

This package contains common data schemas used across all microservices.
"""

from .response import success, error_body, current_millis
from .user import (
    UserCreateSchema, UserLoginSchema, UserUpdateSchema, UserResponseSchema,
    LoginResponseSchema, RefreshTokenSchema, UserValidationSchema, UserStatus,
)
from .project import (
    ProjectRole, ProjectStatus, ProjectCreateSchema, ProjectUpdateSchema, ProjectResponseSchema,
    MemberAddSchema, MemberRoleUpdateSchema, ProjectMemberSchema,
)

__all__ = [
    "current_millis",
    "success",
    "error_body",
    "UserCreateSchema",
    "UserLoginSchema",
    "UserUpdateSchema",
    "UserResponseSchema",
    "LoginResponseSchema",
    "RefreshTokenSchema",
    "UserValidationSchema",
    "UserStatus",
    "ProjectRole",
    "ProjectStatus",
    "ProjectCreateSchema",
    "ProjectUpdateSchema",
    "ProjectResponseSchema",
    "MemberAddSchema",
    "MemberRoleUpdateSchema",
    "ProjectMemberSchema",
]

__version__ = "1.0.0"
