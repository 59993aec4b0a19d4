"""
Project data schemas for Codivio

Pydantic models for projects and project membership.
"""

from typing import Optional
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProjectRole(str, Enum):
    """Project member role, in decreasing order of privilege"""
    OWNER = "OWNER"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"

    @property
    def can_manage_project(self) -> bool:
        """Manage membership and delete the project"""
        return self is ProjectRole.OWNER

    @property
    def can_edit_content(self) -> bool:
        return self in (ProjectRole.OWNER, ProjectRole.EDITOR)


class ProjectStatus(int, Enum):
    """Project status enumeration"""
    DELETED = 0
    ACTIVE = 1


class ProjectCreateSchema(BaseModel):
    """Schema for creating a project"""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    language: str = Field("javascript", max_length=20)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Project name must not be blank')
        return v


class ProjectUpdateSchema(BaseModel):
    """Schema for partial project updates"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    language: Optional[str] = Field(None, max_length=20)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError('Project name must not be blank')
        return v

    def has_updates(self) -> bool:
        return any(value is not None for value in (self.name, self.description, self.language))


class ProjectResponseSchema(BaseModel):
    """Schema for project API responses"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    language: Optional[str] = None
    status: int
    owner_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MemberAddSchema(BaseModel):
    """Schema for adding a member to a project"""
    user_id: int = Field(..., gt=0)
    role: ProjectRole


class MemberRoleUpdateSchema(BaseModel):
    """Schema for changing a member's role"""
    role: ProjectRole


class ProjectMemberSchema(BaseModel):
    """Schema for project member API responses"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    user_id: int
    role: ProjectRole
    joined_at: Optional[datetime] = None
