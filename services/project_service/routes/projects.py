"""
Project Routes
Project CRUD and member management
"""

from fastapi import APIRouter, status

from shared.schemas.project import (
    ProjectCreateSchema, ProjectUpdateSchema, ProjectResponseSchema,
    MemberAddSchema, MemberRoleUpdateSchema, ProjectMemberSchema,
)
from shared.schemas.response import success
from services.project_service.services.project_service import ProjectService
from services.project_service.utils.dependencies import DatabaseDep, CurrentUserId, UserClientDep

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(data: ProjectCreateSchema, user_id: CurrentUserId, db: DatabaseDep):
    """Create a project owned by the caller"""
    project = await ProjectService.create_project(db, user_id, data)
    return success(ProjectResponseSchema.model_validate(project), "Project created")


@router.get("")
async def list_projects(user_id: CurrentUserId, db: DatabaseDep):
    """List the projects owned by the caller"""
    projects = await ProjectService.list_projects(db, user_id)
    return success([ProjectResponseSchema.model_validate(p) for p in projects])


@router.get("/{project_id}")
async def get_project(project_id: int, user_id: CurrentUserId, db: DatabaseDep):
    project = await ProjectService.get_project(db, project_id, user_id)
    return success(ProjectResponseSchema.model_validate(project))


@router.put("/{project_id}")
async def update_project(project_id: int, data: ProjectUpdateSchema, user_id: CurrentUserId, db: DatabaseDep):
    project = await ProjectService.update_project(db, project_id, user_id, data)
    return success(ProjectResponseSchema.model_validate(project), "Project updated")


@router.delete("/{project_id}")
async def delete_project(project_id: int, user_id: CurrentUserId, db: DatabaseDep):
    await ProjectService.delete_project(db, project_id, user_id)
    return success(message="Project deleted")


@router.get("/{project_id}/members")
async def list_members(project_id: int, user_id: CurrentUserId, db: DatabaseDep):
    members = await ProjectService.list_members(db, project_id, user_id)
    return success([ProjectMemberSchema.model_validate(m) for m in members])


@router.post("/{project_id}/members", status_code=status.HTTP_201_CREATED)
async def add_member(
    project_id: int,
    data: MemberAddSchema,
    user_id: CurrentUserId,
    db: DatabaseDep,
    user_client: UserClientDep,
):
    """Add a member; only the project owner may do this"""
    member = await ProjectService.add_member(db, project_id, user_id, data, user_client)
    return success(ProjectMemberSchema.model_validate(member), "Member added")


@router.put("/{project_id}/members/{member_user_id}")
async def update_member_role(
    project_id: int,
    member_user_id: int,
    data: MemberRoleUpdateSchema,
    user_id: CurrentUserId,
    db: DatabaseDep,
):
    member = await ProjectService.update_member_role(db, project_id, user_id, member_user_id, data.role)
    return success(ProjectMemberSchema.model_validate(member), "Member role updated")


@router.delete("/{project_id}/members/{member_user_id}")
async def remove_member(project_id: int, member_user_id: int, user_id: CurrentUserId, db: DatabaseDep):
    await ProjectService.remove_member(db, project_id, user_id, member_user_id)
    return success(message="Member removed")
