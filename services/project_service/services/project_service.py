"""
Project Service
Project lifecycle, membership management and role-based access checks
"""

from typing import List, Tuple

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.schemas.project import (
    ProjectCreateSchema, ProjectUpdateSchema, MemberAddSchema, ProjectRole, ProjectStatus,
)
from shared.utils.exceptions import BusinessException, ErrorCode
from services.project_service.models.project import Project, ProjectMember
from services.project_service.repositories.project_repository import ProjectRepository, ProjectMemberRepository
from services.project_service.utils.user_client import UserServiceClient

logger = structlog.get_logger(__name__)


class ProjectService:
    """Service for projects and their members"""

    @staticmethod
    async def _get_project(db: AsyncSession, project_id: int) -> Project:
        project = await ProjectRepository(db).get_by_id(project_id)
        if project is None:
            raise BusinessException(ErrorCode.PROJECT_NOT_FOUND)
        return project

    @staticmethod
    async def get_role(db: AsyncSession, project_id: int, user_id: int) -> ProjectRole:
        """
        Return the caller's role in a project

        Raises:
            BusinessException: PROJECT_ACCESS_DENIED if the caller is not a member
        """
        member = await ProjectMemberRepository(db).get_member(project_id, user_id)
        if member is None:
            logger.warning("Project access denied", project_id=project_id, user_id=user_id)
            raise BusinessException(ErrorCode.PROJECT_ACCESS_DENIED)
        return ProjectRole(member.role)

    @staticmethod
    async def _require_view(db: AsyncSession, project_id: int, user_id: int) -> Tuple[Project, ProjectRole]:
        project = await ProjectService._get_project(db, project_id)
        role = await ProjectService.get_role(db, project_id, user_id)
        return project, role

    @staticmethod
    async def _require_edit(db: AsyncSession, project_id: int, user_id: int) -> Project:
        project, role = await ProjectService._require_view(db, project_id, user_id)
        if not role.can_edit_content:
            raise BusinessException(ErrorCode.PROJECT_ACCESS_DENIED)
        return project

    @staticmethod
    async def _require_owner(db: AsyncSession, project_id: int, user_id: int) -> Project:
        project, role = await ProjectService._require_view(db, project_id, user_id)
        if not role.can_manage_project:
            raise BusinessException(ErrorCode.PROJECT_ACCESS_DENIED)
        return project

    @staticmethod
    async def create_project(db: AsyncSession, owner_id: int, data: ProjectCreateSchema) -> Project:
        """Create a project and its OWNER membership in one transaction"""
        projects = ProjectRepository(db)
        if await projects.exists_by_owner_and_name(owner_id, data.name):
            raise BusinessException(ErrorCode.PROJECT_NAME_ALREADY_EXISTS)

        project = Project(
            name=data.name,
            description=data.description,
            language=data.language,
            owner_id=owner_id,
            status=ProjectStatus.ACTIVE.value,
        )

        try:
            await projects.add(project)
            db.add(ProjectMember(project_id=project.id, user_id=owner_id, role=ProjectRole.OWNER.value))
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise BusinessException(ErrorCode.PROJECT_NAME_ALREADY_EXISTS)

        logger.info("Project created", project_id=project.id, owner_id=owner_id)
        return project

    @staticmethod
    async def list_projects(db: AsyncSession, owner_id: int) -> List[Project]:
        return await ProjectRepository(db).list_by_owner(owner_id)

    @staticmethod
    async def get_project(db: AsyncSession, project_id: int, user_id: int) -> Project:
        project, _ = await ProjectService._require_view(db, project_id, user_id)
        return project

    @staticmethod
    async def update_project(db: AsyncSession, project_id: int, user_id: int, data: ProjectUpdateSchema) -> Project:
        """Partial update by an OWNER or EDITOR; an empty update is a no-op"""
        project = await ProjectService._require_edit(db, project_id, user_id)
        if not data.has_updates():
            return project

        if data.name is not None and data.name != project.name:
            if await ProjectRepository(db).exists_by_owner_and_name(project.owner_id, data.name, exclude_id=project.id):
                raise BusinessException(ErrorCode.PROJECT_NAME_ALREADY_EXISTS)
            project.name = data.name
        if data.description is not None:
            project.description = data.description
        if data.language is not None:
            project.language = data.language

        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise BusinessException(ErrorCode.PROJECT_NAME_ALREADY_EXISTS)

        await db.refresh(project)
        logger.info("Project updated", project_id=project_id, user_id=user_id)
        return project

    @staticmethod
    async def delete_project(db: AsyncSession, project_id: int, user_id: int) -> None:
        """Delete memberships, then the project itself"""
        project = await ProjectService._require_owner(db, project_id, user_id)

        removed = await ProjectMemberRepository(db).delete_by_project(project_id)
        await ProjectRepository(db).delete(project)
        await db.commit()

        logger.info("Project deleted", project_id=project_id, members_removed=removed)

    @staticmethod
    async def list_members(db: AsyncSession, project_id: int, user_id: int) -> List[ProjectMember]:
        await ProjectService._require_view(db, project_id, user_id)
        return await ProjectMemberRepository(db).list_by_project(project_id)

    @staticmethod
    async def add_member(
        db: AsyncSession,
        project_id: int,
        user_id: int,
        data: MemberAddSchema,
        user_client: UserServiceClient,
    ) -> ProjectMember:
        """Add a user as EDITOR or VIEWER after confirming the account exists"""
        await ProjectService._require_owner(db, project_id, user_id)

        if data.role is ProjectRole.OWNER:
            raise BusinessException(ErrorCode.CANNOT_ADD_OWNER_ROLE)

        members = ProjectMemberRepository(db)
        if await members.get_member(project_id, data.user_id) is not None:
            raise BusinessException(ErrorCode.MEMBER_ALREADY_EXISTS)

        if await user_client.get_user(data.user_id) is None:
            raise BusinessException(ErrorCode.USER_NOT_FOUND)

        member = ProjectMember(project_id=project_id, user_id=data.user_id, role=data.role.value)
        try:
            await members.add(member)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise BusinessException(ErrorCode.MEMBER_ALREADY_EXISTS)

        logger.info("Project member added", project_id=project_id, member_id=data.user_id, role=data.role.value)
        return member

    @staticmethod
    async def update_member_role(
        db: AsyncSession, project_id: int, user_id: int, member_user_id: int, role: ProjectRole
    ) -> ProjectMember:
        await ProjectService._require_owner(db, project_id, user_id)

        if role is ProjectRole.OWNER:
            raise BusinessException(ErrorCode.CANNOT_ADD_OWNER_ROLE)

        member = await ProjectMemberRepository(db).get_member(project_id, member_user_id)
        if member is None:
            raise BusinessException(ErrorCode.PROJECT_MEMBER_NOT_FOUND)
        if member.role == ProjectRole.OWNER.value:
            raise BusinessException(ErrorCode.CANNOT_MODIFY_OWNER_ROLE)

        member.role = role.value
        await db.commit()

        logger.info("Project member role changed", project_id=project_id, member_id=member_user_id, role=role.value)
        return member

    @staticmethod
    async def remove_member(db: AsyncSession, project_id: int, user_id: int, member_user_id: int) -> None:
        await ProjectService._require_owner(db, project_id, user_id)

        members = ProjectMemberRepository(db)
        member = await members.get_member(project_id, member_user_id)
        if member is None:
            raise BusinessException(ErrorCode.PROJECT_MEMBER_NOT_FOUND)
        if member.role == ProjectRole.OWNER.value:
            raise BusinessException(ErrorCode.CANNOT_REMOVE_OWNER)

        await members.delete(member)
        await db.commit()

        logger.info("Project member removed", project_id=project_id, member_id=member_user_id)
