"""
Project repository
"""

from typing import List, Optional

from sqlalchemy import select, delete

from shared.utils.repository import BaseRepository
from services.project_service.models.project import Project, ProjectMember


class ProjectRepository(BaseRepository[Project]):
    """Data access for the projects table"""

    model = Project

    async def list_by_owner(self, owner_id: int) -> List[Project]:
        result = await self.session.execute(
            select(Project).where(Project.owner_id == owner_id).order_by(Project.created_at.desc(), Project.id.desc())
        )
        return list(result.scalars().all())

    async def exists_by_owner_and_name(self, owner_id: int, name: str, exclude_id: Optional[int] = None) -> bool:
        query = select(Project.id).where(Project.owner_id == owner_id, Project.name == name)
        if exclude_id is not None:
            query = query.where(Project.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.first() is not None


class ProjectMemberRepository(BaseRepository[ProjectMember]):
    """Data access for the project_members table"""

    model = ProjectMember

    async def get_member(self, project_id: int, user_id: int) -> Optional[ProjectMember]:
        result = await self.session.execute(
            select(ProjectMember).where(
                ProjectMember.project_id == project_id,
                ProjectMember.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_project(self, project_id: int) -> List[ProjectMember]:
        result = await self.session.execute(
            select(ProjectMember)
            .where(ProjectMember.project_id == project_id)
            .order_by(ProjectMember.joined_at, ProjectMember.id)
        )
        return list(result.scalars().all())

    async def delete_by_project(self, project_id: int) -> int:
        """Bulk-delete every membership of a project, returning the row count"""
        result = await self.session.execute(
            delete(ProjectMember).where(ProjectMember.project_id == project_id)
        )
        return result.rowcount
