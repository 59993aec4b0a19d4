from .project_repository import ProjectRepository, ProjectMemberRepository

__all__ = ["ProjectRepository", "ProjectMemberRepository"]
