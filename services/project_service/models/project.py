"""
Project Models
ORM definitions for projects and their members
"""

from datetime import datetime, timezone

from sqlalchemy import Column, BigInteger, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint

from shared.utils.database import Base

ID_TYPE = BigInteger().with_variant(Integer, "sqlite")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uk_owner_project_name"),
    )

    id = Column(ID_TYPE, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    language = Column(String(20), nullable=False, default="javascript")
    owner_id = Column(BigInteger, nullable=False, index=True)
    status = Column(Integer, nullable=False, default=1)  # 0 deleted, 1 active
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Project id={self.id} name={self.name!r} owner_id={self.owner_id}>"


class ProjectMember(Base):
    __tablename__ = "project_members"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uk_project_user"),
    )

    id = Column(ID_TYPE, primary_key=True, autoincrement=True)
    project_id = Column(ID_TYPE, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(BigInteger, nullable=False, index=True)
    role = Column(String(20), nullable=False)  # OWNER, EDITOR, VIEWER
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<ProjectMember project_id={self.project_id} user_id={self.user_id} role={self.role}>"
