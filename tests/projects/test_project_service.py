"""
Project Service Tests
Ownership invariants and role-based access
"""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

import services.project_service.models  # noqa: F401
from shared.schemas.project import (
    ProjectCreateSchema, ProjectUpdateSchema, MemberAddSchema, ProjectRole,
)
from shared.schemas.user import UserValidationSchema
from shared.utils.database import DatabaseManager
from shared.utils.exceptions import BusinessException, ErrorCode
from services.project_service.services.project_service import ProjectService

OWNER_ID = 1
EDITOR_ID = 2
VIEWER_ID = 3
OUTSIDER_ID = 4


@pytest_asyncio.fixture
async def db():
    manager = DatabaseManager("sqlite+aiosqlite://")
    manager.initialize()
    await manager.create_tables()
    async with manager.get_session() as session:
        yield session
    await manager.close()


@pytest.fixture
def user_client():
    client = AsyncMock()
    client.get_user.side_effect = lambda user_id: UserValidationSchema.found(
        user_id, f"user{user_id}", f"user{user_id}@example.com"
    )
    return client


@pytest_asyncio.fixture
async def project(db, user_client):
    """A project with an owner, an editor and a viewer"""
    created = await ProjectService.create_project(db, OWNER_ID, ProjectCreateSchema(name="Playground"))
    await ProjectService.add_member(
        db, created.id, OWNER_ID, MemberAddSchema(user_id=EDITOR_ID, role=ProjectRole.EDITOR), user_client
    )
    await ProjectService.add_member(
        db, created.id, OWNER_ID, MemberAddSchema(user_id=VIEWER_ID, role=ProjectRole.VIEWER), user_client
    )
    return created


async def assert_error(error_code: ErrorCode, coroutine):
    with pytest.raises(BusinessException) as exc_info:
        await coroutine
    assert exc_info.value.error_code is error_code


class TestCreateProject:
    @pytest.mark.asyncio
    async def test_creates_exactly_one_owner(self, db):
        project = await ProjectService.create_project(
            db, OWNER_ID, ProjectCreateSchema(name="  Demo  ", description="d", language="python")
        )

        assert project.name == "Demo"
        assert project.owner_id == OWNER_ID
        members = await ProjectService.list_members(db, project.id, OWNER_ID)
        assert [(m.user_id, m.role) for m in members] == [(OWNER_ID, "OWNER")]

    @pytest.mark.asyncio
    async def test_default_language(self, db):
        project = await ProjectService.create_project(db, OWNER_ID, ProjectCreateSchema(name="Demo"))
        assert project.language == "javascript"

    @pytest.mark.asyncio
    async def test_name_unique_per_owner(self, db):
        await ProjectService.create_project(db, OWNER_ID, ProjectCreateSchema(name="Demo"))

        await assert_error(
            ErrorCode.PROJECT_NAME_ALREADY_EXISTS,
            ProjectService.create_project(db, OWNER_ID, ProjectCreateSchema(name="Demo")),
        )
        other = await ProjectService.create_project(db, OUTSIDER_ID, ProjectCreateSchema(name="Demo"))
        assert other.owner_id == OUTSIDER_ID

    @pytest.mark.asyncio
    async def test_list_returns_owned_projects(self, db):
        await ProjectService.create_project(db, OWNER_ID, ProjectCreateSchema(name="One"))
        await ProjectService.create_project(db, OWNER_ID, ProjectCreateSchema(name="Two"))
        await ProjectService.create_project(db, OUTSIDER_ID, ProjectCreateSchema(name="Three"))

        names = {p.name for p in await ProjectService.list_projects(db, OWNER_ID)}
        assert names == {"One", "Two"}


class TestProjectAccess:
    @pytest.mark.asyncio
    async def test_member_can_view(self, db, project):
        for user_id in (OWNER_ID, EDITOR_ID, VIEWER_ID):
            fetched = await ProjectService.get_project(db, project.id, user_id)
            assert fetched.id == project.id

    @pytest.mark.asyncio
    async def test_non_member_denied(self, db, project):
        await assert_error(ErrorCode.PROJECT_ACCESS_DENIED, ProjectService.get_project(db, project.id, OUTSIDER_ID))
        await assert_error(ErrorCode.PROJECT_ACCESS_DENIED, ProjectService.list_members(db, project.id, OUTSIDER_ID))

    @pytest.mark.asyncio
    async def test_missing_project(self, db):
        await assert_error(ErrorCode.PROJECT_NOT_FOUND, ProjectService.get_project(db, 999, OWNER_ID))

    @pytest.mark.asyncio
    async def test_editor_can_update(self, db, project):
        updated = await ProjectService.update_project(
            db, project.id, EDITOR_ID, ProjectUpdateSchema(description="new description")
        )
        assert updated.description == "new description"
        assert updated.name == "Playground"

    @pytest.mark.asyncio
    async def test_viewer_cannot_update(self, db, project):
        await assert_error(
            ErrorCode.PROJECT_ACCESS_DENIED,
            ProjectService.update_project(db, project.id, VIEWER_ID, ProjectUpdateSchema(name="Hijacked")),
        )

    @pytest.mark.asyncio
    async def test_empty_update_is_noop(self, db, project):
        unchanged = await ProjectService.update_project(db, project.id, OWNER_ID, ProjectUpdateSchema())
        assert unchanged.name == "Playground"

    @pytest.mark.asyncio
    async def test_rename_conflict(self, db, project):
        await ProjectService.create_project(db, OWNER_ID, ProjectCreateSchema(name="Taken"))

        await assert_error(
            ErrorCode.PROJECT_NAME_ALREADY_EXISTS,
            ProjectService.update_project(db, project.id, OWNER_ID, ProjectUpdateSchema(name="Taken")),
        )

    @pytest.mark.asyncio
    async def test_only_owner_deletes(self, db, project):
        await assert_error(ErrorCode.PROJECT_ACCESS_DENIED, ProjectService.delete_project(db, project.id, EDITOR_ID))

        await ProjectService.delete_project(db, project.id, OWNER_ID)

        await assert_error(ErrorCode.PROJECT_NOT_FOUND, ProjectService.get_project(db, project.id, OWNER_ID))


class TestMembership:
    @pytest.mark.asyncio
    async def test_owner_cannot_be_removed(self, db, project):
        await assert_error(
            ErrorCode.CANNOT_REMOVE_OWNER,
            ProjectService.remove_member(db, project.id, OWNER_ID, OWNER_ID),
        )

    @pytest.mark.asyncio
    async def test_owner_role_cannot_change(self, db, project):
        await assert_error(
            ErrorCode.CANNOT_MODIFY_OWNER_ROLE,
            ProjectService.update_member_role(db, project.id, OWNER_ID, OWNER_ID, ProjectRole.VIEWER),
        )

    @pytest.mark.asyncio
    async def test_owner_role_cannot_be_assigned(self, db, project, user_client):
        await assert_error(
            ErrorCode.CANNOT_ADD_OWNER_ROLE,
            ProjectService.add_member(
                db, project.id, OWNER_ID, MemberAddSchema(user_id=OUTSIDER_ID, role=ProjectRole.OWNER), user_client
            ),
        )
        await assert_error(
            ErrorCode.CANNOT_ADD_OWNER_ROLE,
            ProjectService.update_member_role(db, project.id, OWNER_ID, VIEWER_ID, ProjectRole.OWNER),
        )

    @pytest.mark.asyncio
    async def test_remove_non_owner(self, db, project):
        await ProjectService.remove_member(db, project.id, OWNER_ID, VIEWER_ID)

        members = await ProjectService.list_members(db, project.id, OWNER_ID)
        assert {m.user_id for m in members} == {OWNER_ID, EDITOR_ID}
        await assert_error(ErrorCode.PROJECT_ACCESS_DENIED, ProjectService.get_project(db, project.id, VIEWER_ID))

    @pytest.mark.asyncio
    async def test_remove_missing_member(self, db, project):
        await assert_error(
            ErrorCode.PROJECT_MEMBER_NOT_FOUND,
            ProjectService.remove_member(db, project.id, OWNER_ID, OUTSIDER_ID),
        )

    @pytest.mark.asyncio
    async def test_change_role(self, db, project):
        member = await ProjectService.update_member_role(db, project.id, OWNER_ID, VIEWER_ID, ProjectRole.EDITOR)
        assert member.role == "EDITOR"

        updated = await ProjectService.update_project(db, project.id, VIEWER_ID, ProjectUpdateSchema(language="go"))
        assert updated.language == "go"

    @pytest.mark.asyncio
    async def test_editor_cannot_manage_members(self, db, project, user_client):
        await assert_error(
            ErrorCode.PROJECT_ACCESS_DENIED,
            ProjectService.add_member(
                db, project.id, EDITOR_ID, MemberAddSchema(user_id=OUTSIDER_ID, role=ProjectRole.VIEWER), user_client
            ),
        )
        await assert_error(
            ErrorCode.PROJECT_ACCESS_DENIED,
            ProjectService.remove_member(db, project.id, EDITOR_ID, VIEWER_ID),
        )

    @pytest.mark.asyncio
    async def test_duplicate_member(self, db, project, user_client):
        await assert_error(
            ErrorCode.MEMBER_ALREADY_EXISTS,
            ProjectService.add_member(
                db, project.id, OWNER_ID, MemberAddSchema(user_id=EDITOR_ID, role=ProjectRole.VIEWER), user_client
            ),
        )

    @pytest.mark.asyncio
    async def test_unknown_user_rejected(self, db, project, user_client):
        user_client.get_user.side_effect = None
        user_client.get_user.return_value = None

        await assert_error(
            ErrorCode.USER_NOT_FOUND,
            ProjectService.add_member(
                db, project.id, OWNER_ID, MemberAddSchema(user_id=OUTSIDER_ID, role=ProjectRole.VIEWER), user_client
            ),
        )
