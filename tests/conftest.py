"""Test fixtures for archrepo-api."""

from collections.abc import AsyncGenerator
from datetime import datetime
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from archrepo_api.db import get_artifact_storage, get_db
from archrepo_api.main import app
from archrepo_api.models import (
    Artifact,
    Base,
    Component,
    ComponentLayer,
    ComponentRelationship,
    ComponentType,
    Organization,
    ProjectMemberRole,
    RelationshipType,
    User,
)
from archrepo_api.services import EntityStore
from archrepo_api.services.membership import add_member
from archrepo_api.services.projects import create_project

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingArtifactStorage:
    """Artifact storage double that records removals and can be made to fail."""

    def __init__(self) -> None:
        self.removed: list[str] = []
        self.failing: set[str] = set()

    async def remove(self, file_path: str) -> None:
        if file_path in self.failing:
            raise FileNotFoundError(file_path)
        self.removed.append(file_path)


class GraphFactory:
    """Creates committed rows and returns their ids."""

    def __init__(self, store: EntityStore) -> None:
        self.store = store
        self._emails = 0

    async def organization(self, name: str = "Acme") -> int:
        async with self.store.transaction():
            organization = await self.store.insert(Organization(name=name))
        return organization.id

    async def user(self, organization_id: int | None = None, name: str = "") -> int:
        self._emails += 1
        async with self.store.transaction():
            user = await self.store.insert(
                User(
                    email=f"user{self._emails}@example.com",
                    name=name or f"User {self._emails}",
                    organization_id=organization_id,
                )
            )
        return user.id

    async def project(self, organization_id: int, created_by: int) -> int:
        project = await create_project(
            self.store, "Project", organization_id, created_by
        )
        return project.id

    async def component(
        self,
        project_id: int,
        created_by: int,
        name: str = "Component",
        component_type: ComponentType = ComponentType.BUSINESS_PROCESS,
        layer: ComponentLayer = ComponentLayer.BUSINESS,
        created_at: datetime | None = None,
    ) -> int:
        component = Component(
            name=name,
            type=component_type,
            layer=layer,
            project_id=project_id,
            created_by=created_by,
        )
        if created_at is not None:
            component.created_at = created_at
        async with self.store.transaction():
            component = await self.store.insert(component)
        return component.id

    async def relationship(
        self,
        source_id: int,
        target_id: int,
        created_by: int,
        relationship_type: RelationshipType = RelationshipType.DEPENDS_ON,
    ) -> int:
        # Inserted directly so tests can also build edges the validator rejects
        async with self.store.transaction():
            relationship = await self.store.insert(
                ComponentRelationship(
                    source_component_id=source_id,
                    target_component_id=target_id,
                    relationship_type=relationship_type,
                    created_by=created_by,
                )
            )
        return relationship.id

    async def artifact(
        self,
        project_id: int,
        uploaded_by: int,
        component_id: int | None = None,
        name: str = "diagram.png",
        created_at: datetime | None = None,
        file_path: str | None = None,
    ) -> int:
        artifact = Artifact(
            name=name,
            file_path=file_path or f"uploads/{project_id}/{name}",
            file_type="image/png",
            file_size=1024,
            project_id=project_id,
            component_id=component_id,
            uploaded_by=uploaded_by,
        )
        if created_at is not None:
            artifact.created_at = created_at
        async with self.store.transaction():
            artifact = await self.store.insert(artifact)
        return artifact.id

    async def member(
        self,
        project_id: int,
        user_id: int,
        role: ProjectMemberRole,
        added_by: int,
    ) -> int:
        member = await add_member(self.store, project_id, user_id, role, added_by)
        return member.id


@pytest.fixture
async def async_engine():
    """Create a test database engine with schema initialized."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(async_engine, expire_on_commit=False)
    async with async_session_maker() as session:
        yield session


@pytest.fixture
def store(async_session: AsyncSession) -> EntityStore:
    return EntityStore(async_session)


@pytest.fixture
def graph(store: EntityStore) -> GraphFactory:
    return GraphFactory(store)


@pytest.fixture
def artifact_storage() -> RecordingArtifactStorage:
    return RecordingArtifactStorage()


@pytest.fixture
async def client(
    async_engine, artifact_storage: RecordingArtifactStorage
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with isolated database."""
    async_session_maker = async_sessionmaker(async_engine, expire_on_commit=False)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with async_session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_artifact_storage] = lambda: artifact_storage

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def artifact_root(tmp_path: Path) -> Path:
    root = tmp_path / "artifacts"
    root.mkdir()
    return root
