from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from archrepo_api.config import settings
from archrepo_api.services.storage import ArtifactStorage, LocalArtifactStorage
from archrepo_api.services.store import EntityStore

engine = create_async_engine(settings.database_url, echo=settings.debug)
async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


async def get_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EntityStore:
    return EntityStore(db)


def get_artifact_storage() -> ArtifactStorage:
    return LocalArtifactStorage(settings.artifact_root)
