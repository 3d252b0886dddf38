"""Artifact routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from archrepo_api.db import get_artifact_storage, get_store
from archrepo_api.models import Artifact
from archrepo_api.schemas import ArtifactCreate, ArtifactResponse
from archrepo_api.services import EntityStore, cascade
from archrepo_api.services.projects import create_artifact as record_artifact
from archrepo_api.services.storage import ArtifactStorage

router = APIRouter(prefix="/artifacts", tags=["artifacts"])


@router.post("", response_model=ArtifactResponse, status_code=status.HTTP_201_CREATED)
async def create_artifact(
    data: ArtifactCreate,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await record_artifact(store, **data.model_dump())


@router.get("/{artifact_id}", response_model=ArtifactResponse)
async def get_artifact(
    artifact_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await store.get_by_id(Artifact, artifact_id)


@router.delete("/{artifact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_artifact(
    artifact_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
    storage: Annotated[ArtifactStorage, Depends(get_artifact_storage)],
):
    """Delete an artifact; its backing file is removed on a best-effort basis."""
    await cascade.delete_artifact(store, artifact_id, storage)
