"""Component routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from archrepo_api.db import get_artifact_storage, get_store
from archrepo_api.models import Artifact, Component
from archrepo_api.schemas import (
    ArtifactResponse,
    ComponentCreate,
    ComponentResponse,
    ComponentUpdate,
    RelationshipResponse,
)
from archrepo_api.services import EntityStore, cascade
from archrepo_api.services.projects import create_component as create_typed_component
from archrepo_api.services.relationships import list_relationships_by_component
from archrepo_api.services.storage import ArtifactStorage

router = APIRouter(prefix="/components", tags=["components"])


@router.post("", response_model=ComponentResponse, status_code=status.HTTP_201_CREATED)
async def create_component(
    data: ComponentCreate,
    store: Annotated[EntityStore, Depends(get_store)],
):
    """Create a component. Its type must be valid for its layer (422 otherwise)."""
    return await create_typed_component(
        store,
        name=data.name,
        component_type=data.type,
        layer=data.layer,
        project_id=data.project_id,
        created_by=data.created_by,
        description=data.description,
        metadata=data.metadata,
    )


@router.get("/{component_id}", response_model=ComponentResponse)
async def get_component(
    component_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await store.get_by_id(Component, component_id)


@router.patch("/{component_id}", response_model=ComponentResponse)
async def update_component(
    component_id: int,
    data: ComponentUpdate,
    store: Annotated[EntityStore, Depends(get_store)],
):
    changes = data.changes()
    if "metadata" in changes:
        changes["metadata_"] = changes.pop("metadata")
    async with store.transaction():
        component = await store.update(Component, component_id, **changes)
    return component


@router.delete("/{component_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_component(
    component_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
    storage: Annotated[ArtifactStorage, Depends(get_artifact_storage)],
):
    """Delete a component with its relationships and artifacts."""
    await cascade.delete_component(store, component_id, storage)


@router.get("/{component_id}/relationships", response_model=list[RelationshipResponse])
async def list_component_relationships(
    component_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await list_relationships_by_component(store, component_id)


@router.get("/{component_id}/artifacts", response_model=list[ArtifactResponse])
async def list_component_artifacts(
    component_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await store.list_by_field(Artifact, "component_id", component_id)
