"""Component relationship routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from archrepo_api.db import get_store
from archrepo_api.models import ComponentRelationship
from archrepo_api.schemas import RelationshipCreate, RelationshipResponse
from archrepo_api.services import EntityStore, cascade
from archrepo_api.services.relationships import create_component_relationship

router = APIRouter(prefix="/relationships", tags=["relationships"])


@router.post(
    "", response_model=RelationshipResponse, status_code=status.HTTP_201_CREATED
)
async def create_relationship(
    data: RelationshipCreate,
    store: Annotated[EntityStore, Depends(get_store)],
):
    """Create an edge between two distinct components of the same project."""
    return await create_component_relationship(
        store,
        data.source_component_id,
        data.target_component_id,
        data.relationship_type,
        data.description,
        data.created_by,
    )


@router.get("/{relationship_id}", response_model=RelationshipResponse)
async def get_relationship(
    relationship_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await store.get_by_id(ComponentRelationship, relationship_id)


@router.delete("/{relationship_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_relationship(
    relationship_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    await cascade.delete_component_relationship(store, relationship_id)
