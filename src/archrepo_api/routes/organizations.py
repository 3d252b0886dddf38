"""Organization routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from archrepo_api.db import get_artifact_storage, get_store
from archrepo_api.models import Organization, Project
from archrepo_api.schemas import (
    OrganizationCreate,
    OrganizationResponse,
    OrganizationUpdate,
    ProjectResponse,
)
from archrepo_api.services import EntityStore, cascade
from archrepo_api.services.storage import ArtifactStorage

router = APIRouter(prefix="/organizations", tags=["organizations"])


@router.post(
    "", response_model=OrganizationResponse, status_code=status.HTTP_201_CREATED
)
async def create_organization(
    data: OrganizationCreate,
    store: Annotated[EntityStore, Depends(get_store)],
):
    async with store.transaction():
        organization = await store.insert(
            Organization(name=data.name, description=data.description)
        )
    return organization


@router.get("", response_model=list[OrganizationResponse])
async def list_organizations(store: Annotated[EntityStore, Depends(get_store)]):
    return await store.list_where(Organization)


@router.get("/{organization_id}", response_model=OrganizationResponse)
async def get_organization(
    organization_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await store.get_by_id(Organization, organization_id)


@router.patch("/{organization_id}", response_model=OrganizationResponse)
async def update_organization(
    organization_id: int,
    data: OrganizationUpdate,
    store: Annotated[EntityStore, Depends(get_store)],
):
    async with store.transaction():
        organization = await store.update(
            Organization, organization_id, **data.changes()
        )
    return organization


@router.delete("/{organization_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_organization(
    organization_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
    storage: Annotated[ArtifactStorage, Depends(get_artifact_storage)],
):
    """Delete an organization with its projects (cascaded) and users."""
    await cascade.delete_organization(store, organization_id, storage)


@router.get("/{organization_id}/projects", response_model=list[ProjectResponse])
async def list_organization_projects(
    organization_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await store.list_by_field(Project, "organization_id", organization_id)
