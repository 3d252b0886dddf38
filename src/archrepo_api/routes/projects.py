"""Project routes: lifecycle, membership and reports."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from archrepo_api.config import settings
from archrepo_api.db import get_artifact_storage, get_store
from archrepo_api.models import Artifact, Component, ComponentLayer, Project
from archrepo_api.schemas import (
    ArtifactResponse,
    ComponentReportResponse,
    ComponentResponse,
    MemberCreate,
    MemberResponse,
    MemberUpdateRole,
    ProjectCreate,
    ProjectDashboardResponse,
    ProjectResponse,
    ProjectUpdate,
    RelationshipReportResponse,
    RelationshipResponse,
)
from archrepo_api.services import EntityStore, cascade, membership, reports
from archrepo_api.services.projects import create_project as create_project_with_owner
from archrepo_api.services.relationships import list_relationships_by_project
from archrepo_api.services.storage import ArtifactStorage

router = APIRouter(prefix="/projects", tags=["projects"])


# --- Project endpoints ---


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: ProjectCreate,
    store: Annotated[EntityStore, Depends(get_store)],
):
    """Create a project. Creator becomes owner."""
    return await create_project_with_owner(
        store,
        name=data.name,
        organization_id=data.organization_id,
        created_by=data.created_by,
        description=data.description,
    )


@router.get("", response_model=list[ProjectResponse])
async def list_projects(store: Annotated[EntityStore, Depends(get_store)]):
    return await store.list_where(Project)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await store.get_by_id(Project, project_id)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    data: ProjectUpdate,
    store: Annotated[EntityStore, Depends(get_store)],
):
    async with store.transaction():
        project = await store.update(Project, project_id, **data.changes())
    return project


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
    storage: Annotated[ArtifactStorage, Depends(get_artifact_storage)],
):
    """Delete a project with its components, relationships, artifacts and members."""
    await cascade.delete_project(store, project_id, storage)


# --- Contents ---


@router.get("/{project_id}/components", response_model=list[ComponentResponse])
async def list_project_components(
    project_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
    layer: ComponentLayer | None = None,
):
    criteria = [Component.project_id == project_id]
    if layer is not None:
        criteria.append(Component.layer == layer)
    return await store.list_where(Component, *criteria)


@router.get("/{project_id}/relationships", response_model=list[RelationshipResponse])
async def list_project_relationships(
    project_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await list_relationships_by_project(store, project_id)


@router.get("/{project_id}/artifacts", response_model=list[ArtifactResponse])
async def list_project_artifacts(
    project_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await store.list_by_field(Artifact, "project_id", project_id)


# --- Member endpoints ---


@router.get("/{project_id}/members", response_model=list[MemberResponse])
async def list_members(
    project_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await membership.list_members(store, project_id)


@router.post(
    "/{project_id}/members",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    project_id: int,
    data: MemberCreate,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await membership.add_member(
        store, project_id, data.user_id, data.role, data.added_by
    )


@router.patch("/{project_id}/members/{user_id}", response_model=MemberResponse)
async def update_member_role(
    project_id: int,
    user_id: int,
    data: MemberUpdateRole,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await membership.update_member_role(store, project_id, user_id, data.role)


@router.delete(
    "/{project_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_member(
    project_id: int,
    user_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    """Remove a member. The last owner cannot be removed."""
    await membership.remove_member(store, project_id, user_id)


# --- Reports ---


@router.get(
    "/{project_id}/reports/components", response_model=ComponentReportResponse
)
async def get_component_report(
    project_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await reports.component_report(store, project_id)


@router.get(
    "/{project_id}/reports/relationships", response_model=RelationshipReportResponse
)
async def get_relationship_report(
    project_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await reports.relationship_report(store, project_id)


@router.get("/{project_id}/dashboard", response_model=ProjectDashboardResponse)
async def get_project_dashboard(
    project_id: int,
    store: Annotated[EntityStore, Depends(get_store)],
):
    return await reports.project_dashboard(
        store,
        project_id,
        per_kind=settings.recent_activity_per_kind,
        limit=settings.recent_activity_limit,
    )
