"""Creation of projects and the records they contain."""

import logging

from sqlalchemy import select

from archrepo_api.models import (
    LAYER_COMPONENT_TYPES,
    Artifact,
    Component,
    ComponentLayer,
    ComponentType,
    Organization,
    Project,
    ProjectMember,
    ProjectMemberRole,
    User,
)
from archrepo_api.services.errors import ValidationError
from archrepo_api.services.store import EntityStore

logger = logging.getLogger(__name__)


async def create_project(
    store: EntityStore,
    name: str,
    organization_id: int,
    created_by: int,
    description: str | None = None,
) -> Project:
    """Create a project together with its creator's owner membership.

    Both rows are written in one unit of work; if the membership cannot be
    inserted the project is rolled back as well.
    """
    async with store.transaction():
        await store.get_by_id(Organization, organization_id)
        await store.get_by_id(User, created_by)

        project = await store.insert(
            Project(
                name=name,
                description=description,
                organization_id=organization_id,
                created_by=created_by,
            )
        )
        await store.insert(
            ProjectMember(
                project_id=project.id,
                user_id=created_by,
                role=ProjectMemberRole.OWNER,
                added_by=created_by,
            )
        )

    logger.info("Created project %d with owner %d", project.id, created_by)
    return project


async def list_projects_by_user(store: EntityStore, user_id: int) -> list[Project]:
    """Projects the user is a member of."""
    result = await store.session.execute(
        select(Project)
        .join(ProjectMember, ProjectMember.project_id == Project.id)
        .where(ProjectMember.user_id == user_id)
        .order_by(Project.id)
    )
    return list(result.scalars().all())


def validate_component_type(
    layer: ComponentLayer, component_type: ComponentType
) -> None:
    """Raise ValidationError unless `component_type` is allowed in `layer`."""
    allowed = LAYER_COMPONENT_TYPES[layer]
    if component_type not in allowed:
        raise ValidationError(
            "type-layer-mismatch",
            f"Component type '{component_type.value}' is not valid for layer "
            f"'{layer.value}'",
            layer=layer.value,
            type=component_type.value,
            allowed_types=sorted(t.value for t in allowed),
        )


async def create_component(
    store: EntityStore,
    name: str,
    component_type: ComponentType,
    layer: ComponentLayer,
    project_id: int,
    created_by: int,
    description: str | None = None,
    metadata: str | None = None,
) -> Component:
    validate_component_type(layer, component_type)
    async with store.transaction():
        await store.get_by_id(Project, project_id)
        await store.get_by_id(User, created_by)
        component = await store.insert(
            Component(
                name=name,
                description=description,
                type=component_type,
                layer=layer,
                project_id=project_id,
                created_by=created_by,
                metadata_=metadata,
            )
        )

    logger.info(
        "Created %s component %d in project %d",
        layer.value,
        component.id,
        project_id,
    )
    return component


async def create_artifact(
    store: EntityStore,
    name: str,
    file_path: str,
    file_type: str,
    file_size: int,
    project_id: int,
    uploaded_by: int,
    description: str | None = None,
    component_id: int | None = None,
) -> Artifact:
    """Record an uploaded file against a project and optionally a component.

    Raises:
        NotFoundError: if the project, uploader or component does not exist.
        ValidationError: "cross-project" if the component belongs to another
            project.
    """
    async with store.transaction():
        await store.get_by_id(Project, project_id)
        await store.get_by_id(User, uploaded_by)
        if component_id is not None:
            component = await store.get_by_id(Component, component_id)
            if component.project_id != project_id:
                raise ValidationError(
                    "cross-project",
                    "Artifact component must belong to the artifact's project",
                    component_id=component_id,
                    project_id=project_id,
                )

        artifact = await store.insert(
            Artifact(
                name=name,
                description=description,
                file_path=file_path,
                file_type=file_type,
                file_size=file_size,
                component_id=component_id,
                project_id=project_id,
                uploaded_by=uploaded_by,
            )
        )

    logger.info("Recorded artifact %d in project %d", artifact.id, project_id)
    return artifact
