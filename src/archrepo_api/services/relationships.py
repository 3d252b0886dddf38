"""Relationship validation and graph-edge queries."""

import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import aliased

from archrepo_api.models import Component, ComponentRelationship, RelationshipType, User
from archrepo_api.services.errors import NotFoundError, ValidationError
from archrepo_api.services.store import EntityStore

logger = logging.getLogger(__name__)


async def validate_and_prepare(
    store: EntityStore,
    source_id: int,
    target_id: int,
    relationship_type: RelationshipType,
    description: str | None,
    creator_id: int,
) -> ComponentRelationship:
    """Validate a new edge and build its (unpersisted) record.

    Raises:
        NotFoundError: if either component does not resolve.
        ValidationError: "self-relationship" if source and target are the
            same component, "cross-project" if they live in different
            projects.
    """
    source = await store.get(Component, source_id)
    if source is None:
        raise NotFoundError(
            "Component", source_id, f"Source component with id {source_id} not found"
        )
    target = await store.get(Component, target_id)
    if target is None:
        raise NotFoundError(
            "Component", target_id, f"Target component with id {target_id} not found"
        )

    if source_id == target_id:
        raise ValidationError(
            "self-relationship",
            "Cannot create relationship from component to itself",
            source_component_id=source_id,
            target_component_id=target_id,
        )
    if source.project_id != target.project_id:
        raise ValidationError(
            "cross-project",
            "Components must belong to the same project to create a relationship",
            source_component_id=source_id,
            target_component_id=target_id,
        )

    return ComponentRelationship(
        source_component_id=source_id,
        target_component_id=target_id,
        relationship_type=relationship_type,
        description=description,
        created_by=creator_id,
    )


async def create_component_relationship(
    store: EntityStore,
    source_id: int,
    target_id: int,
    relationship_type: RelationshipType,
    description: str | None,
    creator_id: int,
) -> ComponentRelationship:
    """Validate and persist a new edge between two components."""
    async with store.transaction():
        relationship = await validate_and_prepare(
            store, source_id, target_id, relationship_type, description, creator_id
        )
        await store.get_by_id(User, creator_id)
        relationship = await store.insert(relationship)

    logger.info(
        "Created %s relationship %d: %d -> %d",
        relationship_type.value,
        relationship.id,
        source_id,
        target_id,
    )
    return relationship


async def list_relationships_by_component(
    store: EntityStore, component_id: int
) -> list[ComponentRelationship]:
    """Edges where the component is either source or target."""
    return await store.list_where(
        ComponentRelationship,
        or_(
            ComponentRelationship.source_component_id == component_id,
            ComponentRelationship.target_component_id == component_id,
        ),
    )


async def list_relationships_by_project(
    store: EntityStore, project_id: int
) -> list[ComponentRelationship]:
    """Edges whose source component belongs to the project."""
    source_ids = select(Component.id).where(Component.project_id == project_id)
    return await store.list_where(
        ComponentRelationship,
        ComponentRelationship.source_component_id.in_(source_ids),
    )


async def list_relationships_within_project(
    store: EntityStore, project_id: int
) -> list[ComponentRelationship]:
    """Edges whose source and target components both belong to the project."""
    source = aliased(Component)
    target = aliased(Component)
    result = await store.session.execute(
        select(ComponentRelationship)
        .join(source, ComponentRelationship.source_component_id == source.id)
        .join(target, ComponentRelationship.target_component_id == target.id)
        .where(source.project_id == project_id, target.project_id == project_id)
        .order_by(ComponentRelationship.id)
    )
    return list(result.scalars().all())
