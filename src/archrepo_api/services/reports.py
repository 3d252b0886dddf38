"""Aggregate reports over a project's architecture graph."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import func, select

from archrepo_api.models import (
    Artifact,
    Component,
    ComponentLayer,
    ComponentRelationship,
)
from archrepo_api.services.relationships import list_relationships_within_project
from archrepo_api.services.store import EntityStore

COMPONENT_CREATED = "component_created"
ARTIFACT_UPLOADED = "artifact_uploaded"

# Full ties on (timestamp, entity id) list components before artifacts
_ACTIVITY_RANK = {COMPONENT_CREATED: 1, ARTIFACT_UPLOADED: 0}


@dataclass
class ComponentSummary:
    total: int
    by_layer: dict[str, int] = field(default_factory=dict)
    by_type: dict[str, int] = field(default_factory=dict)


@dataclass
class ComponentReport:
    components: list[Component]
    summary: ComponentSummary


@dataclass
class RelationshipSummary:
    total: int
    by_type: dict[str, int] = field(default_factory=dict)


@dataclass
class RelationshipReport:
    relationships: list[ComponentRelationship]
    summary: RelationshipSummary


@dataclass
class ActivityItem:
    type: str
    description: str
    timestamp: datetime
    entity_id: int


@dataclass
class ProjectDashboard:
    project_id: int
    total_components: int
    components_by_layer: dict[str, int]
    total_relationships: int
    total_artifacts: int
    recent_activity: list[ActivityItem]


async def component_report(store: EntityStore, project_id: int) -> ComponentReport:
    """All components of a project with sparse layer and type frequency maps."""
    components = await store.list_by_field(Component, "project_id", project_id)

    by_layer: Counter[str] = Counter()
    by_type: Counter[str] = Counter()
    for component in components:
        by_layer[component.layer.value] += 1
        by_type[component.type.value] += 1

    return ComponentReport(
        components=components,
        summary=ComponentSummary(
            total=len(components),
            by_layer=dict(by_layer),
            by_type=dict(by_type),
        ),
    )


async def relationship_report(
    store: EntityStore, project_id: int
) -> RelationshipReport:
    """Relationships with both endpoints in the project, with a type frequency map."""
    relationships = await list_relationships_within_project(store, project_id)

    by_type: Counter[str] = Counter(
        relationship.relationship_type.value for relationship in relationships
    )
    return RelationshipReport(
        relationships=relationships,
        summary=RelationshipSummary(total=len(relationships), by_type=dict(by_type)),
    )


async def _components_by_layer(store: EntityStore, project_id: int) -> dict[str, int]:
    result = await store.session.execute(
        select(Component.layer, func.count())
        .where(Component.project_id == project_id)
        .group_by(Component.layer)
    )
    # Every known layer is present, absent layers count 0
    by_layer = {layer.value: 0 for layer in ComponentLayer}
    for layer, count in result.all():
        by_layer[layer.value] = count
    return by_layer


async def recent_activity(
    store: EntityStore,
    project_id: int,
    per_kind: int = 5,
    limit: int = 10,
) -> list[ActivityItem]:
    """Newest components and artifacts of a project, merged newest first.

    Takes the `per_kind` most recent of each kind, then keeps the top `limit`.
    Equal timestamps are ordered by entity id, newest id first.
    """
    components = await store.list_where(
        Component,
        Component.project_id == project_id,
        order_by=[Component.created_at.desc(), Component.id.desc()],
        limit=per_kind,
    )
    artifacts = await store.list_where(
        Artifact,
        Artifact.project_id == project_id,
        order_by=[Artifact.created_at.desc(), Artifact.id.desc()],
        limit=per_kind,
    )

    activity = [
        ActivityItem(
            type=COMPONENT_CREATED,
            description=f'Component "{component.name}" was created',
            timestamp=component.created_at,
            entity_id=component.id,
        )
        for component in components
    ] + [
        ActivityItem(
            type=ARTIFACT_UPLOADED,
            description=f'Artifact "{artifact.name}" was uploaded',
            timestamp=artifact.created_at,
            entity_id=artifact.id,
        )
        for artifact in artifacts
    ]
    activity.sort(
        key=lambda item: (item.timestamp, item.entity_id, _ACTIVITY_RANK[item.type]),
        reverse=True,
    )
    return activity[:limit]


async def project_dashboard(
    store: EntityStore,
    project_id: int,
    per_kind: int = 5,
    limit: int = 10,
) -> ProjectDashboard:
    """Headline counts and recent activity for a project.

    Unlike `relationship_report`, relationships are counted when their
    source component belongs to the project, whatever the target.
    """
    source_ids = select(Component.id).where(Component.project_id == project_id)
    return ProjectDashboard(
        project_id=project_id,
        total_components=await store.count(
            Component, Component.project_id == project_id
        ),
        components_by_layer=await _components_by_layer(store, project_id),
        total_relationships=await store.count(
            ComponentRelationship,
            ComponentRelationship.source_component_id.in_(source_ids),
        ),
        total_artifacts=await store.count(Artifact, Artifact.project_id == project_id),
        recent_activity=await recent_activity(store, project_id, per_kind, limit),
    )
