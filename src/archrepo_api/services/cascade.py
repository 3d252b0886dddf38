"""Cascade deletion across the component/relationship/artifact/membership graph.

Every deletion is expressed as a `CascadePlan` with two phases:

- required: ordered `RemovalStep`s executed in one unit of work. Any failure
  rolls back the whole plan and propagates to the caller.
- advisory: `AdvisoryStep`s (backing-file removal) executed only after the
  required phase has committed. Failures are logged and swallowed.

User deletion is a guard rather than a cascade: it is refused while the user
is still attributed anywhere in the graph.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from sqlalchemy import ColumnElement, or_

from archrepo_api.models import (
    Artifact,
    Base,
    Component,
    ComponentRelationship,
    Organization,
    Project,
    ProjectMember,
    User,
)
from archrepo_api.services.errors import DependencyBlockedError, NotFoundError
from archrepo_api.services.storage import ArtifactStorage
from archrepo_api.services.store import EntityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemovalStep:
    """Delete every row of `model` matching all `criteria`."""

    model: type[Base]
    criteria: tuple[ColumnElement[bool], ...]
    label: str


@dataclass(frozen=True)
class AdvisoryStep:
    """Best-effort side effect; its failure never aborts the plan."""

    label: str
    action: Callable[[], Awaitable[None]]


@dataclass
class CascadePlan:
    """Ordered removal plan for one deletion target."""

    target: str
    required: list[RemovalStep] = field(default_factory=list)
    advisory: list[AdvisoryStep] = field(default_factory=list)

    def remove(
        self, model: type[Base], *criteria: ColumnElement[bool], label: str
    ) -> None:
        self.required.append(RemovalStep(model, criteria, label))

    def after_commit(self, label: str, action: Callable[[], Awaitable[None]]) -> None:
        self.advisory.append(AdvisoryStep(label, action))


@dataclass
class CascadeResult:
    """Outcome of an executed plan.

    `removed` maps each required step label to the number of rows it deleted
    (summed when several steps share a label).
    """

    target: str
    removed: dict[str, int] = field(default_factory=dict)
    advisory_failures: list[str] = field(default_factory=list)

    @property
    def total_removed(self) -> int:
        return sum(self.removed.values())


# --- Plan construction ---


def _plan_artifact_files(
    plan: CascadePlan,
    artifacts: list[Artifact],
    storage: ArtifactStorage | None,
) -> None:
    if storage is None:
        return
    for artifact in artifacts:
        file_path = artifact.file_path

        async def remove_file(file_path: str = file_path) -> None:
            await storage.remove(file_path)

        plan.after_commit(f"remove file {file_path}", remove_file)


async def plan_component_deletion(
    store: EntityStore,
    component_id: int,
    storage: ArtifactStorage | None = None,
) -> CascadePlan | None:
    """Relationships touching the component, its artifacts, then the component."""
    if await store.get(Component, component_id) is None:
        return None

    plan = CascadePlan(target=f"Component {component_id}")
    plan.remove(
        ComponentRelationship,
        or_(
            ComponentRelationship.source_component_id == component_id,
            ComponentRelationship.target_component_id == component_id,
        ),
        label="relationships",
    )
    artifacts = await store.list_by_field(Artifact, "component_id", component_id)
    plan.remove(Artifact, Artifact.component_id == component_id, label="artifacts")
    plan.remove(Component, Component.id == component_id, label="components")
    _plan_artifact_files(plan, artifacts, storage)
    return plan


async def _add_project_steps(
    plan: CascadePlan,
    store: EntityStore,
    project_id: int,
    storage: ArtifactStorage | None,
) -> None:
    components = await store.list_by_field(Component, "project_id", project_id)
    component_ids = [component.id for component in components]
    if component_ids:
        plan.remove(
            ComponentRelationship,
            or_(
                ComponentRelationship.source_component_id.in_(component_ids),
                ComponentRelationship.target_component_id.in_(component_ids),
            ),
            label="relationships",
        )

    artifacts = await store.list_by_field(Artifact, "project_id", project_id)
    plan.remove(Artifact, Artifact.project_id == project_id, label="artifacts")
    plan.remove(
        ProjectMember, ProjectMember.project_id == project_id, label="members"
    )
    plan.remove(Component, Component.project_id == project_id, label="components")
    plan.remove(Project, Project.id == project_id, label="projects")
    _plan_artifact_files(plan, artifacts, storage)


async def plan_project_deletion(
    store: EntityStore,
    project_id: int,
    storage: ArtifactStorage | None = None,
) -> CascadePlan | None:
    """Relationships, artifacts, members, components, then the project."""
    if await store.get(Project, project_id) is None:
        return None

    plan = CascadePlan(target=f"Project {project_id}")
    await _add_project_steps(plan, store, project_id, storage)
    return plan


async def plan_organization_deletion(
    store: EntityStore,
    organization_id: int,
    storage: ArtifactStorage | None = None,
) -> CascadePlan | None:
    """Every contained project (as a project cascade), its users, then itself."""
    if await store.get(Organization, organization_id) is None:
        return None

    plan = CascadePlan(target=f"Organization {organization_id}")
    projects = await store.list_by_field(Project, "organization_id", organization_id)
    for project in projects:
        await _add_project_steps(plan, store, project.id, storage)
    plan.remove(User, User.organization_id == organization_id, label="users")
    plan.remove(
        Organization, Organization.id == organization_id, label="organizations"
    )
    return plan


# --- Plan execution ---


async def _run_required(
    store: EntityStore, plan: CascadePlan, result: CascadeResult
) -> None:
    for step in plan.required:
        count = await store.delete_where(step.model, *step.criteria)
        result.removed[step.label] = result.removed.get(step.label, 0) + count


async def _run_advisory(plan: CascadePlan, result: CascadeResult) -> None:
    for step in plan.advisory:
        try:
            await step.action()
        except Exception as e:
            logger.warning(
                "%s: advisory step '%s' failed: %s", plan.target, step.label, e
            )
            result.advisory_failures.append(step.label)


async def execute(
    store: EntityStore,
    target: str,
    build_plan: Callable[[], Awaitable[CascadePlan | None]],
) -> CascadeResult:
    """Build and run a plan inside one unit of work.

    The plan is built from reads made in the same unit of work as the
    removals. A missing target (plan is None) is a no-op.
    """
    result = CascadeResult(target=target)
    async with store.transaction():
        plan = await build_plan()
        if plan is None:
            logger.debug("%s does not exist, nothing to delete", target)
            return result
        logger.debug(
            "%s: %d required step(s), %d advisory step(s)",
            target,
            len(plan.required),
            len(plan.advisory),
        )
        await _run_required(store, plan, result)

    await _run_advisory(plan, result)
    logger.info("Deleted %s: %s", target, result.removed)
    return result


# --- Operations ---


async def delete_component(
    store: EntityStore,
    component_id: int,
    storage: ArtifactStorage | None = None,
) -> CascadeResult:
    return await execute(
        store,
        f"Component {component_id}",
        lambda: plan_component_deletion(store, component_id, storage),
    )


async def delete_project(
    store: EntityStore,
    project_id: int,
    storage: ArtifactStorage | None = None,
) -> CascadeResult:
    return await execute(
        store,
        f"Project {project_id}",
        lambda: plan_project_deletion(store, project_id, storage),
    )


async def delete_organization(
    store: EntityStore,
    organization_id: int,
    storage: ArtifactStorage | None = None,
) -> CascadeResult:
    return await execute(
        store,
        f"Organization {organization_id}",
        lambda: plan_organization_deletion(store, organization_id, storage),
    )


async def delete_component_relationship(
    store: EntityStore, relationship_id: int
) -> CascadeResult:
    async def build_plan() -> CascadePlan:
        plan = CascadePlan(target=f"ComponentRelationship {relationship_id}")
        plan.remove(
            ComponentRelationship,
            ComponentRelationship.id == relationship_id,
            label="relationships",
        )
        return plan

    return await execute(
        store, f"ComponentRelationship {relationship_id}", build_plan
    )


async def delete_artifact(
    store: EntityStore, artifact_id: int, storage: ArtifactStorage
) -> CascadeResult:
    """Delete an artifact row, then try to remove its backing file.

    Raises:
        NotFoundError: if the artifact does not exist.
    """

    async def build_plan() -> CascadePlan:
        artifact = await store.get_by_id(Artifact, artifact_id)
        plan = CascadePlan(target=f"Artifact {artifact_id}")
        plan.remove(Artifact, Artifact.id == artifact_id, label="artifacts")
        _plan_artifact_files(plan, [artifact], storage)
        return plan

    return await execute(store, f"Artifact {artifact_id}", build_plan)


# (category, human-readable description, model, attribution criterion), in check order
_USER_ATTRIBUTIONS: list[
    tuple[str, str, type[Base], Callable[[int], ColumnElement[bool]]]
] = [
    (
        "projects",
        "created {count} project(s)",
        Project,
        lambda user_id: Project.created_by == user_id,
    ),
    (
        "components",
        "created {count} component(s)",
        Component,
        lambda user_id: Component.created_by == user_id,
    ),
    (
        "artifacts",
        "uploaded {count} artifact(s)",
        Artifact,
        lambda user_id: Artifact.uploaded_by == user_id,
    ),
    (
        "relationships",
        "created {count} component relationship(s)",
        ComponentRelationship,
        lambda user_id: ComponentRelationship.created_by == user_id,
    ),
    (
        "project_memberships",
        "{count} project membership(s) or has added other members",
        ProjectMember,
        lambda user_id: or_(
            ProjectMember.user_id == user_id, ProjectMember.added_by == user_id
        ),
    ),
]


async def delete_user(store: EntityStore, user_id: int) -> None:
    """Delete a user that is not attributed anywhere in the graph.

    Raises:
        NotFoundError: if the user does not exist.
        DependencyBlockedError: for the first attribution category (projects,
            components, artifacts, relationships, memberships) with rows.
    """
    async with store.transaction():
        if await store.get(User, user_id) is None:
            raise NotFoundError("User", user_id)

        for category, description, model, criterion in _USER_ATTRIBUTIONS:
            count = await store.count(model, criterion(user_id))
            if count > 0:
                raise DependencyBlockedError(
                    user_id, category, count, description.format(count=count)
                )

        await store.delete(User, user_id)

    logger.info("Deleted User %d", user_id)
