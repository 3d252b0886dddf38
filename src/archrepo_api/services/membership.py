"""Project membership with uniqueness and last-owner invariants."""

import logging

from archrepo_api.models import Project, ProjectMember, ProjectMemberRole, User
from archrepo_api.services.errors import ConflictError, NotFoundError
from archrepo_api.services.store import EntityStore

logger = logging.getLogger(__name__)


async def get_membership(
    store: EntityStore, project_id: int, user_id: int
) -> ProjectMember | None:
    """Get a user's membership in a project."""
    members = await store.list_where(
        ProjectMember,
        ProjectMember.project_id == project_id,
        ProjectMember.user_id == user_id,
    )
    return members[0] if members else None


async def add_member(
    store: EntityStore,
    project_id: int,
    user_id: int,
    role: ProjectMemberRole,
    added_by: int,
) -> ProjectMember:
    """Add a user to a project.

    Raises:
        NotFoundError: if the project, the user or the adder does not exist.
        ConflictError: "duplicate-member" if the user is already a member.
    """
    async with store.transaction():
        await store.get_by_id(Project, project_id)
        await store.get_by_id(User, user_id)
        if await store.get(User, added_by) is None:
            raise NotFoundError(
                "User",
                added_by,
                f"User who is adding the member ({added_by}) not found",
            )

        if await get_membership(store, project_id, user_id) is not None:
            raise ConflictError(
                "duplicate-member",
                "User is already a member of this project",
                project_id=project_id,
                user_id=user_id,
            )

        member = await store.insert(
            ProjectMember(
                project_id=project_id,
                user_id=user_id,
                role=role,
                added_by=added_by,
            )
        )

    logger.info(
        "Added user %d to project %d as %s", user_id, project_id, role.value
    )
    return member


async def remove_member(store: EntityStore, project_id: int, user_id: int) -> None:
    """Remove a user from a project, keeping at least one owner.

    Raises:
        ConflictError: "not-a-member" if there is no membership for the pair,
            "last-owner" if the member is the project's only owner.
    """
    async with store.transaction():
        member = await get_membership(store, project_id, user_id)
        if member is None:
            raise ConflictError(
                "not-a-member",
                "User is not a member of this project",
                project_id=project_id,
                user_id=user_id,
            )

        if member.role == ProjectMemberRole.OWNER:
            # Concurrent removals of different owners serialize on these rows
            owners = await store.list_where(
                ProjectMember,
                ProjectMember.project_id == project_id,
                ProjectMember.role == ProjectMemberRole.OWNER,
                for_update=True,
            )
            if len(owners) <= 1:
                raise ConflictError(
                    "last-owner",
                    "Cannot remove the last owner from the project",
                    project_id=project_id,
                    user_id=user_id,
                )

        await store.delete(ProjectMember, member.id)

    logger.info("Removed user %d from project %d", user_id, project_id)


async def update_member_role(
    store: EntityStore,
    project_id: int,
    user_id: int,
    new_role: ProjectMemberRole,
) -> ProjectMember:
    """Overwrite a member's role.

    Demoting the only owner is allowed here; only removal is guarded.

    Raises:
        NotFoundError: if there is no membership for the pair.
    """
    async with store.transaction():
        member = await get_membership(store, project_id, user_id)
        if member is None:
            raise NotFoundError(
                "ProjectMember",
                user_id,
                f"Project member not found for project {project_id} and user {user_id}",
            )
        member = await store.update(ProjectMember, member.id, role=new_role)

    logger.info(
        "Changed role of user %d in project %d to %s",
        user_id,
        project_id,
        new_role.value,
    )
    return member


async def list_members(store: EntityStore, project_id: int) -> list[ProjectMember]:
    return await store.list_by_field(ProjectMember, "project_id", project_id)
