"""ProjectMember model for user-project relationships."""

from __future__ import annotations

from sqlalchemy import Enum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from archrepo_api.models.base import Base, TimestampMixin, enum_values
from archrepo_api.models.enums import ProjectMemberRole


class ProjectMember(Base, TimestampMixin):
    """Junction table for user-project membership with roles.

    A project with members must keep at least one owner.
    Users can have different roles in different projects.
    """

    __tablename__ = "project_members"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_member"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    role: Mapped[ProjectMemberRole] = mapped_column(
        Enum(
            ProjectMemberRole,
            values_callable=enum_values,
            name="project_member_role",
        ),
        nullable=False,
        default=ProjectMemberRole.VIEWER,
    )
    added_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
