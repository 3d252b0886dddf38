"""Project model."""

from sqlalchemy import Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from archrepo_api.models.base import (
    Base,
    TimestampMixin,
    UpdatedAtMixin,
    enum_values,
)
from archrepo_api.models.enums import ProjectStatus


class Project(Base, TimestampMixin, UpdatedAtMixin):
    """Container for components, relationships, artifacts and members.

    Created together with an owner membership for its creator.
    """

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id"),
        nullable=False,
        index=True,
    )
    created_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    status: Mapped[ProjectStatus] = mapped_column(
        Enum(ProjectStatus, values_callable=enum_values, name="project_status"),
        nullable=False,
        default=ProjectStatus.ACTIVE,
    )
