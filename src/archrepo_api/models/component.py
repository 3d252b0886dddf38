"""Component model for architecture graph nodes."""

from __future__ import annotations

from sqlalchemy import Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from archrepo_api.models.base import (
    Base,
    TimestampMixin,
    UpdatedAtMixin,
    enum_values,
)
from archrepo_api.models.enums import ComponentLayer, ComponentType


class Component(Base, TimestampMixin, UpdatedAtMixin):
    """Typed architectural building block within a project.

    `type` must be one of the types allowed for `layer`
    (see LAYER_COMPONENT_TYPES); both are fixed at creation.
    """

    __tablename__ = "components"
    __table_args__ = (Index("ix_components_project_layer", "project_id", "layer"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    type: Mapped[ComponentType] = mapped_column(
        Enum(ComponentType, values_callable=enum_values, name="component_type"),
        nullable=False,
    )
    layer: Mapped[ComponentLayer] = mapped_column(
        Enum(ComponentLayer, values_callable=enum_values, name="component_layer"),
        nullable=False,
    )
    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id"),
        nullable=False,
        index=True,
    )
    created_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    # Opaque, component-specific JSON document
    metadata_: Mapped[str | None] = mapped_column("metadata", Text)
