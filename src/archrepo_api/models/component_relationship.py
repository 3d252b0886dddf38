"""ComponentRelationship model for architecture graph edges."""

from __future__ import annotations

from sqlalchemy import Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from archrepo_api.models.base import Base, TimestampMixin, enum_values
from archrepo_api.models.enums import RelationshipType


class ComponentRelationship(Base, TimestampMixin):
    """Directed, typed edge between two components of the same project.

    source -> target with relationship_type reads as
    "source <relationship_type> target", e.g. "A depends_on B".

    Create-or-delete only. Duplicate edges (same pair and type) are allowed.
    """

    __tablename__ = "component_relationships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_component_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("components.id"),
        nullable=False,
        index=True,
    )
    target_component_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("components.id"),
        nullable=False,
        index=True,
    )
    relationship_type: Mapped[RelationshipType] = mapped_column(
        Enum(RelationshipType, values_callable=enum_values, name="relationship_type"),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(Text)
    created_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
