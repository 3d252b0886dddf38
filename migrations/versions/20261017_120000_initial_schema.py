"""Initial architecture repository schema.

Includes Organization, User, Project, Component, ComponentRelationship,
Artifact and ProjectMember tables.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17 12:00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    """Create the architecture repository tables."""
    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "role",
            sa.Enum("admin", "member", name="user_role"),
            nullable=False,
            server_default="member",
        ),
        sa.Column(
            "organization_id",
            sa.Integer,
            sa.ForeignKey("organizations.id"),
            nullable=True,
            index=True,
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "organization_id",
            sa.Integer,
            sa.ForeignKey("organizations.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "created_by",
            sa.Integer,
            sa.ForeignKey("users.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "status",
            sa.Enum("active", "inactive", "archived", name="project_status"),
            nullable=False,
            server_default="active",
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )

    op.create_table(
        "components",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "type",
            sa.Enum(
                "business_process",
                "capability",
                "value_stream",
                "data_entity",
                "data_flow",
                "application",
                "service",
                "infrastructure_component",
                "technology_standard",
                name="component_type",
            ),
            nullable=False,
        ),
        sa.Column(
            "layer",
            sa.Enum(
                "business", "data", "application", "technology", name="component_layer"
            ),
            nullable=False,
        ),
        sa.Column(
            "project_id",
            sa.Integer,
            sa.ForeignKey("projects.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "created_by",
            sa.Integer,
            sa.ForeignKey("users.id"),
            nullable=False,
            index=True,
        ),
        sa.Column("metadata", sa.Text, nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index(
        "ix_components_project_layer", "components", ["project_id", "layer"]
    )

    op.create_table(
        "component_relationships",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "source_component_id",
            sa.Integer,
            sa.ForeignKey("components.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "target_component_id",
            sa.Integer,
            sa.ForeignKey("components.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "relationship_type",
            sa.Enum(
                "depends_on",
                "supports",
                "uses",
                "implements",
                "flows_to",
                name="relationship_type",
            ),
            nullable=False,
        ),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "created_by",
            sa.Integer,
            sa.ForeignKey("users.id"),
            nullable=False,
            index=True,
        ),
        _timestamp("created_at"),
    )

    op.create_table(
        "artifacts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("file_path", sa.Text, nullable=False),
        sa.Column("file_type", sa.String(255), nullable=False),
        sa.Column("file_size", sa.Integer, nullable=False),
        sa.Column(
            "component_id",
            sa.Integer,
            sa.ForeignKey("components.id"),
            nullable=True,
            index=True,
        ),
        sa.Column(
            "project_id",
            sa.Integer,
            sa.ForeignKey("projects.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "uploaded_by",
            sa.Integer,
            sa.ForeignKey("users.id"),
            nullable=False,
            index=True,
        ),
        _timestamp("created_at"),
    )

    op.create_table(
        "project_members",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "project_id",
            sa.Integer,
            sa.ForeignKey("projects.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "role",
            sa.Enum("owner", "editor", "viewer", name="project_member_role"),
            nullable=False,
            server_default="viewer",
        ),
        sa.Column(
            "added_by",
            sa.Integer,
            sa.ForeignKey("users.id"),
            nullable=False,
            index=True,
        ),
        _timestamp("created_at"),
        sa.UniqueConstraint("project_id", "user_id", name="uq_project_member"),
    )


def downgrade() -> None:
    """Drop all tables and enum types."""
    op.drop_table("project_members")
    op.drop_table("artifacts")
    op.drop_table("component_relationships")
    op.drop_index("ix_components_project_layer", table_name="components")
    op.drop_table("components")
    op.drop_table("projects")
    op.drop_table("users")
    op.drop_table("organizations")

    for enum_name in (
        "project_member_role",
        "relationship_type",
        "component_layer",
        "component_type",
        "project_status",
        "user_role",
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
