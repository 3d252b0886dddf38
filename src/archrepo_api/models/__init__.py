"""Database models."""

from archrepo_api.models.artifact import Artifact
from archrepo_api.models.base import Base, TimestampMixin, UpdatedAtMixin
from archrepo_api.models.component import Component
from archrepo_api.models.component_relationship import ComponentRelationship
from archrepo_api.models.enums import (
    LAYER_COMPONENT_TYPES,
    ComponentLayer,
    ComponentType,
    ProjectMemberRole,
    ProjectStatus,
    RelationshipType,
    UserRole,
)
from archrepo_api.models.organization import Organization
from archrepo_api.models.project import Project
from archrepo_api.models.project_member import ProjectMember
from archrepo_api.models.user import User

__all__ = [
    "LAYER_COMPONENT_TYPES",
    "Artifact",
    "Base",
    "Component",
    "ComponentLayer",
    "ComponentRelationship",
    "ComponentType",
    "Organization",
    "Project",
    "ProjectMember",
    "ProjectMemberRole",
    "ProjectStatus",
    "RelationshipType",
    "TimestampMixin",
    "UpdatedAtMixin",
    "User",
]
