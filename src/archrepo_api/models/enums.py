"""Enumeration types for database models."""

import enum


class UserRole(str, enum.Enum):
    """Role of a user within its organization."""

    ADMIN = "admin"
    MEMBER = "member"


class ProjectStatus(str, enum.Enum):
    """Lifecycle status of a project."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class ProjectMemberRole(str, enum.Enum):
    """Role of a user within a project."""

    OWNER = "owner"  # Full control, a project must keep at least one
    EDITOR = "editor"  # Can edit components, relationships and artifacts
    VIEWER = "viewer"  # Read-only access


class ComponentLayer(str, enum.Enum):
    """Architecture domain a component belongs to."""

    BUSINESS = "business"
    DATA = "data"
    APPLICATION = "application"
    TECHNOLOGY = "technology"


class ComponentType(str, enum.Enum):
    """Kind of architectural component."""

    # Business layer
    BUSINESS_PROCESS = "business_process"
    CAPABILITY = "capability"
    VALUE_STREAM = "value_stream"

    # Data layer
    DATA_ENTITY = "data_entity"
    DATA_FLOW = "data_flow"

    # Application layer
    APPLICATION = "application"
    SERVICE = "service"

    # Technology layer
    INFRASTRUCTURE_COMPONENT = "infrastructure_component"
    TECHNOLOGY_STANDARD = "technology_standard"


class RelationshipType(str, enum.Enum):
    """Kind of directed edge between two components."""

    DEPENDS_ON = "depends_on"
    SUPPORTS = "supports"
    USES = "uses"
    IMPLEMENTS = "implements"
    FLOWS_TO = "flows_to"


LAYER_COMPONENT_TYPES: dict[ComponentLayer, frozenset[ComponentType]] = {
    ComponentLayer.BUSINESS: frozenset(
        {
            ComponentType.BUSINESS_PROCESS,
            ComponentType.CAPABILITY,
            ComponentType.VALUE_STREAM,
        }
    ),
    ComponentLayer.DATA: frozenset(
        {
            ComponentType.DATA_ENTITY,
            ComponentType.DATA_FLOW,
        }
    ),
    ComponentLayer.APPLICATION: frozenset(
        {
            ComponentType.APPLICATION,
            ComponentType.SERVICE,
        }
    ),
    ComponentLayer.TECHNOLOGY: frozenset(
        {
            ComponentType.INFRASTRUCTURE_COMPONENT,
            ComponentType.TECHNOLOGY_STANDARD,
        }
    ),
}
