"""Pydantic schemas for API request/response models."""

from datetime import datetime
from typing import Any, ClassVar

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from archrepo_api.models.enums import (
    ComponentLayer,
    ComponentType,
    ProjectMemberRole,
    ProjectStatus,
    RelationshipType,
    UserRole,
)


class UpdateSchema(BaseModel):
    """Partial update; only fields the client sent are applied."""

    # Fields that may be explicitly cleared with null
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"description"})

    def changes(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None or name in self.nullable_fields
        }


# --- Organization Schemas ---


class OrganizationCreate(BaseModel):
    """Schema for creating an organization."""

    name: str
    description: str | None = None


class OrganizationUpdate(UpdateSchema):
    """Schema for updating an organization."""

    name: str | None = None
    description: str | None = None


class OrganizationResponse(BaseModel):
    """Schema for organization response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime


# --- User Schemas ---


class UserCreate(BaseModel):
    """Schema for creating a user."""

    email: EmailStr
    name: str
    role: UserRole = UserRole.MEMBER
    organization_id: int | None = None


class UserUpdate(UpdateSchema):
    """Schema for updating a user."""

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"organization_id"})

    email: EmailStr | None = None
    name: str | None = None
    role: UserRole | None = None
    organization_id: int | None = None


class UserResponse(BaseModel):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: UserRole
    organization_id: int | None
    created_at: datetime
    updated_at: datetime


# --- Project Schemas ---


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    name: str
    description: str | None = None
    organization_id: int
    created_by: int


class ProjectUpdate(UpdateSchema):
    """Schema for updating a project."""

    name: str | None = None
    description: str | None = None
    status: ProjectStatus | None = None


class ProjectResponse(BaseModel):
    """Schema for project response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    organization_id: int
    created_by: int
    status: ProjectStatus
    created_at: datetime
    updated_at: datetime


# --- Component Schemas ---


class ComponentCreate(BaseModel):
    """Schema for creating a component."""

    name: str
    description: str | None = None
    type: ComponentType
    layer: ComponentLayer
    project_id: int
    created_by: int
    metadata: str | None = None


class ComponentUpdate(UpdateSchema):
    """Schema for updating a component."""

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"description", "metadata"})

    name: str | None = None
    description: str | None = None
    metadata: str | None = None


class ComponentResponse(BaseModel):
    """Schema for component response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    type: ComponentType
    layer: ComponentLayer
    project_id: int
    created_by: int
    metadata: str | None = Field(
        default=None, validation_alias=AliasChoices("metadata_", "metadata")
    )
    created_at: datetime
    updated_at: datetime


# --- Relationship Schemas ---


class RelationshipCreate(BaseModel):
    """Schema for creating a component relationship."""

    source_component_id: int
    target_component_id: int
    relationship_type: RelationshipType
    description: str | None = None
    created_by: int


class RelationshipResponse(BaseModel):
    """Schema for component relationship response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    source_component_id: int
    target_component_id: int
    relationship_type: RelationshipType
    description: str | None
    created_by: int
    created_at: datetime


# --- Artifact Schemas ---


class ArtifactCreate(BaseModel):
    """Schema for recording an uploaded artifact."""

    name: str
    description: str | None = None
    file_path: str
    file_type: str
    file_size: int = Field(ge=0)
    component_id: int | None = None
    project_id: int
    uploaded_by: int


class ArtifactResponse(BaseModel):
    """Schema for artifact response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    file_path: str
    file_type: str
    file_size: int
    component_id: int | None
    project_id: int
    uploaded_by: int
    created_at: datetime


# --- Member Schemas ---


class MemberCreate(BaseModel):
    """Schema for adding a project member."""

    user_id: int
    role: ProjectMemberRole
    added_by: int


class MemberUpdateRole(BaseModel):
    """Schema for changing a member's role."""

    role: ProjectMemberRole


class MemberResponse(BaseModel):
    """Schema for project member response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    user_id: int
    role: ProjectMemberRole
    added_by: int
    created_at: datetime


# --- Report Schemas ---


class ComponentSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    by_layer: dict[str, int]
    by_type: dict[str, int]


class ComponentReportResponse(BaseModel):
    """Components of a project with layer/type frequency maps."""

    model_config = ConfigDict(from_attributes=True)

    components: list[ComponentResponse]
    summary: ComponentSummaryResponse


class RelationshipSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    by_type: dict[str, int]


class RelationshipReportResponse(BaseModel):
    """Relationships within a project with a type frequency map."""

    model_config = ConfigDict(from_attributes=True)

    relationships: list[RelationshipResponse]
    summary: RelationshipSummaryResponse


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: str
    description: str
    timestamp: datetime
    entity_id: int


class ProjectDashboardResponse(BaseModel):
    """Headline counts and recent activity of a project."""

    model_config = ConfigDict(from_attributes=True)

    project_id: int
    total_components: int
    components_by_layer: dict[str, int]
    total_relationships: int
    total_artifacts: int
    recent_activity: list[ActivityResponse]
