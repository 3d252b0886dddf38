"""User model."""

from sqlalchemy import Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from archrepo_api.models.base import (
    Base,
    TimestampMixin,
    UpdatedAtMixin,
    enum_values,
)
from archrepo_api.models.enums import UserRole


class User(Base, TimestampMixin, UpdatedAtMixin):
    """User entity.

    A user is attributed as creator, uploader, member or adder across the
    project graph, so it is never cascaded away.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, values_callable=enum_values, name="user_role"),
        nullable=False,
        default=UserRole.MEMBER,
    )
    organization_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("organizations.id"),
        nullable=True,
        index=True,
    )
