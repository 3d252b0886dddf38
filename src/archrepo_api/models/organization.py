"""Organization model, the root of the ownership tree."""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from archrepo_api.models.base import Base, TimestampMixin, UpdatedAtMixin


class Organization(Base, TimestampMixin, UpdatedAtMixin):
    """Owns users and projects.

    Deletion is handled by the cascade orchestrator, not by ORM cascades.
    """

    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
