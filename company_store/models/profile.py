"""Profile ORM model."""
from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from company_store.models.base import Base, TimestampMixin


class Profile(TimestampMixin, Base):
    """Per-user flags maintained alongside the external identity record."""

    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    employee_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True
    )
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_kiosk: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


__all__ = ["Profile"]
