"""Jurisdiction and contact models (read-only reference data for the core)."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pay_equity_engine.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Jurisdiction(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A reporting government jurisdiction (city, county, school district)."""

    __tablename__ = "jurisdictions"

    jurisdiction_id: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    jurisdiction_type: Mapped[str] = mapped_column(String, nullable=False, default="City")
    city: Mapped[str | None] = mapped_column(String, nullable=True)
    state: Mapped[str] = mapped_column(String, nullable=False, default="MN")
    next_report_year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    contacts: Mapped[list[Contact]] = relationship(
        back_populates="jurisdiction",
        order_by="Contact.is_primary.desc()",
    )


class Contact(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A person to notify about a jurisdiction's reports."""

    __tablename__ = "contacts"

    jurisdiction_id: Mapped[UUID] = mapped_column(
        ForeignKey("jurisdictions.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    jurisdiction: Mapped[Jurisdiction] = relationship(back_populates="contacts")
