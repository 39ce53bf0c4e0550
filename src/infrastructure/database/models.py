"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, CheckConstraint, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from core.timeutils import utcnow


def new_document_id() -> str:
    """Store-assigned opaque identifier."""
    return uuid4().hex


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileStatusModel(Base):
    """Workflow status model."""

    __tablename__ = "profile_statuses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_document_id)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (Index("ix_profile_statuses_name", "name"),)


class ProfileModel(Base):
    """Candidate profile model.

    ``status_id`` is a soft reference: no foreign key, the service checks it
    on write and guards status deletes.
    """

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_document_id)
    # Byte-order collation keeps the name prefix range scan case-sensitive.
    name: Mapped[str] = mapped_column(
        String(120).with_variant(String(120, collation="C"), "postgresql"), nullable=False
    )
    caste_or_community: Mapped[str] = mapped_column(String(120), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    star: Mapped[str] = mapped_column(String(50), nullable=False)
    star_match_score: Mapped[float] = mapped_column(Float, nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    mobile_number: Mapped[str] = mapped_column(String(20), nullable=False)
    status_id: Mapped[str] = mapped_column(String(64), nullable=False)
    matrimony_id: Mapped[str] = mapped_column(String(64), nullable=False)
    comments: Mapped[Any] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), default=list
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("age >= 18", name="ck_profiles_age"),
        CheckConstraint(
            "star_match_score >= 0 AND star_match_score <= 10",
            name="ck_profiles_star_match_score",
        ),
        Index("ix_profiles_name", "name"),
        Index("ix_profiles_status_id", "status_id"),
        Index("ix_profiles_updated_at", "updated_at"),
    )
