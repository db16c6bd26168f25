from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    role: Mapped[str] = mapped_column(String(20), nullable=False)  # admin | editor
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True)
    display_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (CheckConstraint("role in ('admin', 'editor')", name="ck_users_role"),)


class Country(Base):
    __tablename__ = "countries"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(8), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    flag: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_countries_code", "code", unique=True),
        Index("ix_countries_active", "active"),
    )


class CountrySubjects(Base):
    __tablename__ = "country_subjects"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    country_code: Mapped[str] = mapped_column(String(8), nullable=False, unique=True)
    subjects_json: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)  # [{standard_name, display_name, required}]
    subject_aliases_json: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    either_or_groups_json: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)  # [{subjects, description, minRequired, maxAllowed}]
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (Index("ix_country_subjects_country_code", "country_code", unique=True),)


class Career(Base):
    __tablename__ = "careers"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    category: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    min_grades_json: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    country_baselines_json: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    qualification_levels_json: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    sources_json: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    verification_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)  # verified | needs-review | estimated
    last_verified: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "verification_status is null or verification_status in ('verified', 'needs-review', 'estimated')",
            name="ck_careers_verification_status",
        ),
        Index("ix_careers_name", "name", unique=True),
        Index("ix_careers_active", "active"),
        Index("ix_careers_category", "category"),
    )


class CareerFeedback(Base):
    __tablename__ = "career_feedback"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    career_name: Mapped[str] = mapped_column(String(255), nullable=False)
    country_code: Mapped[str] = mapped_column(String(8), nullable=False)
    feedback_type: Mapped[str] = mapped_column(String(20), nullable=False)  # correct | incorrect | outdated
    user_comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    actual_requirement: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    university: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    year_applied: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    was_accepted: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    reviewed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("feedback_type in ('correct', 'incorrect', 'outdated')", name="ck_career_feedback_type"),
        Index("ix_career_feedback_career_name", "career_name"),
        Index("ix_career_feedback_reviewed", "reviewed"),
    )


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    action: Mapped[str] = mapped_column(String(120), nullable=False)
    details_json: Mapped[dict] = mapped_column(JSONB, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
