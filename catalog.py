from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from logic import evaluate_careers
from models import AuditLog, Career, CareerFeedback, Country, CountrySubjects
from subjects import DEFAULT_COUNTRIES, EitherOrGroup, alias_table, either_or_groups_for, subjects_for_country

logger = logging.getLogger(__name__)


def either_or_groups_from_record(record: Any, country_code: str | None = None) -> tuple[EitherOrGroup, ...]:
    raw = None
    if record is not None:
        raw = record.get("either_or_groups_json") if isinstance(record, dict) else getattr(record, "either_or_groups_json", None)
    if not raw:
        return either_or_groups_for(country_code)
    groups = [EitherOrGroup.from_record(item) for item in raw]
    return tuple(group for group in groups if group is not None)


def fetch_country_subjects(db: Session, country_code: str) -> CountrySubjects | None:
    return db.scalar(select(CountrySubjects).where(CountrySubjects.country_code == country_code.upper()))


def load_either_or_groups(db: Session, country_code: str) -> tuple[EitherOrGroup, ...]:
    record = fetch_country_subjects(db, country_code)
    if record is None:
        logger.info("No subject configuration stored for %s, using default either-or groups", country_code)
    return either_or_groups_from_record(record, country_code)


def load_subject_aliases(db: Session, country_code: str) -> dict[str, str]:
    record = fetch_country_subjects(db, country_code)
    stored = dict(record.subject_aliases_json or {}) if record else {}
    return alias_table(country_code, extra_aliases=stored)


def load_subjects(db: Session, country_code: str) -> list[dict[str, Any]]:
    record = fetch_country_subjects(db, country_code)
    if record and isinstance(record.subjects_json, list) and record.subjects_json:
        return list(record.subjects_json)
    return subjects_for_country(country_code)


def fetch_careers(db: Session, include_inactive: bool = False) -> list[Career]:
    stmt = select(Career).order_by(Career.category, Career.name)
    if not include_inactive:
        stmt = stmt.where(Career.active.is_(True))
    return db.scalars(stmt).all()


def fetch_active_countries(db: Session) -> list[dict[str, Any]]:
    rows = db.scalars(select(Country).where(Country.active.is_(True)).order_by(Country.name)).all()
    if rows:
        return [{"code": row.code, "name": row.name, "flag": row.flag, "active": True} for row in rows]
    logger.warning("No active countries stored, falling back to defaults")
    return sorted((c for c in DEFAULT_COUNTRIES if c["active"]), key=lambda c: c["name"])


def evaluate_catalog(db: Session, grades: dict[str, Any], country_code: str) -> list[dict[str, Any]]:
    careers = fetch_careers(db)
    groups = load_either_or_groups(db, country_code)
    aliases = load_subject_aliases(db, country_code)
    results = evaluate_careers(grades, careers, country_code, groups=groups, aliases=aliases)
    logger.debug("Evaluated %d careers for %s", len(results), country_code)
    return results


FEEDBACK_TYPES = ("correct", "incorrect", "outdated")


def submit_feedback(
    db: Session,
    career_name: str,
    country_code: str,
    feedback_type: str,
    user_comment: str | None = None,
    actual_requirement: str | None = None,
    university: str | None = None,
    year_applied: int | None = None,
    was_accepted: bool | None = None,
) -> CareerFeedback:
    if feedback_type not in FEEDBACK_TYPES:
        raise ValueError(f"feedback_type must be one of {FEEDBACK_TYPES}")
    if not (career_name or "").strip():
        raise ValueError("career_name is required")

    feedback = CareerFeedback(
        career_name=career_name.strip(),
        country_code=(country_code or "").upper(),
        feedback_type=feedback_type,
        user_comment=(user_comment or "").strip() or None,
        actual_requirement=(actual_requirement or "").strip() or None,
        university=(university or "").strip() or None,
        year_applied=year_applied,
        was_accepted=was_accepted,
    )
    db.add(feedback)
    logger.info("Feedback '%s' received for %s (%s)", feedback_type, feedback.career_name, feedback.country_code)
    return feedback


def fetch_feedback(db: Session, reviewed: bool | None = None) -> list[CareerFeedback]:
    stmt = select(CareerFeedback).order_by(CareerFeedback.submitted_at.desc())
    if reviewed is not None:
        stmt = stmt.where(CareerFeedback.reviewed.is_(reviewed))
    return db.scalars(stmt).all()


def mark_feedback_reviewed(db: Session, feedback_id: str | uuid.UUID, actor_user_id: str | None = None) -> bool:
    feedback = db.get(CareerFeedback, uuid.UUID(str(feedback_id)))
    if not feedback:
        return False
    feedback.reviewed = True
    db.add(
        AuditLog(
            user_id=uuid.UUID(actor_user_id) if actor_user_id else None,
            action="feedback_reviewed",
            details_json={"feedback_id": str(feedback.id), "career_name": feedback.career_name},
        )
    )
    return True
