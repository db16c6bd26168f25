from __future__ import annotations

import ast
import csv
import io
import json
import logging
import os
import uuid
from datetime import date
from pathlib import Path
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from auth import create_admin_user
from models import AuditLog, Career, Country, CountrySubjects
from subjects import (
    COUNTRY_SUBJECT_ALIASES,
    COUNTRY_SUBJECTS,
    DEFAULT_COUNTRIES,
    DEFAULT_COUNTRY_KEY,
    DEFAULT_EITHER_OR_GROUPS,
    subjects_for_country,
)

logger = logging.getLogger(__name__)

REQUIRED_CAREER_COLUMNS = {
    "name",
    "active",
    "category",
    "min_grades_json",
    "country_baselines_json",
    "qualification_levels_json",
    "sources_json",
    "verification_status",
    "last_verified",
}

VERIFICATION_STATUSES = {"verified", "needs-review", "estimated"}

SAMPLE_CAREERS: list[dict[str, Any]] = [
    {
        "name": "IT Specialist",
        "category": "IT/Computer Science",
        "min_grades_json": {"Math": 60, "English": 50, "IT": 50},
        "country_baselines_json": {"KE": {"Math": 60, "English": 55, "ComputerStudies": 50}},
        "qualification_levels_json": {
            "ZA": [
                {
                    "level": "Degree",
                    "nqfLevel": 7,
                    "minGrades": {"Math": 60, "MathLiteracy": 60, "IT": 50, "English": 50, "EnglishFAL": 60},
                    "aps": 26,
                    "sources": {"institution": "Tshwane University of Technology", "url": "https://www.tut.ac.za"},
                }
            ]
        },
        "verification_status": "verified",
        "last_verified": "2025-01-15",
    },
    {
        "name": "Software Engineer",
        "category": "IT/Computer Science",
        "min_grades_json": {"Math": 70, "Physics": 60, "English": 60},
        "country_baselines_json": {"KE": {"Math": 70, "Physics": 60, "English": 60, "ComputerStudies": 55}},
        "qualification_levels_json": {
            "ZA": [
                {
                    "level": "Degree",
                    "nqfLevel": 7,
                    "minGrades": {"Math": 70, "Physics": 60, "English": 50, "EnglishFAL": 60},
                    "aps": 30,
                    "notes": "Mathematics required, not Mathematical Literacy",
                }
            ]
        },
        "verification_status": "needs-review",
        "last_verified": "2024-06-01",
    },
    {
        "name": "Accountant",
        "category": "Business",
        "min_grades_json": {"Math": 60, "English": 55, "Accounting": 60},
        "country_baselines_json": {"ZA": {"Math": 50, "English": 50, "Accounting": 50}},
        "qualification_levels_json": {},
        "verification_status": "estimated",
        "last_verified": None,
    },
    {
        "name": "Teacher",
        "category": "Education",
        "min_grades_json": {"English": 55, "Math": 50},
        "country_baselines_json": {"ZA": {"Math": 50, "English": 50}},
        "qualification_levels_json": {},
        "verification_status": "verified",
        "last_verified": "2025-03-10",
    },
    {
        "name": "Doctor",
        "category": "Medicine",
        "min_grades_json": {"Biology": 70, "Chemistry": 70, "Math": 65},
        "country_baselines_json": {
            "ZA": {"Biology": 75, "Chemistry": 75, "Math": 70, "Physics": 65},
            "KE": {"Biology": 75, "Chemistry": 75, "Math": 70, "Physics": 65},
            "NG": {"Biology": 70, "Chemistry": 70, "Math": 65, "Physics": 60},
            "EG": {"Biology": 80, "Chemistry": 80, "Math": 75, "Physics": 70},
        },
        "qualification_levels_json": {},
        "verification_status": "estimated",
        "last_verified": None,
    },
    {
        "name": "Nurse",
        "category": "Medicine",
        "min_grades_json": {"Biology": 65, "Chemistry": 60, "English": 60},
        "country_baselines_json": {
            "ZA": {"Biology": 70, "Chemistry": 65, "English": 65, "Math": 55},
            "KE": {"Biology": 65, "Chemistry": 60, "English": 60, "Math": 50},
        },
        "qualification_levels_json": {},
        "verification_status": "needs-review",
        "last_verified": "2024-11-20",
    },
]


def _parse_json_or_empty(value: str) -> dict:
    raw = (value or "").strip()
    if not raw or raw == "{}":
        return {}

    # Accept proper JSON as well as CSV-escaped and single-quoted variants.
    for candidate in (
        raw,
        raw.replace('\\"', '"'),
        raw.replace("'", '"'),
    ):
        try:
            parsed = json.loads(candidate)
            return parsed if isinstance(parsed, dict) else {}
        except json.JSONDecodeError:
            continue

    try:
        parsed = ast.literal_eval(raw)
        return parsed if isinstance(parsed, dict) else {}
    except (SyntaxError, ValueError):
        raise ValueError(f"Invalid JSON object field: {raw}")


def _parse_bool(value: str) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "y"}


def _parse_date(value: str) -> date | None:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise ValueError(f"Invalid date (expected YYYY-MM-DD): {value}")


def _parse_status(value: str) -> str | None:
    value = (value or "").strip().lower()
    if not value:
        return None
    if value not in VERIFICATION_STATUSES:
        raise ValueError(f"Invalid verification_status: {value}")
    return value


def validate_csv_columns(columns: list[str]) -> tuple[bool, list[str]]:
    missing = sorted(REQUIRED_CAREER_COLUMNS - set(columns))
    return len(missing) == 0, missing


def load_careers_from_csv(csv_text: str) -> list[dict[str, Any]]:
    reader = csv.DictReader(io.StringIO(csv_text))
    valid, missing = validate_csv_columns(reader.fieldnames or [])
    if not valid:
        raise ValueError(f"Missing required columns: {missing}")

    rows: list[dict[str, Any]] = []
    for line_no, row in enumerate(reader, start=2):
        name = (row["name"] or "").strip()
        if not name:
            raise ValueError(f"Row {line_no}: career name is required")
        rows.append(
            {
                "name": name,
                "active": _parse_bool(row["active"]),
                "category": (row["category"] or "").strip() or None,
                "min_grades_json": _parse_json_or_empty(row["min_grades_json"]),
                "country_baselines_json": _parse_json_or_empty(row["country_baselines_json"]),
                "qualification_levels_json": _parse_json_or_empty(row["qualification_levels_json"]),
                "sources_json": _parse_json_or_empty(row["sources_json"]),
                "verification_status": _parse_status(row["verification_status"]),
                "last_verified": _parse_date(row["last_verified"]),
            }
        )
    return rows


def careers_to_csv(rows: list[dict[str, Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=sorted(REQUIRED_CAREER_COLUMNS), lineterminator="\n")
    writer.writeheader()
    for row in rows:
        last_verified = row.get("last_verified")
        writer.writerow(
            {
                "name": row["name"],
                "active": "true" if row.get("active", True) else "false",
                "category": row.get("category") or "",
                "min_grades_json": json.dumps(row.get("min_grades_json") or {}),
                "country_baselines_json": json.dumps(row.get("country_baselines_json") or {}),
                "qualification_levels_json": json.dumps(row.get("qualification_levels_json") or {}),
                "sources_json": json.dumps(row.get("sources_json") or {}),
                "verification_status": row.get("verification_status") or "",
                "last_verified": last_verified.isoformat() if isinstance(last_verified, date) else (last_verified or ""),
            }
        )
    return buffer.getvalue()


def preview_diff(db: Session, rows: list[dict[str, Any]]) -> dict[str, int]:
    existing = set(db.scalars(select(Career.name).where(Career.name.in_([row["name"] for row in rows]))).all())
    to_update = sum(1 for row in rows if row["name"] in existing)
    return {"insert": len(rows) - to_update, "update": to_update}


def upsert_careers(db: Session, rows: list[dict[str, Any]], actor_user_id: str | None = None, source: str = "csv") -> dict[str, int]:
    existing_map = {
        c.name: c for c in db.scalars(select(Career).where(Career.name.in_([row["name"] for row in rows]))).all()
    }

    inserted = 0
    updated = 0
    for row in rows:
        existing = existing_map.get(row["name"])
        if existing:
            for key, value in row.items():
                setattr(existing, key, value)
            updated += 1
        else:
            db.add(Career(**row))
            inserted += 1

    db.add(
        AuditLog(
            user_id=uuid.UUID(actor_user_id) if actor_user_id else None,
            action="careers_upsert",
            details_json={
                "source": source,
                "inserted": inserted,
                "updated": updated,
                "careers": [r["name"] for r in rows],
            },
        )
    )
    logger.info("Career upsert from %s: %d inserted, %d updated", source, inserted, updated)
    return {"inserted": inserted, "updated": updated}


def seed_countries(db: Session) -> None:
    for item in DEFAULT_COUNTRIES:
        exists = db.scalar(select(Country).where(Country.code == item["code"]))
        if not exists:
            db.add(Country(**item))


def set_active_countries(db: Session, codes: list[str], actor_user_id: str | None = None) -> dict[str, list[str]]:
    wanted = {code.upper() for code in codes}
    activated: list[str] = []
    deactivated: list[str] = []
    for country in db.scalars(select(Country)).all():
        should_be_active = country.code in wanted
        if country.active != should_be_active:
            country.active = should_be_active
            (activated if should_be_active else deactivated).append(country.code)

    db.add(
        AuditLog(
            user_id=uuid.UUID(actor_user_id) if actor_user_id else None,
            action="countries_activation",
            details_json={"activated": activated, "deactivated": deactivated},
        )
    )
    return {"activated": activated, "deactivated": deactivated}


def seed_country_subjects(db: Session) -> dict[str, int]:
    created = 0
    groups_updated = 0
    for code in COUNTRY_SUBJECTS:
        if code == DEFAULT_COUNTRY_KEY:
            continue
        groups = [group.as_record() for group in DEFAULT_EITHER_OR_GROUPS.get(code, ())]
        record = db.scalar(select(CountrySubjects).where(CountrySubjects.country_code == code))
        if not record:
            db.add(
                CountrySubjects(
                    country_code=code,
                    subjects_json=subjects_for_country(code),
                    subject_aliases_json=dict(COUNTRY_SUBJECT_ALIASES.get(code, {})),
                    either_or_groups_json=groups,
                )
            )
            created += 1
        elif groups and record.either_or_groups_json != groups:
            record.either_or_groups_json = groups
            groups_updated += 1
    if groups_updated:
        logger.info("Updated either-or groups for %d countries", groups_updated)
    return {"created": created, "groups_updated": groups_updated}


def seed_admin_users(db: Session) -> None:
    admin_email = os.getenv("CAREERGUIDE_ADMIN_EMAIL", "admin@careerguide.local")
    admin_pass = os.getenv("CAREERGUIDE_ADMIN_PASSWORD", "Admin123!")
    _user, created = create_admin_user(db, admin_email, admin_pass, role="admin", display_name="Administrator")
    if created:
        logger.info("Created default admin user %s", admin_email)


def seed_careers_if_empty(db: Session, sample_csv_path: str = "data/careers.sample.csv") -> dict[str, int]:
    total = db.scalar(select(func.count()).select_from(Career))
    if total and total > 0:
        return {"inserted": 0, "updated": 0}

    path = Path(sample_csv_path)
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_default_sample_csv(), encoding="utf-8")

    rows = load_careers_from_csv(path.read_text(encoding="utf-8"))
    return upsert_careers(db, rows, source="seed")


def _default_sample_csv() -> str:
    sample_path = Path("data/careers.sample.csv")
    if sample_path.exists():
        return sample_path.read_text(encoding="utf-8")
    return careers_to_csv([{**career, "active": True} for career in SAMPLE_CAREERS])
