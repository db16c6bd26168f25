from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Mapping

from logic import _as_dict, _field, _first_field, _to_float, requirements_for_country
from subjects import alias_table, normalize_subject, normalize_subject_map, valid_subject_codes

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

VERIFICATION_THRESHOLD_DAYS = 365
# Verifications older than this share of the threshold are flagged as expiring.
EXPIRY_WARNING_RATIO = 0.8


@dataclass(frozen=True)
class ValidationIssue:
    career: str
    country: str
    severity: str
    message: str


@dataclass
class VerificationReport:
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    days_old: int | None = None

    @property
    def health(self) -> str:
        if self.issues:
            return "critical"
        if self.warnings:
            return "warning"
        return "healthy"


def validate_career_requirements(
    career: Any,
    country_code: str,
    valid_codes: Iterable[str] | None = None,
) -> list[ValidationIssue]:
    name = str(_field(career, "name") or "?")
    code = (country_code or "").upper()
    valid = set(valid_codes) if valid_codes is not None else valid_subject_codes(code)
    table = alias_table(code)
    requirements = requirements_for_country(career, code)

    if not requirements:
        return [ValidationIssue(name, code, SEVERITY_WARNING, "No requirements defined")]

    found: list[ValidationIssue] = []
    for subject, threshold in requirements.items():
        standard = normalize_subject(subject, aliases=table)
        if standard not in valid:
            found.append(ValidationIssue(name, code, SEVERITY_ERROR, f"Subject '{subject}' is not in the {code} curriculum"))
        elif standard != subject:
            found.append(ValidationIssue(name, code, SEVERITY_WARNING, f"Subject '{subject}' should be stored as '{standard}'"))

        number = _to_float(threshold)
        if number is None:
            found.append(ValidationIssue(name, code, SEVERITY_ERROR, f"{subject}: threshold {threshold!r} is not a number"))
        elif not 0 <= number <= 100:
            found.append(ValidationIssue(name, code, SEVERITY_ERROR, f"{subject}: threshold {threshold} is outside 0-100"))
    return found


def normalize_requirement_keys(requirements: Mapping[str, Any] | None, country_code: str | None = None) -> tuple[dict[str, Any], bool]:
    original = _as_dict(requirements)
    normalized = normalize_subject_map(original, country_code)
    return normalized, normalized != original


def normalize_career_record(career: Any) -> tuple[dict[str, Any], bool]:
    changed = False

    min_grades, touched = normalize_requirement_keys(_first_field(career, "min_grades_json", "minGrades", "min_grades"))
    changed |= touched

    baselines: dict[str, Any] = {}
    for code, grades in _as_dict(_first_field(career, "country_baselines_json", "countryBaselines", "country_baselines")).items():
        baselines[code], touched = normalize_requirement_keys(grades, code)
        changed |= touched

    levels_by_country: dict[str, Any] = {}
    for code, levels in _as_dict(_first_field(career, "qualification_levels_json", "qualificationLevels", "qualification_levels")).items():
        if not isinstance(levels, list):
            levels_by_country[code] = levels
            continue
        updated_levels = []
        for level in levels:
            level = _as_dict(level)
            if isinstance(level.get("minGrades"), Mapping):
                level["minGrades"], touched = normalize_requirement_keys(level["minGrades"], code)
                changed |= touched
            updated_levels.append(level)
        levels_by_country[code] = updated_levels

    updates = {
        "min_grades_json": min_grades,
        "country_baselines_json": baselines,
        "qualification_levels_json": levels_by_country,
    }
    return updates, changed


def _as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def check_verification(
    career: Any,
    threshold_days: int = VERIFICATION_THRESHOLD_DAYS,
    country_code: str | None = None,
    today: date | None = None,
) -> VerificationReport:
    report = VerificationReport()
    today = today or date.today()

    status = _first_field(career, "verification_status", "verificationStatus")
    if not status:
        report.issues.append("No verification status set")
    elif status == "estimated":
        report.issues.append("Data is estimated, not verified")
    elif status == "needs-review":
        report.warnings.append("Marked as needs review")

    verified_on = _as_date(_first_field(career, "last_verified", "lastVerified"))
    if verified_on is None:
        report.issues.append("No verification date recorded")
    else:
        report.days_old = (today - verified_on).days
        if report.days_old > threshold_days:
            report.issues.append(f"Verified {report.days_old} days ago (threshold: {threshold_days} days)")
        elif report.days_old > threshold_days * EXPIRY_WARNING_RATIO:
            report.warnings.append(f"Verification expiring soon ({report.days_old} days old)")

    if country_code:
        code = country_code.upper()
        levels = _as_dict(_first_field(career, "qualification_levels_json", "qualificationLevels")).get(code)
        if not levels:
            baselines = _as_dict(_first_field(career, "country_baselines_json", "countryBaselines"))
            if baselines.get(code):
                report.warnings.append(f"Using country baseline requirements for {code}")
            else:
                report.issues.append(f"No requirements for country: {code}")
        else:
            for level in levels:
                level = _as_dict(level)
                label = level.get("level") or "Unnamed level"
                sources = level.get("sources")
                if not sources:
                    report.warnings.append(f"{label}: No source attribution")
                elif not _as_dict(sources).get("url"):
                    report.warnings.append(f"{label}: No source URL")
                if not _as_dict(level.get("minGrades") or level.get("min_grades")):
                    report.issues.append(f"{label}: No grade requirements specified")
    return report
