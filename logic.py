from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Iterator, Mapping

from subjects import EitherOrGroup, alias_table, either_or_groups_for, normalize_subject_map


STATUS_QUALIFIED = "qualified"
STATUS_CLOSE = "close"
STATUS_NEEDS_IMPROVEMENT = "needs-improvement"
STATUSES = (STATUS_QUALIFIED, STATUS_CLOSE, STATUS_NEEDS_IMPROVEMENT)

# A grade within this fraction of the requirement counts as close (inclusive).
CLOSE_RATIO = 0.9
# Minimum match score for a career with missing subjects to still be close.
CLOSE_MATCH_SCORE = 60
# Stands in for a requirement threshold that is not a number; no grade meets it.
UNMEETABLE = math.inf

OUTCOME_MET = "met"
OUTCOME_CLOSE = "close"
OUTCOME_MISSING = "missing"


@dataclass(frozen=True)
class GroupEvaluation:
    met: bool
    met_or_close: bool
    effective_grade: float
    effective_requirement: float


@dataclass(frozen=True)
class EligibilityVerdict:
    status: str
    match_score: int
    met_requirements: int
    total_requirements: int
    missing_subjects: tuple[str, ...] = ()
    close_subjects: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "match_score": self.match_score,
            "met_requirements": self.met_requirements,
            "total_requirements": self.total_requirements,
            "missing_subjects": list(self.missing_subjects),
            "close_subjects": list(self.close_subjects),
        }


def _field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def _first_field(record: Any, *names: str) -> Any:
    for name in names:
        value = _field(record, name)
        if value is not None:
            return value
    return None


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        value = float(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _as_dict(value: Any) -> dict[str, Any]:
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def _numeric_map(mapping: Any) -> dict[str, float]:
    numeric: dict[str, float] = {}
    for key, value in _as_dict(mapping).items():
        number = _to_float(value)
        if number is not None:
            numeric[key] = number
    return numeric


def _requirement_map(mapping: Any) -> dict[str, float]:
    required: dict[str, float] = {}
    for key, value in _as_dict(mapping).items():
        number = _to_float(value)
        required[key] = UNMEETABLE if number is None else number
    return required


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _coerce_groups(groups: Iterable[Any] | None, country_code: str | None) -> tuple[EitherOrGroup, ...]:
    source = either_or_groups_for(country_code) if groups is None else groups
    coerced = [EitherOrGroup.from_record(item) for item in source]
    return tuple(group for group in coerced if group is not None)


def _group_for(subject: str, groups: Iterable[EitherOrGroup]) -> EitherOrGroup | None:
    for group in groups:
        if subject in group.subjects:
            return group
    return None


def classify(current: float, required: float) -> str:
    if current >= required:
        return OUTCOME_MET
    # Rounded so that e.g. 70 * 0.9 compares as 63 rather than 63.00000000000001.
    if current >= round(required * CLOSE_RATIO, 9):
        return OUTCOME_CLOSE
    return OUTCOME_MISSING


def resolve_grade(
    grades: Mapping[str, Any] | None,
    subject: str,
    country_code: str | None = None,
    groups: Iterable[Any] | None = None,
) -> float:
    grade_map = _numeric_map(grades)
    candidates: list[float] = []
    if subject in grade_map:
        candidates.append(grade_map[subject])

    group = _group_for(subject, _coerce_groups(groups, country_code))
    if group:
        candidates.extend(grade_map[sibling] for sibling in group.siblings(subject) if sibling in grade_map)

    return max(candidates) if candidates else 0.0


def evaluate_group(
    grades: Mapping[str, Any] | None,
    requirements: Mapping[str, Any] | None,
    group: EitherOrGroup | Mapping[str, Any],
) -> GroupEvaluation:
    group = EitherOrGroup.from_record(group) or EitherOrGroup(())
    grade_map = _numeric_map(grades)
    required_map = _requirement_map(requirements)

    member_grades = [grade_map[code] for code in group.subjects if code in grade_map]
    member_requirements = [required_map[code] for code in group.subjects if code in required_map]
    effective_grade = max(member_grades) if member_grades else 0.0
    # No member is required: the group does not apply and counts as unmet.
    if not member_requirements:
        return GroupEvaluation(met=False, met_or_close=False, effective_grade=effective_grade, effective_requirement=0.0)
    effective_requirement = min(member_requirements)

    outcome = classify(effective_grade, effective_requirement)
    return GroupEvaluation(
        met=outcome == OUTCOME_MET,
        met_or_close=outcome != OUTCOME_MISSING,
        effective_grade=effective_grade,
        effective_requirement=effective_requirement,
    )


def _requirement_units(
    grades: Mapping[str, Any] | None,
    requirements: Mapping[str, Any] | None,
    country_code: str | None,
    groups: Iterable[Any] | None,
    aliases: Mapping[str, str] | None,
) -> Iterator[tuple[str, float, float]]:
    table = aliases if aliases is not None else alias_table(country_code)
    grade_map = normalize_subject_map(_numeric_map(grades), aliases=table)
    required_map = normalize_subject_map(_requirement_map(requirements), aliases=table)
    group_list = _coerce_groups(groups, country_code)
    processed: set[str] = set()

    for group in group_list:
        members = [code for code in group.subjects if code in required_map and code not in processed]
        if len(members) < 2:
            continue
        combined = evaluate_group(grade_map, {code: required_map[code] for code in members}, group)
        processed.update(group.subjects)
        yield "/".join(members), combined.effective_grade, combined.effective_requirement

    for subject, required in required_map.items():
        if subject in processed:
            continue
        yield subject, resolve_grade(grade_map, subject, groups=group_list), required


def _status(missing: list[str], close: list[str], match_score: int, total: int) -> str:
    if total == 0:
        return STATUS_NEEDS_IMPROVEMENT
    if not missing and not close:
        return STATUS_QUALIFIED
    if not missing:
        return STATUS_CLOSE
    if match_score >= CLOSE_MATCH_SCORE:
        return STATUS_CLOSE
    return STATUS_NEEDS_IMPROVEMENT


def check_eligibility(
    grades: Mapping[str, Any] | None,
    requirements: Mapping[str, Any] | None,
    country_code: str | None = None,
    groups: Iterable[Any] | None = None,
    aliases: Mapping[str, str] | None = None,
) -> EligibilityVerdict:
    """Compare a learner's grades with one career's requirement set.

    Either-or groups with two or more members in the requirement set are
    scored once against the lowest member threshold. Absent or non-numeric
    grades count as 0, thresholds that are not numbers can never be met, and
    the function never raises.
    """
    missing: list[str] = []
    close: list[str] = []
    met = 0
    total = 0

    for label, current, required in _requirement_units(grades, requirements, country_code, groups, aliases):
        total += 1
        outcome = classify(current, required)
        if outcome == OUTCOME_MET:
            met += 1
        elif outcome == OUTCOME_CLOSE:
            close.append(label)
        else:
            missing.append(label)

    match_score = _round_half_up(100 * met / total) if total > 0 else 0
    return EligibilityVerdict(
        status=_status(missing, close, match_score, total),
        match_score=match_score,
        met_requirements=met,
        total_requirements=total,
        missing_subjects=tuple(missing),
        close_subjects=tuple(close),
    )


def calculate_improvements(
    grades: Mapping[str, Any] | None,
    requirements: Mapping[str, Any] | None,
    country_code: str | None = None,
    groups: Iterable[Any] | None = None,
    aliases: Mapping[str, str] | None = None,
) -> dict[str, float]:
    improvements: dict[str, float] = {}
    for label, current, required in _requirement_units(grades, requirements, country_code, groups, aliases):
        if current < required and required != UNMEETABLE:
            improvements[label] = round(required - current, 2)
    return improvements


def requirements_for_country(career: Any, country_code: str | None) -> dict[str, Any]:
    code = (country_code or "").upper()
    min_grades = _as_dict(_first_field(career, "min_grades_json", "minGrades", "min_grades"))

    qualification_levels = _as_dict(_first_field(career, "qualification_levels_json", "qualificationLevels", "qualification_levels"))
    levels = qualification_levels.get(code) or []
    if isinstance(levels, list) and levels:
        first_level = _as_dict(levels[0])
        level_grades = _as_dict(first_level.get("minGrades") or first_level.get("min_grades"))
        if level_grades:
            return level_grades

    baselines = _as_dict(_first_field(career, "country_baselines_json", "countryBaselines", "country_baselines"))
    baseline = _as_dict(baselines.get(code))
    if baseline:
        return {**min_grades, **baseline}

    return min_grades


def evaluate_careers(
    grades: Mapping[str, Any] | None,
    careers: Iterable[Any],
    country_code: str | None,
    groups: Iterable[Any] | None = None,
    aliases: Mapping[str, str] | None = None,
) -> list[dict[str, Any]]:
    if not grades:
        return []

    table = aliases if aliases is not None else alias_table(country_code)
    group_list = _coerce_groups(groups, country_code)

    results: list[dict[str, Any]] = []
    for career in careers or []:
        requirements = requirements_for_country(career, country_code)
        verdict = check_eligibility(grades, requirements, country_code, groups=group_list, aliases=table)
        results.append(
            {
                "career": career,
                "career_name": _field(career, "name"),
                "category": _field(career, "category"),
                "requirements": requirements,
                "verdict": verdict,
            }
        )
    return results


def filter_by_status(results: Iterable[dict[str, Any]], status: str) -> list[dict[str, Any]]:
    return [item for item in results if item["verdict"].status == status]


def group_by_status(results: Iterable[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    buckets: dict[str, list[dict[str, Any]]] = {status: [] for status in STATUSES}
    for item in results:
        buckets[item["verdict"].status].append(item)
    return buckets
