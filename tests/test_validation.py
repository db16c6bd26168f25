from datetime import date, timedelta

from validation import (
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    check_verification,
    normalize_career_record,
    normalize_requirement_keys,
    validate_career_requirements,
)

TODAY = date(2026, 1, 1)


def za_career(min_grades: dict, **extra) -> dict:
    return {
        "name": "Engineer",
        "qualification_levels_json": {"ZA": [{"level": "Degree", "minGrades": min_grades}]},
        **extra,
    }


def test_validate_flags_unknown_subjects_and_bad_thresholds() -> None:
    career = za_career({"Math": 60, "ComputerStudies": 50, "Physical Sciences": 60, "English": 120})

    issues = validate_career_requirements(career, "ZA")

    messages = {issue.message: issue.severity for issue in issues}
    assert len(issues) == 3
    assert messages["Subject 'ComputerStudies' is not in the ZA curriculum"] == SEVERITY_ERROR
    assert messages["Subject 'Physical Sciences' should be stored as 'Physics'"] == SEVERITY_WARNING
    assert messages["English: threshold 120 is outside 0-100"] == SEVERITY_ERROR
    assert all(issue.career == "Engineer" and issue.country == "ZA" for issue in issues)


def test_validate_reports_non_numeric_threshold() -> None:
    issues = validate_career_requirements(za_career({"Math": "high"}), "ZA")

    assert [issue.severity for issue in issues] == [SEVERITY_ERROR]


def test_validate_warns_when_no_requirements() -> None:
    issues = validate_career_requirements({"name": "Poet", "min_grades_json": {}}, "ZA")

    assert len(issues) == 1
    assert issues[0].severity == SEVERITY_WARNING


def test_validate_accepts_explicit_curriculum() -> None:
    issues = validate_career_requirements(za_career({"Robotics": 60}), "ZA", valid_codes={"Robotics"})

    assert issues == []


def test_normalize_requirement_keys() -> None:
    assert normalize_requirement_keys({"Mathematics": 60, "English": 50}, "ZA") == ({"Math": 60, "English": 50}, True)
    assert normalize_requirement_keys({"Math": 60}, "ZA") == ({"Math": 60}, False)
    assert normalize_requirement_keys(None) == ({}, False)


def test_normalize_career_record_rewrites_every_requirement_block() -> None:
    career = {
        "min_grades_json": {"Mathematics": 60},
        "country_baselines_json": {"KE": {"Computer Studies": 50}},
        "qualification_levels_json": {"ZA": [{"level": "Degree", "minGrades": {"Life Sciences": 70}}]},
    }

    updates, changed = normalize_career_record(career)

    assert changed is True
    assert updates["min_grades_json"] == {"Math": 60}
    assert updates["country_baselines_json"] == {"KE": {"ComputerStudies": 50}}
    assert updates["qualification_levels_json"]["ZA"][0] == {"level": "Degree", "minGrades": {"Biology": 70}}
    assert career["min_grades_json"] == {"Mathematics": 60}


def test_normalize_career_record_unchanged() -> None:
    _updates, changed = normalize_career_record({"min_grades_json": {"Math": 60}, "country_baselines_json": {"ZA": {"Biology": 70}}})

    assert changed is False


def test_recently_verified_career_is_healthy() -> None:
    report = check_verification({"verification_status": "verified", "last_verified": date(2025, 12, 1)}, today=TODAY)

    assert report.health == "healthy"
    assert report.days_old == 31


def test_missing_status_and_date_are_critical() -> None:
    report = check_verification({}, today=TODAY)

    assert report.issues == ["No verification status set", "No verification date recorded"]
    assert report.days_old is None
    assert report.health == "critical"


def test_verification_age_thresholds() -> None:
    expiring = check_verification({"verification_status": "verified", "last_verified": TODAY - timedelta(days=300)}, today=TODAY)
    stale = check_verification({"verification_status": "verified", "last_verified": TODAY - timedelta(days=400)}, today=TODAY)
    custom = check_verification(
        {"verification_status": "verified", "last_verified": TODAY - timedelta(days=100)}, threshold_days=90, today=TODAY
    )

    assert expiring.warnings == ["Verification expiring soon (300 days old)"]
    assert expiring.issues == []
    assert stale.issues == ["Verified 400 days ago (threshold: 365 days)"]
    assert custom.health == "critical"


def test_verification_status_values() -> None:
    estimated = check_verification({"verificationStatus": "estimated", "lastVerified": "2025-12-01"}, today=TODAY)
    review = check_verification({"verification_status": "needs-review", "last_verified": "2025-12-01"}, today=TODAY)

    assert estimated.issues == ["Data is estimated, not verified"]
    assert estimated.days_old == 31
    assert review.warnings == ["Marked as needs review"]
    assert review.health == "warning"


def test_qualification_levels_are_checked_per_country() -> None:
    career = {
        "verification_status": "verified",
        "last_verified": date(2025, 12, 1),
        "qualification_levels_json": {
            "ZA": [
                {"level": "Degree", "minGrades": {"Math": 70}},
                {"level": "Diploma", "minGrades": {"Math": 50}, "sources": {"institution": "TUT"}},
                {"level": "Certificate", "sources": {"url": "https://example.ac.za"}},
            ]
        },
        "country_baselines_json": {"KE": {"Math": 65}},
    }

    za = check_verification(career, country_code="ZA", today=TODAY)
    ke = check_verification(career, country_code="KE", today=TODAY)
    ng = check_verification(career, country_code="NG", today=TODAY)

    assert za.warnings == ["Degree: No source attribution", "Diploma: No source URL"]
    assert za.issues == ["Certificate: No grade requirements specified"]
    assert ke.warnings == ["Using country baseline requirements for KE"]
    assert ng.issues == ["No requirements for country: NG"]
