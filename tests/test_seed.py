from datetime import date

import pytest

from seed import SAMPLE_CAREERS, _parse_json_or_empty, careers_to_csv, load_careers_from_csv, validate_csv_columns
from validation import SEVERITY_ERROR, validate_career_requirements

HEADER = "name,active,category,min_grades_json,country_baselines_json,qualification_levels_json,sources_json,verification_status,last_verified"


def test_sample_catalog_loads_from_csv() -> None:
    rows = load_careers_from_csv(careers_to_csv([{**career, "active": True} for career in SAMPLE_CAREERS]))

    assert [row["name"] for row in rows] == [career["name"] for career in SAMPLE_CAREERS]
    it_specialist = rows[0]
    assert it_specialist["active"] is True
    assert it_specialist["last_verified"] == date(2025, 1, 15)
    assert it_specialist["qualification_levels_json"]["ZA"][0]["minGrades"]["IT"] == 50
    assert rows[2]["last_verified"] is None
    assert rows[4]["verification_status"] == "estimated"


def test_sample_catalog_uses_south_african_subjects() -> None:
    errors = [
        issue
        for career in SAMPLE_CAREERS
        for issue in validate_career_requirements(career, "ZA")
        if issue.severity == SEVERITY_ERROR
    ]

    assert errors == []


def test_csv_parsing_of_single_row() -> None:
    csv_text = (
        HEADER
        + "\n"
        + "Pharmacist,yes,Medicine,\"{'Chemistry': 70}\",{},,,,2025-06-30\n"
    )

    rows = load_careers_from_csv(csv_text)

    assert rows == [
        {
            "name": "Pharmacist",
            "active": True,
            "category": "Medicine",
            "min_grades_json": {"Chemistry": 70},
            "country_baselines_json": {},
            "qualification_levels_json": {},
            "sources_json": {},
            "verification_status": None,
            "last_verified": date(2025, 6, 30),
        }
    ]


def test_missing_columns_are_rejected() -> None:
    ok, missing = validate_csv_columns(["name", "active"])

    assert ok is False
    assert "min_grades_json" in missing
    with pytest.raises(ValueError, match="Missing required columns"):
        load_careers_from_csv("name,active\nNurse,true\n")


def test_malformed_values_are_rejected() -> None:
    with pytest.raises(ValueError, match="Invalid JSON"):
        load_careers_from_csv(HEADER + "\nNurse,true,Medicine,{not json,{},{},{},verified,2025-01-01\n")
    with pytest.raises(ValueError, match="verification_status"):
        load_careers_from_csv(HEADER + "\nNurse,true,Medicine,{},{},{},{},approved,2025-01-01\n")
    with pytest.raises(ValueError, match="Invalid date"):
        load_careers_from_csv(HEADER + "\nNurse,true,Medicine,{},{},{},{},verified,01/02/2025\n")
    with pytest.raises(ValueError, match="career name is required"):
        load_careers_from_csv(HEADER + "\n,true,Medicine,{},{},{},{},verified,2025-01-01\n")


def test_parse_json_or_empty_variants() -> None:
    assert _parse_json_or_empty("") == {}
    assert _parse_json_or_empty('{"Math": 60}') == {"Math": 60}
    assert _parse_json_or_empty("{'Math': 60}") == {"Math": 60}
    assert _parse_json_or_empty("[1, 2]") == {}
