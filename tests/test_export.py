import json

from export import build_json_summary, build_pdf_report, build_session_payload
from logic import calculate_improvements, evaluate_careers


def sample_results() -> list[dict]:
    grades = {"Math": 90, "English": 80, "CAT": 90}
    careers = [
        {"name": "IT Specialist", "category": "IT", "minGrades": {"Math": 60, "IT": 50}},
        {"name": "Doctor", "category": "Medicine", "minGrades": {"Biology": 75, "Chemistry": 75}},
    ]
    results = evaluate_careers(grades, careers, "ZA")
    for item in results:
        item["improvements"] = calculate_improvements(grades, item["requirements"], "ZA")
    return results


def profile() -> dict:
    return {"country_code": "ZA", "country_name": "South Africa", "grade_level": "Grade 12 (Matric)", "grades": {"Math": 90}}


def test_session_payload_groups_careers_by_status() -> None:
    payload = build_session_payload(profile(), sample_results())

    assert payload["counts"] == {"qualified": 1, "close": 0, "needs-improvement": 1}
    doctor = payload["careers"]["needs-improvement"][0]
    assert doctor["career_name"] == "Doctor"
    assert doctor["missing_subjects"] == ["Biology", "Chemistry"]
    assert doctor["improvements"] == {"Biology": 75.0, "Chemistry": 75.0}
    assert "career" not in doctor


def test_json_summary_is_valid_json() -> None:
    raw = build_json_summary(build_session_payload(profile(), sample_results()))

    decoded = json.loads(raw.decode("utf-8"))
    assert decoded["profile"]["country_code"] == "ZA"
    assert decoded["careers"]["qualified"][0]["match_score"] == 100


def test_pdf_report_renders() -> None:
    pdf = build_pdf_report(profile(), sample_results(), ["Requirements are indicative."])

    assert pdf.startswith(b"%PDF")
