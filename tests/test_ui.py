from logic import STATUS_NEEDS_IMPROVEMENT, check_eligibility
from ui import entered_grades, t


def test_entered_grades_keeps_explicit_zero_marks() -> None:
    marks = {"Math": 72, "Physics": 0, "Biology": None, "English": 55.5}

    grades = entered_grades(marks)

    assert grades == {"Math": 72.0, "Physics": 0.0, "English": 55.5}
    assert "Biology" not in grades


def test_entered_grades_with_all_subjects_blank_is_empty() -> None:
    assert entered_grades({"Math": None, "English": None}) == {}


def test_zero_mark_is_kept_in_the_evaluated_grades() -> None:
    grades = entered_grades({"Math": 0})

    verdict = check_eligibility(grades, {"Math": 50}, "ZA")

    assert grades == {"Math": 0.0}
    assert verdict.missing_subjects == ("Math",)
    assert verdict.status == STATUS_NEEDS_IMPROVEMENT


def test_grades_hint_explains_blank_versus_zero() -> None:
    hint = t("en", "grades_hint")

    assert "blank" in hint
    assert "0" in hint
