import json
from types import SimpleNamespace

from logic import (
    STATUS_CLOSE,
    STATUS_NEEDS_IMPROVEMENT,
    STATUS_QUALIFIED,
    STATUSES,
    calculate_improvements,
    check_eligibility,
    classify,
    evaluate_careers,
    evaluate_group,
    filter_by_status,
    group_by_status,
    requirements_for_country,
    resolve_grade,
)
from subjects import EitherOrGroup


def learner_grades() -> dict:
    return {"Math": 90, "English": 80, "LifeOrientation": 80, "CAT": 90}


def sample_career() -> dict:
    return {
        "name": "Engineer",
        "category": "Engineering",
        "minGrades": {"Math": 60, "English": 50},
        "countryBaselines": {"KE": {"Math": 65}},
        "qualificationLevels": {
            "ZA": [{"level": "Degree", "minGrades": {"Math": 70}}],
            "NG": [{"level": "Diploma", "minGrades": {}}],
        },
    }


def test_either_or_pairs_and_sibling_substitution_qualify() -> None:
    verdict = check_eligibility(
        learner_grades(),
        {"Math": 60, "MathLiteracy": 60, "IT": 50, "English": 50, "EnglishFAL": 60},
        "ZA",
    )

    assert verdict.status == STATUS_QUALIFIED
    assert verdict.match_score == 100
    assert verdict.met_requirements == 3
    assert verdict.total_requirements == 3


def test_one_missing_subject_out_of_three_is_close() -> None:
    verdict = check_eligibility(learner_grades(), {"Math": 70, "Physics": 60, "English": 50, "EnglishFAL": 60}, "ZA")

    assert verdict.status == STATUS_CLOSE
    assert verdict.match_score == 67
    assert verdict.total_requirements == 3
    assert verdict.missing_subjects == ("Physics",)


def test_half_of_requirements_met_needs_improvement() -> None:
    verdict = check_eligibility(learner_grades(), {"Math": 70, "Physics": 70, "Biology": 70, "English": 60}, "ZA")

    assert verdict.status == STATUS_NEEDS_IMPROVEMENT
    assert verdict.match_score == 50
    assert verdict.total_requirements == 4
    assert verdict.missing_subjects == ("Physics", "Biology")


def test_empty_requirements_never_qualify() -> None:
    for grades in (learner_grades(), {}, None):
        verdict = check_eligibility(grades, {}, "ZA")
        assert verdict.status == STATUS_NEEDS_IMPROVEMENT
        assert verdict.match_score == 0
        assert verdict.total_requirements == 0


def test_close_boundary_is_inclusive() -> None:
    verdict = check_eligibility(learner_grades(), {"Math": 100, "English": 100}, "ZA")

    assert verdict.close_subjects == ("Math",)
    assert verdict.missing_subjects == ("English",)
    assert verdict.match_score == 0
    assert verdict.status == STATUS_NEEDS_IMPROVEMENT


def test_classify_boundaries() -> None:
    assert classify(70, 70) == "met"
    assert classify(63, 70) == "close"
    assert classify(62.99, 70) == "missing"
    assert classify(0, 0) == "met"


def test_match_score_of_sixty_with_missing_subject_is_close() -> None:
    grades = {"Math": 80, "English": 70, "Physics": 65, "Biology": 10, "History": 46}
    requirements = {"Math": 70, "English": 60, "Physics": 60, "Biology": 60, "History": 50}

    verdict = check_eligibility(grades, requirements, "ZA")

    assert verdict.match_score == 60
    assert verdict.missing_subjects == ("Biology",)
    assert verdict.close_subjects == ("History",)
    assert verdict.status == STATUS_CLOSE


def test_match_score_rounds_half_up() -> None:
    requirements = {f"S{i}": 50 for i in range(1, 9)}

    verdict = check_eligibility({"S1": 100}, requirements, "KE")

    assert verdict.met_requirements == 1
    assert verdict.match_score == 13


def test_raising_a_grade_never_lowers_the_verdict() -> None:
    rank = {STATUS_NEEDS_IMPROVEMENT: 0, STATUS_CLOSE: 1, STATUS_QUALIFIED: 2}
    requirements = {"Math": 70, "Physics": 60, "English": 50, "EnglishFAL": 55}
    base = {"Math": 50, "Physics": 55, "English": 40}
    before = check_eligibility(base, requirements, "ZA")

    for subject in ("Math", "MathLiteracy", "Physics", "English", "EnglishFAL"):
        for delta in (1, 5, 10, 30, 60):
            raised = dict(base)
            raised[subject] = raised.get(subject, 0) + delta
            after = check_eligibility(raised, requirements, "ZA")
            assert after.match_score >= before.match_score
            assert rank[after.status] >= rank[before.status]


def test_grade_under_either_member_gives_identical_verdict() -> None:
    for requirements in ({"Math": 60}, {"MathLiteracy": 60}):
        under_math = check_eligibility({"Math": 58}, requirements, "ZA")
        under_literacy = check_eligibility({"MathLiteracy": 58}, requirements, "ZA")
        assert under_math == under_literacy


def test_both_group_members_count_once() -> None:
    verdict = check_eligibility({"MathLiteracy": 55}, {"Math": 60, "MathLiteracy": 50}, "ZA")

    assert verdict.total_requirements == 1
    assert verdict.status == STATUS_QUALIFIED


def test_absent_grade_equals_zero_grade() -> None:
    requirements = {"Math": 60, "Physics": 50}

    assert check_eligibility({"Math": 80}, requirements, "ZA") == check_eligibility({"Math": 80, "Physics": 0}, requirements, "ZA")


def test_repeated_evaluation_is_identical() -> None:
    requirements = {"Math": 70, "Physics": 60, "English": 50, "EnglishFAL": 60}
    first = json.dumps(check_eligibility(learner_grades(), requirements, "ZA").as_dict())

    for _ in range(3):
        assert json.dumps(check_eligibility(learner_grades(), requirements, "ZA").as_dict()) == first


def test_display_names_are_normalized_on_both_sides() -> None:
    verdict = check_eligibility(
        {"Mathematics": 75, "english home language": 65},
        {"Math": 70, "Physical Sciences": 60, "English": 60},
        "ZA",
    )

    assert verdict.total_requirements == 3
    assert verdict.met_requirements == 2
    assert verdict.missing_subjects == ("Physics",)


def test_malformed_input_degrades_to_non_qualifying() -> None:
    verdict = check_eligibility({"Math": "abc", "English": None}, {"Math": 50, "English": "sixty", "Physics": 40}, "ZA")

    assert verdict.total_requirements == 3
    assert verdict.met_requirements == 0
    assert verdict.missing_subjects == ("Math", "English", "Physics")
    assert verdict.status == STATUS_NEEDS_IMPROVEMENT

    assert check_eligibility("not grades", ["not", "requirements"]).total_requirements == 0


def test_non_numeric_threshold_can_never_be_met() -> None:
    requirements = {"Math": 50, "Physics": "sixty"}

    verdict = check_eligibility({"Math": 90, "Physics": 100}, requirements, "ZA")

    assert verdict.total_requirements == 2
    assert verdict.met_requirements == 1
    assert verdict.missing_subjects == ("Physics",)
    assert verdict.match_score == 50
    assert verdict.status == STATUS_NEEDS_IMPROVEMENT
    assert calculate_improvements({"Math": 90}, requirements, "ZA") == {}


def test_malformed_threshold_in_a_group_falls_back_to_the_other_member() -> None:
    assert check_eligibility({"MathLiteracy": 65}, {"Math": "n/a", "MathLiteracy": 60}, "ZA").status == STATUS_QUALIFIED

    verdict = check_eligibility({"Math": 100}, {"Math": None, "MathLiteracy": "high"}, "ZA")
    assert verdict.total_requirements == 1
    assert verdict.missing_subjects == ("Math/MathLiteracy",)


def test_numeric_strings_are_accepted() -> None:
    assert check_eligibility({"Math": "75"}, {"Math": "70"}, "ZA").status == STATUS_QUALIFIED


def test_explicit_empty_group_list_disables_substitution() -> None:
    assert check_eligibility({"CAT": 90}, {"IT": 50}, "ZA").status == STATUS_QUALIFIED
    assert check_eligibility({"CAT": 90}, {"IT": 50}, "ZA", groups=[]).status == STATUS_NEEDS_IMPROVEMENT


def test_resolve_grade_uses_best_group_member() -> None:
    assert resolve_grade({"CAT": 90}, "IT", "ZA") == 90
    assert resolve_grade({"IT": 40, "CAT": 90}, "IT", "ZA") == 90
    assert resolve_grade({"IT": 70}, "IT", "ZA") == 70
    assert resolve_grade({}, "Physics", "ZA") == 0.0
    assert resolve_grade({"CAT": 90}, "IT", "KE") == 0.0


def test_evaluate_group_uses_lowest_member_requirement() -> None:
    group = EitherOrGroup(("Math", "MathLiteracy"))

    result = evaluate_group({"MathLiteracy": 58}, {"Math": 70, "MathLiteracy": 60}, group)

    assert result.effective_grade == 58
    assert result.effective_requirement == 60
    assert result.met is False
    assert result.met_or_close is True

    from_record = evaluate_group({"Math": 75}, {"Math": 70, "MathLiteracy": 60}, {"subjects": ["Math", "MathLiteracy"]})
    assert from_record.met is True


def test_evaluate_group_without_required_members_is_unmet() -> None:
    unrelated = evaluate_group({}, {"Physics": 60}, {"subjects": ["Math", "MathLiteracy"]})
    single_member = evaluate_group({"Math": 0}, {"Math": 0}, {"subjects": ["Math"]})

    assert unrelated.met is False
    assert unrelated.met_or_close is False
    assert single_member.met is False
    assert single_member.met_or_close is False


def test_calculate_improvements_reports_points_needed() -> None:
    requirements = {"Math": 70, "MathLiteracy": 60, "Physics": 50}

    assert calculate_improvements({"Math": 65}, requirements, "ZA") == {"Physics": 50.0}
    assert calculate_improvements({"Math": 55}, requirements, "ZA") == {"Math/MathLiteracy": 5.0, "Physics": 50.0}
    assert calculate_improvements({"Math": 99, "Physics": 51}, requirements, "ZA") == {}


def test_requirements_for_country_priority() -> None:
    career = sample_career()

    assert requirements_for_country(career, "ZA") == {"Math": 70}
    assert requirements_for_country(career, "ke") == {"Math": 65, "English": 50}
    assert requirements_for_country(career, "NG") == {"Math": 60, "English": 50}
    assert requirements_for_country(career, None) == {"Math": 60, "English": 50}


def test_requirements_for_country_reads_stored_columns() -> None:
    career = SimpleNamespace(
        min_grades_json={"Biology": 65},
        country_baselines_json={"ZA": {"Biology": 70, "Chemistry": 65}},
        qualification_levels_json={},
    )

    assert requirements_for_country(career, "ZA") == {"Biology": 70, "Chemistry": 65}


def test_evaluate_careers_keeps_catalog_order() -> None:
    careers = [
        {"name": "Doctor", "category": "Medicine", "minGrades": {"Biology": 75, "Chemistry": 75}},
        {"name": "Teacher", "category": "Education", "minGrades": {"English": 55, "Math": 50}},
        sample_career(),
    ]

    results = evaluate_careers(learner_grades(), careers, "ZA")

    assert [item["career_name"] for item in results] == ["Doctor", "Teacher", "Engineer"]
    assert results[2]["requirements"] == {"Math": 70}
    assert results[0]["verdict"].status == STATUS_NEEDS_IMPROVEMENT
    assert results[1]["verdict"].status == STATUS_QUALIFIED

    buckets = group_by_status(results)
    assert list(buckets) == list(STATUSES)
    assert [item["career_name"] for item in buckets[STATUS_QUALIFIED]] == ["Teacher", "Engineer"]
    assert buckets[STATUS_CLOSE] == []
    assert filter_by_status(results, STATUS_NEEDS_IMPROVEMENT) == buckets[STATUS_NEEDS_IMPROVEMENT]


def test_evaluate_careers_without_grades_is_empty() -> None:
    assert evaluate_careers({}, [sample_career()], "ZA") == []
