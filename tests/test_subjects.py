from subjects import (
    EitherOrGroup,
    alias_table,
    all_standard_subjects,
    either_or_groups_for,
    grade_levels_for_country,
    normalize_subject,
    normalize_subject_map,
    subjects_for_country,
    valid_subject_codes,
)


def test_normalize_subject_maps_display_names() -> None:
    assert normalize_subject("Mathematics") == "Math"
    assert normalize_subject("Mathematical Literacy", "ZA") == "MathLiteracy"
    assert normalize_subject("Life Sciences", "ZA") == "Biology"
    assert normalize_subject("History and Government", "KE") == "History"


def test_normalize_subject_is_case_and_space_insensitive() -> None:
    assert normalize_subject("  mathematical literacy ", "ZA") == "MathLiteracy"
    assert normalize_subject("ENGLISH FAL", "ZA") == "EnglishFAL"


def test_normalize_subject_leaves_unknown_names_unchanged() -> None:
    assert normalize_subject("Astrophysics", "ZA") == "Astrophysics"
    assert normalize_subject("Math", "ZA") == "Math"
    assert normalize_subject(42) == 42
    assert normalize_subject(None) is None


def test_computer_alias_depends_on_country() -> None:
    assert normalize_subject("Computer", "ZA") == "IT"
    assert normalize_subject("Computer", "KE") == "ComputerStudies"
    assert normalize_subject("Computer", "ZW") == "ComputerStudies"
    assert normalize_subject("Computer", "NG") == "DataProcessing"
    assert normalize_subject("Computer") == "IT"


def test_alias_table_extra_aliases_take_precedence() -> None:
    table = alias_table("ZA", extra_aliases={"Maths Lit": "MathLiteracy", "Computer": "CAT"})

    assert normalize_subject("maths lit", aliases=table) == "MathLiteracy"
    assert normalize_subject("Computer", aliases=table) == "CAT"


def test_normalize_subject_map_combines_collisions_with_max() -> None:
    assert normalize_subject_map({"Mathematics": 60, "Math": 70}, "ZA") == {"Math": 70}
    assert normalize_subject_map({"Math": None, "Mathematics": 50}, "ZA") == {"Math": 50}
    assert normalize_subject_map({"Maths": "abc", "Math": 50}, "ZA") == {"Math": "abc"}
    assert normalize_subject_map(None) == {}


def test_either_or_group_from_record() -> None:
    group = EitherOrGroup.from_record({"subjects": ["Math", "Math", "MathLiteracy"], "description": "Math or Lit"})

    assert group.subjects == ("Math", "MathLiteracy")
    assert group.label == "Math/MathLiteracy"
    assert group.siblings("Math") == ("MathLiteracy",)
    assert group.as_record()["minRequired"] == 1

    assert EitherOrGroup.from_record({"subjects": ["Math"]}) is None
    assert EitherOrGroup.from_record("Math/MathLiteracy") is None
    assert EitherOrGroup.from_record(group) is group


def test_default_groups_are_configured_for_south_africa_only() -> None:
    labels = [group.label for group in either_or_groups_for("za")]

    assert labels == ["Math/MathLiteracy", "English/EnglishFAL", "IT/CAT"]
    assert either_or_groups_for("KE") == ()
    assert either_or_groups_for(None) == ()


def test_country_curricula() -> None:
    za = valid_subject_codes("ZA")

    assert {"CAT", "IT", "MathLiteracy", "EnglishFAL"} <= za
    assert "ComputerStudies" not in za
    assert "ComputerStudies" in valid_subject_codes("KE")
    assert subjects_for_country("XX") == subjects_for_country("DEFAULT")
    assert "DataProcessing" in all_standard_subjects()


def test_grade_levels_for_country() -> None:
    assert grade_levels_for_country("ZA")["max_level"] == 12
    assert grade_levels_for_country("ZW")["max_level"] == 14
    assert grade_levels_for_country("KE")["system"] == "Form"
    assert grade_levels_for_country("XX")["system"] == "Grade"
