from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping


DEFAULT_COUNTRY_KEY = "DEFAULT"

DEFAULT_COUNTRIES = [
    {"code": "ZA", "name": "South Africa", "flag": "🇿🇦", "active": True},
    {"code": "KE", "name": "Kenya", "flag": "🇰🇪", "active": False},
    {"code": "NG", "name": "Nigeria", "flag": "🇳🇬", "active": False},
    {"code": "ZW", "name": "Zimbabwe", "flag": "🇿🇼", "active": False},
    {"code": "ET", "name": "Ethiopia", "flag": "🇪🇹", "active": False},
    {"code": "EG", "name": "Egypt", "flag": "🇪🇬", "active": False},
]

# (standard code, display name, required for grade input)
COUNTRY_SUBJECTS: dict[str, list[tuple[str, str, bool]]] = {
    "ZA": [
        ("Math", "Mathematics", True),
        ("MathLiteracy", "Mathematical Literacy", False),
        ("English", "English (Home Language)", True),
        ("EnglishFAL", "English (First Additional Language)", False),
        ("Afrikaans", "Afrikaans (First Additional Language)", False),
        ("LifeOrientation", "Life Orientation", True),
        ("Physics", "Physical Sciences", False),
        ("Chemistry", "Chemistry (part of Physical Sciences)", False),
        ("Biology", "Life Sciences", False),
        ("Accounting", "Accounting", False),
        ("BusinessStudies", "Business Studies", False),
        ("Economics", "Economics", False),
        ("History", "History", False),
        ("Geography", "Geography", False),
        ("IT", "Information Technology", False),
        ("CAT", "Computer Applications Technology", False),
        ("EGD", "Engineering Graphics and Design", False),
    ],
    "KE": [
        ("Math", "Mathematics", True),
        ("English", "English", True),
        ("Kiswahili", "Kiswahili", True),
        ("Physics", "Physics", False),
        ("Chemistry", "Chemistry", False),
        ("Biology", "Biology", False),
        ("Agriculture", "Agriculture", False),
        ("ComputerStudies", "Computer Studies", False),
        ("History", "History and Government", False),
        ("Geography", "Geography", False),
        ("CRE", "Christian Religious Education", False),
        ("IRE", "Islamic Religious Education", False),
        ("HRE", "Hindu Religious Education", False),
        ("HomeScience", "Home Science", False),
        ("BusinessStudies", "Business Studies", False),
    ],
    "NG": [
        ("Math", "Mathematics", True),
        ("English", "English Language", True),
        ("CivicEducation", "Civic Education", True),
        ("Physics", "Physics", False),
        ("Chemistry", "Chemistry", False),
        ("Biology", "Biology", False),
        ("FurtherMath", "Further Mathematics", False),
        ("DataProcessing", "Data Processing", False),
        ("Economics", "Economics", False),
        ("Government", "Government", False),
        ("Literature", "Literature in English", False),
        ("Accounting", "Financial Accounting", False),
        ("Commerce", "Commerce", False),
        ("Geography", "Geography", False),
        ("History", "History", False),
        ("CRK", "Christian Religious Knowledge", False),
        ("IRK", "Islamic Religious Knowledge", False),
    ],
    "ZW": [
        ("Math", "Mathematics", True),
        ("English", "English Language", True),
        ("Shona", "Shona", False),
        ("Ndebele", "Ndebele", False),
        ("Physics", "Physics", False),
        ("Chemistry", "Chemistry", False),
        ("Biology", "Biology", False),
        ("CombinedScience", "Combined Science", False),
        ("HeritageStudies", "Heritage Studies", False),
        ("Geography", "Geography", False),
        ("History", "History", False),
        ("Agriculture", "Agriculture", False),
        ("Accounting", "Accounts", False),
        ("BusinessStudies", "Business Studies", False),
        ("Economics", "Economics", False),
        ("ComputerStudies", "Computer Studies", False),
    ],
    "GH": [
        ("Math", "Core Mathematics", True),
        ("English", "English Language", True),
        ("Physics", "Physics", False),
        ("Chemistry", "Chemistry", False),
        ("Biology", "Biology", False),
        ("History", "History", False),
        ("French", "French", False),
    ],
    "TZ": [
        ("Math", "Mathematics", True),
        ("English", "English", True),
        ("Kiswahili", "Kiswahili", True),
        ("Physics", "Physics", False),
        ("Chemistry", "Chemistry", False),
        ("Biology", "Biology", False),
        ("History", "History", False),
        ("Geography", "Geography", False),
    ],
    "UG": [
        ("Math", "Mathematics", True),
        ("English", "English", True),
        ("Physics", "Physics", False),
        ("Chemistry", "Chemistry", False),
        ("Biology", "Biology", False),
        ("History", "History", False),
        ("Geography", "Geography", False),
    ],
    "RW": [
        ("Math", "Mathematics", True),
        ("English", "English", True),
        ("French", "French", False),
        ("Kinyarwanda", "Kinyarwanda", False),
        ("Physics", "Physics", False),
        ("Chemistry", "Chemistry", False),
        ("Biology", "Biology", False),
        ("History", "History", False),
    ],
    "ET": [
        ("Math", "Mathematics", True),
        ("English", "English", True),
        ("Amharic", "Amharic", True),
        ("Civics", "Civics and Ethical Education", True),
        ("Physics", "Physics", False),
        ("Chemistry", "Chemistry", False),
        ("Biology", "Biology", False),
        ("IT", "Information Technology", False),
        ("Geography", "Geography", False),
        ("History", "History", False),
        ("Economics", "Economics", False),
        ("Agriculture", "Agriculture", False),
    ],
    "EG": [
        ("Math", "Mathematics", True),
        ("English", "English (First Foreign Language)", True),
        ("Arabic", "Arabic Language", True),
        ("SecondLanguage", "Second Foreign Language (French/German/Italian/Spanish)", False),
        ("Citizenship", "Citizenship Education", True),
        ("Physics", "Physics", False),
        ("Chemistry", "Chemistry", False),
        ("Biology", "Biology", False),
        ("PureMath", "Pure Mathematics", False),
        ("AppliedMath", "Applied Mathematics", False),
        ("Mechanics", "Mechanics", False),
        ("Geology", "Geology", False),
        ("History", "History", False),
        ("Geography", "Geography", False),
        ("Philosophy", "Philosophy", False),
        ("Psychology", "Psychology", False),
        ("Sociology", "Sociology", False),
    ],
    "MA": [
        ("Math", "Mathematics", True),
        ("English", "English", False),
        ("French", "French", True),
        ("Arabic", "Arabic", True),
        ("Physics", "Physics", False),
        ("Chemistry", "Chemistry", False),
        ("Biology", "Biology", False),
    ],
    "SN": [
        ("Math", "Mathematics", True),
        ("French", "French", True),
        ("English", "English", False),
        ("Physics", "Physics", False),
        ("Chemistry", "Chemistry", False),
        ("Biology", "Biology", False),
    ],
    DEFAULT_COUNTRY_KEY: [
        ("Math", "Mathematics", True),
        ("English", "English", True),
        ("Physics", "Physics", False),
        ("Chemistry", "Chemistry", False),
        ("Biology", "Biology", False),
        ("History", "History", False),
    ],
}

# Display-name variants seen in career data regardless of country.
GLOBAL_SUBJECT_ALIASES = {
    "Mathematics": "Math",
    "Maths": "Math",
    "Mathematical Literacy": "MathLiteracy",
    "Math Literacy": "MathLiteracy",
    "English Home Language": "English",
    "English (Home Language)": "English",
    "English HL": "English",
    "English First Additional Language": "EnglishFAL",
    "English (First Additional Language)": "EnglishFAL",
    "English FAL": "EnglishFAL",
    "Life Orientation": "LifeOrientation",
    "Physical Sciences": "Physics",
    "Physical Science": "Physics",
    "Life Sciences": "Biology",
    "Life Science": "Biology",
    "Computer Applications Technology": "CAT",
    "Computer Applications Tech": "CAT",
    "Information Technology": "IT",
    "Computer": "IT",
    "Computers": "IT",
}

COUNTRY_SUBJECT_ALIASES: dict[str, dict[str, str]] = {
    "ZA": {
        "Afrikaans First Additional Language": "Afrikaans",
        "Computer": "IT",
        "Computers": "IT",
    },
    "KE": {"Computer": "ComputerStudies", "Computers": "ComputerStudies"},
    "ZW": {"Computer": "ComputerStudies", "Computers": "ComputerStudies"},
    "NG": {"Computer": "DataProcessing", "Computers": "DataProcessing"},
    "ET": {"Computer": "IT", "Computers": "IT"},
    "EG": {
        "Second Foreign Language": "SecondLanguage",
        "Computer": "IT",
        "Computers": "IT",
    },
}

COUNTRY_GRADE_LEVELS: dict[str, dict[str, Any]] = {
    "ZA": {"system": "Grade", "levels": [(8, "Grade 8"), (9, "Grade 9"), (10, "Grade 10"), (11, "Grade 11"), (12, "Grade 12 (Matric)")]},
    "KE": {"system": "Form", "levels": [(9, "Form 1"), (10, "Form 2"), (11, "Form 3"), (12, "Form 4")]},
    "TZ": {"system": "Form", "levels": [(9, "Form 1"), (10, "Form 2"), (11, "Form 3"), (12, "Form 4")]},
    "UG": {"system": "Senior", "levels": [(7, "Senior 1"), (8, "Senior 2"), (9, "Senior 3"), (10, "Senior 4"), (11, "Senior 5"), (12, "Senior 6")]},
    "RW": {"system": "Senior", "levels": [(7, "Senior 1"), (8, "Senior 2"), (9, "Senior 3"), (10, "Senior 4"), (11, "Senior 5"), (12, "Senior 6")]},
    "ET": {"system": "Grade", "levels": [(9, "Grade 9"), (10, "Grade 10"), (11, "Grade 11"), (12, "Grade 12")]},
    "NG": {"system": "SS", "levels": [(10, "SS 1"), (11, "SS 2"), (12, "SS 3")]},
    "ZW": {
        "system": "Form",
        "levels": [
            (9, "Form 1"),
            (10, "Form 2"),
            (11, "Form 3"),
            (12, "Form 4 (O-Level)"),
            (13, "Form 5 (Lower 6)"),
            (14, "Form 6 (Upper 6 / A-Level)"),
        ],
    },
    "GH": {"system": "SHS", "levels": [(10, "SHS 1"), (11, "SHS 2"), (12, "SHS 3")]},
    "EG": {"system": "Grade", "levels": [(10, "Grade 10"), (11, "Grade 11"), (12, "Grade 12")]},
    "MA": {"system": "Grade", "levels": [(10, "Grade 10"), (11, "Grade 11"), (12, "Grade 12")]},
    DEFAULT_COUNTRY_KEY: {"system": "Grade", "levels": [(9, "Grade 9"), (10, "Grade 10"), (11, "Grade 11"), (12, "Grade 12")]},
}


@dataclass(frozen=True)
class EitherOrGroup:
    """Subjects that satisfy each other's requirement, e.g. Math or Math Literacy."""

    subjects: tuple[str, ...]
    description: str = ""

    @property
    def label(self) -> str:
        return "/".join(self.subjects)

    def siblings(self, subject: str) -> tuple[str, ...]:
        return tuple(code for code in self.subjects if code != subject)

    def as_record(self) -> dict[str, Any]:
        return {
            "subjects": list(self.subjects),
            "description": self.description,
            "minRequired": 1,
            "maxAllowed": 1,
        }

    @classmethod
    def from_record(cls, record: Any) -> EitherOrGroup | None:
        if isinstance(record, EitherOrGroup):
            return record
        if not isinstance(record, Mapping):
            return None
        subjects = [str(code).strip() for code in (record.get("subjects") or []) if str(code).strip()]
        # Order is kept as configured; duplicates collapse to the first position.
        unique = tuple(dict.fromkeys(subjects))
        if len(unique) < 2:
            return None
        return cls(subjects=unique, description=str(record.get("description") or ""))


DEFAULT_EITHER_OR_GROUPS: dict[str, tuple[EitherOrGroup, ...]] = {
    "ZA": (
        EitherOrGroup(("Math", "MathLiteracy"), "Mathematics OR Mathematical Literacy"),
        EitherOrGroup(("English", "EnglishFAL"), "English (Home Language) OR English (First Additional Language)"),
        EitherOrGroup(("IT", "CAT"), "Information Technology OR Computer Applications Technology"),
    ),
}


def either_or_groups_for(country_code: str | None) -> tuple[EitherOrGroup, ...]:
    return DEFAULT_EITHER_OR_GROUPS.get((country_code or "").upper(), ())


def subjects_for_country(country_code: str | None) -> list[dict[str, Any]]:
    rows = COUNTRY_SUBJECTS.get((country_code or "").upper()) or COUNTRY_SUBJECTS[DEFAULT_COUNTRY_KEY]
    return [{"standard_name": code, "display_name": display, "required": required} for code, display, required in rows]


def valid_subject_codes(country_code: str | None) -> set[str]:
    return {item["standard_name"] for item in subjects_for_country(country_code)}


def all_standard_subjects() -> list[str]:
    seen: dict[str, None] = {}
    for rows in COUNTRY_SUBJECTS.values():
        for code, _display, _required in rows:
            seen.setdefault(code, None)
    return list(seen)


def grade_levels_for_country(country_code: str | None) -> dict[str, Any]:
    config = COUNTRY_GRADE_LEVELS.get((country_code or "").upper()) or COUNTRY_GRADE_LEVELS[DEFAULT_COUNTRY_KEY]
    levels = [{"level": level, "display_name": name} for level, name in config["levels"]]
    return {"system": config["system"], "levels": levels, "max_level": max(item["level"] for item in levels)}


def alias_table(country_code: str | None = None, extra_aliases: Mapping[str, str] | None = None) -> dict[str, str]:
    code = (country_code or "").upper()
    table = dict(GLOBAL_SUBJECT_ALIASES)
    for standard, display, _required in COUNTRY_SUBJECTS.get(code) or COUNTRY_SUBJECTS[DEFAULT_COUNTRY_KEY]:
        table[display] = standard
        table[standard] = standard
    table.update(COUNTRY_SUBJECT_ALIASES.get(code, {}))
    if extra_aliases:
        table.update({str(k): str(v) for k, v in extra_aliases.items()})
    return table


def normalize_subject(name: Any, country_code: str | None = None, aliases: Mapping[str, str] | None = None) -> Any:
    if not isinstance(name, str):
        return name
    table = aliases if aliases is not None else alias_table(country_code)
    if name in table:
        return table[name]

    folded = name.strip().casefold()
    for alias, standard in table.items():
        if alias.strip().casefold() == folded:
            return standard
    return name


def normalize_subject_map(
    mapping: Mapping[str, Any] | None,
    country_code: str | None = None,
    aliases: Mapping[str, str] | None = None,
    combine: Callable[[Any, Any], Any] = max,
) -> dict[str, Any]:
    if not isinstance(mapping, Mapping):
        return {}
    table = aliases if aliases is not None else alias_table(country_code)
    normalized: dict[str, Any] = {}
    for key, value in mapping.items():
        code = normalize_subject(key, aliases=table)
        if code in normalized and normalized[code] is not None and value is not None:
            try:
                normalized[code] = combine(normalized[code], value)
            except TypeError:
                continue
        elif code not in normalized or normalized[code] is None:
            normalized[code] = value
    return normalized
