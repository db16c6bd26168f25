from __future__ import annotations

import io
import json
from datetime import datetime, timezone
from typing import Any

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from logic import STATUS_CLOSE, STATUS_NEEDS_IMPROVEMENT, STATUS_QUALIFIED, group_by_status

SECTION_TITLES = {
    STATUS_QUALIFIED: "Careers You Qualify For",
    STATUS_CLOSE: "Careers Within Reach",
    STATUS_NEEDS_IMPROVEMENT: "Careers Needing Improvement",
}


def _safe_text(value: Any) -> str:
    if value is None:
        return "-"
    return str(value)


def _format_grades(grades: dict[str, Any]) -> str:
    return ", ".join(f"{subject} {value}" for subject, value in grades.items()) or "-"


def build_session_payload(profile: dict[str, Any], results: list[dict[str, Any]]) -> dict[str, Any]:
    buckets = group_by_status(results)
    payload: dict[str, Any] = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "profile": {
            "country_code": profile.get("country_code"),
            "grade_level": profile.get("grade_level"),
            "grades": dict(profile.get("grades") or {}),
        },
        "counts": {status: len(items) for status, items in buckets.items()},
        "careers": {},
    }
    for status, items in buckets.items():
        payload["careers"][status] = [
            {
                "career_name": item["career_name"],
                "category": item.get("category"),
                "requirements": item.get("requirements") or {},
                "improvements": item.get("improvements") or {},
                **item["verdict"].as_dict(),
            }
            for item in items
        ]
    return payload


def build_pdf_report(
    profile: dict[str, Any],
    results: list[dict[str, Any]],
    disclaimers: list[str],
) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title="Career Eligibility Report")
    styles = getSampleStyleSheet()
    normal = styles["BodyText"]
    heading = styles["Heading2"]

    story = []
    story.append(Paragraph("Career Eligibility Report", styles["Title"]))
    story.append(Paragraph(f"Generated: {datetime.now(timezone.utc).isoformat()} UTC", normal))
    story.append(Spacer(1, 12))

    story.append(Paragraph("Learner Profile", heading))
    story.append(Paragraph(f"Country: {_safe_text(profile.get('country_name') or profile.get('country_code'))}", normal))
    story.append(Paragraph(f"Grade level: {_safe_text(profile.get('grade_level'))}", normal))
    story.append(Paragraph(f"Grades: {_format_grades(profile.get('grades') or {})}", normal))
    story.append(Spacer(1, 8))

    buckets = group_by_status(results)
    story.append(Paragraph("Summary", heading))
    for status, title in SECTION_TITLES.items():
        story.append(Paragraph(f"{title}: {len(buckets[status])}", normal))
    story.append(Spacer(1, 8))

    for status, title in SECTION_TITLES.items():
        items = buckets[status]
        if not items:
            continue
        story.append(Paragraph(title, heading))
        for item in items:
            verdict = item["verdict"]
            story.append(Paragraph(f"{_safe_text(item['career_name'])} ({_safe_text(item.get('category'))})", styles["Heading3"]))
            story.append(
                Paragraph(
                    f"Match score: {verdict.match_score}% ({verdict.met_requirements}/{verdict.total_requirements} requirements met)",
                    normal,
                )
            )
            if verdict.close_subjects:
                story.append(Paragraph(f"Close: {', '.join(verdict.close_subjects)}", normal))
            if verdict.missing_subjects:
                story.append(Paragraph(f"Missing: {', '.join(verdict.missing_subjects)}", normal))
            improvements = item.get("improvements") or {}
            if improvements:
                gaps = ", ".join(f"{label} +{points:g}" for label, points in improvements.items())
                story.append(Paragraph(f"Points needed: {gaps}", normal))
            story.append(Spacer(1, 6))

    story.append(Spacer(1, 12))
    story.append(Paragraph("Disclaimers", heading))
    for text in disclaimers:
        story.append(Paragraph(f"- {_safe_text(text)}", normal))

    doc.build(story)
    buffer.seek(0)
    return buffer.read()


def build_json_summary(session_payload: dict[str, Any]) -> bytes:
    return json.dumps(session_payload, indent=2, ensure_ascii=True, default=str).encode("utf-8")
