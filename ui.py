from __future__ import annotations

from html import escape
from typing import Any

import streamlit as st

from logic import STATUS_CLOSE, STATUS_NEEDS_IMPROVEMENT, STATUS_QUALIFIED


I18N = {
    "en": {
        "app_title": "Career Guide - Subject Eligibility Checker",
        "subtitle": "Enter your latest marks and see which careers they open up.",
        "student_mode": "Learner",
        "admin_mode": "Admin",
        "country": "Country",
        "grade_level": "Current grade",
        "grades_heading": "Your marks (%)",
        "grades_hint": "Leave a subject blank if you do not take it. A mark of 0 counts as a mark.",
        "check": "Check My Careers",
        "reset": "Start Over",
        "no_grades": "Enter at least one mark to see your career options.",
        "no_careers": "No careers are available for this country yet.",
        STATUS_QUALIFIED: "Qualified",
        STATUS_CLOSE: "Close",
        STATUS_NEEDS_IMPROVEMENT: "Needs Improvement",
        "empty_bucket": "No careers in this group.",
        "requirements": "Requirements",
        "points_needed": "Points needed",
        "feedback_heading": "Are these requirements right?",
        "feedback_submit": "Send Feedback",
        "feedback_thanks": "Thanks! An admin will review your report.",
        "download_pdf": "Download PDF Report",
        "download_json": "Download JSON Summary",
        "disclaimer_general": "Requirements are indicative minimums. Always confirm with the institution before applying.",
        "disclaimer_estimated": "Some requirements are estimated and have not yet been verified against official sources.",
        "disclaimer_either_or": "Where two subjects can stand in for each other (for example Mathematics or Mathematical Literacy), your best mark is used.",
    },
}

STATUS_COLORS = {
    STATUS_QUALIFIED: "#1B8A5A",
    STATUS_CLOSE: "#F59E0B",
    STATUS_NEEDS_IMPROVEMENT: "#C2410C",
}

VERIFICATION_BADGES = {
    "verified": "Verified",
    "needs-review": "Needs review",
    "estimated": "Estimated",
}


@st.cache_data
def get_i18n(language: str) -> dict[str, str]:
    return I18N.get(language, I18N["en"])


def t(language: str, key: str) -> str:
    return get_i18n(language).get(key, key)


def entered_grades(marks: dict[str, Any]) -> dict[str, float]:
    """Keep every mark the learner typed, 0 included; blank inputs come through as None."""
    return {code: float(value) for code, value in marks.items() if value is not None}


def inject_css() -> None:
    st.markdown(
        """
        <style>
            :root {
                --primary-blue: #0D47A1;
                --text-main: #1b2f4b;
                --text-muted: #4d6581;
                --surface: #ffffff;
                --border: #d1def1;
            }
            .cg-card {
                background: var(--surface);
                border: 1px solid var(--border);
                border-radius: 14px;
                padding: 0.9rem 1.1rem;
                margin-bottom: 0.8rem;
                color: var(--text-main);
            }
            .cg-chip {
                display: inline-block;
                border-radius: 999px;
                padding: 0.15rem 0.65rem;
                margin: 0 0.3rem 0.3rem 0;
                font-size: 0.82rem;
                background: #eef4ff;
                color: var(--primary-blue);
            }
            .cg-status {
                color: #ffffff;
                font-weight: 600;
            }
            .cg-meter {
                margin: 0.35rem 0 0.6rem 0;
            }
            .cg-meter-head {
                display: flex;
                justify-content: space-between;
                font-size: 0.85rem;
                color: var(--text-muted);
            }
            .cg-meter-track {
                background: #e5edf8;
                border-radius: 999px;
                height: 8px;
                overflow: hidden;
            }
            .cg-meter-fill {
                background: var(--primary-blue);
                height: 100%;
            }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_meter(label: str, pct: float, value_text: str | None = None) -> None:
    pct = max(0.0, min(1.0, pct))
    pct_text = value_text or f"{int(round(pct * 100))}%"
    st.markdown(
        f"""
        <div class="cg-meter">
            <div class="cg-meter-head">
                <span>{escape(label)}</span>
                <span>{pct_text}</span>
            </div>
            <div class="cg-meter-track">
                <div class="cg-meter-fill" style="width: {pct * 100:.1f}%;"></div>
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def render_disclaimers(language: str, custom_snippets: dict[str, str] | None = None) -> None:
    snippets = custom_snippets or {}
    for key in ("disclaimer_general", "disclaimer_either_or", "disclaimer_estimated"):
        st.caption(snippets.get(key, t(language, key)))


def disclaimer_texts(language: str) -> list[str]:
    return [t(language, key) for key in ("disclaimer_general", "disclaimer_either_or", "disclaimer_estimated")]


def render_career_card(item: dict[str, Any], language: str, grades: dict[str, Any]) -> None:
    verdict = item["verdict"]
    career = item["career"]
    color = STATUS_COLORS.get(verdict.status, "#4d6581")

    st.markdown('<div class="cg-card">', unsafe_allow_html=True)
    st.subheader(item["career_name"])

    chips = [
        f"<span class='cg-chip cg-status' style='background:{color}'>{escape(t(language, verdict.status))}</span>",
        f"<span class='cg-chip'>{escape(item.get('category') or 'General')}</span>",
    ]
    status = getattr(career, "verification_status", None)
    if status in VERIFICATION_BADGES:
        chips.append(f"<span class='cg-chip'>{VERIFICATION_BADGES[status]}</span>")
    st.markdown("".join(chips), unsafe_allow_html=True)

    render_meter(
        "Requirements met",
        verdict.match_score / 100,
        f"{verdict.met_requirements}/{verdict.total_requirements} ({verdict.match_score}%)",
    )

    with st.expander(t(language, "requirements")):
        for subject, required in item["requirements"].items():
            st.write(f"- {subject}: {required}% (yours: {grades.get(subject, '-')})")
        if verdict.close_subjects:
            st.markdown("**Close**")
            for label in verdict.close_subjects:
                st.write(f"- {label}")
        if verdict.missing_subjects:
            st.markdown("**Missing**")
            for label in verdict.missing_subjects:
                st.write(f"- {label}")

    improvements = item.get("improvements") or {}
    if improvements:
        st.markdown(f"**{t(language, 'points_needed')}**")
        for label, points in improvements.items():
            st.write(f"- {label}: +{points:g}")

    st.markdown("</div>", unsafe_allow_html=True)
