from __future__ import annotations

import json
import logging
import uuid
from dataclasses import asdict
from datetime import date
from typing import Any

import pandas as pd
import streamlit as st
from sqlalchemy import select

from auth import ADMIN_ROLES, authenticate_user, get_user_by_id
from catalog import (
    FEEDBACK_TYPES,
    evaluate_catalog,
    fetch_active_countries,
    fetch_careers,
    fetch_feedback,
    load_either_or_groups,
    load_subject_aliases,
    load_subjects,
    mark_feedback_reviewed,
    submit_feedback,
)
from db import db_session, init_schema
from export import build_json_summary, build_pdf_report, build_session_payload
from logic import STATUSES, calculate_improvements, group_by_status
from models import AuditLog, Career
from seed import (
    load_careers_from_csv,
    preview_diff,
    seed_admin_users,
    seed_careers_if_empty,
    seed_countries,
    seed_country_subjects,
    upsert_careers,
)
from subjects import grade_levels_for_country
from ui import disclaimer_texts, entered_grades, inject_css, render_career_card, render_disclaimers, t
from validation import SEVERITY_ERROR, check_verification, validate_career_requirements

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Career Guide", layout="wide")
inject_css()


def bootstrap() -> None:
    init_schema()
    with db_session() as db:
        seed_countries(db)
        seed_country_subjects(db)
        seed_admin_users(db)
        seed_careers_if_empty(db)


def get_current_user() -> dict[str, Any] | None:
    auth_payload = st.session_state.get("auth_user")
    if not auth_payload:
        return None

    with db_session() as db:
        user = get_user_by_id(db, auth_payload["id"])
        if not user:
            st.session_state.pop("auth_user", None)
            return None
        return {"id": str(user.id), "role": user.role, "email": user.email}


def render_login() -> dict[str, Any] | None:
    user = get_current_user()
    if user and user["role"] in ADMIN_ROLES:
        st.sidebar.success(f"Logged in as {user['email']} ({user['role']})")
        if st.sidebar.button("Logout"):
            st.session_state.pop("auth_user", None)
            st.rerun()
        return user

    st.sidebar.subheader("Admin Login")
    with st.sidebar.form("login_admin"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        login_submitted = st.form_submit_button("Login")

    if login_submitted:
        with db_session() as db:
            found = authenticate_user(db, email, password)
            if not found or found.role not in ADMIN_ROLES:
                st.sidebar.error("Invalid credentials or role")
            else:
                st.session_state["auth_user"] = {"id": str(found.id), "role": found.role, "email": found.email}
                st.rerun()
    return None


def log_action(user_id: str | None, action: str, details: dict[str, Any]) -> None:
    with db_session() as db:
        db.add(AuditLog(user_id=uuid.UUID(user_id) if user_id else None, action=action, details_json=details))


def collect_grades(country_code: str, language: str) -> dict[str, float] | None:
    with db_session() as db:
        subjects = load_subjects(db, country_code)
    levels = grade_levels_for_country(country_code)

    with st.form(f"grades_{country_code}"):
        level_labels = [item["display_name"] for item in levels["levels"]]
        grade_level = st.selectbox(t(language, "grade_level"), level_labels, index=len(level_labels) - 1)
        st.markdown(f"**{t(language, 'grades_heading')}**")
        st.caption(t(language, "grades_hint"))
        columns = st.columns(3)
        marks: dict[str, float | None] = {}
        for idx, subject in enumerate(subjects):
            label = subject["display_name"] + (" *" if subject.get("required") else "")
            with columns[idx % 3]:
                marks[subject["standard_name"]] = st.number_input(
                    label,
                    min_value=0,
                    max_value=100,
                    value=None,
                    step=1,
                    key=f"mark_{country_code}_{subject['standard_name']}",
                )
        submitted = st.form_submit_button(t(language, "check"))

    if submitted:
        st.session_state["grades"] = entered_grades(marks)
        st.session_state["grade_level"] = grade_level
        st.session_state["grades_country"] = country_code

    if st.session_state.get("grades_country") != country_code:
        return None
    return st.session_state.get("grades")


def run_eligibility(country_code: str, grades: dict[str, float]) -> list[dict[str, Any]]:
    with db_session() as db:
        results = evaluate_catalog(db, grades, country_code)
        groups = load_either_or_groups(db, country_code)
        aliases = load_subject_aliases(db, country_code)
    for item in results:
        item["improvements"] = calculate_improvements(grades, item["requirements"], country_code, groups=groups, aliases=aliases)
    return results


def render_feedback_form(language: str, country_code: str, career_names: list[str]) -> None:
    st.markdown(f"### {t(language, 'feedback_heading')}")
    with st.form("career_feedback"):
        career_name = st.selectbox("Career", career_names)
        feedback_type = st.radio("The requirements shown are", FEEDBACK_TYPES, horizontal=True)
        actual_requirement = st.text_input("What is the actual requirement? (optional)")
        university = st.text_input("University or college (optional)")
        year_applied = st.number_input("Year applied (optional)", min_value=0, max_value=date.today().year, value=0, step=1)
        was_accepted = st.selectbox("Were you accepted?", ["Not applied", "Yes", "No"])
        comment = st.text_area("Comment (optional)")
        submitted = st.form_submit_button(t(language, "feedback_submit"))

    if submitted:
        try:
            with db_session() as db:
                submit_feedback(
                    db,
                    career_name,
                    country_code,
                    feedback_type,
                    user_comment=comment,
                    actual_requirement=actual_requirement,
                    university=university,
                    year_applied=int(year_applied) or None,
                    was_accepted={"Yes": True, "No": False}.get(was_accepted),
                )
        except ValueError as exc:
            st.error(str(exc))
        else:
            st.success(t(language, "feedback_thanks"))


def render_student_view(language: str) -> None:
    st.title(t(language, "app_title"))
    st.caption(t(language, "subtitle"))

    with db_session() as db:
        countries = fetch_active_countries(db)
    labels = {f"{c.get('flag') or ''} {c['name']}".strip(): c for c in countries}
    country = labels[st.sidebar.selectbox(t(language, "country"), list(labels))]
    country_code = country["code"]

    grades = collect_grades(country_code, language)
    if not grades:
        st.info(t(language, "no_grades"))
        render_disclaimers(language)
        return

    results = run_eligibility(country_code, grades)
    if not results:
        st.warning(t(language, "no_careers"))
        return

    buckets = group_by_status(results)
    tabs = st.tabs([f"{t(language, status)} ({len(buckets[status])})" for status in STATUSES])
    for tab, status in zip(tabs, STATUSES):
        with tab:
            if not buckets[status]:
                st.write(t(language, "empty_bucket"))
            for item in buckets[status]:
                render_career_card(item, language, grades)

    profile = {
        "country_code": country_code,
        "country_name": country["name"],
        "grade_level": st.session_state.get("grade_level"),
        "grades": grades,
    }
    disclaimers = disclaimer_texts(language)
    col1, col2 = st.columns(2)
    with col1:
        st.download_button(
            t(language, "download_pdf"),
            data=build_pdf_report(profile, results, disclaimers),
            file_name="career-eligibility.pdf",
            mime="application/pdf",
            on_click=log_action,
            args=(None, "report_downloaded", {"format": "pdf", "country_code": country_code}),
        )
    with col2:
        st.download_button(
            t(language, "download_json"),
            data=build_json_summary(build_session_payload(profile, results)),
            file_name="career-eligibility.json",
            mime="application/json",
            on_click=log_action,
            args=(None, "report_downloaded", {"format": "json", "country_code": country_code}),
        )

    render_feedback_form(language, country_code, [item["career_name"] for item in results])
    render_disclaimers(language)


def admin_career_management(user: dict[str, Any]) -> None:
    with db_session() as db:
        careers = fetch_careers(db, include_inactive=True)

    if not careers:
        st.warning("No careers found.")
        return

    df = pd.DataFrame(
        [
            {
                "name": c.name,
                "active": c.active,
                "category": c.category,
                "countries": ", ".join(sorted(set(c.country_baselines_json or {}) | set(c.qualification_levels_json or {}))),
                "verification_status": c.verification_status,
                "last_verified": c.last_verified,
            }
            for c in careers
        ]
    )
    st.dataframe(df, use_container_width=True)

    target_name = st.selectbox("Select career", df["name"].tolist(), key="admin_edit_career")
    target = next(c for c in careers if c.name == target_name)

    with st.form("admin_update_career"):
        active = st.checkbox("Active", value=target.active)
        category = st.text_input("Category", value=target.category or "")
        min_grades_text = st.text_area("Minimum grades (JSON)", value=json.dumps(target.min_grades_json or {}, indent=2))
        baselines_text = st.text_area("Country baselines (JSON)", value=json.dumps(target.country_baselines_json or {}, indent=2))
        status_options = ["", "verified", "needs-review", "estimated"]
        verification_status = st.selectbox(
            "Verification status",
            status_options,
            index=status_options.index(target.verification_status or ""),
        )
        mark_verified_today = st.checkbox("Mark as verified today")
        submit_update = st.form_submit_button("Update Career")

    if submit_update:
        try:
            min_grades = json.loads(min_grades_text or "{}")
            baselines = json.loads(baselines_text or "{}")
        except json.JSONDecodeError as exc:
            st.error(f"Invalid JSON: {exc}")
            return
        with db_session() as db:
            career = db.scalar(select(Career).where(Career.name == target_name))
            if career:
                career.active = active
                career.category = category.strip() or None
                career.min_grades_json = min_grades
                career.country_baselines_json = baselines
                career.verification_status = verification_status or None
                if mark_verified_today:
                    career.last_verified = date.today()
                db.add(
                    AuditLog(
                        user_id=uuid.UUID(user["id"]),
                        action="career_updated",
                        details_json={"career": target_name},
                    )
                )
        st.success("Career updated.")
        st.rerun()


def admin_csv_import(user: dict[str, Any]) -> None:
    st.markdown("Upload a careers CSV and preview the diff before upsert.")
    file = st.file_uploader("CSV file", type=["csv"], key="admin_csv_file")

    if file is not None:
        csv_text = file.getvalue().decode("utf-8")
        try:
            rows = load_careers_from_csv(csv_text)
            st.session_state["admin_csv_rows"] = rows
            with db_session() as db:
                diff = preview_diff(db, rows)
            st.write(f"Preview diff: {diff['insert']} insert(s), {diff['update']} update(s)")
            st.dataframe(pd.DataFrame(rows).head(20), use_container_width=True)
        except ValueError as exc:
            st.error(f"CSV validation failed: {exc}")
            st.session_state.pop("admin_csv_rows", None)

    if st.button("Upsert CSV into careers"):
        rows = st.session_state.get("admin_csv_rows")
        if not rows:
            st.warning("No validated rows ready for upsert.")
            return
        with db_session() as db:
            result = upsert_careers(db, rows, actor_user_id=user["id"], source="admin_csv")
        st.success(f"Upsert complete. Inserted: {result['inserted']}, Updated: {result['updated']}")
        st.rerun()


def admin_data_quality(country_code: str) -> None:
    with db_session() as db:
        careers = fetch_careers(db, include_inactive=True)

    issues = [issue for career in careers for issue in validate_career_requirements(career, country_code)]
    errors = sum(1 for issue in issues if issue.severity == SEVERITY_ERROR)
    st.metric("Careers checked", len(careers))
    st.metric("Errors", errors)
    st.metric("Warnings", len(issues) - errors)
    if issues:
        st.dataframe(pd.DataFrame([asdict(issue) for issue in issues]), use_container_width=True)
    else:
        st.success(f"All career requirements use valid {country_code} subjects.")


def admin_verification(country_code: str) -> None:
    threshold = st.number_input("Threshold (days)", min_value=1, value=365, step=30)
    with db_session() as db:
        careers = fetch_careers(db, include_inactive=True)

    rows = []
    for career in careers:
        report = check_verification(career, threshold_days=int(threshold), country_code=country_code)
        rows.append(
            {
                "career": career.name,
                "health": report.health,
                "status": career.verification_status or "-",
                "days_old": report.days_old,
                "issues": "; ".join(report.issues),
                "warnings": "; ".join(report.warnings),
            }
        )
    df = pd.DataFrame(rows)
    if df.empty:
        st.warning("No careers found.")
        return
    st.bar_chart(df["health"].value_counts())
    st.dataframe(df, use_container_width=True)


def admin_feedback_review(user: dict[str, Any]) -> None:
    show_reviewed = st.checkbox("Include reviewed feedback")
    with db_session() as db:
        items = fetch_feedback(db, reviewed=None if show_reviewed else False)

    if not items:
        st.info("No feedback waiting for review.")
        return

    df = pd.DataFrame(
        [
            {
                "id": str(f.id),
                "career": f.career_name,
                "country": f.country_code,
                "type": f.feedback_type,
                "actual_requirement": f.actual_requirement,
                "university": f.university,
                "year_applied": f.year_applied,
                "was_accepted": f.was_accepted,
                "comment": f.user_comment,
                "reviewed": f.reviewed,
                "submitted_at": f.submitted_at,
            }
            for f in items
        ]
    )
    st.dataframe(df, use_container_width=True)

    pending = df[~df["reviewed"]]["id"].tolist()
    if pending:
        target = st.selectbox("Mark as reviewed", pending)
        if st.button("Mark Reviewed"):
            with db_session() as db:
                mark_feedback_reviewed(db, target, actor_user_id=user["id"])
            st.rerun()


def render_admin_view(language: str) -> None:
    user = render_login()
    if not user:
        st.info("Admin login required.")
        return

    with db_session() as db:
        countries = fetch_active_countries(db)
    country_code = st.sidebar.selectbox(t(language, "country"), [c["code"] for c in countries], key="admin_country")

    tab1, tab2, tab3, tab4, tab5 = st.tabs(["Careers", "CSV Upload", "Data Quality", "Verification", "Feedback"])

    with tab1:
        admin_career_management(user)

    with tab2:
        admin_csv_import(user)

    with tab3:
        admin_data_quality(country_code)

    with tab4:
        admin_verification(country_code)

    with tab5:
        admin_feedback_review(user)


def main() -> None:
    try:
        bootstrap()
    except RuntimeError as exc:
        st.error(str(exc))
        st.stop()

    language = st.session_state.setdefault("language", "en")
    mode = st.sidebar.radio("Mode", ["student_mode", "admin_mode"], format_func=lambda key: t(language, key))
    if mode == "student_mode":
        render_student_view(language)
    else:
        render_admin_view(language)


if __name__ == "__main__":
    main()
