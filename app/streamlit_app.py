from __future__ import annotations

import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import pydantic
import streamlit as st

# Ensure project root on path
CURRENT_DIR = Path(__file__).resolve().parent
ROOT_DIR = CURRENT_DIR.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from excel_export import ROW_FILLS, day_style  # type: ignore  # noqa: E402
from main import DEFAULT_PLAN, generate_study_plan  # type: ignore  # noqa: E402
from metrics import consumed_materials, count_day_types  # type: ignore  # noqa: E402
from models import ScheduleDay, ValidationError  # type: ignore  # noqa: E402
from models_pydantic import WEEKDAY_VALUES, StudyPlanRequest  # type: ignore  # noqa: E402
from storage import FileStore, MemStorage  # type: ignore  # noqa: E402

st.set_page_config(page_title="MCAT Study Planner", layout="wide")

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ----------------------- Session State ----------------------- #
def init_session_state() -> None:
    if "storage" not in st.session_state:
        st.session_state["storage"] = MemStorage()
    if "files" not in st.session_state:
        st.session_state["files"] = FileStore()
    if "blackout_df" not in st.session_state:
        st.session_state["blackout_df"] = pd.DataFrame(columns=["Date", "Reason"])
    if "last_result" not in st.session_state:
        st.session_state["last_result"] = None


init_session_state()


# ----------------------- Helpers ----------------------- #
def blackout_dates_from_df(df: pd.DataFrame) -> List[Dict[str, str]]:
    entries: List[Dict[str, str]] = []
    for _, row in df.iterrows():
        raw = row.get("Date", None)
        if raw is None or (isinstance(raw, float) and pd.isna(raw)) or str(raw).strip() == "":
            continue
        try:
            day = pd.to_datetime(raw).date()
        except Exception:
            continue
        entry = {"date": day.isoformat()}
        reason = row.get("Reason", None)
        if isinstance(reason, str) and reason.strip():
            entry["reason"] = reason.strip()
        entries.append(entry)
    return entries


def days_until(test_date_val: Optional[date]) -> int:
    if not test_date_val:
        return 0
    return max((test_date_val - date.today()).days, 0)


def validate_inputs(payload: Dict[str, Any]) -> Dict[str, List[str]]:
    errors: List[str] = []
    warnings: List[str] = []
    try:
        request = StudyPlanRequest.model_validate(payload)
    except pydantic.ValidationError as exc:
        for err in exc.errors():
            field_name = ".".join(str(p) for p in err.get("loc", ()))
            errors.append(f"{field_name}: {err.get('msg')}")
        return {"errors": errors, "warnings": warnings}

    test_day = request.parsed_test_date()
    if test_day <= date.today():
        errors.append("Test date must be in the future.")
    elif (test_day - date.today()).days <= request.taper_days:
        warnings.append("The whole plan falls inside the taper period; only light review will be scheduled.")
    for entry in request.blackout_dates:
        try:
            blackout_day = date.fromisoformat(entry.date)
        except ValueError:
            errors.append(f"Invalid blackout date: {entry.date}")
            continue
        if not (date.today() < blackout_day <= test_day):
            warnings.append(
                f"Blackout {entry.date} is outside the plan window; it still blocks the same month/day."
            )
    return {"errors": errors, "warnings": warnings}


def schedule_frame(schedule: List[Dict[str, Any]]) -> pd.DataFrame:
    rows = [
        {
            "Days Left": day["daysLeft"],
            "Day": day["date"],
            "Day of Week": day["dayOfWeek"],
            "Practice Questions": day.get("practiceQuestions", ""),
            "CARS": day.get("cars", ""),
            "Other/Review": day.get("review", ""),
        }
        for day in schedule
    ]
    return pd.DataFrame(rows)


def to_schedule_days(schedule: List[Dict[str, Any]]) -> List[ScheduleDay]:
    return [
        ScheduleDay(
            date=day["date"],
            day_of_week=day["dayOfWeek"],
            days_left=day["daysLeft"],
            practice_questions=day.get("practiceQuestions"),
            cars=day.get("cars"),
            review=day.get("review"),
            is_practice_test=day.get("isPracticeTest", False),
            is_review_day=day.get("isReviewDay", False),
            is_blackout=day.get("isBlackout", False),
        )
        for day in schedule
    ]


def style_schedule(df: pd.DataFrame, days: List[ScheduleDay], taper_days: int):
    styles = [day_style(day, taper_days) for day in days]

    def _row_style(row: pd.Series) -> List[str]:
        style = styles[row.name]
        if not style:
            return [""] * len(row)
        return [f"background-color: #{ROW_FILLS[style]}"] * len(row)

    return df.style.apply(_row_style, axis=1)


# ----------------------- Sidebar ----------------------- #
with st.sidebar:
    st.header("Plan settings")
    test_date_val = st.date_input("Test date", value=date.today() + timedelta(days=60), min_value=date.today())
    st.caption(f"{days_until(test_date_val)} days until your test")
    st.markdown("---")
    st.subheader("Availability")
    weekday_hours = st.number_input(
        "Weekday hours", min_value=1.0, max_value=16.0, value=float(DEFAULT_PLAN["weekday_hours"]), step=0.5)
    weekend_hours = st.number_input(
        "Weekend hours", min_value=1.0, max_value=16.0, value=float(DEFAULT_PLAN["weekend_hours"]), step=0.5)
    st.markdown("---")
    st.subheader("Practice tests")
    practice_days = st.multiselect(
        "Practice test days",
        list(WEEKDAY_VALUES),
        default=["saturday"],
        format_func=str.capitalize,
    )
    taper_days = st.select_slider("Taper days", options=[2, 3, 4], value=DEFAULT_PLAN["taper_days"])
    output_format = st.selectbox(
        "Output format",
        ["excel", "google-sheets"],
        format_func=lambda v: "Excel (.xlsx)" if v == "excel" else "Google Sheets (copy)",
    )
    if st.button("Reset session"):
        st.session_state.clear()
        st.rerun()


# ----------------------- Main Layout ----------------------- #
tabs = st.tabs(["Blackout dates", "Validate & Generate", "Results", "Saved plans"])

with tabs[0]:
    st.header("Blackout dates")
    st.caption("Days with no studying. Matched by month and day.")
    st.session_state["blackout_df"] = st.data_editor(
        st.session_state["blackout_df"],
        num_rows="dynamic",
        use_container_width=True,
        hide_index=True,
        column_config={
            "Date": st.column_config.DateColumn("Date", format="YYYY-MM-DD"),
            "Reason": st.column_config.TextColumn("Reason"),
        },
        key="blackout_editor",
    )

payload = {
    "test_date": test_date_val.isoformat() if test_date_val else "",
    "weekday_hours": weekday_hours,
    "weekend_hours": weekend_hours,
    "practice_test_days": practice_days,
    "blackout_dates": blackout_dates_from_df(st.session_state["blackout_df"]),
    "taper_days": int(taper_days),
    "output_format": output_format,
}

with tabs[1]:
    st.header("Validate & Generate")
    if st.button("Validate Inputs", key="validate_btn"):
        checks = validate_inputs(payload)
        if checks["errors"]:
            st.error("Validation errors:")
            for err in checks["errors"]:
                st.write(f"- {err}")
        else:
            st.success("Validation passed.")
        if checks["warnings"]:
            st.warning("Warnings:")
            for warn in checks["warnings"]:
                st.write(f"- {warn}")

    if st.button("Generate Study Plan", type="primary", key="generate_btn"):
        checks = validate_inputs(payload)
        if checks["errors"]:
            st.error("Fix validation errors first.")
        else:
            try:
                with st.spinner("Building schedule..."):
                    st.session_state["last_result"] = generate_study_plan(
                        payload, st.session_state["storage"], st.session_state["files"]
                    )
                    st.session_state["last_taper_days"] = int(taper_days)
                st.success("Study plan generated. See the Results tab.")
            except (ValidationError, pydantic.ValidationError) as exc:
                st.error(f"Error generating study plan: {exc}")

with tabs[2]:
    st.header("Your study plan")
    result = st.session_state.get("last_result")
    if not result:
        st.info("Generate a plan first.")
    else:
        preview = result["preview"]
        plan_taper = st.session_state.get("last_taper_days", DEFAULT_PLAN["taper_days"])
        days = to_schedule_days(preview["schedule"])

        cols = st.columns(4)
        cols[0].metric("Total days", preview["totalDays"])
        cols[1].metric("Practice tests", preview["practiceTestCount"])
        cols[2].metric("Study hours", f"{preview['totalStudyHours']:.1f}")
        cols[3].metric("Plan id", result["studyPlanId"][:8])

        st.caption(f"{len(consumed_materials(days))} catalog items scheduled · days by type")
        st.bar_chart(pd.Series(count_day_types(days, plan_taper)))

        st.subheader("Schedule")
        df = schedule_frame(preview["schedule"])
        st.dataframe(style_schedule(df, days, plan_taper), use_container_width=True, hide_index=True)

        st.subheader("Download")
        data = st.session_state["files"].get(result["fileId"])
        if data is None:
            st.warning("File not found or expired. Generate the plan again.")
        else:
            st.download_button(
                label="📥 Download study plan",
                data=data,
                file_name=result["filename"],
                mime=XLSX_MIME,
                key="dl_plan",
            )

with tabs[3]:
    st.header("Saved plans")
    plan_id = st.text_input("Study plan id", value=(st.session_state.get("last_result") or {}).get("studyPlanId", ""))
    if plan_id:
        stored = st.session_state["storage"].get_study_plan(plan_id.strip())
        if stored is None:
            st.warning("Study plan not found.")
        else:
            st.write(f"Created {stored.created_at.strftime('%Y-%m-%d %H:%M')}")
            st.json(stored.request.model_dump(by_alias=True))
            if stored.schedule:
                st.dataframe(
                    schedule_frame([day.to_dict() for day in stored.schedule]),
                    use_container_width=True,
                    hide_index=True,
                )
