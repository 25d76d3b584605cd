from __future__ import annotations

from collections import Counter
from typing import Dict, List

from availability import available_hours
from models import SchedulePreview, ScheduleDay, StudyPlanParameters


def compute_preview_stats(schedule: List[ScheduleDay], params: StudyPlanParameters) -> SchedulePreview:
    practice_test_count = sum(1 for day in schedule if day.is_practice_test)

    # Planned hours: every study day counts, whether or not material was left to assign.
    total_study_hours = 0.0
    for day in schedule:
        if day.is_blackout or day.days_left <= params.taper_days:
            continue
        total_study_hours += available_hours(day.day_of_week, params.weekday_hours, params.weekend_hours)

    return SchedulePreview(
        total_days=len(schedule),
        practice_test_count=practice_test_count,
        total_study_hours=total_study_hours,
        schedule=schedule,
    )


def count_day_types(schedule: List[ScheduleDay], taper_days: int) -> Dict[str, int]:
    counts: Counter = Counter()
    for day in schedule:
        if day.is_blackout:
            counts["blackout"] += 1
        elif day.days_left <= taper_days:
            counts["taper"] += 1
        elif day.is_practice_test:
            counts["practice_test"] += 1
        elif day.is_review_day:
            counts["review"] += 1
        else:
            counts["study"] += 1
    return {key: counts.get(key, 0) for key in ("study", "practice_test", "review", "taper", "blackout")}


def consumed_materials(schedule: List[ScheduleDay]) -> List[str]:
    names: List[str] = []
    for day in schedule:
        if day.practice_questions and not day.is_review_day:
            names.append(day.practice_questions)
        if day.cars:
            names.append(day.cars)
    return names
