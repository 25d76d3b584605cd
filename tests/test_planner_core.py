"""Tests for planner_core.ScheduleBuilder."""
from datetime import date, datetime, timedelta

import pytest

from models import BlackoutDate, StudyPlanParameters, ValidationError
from planner_core import (
    BLACKOUT_LABEL,
    FULL_LENGTH_REVIEW,
    REVIEW_LABEL,
    TAPER_LABEL,
    ScheduleBuilder,
    build_schedule,
)

TODAY = date(2025, 1, 5)  # a Sunday


def make_params(
    days_out: int,
    practice_test_days=("monday",),
    blackout_dates=(),
    taper_days: int = 3,
    weekday_hours: float = 4,
    weekend_hours: float = 8,
) -> StudyPlanParameters:
    return StudyPlanParameters(
        test_date=TODAY + timedelta(days=days_out),
        weekday_hours=weekday_hours,
        weekend_hours=weekend_hours,
        practice_test_days=frozenset(practice_test_days),
        blackout_dates=tuple(blackout_dates),
        taper_days=taper_days,
    )


def generate(params: StudyPlanParameters):
    builder = ScheduleBuilder(params, today=TODAY)
    return builder, builder.generate_schedule()


def by_date(schedule, label: str):
    return next(day for day in schedule if day.date == label)


@pytest.mark.parametrize("days_out", [0, -1, -30])
def test_rejects_test_date_not_in_future(days_out: int) -> None:
    with pytest.raises(ValidationError, match="future"):
        ScheduleBuilder(make_params(days_out), today=TODAY)


def test_one_record_per_day_from_tomorrow_through_test_date() -> None:
    _, schedule = generate(make_params(30))
    assert len(schedule) == 30
    assert [d.days_left for d in schedule] == list(range(30, 0, -1))
    assert schedule[0].date == "1/6"
    assert schedule[0].day_of_week == "Monday"
    assert schedule[-1].date == "2/4"
    assert schedule[-1].days_left == 1


def test_schedule_runs_forward_from_tomorrow() -> None:
    """The first record is tomorrow and every following record is one day later."""
    _, schedule = generate(make_params(10))
    assert (schedule[0].date, schedule[0].days_left) == ("1/6", 10)
    assert (schedule[-1].date, schedule[-1].days_left) == ("1/15", 1)
    days = [date(2025, *map(int, d.date.split("/"))) for d in schedule]
    assert all(later - earlier == timedelta(days=1) for earlier, later in zip(days, days[1:]))


@pytest.mark.parametrize("taper_days", [2, 4])
def test_taper_window_boundary(taper_days: int) -> None:
    """Only the last taper_days records get the taper label."""
    _, schedule = generate(make_params(20, practice_test_days=("saturday",), taper_days=taper_days))
    by_left = {d.days_left: d for d in schedule}
    assert by_left[taper_days].review == TAPER_LABEL
    assert by_left[taper_days + 1].review != TAPER_LABEL
    assert [d.days_left for d in schedule if d.review == TAPER_LABEL] == list(range(taper_days, 0, -1))


def test_single_day_plan_is_taper() -> None:
    _, schedule = generate(make_params(1))
    assert len(schedule) == 1
    assert schedule[0].review == TAPER_LABEL
    assert schedule[0].practice_questions is None


def test_ten_day_monday_scenario() -> None:
    builder, schedule = generate(make_params(10))

    monday = schedule[0]
    assert (monday.date, monday.day_of_week) == ("1/6", "Monday")
    assert monday.is_practice_test
    assert monday.practice_questions == "AAMC Sample Test"
    assert monday.review == REVIEW_LABEL

    review = schedule[1]
    assert review.is_review_day
    assert review.practice_questions == FULL_LENGTH_REVIEW
    assert review.cars == "AAMC CARS Pack 1/2 - 3 passages"
    assert review.review == REVIEW_LABEL

    wednesday = schedule[2]
    assert wednesday.practice_questions == "AAMC Question Bank Questions - 100 Questions"
    assert wednesday.cars == "AAMC CARS Pack 1/2 - 1 passages"

    thursday = schedule[3]
    assert thursday.practice_questions == "AAMC Section Bank B/B - 60 Questions"
    assert thursday.cars is None

    # The second Monday (1/13) falls in the taper period.
    for day in schedule[-3:]:
        assert day.review == TAPER_LABEL
        assert day.practice_questions is None
        assert day.cars is None
        assert not (day.is_practice_test or day.is_review_day or day.is_blackout)
    assert schedule[-3].day_of_week == "Monday"

    assert builder.get_preview_stats().practice_test_count == 1


def test_blackout_overrides_practice_test_day() -> None:
    # 1/10 is five days before the 1/15 test and a Friday
    params = make_params(10, practice_test_days=("friday",), blackout_dates=[BlackoutDate("2025-01-10", "Trip")])
    builder, schedule = generate(params)

    blackout = by_date(schedule, "1/10")
    assert blackout.is_blackout
    assert blackout.review == BLACKOUT_LABEL
    assert blackout.practice_questions is None
    assert blackout.cars is None
    assert not blackout.is_practice_test
    assert not blackout.is_review_day

    assert not by_date(schedule, "1/11").is_review_day
    assert builder.get_preview_stats().practice_test_count == 0


def test_blackout_overrides_taper() -> None:
    params = make_params(10, blackout_dates=[BlackoutDate("2025-01-15")])
    _, schedule = generate(params)
    assert schedule[-1].is_blackout
    assert schedule[-1].review == BLACKOUT_LABEL


@pytest.mark.parametrize(
    "value",
    ["2025-01-08", "2019-01-08", "1/8", "1/8/2030", date(2031, 1, 8), datetime(2025, 1, 8, 23, 30)],
)
def test_blackout_matches_month_and_day_only(value) -> None:
    _, schedule = generate(make_params(10, blackout_dates=[BlackoutDate(value)]))
    blackouts = [d.date for d in schedule if d.is_blackout]
    assert blackouts == ["1/8"]


def test_unparseable_blackout_is_ignored() -> None:
    _, schedule = generate(make_params(10, blackout_dates=[BlackoutDate("not a date")]))
    assert not any(d.is_blackout for d in schedule)


def test_practice_days_are_case_insensitive() -> None:
    _, schedule = generate(make_params(10, practice_test_days=("Monday",)))
    assert schedule[0].is_practice_test


def test_exhausted_practice_tests_fall_through() -> None:
    every_day = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
    _, schedule = generate(make_params(10, practice_test_days=every_day))

    tests = [d.practice_questions for d in schedule if d.is_practice_test]
    assert tests == ["AAMC Sample Test", "AAMC FL1", "AAMC FL2", "AAMC FL3", "AAMC FL4"]
    assert all(d.is_practice_test for d in schedule[:5])

    # 1/11: no test left, so the day after the last test becomes a review day
    assert schedule[5].is_review_day
    assert schedule[5].cars == "AAMC CARS Pack 1/2 - 3 passages"

    # 1/12 (Sunday): regular day
    sunday = schedule[6]
    assert not (sunday.is_practice_test or sunday.is_review_day)
    assert sunday.practice_questions == "AAMC Question Bank Questions - 100 Questions"
    assert sunday.cars == "AAMC CARS Pack 1/2 - 1 passages"


def test_question_bank_exhaustion_leaves_field_empty() -> None:
    _, schedule = generate(make_params(40))
    regular = [
        d for d in schedule
        if not (d.is_blackout or d.is_practice_test or d.is_review_day) and d.days_left > 3
    ]
    assert len(regular) > 7
    assert all(d.practice_questions for d in regular[:7])
    assert all(d.practice_questions is None for d in regular[7:])
    assert all(d.review == REVIEW_LABEL for d in regular)


def test_short_weekday_skips_questions_but_gets_cars() -> None:
    _, schedule = generate(make_params(10, practice_test_days=("saturday",), weekday_hours=1))
    assert schedule[0].practice_questions is None
    assert schedule[0].cars == "AAMC CARS Pack 1/2 - 3 passages"
    assert schedule[1].cars == "AAMC CARS Pack 1/2 - 1 passages"
    assert schedule[2].cars is None
    assert schedule[2].review == REVIEW_LABEL


def test_allocation_may_exceed_available_hours() -> None:
    _, schedule = generate(make_params(10, practice_test_days=("saturday",), weekday_hours=2))
    assert schedule[0].practice_questions == "AAMC Question Bank Questions - 100 Questions"
    assert schedule[0].cars is None


def test_materials_never_reused() -> None:
    _, schedule = generate(make_params(120, practice_test_days=("wednesday", "saturday")))
    used = []
    for day in schedule:
        if day.practice_questions and not day.is_review_day:
            used.append(day.practice_questions)
        if day.cars:
            used.append(day.cars)
    assert len(used) == len(set(used))
    assert len(used) == 5 + 7 + 2


def test_day_flags_are_exclusive() -> None:
    params = make_params(60, practice_test_days=("saturday",), blackout_dates=[BlackoutDate("2025-01-18")])
    _, schedule = generate(params)
    for day in schedule:
        assert sum([day.is_blackout, day.is_practice_test, day.is_review_day]) <= 1


def test_preview_hours_count_planned_study_days() -> None:
    builder, _ = generate(make_params(10))
    preview = builder.get_preview_stats()
    # 1/6-1/12: five weekdays at 4h and a weekend at 8h
    assert preview.total_days == 10
    assert preview.total_study_hours == 36


def test_preview_hours_skip_blackouts() -> None:
    builder, _ = generate(make_params(10, blackout_dates=[BlackoutDate("2025-01-08")]))
    assert builder.get_preview_stats().total_study_hours == 32


def test_preview_hours_ignore_material_exhaustion() -> None:
    builder, schedule = generate(make_params(60))
    expected = sum(
        8 if d.day_of_week in ("Saturday", "Sunday") else 4
        for d in schedule
        if d.days_left > 3
    )
    assert builder.get_preview_stats().total_study_hours == expected


def test_each_generation_uses_fresh_catalog() -> None:
    builder = ScheduleBuilder(make_params(20), today=TODAY)
    first = [d.to_dict() for d in builder.generate_schedule()]
    second = [d.to_dict() for d in builder.generate_schedule()]
    assert first == second


def test_build_schedule_returns_preview() -> None:
    preview = build_schedule(make_params(10), today=TODAY)
    assert preview.total_days == 10
    assert preview.schedule[0].date == "1/6"
    payload = preview.to_dict()
    assert payload["schedule"][0]["isPracticeTest"] is True
    assert "isBlackout" not in payload["schedule"][0]
