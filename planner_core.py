from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Set

from availability import (
    available_hours,
    blackout_key,
    count_plan_days,
    day_of_week,
    format_month_day,
    iter_plan_days,
)
from catalog import MaterialCatalog
from metrics import compute_preview_stats
from models import CARS, PRACTICE_QUESTIONS, PRACTICE_TEST, SchedulePreview, ScheduleDay, StudyPlanParameters, ValidationError

logger = logging.getLogger(__name__)

BLACKOUT_LABEL = "Blackout Day"
TAPER_LABEL = "Light Review - Taper Period"
REVIEW_LABEL = "Anki Review Cards"
FULL_LENGTH_REVIEW = "Review Full Length"

MIN_QUESTION_HOURS = 2.0
MIN_CARS_HOURS = 0.5


class ScheduleBuilder:
    """Walks the days before an exam and fills each one from a fresh material catalog.

    Days are built from the one furthest from the test (days_left == total_days)
    toward the test date, which is chronological order, so a review day can
    look at the day built just before it.
    """

    def __init__(self, params: StudyPlanParameters, today: Optional[date] = None) -> None:
        self.params = params
        self.today = today or date.today()
        self.total_days = count_plan_days(self.today, params.test_date)
        if self.total_days <= 0:
            raise ValidationError("Test date must be in the future")
        self.catalog = MaterialCatalog()
        self.schedule: List[ScheduleDay] = []
        self._practice_days = {d.lower() for d in params.practice_test_days}
        self._blackout_keys: Set[str] = set()
        for entry in params.blackout_dates:
            key = blackout_key(entry.date)
            if key:
                self._blackout_keys.add(key)

    def generate_schedule(self) -> List[ScheduleDay]:
        self.catalog = MaterialCatalog()
        built: List[ScheduleDay] = []

        for days_left, current in iter_plan_days(self.params.test_date, self.total_days):
            previous = built[-1] if built else None
            built.append(self._build_day(current, days_left, previous))

        self.schedule = built
        logger.info(
            "Generated %d-day schedule ending %s (%d practice tests)",
            len(built),
            self.params.test_date.isoformat(),
            sum(1 for d in built if d.is_practice_test),
        )
        return self.schedule

    def get_preview_stats(self) -> SchedulePreview:
        return compute_preview_stats(self.schedule, self.params)

    def _build_day(self, current: date, days_left: int, previous: Optional[ScheduleDay]) -> ScheduleDay:
        day_name = day_of_week(current)
        day = ScheduleDay(date=format_month_day(current), day_of_week=day_name, days_left=days_left)

        if day.date in self._blackout_keys:
            day.is_blackout = True
            day.review = BLACKOUT_LABEL
            return day

        if days_left <= self.params.taper_days:
            day.review = TAPER_LABEL
            return day

        if day_name.lower() in self._practice_days:
            practice_test = self.catalog.take_next(PRACTICE_TEST)
            if practice_test:
                day.practice_questions = practice_test.name
                day.is_practice_test = True
                day.review = REVIEW_LABEL
                return day

        if previous is not None and previous.is_practice_test:
            day.practice_questions = FULL_LENGTH_REVIEW
            day.is_review_day = True
            cars = self.catalog.take_next(CARS)
            day.cars = cars.name if cars else None
            day.review = REVIEW_LABEL
            return day

        self._fill_regular_day(day, available_hours(day_name, self.params.weekday_hours, self.params.weekend_hours))
        return day

    def _fill_regular_day(self, day: ScheduleDay, hours: float) -> None:
        remaining = hours

        if remaining >= MIN_QUESTION_HOURS:
            questions = self.catalog.take_next(PRACTICE_QUESTIONS)
            if questions:
                day.practice_questions = questions.name
                remaining -= questions.estimated_hours

        # Costs are not checked against what is left; an item may overrun the day.
        if remaining >= MIN_CARS_HOURS:
            cars = self.catalog.take_next(CARS)
            if cars:
                day.cars = cars.name
                remaining -= cars.estimated_hours

        day.review = REVIEW_LABEL


def build_schedule(params: StudyPlanParameters, today: Optional[date] = None) -> SchedulePreview:
    builder = ScheduleBuilder(params, today=today)
    builder.generate_schedule()
    return builder.get_preview_stats()
