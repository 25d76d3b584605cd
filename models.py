from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

PRACTICE_QUESTIONS = "practice_questions"
CARS = "cars"
PRACTICE_TEST = "practice_test"
REVIEW = "review"
CATEGORIES = (PRACTICE_QUESTIONS, CARS, PRACTICE_TEST, REVIEW)


class ValidationError(ValueError):
    """Raised when a plan request is rejected as a whole."""


@dataclass(frozen=True)
class MaterialItem:
    name: str
    category: str
    priority: int  # lower is consumed first
    estimated_hours: float
    is_full_day: bool = False


@dataclass(frozen=True)
class BlackoutDate:
    date: Any  # date, datetime or a date string; matched by month/day only
    reason: Optional[str] = None


@dataclass(frozen=True)
class StudyPlanParameters:
    test_date: date
    weekday_hours: float
    weekend_hours: float
    practice_test_days: FrozenSet[str]
    blackout_dates: Tuple[BlackoutDate, ...] = ()
    taper_days: int = 3
    output_format: str = "excel"


@dataclass
class ScheduleDay:
    date: str  # M/D
    day_of_week: str
    days_left: int
    practice_questions: Optional[str] = None
    cars: Optional[str] = None
    review: Optional[str] = None
    is_practice_test: bool = False
    is_review_day: bool = False
    is_blackout: bool = False

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "date": self.date,
            "dayOfWeek": self.day_of_week,
            "daysLeft": self.days_left,
        }
        if self.practice_questions is not None:
            payload["practiceQuestions"] = self.practice_questions
        if self.cars is not None:
            payload["cars"] = self.cars
        if self.review is not None:
            payload["review"] = self.review
        if self.is_practice_test:
            payload["isPracticeTest"] = True
        if self.is_review_day:
            payload["isReviewDay"] = True
        if self.is_blackout:
            payload["isBlackout"] = True
        return payload


@dataclass
class SchedulePreview:
    total_days: int
    practice_test_count: int
    total_study_hours: float
    schedule: List[ScheduleDay] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalDays": self.total_days,
            "practiceTestCount": self.practice_test_count,
            "totalStudyHours": self.total_study_hours,
            "schedule": [day.to_dict() for day in self.schedule],
        }
