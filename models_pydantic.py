"""Pydantic models for validating study plan requests from the CLI, plan files and the UI."""

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from models import BlackoutDate, StudyPlanParameters

WEEKDAY_VALUES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class BlackoutDateRequest(BaseModel):
    """A day with no studying, optionally with a reason."""

    date: str = Field(..., description="Blackout date, usually YYYY-MM-DD")
    reason: Optional[str] = Field(default=None, description="Why the day is blocked")


class StudyPlanRequest(BaseModel):
    """Everything needed to generate a study calendar."""

    test_date: str = Field(
        ...,
        alias="testDate",
        min_length=1,
        description="Exam date in YYYY-MM-DD format",
    )
    weekday_hours: float = Field(
        default=4,
        alias="weekdayHours",
        description="Hours available Monday to Friday",
        ge=1,
        le=16,
    )
    weekend_hours: float = Field(
        default=8,
        alias="weekendHours",
        description="Hours available on Saturday and Sunday",
        ge=1,
        le=16,
    )
    practice_test_days: List[str] = Field(
        ...,
        alias="practiceTestDays",
        description="Weekdays on which a full-length practice test may be scheduled",
        min_length=1,
    )
    blackout_dates: List[BlackoutDateRequest] = Field(
        default_factory=list,
        alias="blackoutDates",
        description="Days with no studying",
    )
    taper_days: int = Field(
        default=3,
        alias="taperDays",
        description="Final days reserved for light review",
        ge=2,
        le=4,
    )
    output_format: Literal["excel", "google-sheets"] = Field(
        default="excel",
        alias="outputFormat",
    )

    @field_validator("test_date")
    @classmethod
    def validate_test_date(cls, v: str) -> str:
        """Ensure date is in correct format."""
        try:
            date.fromisoformat(v)
            return v
        except ValueError:
            raise ValueError(f"test_date must be in YYYY-MM-DD format, got: {v}")

    @field_validator("practice_test_days")
    @classmethod
    def normalize_practice_test_days(cls, days: List[str]) -> List[str]:
        normalized: List[str] = []
        for day in days:
            name = day.strip().lower()
            if name not in WEEKDAY_VALUES:
                raise ValueError(f"Unknown weekday: {day}")
            if name not in normalized:
                normalized.append(name)
        return normalized

    def parsed_test_date(self) -> date:
        return date.fromisoformat(self.test_date)

    def to_parameters(self) -> StudyPlanParameters:
        return StudyPlanParameters(
            test_date=self.parsed_test_date(),
            weekday_hours=self.weekday_hours,
            weekend_hours=self.weekend_hours,
            practice_test_days=frozenset(self.practice_test_days),
            blackout_dates=tuple(BlackoutDate(date=b.date, reason=b.reason) for b in self.blackout_dates),
            taper_days=self.taper_days,
            output_format=self.output_format,
        )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "testDate": "2025-06-14",
                "weekdayHours": 4,
                "weekendHours": 8,
                "practiceTestDays": ["saturday"],
                "blackoutDates": [{"date": "2025-05-26", "reason": "Memorial Day"}],
                "taperDays": 3,
                "outputFormat": "excel",
            }
        }
