# app/models/exam.py

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import Field, field_validator, model_validator
from app.core.constants import POINT_VALUES
from app.models.base import CamelModel
from app.models.question import Question
from app.models.question_bank import Specialty
from app.utils.time import ensure_utc


def _is_point_key(key) -> bool:
    if isinstance(key, bool):
        return False
    if isinstance(key, int):
        return True
    return isinstance(key, str) and key.isdigit()


class ThemeRef(CamelModel):
    id: str
    name: Optional[str] = None


class ThemeFilter(CamelModel):
    """How many questions of each point value to draw from one theme."""

    theme: ThemeRef
    counts: Dict[int, int] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_flat_counts(cls, data):
        # Older clients send the counts inline: {"theme": {...}, "5": 2, "10": 1}
        if not isinstance(data, dict):
            return data
        flat = {key: value for key, value in data.items() if _is_point_key(key)}
        if not flat:
            return data
        data = {key: value for key, value in data.items() if key not in flat}
        counts = dict(data.get("counts") or {})
        counts.update({int(key): value for key, value in flat.items()})
        data["counts"] = counts
        return data

    @field_validator("counts")
    @classmethod
    def validate_counts(cls, v: Dict[int, int]) -> Dict[int, int]:
        for point_value, count in v.items():
            if point_value not in POINT_VALUES:
                raise ValueError(
                    f"Unsupported point value {point_value}. Allowed values: {list(POINT_VALUES)}"
                )
            if count < 0:
                raise ValueError(f"Requested count for {point_value} points must be >= 0")
        return v

    def requested(self, point_value: int) -> int:
        return self.counts.get(point_value, 0)


class ExamCreationFilter(CamelModel):
    theme_filters: List[ThemeFilter] = Field(..., min_length=1)


class GradeBoundary(CamelModel):
    specialty: Specialty
    min_score: int = Field(..., ge=0)


class TimeToSolve(CamelModel):
    hours: int = Field(default=0, ge=0)
    minutes: int = Field(default=0, ge=0, le=59)

    @model_validator(mode="after")
    def check_positive(self):
        if self.hours == 0 and self.minutes == 0:
            raise ValueError("timeToSolve must be longer than zero")
        return self


class ExamBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=128)
    start_date: datetime
    end_date: datetime
    time_to_solve: TimeToSolve

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self


class ExamCreateRequest(ExamBase):
    filters: List[ExamCreationFilter] = Field(..., min_length=1)
    boundaries: List[GradeBoundary] = Field(default_factory=list)


class Exam(ExamBase):
    id: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)
    creator: str
    boundaries: List[GradeBoundary] = Field(default_factory=list)
