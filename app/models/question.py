# app/models/question.py

from typing import List
from pydantic import Field, field_validator
from app.core.constants import POINT_VALUES
from app.models.base import CamelModel


class Answer(CamelModel):
    text: str = Field(..., min_length=1)
    correct: bool = False


class QuestionCreate(CamelModel):
    text: str = Field(..., min_length=1)
    answers: List[Answer] = Field(..., min_length=1)
    points: int
    theme_id: str

    @field_validator("points")
    @classmethod
    def validate_points(cls, v: int) -> int:
        if v not in POINT_VALUES:
            raise ValueError(f"Unsupported point value {v}. Allowed values: {list(POINT_VALUES)}")
        return v


class Question(QuestionCreate):
    id: str
