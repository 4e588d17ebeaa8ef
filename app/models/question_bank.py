# app/models/question_bank.py

from pydantic import Field
from app.models.base import CamelModel


class SubjectCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=128)


class Subject(SubjectCreate):
    id: str


class ThemeCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=128)
    subject_id: str


class Theme(ThemeCreate):
    id: str


class SpecialtyCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=128)


class Specialty(SpecialtyCreate):
    id: str


class ThemeRename(CamelModel):
    name: str = Field(..., min_length=1, max_length=128)
