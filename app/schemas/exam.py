# app/schemas/exam.py
#
# Read-side projections of an Exam. Each caller role gets its own class so an
# omitted field is simply not declared on the view.

from datetime import datetime
from typing import List, Optional, Union
from app.models.base import CamelModel
from app.models.exam import GradeBoundary, TimeToSolve
from app.models.question import Question


class ExamSummary(CamelModel):
    id: Optional[str] = None
    name: str
    start_date: datetime
    end_date: datetime
    time_to_solve: TimeToSolve


class ExamDetail(ExamSummary):
    boundaries: List[GradeBoundary] = []


class AdminExamView(ExamDetail):
    questions: List[Question]
    creator: str


class TeacherExamView(ExamDetail):
    questions: List[Question]


class StudentAnswer(CamelModel):
    text: str


class StudentQuestion(CamelModel):
    """A question as a student sees it: answers without their correctness flag."""

    id: str
    text: str
    answers: List[StudentAnswer]
    points: int
    theme_id: str

    @classmethod
    def from_question(cls, question: Question) -> "StudentQuestion":
        return cls(
            id=question.id,
            text=question.text,
            answers=[StudentAnswer(text=a.text) for a in question.answers],
            points=question.points,
            theme_id=question.theme_id,
        )


class UpcomingStudentExamView(ExamDetail):
    has_submitted: bool


class StudentExamView(UpcomingStudentExamView):
    questions: List[StudentQuestion]


class EmptyExamView(CamelModel):
    pass


ExamView = Union[
    AdminExamView,
    TeacherExamView,
    StudentExamView,
    UpcomingStudentExamView,
    EmptyExamView,
]
