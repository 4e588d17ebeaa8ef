# app/services/exam_access.py

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Sequence
from app.core.constants import ROLE_ADMIN, ROLE_STUDENT, ROLE_TEACHER
from app.models.exam import Exam
from app.schemas.exam import (
    AdminExamView,
    EmptyExamView,
    ExamSummary,
    ExamView,
    StudentExamView,
    StudentQuestion,
    TeacherExamView,
    UpcomingStudentExamView,
)
from app.utils.errors import IntegrityFault
from app.utils.time import ensure_utc


class CallerRole(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"
    NONE = "none"


class ExamWindow(str, Enum):
    ALL = "all"
    UPCOMING = "upcoming"
    PAST = "past"


@dataclass(frozen=True)
class Caller:
    role: CallerRole
    account_id: Optional[str] = None
    student_id: Optional[str] = None


def resolve_role(roles: Iterable[str]) -> CallerRole:
    """Collapse an account's role strings into the single role that governs access."""
    roles = set(roles or ())
    if ROLE_ADMIN in roles:
        return CallerRole.ADMIN
    if ROLE_TEACHER in roles:
        return CallerRole.TEACHER
    if ROLE_STUDENT in roles:
        return CallerRole.STUDENT
    return CallerRole.NONE


def _summary_fields(exam: Exam) -> dict:
    return {
        "id": exam.id,
        "name": exam.name,
        "start_date": exam.start_date,
        "end_date": exam.end_date,
        "time_to_solve": exam.time_to_solve,
    }


def _detail_fields(exam: Exam) -> dict:
    return {**_summary_fields(exam), "boundaries": exam.boundaries}


def has_started(exam: Exam, now: datetime) -> bool:
    return ensure_utc(now) >= exam.start_date


def render_exam_view(
    exam: Exam,
    caller: Caller,
    now: datetime,
    has_submitted: bool = False,
) -> ExamView:
    """
    Project an exam for one caller.

    admin    -> everything
    teacher  -> everything except the creator
    student  -> no creator; no questions before the start date; hasSubmitted
    none     -> {}
    """
    if caller.role is CallerRole.ADMIN:
        return AdminExamView(**_detail_fields(exam), questions=exam.questions, creator=exam.creator)

    if caller.role is CallerRole.TEACHER:
        return TeacherExamView(**_detail_fields(exam), questions=exam.questions)

    if caller.role is CallerRole.STUDENT:
        if caller.student_id is None:
            raise IntegrityFault.missing_student(caller.account_id)
        if not has_started(exam, now):
            return UpcomingStudentExamView(**_detail_fields(exam), has_submitted=has_submitted)
        return StudentExamView(
            **_detail_fields(exam),
            has_submitted=has_submitted,
            questions=[StudentQuestion.from_question(q) for q in exam.questions],
        )

    if caller.role is CallerRole.NONE:
        return EmptyExamView()

    raise ValueError(f"Unhandled caller role: {caller.role!r}")


def _in_window(exam: Exam, now: datetime, window: ExamWindow) -> bool:
    if window is ExamWindow.UPCOMING:
        return exam.start_date > now
    if window is ExamWindow.PAST:
        return exam.end_date < now
    return True


def render_exam_list(
    exams: Sequence[Exam],
    caller: Caller,
    now: datetime,
    window: ExamWindow = ExamWindow.ALL,
) -> list[ExamSummary]:
    """Summaries (no creator, no questions) of the exams a caller may list."""
    if caller.role is CallerRole.NONE:
        return []

    now = ensure_utc(now)
    if caller.role is CallerRole.STUDENT and window is ExamWindow.ALL:
        window = ExamWindow.UPCOMING

    return [
        ExamSummary(**_summary_fields(exam))
        for exam in exams
        if _in_window(exam, now, window)
    ]
