# app/services/exam_service.py

from datetime import datetime
from typing import Optional
from app.core.config import settings
from app.core.logger import logger
from app.models.exam import Exam, ExamCreateRequest
from app.schemas.exam import ExamSummary, ExamView
from app.services.boundary_validator import validate_boundaries
from app.services.exam_access import (
    Caller,
    CallerRole,
    ExamWindow,
    render_exam_list,
    render_exam_view,
    resolve_role,
)
from app.services.exam_composer import compose, referenced_theme_ids
from app.services.question_pool import load_question_pool
from app.services.sampler import RandomSampler
from app.utils.errors import BoundaryValidationError, InsufficientQuestionsError, IntegrityFault


async def compose_exam(
    request: ExamCreateRequest,
    creator_id: str,
    store,
    sampler: Optional[RandomSampler] = None,
) -> Exam:
    """
    Validate, draw and persist a new exam.

    Boundaries are checked before any question is fetched. The exam is only
    persisted once composition has fully succeeded.
    """
    sampler = sampler or RandomSampler(seed=settings.EXAM_SHUFFLE_SEED)

    if request.boundaries:
        specialties = await store.fetch_all_specialties()
        try:
            validate_boundaries(request.boundaries, specialties)
        except BoundaryValidationError as e:
            logger.warning(f"Rejected exam '{request.name}': {e}")
            raise

    theme_ids = referenced_theme_ids(request.filters)
    pool = await load_question_pool(theme_ids, store.fetch_questions_by_theme)

    try:
        questions = compose(request.filters, pool, sampler)
    except InsufficientQuestionsError as e:
        logger.warning(f"Rejected exam '{request.name}': {e}")
        raise

    exam = Exam(
        name=request.name,
        start_date=request.start_date,
        end_date=request.end_date,
        time_to_solve=request.time_to_solve,
        questions=questions,
        creator=creator_id,
        boundaries=request.boundaries,
    )
    exam_id = await store.persist_exam(exam)
    logger.info(
        f"Exam {exam_id} '{exam.name}' composed by {creator_id}: "
        f"{len(questions)} questions from {len(theme_ids)} themes"
    )
    return exam.model_copy(update={"id": exam_id})


async def resolve_caller(user: dict, store) -> Caller:
    """Build the Caller for an authenticated user, looking up the student record when needed."""
    role = resolve_role(user.get("roles", []))
    if role is not CallerRole.STUDENT:
        return Caller(role=role, account_id=user["user_id"])

    student = await store.get_student_by_account_id(user["user_id"])
    if student is None:
        fault = IntegrityFault.missing_student(user["user_id"])
        logger.error(str(fault))
        raise fault
    return Caller(role=role, account_id=user["user_id"], student_id=student.id)


async def get_exam_view(
    exam_id: str,
    user: dict,
    store,
    now: datetime,
) -> Optional[ExamView]:
    """Role-scoped view of one exam, or None when it does not exist."""
    exam = await store.get_exam_by_id(exam_id)
    if exam is None:
        return None

    caller = await resolve_caller(user, store)

    has_submitted = False
    if caller.role is CallerRole.STUDENT:
        if exam.id is None:
            raise IntegrityFault("Exam fetched from storage has no id")
        has_submitted = await store.has_student_submitted(exam.id, caller.student_id)

    return render_exam_view(exam, caller, now, has_submitted=has_submitted)


async def list_exam_views(
    user: dict,
    store,
    now: datetime,
    window: ExamWindow = ExamWindow.ALL,
) -> list[ExamSummary]:
    caller = Caller(role=resolve_role(user.get("roles", [])), account_id=user["user_id"])
    if caller.role is CallerRole.NONE:
        return []

    if window is ExamWindow.UPCOMING or (
        window is ExamWindow.ALL and caller.role is CallerRole.STUDENT
    ):
        exams = await store.list_exams(starts_after=now)
    elif window is ExamWindow.PAST:
        exams = await store.list_exams(ends_before=now)
    else:
        exams = await store.list_exams()

    return render_exam_list(exams, caller, now, window)
