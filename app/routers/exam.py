# app/routers/exam.py
from fastapi import APIRouter, Depends, status
from typing import List
from app.models.exam import ExamCreateRequest
from app.routers.deps import get_current_user, get_exam_store, require_teacher
from app.schemas.exam import ExamSummary
from app.services.exam_access import ExamWindow
from app.services.exam_service import compose_exam, get_exam_view, list_exam_views
from app.utils.errors import NotFoundError
from app.utils.time import utc_now

router = APIRouter(tags=["exams"])


@router.post("/", status_code=status.HTTP_201_CREATED, summary="Compose a new exam from question filters")
async def create_exam(
    req: ExamCreateRequest,
    current_user: dict = Depends(require_teacher),
    store=Depends(get_exam_store),
):
    exam = await compose_exam(req, current_user["user_id"], store)
    return {"examId": exam.id}


@router.get("/", response_model=List[ExamSummary], summary="List the exams visible to the caller")
async def list_exams(current_user: dict = Depends(get_current_user), store=Depends(get_exam_store)):
    return await list_exam_views(current_user, store, utc_now(), ExamWindow.ALL)


@router.get("/upcoming", response_model=List[ExamSummary], summary="List exams that have not started")
async def list_upcoming_exams(current_user: dict = Depends(get_current_user), store=Depends(get_exam_store)):
    return await list_exam_views(current_user, store, utc_now(), ExamWindow.UPCOMING)


@router.get("/past", response_model=List[ExamSummary], summary="List exams that have ended")
async def list_past_exams(current_user: dict = Depends(get_current_user), store=Depends(get_exam_store)):
    return await list_exam_views(current_user, store, utc_now(), ExamWindow.PAST)


@router.get("/{exam_id}", summary="Get an exam as seen by the caller's role")
async def get_exam(exam_id: str, current_user: dict = Depends(get_current_user), store=Depends(get_exam_store)):
    view = await get_exam_view(exam_id, current_user, store, utc_now())
    if view is None:
        raise NotFoundError(f"Exam '{exam_id}' not found")
    return view
