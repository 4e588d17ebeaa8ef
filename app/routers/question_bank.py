# app/routers/question_bank.py

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from pymongo.errors import DuplicateKeyError
from app.core.logger import logger
from app.db.exam_store import from_doc, to_object_id
from app.db.mongo import (
    questions_collection,
    specialties_collection,
    subjects_collection,
    themes_collection,
)
from app.models.question import Question, QuestionCreate
from app.models.question_bank import (
    Specialty,
    SpecialtyCreate,
    Subject,
    SubjectCreate,
    Theme,
    ThemeCreate,
    ThemeRename,
)
from app.routers.deps import require_teacher
from app.utils.errors import BadRequestError, ConflictError, NotFoundError
from app.utils.pagination import build_pagination, build_sort
from app.utils.responses import format_response

router = APIRouter(tags=["question bank"])


async def _find_by_id(collection, item_id: str) -> Optional[dict]:
    oid = to_object_id(item_id)
    if oid is None:
        return None
    return await collection.find_one({"_id": oid})


async def _insert_unique(collection, doc: dict, what: str) -> str:
    try:
        result = await collection.insert_one(doc)
    except DuplicateKeyError:
        raise ConflictError(f"{what} '{doc.get('name')}' already exists")
    return str(result.inserted_id)


# -----------------------------
# Subjects
# -----------------------------

@router.post("/subjects", status_code=status.HTTP_201_CREATED, summary="Create a subject")
async def create_subject(req: SubjectCreate, current_user: dict = Depends(require_teacher)):
    subject_id = await _insert_unique(subjects_collection, req.model_dump(), "Subject")
    subject = Subject(id=subject_id, **req.model_dump())
    return format_response(success=True, data=subject.model_dump(by_alias=True), message="Subject created")


@router.get("/subjects", response_model=List[Subject], summary="List subjects")
async def list_subjects(current_user: dict = Depends(require_teacher)):
    docs = await subjects_collection.find().sort(build_sort("name")).to_list(length=None)
    return [Subject.model_validate(from_doc(doc)) for doc in docs]


# -----------------------------
# Themes
# -----------------------------

@router.post("/themes", status_code=status.HTTP_201_CREATED, summary="Create a theme under a subject")
async def create_theme(req: ThemeCreate, current_user: dict = Depends(require_teacher)):
    if not await _find_by_id(subjects_collection, req.subject_id):
        raise BadRequestError(f"Subject '{req.subject_id}' does not exist")

    theme_id = await _insert_unique(themes_collection, req.model_dump(), "Theme")
    theme = Theme(id=theme_id, **req.model_dump())
    return format_response(success=True, data=theme.model_dump(by_alias=True), message="Theme created")


@router.get("/themes", response_model=List[Theme], summary="List themes, optionally of one subject")
async def list_themes(
    subject_id: Optional[str] = Query(None, alias="subjectId"),
    current_user: dict = Depends(require_teacher),
):
    query = {"subject_id": subject_id} if subject_id else {}
    docs = await themes_collection.find(query).sort(build_sort("name")).to_list(length=None)
    return [Theme.model_validate(from_doc(doc)) for doc in docs]


@router.get("/themes/{theme_id}", response_model=Theme, summary="Get a theme")
async def get_theme(theme_id: str, current_user: dict = Depends(require_teacher)):
    doc = await _find_by_id(themes_collection, theme_id)
    if not doc:
        raise NotFoundError(f"Theme '{theme_id}' not found")
    return Theme.model_validate(from_doc(doc))


@router.patch("/themes/{theme_id}", response_model=Theme, summary="Rename a theme")
async def rename_theme(theme_id: str, req: ThemeRename, current_user: dict = Depends(require_teacher)):
    oid = to_object_id(theme_id)
    try:
        result = await themes_collection.update_one({"_id": oid}, {"$set": {"name": req.name}}) if oid else None
    except DuplicateKeyError:
        raise ConflictError(f"Theme '{req.name}' already exists")
    if result is None or result.matched_count == 0:
        raise NotFoundError(f"Theme '{theme_id}' not found")

    logger.info(f"Theme {theme_id} renamed to '{req.name}' by {current_user['user_id']}")
    return Theme.model_validate(from_doc(await themes_collection.find_one({"_id": oid})))


@router.delete("/themes/{theme_id}", summary="Delete a theme without questions")
async def delete_theme(theme_id: str, current_user: dict = Depends(require_teacher)):
    if not await _find_by_id(themes_collection, theme_id):
        raise NotFoundError(f"Theme '{theme_id}' not found")

    in_use = await questions_collection.count_documents({"theme_id": theme_id}, limit=1)
    if in_use:
        raise ConflictError(f"Theme '{theme_id}' still has questions")

    await themes_collection.delete_one({"_id": to_object_id(theme_id)})
    return format_response(success=True, message="Theme deleted")


# -----------------------------
# Questions
# -----------------------------

@router.post("/questions", status_code=status.HTTP_201_CREATED, summary="Add a question to a theme")
async def create_question(req: QuestionCreate, current_user: dict = Depends(require_teacher)):
    if not await _find_by_id(themes_collection, req.theme_id):
        raise BadRequestError(f"Theme '{req.theme_id}' does not exist")

    result = await questions_collection.insert_one(req.model_dump())
    question = Question(id=str(result.inserted_id), **req.model_dump())
    logger.info(f"Question {question.id} added to theme {question.theme_id} by {current_user['user_id']}")
    return format_response(success=True, data=question.model_dump(by_alias=True), message="Question created")


@router.get("/questions", response_model=List[Question], summary="List questions, optionally of one theme")
async def list_questions(
    theme_id: Optional[str] = Query(None, alias="themeId"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200, alias="pageSize"),
    current_user: dict = Depends(require_teacher),
):
    query = {"theme_id": theme_id} if theme_id else {}
    skip, limit = build_pagination(page, page_size)
    cursor = questions_collection.find(query).sort(build_sort("_id")).skip(skip).limit(limit)
    docs = await cursor.to_list(length=limit)
    return [Question.model_validate(from_doc(doc)) for doc in docs]


@router.get("/questions/{question_id}", response_model=Question, summary="Get a question")
async def get_question(question_id: str, current_user: dict = Depends(require_teacher)):
    doc = await _find_by_id(questions_collection, question_id)
    if not doc:
        raise NotFoundError(f"Question '{question_id}' not found")
    return Question.model_validate(from_doc(doc))


@router.put("/questions/{question_id}", response_model=Question, summary="Replace a question")
async def replace_question(question_id: str, req: QuestionCreate, current_user: dict = Depends(require_teacher)):
    if not await _find_by_id(questions_collection, question_id):
        raise NotFoundError(f"Question '{question_id}' not found")
    if not await _find_by_id(themes_collection, req.theme_id):
        raise BadRequestError(f"Theme '{req.theme_id}' does not exist")

    await questions_collection.replace_one({"_id": to_object_id(question_id)}, req.model_dump())
    return Question(id=question_id, **req.model_dump())


@router.delete("/questions/{question_id}", summary="Delete a question")
async def delete_question(question_id: str, current_user: dict = Depends(require_teacher)):
    oid = to_object_id(question_id)
    result = await questions_collection.delete_one({"_id": oid}) if oid else None
    if result is None or result.deleted_count == 0:
        raise NotFoundError(f"Question '{question_id}' not found")
    return format_response(success=True, message="Question deleted")


# -----------------------------
# Specialties
# -----------------------------

@router.post("/specialties", status_code=status.HTTP_201_CREATED, summary="Create a specialty")
async def create_specialty(req: SpecialtyCreate, current_user: dict = Depends(require_teacher)):
    specialty_id = await _insert_unique(specialties_collection, req.model_dump(), "Specialty")
    specialty = Specialty(id=specialty_id, **req.model_dump())
    return format_response(success=True, data=specialty.model_dump(by_alias=True), message="Specialty created")


@router.get("/specialties", response_model=List[Specialty], summary="List specialties")
async def list_specialties(current_user: dict = Depends(require_teacher)):
    docs = await specialties_collection.find().sort(build_sort("name")).to_list(length=None)
    return [Specialty.model_validate(from_doc(doc)) for doc in docs]
