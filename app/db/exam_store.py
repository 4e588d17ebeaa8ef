# app/db/exam_store.py

from datetime import datetime
from typing import Optional
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from app.models.exam import Exam
from app.models.question import Question
from app.models.question_bank import Specialty
from app.models.student import Student
from app.utils.pagination import build_sort


def to_object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def from_doc(doc: dict) -> dict:
    """Replace Mongo's `_id` with a string `id`."""
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return doc


class MongoExamStore:
    """Storage the exam core reads from and writes to."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.questions = db.get_collection("questions")
        self.specialties = db.get_collection("specialties")
        self.students = db.get_collection("students")
        self.exams = db.get_collection("exams")
        self.solutions = db.get_collection("solutions")

    async def fetch_questions_by_theme(self, theme_id: str) -> list[Question]:
        docs = await self.questions.find({"theme_id": theme_id}).to_list(length=None)
        return [Question.model_validate(from_doc(doc)) for doc in docs]

    async def fetch_all_specialties(self) -> list[Specialty]:
        docs = await self.specialties.find().to_list(length=None)
        return [Specialty.model_validate(from_doc(doc)) for doc in docs]

    async def has_student_submitted(self, exam_id: str, student_id: str) -> bool:
        doc = await self.solutions.find_one(
            {"exam_id": exam_id, "student_id": student_id},
            projection={"_id": 1},
        )
        return doc is not None

    async def persist_exam(self, exam: Exam) -> str:
        doc = exam.model_dump(exclude={"id"})
        result = await self.exams.insert_one(doc)
        return str(result.inserted_id)

    async def get_exam_by_id(self, exam_id: str) -> Optional[Exam]:
        oid = to_object_id(exam_id)
        if oid is None:
            return None
        doc = await self.exams.find_one({"_id": oid})
        if not doc:
            return None
        return Exam.model_validate(from_doc(doc))

    async def list_exams(
        self,
        starts_after: Optional[datetime] = None,
        ends_before: Optional[datetime] = None,
    ) -> list[Exam]:
        query = {}
        if starts_after is not None:
            query["start_date"] = {"$gt": starts_after}
        if ends_before is not None:
            query["end_date"] = {"$lt": ends_before}
        cursor = self.exams.find(query, projection={"questions": 0}).sort(
            build_sort("start_date")
        )
        docs = await cursor.to_list(length=None)
        return [Exam.model_validate(from_doc(doc)) for doc in docs]

    async def get_student_by_account_id(self, account_id: str) -> Optional[Student]:
        doc = await self.students.find_one({"account_id": account_id})
        if not doc:
            return None
        return Student.model_validate(from_doc(doc))
