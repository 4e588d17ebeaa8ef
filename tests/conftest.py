# tests/conftest.py

import os
import sys
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

# Add the project root (the folder containing `app/`) to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from app.models.exam import Exam, TimeToSolve
from app.models.question import Answer, Question
from app.models.question_bank import Specialty
from app.models.student import Student

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_question(qid: str, theme_id: str = "t1", points: int = 5) -> Question:
    return Question(
        id=qid,
        text=f"Question {qid}?",
        answers=[Answer(text="yes", correct=True), Answer(text="no")],
        points=points,
        theme_id=theme_id,
    )


def make_exam(start: datetime, end: datetime, exam_id: str = "e1", **overrides) -> Exam:
    fields = dict(
        id=exam_id,
        name="Midterm",
        start_date=start,
        end_date=end,
        time_to_solve=TimeToSolve(hours=1, minutes=30),
        questions=[make_question("q1"), make_question("q2", points=10)],
        creator="teacher-1",
    )
    fields.update(overrides)
    return Exam(**fields)


class FakeExamStore:
    """In-memory stand-in for MongoExamStore."""

    def __init__(self, questions=(), specialties=(), students=(), exams=(), submissions=()):
        self.questions = list(questions)
        self.specialties = list(specialties)
        self.students = {s.account_id: s for s in students}
        self.exams = {e.id: e for e in exams}
        self.submissions = set(submissions)
        self.fetched_themes = []
        self.specialty_fetches = 0
        self.persisted = []
        self.fail_theme = None

    async def fetch_questions_by_theme(self, theme_id):
        self.fetched_themes.append(theme_id)
        if theme_id == self.fail_theme:
            raise ConnectionError(f"storage unavailable for {theme_id}")
        return [q for q in self.questions if q.theme_id == theme_id]

    async def fetch_all_specialties(self):
        self.specialty_fetches += 1
        return list(self.specialties)

    async def has_student_submitted(self, exam_id, student_id):
        return (exam_id, student_id) in self.submissions

    async def persist_exam(self, exam):
        exam_id = f"exam-{len(self.persisted) + 1}"
        self.persisted.append(exam)
        self.exams[exam_id] = exam.model_copy(update={"id": exam_id})
        return exam_id

    async def get_exam_by_id(self, exam_id):
        return self.exams.get(exam_id)

    async def list_exams(self, starts_after=None, ends_before=None):
        exams = sorted(self.exams.values(), key=lambda e: e.start_date)
        if starts_after is not None:
            exams = [e for e in exams if e.start_date > starts_after]
        if ends_before is not None:
            exams = [e for e in exams if e.end_date < ends_before]
        return exams

    async def get_student_by_account_id(self, account_id):
        return self.students.get(account_id)


def _matches(doc, query):
    for key, cond in query.items():
        value = doc.get(key)
        if isinstance(cond, dict):
            if "$gt" in cond and not value > cond["$gt"]:
                return False
            if "$lt" in cond and not value < cond["$lt"]:
                return False
        elif value != cond:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, keys):
        for key, direction in reversed(keys):
            self.docs.sort(key=lambda d: d[key], reverse=direction < 0)
        return self

    def skip(self, n):
        self.docs = self.docs[n:]
        return self

    def limit(self, n):
        self.docs = self.docs[:n]
        return self

    async def to_list(self, length=None):
        return [dict(d) for d in self.docs[:length]]


class FakeCollection:
    """The slice of a Motor collection the app uses, kept in memory."""

    def __init__(self, docs=(), unique=()):
        self.docs = [dict(d) for d in docs]
        self.unique = tuple(unique)

    def _check_unique(self, doc, skip_id=None):
        for key in self.unique:
            if any(d.get(key) == doc.get(key) and d["_id"] != skip_id for d in self.docs):
                raise DuplicateKeyError(f"E11000 duplicate key error: {key}")

    def _find(self, query):
        return next((d for d in self.docs if _matches(d, query)), None)

    def find(self, query=None, projection=None):
        docs = [dict(d) for d in self.docs if _matches(d, query or {})]
        for key, keep in (projection or {}).items():
            if not keep:
                for d in docs:
                    d.pop(key, None)
        return FakeCursor(docs)

    async def find_one(self, query, projection=None):
        doc = self._find(query)
        return dict(doc) if doc else None

    async def insert_one(self, doc):
        doc = dict(doc)
        doc["_id"] = ObjectId()
        self._check_unique(doc)
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query, update):
        doc = self._find(query)
        if doc is None:
            return SimpleNamespace(matched_count=0)
        self._check_unique({**doc, **update["$set"]}, skip_id=doc["_id"])
        doc.update(update["$set"])
        return SimpleNamespace(matched_count=1)

    async def replace_one(self, query, replacement):
        doc = self._find(query)
        if doc is None:
            return SimpleNamespace(matched_count=0)
        _id = doc["_id"]
        doc.clear()
        doc.update(replacement, _id=_id)
        return SimpleNamespace(matched_count=1)

    async def delete_one(self, query):
        doc = self._find(query)
        if doc is not None:
            self.docs.remove(doc)
        return SimpleNamespace(deleted_count=int(doc is not None))

    async def count_documents(self, query, limit=0):
        count = sum(1 for d in self.docs if _matches(d, query))
        return min(count, limit) if limit else count


class FakeDatabase:
    def __init__(self, **collections):
        self.collections = collections

    def get_collection(self, name):
        return self.collections.setdefault(name, FakeCollection())


@pytest.fixture
def bank():
    """Theme t1: three 5-point and two 10-point questions. Theme t2: two 1-point questions."""
    return [
        make_question("a", "t1", 5),
        make_question("b", "t1", 5),
        make_question("c", "t1", 5),
        make_question("d", "t1", 10),
        make_question("e", "t1", 10),
        make_question("f", "t2", 1),
        make_question("g", "t2", 1),
    ]


@pytest.fixture
def specialties():
    return [Specialty(id="s1", name="Computer Science"), Specialty(id="s2", name="Mathematics")]


@pytest.fixture
def store(bank, specialties):
    upcoming = make_exam(NOW + timedelta(days=2), NOW + timedelta(days=2, hours=2), exam_id="soon")
    running = make_exam(NOW - timedelta(hours=1), NOW + timedelta(hours=1), exam_id="running")
    finished = make_exam(NOW - timedelta(days=3), NOW - timedelta(days=3) + timedelta(hours=2), exam_id="finished")
    return FakeExamStore(
        questions=bank,
        specialties=specialties,
        students=[Student(id="stu-1", account_id="acc-student")],
        exams=[upcoming, running, finished],
        submissions={("finished", "stu-1")},
    )
