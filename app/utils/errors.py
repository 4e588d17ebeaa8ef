# app/utils/errors.py

from fastapi import HTTPException

class BadRequestError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)

class UnauthorizedRequestError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=401, detail=detail)

class ForbiddenError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=403, detail=detail)

class NotFoundError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=404, detail=detail)

class ConflictError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=409, detail=detail)


# -----------------------------
# Exam domain errors
# -----------------------------

class ExamError(Exception):
    """Base class for rejections raised by the exam core."""


class BoundaryValidationError(ExamError):
    """A grade boundary references a specialty that does not exist as given."""

    def __init__(self, specialties: list[dict]):
        self.specialties = specialties
        names = ", ".join(s.get("name") or str(s.get("id")) for s in specialties)
        super().__init__(f"One of the specified specialties does not exist: {names}")


class InsufficientQuestionsError(ExamError):
    """Fewer questions are stored for a (theme, point value) than were requested."""

    def __init__(self, theme_id: str, point_value: int, requested: int, available: int):
        self.theme_id = theme_id
        self.point_value = point_value
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough questions for theme '{theme_id}' worth {point_value} points: "
            f"requested {requested}, available {available}"
        )


class IntegrityFault(Exception):
    """Stored data contradicts itself, e.g. a student account without a student record."""

    @classmethod
    def missing_student(cls, account_id: str) -> "IntegrityFault":
        return cls(f"Account {account_id} has the student role but no student record")
