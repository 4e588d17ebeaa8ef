# app/models/student.py

from typing import Optional
from app.models.base import CamelModel


class Student(CamelModel):
    id: str
    account_id: str
    specialty_id: Optional[str] = None
