# app/services/boundary_validator.py

from typing import Sequence
from app.models.exam import GradeBoundary
from app.models.question_bank import Specialty
from app.utils.errors import BoundaryValidationError


def validate_boundaries(
    boundaries: Sequence[GradeBoundary],
    known_specialties: Sequence[Specialty],
) -> None:
    """
    Every boundary must point at an existing specialty with the same id AND
    name. A known id carrying a different name counts as a mismatch.
    """
    names_by_id = {specialty.id: specialty.name for specialty in known_specialties}

    offending = []
    for boundary in boundaries:
        specialty = boundary.specialty
        if names_by_id.get(specialty.id) != specialty.name:
            offending.append({"id": specialty.id, "name": specialty.name})

    if offending:
        raise BoundaryValidationError(offending)
