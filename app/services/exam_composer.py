# app/services/exam_composer.py

from typing import Sequence
from app.core.constants import POINT_VALUES
from app.models.exam import ExamCreationFilter
from app.models.question import Question
from app.services.question_pool import QuestionPool
from app.services.sampler import RandomSampler
from app.utils.errors import InsufficientQuestionsError


def referenced_theme_ids(filters: Sequence[ExamCreationFilter]) -> list[str]:
    """Theme ids in filter order, each listed once."""
    ids = (tf.theme.id for f in filters for tf in f.theme_filters)
    return list(dict.fromkeys(ids))


def compose(
    filters: Sequence[ExamCreationFilter],
    pool: QuestionPool,
    sampler: RandomSampler,
) -> list[Question]:
    """
    Draw the requested number of questions per (theme, point value).

    Groups are visited in filter, theme filter, then POINT_VALUES order and the
    result keeps that order. A theme referenced more than once never yields the
    same question twice. Raises InsufficientQuestionsError on the first group
    that cannot be filled; nothing is returned in that case.
    """
    questions: list[Question] = []
    drawn: set[str] = set()

    for exam_filter in filters:
        for theme_filter in exam_filter.theme_filters:
            theme_id = theme_filter.theme.id
            for point_value in POINT_VALUES:
                requested = theme_filter.requested(point_value)
                if requested == 0:
                    continue

                available = [q for q in pool.get(theme_id, point_value) if q.id not in drawn]
                if len(available) < requested:
                    raise InsufficientQuestionsError(
                        theme_id=theme_id,
                        point_value=point_value,
                        requested=requested,
                        available=len(available),
                    )

                picked = sampler.sample(available, requested)
                drawn.update(q.id for q in picked)
                questions.extend(picked)

    return questions
