# app/services/question_pool.py

import asyncio
from collections import defaultdict
from typing import Awaitable, Callable, Iterable, Sequence
from app.models.question import Question

QuestionFetcher = Callable[[str], Awaitable[list[Question]]]


class QuestionPool:
    """Candidate questions for one composition request, keyed by (theme id, points)."""

    def __init__(self, index: dict[tuple[str, int], list[Question]]):
        self._index = index

    @classmethod
    def build(cls, questions: Iterable[Question]) -> "QuestionPool":
        index: dict[tuple[str, int], list[Question]] = defaultdict(list)
        for question in questions:
            index[(question.theme_id, question.points)].append(question)
        return cls(dict(index))

    def get(self, theme_id: str, points: int) -> list[Question]:
        return list(self._index.get((theme_id, points), ()))

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._index.values())


async def load_question_pool(theme_ids: Sequence[str], fetch: QuestionFetcher) -> QuestionPool:
    """
    Fetch the questions of every distinct theme concurrently and index them.
    The first failing fetch propagates and no pool is built.
    """
    distinct = list(dict.fromkeys(theme_ids))
    results = await asyncio.gather(*(fetch(theme_id) for theme_id in distinct))
    return QuestionPool.build(q for questions in results for q in questions)
