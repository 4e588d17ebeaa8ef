# app/services/sampler.py

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSampler:
    """Uniform shuffling and sampling without replacement."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random(seed)

    def shuffle(self, items: Sequence[T]) -> list[T]:
        # Fisher-Yates on a copy, last index down to the first
        shuffled = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self._rng.randint(0, i)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

    def sample(self, items: Sequence[T], n: int) -> list[T]:
        if n < 0 or n > len(items):
            raise ValueError(f"Cannot sample {n} items from a sequence of {len(items)}")
        return self.shuffle(items)[:n]
