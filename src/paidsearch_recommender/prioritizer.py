"""Ordering of recommendations for presentation."""

from collections.abc import Iterable
from typing import Protocol, TypeVar


class Rankable(Protocol):
    """Anything exposing a priority rank and a confidence score."""

    @property
    def priority_rank(self) -> int: ...

    @property
    def confidence_score(self) -> float: ...


RankableT = TypeVar("RankableT", bound=Rankable)


def sort_key(item: Rankable) -> tuple[int, float]:
    """Priority first (critical before low), then higher confidence first."""
    return item.priority_rank, -item.confidence_score


def prioritize(recommendations: Iterable[RankableT]) -> list[RankableT]:
    """Return recommendations ordered by priority, then confidence.

    The sort is stable, so items tied on both keys keep their input order and
    prioritizing an already prioritized list leaves it unchanged.
    """
    return sorted(recommendations, key=sort_key)
