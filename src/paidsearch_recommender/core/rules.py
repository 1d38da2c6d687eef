"""Ordered (predicate, builder) rule tables."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

ContextT = TypeVar("ContextT")
ResultT = TypeVar("ResultT")


@dataclass(frozen=True)
class Rule(Generic[ContextT, ResultT]):
    """A named rule: when ``predicate`` holds for a context, ``build`` produces a result."""

    name: str
    predicate: Callable[[ContextT], bool]
    build: Callable[[ContextT], ResultT]

    def matches(self, context: ContextT) -> bool:
        """Return True when the rule applies to the context."""
        return self.predicate(context)


def first_match(
    rules: Iterable[Rule[ContextT, ResultT]], context: ContextT
) -> ResultT | None:
    """Evaluate rules in order and build the result of the first one that applies."""
    for rule in rules:
        if rule.matches(context):
            logger.debug(f"Rule '{rule.name}' matched")
            return rule.build(context)
    return None


def all_matches(
    rules: Iterable[Rule[ContextT, ResultT]], context: ContextT
) -> list[ResultT]:
    """Evaluate rules in order and build the result of every rule that applies."""
    results = []
    for rule in rules:
        if rule.matches(context):
            logger.debug(f"Rule '{rule.name}' matched")
            results.append(rule.build(context))
    return results
