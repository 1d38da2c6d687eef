"""Base class for rule-driven item analyzers."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Generic, TypeVar

from paidsearch_recommender.core.rules import Rule
from paidsearch_recommender.utils.numeric import format_currency

ContextT = TypeVar("ContextT")
ResultT = TypeVar("ResultT")


class RuleBasedAnalyzer(ABC, Generic[ContextT, ResultT]):
    """Base class for analyzers that run an ordered rule table per item.

    Subclasses expose their rule table so it can be inspected and tested on
    its own, independent of the surrounding aggregation and sorting.
    """

    @property
    @abstractmethod
    def rules(self) -> Sequence[Rule[ContextT, ResultT]]:
        """Ordered rule table, highest precedence first."""
        pass

    def _format_currency(self, amount: float) -> str:
        """Format dollar amounts consistently.

        Args:
            amount: Dollar amount to format

        Returns:
            Formatted currency string (e.g., "$1,234.56")
        """
        return format_currency(amount)
