# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Base interface for category extraction strategies.

A strategy recognizes one syntactic way of declaring an API category
(an options property, a declaration call, an instance type, ...) and
returns the normalized member names it finds. Strategies of one category
are registered in a StrategyRegistry and tried in priority order by the
CategoryExtractor until one returns a non-empty MemberList.
"""

from abc import ABC, abstractmethod

from ..lookup import ModuleScope
from ..models import MemberList
from .normalizer import Normalizer


class ExtractionStrategy(ABC):
    """Abstract base class for extraction strategies.

    Design Pattern:
    - Each strategy is independent and stateless between calls
    - Strategies are registered with priority values
    - Higher priority strategies are tried first
    - New declaration forms can be supported by adding a strategy

    Lifecycle:
    1. Strategy is registered in a StrategyRegistry
    2. CategoryExtractor invokes extract() with the component scope
    3. Strategy returns a MemberList, empty if its form is absent
    """

    @abstractmethod
    def extract(self, scope: ModuleScope, normalizer: Normalizer) -> MemberList:
        """Extract member names from a component module.

        Args:
            scope: Parsed component module and its import bindings.
            normalizer: Per-analysis normalizer (owns resolution state).

        Returns:
            MemberList of names found. Empty if the form is absent.

        Design Notes:
        - Strategies MUST NOT raise for a merely absent category
        - Resolution misses are logged at DEBUG by the normalizer/lookup
        """
        pass

    @abstractmethod
    def priority(self) -> int:
        """Return strategy priority.

        Priority Guidelines:
        - 100: Inline options property
        - 75: Dedicated declaration call
        - 50: Instance-type derivation
        - 25: Heuristics
        - 10: Usage-based fallbacks

        Returns:
            Integer priority value. Higher values are tried first.
        """
        pass

    @abstractmethod
    def name(self) -> str:
        """Return strategy name for logging and debugging."""
        pass
