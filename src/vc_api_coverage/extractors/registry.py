# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Registry for extraction strategies with priority-ordered dispatch."""

import logging
from typing import List

from .base import ExtractionStrategy

logger = logging.getLogger(__name__)


class StrategyRegistry:
    """Ordered collection of the strategies of one category.

    Strategies are kept sorted by priority (highest first), then by name so
    that equal priorities have a stable order.

    Thread Safety:
    - NOT thread-safe: register all strategies before extracting
    """

    def __init__(self) -> None:
        self._strategies: List[ExtractionStrategy] = []
        self._sorted: bool = True

    def register(self, strategy: ExtractionStrategy) -> None:
        """Register a strategy.

        Raises:
            TypeError: If strategy is not an ExtractionStrategy instance.
        """
        if not isinstance(strategy, ExtractionStrategy):
            raise TypeError(
                f"Strategy must be an ExtractionStrategy instance, got {type(strategy)}"
            )

        self._strategies.append(strategy)
        self._sorted = False

        logger.debug(f"Registered strategy '{strategy.name()}' with priority {strategy.priority()}")

    def get_strategies(self) -> List[ExtractionStrategy]:
        """Return all strategies, highest priority first."""
        if not self._sorted:
            self._strategies.sort(key=lambda s: (-s.priority(), s.name()))
            self._sorted = True

        return self._strategies
