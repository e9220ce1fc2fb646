# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Per-category extraction with strict strategy precedence.

A CategoryExtractor tries its registered strategies in priority order and
stops at the first one returning a non-empty MemberList. Precedence is part
of the contract: when a component declares a category both as an options
property and through a declaration call, only the options property counts.

Strategy sets per category:

| Category        | Strategies (highest priority first)                        |
|-----------------|------------------------------------------------------------|
| inputs          | options `props`, `defineProps`, instance `$props`          |
| events          | options `emits`, `defineEmits`                             |
| slots           | options `slots`, `defineSlots`, instance `$slots`, usage   |
| exposedMembers  | options `expose`, `defineExpose`, expose heuristics        |
"""

import logging
from typing import Dict, Optional, Sequence

from ..lookup import ModuleScope
from ..models import Category, MemberList
from .declaration_call import DeclarationCallStrategy
from .expose_heuristics import ExposeHeuristicsStrategy
from .instance_type import InstanceTypeStrategy
from .normalizer import Normalizer
from .options import OptionsPropertyStrategy
from .registry import StrategyRegistry
from .slot_usage import SlotUsageStrategy

logger = logging.getLogger(__name__)

DEFAULT_DEFINE_CALLEES = ("defineComponent",)

OPTION_NAMES = {
    Category.INPUTS: "props",
    Category.EVENTS: "emits",
    Category.SLOTS: "slots",
    Category.EXPOSED: "expose",
}

DECLARATION_KEYWORDS = {
    Category.INPUTS: "defineProps",
    Category.EVENTS: "defineEmits",
    Category.SLOTS: "defineSlots",
    Category.EXPOSED: "defineExpose",
}

INSTANCE_BAG_MEMBERS = {
    Category.INPUTS: "$props",
    Category.SLOTS: "$slots",
}


class CategoryExtractor:
    """Extracts one category's MemberList from a component module."""

    def __init__(
        self,
        category: str,
        registry: StrategyRegistry,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.category = category
        self.registry = registry
        self._logger = logger or globals()["logger"]

    def extract(self, scope: ModuleScope, normalizer: Normalizer) -> MemberList:
        """Return the first non-empty strategy result, or an empty MemberList."""
        for strategy in self.registry.get_strategies():
            names = strategy.extract(scope, normalizer)
            if names:
                self._logger.debug(
                    f"{self.category}: {strategy.name()} matched {names.to_list()} "
                    f"in {scope.path or '<source>'}"
                )
                return names
        self._logger.debug(f"{self.category}: no declaration found in {scope.path or '<source>'}")
        return MemberList()


def create_category_extractors(
    define_callees: Sequence[str] = DEFAULT_DEFINE_CALLEES,
    reserved_input_names: Sequence[str] = (),
    logger: Optional[logging.Logger] = None,
) -> Dict[str, CategoryExtractor]:
    """Build the four CategoryExtractors keyed by Category value."""
    extractors: Dict[str, CategoryExtractor] = {}
    for category in Category.ALL:
        registry = StrategyRegistry()
        registry.register(
            OptionsPropertyStrategy([OPTION_NAMES[category]], define_callees, logger=logger)
        )
        registry.register(DeclarationCallStrategy(DECLARATION_KEYWORDS[category], logger=logger))

        if category == Category.INPUTS:
            registry.register(
                InstanceTypeStrategy(
                    INSTANCE_BAG_MEMBERS[category], reserved_input_names, logger=logger
                )
            )
        elif category == Category.SLOTS:
            registry.register(InstanceTypeStrategy(INSTANCE_BAG_MEMBERS[category], logger=logger))
            registry.register(SlotUsageStrategy(logger=logger))
        elif category == Category.EXPOSED:
            registry.register(ExposeHeuristicsStrategy(logger=logger))

        extractors[category] = CategoryExtractor(category, registry, logger=logger)
    return extractors
