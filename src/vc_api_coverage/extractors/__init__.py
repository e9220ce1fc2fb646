# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Extraction strategies for component API categories.

Components:
- ExtractionStrategy: Abstract base class for strategies
- StrategyRegistry: Priority-ordered registry of one category's strategies
- Normalizer: Turns declaration nodes into MemberLists, chasing references
- OptionsPropertyStrategy: `props` / `emits` / `slots` / `expose` options
- DeclarationCallStrategy: defineProps / defineEmits / defineSlots / defineExpose
- InstanceTypeStrategy: `$props` / `$slots` of a constructable export
- ExposeHeuristicsStrategy: context expose calls and array expose options
- SlotUsageStrategy: `<slot>` outlets and `$slots` accesses
- CategoryExtractor: First non-empty strategy result per category
"""

from vc_api_coverage.extractors.base import ExtractionStrategy
from vc_api_coverage.extractors.category_extractor import (
    CategoryExtractor,
    create_category_extractors,
)
from vc_api_coverage.extractors.declaration_call import DeclarationCallStrategy
from vc_api_coverage.extractors.expose_heuristics import ExposeHeuristicsStrategy
from vc_api_coverage.extractors.instance_type import InstanceTypeStrategy
from vc_api_coverage.extractors.normalizer import Normalizer
from vc_api_coverage.extractors.options import OptionsPropertyStrategy
from vc_api_coverage.extractors.registry import StrategyRegistry
from vc_api_coverage.extractors.slot_usage import SlotUsageStrategy

__all__ = [
    "CategoryExtractor",
    "DeclarationCallStrategy",
    "ExposeHeuristicsStrategy",
    "ExtractionStrategy",
    "InstanceTypeStrategy",
    "Normalizer",
    "OptionsPropertyStrategy",
    "SlotUsageStrategy",
    "StrategyRegistry",
    "create_category_extractors",
]
