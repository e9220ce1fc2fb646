# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Dedicated declaration call strategy.

Recognizes script-setup style declaration calls anywhere in the module:

    const props = defineProps(['title'])
    const props = withDefaults(defineProps<{ title?: string }>(), {})
    const emit = defineEmits<{ (e: 'change', id: number): void }>()
    const emit = defineEmits<{ change: [id: number] }>()
    const slots = defineSlots<{ default(): any }>()
    defineExpose({ focus, reset })

The first matching call in document order is used. A runtime argument is
preferred; the first type argument is read when there is no argument or it
yields nothing.
"""

import logging
from typing import Optional

from ..lookup import ModuleScope
from ..models import MemberList
from ..syntax import call_arguments, callee_name, find_all, type_arguments
from .base import ExtractionStrategy
from .normalizer import Normalizer

logger = logging.getLogger(__name__)


class DeclarationCallStrategy(ExtractionStrategy):
    """Reads a category from a call to its declaration keyword."""

    def __init__(self, keyword: str, logger: Optional[logging.Logger] = None) -> None:
        self.keyword = keyword
        self._logger = logger or globals()["logger"]

    def extract(self, scope: ModuleScope, normalizer: Normalizer) -> MemberList:
        for call in find_all(scope.root, "call_expression"):
            if callee_name(call) != self.keyword:
                continue

            names = MemberList()
            args = call_arguments(call)
            if args:
                names = normalizer.names_from_value(args[0], scope)
            if not names:
                type_args = type_arguments(call)
                if type_args:
                    names = normalizer.names_from_type(type_args[0], scope)

            self._logger.debug(
                f"{self.keyword}() at line {call.start_point[0] + 1} yielded {len(names)} names"
            )
            return names

        return MemberList()

    def priority(self) -> int:
        return 75

    def name(self) -> str:
        return f"DeclarationCallStrategy({self.keyword})"
