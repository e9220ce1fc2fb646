# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Inline options property strategy.

Recognizes a category declared as a property of the component options
object:

    export default defineComponent({
      props: { title: String },
      emits: ['change'],
      slots: Object as SlotsType<{ default?: () => any }>,
      expose: ['focus'],
    })

Candidate objects, in order:
1. The options argument of every call to a component-defining callee, in
   document order. The options argument is the first argument, or the second
   one when the first is a setup function. An identifier argument is
   resolved to its object literal.
2. Only if no defining call carries the property: any object literal holding
   the property, in document order (plain `export default { ... }` options).
"""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from tree_sitter import Node

from ..lookup import ModuleScope
from ..models import MemberList
from ..syntax import (
    call_arguments,
    callee_name,
    find_all,
    named_children,
    node_text,
    property_key_name,
    unwrap_expression,
)
from .base import ExtractionStrategy
from .normalizer import Normalizer

logger = logging.getLogger(__name__)

FUNCTION_NODE_TYPES = frozenset(["arrow_function", "function_expression", "function"])


def find_property(obj: Node, key: str) -> Optional[Node]:
    """First member of an object literal whose key is `key`."""
    for member in named_children(obj):
        if member.type in ("pair", "shorthand_property_identifier", "method_definition"):
            if property_key_name(member) == key:
                return member
    return None


def options_objects(
    scope: ModuleScope, normalizer: Normalizer, define_callees: Sequence[str]
) -> Iterator[Tuple[Node, ModuleScope]]:
    """Yield (options object, scope) for each component-defining call."""
    for call in find_all(scope.root, "call_expression"):
        if callee_name(call) not in define_callees:
            continue
        args = call_arguments(call)
        if not args:
            continue
        candidate = unwrap_expression(args[0])
        if candidate is not None and candidate.type in FUNCTION_NODE_TYPES and len(args) > 1:
            candidate = unwrap_expression(args[1])
        if candidate is None:
            continue
        if candidate.type == "object":
            yield candidate, scope
        elif candidate.type == "identifier":
            declaration = normalizer.lookup.resolve_identifier(
                node_text(candidate), scope, normalizer.context
            )
            if declaration is not None and declaration.node.type == "object":
                yield declaration.node, declaration.scope


class OptionsPropertyStrategy(ExtractionStrategy):
    """Reads a category from a property of the component options object."""

    def __init__(
        self,
        option_names: Sequence[str],
        define_callees: Sequence[str],
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.option_names: List[str] = list(option_names)
        self.define_callees: List[str] = list(define_callees)
        self._logger = logger or globals()["logger"]

    def _match(self, obj: Node) -> Optional[Node]:
        for option_name in self.option_names:
            member = find_property(obj, option_name)
            if member is not None:
                return member
        return None

    def extract(self, scope: ModuleScope, normalizer: Normalizer) -> MemberList:
        for obj, obj_scope in options_objects(scope, normalizer, self.define_callees):
            member = self._match(obj)
            if member is not None:
                return self._normalize(member, obj_scope, normalizer)

        # Fallback: any object literal carrying the option
        for obj in find_all(scope.root, "object"):
            member = self._match(obj)
            if member is not None:
                self._logger.debug(
                    f"Using bare object literal for '{self.option_names[0]}' "
                    f"in {scope.path or '<source>'}"
                )
                return self._normalize(member, scope, normalizer)

        return MemberList()

    def _normalize(self, member: Node, scope: ModuleScope, normalizer: Normalizer) -> MemberList:
        if member.type == "shorthand_property_identifier":
            # `{ emits }` refers to a binding named like the option
            return normalizer.names_from_identifier(node_text(member), scope)
        if member.type == "pair":
            return normalizer.names_from_value(member.child_by_field_name("value"), scope)
        return MemberList()

    def priority(self) -> int:
        return 100

    def name(self) -> str:
        return f"OptionsPropertyStrategy({self.option_names[0]})"
