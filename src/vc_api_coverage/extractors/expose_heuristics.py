# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Exposed-member heuristics.

Two independent forms, both applied and their results unioned in this
order:

1. Context expose calls inside a setup function:

       setup(props, { expose }) { expose({ focus, reset }) }
       setup(props, { expose: publish }) { publish({ focus }) }
       setup(props, ctx) { ctx.expose({ focus }) }

   Matched structurally: the context parameter of the enclosing function
   and the top-level keys of the object literal argument.

2. An array-valued `expose` property on any object literal, optionally
   wrapped in a cast (`expose: ['focus'] as const`).
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional, Set

from tree_sitter import Node

from ..lookup import ModuleScope
from ..models import MemberList
from ..syntax import (
    call_arguments,
    find_all,
    iter_descendants,
    named_children,
    node_text,
    property_key_name,
    unwrap_expression,
)
from .base import ExtractionStrategy
from .normalizer import Normalizer
from .options import find_property

logger = logging.getLogger(__name__)

EXPOSE = "expose"
FUNCTION_NODE_TYPES = frozenset(
    [
        "arrow_function",
        "function_expression",
        "function",
        "function_declaration",
        "method_definition",
    ]
)


@dataclass
class ContextBindings:
    """Names through which a setup function can reach `expose`."""

    expose_names: Set[str] = field(default_factory=set)  # expose({...})
    context_names: Set[str] = field(default_factory=set)  # ctx.expose({...})

    def __bool__(self) -> bool:
        return bool(self.expose_names or self.context_names)


def _parameter_patterns(function: Node) -> Iterator[Node]:
    params = function.child_by_field_name("parameters")
    if params is None:
        # Single-parameter arrow functions: `ctx => ...`
        param = function.child_by_field_name("parameter")
        if param is not None:
            yield param
        return
    for param in named_children(params):
        if param.type == "identifier":
            yield param
            continue
        pattern = param.child_by_field_name("pattern")
        if pattern is not None:
            yield pattern


def context_bindings(function: Node) -> ContextBindings:
    bindings = ContextBindings()
    for index, pattern in enumerate(_parameter_patterns(function)):
        if pattern.type == "object_pattern":
            for member in named_children(pattern):
                if member.type == "shorthand_property_identifier_pattern":
                    if node_text(member) == EXPOSE:
                        bindings.expose_names.add(EXPOSE)
                elif member.type == "pair_pattern" and property_key_name(member) == EXPOSE:
                    value = member.child_by_field_name("value")
                    if value is not None and value.type == "identifier":
                        bindings.expose_names.add(node_text(value))
        elif pattern.type == "identifier" and index > 0:
            # The context object is never the first parameter
            bindings.context_names.add(node_text(pattern))
    return bindings


def _expose_argument(call: Node, bindings: ContextBindings) -> Optional[Node]:
    function = call.child_by_field_name("function")
    if function is None:
        return None
    if function.type == "identifier":
        if node_text(function) not in bindings.expose_names:
            return None
    elif function.type == "member_expression":
        target = function.child_by_field_name("object")
        prop = function.child_by_field_name("property")
        if target is None or prop is None or node_text(prop) != EXPOSE:
            return None
        if target.type != "identifier" or node_text(target) not in bindings.context_names:
            return None
    else:
        return None

    args = call_arguments(call)
    if not args:
        return None
    argument = unwrap_expression(args[0])
    return argument if argument is not None and argument.type == "object" else None


class ExposeHeuristicsStrategy(ExtractionStrategy):
    """Union of context expose calls and array-valued expose options."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or globals()["logger"]

    def extract(self, scope: ModuleScope, normalizer: Normalizer) -> MemberList:
        names = MemberList()
        names.extend(self._context_calls(scope, normalizer))
        names.extend(self._array_option(scope, normalizer))
        return names

    def _context_calls(self, scope: ModuleScope, normalizer: Normalizer) -> MemberList:
        names = MemberList()
        for function in iter_descendants(scope.root):
            if function.type not in FUNCTION_NODE_TYPES:
                continue
            bindings = context_bindings(function)
            if not bindings:
                continue
            body = function.child_by_field_name("body")
            if body is None:
                continue
            for call in find_all(body, "call_expression"):
                argument = _expose_argument(call, bindings)
                if argument is not None:
                    self._logger.debug(
                        f"Context expose call at line {call.start_point[0] + 1} "
                        f"in {scope.path or '<source>'}"
                    )
                    names.extend(normalizer.names_from_object(argument, scope))
        return names

    def _array_option(self, scope: ModuleScope, normalizer: Normalizer) -> MemberList:
        for obj in find_all(scope.root, "object"):
            member = find_property(obj, EXPOSE)
            if member is None or member.type != "pair":
                continue
            value = unwrap_expression(member.child_by_field_name("value"))
            if value is not None and value.type == "array":
                return normalizer.names_from_array(value, scope)
        return MemberList()

    def priority(self) -> int:
        return 25

    def name(self) -> str:
        return "ExposeHeuristicsStrategy"
