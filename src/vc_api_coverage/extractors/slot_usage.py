# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Slot usage strategy (lowest-priority slots fallback).

Collects slot names from places that render or read slots when no
declaration was found:

- `<slot>` outlets in an SFC template (no name attribute -> "default";
  a bound `:name` is not a constant and contributes nothing)
- `$slots.x` in the template
- `$slots.x`, `this.$slots.x`, `slots.x` and `slots['x']` in script, where
  `slots` also covers any variable initialized from `useSlots()`
"""

import logging
import re
from typing import Optional, Set

from tree_sitter import Node

from ..lookup import ModuleScope
from ..models import MemberList
from ..syntax import (
    callee_name,
    find_all,
    iter_descendants,
    member_property_name,
    node_text,
    unwrap_expression,
)
from .base import ExtractionStrategy
from .normalizer import Normalizer

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "default"
SLOTS_BAG = "$slots"

_SLOT_TAG_RE = re.compile(r"<slot(\s[^>]*)?/?>", re.IGNORECASE)
_SLOT_NAME_RE = re.compile(r"""(?:^|\s)name\s*=\s*["']([^"']+)["']""")
_SLOT_BOUND_NAME_RE = re.compile(r"(?:^|\s)(?:v-bind:name|:name)\s*=")
_TEMPLATE_SLOTS_ACCESS_RE = re.compile(r"\$slots\.([A-Za-z_$][\w$-]*)|\$slots\[['\"]([^'\"]+)['\"]\]")


def template_slot_names(template: str) -> MemberList:
    """Slot names rendered by a template; outlets with a bound name are skipped."""
    names = MemberList()
    for match in _SLOT_TAG_RE.finditer(template):
        attrs = match.group(1) or ""
        if _SLOT_BOUND_NAME_RE.search(attrs):
            logger.debug(f"Skipping <slot> with a bound name: {match.group(0)}")
            continue
        name_match = _SLOT_NAME_RE.search(attrs)
        names.add(name_match.group(1) if name_match else DEFAULT_SLOT)
    for match in _TEMPLATE_SLOTS_ACCESS_RE.finditer(template):
        names.add(match.group(1) or match.group(2))
    return names


class SlotUsageStrategy(ExtractionStrategy):
    """Derives slots from template outlets and script slot accesses."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or globals()["logger"]

    def extract(self, scope: ModuleScope, normalizer: Normalizer) -> MemberList:
        names = MemberList()
        if scope.module.template:
            names.extend(template_slot_names(scope.module.template))
        names.extend(self._script_accesses(scope.root))
        return names

    def _slots_variables(self, root: Node) -> Set[str]:
        variables = {"slots", SLOTS_BAG}
        for declarator in find_all(root, "variable_declarator"):
            value = unwrap_expression(declarator.child_by_field_name("value"))
            target = declarator.child_by_field_name("name")
            if value is None or target is None or target.type != "identifier":
                continue
            if value.type == "call_expression" and callee_name(value) == "useSlots":
                variables.add(node_text(target))
        return variables

    def _is_slots_bag(self, node: Optional[Node], variables: Set[str]) -> bool:
        node = unwrap_expression(node)
        if node is None:
            return False
        if node.type == "identifier":
            return node_text(node) in variables
        if node.type == "member_expression":
            return member_property_name(node) == SLOTS_BAG
        return False

    def _script_accesses(self, root: Node) -> MemberList:
        names = MemberList()
        variables = self._slots_variables(root)
        for access in iter_descendants(root):
            if access.type not in ("member_expression", "subscript_expression"):
                continue
            if self._is_slots_bag(access.child_by_field_name("object"), variables):
                name = member_property_name(access)
                if name:
                    names.add(name)
        return names

    def priority(self) -> int:
        return 10

    def name(self) -> str:
        return "SlotUsageStrategy"
