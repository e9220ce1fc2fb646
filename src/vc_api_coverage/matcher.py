# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Coverage matching of a component surface against test source text.

The matcher collects textual/structural evidence from a test file and marks
each declared member as covered when matching evidence exists. It never
executes tests: a member that is merely mentioned in a recognized position
counts as covered, so the report is a lower-bound signal.

Evidence recognized per category:

inputs:
- `props` / `propsData` keys of mount-style call options
- `setProps({...})` keys
- attributes of capitalized JSX elements (`onX` handlers excluded)
- attributes of component tags in a mount-options `template` string

events:
- `w.emitted('x')`, `w.emitted().x`, `w.emitted()['x']`
- `expect(w.emitted()).toHaveProperty('x')`
- `onX` keys in mount `props` and `onX` JSX attributes (`onClick` -> `click`)
- `@x`, `v-on:x` and `v-model` in template strings

slots:
- `slots` keys of mount options
- JSX children (content -> `default`, object child / `v-slots` -> its keys)
- `#x` / `v-slot:x` in template strings

exposedMembers:
- member access or call on `<w>.vm` (through casts, parentheses, non-null
  assertions and optional chaining) or on an alias assigned from it
- names destructured from `<w>.vm`
- `vm` destructured from a mount call or a wrapper variable

Names are compared after camelizing kebab-case (`max-length` == `maxLength`).
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set

from tree_sitter import Node

from .models import Category, ComponentAPISurface, CoverageEntry, CoverageReport
from .syntax import (
    SyntaxProvider,
    call_arguments,
    callee_name,
    iter_descendants,
    member_property_name,
    named_children,
    node_text,
    property_key_name,
    string_value,
    unwrap_expression,
)

logger = logging.getLogger(__name__)

DEFAULT_MOUNT_CALLEES = ("mount", "shallowMount", "render")
DEFAULT_SLOT = "default"
VM_MEMBER = "vm"

INPUT_OPTION_KEYS = ("props", "propsData")
V_MODEL_INPUTS = ("modelValue", "value")
V_MODEL_EVENTS = ("update:modelValue", "update:value")

_HANDLER_RE = re.compile(r"^on[A-Z:]")
_KEBAB_RE = re.compile(r"-([a-z0-9])")
_TEMPLATE_TAG_RE = re.compile(r"<([A-Za-z][\w.-]*)((?:\s[^<>]*?)?)\s*(/?)>")
_TEMPLATE_ATTR_RE = re.compile(
    r"""([@:#A-Za-z_][\w:.@#\[\]-]*)(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'>]+))?"""
)
_TEMPLATE_SLOT_RE = re.compile(r"(?:#|v-slot:)([\w-]+)")
_TEMPLATE_BARE_VSLOT_RE = re.compile(r"\sv-slot(?:\s*=|[\s>/])")
_TEMPLATE_NAMED_BLOCK_RE = re.compile(
    r"<template\s[^>]*(?:#|v-slot)[^>]*>[\s\S]*?</template>", re.IGNORECASE
)
_TEMPLATE_COMMENT_RE = re.compile(r"<!--[\s\S]*?-->")
_NON_COMPONENT_TAGS = frozenset(["template", "slot", "component", "transition", "keep-alive"])


def camelize(name: str) -> str:
    """`max-length` -> `maxLength`."""
    return _KEBAB_RE.sub(lambda m: m.group(1).upper(), name)


def handler_to_event(name: str) -> Optional[str]:
    """`onClick` -> `click`, `onUpdate:modelValue` -> `update:modelValue`."""
    if not _HANDLER_RE.match(name):
        return None
    rest = name[2:]
    return rest[0].lower() + rest[1:] if rest else None


@dataclass
class CoverageEvidence:
    """Names found in test source, per category."""

    inputs: Set[str] = field(default_factory=set)
    events: Set[str] = field(default_factory=set)
    slots: Set[str] = field(default_factory=set)
    exposed_members: Set[str] = field(default_factory=set)

    def get(self, category: str) -> Set[str]:
        if category == Category.INPUTS:
            return self.inputs
        if category == Category.EVENTS:
            return self.events
        if category == Category.SLOTS:
            return self.slots
        if category == Category.EXPOSED:
            return self.exposed_members
        raise KeyError(category)

    def merge(self, other: "CoverageEvidence") -> None:
        for category in Category.ALL:
            self.get(category).update(other.get(category))

    def add_input_or_event(self, name: str) -> None:
        """Route an options/attribute key: handlers are events, the rest inputs."""
        event = handler_to_event(name)
        if event is not None:
            self.events.add(event)
        else:
            self.inputs.add(name)


def build_report(surface: ComponentAPISurface, evidence: CoverageEvidence) -> CoverageReport:
    """Mirror each MemberList into CoverageEntries using collected evidence."""
    report = CoverageReport()
    for category in Category.ALL:
        found = {camelize(name) for name in evidence.get(category)}
        entries = report.get(category)
        for name in surface.get(category):
            entries.append(CoverageEntry(name=name, covered=camelize(name) in found))
    return report


class CoverageMatcher:
    """Computes per-member coverage of a surface from test source text.

    Test sources are parsed tolerantly: syntax errors reduce the evidence
    found but never raise.
    """

    def __init__(
        self,
        mount_callees: Sequence[str] = DEFAULT_MOUNT_CALLEES,
        syntax: Optional[SyntaxProvider] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.mount_callees: List[str] = list(mount_callees)
        self._logger = logger or globals()["logger"]
        self.syntax = syntax or SyntaxProvider(logger=self._logger)

    def match(
        self,
        surface: ComponentAPISurface,
        test_source: str,
        test_path: Optional[str] = None,
    ) -> CoverageReport:
        """Compute the CoverageReport of `surface` against one test source.

        Args:
            surface: Extracted component API surface.
            test_source: Test file source text.
            test_path: Test file path, used only to choose the grammar.

        Returns:
            CoverageReport mirroring the surface's order and membership.
        """
        if surface.is_empty():
            return build_report(surface, CoverageEvidence())
        return build_report(surface, self.collect_evidence(test_source, test_path))

    def collect_evidence(self, test_source: str, test_path: Optional[str] = None) -> CoverageEvidence:
        """Collect all recognized evidence from one test source."""
        module = self.syntax.parse(test_source, path=test_path, strict=False)
        root = module.root
        evidence = CoverageEvidence()

        vm_aliases = self._vm_aliases(root)

        for node in iter_descendants(root):
            kind = node.type
            if kind == "call_expression":
                self._call_evidence(node, evidence)
            elif kind in ("member_expression", "subscript_expression"):
                self._access_evidence(node, vm_aliases, evidence)
            elif kind == "variable_declarator":
                self._destructured_vm_evidence(node, vm_aliases, evidence)
            elif kind == "jsx_element":
                self._jsx_element_evidence(node, evidence)
            elif kind == "jsx_self_closing_element":
                self._jsx_attributes_evidence(node, evidence)

        self._logger.debug(
            f"Evidence in {test_path or '<test>'}: {evidence_by_category(evidence)}"
        )
        return evidence

    # ------------------------------------------------------------------
    # Calls: mount options, setProps, emitted
    # ------------------------------------------------------------------

    def _call_evidence(self, call: Node, evidence: CoverageEvidence) -> None:
        name = callee_name(call)
        if name in self.mount_callees:
            self._mount_evidence(call, evidence)
            return

        function = call.child_by_field_name("function")
        if function is None or function.type != "member_expression":
            return
        method = member_property_name(function)
        args = call_arguments(call)

        if method == "setProps" and args:
            obj = unwrap_expression(args[0])
            if obj is not None and obj.type == "object":
                for key in _object_keys(obj):
                    evidence.add_input_or_event(key)
        elif method == "emitted":
            if args:
                event = string_value(args[0])
                if event is not None:
                    evidence.events.add(event)
            else:
                self._emitted_collection_access(call, evidence)
        elif method == "toHaveProperty" and args:
            event = string_value(args[0])
            if event is not None and _expects_emitted(function.child_by_field_name("object")):
                evidence.events.add(event)

    def _emitted_collection_access(self, call: Node, evidence: CoverageEvidence) -> None:
        # `w.emitted().x` / `w.emitted()['x']`
        parent = call.parent
        while parent is not None and parent.type in ("parenthesized_expression", "non_null_expression"):
            parent = parent.parent
        if parent is None or parent.type not in ("member_expression", "subscript_expression"):
            return
        if unwrap_expression(parent.child_by_field_name("object")) != call:
            return
        event = member_property_name(parent)
        if event:
            evidence.events.add(event)

    def _mount_evidence(self, call: Node, evidence: CoverageEvidence) -> None:
        args = [unwrap_expression(arg) for arg in call_arguments(call)]
        if not args or args[0] is None:
            return
        if args[0].type == "object":
            # mount({ template: '<Comp ... />', components: { Comp } })
            options: Optional[Node] = args[0]
        else:
            options = args[1] if len(args) > 1 else None
        if options is None or options.type != "object":
            return

        components: Set[str] = set()
        template: Optional[str] = None
        for member in named_children(options):
            key = property_key_name(member)
            if key is None or member.type != "pair":
                continue
            value = unwrap_expression(member.child_by_field_name("value"))
            if value is None:
                continue
            if key in INPUT_OPTION_KEYS and value.type == "object":
                for prop in _object_keys(value):
                    evidence.add_input_or_event(prop)
            elif key == "slots" and value.type == "object":
                evidence.slots.update(_object_keys(value))
            elif key == "components" and value.type == "object":
                components.update(_object_keys(value))
            elif key == "template":
                template = string_value(value)

        if template:
            evidence.merge(template_evidence(template, components))

    # ------------------------------------------------------------------
    # Exposed members through wrapper.vm
    # ------------------------------------------------------------------

    def _vm_aliases(self, root: Node) -> Set[str]:
        """Local names bound to a mounted instance.

        Covers `const vm = w.vm` and `const { vm } = mount(...)` (also
        `{ vm: alias }`, awaited mounts and destructuring a wrapper variable).
        """
        aliases: Set[str] = set()
        wrappers: Set[str] = set()
        for node in iter_descendants(root):
            if node.type != "variable_declarator":
                continue
            target = node.child_by_field_name("name")
            if target is None:
                continue
            value = node.child_by_field_name("value")
            if target.type == "identifier":
                if _is_vm_expression(value, aliases):
                    aliases.add(node_text(target))
                elif self._is_mount_call(value):
                    wrappers.add(node_text(target))
            elif target.type == "object_pattern" and self._is_wrapper_value(value, wrappers):
                aliases.update(_destructured_vm_names(target))
        return aliases

    def _is_mount_call(self, node: Optional[Node]) -> bool:
        node = _unwrap_await(node)
        return (
            node is not None
            and node.type == "call_expression"
            and callee_name(node) in self.mount_callees
        )

    def _is_wrapper_value(self, node: Optional[Node], wrappers: Set[str]) -> bool:
        if self._is_mount_call(node):
            return True
        node = _unwrap_await(node)
        return node is not None and node.type == "identifier" and node_text(node) in wrappers

    def _access_evidence(self, node: Node, vm_aliases: Set[str], evidence: CoverageEvidence) -> None:
        if not _is_vm_expression(node.child_by_field_name("object"), vm_aliases):
            return
        name = member_property_name(node)
        if name:
            evidence.exposed_members.add(name)

    def _destructured_vm_evidence(
        self, declarator: Node, vm_aliases: Set[str], evidence: CoverageEvidence
    ) -> None:
        target = declarator.child_by_field_name("name")
        if target is None or target.type != "object_pattern":
            return
        if not _is_vm_expression(declarator.child_by_field_name("value"), vm_aliases):
            return
        for member in named_children(target):
            name = property_key_name(member)
            if name is None and member.type == "object_assignment_pattern":
                left = member.child_by_field_name("left")
                name = property_key_name(left) if left is not None else None
            if name:
                evidence.exposed_members.add(name)

    # ------------------------------------------------------------------
    # JSX
    # ------------------------------------------------------------------

    def _jsx_element_evidence(self, element: Node, evidence: CoverageEvidence) -> None:
        opening = element.child_by_field_name("open_tag")
        if opening is None or not _is_component_tag(opening):
            return
        self._jsx_attributes_evidence(opening, evidence)

        for child in named_children(element):
            if child.type == "jsx_text":
                if node_text(child).strip():
                    evidence.slots.add(DEFAULT_SLOT)
            elif child.type in ("jsx_element", "jsx_self_closing_element", "jsx_fragment"):
                evidence.slots.add(DEFAULT_SLOT)
            elif child.type == "jsx_expression":
                inner = named_children(child)
                if not inner:
                    continue
                expression = unwrap_expression(inner[0])
                if expression is not None and expression.type == "object":
                    evidence.slots.update(_object_keys(expression))
                else:
                    evidence.slots.add(DEFAULT_SLOT)

    def _jsx_attributes_evidence(self, tag: Node, evidence: CoverageEvidence) -> None:
        if not _is_component_tag(tag):
            return
        for attribute in named_children(tag):
            if attribute.type != "jsx_attribute":
                continue
            parts = named_children(attribute)
            if not parts:
                continue
            name = node_text(parts[0])
            value = parts[1] if len(parts) > 1 else None

            if name == "v-slots":
                expression = _jsx_expression_value(value)
                if expression is not None and expression.type == "object":
                    evidence.slots.update(_object_keys(expression))
            elif name == "v-model" or name.startswith(("v-model:", "v-model_")):
                _add_v_model(name, evidence)
            else:
                evidence.add_input_or_event(name)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _object_keys(obj: Node) -> List[str]:
    keys: List[str] = []
    for member in named_children(obj):
        key = property_key_name(member)
        if key is not None:
            keys.append(key)
    return keys


def _jsx_expression_value(value: Optional[Node]) -> Optional[Node]:
    if value is None or value.type != "jsx_expression":
        return None
    inner = named_children(value)
    return unwrap_expression(inner[0]) if inner else None


def _is_component_tag(tag: Node) -> bool:
    name = tag.child_by_field_name("name")
    if name is None:
        return False
    text = node_text(name)
    return bool(text) and (text[0].isupper() or "." in text)


def _is_vm_expression(node: Optional[Node], aliases: Set[str]) -> bool:
    """True for `<w>.vm` (casts and optional chaining allowed) or a vm alias."""
    node = unwrap_expression(node)
    if node is None:
        return False
    if node.type == "identifier":
        return node_text(node) in aliases
    if node.type == "member_expression":
        return member_property_name(node) == VM_MEMBER
    return False


def _unwrap_await(node: Optional[Node]) -> Optional[Node]:
    node = unwrap_expression(node)
    while node is not None and node.type == "await_expression":
        inner = named_children(node)
        node = unwrap_expression(inner[0]) if inner else None
    return node


def _destructured_vm_names(pattern: Node) -> List[str]:
    """Local names of `vm` / `vm: alias` entries of an object pattern."""
    names: List[str] = []
    for member in named_children(pattern):
        if member.type == "shorthand_property_identifier_pattern":
            if node_text(member) == VM_MEMBER:
                names.append(VM_MEMBER)
        elif member.type == "pair_pattern" and property_key_name(member) == VM_MEMBER:
            value = member.child_by_field_name("value")
            if value is not None and value.type == "identifier":
                names.append(node_text(value))
    return names


def _expects_emitted(node: Optional[Node]) -> bool:
    """Walk `expect(w.emitted())[.not]` down to the expect call."""
    while node is not None and node.type == "member_expression":
        node = node.child_by_field_name("object")
    if node is None or node.type != "call_expression" or callee_name(node) != "expect":
        return False
    args = call_arguments(node)
    if not args:
        return False
    subject = unwrap_expression(args[0])
    if subject is None or subject.type != "call_expression":
        return False
    function = subject.child_by_field_name("function")
    return function is not None and member_property_name(function) == "emitted"


def _add_v_model(name: str, evidence: CoverageEvidence) -> None:
    if name == "v-model":
        evidence.inputs.update(V_MODEL_INPUTS)
        evidence.events.update(V_MODEL_EVENTS)
        return
    model = name[len("v-model:"):]
    model = model.split(".", 1)[0]
    if model:
        evidence.inputs.add(model)
        evidence.events.add(f"update:{model}")


def _is_template_component(tag: str, components: Set[str]) -> bool:
    if tag.lower() in _NON_COMPONENT_TAGS:
        return False
    if tag in components or camelize(tag) in components:
        return True
    return tag[0].isupper() or "-" in tag


def _has_default_content(template: str, tag: str) -> bool:
    pattern = re.compile(rf"<{re.escape(tag)}(?:\s[^<>]*)?>([\s\S]*?)</{re.escape(tag)}>")
    for match in pattern.finditer(template):
        content = _TEMPLATE_NAMED_BLOCK_RE.sub("", match.group(1))
        content = _TEMPLATE_COMMENT_RE.sub("", content)
        if content.strip():
            return True
    return False


def template_evidence(template: str, components: Iterable[str] = ()) -> CoverageEvidence:
    """Collect evidence from a Vue template string.

    Attributes of component tags contribute inputs (`x=`, `:x`, `v-bind:x`,
    `v-model:x`) and events (`@x`, `v-on:x`, `v-model`). `#x` and
    `v-slot:x` anywhere contribute slots, as does non-empty default content
    of a component tag.
    """
    evidence = CoverageEvidence()
    known = set(components)
    component_tags: Set[str] = set()

    for match in _TEMPLATE_TAG_RE.finditer(template):
        tag, attrs = match.group(1), match.group(2) or ""
        if not _is_template_component(tag, known):
            continue
        component_tags.add(tag)
        for attr_match in _TEMPLATE_ATTR_RE.finditer(attrs):
            _template_attribute(attr_match.group(1), evidence)

    for match in _TEMPLATE_SLOT_RE.finditer(template):
        evidence.slots.add(match.group(1))
    if _TEMPLATE_BARE_VSLOT_RE.search(template):
        evidence.slots.add(DEFAULT_SLOT)

    for tag in component_tags:
        if _has_default_content(template, tag):
            evidence.slots.add(DEFAULT_SLOT)

    return evidence


def _template_attribute(raw: str, evidence: CoverageEvidence) -> None:
    if raw.startswith("#") or raw.startswith("v-slot"):
        return
    if raw == "v-model" or raw.startswith("v-model:"):
        _add_v_model(raw, evidence)
        return
    if raw.startswith("@"):
        event = raw[1:].split(".", 1)[0]
        if event:
            evidence.events.add(event)
        return
    if raw.startswith("v-on:"):
        event = raw[len("v-on:"):].split(".", 1)[0]
        if event:
            evidence.events.add(event)
        return
    if raw.startswith(":"):
        name = raw[1:]
    elif raw.startswith("v-bind:"):
        name = raw[len("v-bind:"):]
    elif raw.startswith("v-"):
        # Other directives (v-if, v-for, v-show) are not inputs
        return
    else:
        name = raw
    name = name.split(".", 1)[0]
    if name:
        evidence.add_input_or_event(name)


def evidence_by_category(evidence: CoverageEvidence) -> Dict[str, List[str]]:
    """Sorted evidence names per category, for diagnostics."""
    return {category: sorted(evidence.get(category)) for category in Category.ALL}
