# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Normalization of declaration nodes into member names.

Every extraction strategy ends up holding some declaration node: an array or
object literal, a bare identifier, a generic cast such as
`Object as SlotsType<{...}>`, or a type argument of a declaration call. The
Normalizer turns any of these into a MemberList:

- Array literal: string and substitution-free template string elements
  contribute their value, identifier elements contribute their name, spread
  identifiers are resolved
- Object literal: property keys, shorthand properties and method names
  contribute, spread identifiers are resolved
- Identifier: resolved like a spread argument (local binding first, then the
  import chain via CrossModuleLookup)
- Types: call signatures contribute their first parameter's string literal
  type, property and method signatures contribute their names; type
  references, `extends` clauses, intersections and unions are followed

Unresolvable elements are skipped one at a time; nothing here raises.
"""

import logging
from typing import Optional

from tree_sitter import Node

from ..lookup import CrossModuleLookup, ModuleScope, ResolutionContext
from ..models import MemberList
from ..syntax import (
    annotated_type,
    cast_type,
    named_children,
    node_text,
    property_key_name,
    string_value,
    type_arguments,
    unwrap_expression,
)

logger = logging.getLogger(__name__)

TYPE_MEMBER_NAMED = frozenset(["property_signature", "method_signature"])


class Normalizer:
    """Turns declaration nodes into MemberLists for one analysis.

    Holds the analysis' ResolutionContext, so one Normalizer must not be
    shared between analyses.
    """

    def __init__(
        self,
        lookup: CrossModuleLookup,
        context: Optional[ResolutionContext] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.lookup = lookup
        self.context = context or lookup.new_context()
        self._logger = logger or globals()["logger"]

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def names_from_value(self, node: Optional[Node], scope: ModuleScope) -> MemberList:
        """Normalize any value-position declaration node."""
        names = MemberList()
        if node is None:
            return names

        # Generic casts carry their members in the type argument
        stripped = node
        while stripped.type in ("parenthesized_expression", "non_null_expression"):
            inner = named_children(stripped)
            if not inner:
                break
            stripped = inner[0]
        if stripped.type in ("as_expression", "satisfies_expression", "type_assertion"):
            target = cast_type(stripped)
            if target is not None and target.type == "generic_type":
                inner_value = unwrap_expression(stripped)
                if inner_value is None or inner_value.type not in ("array", "object"):
                    return self.names_from_type(target, scope)

        value = unwrap_expression(node)
        if value is None:
            return names
        if value.type == "array":
            return self.names_from_array(value, scope)
        if value.type == "object":
            return self.names_from_object(value, scope)
        if value.type == "identifier":
            return self.names_from_identifier(node_text(value), scope)

        self._logger.debug(
            f"Unsupported declaration shape '{value.type}' in {scope.path or '<source>'}"
        )
        return names

    def names_from_identifier(self, name: str, scope: ModuleScope) -> MemberList:
        declaration = self.lookup.resolve_identifier(name, scope, self.context)
        if declaration is None:
            return MemberList()
        return self.names_from_value(declaration.node, declaration.scope)

    def names_from_array(self, array: Node, scope: ModuleScope) -> MemberList:
        names = MemberList()
        for element in named_children(array):
            if element.type in ("string", "template_string"):
                value = string_value(element)
                if value is not None:
                    names.add(value)
            elif element.type == "identifier":
                # Placeholder reference: the identifier itself names the member
                names.add(node_text(element))
            elif element.type == "spread_element":
                names.extend(self._spread_names(element, scope))
        return names

    def names_from_object(self, obj: Node, scope: ModuleScope) -> MemberList:
        names = MemberList()
        for member in named_children(obj):
            if member.type == "spread_element":
                names.extend(self._spread_names(member, scope))
                continue
            name = property_key_name(member)
            if name is not None:
                names.add(name)
        return names

    def _spread_names(self, spread: Node, scope: ModuleScope) -> MemberList:
        argument = named_children(spread)
        target = unwrap_expression(argument[0]) if argument else None
        if target is None or target.type != "identifier":
            self._logger.debug(f"Skipping non-identifier spread in {scope.path or '<source>'}")
            return MemberList()
        return self.names_from_identifier(node_text(target), scope)

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def names_from_type(self, type_node: Optional[Node], scope: ModuleScope) -> MemberList:
        """Normalize a type (type argument, annotation or type declaration)."""
        names = MemberList()
        if type_node is None:
            return names

        kind = type_node.type
        if kind in ("type_annotation", "parenthesized_type"):
            inner = named_children(type_node)
            return self.names_from_type(inner[0], scope) if inner else names

        if kind in ("object_type", "interface_body"):
            for member in named_children(type_node):
                if member.type == "call_signature":
                    names.extend(self._call_signature_names(member))
                elif member.type in TYPE_MEMBER_NAMED:
                    name = property_key_name(member)
                    if name is not None:
                        names.add(name)
            return names

        if kind in ("intersection_type", "union_type"):
            for part in named_children(type_node):
                names.extend(self.names_from_type(part, scope))
            return names

        if kind == "generic_type":
            args = type_arguments(type_node)
            if args:
                return self.names_from_type(args[0], scope)
            base = type_node.child_by_field_name("name")
            return self.names_from_type(base, scope)

        if kind == "type_identifier":
            return self._names_from_type_reference(node_text(type_node), scope)

        if kind == "interface_declaration":
            for child in named_children(type_node):
                if child.type == "extends_type_clause":
                    for base in named_children(child):
                        names.extend(self.names_from_type(base, scope))
            names.extend(self.names_from_type(type_node.child_by_field_name("body"), scope))
            return names

        if kind == "type_alias_declaration":
            return self.names_from_type(type_node.child_by_field_name("value"), scope)

        self._logger.debug(f"Unsupported type shape '{kind}' in {scope.path or '<source>'}")
        return names

    def _names_from_type_reference(self, name: str, scope: ModuleScope) -> MemberList:
        declaration = self.lookup.resolve_identifier(name, scope, self.context, want_type=True)
        if declaration is None:
            return MemberList()
        return self.names_from_type(declaration.node, declaration.scope)

    def _call_signature_names(self, signature: Node) -> MemberList:
        """Names from `(e: 'change', id: number): void` style signatures."""
        names = MemberList()
        parameters = signature.child_by_field_name("parameters")
        if parameters is None:
            parameters = next(
                (c for c in named_children(signature) if c.type == "formal_parameters"), None
            )
        if parameters is None:
            return names
        params = named_children(parameters)
        if not params:
            return names
        param_type = annotated_type(params[0])
        if param_type is not None:
            names.extend(_string_literal_types(param_type))
        return names


def _string_literal_types(type_node: Node) -> MemberList:
    names = MemberList()
    if type_node.type == "literal_type":
        for child in named_children(type_node):
            value = string_value(child)
            if value is not None:
                names.add(value)
    elif type_node.type in ("union_type", "parenthesized_type"):
        for part in named_children(type_node):
            names.extend(_string_literal_types(part))
    return names
