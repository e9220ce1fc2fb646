# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Instance-type derivation strategy for inputs and slots.

When the component's exported value is constructable, the members of its
instance type's `$props` (inputs) or `$slots` (slots) bag are the declared
names. The instance type is derived structurally from the syntax tree:

- An exported class: the type annotation of its `$props` / `$slots` field
- An exported value annotated with a constructor type:
      export const Comp: new () => { $props: { title: string } } = ...
- An exported value whose annotation is, or refers to, a type with a
  construct signature:
      interface CompCtor { new (): { $props: Props } }
      export declare const Comp: CompCtor

Framework-reserved names (ref, key, vnode hooks, class, style) are dropped.
"""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from tree_sitter import Node

from ..lookup import ModuleScope
from ..models import MemberList
from ..syntax import (
    annotated_type,
    is_default_export,
    iter_descendants,
    named_children,
    node_text,
    property_key_name,
)
from .base import ExtractionStrategy
from .normalizer import Normalizer

logger = logging.getLogger(__name__)

CLASS_NODE_TYPES = frozenset(["class_declaration", "abstract_class_declaration", "class"])
TypeInScope = Tuple[Node, ModuleScope]


def _first_named(node: Optional[Node]) -> Optional[Node]:
    if node is None:
        return None
    children = named_children(node)
    return children[0] if children else None


class InstanceTypeStrategy(ExtractionStrategy):
    """Reads a category from a bag member of the component's instance type."""

    def __init__(
        self,
        bag_member: str,
        reserved_names: Sequence[str] = (),
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.bag_member = bag_member
        self.reserved_names = frozenset(reserved_names)
        self._logger = logger or globals()["logger"]

    def extract(self, scope: ModuleScope, normalizer: Normalizer) -> MemberList:
        for candidate in self._exported_candidates(scope):
            bag = self._bag_type(candidate, scope, normalizer)
            if bag is None:
                continue
            bag_type, bag_scope = bag
            names = normalizer.names_from_type(bag_type, bag_scope)
            return MemberList(name for name in names if name not in self.reserved_names)
        return MemberList()

    def priority(self) -> int:
        return 50

    def name(self) -> str:
        return f"InstanceTypeStrategy({self.bag_member})"

    # ------------------------------------------------------------------
    # Exported value discovery
    # ------------------------------------------------------------------

    def _exported_candidates(self, scope: ModuleScope) -> Iterator[Node]:
        """Class or variable declarator nodes for exported values.

        The default export is tried first, then named exports in document order.
        """
        defaults: List[Node] = []
        named: List[Node] = []
        for statement in named_children(scope.root):
            if statement.type != "export_statement":
                continue
            target = defaults if is_default_export(statement) else named
            declaration = statement.child_by_field_name("declaration")
            value = statement.child_by_field_name("value")
            if declaration is not None:
                target.extend(self._declared_values(declaration))
            elif value is not None:
                if value.type in CLASS_NODE_TYPES:
                    target.append(value)
                elif value.type == "identifier":
                    local = self._find_local_value(scope, node_text(value))
                    if local is not None:
                        target.append(local)
        yield from defaults
        yield from named

    def _declared_values(self, declaration: Node) -> List[Node]:
        if declaration.type in CLASS_NODE_TYPES:
            return [declaration]
        if declaration.type == "ambient_declaration":
            values: List[Node] = []
            for child in named_children(declaration):
                values.extend(self._declared_values(child))
            return values
        if declaration.type in ("lexical_declaration", "variable_declaration"):
            return [d for d in named_children(declaration) if d.type == "variable_declarator"]
        return []

    def _find_local_value(self, scope: ModuleScope, name: str) -> Optional[Node]:
        for node in iter_descendants(scope.root):
            if node.type in CLASS_NODE_TYPES or node.type == "variable_declarator":
                node_name = node.child_by_field_name("name")
                if node_name is not None and node_text(node_name) == name:
                    return node
        return None

    # ------------------------------------------------------------------
    # Instance type navigation
    # ------------------------------------------------------------------

    def _bag_type(
        self, candidate: Node, scope: ModuleScope, normalizer: Normalizer
    ) -> Optional[TypeInScope]:
        if candidate.type in CLASS_NODE_TYPES:
            body = candidate.child_by_field_name("body")
            return self._member_type(body, scope, normalizer) if body is not None else None

        annotation = annotated_type(candidate)
        if annotation is None:
            return None
        instance = self._instance_type(annotation, scope, normalizer)
        if instance is None:
            return None
        instance_type, instance_scope = instance
        return self._member_type(instance_type, instance_scope, normalizer)

    def _resolve_type_name(
        self, name: str, scope: ModuleScope, normalizer: Normalizer
    ) -> Optional[TypeInScope]:
        declaration = normalizer.lookup.resolve_identifier(
            name, scope, normalizer.context, want_type=True
        )
        if declaration is None:
            return None
        node = declaration.node
        if node.type == "interface_declaration":
            body = node.child_by_field_name("body")
            return (body, declaration.scope) if body is not None else None
        if node.type == "type_alias_declaration":
            value = node.child_by_field_name("value")
            return (value, declaration.scope) if value is not None else None
        return None

    def _instance_type(
        self, type_node: Node, scope: ModuleScope, normalizer: Normalizer
    ) -> Optional[TypeInScope]:
        """Return the instance type constructed by a constructable type."""
        kind = type_node.type
        if kind == "parenthesized_type":
            inner = _first_named(type_node)
            return self._instance_type(inner, scope, normalizer) if inner is not None else None
        if kind == "constructor_type":
            parts = [
                c for c in named_children(type_node)
                if c.type not in ("formal_parameters", "type_parameters")
            ]
            return (parts[-1], scope) if parts else None
        if kind in ("object_type", "interface_body"):
            for member in named_children(type_node):
                if member.type == "construct_signature":
                    instance = annotated_type(member)
                    return (instance, scope) if instance is not None else None
            return None
        if kind == "type_identifier":
            resolved = self._resolve_type_name(node_text(type_node), scope, normalizer)
            if resolved is None:
                return None
            return self._instance_type(resolved[0], resolved[1], normalizer)
        return None

    def _member_type(
        self, container: Node, scope: ModuleScope, normalizer: Normalizer
    ) -> Optional[TypeInScope]:
        """Type of the bag member inside an instance type or class body."""
        if container.type == "type_identifier":
            resolved = self._resolve_type_name(node_text(container), scope, normalizer)
            if resolved is None:
                return None
            return self._member_type(resolved[0], resolved[1], normalizer)
        if container.type == "intersection_type":
            for part in named_children(container):
                found = self._member_type(part, scope, normalizer)
                if found is not None:
                    return found
            return None

        for member in named_children(container):
            if member.type not in ("property_signature", "public_field_definition"):
                continue
            if property_key_name(member) != self.bag_member:
                continue
            bag_type = annotated_type(member)
            if bag_type is not None:
                return bag_type, scope
        return None


