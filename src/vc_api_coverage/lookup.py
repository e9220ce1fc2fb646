# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Cross-module declaration lookup.

Given a module path and an exported name, CrossModuleLookup loads and parses
that module and locates the exported declaration node. Search order inside
the target module is document order, first match wins:

1. `export const <name> = <literal>` (casts unwrapped)
2. `export { local as <name> }` followed to the local initializer, or to the
   import binding it re-exports
3. `export { a as <name> } from './m'` and `export * from './m'` chains
4. `export default <literal>` when the requested name is "default"

Every miss (missing file, unreadable file, parse failure, no matching export,
unsupported shape, cycle, depth limit) is non-fatal: the lookup returns None
and logs at DEBUG. Parsed modules are not cached; within one ResolutionContext
a (module, name) pair that resolved absent is not searched again.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple

from tree_sitter import Node

from .errors import ComponentParseError
from .filesystem import FileSystemAccessor, PathResolver
from .imports import NAMESPACE_EXPORT, collect_imports
from .models import DEFAULT_EXPORT, ImportBinding
from .syntax import (
    SourceModule,
    SyntaxProvider,
    cast_type,
    is_default_export,
    iter_descendants,
    named_children,
    node_text,
    string_value,
    unwrap_expression,
    variable_declarators,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESOLUTION_DEPTH = 32

# Initializer shapes a declaration lookup can hand back to the normalizer
LITERAL_NODE_TYPES = frozenset(["array", "object"])
TYPE_DECLARATION_TYPES = frozenset(["interface_declaration", "type_alias_declaration"])


@dataclass
class ModuleScope:
    """A parsed module together with its import bindings."""

    module: SourceModule
    imports: Dict[str, ImportBinding] = field(default_factory=dict)

    @property
    def path(self) -> Optional[str]:
        return self.module.path

    @property
    def root(self) -> Node:
        return self.module.root

    @property
    def directory(self) -> str:
        if self.module.path is None:
            return str(Path.cwd())
        return str(Path(self.module.path).parent)

    @classmethod
    def from_module(cls, module: SourceModule) -> "ModuleScope":
        return cls(module=module, imports=collect_imports(module.root))


@dataclass
class Declaration:
    """A located declaration node and the scope it lives in."""

    node: Node
    scope: ModuleScope

    @property
    def imports(self) -> Dict[str, ImportBinding]:
        return self.scope.imports


class ResolutionContext:
    """Per-analysis resolution state.

    Tracks the (module, name) pairs on the chain currently being resolved so
    cyclic re-exports terminate, and caps the chain length. Pairs are released
    when their resolution returns, so resolving the same reference twice in
    one analysis yields the same result both times.

    A pair whose resolution came back empty without any cycle or depth cut
    below it is remembered as absent; later visits of that pair are refused
    at once. Shared `export *` barrels are therefore searched once per
    analysis instead of once per path that reaches them.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_RESOLUTION_DEPTH) -> None:
        self.max_depth = max_depth
        self.truncations = 0
        self._active: Set[Tuple[str, str]] = set()
        self._chain: List[Tuple[str, str]] = []
        self._absent: Set[Tuple[str, str]] = set()

    @property
    def depth(self) -> int:
        return len(self._chain)

    def is_absent(self, module_path: str, name: str) -> bool:
        return (module_path, name) in self._absent

    def mark_absent(self, module_path: str, name: str, truncations_before: int) -> None:
        """Remember a pair as absent unless a cycle or depth cut shaped the miss.

        Args:
            truncations_before: Value of `truncations` when the pair was entered.
        """
        if self.truncations == truncations_before:
            self._absent.add((module_path, name))

    @contextmanager
    def visit(self, module_path: str, name: str) -> Iterator[bool]:
        """Enter a (module, name) pair.

        Yields:
            False if the pair is already on the chain, is known absent, or the
            depth limit is reached; the caller must then treat the reference
            as absent.
        """
        key = (module_path, name)
        if key in self._absent:
            logger.debug(f"'{name}' already known absent in {module_path}")
            yield False
            return
        if key in self._active:
            logger.debug(f"Cycle detected resolving '{name}' in {module_path}")
            self.truncations += 1
            yield False
            return
        if len(self._chain) >= self.max_depth:
            logger.debug(f"Resolution depth limit ({self.max_depth}) reached at {module_path}")
            self.truncations += 1
            yield False
            return

        self._active.add(key)
        self._chain.append(key)
        try:
            yield True
        finally:
            self._chain.pop()
            self._active.discard(key)


def declaration_value(value: Optional[Node]) -> Optional[Node]:
    """Reduce an initializer to a node the normalizer understands.

    Returns the unwrapped array/object literal, the cast node itself when the
    cast targets a generic type (`Object as SlotsType<{...}>`), or None.
    """
    if value is None:
        return None
    unwrapped = unwrap_expression(value)
    if unwrapped is not None and unwrapped.type in LITERAL_NODE_TYPES:
        return unwrapped

    current = value
    while current.type in ("parenthesized_expression", "non_null_expression"):
        inner = named_children(current)
        if not inner:
            return None
        current = inner[0]
    if current.type in ("as_expression", "satisfies_expression", "type_assertion"):
        target = cast_type(current)
        if target is not None and target.type == "generic_type":
            return current
    return None


def find_local_initializer(root: Node, name: str) -> Optional[Node]:
    """Initializer of the first variable declarator named `name`, in document order."""
    for declarator in variable_declarators(root):
        target = declarator.child_by_field_name("name")
        if target is not None and target.type == "identifier" and node_text(target) == name:
            value = declarator.child_by_field_name("value")
            if value is not None:
                return value
    return None


def find_local_type(root: Node, name: str) -> Optional[Node]:
    """First interface or type alias declaration named `name`."""
    for node in iter_descendants(root):
        if node.type in TYPE_DECLARATION_TYPES:
            type_name = node.child_by_field_name("name")
            if type_name is not None and node_text(type_name) == name:
                return node
    return None


def _export_specifiers(statement: Node) -> Iterator[Tuple[str, str]]:
    """Yield (local_name, exported_name) pairs of an export clause."""
    clause = next((c for c in named_children(statement) if c.type == "export_clause"), None)
    if clause is None:
        return
    for specifier in named_children(clause):
        if specifier.type != "export_specifier":
            continue
        name_node = specifier.child_by_field_name("name")
        alias_node = specifier.child_by_field_name("alias")
        if name_node is None:
            continue
        local = string_value(name_node) if name_node.type == "string" else node_text(name_node)
        exported = local
        if alias_node is not None:
            exported = string_value(alias_node) if alias_node.type == "string" else node_text(alias_node)
        if local and exported:
            yield local, exported


def _is_star_reexport(statement: Node) -> bool:
    # `export * from './m'` but not `export * as ns from './m'`
    has_star = any(child.type == "*" for child in statement.children)
    has_namespace = any(child.type == "namespace_export" for child in named_children(statement))
    return has_star and not has_namespace


class CrossModuleLookup:
    """Locates exported declarations across module boundaries.

    Thread Safety:
    - NOT thread-safe: owns tree-sitter parsers via its SyntaxProvider
    - Use one instance per analysis thread
    """

    def __init__(
        self,
        syntax: SyntaxProvider,
        filesystem: FileSystemAccessor,
        path_resolver: PathResolver,
        max_depth: int = DEFAULT_MAX_RESOLUTION_DEPTH,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.syntax = syntax
        self.filesystem = filesystem
        self.path_resolver = path_resolver
        self.max_depth = max_depth
        self._logger = logger or globals()["logger"]

    def new_context(self) -> ResolutionContext:
        return ResolutionContext(self.max_depth)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(
        self,
        module_path: str,
        exported_name: str,
        context: Optional[ResolutionContext] = None,
    ) -> Optional[Declaration]:
        """Locate the value declaration exported as `exported_name`.

        Args:
            module_path: Resolved file path of the module to search.
            exported_name: Exported name, or DEFAULT_EXPORT.
            context: Resolution state of the current analysis.

        Returns:
            Declaration whose node is an array/object literal or a generic
            cast, paired with the target module's own import map; None on
            any miss.
        """
        context = context or self.new_context()
        with context.visit(module_path, exported_name) as allowed:
            if not allowed:
                return None
            truncations = context.truncations
            found = None
            scope = self._load(module_path)
            if scope is not None:
                found = self._find_export(scope, exported_name, context, want_type=False)
            if found is None:
                self._logger.debug(f"Export '{exported_name}' not found in {module_path}")
                context.mark_absent(module_path, exported_name, truncations)
            return found

    def resolve_type(
        self,
        module_path: str,
        name: str,
        context: Optional[ResolutionContext] = None,
    ) -> Optional[Declaration]:
        """Locate an exported interface or type alias declaration."""
        context = context or self.new_context()
        key = f"type {name}"
        with context.visit(module_path, key) as allowed:
            if not allowed:
                return None
            truncations = context.truncations
            found = None
            scope = self._load(module_path)
            if scope is not None:
                found = self._find_export(scope, name, context, want_type=True)
            if found is None:
                self._logger.debug(f"Exported type '{name}' not found in {module_path}")
                context.mark_absent(module_path, key, truncations)
            return found

    def resolve_binding(
        self,
        binding: ImportBinding,
        scope: ModuleScope,
        context: ResolutionContext,
        want_type: bool = False,
    ) -> Optional[Declaration]:
        """Follow an import binding of `scope` to its declaration."""
        if binding.exported_name == NAMESPACE_EXPORT:
            self._logger.debug(f"Namespace import '{binding.local_name}' is not followed")
            return None
        target = self.path_resolver.resolve(binding.source_module, scope.directory)
        if target is None:
            self._logger.debug(
                f"Cannot resolve module '{binding.source_module}' from {scope.path or '<source>'}"
            )
            return None
        if want_type:
            return self.resolve_type(target, binding.exported_name, context)
        return self.resolve(target, binding.exported_name, context)

    def resolve_identifier(
        self,
        name: str,
        scope: ModuleScope,
        context: ResolutionContext,
        want_type: bool = False,
    ) -> Optional[Declaration]:
        """Resolve an identifier of `scope`: local binding first, then imports."""
        path = scope.path or "<source>"
        key = f"local type {name}" if want_type else f"local {name}"
        with context.visit(path, key) as allowed:
            if not allowed:
                return None
            truncations = context.truncations
            found = self._resolve_in_scope(name, scope, context, want_type)
            if found is None:
                context.mark_absent(path, key, truncations)
            return found

    def _resolve_in_scope(
        self,
        name: str,
        scope: ModuleScope,
        context: ResolutionContext,
        want_type: bool,
    ) -> Optional[Declaration]:
        if want_type:
            local_type = find_local_type(scope.root, name)
            if local_type is not None:
                return Declaration(local_type, scope)
        else:
            initializer = find_local_initializer(scope.root, name)
            if initializer is not None:
                return self._accept_value(initializer, scope, context)

        binding = scope.imports.get(name)
        if binding is not None:
            return self.resolve_binding(binding, scope, context, want_type=want_type)

        self._logger.debug(
            f"Identifier '{name}' has no local or imported binding in {scope.path or '<source>'}"
        )
        return None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load(self, module_path: str) -> Optional[ModuleScope]:
        text = self.filesystem.read_text(module_path)
        if text is None:
            self._logger.debug(f"Module not readable: {module_path}")
            return None
        try:
            module = self.syntax.parse(text, path=module_path)
        except ComponentParseError as e:
            # Chained parse failures are resolution misses
            self._logger.debug(f"Skipping unparseable dependency {module_path}: {e}")
            return None
        return ModuleScope.from_module(module)

    def _accept_value(
        self, value: Node, scope: ModuleScope, context: ResolutionContext
    ) -> Optional[Declaration]:
        accepted = declaration_value(value)
        if accepted is not None:
            return Declaration(accepted, scope)
        unwrapped = unwrap_expression(value)
        if unwrapped is not None and unwrapped.type == "identifier":
            return self.resolve_identifier(node_text(unwrapped), scope, context)
        self._logger.debug(
            f"Unsupported declaration shape '{value.type}' in {scope.path or '<source>'}"
        )
        return None

    def _find_export(
        self,
        scope: ModuleScope,
        name: str,
        context: ResolutionContext,
        want_type: bool,
    ) -> Optional[Declaration]:
        for statement in named_children(scope.root):
            if statement.type != "export_statement":
                continue

            source_node = statement.child_by_field_name("source")
            source = string_value(source_node) if source_node is not None else None
            declaration = statement.child_by_field_name("declaration")

            if declaration is not None:
                found = self._match_exported_declaration(declaration, scope, name, context, want_type)
                if found is not None:
                    return found
                continue

            if is_default_export(statement):
                if name == DEFAULT_EXPORT and not want_type:
                    value = statement.child_by_field_name("value")
                    if value is not None:
                        found = self._accept_value(value, scope, context)
                        if found is not None:
                            return found
                continue

            if source is not None:
                found = self._follow_reexport(statement, source, scope, name, context, want_type)
                if found is not None:
                    return found
                continue

            for local, exported in _export_specifiers(statement):
                if exported == name:
                    found = self.resolve_identifier(local, scope, context, want_type=want_type)
                    if found is not None:
                        return found

        return None

    def _match_exported_declaration(
        self,
        declaration: Node,
        scope: ModuleScope,
        name: str,
        context: ResolutionContext,
        want_type: bool,
    ) -> Optional[Declaration]:
        if want_type:
            if declaration.type in TYPE_DECLARATION_TYPES:
                type_name = declaration.child_by_field_name("name")
                if type_name is not None and node_text(type_name) == name:
                    return Declaration(declaration, scope)
            return None

        if declaration.type not in ("lexical_declaration", "variable_declaration"):
            return None
        for declarator in named_children(declaration):
            if declarator.type != "variable_declarator":
                continue
            target = declarator.child_by_field_name("name")
            if target is None or target.type != "identifier" or node_text(target) != name:
                continue
            value = declarator.child_by_field_name("value")
            if value is not None:
                return self._accept_value(value, scope, context)
        return None

    def _follow_reexport(
        self,
        statement: Node,
        source: str,
        scope: ModuleScope,
        name: str,
        context: ResolutionContext,
        want_type: bool,
    ) -> Optional[Declaration]:
        if _is_star_reexport(statement):
            if name == DEFAULT_EXPORT:
                return None
            imported = name
        else:
            imported = None
            for local, exported in _export_specifiers(statement):
                if exported == name:
                    imported = local
                    break
            if imported is None:
                return None

        binding = ImportBinding(name, source, imported)
        return self.resolve_binding(binding, scope, context, want_type=want_type)
