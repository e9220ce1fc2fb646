# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Syntax provider backed by tree-sitter TypeScript/TSX grammars.

This module turns raw source text into syntax trees and provides the small
set of node helpers shared by the extraction engine and the matcher:
- Grammar selection by file suffix (TypeScript vs. TSX)
- Vue single-file component splitting (<script setup> preferred, <template> kept)
- Literal value decoding for strings and substitution-free template strings
- Property key decoding for object literals and type members
- Cast unwrapping (as / satisfies / <T>x / x! / parentheses)

The parser itself is the tree-sitter library; nothing here parses text.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterator, List, Optional, Tuple

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from .errors import ComponentParseError

logger = logging.getLogger(__name__)

# Load TypeScript and TSX grammars
TYPESCRIPT_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())

TYPESCRIPT_SUFFIXES = frozenset([".ts", ".mts", ".cts"])

# Expression wrappers that do not change the value of the wrapped expression
CAST_NODE_TYPES = frozenset(
    [
        "as_expression",
        "satisfies_expression",
        "type_assertion",
        "non_null_expression",
        "parenthesized_expression",
    ]
)

_SCRIPT_BLOCK_RE = re.compile(r"<script\b([^>]*)>([\s\S]*?)</script>", re.IGNORECASE)
_TEMPLATE_BLOCK_RE = re.compile(r"<template[^>]*>([\s\S]*)</template>", re.IGNORECASE)
_LANG_ATTR_RE = re.compile(r"""\blang\s*=\s*["']([\w-]+)["']""", re.IGNORECASE)
_SETUP_ATTR_RE = re.compile(r"\bsetup\b", re.IGNORECASE)
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "b": "\b", "f": "\f", "v": "\v"}


@dataclass
class SourceModule:
    """A parsed module: its text, its tree and, for SFCs, its template."""

    path: Optional[str]
    source: bytes
    tree: Tree
    template: str = ""

    @property
    def root(self) -> Node:
        return self.tree.root_node


def split_sfc(text: str) -> Tuple[str, Optional[str], str]:
    """Split a Vue single-file component into script, script lang and template.

    A `<script setup>` block is preferred over a plain `<script>` block. A
    template-only component has an empty script; text with neither block is
    returned whole as script.

    Returns:
        Tuple of (script_text, lang or None, template_text).
    """
    template_match = _TEMPLATE_BLOCK_RE.search(text)
    template = template_match.group(1).strip() if template_match else ""

    blocks = _SCRIPT_BLOCK_RE.findall(text)
    if not blocks:
        return ("" if template_match else text), None, template

    chosen = blocks[0]
    for attrs, body in blocks:
        if _SETUP_ATTR_RE.search(attrs):
            chosen = (attrs, body)
            break

    lang_match = _LANG_ATTR_RE.search(chosen[0])
    lang = lang_match.group(1).lower() if lang_match else None
    return chosen[1], lang, template


def language_for(path: Optional[str], lang: Optional[str] = None) -> Language:
    """Pick the grammar for a file.

    `.ts` files use the TypeScript grammar so `<T>value` casts parse; JSX-capable
    files use TSX. For SFC script blocks the `lang` attribute decides.
    """
    if lang is not None:
        return TSX_LANGUAGE if lang in ("tsx", "jsx") else TYPESCRIPT_LANGUAGE
    if path is not None and PurePath(path).suffix.lower() in TYPESCRIPT_SUFFIXES:
        return TYPESCRIPT_LANGUAGE
    return TSX_LANGUAGE


class SyntaxProvider:
    """Turns source text into syntax trees.

    Parsers are created per provider instance; a provider is not shared
    between threads.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or globals()["logger"]
        self._typescript_parser = Parser(TYPESCRIPT_LANGUAGE)
        self._tsx_parser = Parser(TSX_LANGUAGE)

    def parse(self, source_text: str, path: Optional[str] = None, strict: bool = True) -> SourceModule:
        """Parse source text into a SourceModule.

        Args:
            source_text: Raw file content (plain script or Vue SFC).
            path: File path, used for grammar selection and messages.
            strict: If True, a tree containing syntax errors raises.

        Returns:
            Parsed SourceModule.

        Raises:
            ComponentParseError: If strict and the tree contains error nodes.
        """
        lang: Optional[str] = None
        template = ""
        script = source_text
        if path is not None and path.lower().endswith(".vue"):
            script, lang, template = split_sfc(source_text)
            # SFC script blocks without a lang attribute are plain TypeScript/JS
            if lang is None:
                lang = "ts"

        language = language_for(path, lang)
        parser = self._tsx_parser if language is TSX_LANGUAGE else self._typescript_parser
        source = script.encode("utf-8")
        tree = parser.parse(source)

        if strict and tree.root_node.has_error:
            line = _first_error_line(tree.root_node)
            raise ComponentParseError(
                f"Syntax error in {path or '<source>'} near line {line}",
                path=path or "<source>",
                line=line,
            )
        if tree.root_node.has_error:
            self._logger.debug(f"Parsed {path or '<source>'} with syntax errors (tolerant mode)")

        return SourceModule(path=path, source=source, tree=tree, template=template)


def _first_error_line(root: Node) -> int:
    for node in iter_descendants(root):
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
    return 0


# ---------------------------------------------------------------------------
# Node helpers
# ---------------------------------------------------------------------------


def node_text(node: Node) -> str:
    text = node.text
    return text.decode("utf-8") if text is not None else ""


def named_children(node: Node) -> List[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def iter_descendants(node: Node) -> Iterator[Node]:
    """Yield node and all its descendants in document (pre-order) order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def find_all(node: Node, node_type: str) -> Iterator[Node]:
    for candidate in iter_descendants(node):
        if candidate.type == node_type:
            yield candidate


def _decode_escape(escape: str) -> str:
    body = escape[1:]
    if not body:
        return ""
    if body[0] in _SIMPLE_ESCAPES and len(body) == 1:
        return _SIMPLE_ESCAPES[body[0]]
    if body[0] in "ux" and len(body) > 1:
        digits = body[1:].strip("{}")
        try:
            return chr(int(digits, 16))
        except ValueError:
            return body
    if body[0] == "\n":
        return ""
    return body


def string_value(node: Optional[Node]) -> Optional[str]:
    """Decode a string literal or a substitution-free template string.

    Returns:
        The literal value, or None if node is not a constant string.
    """
    if node is None:
        return None
    if node.type not in ("string", "template_string"):
        return None
    parts: List[str] = []
    for child in node.children:
        if child.type == "template_substitution":
            return None
        if child.type == "string_fragment":
            parts.append(node_text(child))
        elif child.type == "escape_sequence":
            parts.append(_decode_escape(node_text(child)))
    return "".join(parts)


def unwrap_expression(node: Optional[Node]) -> Optional[Node]:
    """Strip type casts, non-null assertions and parentheses."""
    while node is not None and node.type in CAST_NODE_TYPES:
        if node.type == "type_assertion":
            inner = [child for child in named_children(node) if child.type != "type_arguments"]
        else:
            inner = named_children(node)
        if not inner:
            return node
        node = inner[0]
    return node


def cast_type(node: Node) -> Optional[Node]:
    """Return the asserted type of an `x as T` / `x satisfies T` / `<T>x` node."""
    if node.type in ("as_expression", "satisfies_expression"):
        children = named_children(node)
        return children[-1] if len(children) > 1 else None
    if node.type == "type_assertion":
        type_args = next((c for c in named_children(node) if c.type == "type_arguments"), None)
        if type_args is not None:
            types = named_children(type_args)
            return types[0] if types else None
    return None


def type_arguments(node: Node) -> List[Node]:
    """Type arguments of a call expression or generic type."""
    args = node.child_by_field_name("type_arguments")
    if args is None:
        args = next((c for c in node.children if c.type == "type_arguments"), None)
    return named_children(args) if args is not None else []


def property_key_name(node: Node) -> Optional[str]:
    """Name contributed by an object member or type member.

    Handles `key: value`, `'key': value`, shorthand `{ key }`, methods
    `key() {}`, and property/method signatures in object types. Computed and
    numeric keys contribute nothing.
    """
    if node.type in ("shorthand_property_identifier", "shorthand_property_identifier_pattern"):
        return node_text(node)
    if node.type in ("pair", "pair_pattern"):
        key = node.child_by_field_name("key")
    elif node.type in (
        "method_definition",
        "property_signature",
        "method_signature",
        "public_field_definition",
        "abstract_method_signature",
    ):
        key = node.child_by_field_name("name")
    else:
        return None
    if key is None:
        return None
    if key.type in ("property_identifier", "identifier", "private_property_identifier"):
        return node_text(key)
    if key.type == "string":
        return string_value(key)
    return None


def callee_name(call: Node) -> Optional[str]:
    """Identifier name of a call's callee, or None for non-identifier callees."""
    function = call.child_by_field_name("function")
    if function is not None and function.type == "identifier":
        return node_text(function)
    return None


def call_arguments(call: Node) -> List[Node]:
    args = call.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return []
    return named_children(args)


def member_property_name(node: Node) -> Optional[str]:
    """Property name of `obj.prop` or `obj['prop']`."""
    if node.type == "member_expression":
        prop = node.child_by_field_name("property")
        if prop is not None and prop.type in ("property_identifier", "private_property_identifier"):
            return node_text(prop)
        return None
    if node.type == "subscript_expression":
        return string_value(node.child_by_field_name("index"))
    return None


def is_default_export(export_statement: Node) -> bool:
    return any(child.type == "default" for child in export_statement.children)


def variable_declarators(root: Node) -> Iterator[Node]:
    """All variable declarators of the module in document order."""
    for node in iter_descendants(root):
        if node.type == "variable_declarator":
            yield node


def annotated_type(node: Node) -> Optional[Node]:
    """Type inside a node's `: T` annotation (declarators, fields, signatures)."""
    annotation = node.child_by_field_name("type")
    if annotation is None or annotation.type != "type_annotation":
        annotation = next(
            (c for c in named_children(node) if c.type == "type_annotation"), annotation
        )
    if annotation is None:
        return None
    if annotation.type == "type_annotation":
        inner = named_children(annotation)
        return inner[0] if inner else None
    return annotation
