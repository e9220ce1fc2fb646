# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for the tree-sitter syntax provider and node helpers."""

import pytest

from vc_api_coverage.errors import ComponentParseError
from vc_api_coverage.syntax import (
    TSX_LANGUAGE,
    TYPESCRIPT_LANGUAGE,
    SyntaxProvider,
    find_all,
    language_for,
    split_sfc,
    string_value,
    unwrap_expression,
)


class TestSplitSfc:
    """Tests for Vue single-file component splitting."""

    def test_prefers_script_setup(self):
        """Test that <script setup> wins over a plain <script> block."""
        text = (
            "<template><div /></template>\n"
            "<script lang=\"ts\">export default { name: 'X' }</script>\n"
            "<script setup lang=\"tsx\">const a = 1</script>\n"
        )

        script, lang, template = split_sfc(text)

        assert script == "const a = 1"
        assert lang == "tsx"
        assert template == "<div />"

    def test_plain_script(self):
        """Test a component with only a plain <script> block."""
        script, lang, template = split_sfc("<script>export default {}</script>")

        assert script == "export default {}"
        assert lang is None
        assert template == ""

    def test_template_only_component(self):
        """Test that a template-only component has an empty script."""
        script, lang, template = split_sfc("<template><slot name=\"a\" /></template>\n")

        assert script == ""
        assert lang is None
        assert template == "<slot name=\"a\" />"

    def test_no_script_block(self):
        """Test that text without script blocks is returned whole."""
        script, lang, _ = split_sfc("export const a = 1")

        assert script == "export const a = 1"
        assert lang is None


class TestLanguageSelection:
    """Tests for grammar selection."""

    def test_ts_suffix_uses_typescript(self):
        """Test that .ts/.mts/.cts files use the TypeScript grammar."""
        assert language_for("a.ts") is TYPESCRIPT_LANGUAGE
        assert language_for("a.mts") is TYPESCRIPT_LANGUAGE
        assert language_for("a.cts") is TYPESCRIPT_LANGUAGE

    def test_jsx_capable_suffixes_use_tsx(self):
        """Test that .tsx/.jsx/.js files use the TSX grammar."""
        assert language_for("a.tsx") is TSX_LANGUAGE
        assert language_for("a.jsx") is TSX_LANGUAGE
        assert language_for("a.js") is TSX_LANGUAGE
        assert language_for(None) is TSX_LANGUAGE

    def test_lang_attribute_wins(self):
        """Test that an SFC lang attribute decides the grammar."""
        assert language_for("a.vue", "tsx") is TSX_LANGUAGE
        assert language_for("a.vue", "ts") is TYPESCRIPT_LANGUAGE


class TestSyntaxProvider:
    """Tests for parsing."""

    def test_parse_vue_keeps_template(self):
        """Test that parsing an SFC keeps the template beside the script tree."""
        provider = SyntaxProvider()
        module = provider.parse(
            "<template><slot /></template>\n<script setup>const x = 1</script>",
            path="Comp.vue",
        )

        assert module.template == "<slot />"
        assert module.root.type == "program"
        assert module.source == b"const x = 1"

    def test_strict_parse_error_raises(self):
        """Test that a syntax error raises ComponentParseError with a line number."""
        provider = SyntaxProvider()

        with pytest.raises(ComponentParseError) as exc_info:
            provider.parse("const a = 1\nexport default {\n  props: [\n", path="Broken.ts")

        assert exc_info.value.path == "Broken.ts"
        assert exc_info.value.line >= 1

    def test_tolerant_parse_does_not_raise(self):
        """Test that tolerant parsing returns a tree despite errors."""
        provider = SyntaxProvider()

        module = provider.parse("mount(Comp, { props: { title: 'x' } }\n", strict=False)

        assert module.root.has_error


class TestNodeHelpers:
    """Tests for literal decoding and cast unwrapping."""

    def _first(self, code: str, node_type: str, path: str = "a.ts"):
        module = SyntaxProvider().parse(code, path=path)
        return next(find_all(module.root, node_type))

    def test_string_value_quotes_and_escapes(self):
        """Test decoding of single and double quoted strings with escapes."""
        assert string_value(self._first("const a = 'it\\'s'", "string")) == "it's"
        assert string_value(self._first('const a = "update:modelValue"', "string")) == (
            "update:modelValue"
        )

    def test_template_with_substitution_is_not_constant(self):
        """Test that template strings with substitutions have no constant value."""
        node = self._first("const a = `on${name}`", "template_string")

        assert string_value(node) is None

    def test_unwrap_casts(self):
        """Test that as/satisfies/non-null/parentheses are stripped."""
        module = SyntaxProvider().parse(
            "const a = ((['x'] as const) satisfies readonly string[])!", path="a.ts"
        )
        declarator = next(find_all(module.root, "variable_declarator"))

        value = unwrap_expression(declarator.child_by_field_name("value"))

        assert value.type == "array"
