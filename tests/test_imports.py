# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for import binding collection.

Tests cover:
- Default, named, aliased and namespace imports
- Type-only imports
- Side-effect imports and modules without imports
- Later declarations overriding earlier ones
"""

from vc_api_coverage.imports import NAMESPACE_EXPORT, collect_imports
from vc_api_coverage.models import ImportBinding
from vc_api_coverage.syntax import SyntaxProvider


def _imports(code: str, path: str = "Comp.ts"):
    module = SyntaxProvider().parse(code, path=path)
    return collect_imports(module.root)


class TestImportForms:
    """Tests for each supported import form."""

    def test_no_imports(self):
        """Test that a module without imports yields an empty map."""
        assert _imports("const a = 1\n") == {}

    def test_default_import(self):
        """Test that a default import binds to the 'default' export."""
        bindings = _imports("import Button from './Button.vue'\n")

        assert bindings == {"Button": ImportBinding("Button", "./Button.vue", "default")}

    def test_named_and_aliased_imports(self):
        """Test named imports with and without aliases."""
        bindings = _imports("import { foo, foo as bar } from './module'\n")

        assert bindings["foo"] == ImportBinding("foo", "./module", "foo")
        assert bindings["bar"] == ImportBinding("bar", "./module", "foo")

    def test_default_and_named_together(self):
        """Test `import A, { b } from` binds both names."""
        bindings = _imports("import Comp, { events } from './comp'\n")

        assert bindings["Comp"].exported_name == "default"
        assert bindings["events"].exported_name == "events"
        assert bindings["events"].source_module == "./comp"

    def test_namespace_import(self):
        """Test `import * as ns from` binds the namespace marker."""
        bindings = _imports("import * as shared from './shared'\n")

        assert bindings["shared"].exported_name == NAMESPACE_EXPORT

    def test_type_only_import(self):
        """Test that type-only imports are collected like value imports."""
        bindings = _imports("import type { ButtonProps } from './types'\n")

        assert bindings["ButtonProps"] == ImportBinding("ButtonProps", "./types", "ButtonProps")

    def test_side_effect_import(self):
        """Test that side-effect imports bind nothing."""
        assert _imports("import './style.css'\n") == {}


class TestImportEdgeCases:
    """Tests for ambiguous and repeated bindings."""

    def test_last_binding_wins(self):
        """Test that a later import of the same local name replaces the earlier one."""
        bindings = _imports(
            "import { events } from './a'\n"
            "import { other as events } from './b'\n"
        )

        assert bindings["events"] == ImportBinding("events", "./b", "other")

    def test_imports_in_vue_script_setup(self):
        """Test that imports are read from the script block of an SFC."""
        bindings = _imports(
            "<template><div /></template>\n"
            "<script setup lang=\"ts\">\n"
            "import { sizes } from './sizes'\n"
            "</script>\n",
            path="Comp.vue",
        )

        assert bindings["sizes"] == ImportBinding("sizes", "./sizes", "sizes")
