# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Import binding collection for TypeScript/JavaScript modules.

Supported import forms:
- import Foo from './module'            -> Foo: ('./module', 'default')
- import { foo } from './module'        -> foo: ('./module', 'foo')
- import { foo as bar } from './module' -> bar: ('./module', 'foo')
- import Foo, { foo } from './module'   -> both of the above
- import * as ns from './module'        -> ns:  ('./module', '*')
- import type { Foo } from './types'    -> Foo: ('./types', 'Foo')

Side-effect imports (`import './style.css'`) bind nothing.
"""

import logging
from typing import Dict, Optional

from tree_sitter import Node

from .models import DEFAULT_EXPORT, ImportBinding
from .syntax import named_children, node_text, string_value

logger = logging.getLogger(__name__)

NAMESPACE_EXPORT = "*"


def _specifier_name(node: Optional[Node]) -> Optional[str]:
    if node is None:
        return None
    if node.type == "string":
        return string_value(node)
    return node_text(node)


def collect_imports(root: Node) -> Dict[str, ImportBinding]:
    """Build the local-name -> ImportBinding map of one module.

    Only top-level import declarations are considered. When a local name is
    bound more than once, the last declaration wins.

    Args:
        root: Root node of the module's syntax tree.

    Returns:
        Mapping from local name to ImportBinding. Empty if the module has
        no imports.
    """
    bindings: Dict[str, ImportBinding] = {}

    for statement in named_children(root):
        if statement.type != "import_statement":
            continue

        source = string_value(statement.child_by_field_name("source"))
        if source is None:
            continue

        clause = next((c for c in named_children(statement) if c.type == "import_clause"), None)
        if clause is None:
            continue

        for part in named_children(clause):
            if part.type == "identifier":
                local = node_text(part)
                bindings[local] = ImportBinding(local, source, DEFAULT_EXPORT)
            elif part.type == "namespace_import":
                ident = next((c for c in named_children(part) if c.type == "identifier"), None)
                if ident is not None:
                    local = node_text(ident)
                    bindings[local] = ImportBinding(local, source, NAMESPACE_EXPORT)
            elif part.type == "named_imports":
                for specifier in named_children(part):
                    if specifier.type != "import_specifier":
                        continue
                    imported = _specifier_name(specifier.child_by_field_name("name"))
                    local = _specifier_name(specifier.child_by_field_name("alias")) or imported
                    if not imported or not local:
                        continue
                    bindings[local] = ImportBinding(local, source, imported)

    logger.debug(f"Collected {len(bindings)} import bindings")
    return bindings
