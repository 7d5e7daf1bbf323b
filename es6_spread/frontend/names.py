"""Name collection for hygienic temporaries.

A temporary is safe when its name appears nowhere in the compiled unit:
not as a binding, not as a reference (which a new binding could capture),
and not as a label or property key. Collecting every Identifier name is a
superset of all of these.
"""

from __future__ import annotations

from ..nodes import ASTNode, IDENTIFIER, node_type, walk


def collect_names(tree: ASTNode) -> frozenset[str]:
    """Return every identifier name used anywhere in tree."""
    names: set[str] = set()
    for node in walk(tree):
        if node_type(node) == IDENTIFIER:
            name = node.get("name")
            if isinstance(name, str):
                names.add(name)
    return frozenset(names)
