"""Navigation outline derived from the live document."""

from specedit.navigation.tree import (
    build_navigation_tree,
    find_node,
    iter_nodes,
    selection_for_node,
)

__all__ = ["build_navigation_tree", "find_node", "iter_nodes", "selection_for_node"]
