"""Plain-text rendering of a dendrogram, for debugging and logs."""

from __future__ import annotations

from .node import DendrogramNode


def _indent(node: DendrogramNode, max_level: int, parent_level: int | None) -> str:
    # Leaves sit furthest right; dashes connect a node to its parent's column
    if parent_level is None:
        return " " * (max_level - node.level)
    return " " * (max_level - parent_level) + "-" * (parent_level - node.level)


def format_tree(root: DendrogramNode, precision: int = 4) -> str:
    """Render ``root`` as one line per node, children below their parent.

    Example::

        BRANCH level: 1 height: 0 weight: 2
        -LEAF gene: A weight: 1
        -LEAF gene: B weight: 1
    """
    lines: list[str] = []
    max_level = root.level
    stack: list[tuple[DendrogramNode, int | None]] = [(root, None)]
    while stack:
        node, parent_level = stack.pop()
        prefix = _indent(node, max_level, parent_level)
        if node.is_leaf:
            lines.append(f"{prefix}LEAF gene: {node.name} weight: {node.weight:.{precision}g}")
        else:
            lines.append(
                f"{prefix}BRANCH level: {node.level} "
                f"height: {node.height:.{precision}g} weight: {node.weight:.{precision}g}"
            )
            stack.append((node.second, node.level))
            stack.append((node.first, node.level))
    return "\n".join(lines)
