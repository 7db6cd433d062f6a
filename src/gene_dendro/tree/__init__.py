"""Dendrogram tree types and helpers."""

from .node import DendrogramNode, NodeKind, make_leaf, make_branch, cut_at_height
from .formatter import format_tree

__all__ = [
    "DendrogramNode",
    "NodeKind",
    "make_leaf",
    "make_branch",
    "cut_at_height",
    "format_tree",
]
