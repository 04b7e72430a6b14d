"""
Core functionality for Mindlog.

This module exposes the related-log search, related-title resolution and
the mind-map builder.
"""

from .mindmap import MindMap, MindMapEdge, MindMapNode, build_mind_map
from .related import (
    DELETED_OR_UNKNOWN,
    TITLE_UNAVAILABLE,
    UNTITLED,
    resolve_related_titles,
    with_related_titles,
)
from .search import search_logs

__all__ = [
    "search_logs",
    "resolve_related_titles",
    "with_related_titles",
    "UNTITLED",
    "DELETED_OR_UNKNOWN",
    "TITLE_UNAVAILABLE",
    "build_mind_map",
    "MindMap",
    "MindMapNode",
    "MindMapEdge",
]
