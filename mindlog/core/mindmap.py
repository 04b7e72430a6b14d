"""
Mind-map view of a log.

Builds the node/edge structure used to draw a log together with the logs
it links to.
"""

from collections.abc import Mapping

from pydantic import BaseModel, Field

from mindlog.core.related import related_title_at
from mindlog.schemas import LogRecord


class MindMapNode(BaseModel):
    """A node in the mind map.

    Attributes:
        id: Log id
        title: Title to display
        is_root: Whether this is the log the map was built for
        resolved: False when the linked log could not be loaded
    """

    id: str
    title: str
    is_root: bool = False
    resolved: bool = True


class MindMapEdge(BaseModel):
    """A directed link from one log to another."""

    source: str
    target: str


class MindMap(BaseModel):
    """Nodes and edges around a single root log."""

    root_id: str
    nodes: list[MindMapNode] = Field(default_factory=list)
    edges: list[MindMapEdge] = Field(default_factory=list)


def build_mind_map(root: LogRecord, neighbours: Mapping[str, LogRecord]) -> MindMap:
    """
    Build the mind map for ``root``.

    Args:
        root: The log at the centre of the map
        neighbours: Related logs the caller could load, keyed by id

    Returns:
        MindMap with the root node first, one node per distinct related id and
        one edge per related id in link order. Blank ids are skipped, as they
        are when related titles are resolved. Links that could not be loaded
        fall back to the cached related title.
    """
    mind_map = MindMap(
        root_id=root.id,
        nodes=[MindMapNode(id=root.id, title=root.title, is_root=True)],
    )
    node_ids = {root.id}

    related_ids = [related_id for related_id in root.related_log_ids if related_id.strip()]

    for index, related_id in enumerate(related_ids):
        mind_map.edges.append(MindMapEdge(source=root.id, target=related_id))
        if related_id in node_ids:
            continue
        node_ids.add(related_id)

        related = neighbours.get(related_id)
        if related is not None:
            mind_map.nodes.append(MindMapNode(id=related_id, title=related.title))
        else:
            mind_map.nodes.append(
                MindMapNode(
                    id=related_id,
                    title=related_title_at(root, index),
                    resolved=False,
                )
            )

    return mind_map
