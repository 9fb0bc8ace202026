"""Node and graph primitives for the issue dependency graph."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, List, Set

from .filters import GraphFilter


@dataclass(frozen=True, order=True)
class NodeId:
    """Process-assigned node identifier, stable for one run."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


class ItemState(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


@dataclass
class Node:
    id: NodeId
    text: str
    url: str = ""
    state: ItemState = ItemState.OPEN
    labels: List[str] = field(default_factory=list)
    project_titles: Set[str] = field(default_factory=set)
    # Unique raw URLs in the order they were found in the body text.
    depends_on_urls: List[str] = field(default_factory=list)
    # Filled in by GraphBuilder.build(); unique ids, insertion ordered.
    depends_on_ids: List[NodeId] = field(default_factory=list)
    depended_on_by_ids: List[NodeId] = field(default_factory=list)
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_open(self) -> bool:
        return self.state is ItemState.OPEN

    @property
    def blocks_count(self) -> int:
        """Number of nodes that depend on this one."""
        return len(self.depended_on_by_ids)

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id.value,
            "text": self.text,
            "url": self.url,
            "state": self.state.value,
            "labels": list(self.labels),
            "project_titles": sorted(self.project_titles),
            "depends_on_urls": list(self.depends_on_urls),
            "depends_on_ids": [node_id.value for node_id in self.depends_on_ids],
            "depended_on_by_ids": [node_id.value for node_id in self.depended_on_by_ids],
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass
class Graph:
    """Finalized dependency graph produced by GraphBuilder.build().

    Nodes are owned by ``nodes_by_id``; ``nodes_by_url`` only maps a
    non-empty URL to the owning id. Both keep insertion order.
    """

    nodes_by_id: Dict[NodeId, Node] = field(default_factory=dict)
    nodes_by_url: Dict[str, NodeId] = field(default_factory=dict)
    filter: GraphFilter = field(default_factory=GraphFilter)
    show_all: bool = False
    title: str = ""
    _node_order: List[Node] | None = field(default=None, init=False, repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.nodes_by_id)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes_by_id.values())

    def get_node_by_id(self, node_id: NodeId) -> Node | None:
        return self.nodes_by_id.get(node_id)

    def get_node_by_url(self, url: str) -> Node | None:
        if not url:
            return None
        node_id = self.nodes_by_url.get(url)
        if node_id is None:
            return None
        return self.nodes_by_id.get(node_id)

    def get_node_by_index(self, index: int) -> Node | None:
        if index < 0 or index >= len(self.nodes_by_id):
            return None
        if self._node_order is None or len(self._node_order) != len(self.nodes_by_id):
            self._node_order = list(self.nodes_by_id.values())
        return self._node_order[index]

    def is_visible(self, node: Node) -> bool:
        return self.show_all or self.filter.passes(node)

    def visible_nodes(self) -> Iterator[Node]:
        return (node for node in self if self.is_visible(node))

    def prune(self) -> List[NodeId]:
        """Remove nodes failing the filter in place; return the removed ids.

        Removing a node can leave another one isolated, so removal repeats
        until every remaining node passes. Not safe alongside readers.
        """
        removed: List[NodeId] = []
        if self.show_all:
            return removed

        while True:
            failing = [node.id for node in self if not self.filter.passes(node)]
            if not failing:
                return removed
            self._remove_nodes(set(failing))
            removed.extend(failing)

    def _remove_nodes(self, node_ids: Set[NodeId]) -> None:
        self._node_order = None
        for node_id in node_ids:
            node = self.nodes_by_id.pop(node_id)
            if node.url and self.nodes_by_url.get(node.url) == node_id:
                del self.nodes_by_url[node.url]
        for node in self.nodes_by_id.values():
            node.depends_on_ids = [dep for dep in node.depends_on_ids if dep not in node_ids]
            node.depended_on_by_ids = [dep for dep in node.depended_on_by_ids if dep not in node_ids]

    def to_json(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "show_all": self.show_all,
            "filter": {
                "include_project": self.filter.include_project,
                "updated_after": self.filter.updated_after.isoformat() if self.filter.updated_after else None,
            },
            "nodes": [node.to_json() for node in self],
        }
