"""Two-pass builder that owns node identifiers and edge resolution."""

from typing import Dict, List

from .errors import DuplicateNodeUrlError, GraphAlreadyBuiltError, IdCounterOverflowError
from .filters import GraphFilter
from .graph_model import Graph, Node, NodeId
from .logging_utils import get_logger

logger = get_logger(__name__)

MAX_NODE_ID = 2**64 - 1


class GraphBuilder:
    """Collects nodes during ingestion, then resolves edges in build().

    A node may be inserted before the node it depends on, so dependents are
    kept per raw URL until every node is known.
    """

    def __init__(
        self,
        title: str = "",
        show_all: bool = False,
        graph_filter: GraphFilter | None = None,
        max_node_id: int = MAX_NODE_ID,
    ) -> None:
        self._graph = Graph(filter=graph_filter or GraphFilter(), show_all=show_all, title=title)
        self._dependents_by_url: Dict[str, List[NodeId]] = {}
        self._next_id = 1
        self._max_node_id = max_node_id
        self._built = False

    def allocate_id(self) -> NodeId:
        self._ensure_open()
        if self._next_id > self._max_node_id:
            raise IdCounterOverflowError(self._max_node_id)
        node_id = NodeId(self._next_id)
        self._next_id += 1
        return node_id

    def insert(self, node: Node) -> None:
        self._ensure_open()
        graph = self._graph
        if node.id in graph.nodes_by_id:
            raise ValueError(f"Node id already inserted: {node.id}")
        if node.url and node.url in graph.nodes_by_url:
            raise DuplicateNodeUrlError(node.url)

        graph.nodes_by_id[node.id] = node
        if node.url:
            graph.nodes_by_url[node.url] = node.id

        for url in node.depends_on_urls:
            dependents = self._dependents_by_url.setdefault(url, [])
            if node.id not in dependents:
                dependents.append(node.id)

    def build(self) -> Graph:
        self._ensure_open()
        self._built = True
        graph = self._graph

        for node in graph.nodes_by_id.values():
            resolved: List[NodeId] = []
            for url in node.depends_on_urls:
                target_id = graph.nodes_by_url.get(url)
                if target_id is None:
                    logger.debug("Unresolved dependency %s of %r", url, node.text)
                    continue
                if target_id not in resolved:
                    resolved.append(target_id)
            node.depends_on_ids = resolved
            node.depended_on_by_ids = []

        for url, dependents in self._dependents_by_url.items():
            target_id = graph.nodes_by_url.get(url)
            if target_id is None:
                continue
            graph.nodes_by_id[target_id].depended_on_by_ids = list(dependents)

        return graph

    @property
    def node_count(self) -> int:
        return len(self._graph.nodes_by_id)

    def _ensure_open(self) -> None:
        if self._built:
            raise GraphAlreadyBuiltError("GraphBuilder is single use; build() was already called")
