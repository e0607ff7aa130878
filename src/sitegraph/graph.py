"""In-memory directed graph of crawled pages."""

from typing import Dict, Iterable, Iterator, List, Optional

from sitegraph.exceptions import GraphFinalizedError
from sitegraph.models import Link, Page


class SiteGraph:
    """Pages (nodes) and links (edges) stored as an adjacency list.

    Node and adjacency order follow insertion order. Edges between the same
    ordered pair are stored once; self-loops are allowed. After
    ``finalize()`` the graph is read-only.
    """

    def __init__(self):
        self._nodes: Dict[str, Page] = {}
        self._adjacency: Dict[str, List[str]] = {}
        self._finalized = False

    @classmethod
    def from_crawl(cls, nodes: Iterable[Page], links: Iterable[Link]) -> "SiteGraph":
        """Rebuild a finalized graph from crawl nodes and links.

        Args:
            nodes: Pages of a crawl result or snapshot
            links: Links of the same result

        Returns:
            Finalized SiteGraph
        """
        graph = cls()
        for node in nodes:
            graph.add_node(node.id, node)
        for link in links:
            graph.add_edge(link.source, link.target)
        graph.finalize()
        return graph

    @property
    def finalized(self) -> bool:
        return self._finalized

    def finalize(self) -> None:
        """Freeze the graph; later mutation raises GraphFinalizedError."""
        self._finalized = True

    def _check_mutable(self) -> None:
        if self._finalized:
            raise GraphFinalizedError("Graph is finalized and can no longer be modified")

    def add_node(self, node_id: str, page: Page) -> None:
        """Insert a page, overwriting any page stored under the same id."""
        self._check_mutable()
        self._nodes[node_id] = page
        self._adjacency.setdefault(node_id, [])

    def add_edge(self, source: str, target: str) -> bool:
        """Add the edge source -> target.

        Returns:
            True if the edge was added, False if it already existed
        """
        self._check_mutable()
        targets = self._adjacency.setdefault(source, [])
        if target in targets:
            return False
        targets.append(target)
        return True

    def get_node(self, node_id: str) -> Optional[Page]:
        return self._nodes.get(node_id)

    def get_adjacent(self, node_id: str) -> List[str]:
        """Targets of node_id in insertion order; empty for unknown ids."""
        return list(self._adjacency.get(node_id, ()))

    def has_edge(self, source: str, target: str) -> bool:
        return target in self._adjacency.get(source, ())

    def all_nodes(self) -> List[Page]:
        return list(self._nodes.values())

    def node_ids(self) -> List[str]:
        return list(self._nodes)

    def all_edges(self) -> List[Link]:
        """Edges flattened from the adjacency list, sources in insertion order."""
        return [
            Link(source=source, target=target)
            for source, targets in self._adjacency.items()
            for target in targets
        ]

    def adjacency(self) -> Dict[str, List[str]]:
        """Copy of the adjacency list."""
        return {source: list(targets) for source, targets in self._adjacency.items()}

    def out_degree(self, node_id: str) -> int:
        return len(self._adjacency.get(node_id, ()))

    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._adjacency.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Page]:
        return iter(list(self._nodes.values()))
