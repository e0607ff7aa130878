"""Graph analytics over a finished crawl: rank, ordering and connectivity.

All depth-first helpers use an explicit stack of (node, next neighbour
index) frames, so deep graphs never hit the interpreter's recursion limit.
"""

import logging
from collections import Counter, deque
from typing import Dict, Iterable, List, Mapping, Sequence, Set, Union

from sitegraph.constants import (
    ALGORITHM_BFS,
    ALGORITHM_DFS,
    DEFAULT_DAMPING_FACTOR,
    DEFAULT_PAGERANK_ITERATIONS,
    MOST_CONNECTED_LIMIT,
    TOP_KEYWORDS_LIMIT,
    TOP_RANKED_PAGES_LIMIT,
)
from sitegraph.graph import SiteGraph
from sitegraph.models import CrawlResult, SiteSummary

logger = logging.getLogger(__name__)

Adjacency = Mapping[str, Sequence[str]]


def page_rank(
    graph: SiteGraph,
    iterations: int = DEFAULT_PAGERANK_ITERATIONS,
    damping_factor: float = DEFAULT_DAMPING_FACTOR,
) -> Dict[str, float]:
    """Iterative, damped PageRank.

    Every node starts at 1/N. Each iteration sets
    rank(v) = (1 - d)/N + d * sum(rank(u) / outdegree(u)) over edges u -> v.
    Rank held by nodes without outgoing links is not redistributed, so the
    total mass can shrink below 1.

    Args:
        graph: Finished site graph
        iterations: Number of update rounds
        damping_factor: Probability of following a link

    Returns:
        Mapping of node id to rank (empty for an empty graph)
    """
    nodes = graph.node_ids()
    if not nodes:
        return {}

    count = len(nodes)
    edges = graph.all_edges()
    outgoing: Counter = Counter(edge.source for edge in edges)
    rank = {node: 1.0 / count for node in nodes}
    base = (1.0 - damping_factor) / count

    for _ in range(iterations):
        new_rank = {node: base for node in nodes}
        for edge in edges:
            transfer = damping_factor * rank.get(edge.source, 0.0) / outgoing[edge.source]
            new_rank[edge.target] = new_rank.get(edge.target, base) + transfer
        rank = {node: new_rank[node] for node in nodes}

    return rank


def topological_sort(graph: Union[SiteGraph, Adjacency]) -> List[str]:
    """Reverse depth-first postorder over every node.

    On a cyclic graph this still terminates and returns an order consistent
    with one DFS forest, but it is not a true topological order.
    """
    adjacency = _adjacency_of(graph)
    visited: Set[str] = set()
    finished: List[str] = []
    for root in _roots(graph, adjacency):
        if root not in visited:
            finished.extend(_postorder(adjacency, root, visited))
    finished.reverse()
    return finished


def strongly_connected_components(graph: Union[SiteGraph, Adjacency]) -> List[List[str]]:
    """Kosaraju's two-pass algorithm.

    The first pass records DFS finish order on the graph; the second walks
    the reversed graph in reverse finish order. Each tree of the second pass
    is one component.

    Returns:
        Components in discovery order, each listing its node ids
    """
    adjacency = _adjacency_of(graph)

    visited: Set[str] = set()
    finish_order: List[str] = []
    for root in _roots(graph, adjacency):
        if root not in visited:
            finish_order.extend(_postorder(adjacency, root, visited))

    reverse: Dict[str, List[str]] = {}
    for source, targets in adjacency.items():
        for target in targets:
            reverse.setdefault(target, []).append(source)

    visited = set()
    components: List[List[str]] = []
    while finish_order:
        node = finish_order.pop()
        if node not in visited:
            components.append(_preorder(reverse, node, visited))
    return components


def is_acyclic(graph: Union[SiteGraph, Adjacency]) -> bool:
    """True when the graph has no cycles (self-loops count as cycles)."""
    adjacency = _adjacency_of(graph)
    if any(source in targets for source, targets in adjacency.items()):
        return False
    return all(len(component) == 1 for component in strongly_connected_components(adjacency))


def traversal_order(
    graph: Union[SiteGraph, Adjacency],
    start: str,
    algorithm: str = ALGORITHM_BFS,
) -> List[str]:
    """Order in which BFS or DFS visits nodes reachable from start.

    DFS is a preorder that follows neighbours in adjacency order.

    Raises:
        ValueError: For an unknown algorithm
    """
    adjacency = _adjacency_of(graph)
    if algorithm == ALGORITHM_DFS:
        return _preorder(adjacency, start, set())
    if algorithm != ALGORITHM_BFS:
        raise ValueError(f"Unknown traversal algorithm: {algorithm}")

    visited = {start}
    order = []
    queue = deque([start])
    while queue:
        node = queue.popleft()
        order.append(node)
        for neighbor in adjacency.get(node, ()):
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)
    return order


def compare_traversals(graph: Union[SiteGraph, Adjacency], start: str) -> dict:
    """BFS and DFS visit orders side by side, plus BFS levels.

    Returns:
        Dict with "bfs" and "dfs" orders and "levels" (depth -> node ids)
    """
    adjacency = _adjacency_of(graph)

    levels: Dict[int, List[str]] = {0: [start]}
    depth_of = {start: 0}
    queue = deque([start])
    while queue:
        node = queue.popleft()
        for neighbor in adjacency.get(node, ()):
            if neighbor not in depth_of:
                depth_of[neighbor] = depth_of[node] + 1
                levels.setdefault(depth_of[neighbor], []).append(neighbor)
                queue.append(neighbor)

    return {
        "bfs": traversal_order(adjacency, start, ALGORITHM_BFS),
        "dfs": traversal_order(adjacency, start, ALGORITHM_DFS),
        "levels": levels,
    }


def summarize(
    result: CrawlResult,
    iterations: int = DEFAULT_PAGERANK_ITERATIONS,
    damping_factor: float = DEFAULT_DAMPING_FACTOR,
) -> SiteSummary:
    """Site-level analytics for a crawl result or snapshot.

    Args:
        result: Final result (its graph is used) or a progress snapshot
        iterations: PageRank iterations
        damping_factor: PageRank damping factor

    Returns:
        SiteSummary with ranks, top pages, depth distribution, top keywords,
        most linked-to pages and strongly connected components
    """
    graph = result.graph or SiteGraph.from_crawl(result.nodes, result.links)
    pages = {page.id: page for page in result.nodes}

    ranks = page_rank(graph, iterations=iterations, damping_factor=damping_factor)
    top_pages = sorted(
        ((pages[node_id], rank) for node_id, rank in ranks.items() if node_id in pages),
        key=lambda item: item[1],
        reverse=True,
    )[:TOP_RANKED_PAGES_LIMIT]

    depth_distribution = dict(sorted(Counter(page.depth for page in result.nodes).items()))

    keyword_pages: Counter = Counter()
    for page in result.nodes:
        keyword_pages.update(page.keywords)

    most_connected = sorted(
        result.nodes, key=lambda page: page.incoming_link_count, reverse=True
    )[:MOST_CONNECTED_LIMIT]

    components = strongly_connected_components(graph)
    acyclic = is_acyclic(graph)

    logger.debug(
        f"Summarized {len(result.nodes)} pages: {len(components)} components, "
        f"acyclic={acyclic}"
    )

    return SiteSummary(
        ranks=ranks,
        top_pages=top_pages,
        depth_distribution=depth_distribution,
        top_keywords=keyword_pages.most_common(TOP_KEYWORDS_LIMIT),
        most_connected=most_connected,
        components=components,
        is_acyclic=acyclic,
    )


def _adjacency_of(graph: Union[SiteGraph, Adjacency]) -> Adjacency:
    if isinstance(graph, SiteGraph):
        return graph.adjacency()
    return graph


def _roots(graph: Union[SiteGraph, Adjacency], adjacency: Adjacency) -> Iterable[str]:
    """Every node: graph nodes first, then any other adjacency key."""
    if isinstance(graph, SiteGraph):
        seen = dict.fromkeys(graph.node_ids())
        seen.update(dict.fromkeys(adjacency))
        return list(seen)
    return list(adjacency)


def _postorder(adjacency: Adjacency, root: str, visited: Set[str]) -> List[str]:
    """Nodes reachable from root (and not yet visited) in DFS finish order."""
    order: List[str] = []
    visited.add(root)
    stack = [(root, 0)]
    while stack:
        node, index = stack[-1]
        neighbors = adjacency.get(node, ())
        if index < len(neighbors):
            stack[-1] = (node, index + 1)
            neighbor = neighbors[index]
            if neighbor not in visited:
                visited.add(neighbor)
                stack.append((neighbor, 0))
        else:
            stack.pop()
            order.append(node)
    return order


def _preorder(adjacency: Adjacency, root: str, visited: Set[str]) -> List[str]:
    """Nodes reachable from root (and not yet visited) in DFS discovery order."""
    order: List[str] = [root]
    visited.add(root)
    stack = [(root, 0)]
    while stack:
        node, index = stack[-1]
        neighbors = adjacency.get(node, ())
        if index < len(neighbors):
            stack[-1] = (node, index + 1)
            neighbor = neighbors[index]
            if neighbor not in visited:
                visited.add(neighbor)
                order.append(neighbor)
                stack.append((neighbor, 0))
        else:
            stack.pop()
    return order
