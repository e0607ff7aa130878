"""Pending page visits, ordered by traversal algorithm."""

from collections import deque
from itertools import islice
from typing import Deque, List

from sitegraph.constants import ALGORITHM_BFS, CRAWL_ALGORITHMS
from sitegraph.models import FrontierEntry


class Frontier:
    """A deque that pops from the front (BFS) or the back (DFS).

    Entries are always pushed to the back, so the pop side is the only
    difference between the two traversal orders.
    """

    def __init__(self, algorithm: str = ALGORITHM_BFS):
        if algorithm not in CRAWL_ALGORITHMS:
            raise ValueError(f"Unknown traversal algorithm: {algorithm}")
        self.algorithm = algorithm
        self._entries: Deque[FrontierEntry] = deque()

    def push(self, entry: FrontierEntry) -> None:
        self._entries.append(entry)

    def pop(self) -> FrontierEntry:
        """Remove and return the next entry to visit."""
        if self.algorithm == ALGORITHM_BFS:
            return self._entries.popleft()
        return self._entries.pop()

    def upcoming(self, limit: int) -> List[FrontierEntry]:
        """The next entries pop() would return if nothing else were pushed."""
        if self.algorithm == ALGORITHM_BFS:
            return list(islice(self._entries, limit))
        return list(islice(reversed(self._entries), limit))

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
