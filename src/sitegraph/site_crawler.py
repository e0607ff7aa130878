"""Site crawler that builds a page/link graph by BFS or DFS traversal."""

import asyncio
import inspect
import logging
import random
import time
from dataclasses import replace
from typing import Awaitable, Callable, Dict, Optional, Set, Union

from sitegraph.config import CrawlerConfig
from sitegraph.constants import (
    EXPONENTIAL_BACKOFF_BASE,
    INITIAL_BACKOFF_DELAY_SECONDS,
    MAX_BACKOFF_DELAY_SECONDS,
    NODE_ID_PREFIX,
)
from sitegraph.content_analyzer import ContentAnalyzer
from sitegraph.exceptions import CrawlCancelled, FetchError, MalformedLink
from sitegraph.fetcher import Fetcher, HttpFetcher
from sitegraph.frontier import Frontier
from sitegraph.graph import SiteGraph
from sitegraph.models import (
    CrawlRequest,
    CrawlResult,
    CrawlStats,
    FetchResult,
    FrontierEntry,
    Page,
)
from sitegraph.url_normalizer import resolve_link, same_domain, title_from_url

logger = logging.getLogger(__name__)

SnapshotSink = Callable[[CrawlResult], Union[None, Awaitable[None]]]


class CrawlSession:
    """Mutable state of one crawl.

    Each call to ``SiteGraphCrawler.crawl`` gets its own session, so one
    crawler can run several independent crawls at once.
    """

    def __init__(
        self,
        request: CrawlRequest,
        fetcher: Fetcher,
        max_concurrent: int,
        on_snapshot: Optional[SnapshotSink] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ):
        self.request = request
        self.seed_url = request.canonical_seed
        self.fetcher = fetcher
        self.on_snapshot = on_snapshot
        self.cancel_event = cancel_event

        self.graph = SiteGraph()
        self.frontier = Frontier(request.algorithm)
        self.visited_urls: Set[str] = set()
        self.url_to_node: Dict[str, str] = {}
        self.duplicates_removed = 0
        self._next_id = 0
        self._started = time.monotonic()

        # In-flight fetches keyed by URL
        self.pending: Dict[str, asyncio.Future] = {}
        self.semaphore = asyncio.Semaphore(max_concurrent)

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    @property
    def page_budget_left(self) -> bool:
        return len(self.graph) < self.request.max_pages

    def add_page(self, entry: FrontierEntry) -> Page:
        """Create the node for a frontier entry and link it to its parent."""
        node_id = f"{NODE_ID_PREFIX}{self._next_id}"
        self._next_id += 1

        page = Page(
            id=node_id,
            url=entry.url,
            title=title_from_url(entry.url),
            depth=entry.depth,
            parent_id=entry.parent_id,
        )
        self.graph.add_node(node_id, page)
        self.url_to_node[entry.url] = node_id

        if entry.parent_id is not None:
            self.link(entry.parent_id, node_id)
        return page

    def link(self, source_id: str, target_id: str) -> bool:
        """Add an edge and update link counters if it is new."""
        if not self.graph.add_edge(source_id, target_id):
            return False
        source = self.graph.get_node(source_id)
        target = self.graph.get_node(target_id)
        if source is not None:
            source.outgoing_link_count += 1
        if target is not None:
            target.incoming_link_count += 1
        return True

    def snapshot(self, with_graph: bool = False) -> CrawlResult:
        """Copy of the current nodes, links and stats."""
        nodes = [replace(page) for page in self.graph.all_nodes()]
        links = self.graph.all_edges()
        stats = CrawlStats(
            total_pages=len(nodes),
            total_links=len(links),
            depth=max((page.depth for page in nodes), default=0),
            duplicates_removed=self.duplicates_removed,
            crawl_time_seconds=round(time.monotonic() - self._started),
            average_links_per_page=len(links) / max(len(nodes), 1),
            algorithm=self.request.algorithm,
        )
        return CrawlResult(
            nodes=nodes,
            links=links,
            algorithm=self.request.algorithm,
            stats=stats,
            graph=self.graph if with_graph else None,
        )


class SiteGraphCrawler:
    """Crawls a single site and records its link structure as a graph.

    The frontier is a queue for breadth-first and a stack for depth-first
    traversal; that is the only difference between the two orders:
    - BFS: the seed, then every page it links to, then their links, ...
    - DFS: follows the most recently discovered link first

    Every page that is added to the graph below ``max_depth`` is fetched,
    analyzed for keywords, and its same-domain links are queued once.
    Fetch failures keep the page with no outbound links.

    With ``max_concurrent > 1`` the next frontier entries are fetched ahead
    of time, while graph updates still happen one page at a time in
    frontier order, so the resulting graph does not depend on concurrency.
    """

    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        config: Optional[CrawlerConfig] = None,
        analyzer: Optional[ContentAnalyzer] = None,
    ):
        """Initialize the crawler.

        Args:
            fetcher: Page fetcher (an HttpFetcher is created per crawl if None)
            config: Crawler configuration
            analyzer: Content analyzer for page text
        """
        self.config = config or CrawlerConfig()
        self.fetcher = fetcher
        self.analyzer = analyzer or ContentAnalyzer()

    def crawl_site(self, seed_url: Union[str, CrawlRequest], **kwargs) -> CrawlResult:
        """Synchronous wrapper around ``crawl``.

        Args:
            seed_url: Seed URL or a prepared CrawlRequest
            **kwargs: Passed through to ``crawl``

        Returns:
            Final CrawlResult
        """
        return asyncio.run(self.crawl(seed_url, **kwargs))

    async def crawl(
        self,
        seed_url: Union[str, CrawlRequest, None],
        max_depth: Optional[int] = None,
        max_pages: Optional[int] = None,
        algorithm: Optional[str] = None,
        on_snapshot: Optional[SnapshotSink] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> CrawlResult:
        """Crawl a site starting from a seed URL.

        Args:
            seed_url: The starting URL (or a prepared CrawlRequest)
            max_depth: Deepest level added to the graph (1-50)
            max_pages: Maximum pages added to the graph (5-1000)
            algorithm: "bfs" or "dfs"
            on_snapshot: Optional sink for periodic progress snapshots
            cancel_event: Optional event that aborts the crawl when set

        Returns:
            Final CrawlResult carrying the finalized graph

        Raises:
            InvalidRequest: If the seed URL or bounds are invalid
            CrawlCancelled: If cancel_event is set before the crawl finishes
        """
        if isinstance(seed_url, CrawlRequest):
            request = seed_url
        else:
            request = CrawlRequest.create(
                seed_url,
                max_depth=max_depth,
                max_pages=max_pages,
                algorithm=algorithm,
            )

        if self.fetcher is not None:
            return await self._crawl_with(self.fetcher, request, on_snapshot, cancel_event)

        async with HttpFetcher(user_agent=self.config.user_agent) as fetcher:
            return await self._crawl_with(fetcher, request, on_snapshot, cancel_event)

    async def _crawl_with(
        self,
        fetcher: Fetcher,
        request: CrawlRequest,
        on_snapshot: Optional[SnapshotSink],
        cancel_event: Optional[asyncio.Event],
    ) -> CrawlResult:
        session = CrawlSession(
            request,
            fetcher,
            max_concurrent=self.config.max_concurrent,
            on_snapshot=on_snapshot,
            cancel_event=cancel_event,
        )

        logger.info(f"Starting {request.algorithm.upper()} site crawl from: {session.seed_url}")
        logger.info(
            f"Max depth: {request.max_depth}, Max pages: {request.max_pages}, "
            f"Max concurrent: {self.config.max_concurrent}"
        )

        session.frontier.push(FrontierEntry(url=session.seed_url, depth=0))
        session.visited_urls.add(session.seed_url)

        try:
            await self._execute_crawl_loop(session)
        finally:
            await self._drain_pending(session)

        session.graph.finalize()
        result = session.snapshot(with_graph=True)

        logger.info(f"{'=' * 60}")
        logger.info(
            f"Crawl complete! {result.stats.total_pages} pages, "
            f"{result.stats.total_links} links, "
            f"{result.stats.duplicates_removed} duplicates removed "
            f"in {result.stats.crawl_time_seconds}s"
        )
        logger.info(f"{'=' * 60}")
        return result

    async def _execute_crawl_loop(self, session: CrawlSession) -> None:
        request = session.request

        while session.frontier and session.page_budget_left:
            self._raise_if_cancelled(session)

            entry = session.frontier.pop()
            if entry.depth > request.max_depth:
                continue

            page = session.add_page(entry)
            logger.info(
                f"[D{entry.depth}] Crawling ({len(session.graph)}/{request.max_pages}): {entry.url}"
            )

            if entry.depth < request.max_depth:
                fetched = await self._fetch_page(session, entry.url)
                if fetched is not None:
                    self._process_page(session, page, fetched)

            if len(session.graph) % self.config.snapshot_interval == 0:
                await self._emit_snapshot(session)

    def _process_page(self, session: CrawlSession, page: Page, fetched: FetchResult) -> None:
        """Store the keyword profile and queue the page's unseen same-domain links."""
        page.keyword_profile = self.analyzer.analyze(fetched.page_text)
        page.text_excerpt = fetched.page_text[:self.config.excerpt_length]

        queued = 0
        for href in fetched.outbound_urls:
            try:
                normalized = resolve_link(href, page.url)
            except MalformedLink as e:
                logger.debug(f"  Dropping {e}")
                continue
            if not same_domain(normalized, session.seed_url):
                continue

            if normalized in session.visited_urls:
                session.duplicates_removed += 1
                if self.config.record_cross_links:
                    existing = session.url_to_node.get(normalized)
                    if existing is not None:
                        session.link(page.id, existing)
                continue

            if session.page_budget_left:
                session.visited_urls.add(normalized)
                session.frontier.push(
                    FrontierEntry(url=normalized, depth=page.depth + 1, parent_id=page.id)
                )
                queued += 1

        if queued:
            logger.info(f"  → Queued {queued} new links for D{page.depth + 1}")

    async def _fetch_page(self, session: CrawlSession, url: str) -> Optional[FetchResult]:
        """Fetch a page, reusing a prefetched result when there is one.

        Returns:
            FetchResult, or None if the fetch failed
        """
        task = session.pending.pop(url, None)
        if task is None:
            task = self._start_fetch(session, url)
        self._schedule_prefetch(session)

        try:
            return await self._await_fetch(session, task)
        except FetchError as e:
            logger.warning(f"  ⚠️  Failed: {url}: {e}")
            return None

    def _start_fetch(self, session: CrawlSession, url: str) -> asyncio.Future:
        return asyncio.ensure_future(self._fetch_with_retry(session, url))

    def _schedule_prefetch(self, session: CrawlSession) -> None:
        """Start fetches for the entries the frontier will yield next."""
        slots = self.config.max_concurrent - 1 - len(session.pending)
        if slots <= 0:
            return

        max_depth = session.request.max_depth
        # Look past entries that are already in flight or will not be fetched
        for entry in session.frontier.upcoming(self.config.max_concurrent * 2):
            if slots <= 0:
                break
            if entry.depth >= max_depth or entry.url in session.pending:
                continue
            session.pending[entry.url] = self._start_fetch(session, entry.url)
            slots -= 1

    async def _await_fetch(self, session: CrawlSession, task: asyncio.Future) -> FetchResult:
        """Wait for a fetch, giving up as soon as the crawl is cancelled."""
        if session.cancel_event is None:
            return await task

        waiter = asyncio.ensure_future(session.cancel_event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            self._raise_if_cancelled(session)
        return task.result()

    async def _fetch_with_retry(self, session: CrawlSession, url: str) -> FetchResult:
        """Fetch a URL with a hard timeout and optional retries.

        Raises:
            FetchError: When every attempt failed
        """
        timeout = self.config.timeout
        max_retries = self.config.max_retries
        last_error: Optional[FetchError] = None

        for attempt in range(max_retries + 1):
            if attempt > 0:
                backoff_delay = self._calculate_backoff_delay(attempt - 1)
                logger.info(
                    f"  🔄 Will retry ({attempt}/{max_retries}) after {backoff_delay:.1f}s: {url}"
                )
                await asyncio.sleep(backoff_delay)

            try:
                async with session.semaphore:
                    return await asyncio.wait_for(
                        session.fetcher.fetch(url, timeout), timeout=timeout
                    )
            except asyncio.TimeoutError:
                last_error = FetchError(f"Request timeout after {timeout}s", url=url)
            except FetchError as e:
                last_error = e
            except Exception as e:
                last_error = FetchError(str(e) or type(e).__name__, url=url)

        raise last_error

    def _calculate_backoff_delay(self, retry_count: int) -> float:
        """Calculate exponential backoff delay with jitter.

        Args:
            retry_count: Number of retries already attempted (0-indexed)

        Returns:
            Delay in seconds before next retry
        """
        delay = INITIAL_BACKOFF_DELAY_SECONDS * (EXPONENTIAL_BACKOFF_BASE ** retry_count)
        delay = min(delay, MAX_BACKOFF_DELAY_SECONDS)
        # Add jitter (±25%) to prevent thundering herd
        jitter = delay * random.uniform(-0.25, 0.25)
        return delay + jitter

    async def _emit_snapshot(self, session: CrawlSession) -> None:
        if session.on_snapshot is None:
            return

        snapshot = session.snapshot()
        try:
            outcome = session.on_snapshot(snapshot)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception("Progress sink failed; continuing crawl")

    def _raise_if_cancelled(self, session: CrawlSession) -> None:
        if session.cancelled:
            logger.warning(f"Crawl of {session.seed_url} cancelled after {len(session.graph)} pages")
            raise CrawlCancelled("Crawl cancelled", partial_result=session.snapshot())

    async def _drain_pending(self, session: CrawlSession) -> None:
        """Cancel prefetches that will never be used."""
        pending = list(session.pending.values())
        session.pending.clear()
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
