"""Site crawler that maps a website's link graph and analyzes its pages."""

__version__ = "0.1.0"

from sitegraph.site_crawler import SiteGraphCrawler, CrawlSession
from sitegraph.fetcher import Fetcher, HttpFetcher, extract_links_and_text
from sitegraph.content_analyzer import ContentAnalyzer
from sitegraph.keyword_tables import KeywordTables, DEFAULT_TABLES
from sitegraph.graph import SiteGraph
from sitegraph.frontier import Frontier
from sitegraph.search import SearchEngine
from sitegraph.analytics import (
    page_rank,
    topological_sort,
    strongly_connected_components,
    is_acyclic,
    traversal_order,
    compare_traversals,
    summarize,
)
from sitegraph.models import (
    CrawlRequest,
    CrawlResult,
    CrawlStats,
    FetchResult,
    FrontierEntry,
    KeywordProfile,
    Link,
    Page,
    SearchResult,
    SiteSummary,
)
from sitegraph.exceptions import (
    SiteGraphError,
    InvalidRequest,
    FetchError,
    MalformedLink,
    GraphFinalizedError,
    CrawlCancelled,
)
from sitegraph.url_normalizer import normalize_url, resolve_link, same_domain, title_from_url
from sitegraph.config import CrawlerConfig, settings

__all__ = [
    # Core
    "SiteGraphCrawler",
    "CrawlSession",
    "Fetcher",
    "HttpFetcher",
    "extract_links_and_text",
    "ContentAnalyzer",
    "KeywordTables",
    "DEFAULT_TABLES",
    "SiteGraph",
    "Frontier",
    "SearchEngine",
    # Analytics
    "page_rank",
    "topological_sort",
    "strongly_connected_components",
    "is_acyclic",
    "traversal_order",
    "compare_traversals",
    "summarize",
    # Models
    "CrawlRequest",
    "CrawlResult",
    "CrawlStats",
    "FetchResult",
    "FrontierEntry",
    "KeywordProfile",
    "Link",
    "Page",
    "SearchResult",
    "SiteSummary",
    # Errors
    "SiteGraphError",
    "InvalidRequest",
    "FetchError",
    "MalformedLink",
    "GraphFinalizedError",
    "CrawlCancelled",
    # Utils
    "normalize_url",
    "resolve_link",
    "same_domain",
    "title_from_url",
    "CrawlerConfig",
    "settings",
]
