"""Data models for site graph crawling and analysis."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from sitegraph.constants import (
    ALGORITHM_BFS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_PAGES_TO_CRAWL,
    MAX_CRAWL_DEPTH,
    MAX_PAGES_TO_CRAWL,
    MIN_CRAWL_DEPTH,
    MIN_PAGES_TO_CRAWL,
)
from sitegraph.exceptions import InvalidRequest
from sitegraph.url_normalizer import normalize_url

if TYPE_CHECKING:
    from sitegraph.graph import SiteGraph


class CrawlRequest(BaseModel):
    """
    A validated request to crawl one site.

    Bounds are checked by Pydantic; use ``CrawlRequest.create`` to get
    ``InvalidRequest`` instead of a raw ``ValidationError``.
    """

    seed_url: str = Field(
        description="URL the traversal starts from"
    )

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        description="Deepest traversal level that is added to the graph",
        ge=MIN_CRAWL_DEPTH,
        le=MAX_CRAWL_DEPTH,
    )

    max_pages: int = Field(
        default=DEFAULT_MAX_PAGES_TO_CRAWL,
        description="Maximum number of pages added to the graph",
        ge=MIN_PAGES_TO_CRAWL,
        le=MAX_PAGES_TO_CRAWL,
    )

    algorithm: Literal["bfs", "dfs"] = Field(
        default=ALGORITHM_BFS,
        description="Visitation order: breadth-first or depth-first"
    )

    @field_validator("seed_url")
    @classmethod
    def seed_must_parse(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("seed URL is required")
        if normalize_url(value, value) is None:
            raise ValueError(f"seed URL cannot be parsed: {value!r}")
        return value

    @field_validator("algorithm", mode="before")
    @classmethod
    def lowercase_algorithm(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def canonical_seed(self) -> str:
        """Seed URL in canonical form."""
        return normalize_url(self.seed_url, self.seed_url)

    @classmethod
    def create(cls, seed_url: Optional[str], **kwargs) -> "CrawlRequest":
        """Build a request, translating validation failures to InvalidRequest.

        Args:
            seed_url: URL to start from
            **kwargs: max_depth, max_pages, algorithm

        Raises:
            InvalidRequest: If the seed is missing/unparsable or a bound is out of range
        """
        if seed_url is None:
            raise InvalidRequest("Source URL required")

        values = {key: value for key, value in kwargs.items() if value is not None}
        try:
            return cls(seed_url=seed_url, **values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidRequest(f"Invalid crawl request: {problems}") from e


@dataclass
class KeywordProfile:
    """Categorized keywords and content score extracted from page text."""

    primary: list[str] = field(default_factory=list)
    secondary: list[str] = field(default_factory=list)
    technical: list[str] = field(default_factory=list)
    business: list[str] = field(default_factory=list)
    entities: list[str] = field(default_factory=list)
    score: int = 0  # 0-100 content quality

    @property
    def keywords(self) -> list[str]:
        """Primary followed by secondary keywords."""
        return self.primary + self.secondary

    def category(self, name: str) -> list[str]:
        """Keyword list for a category name ("all" = primary + secondary)."""
        if name == "technical":
            return self.technical
        if name == "business":
            return self.business
        if name == "entities":
            return self.entities
        return self.keywords

    def to_dict(self) -> dict:
        return {
            "primary": list(self.primary),
            "secondary": list(self.secondary),
            "technical": list(self.technical),
            "business": list(self.business),
            "entities": list(self.entities),
            "score": self.score,
        }


@dataclass
class Page:
    """A crawled page (graph node)."""

    id: str
    url: str
    title: str
    depth: int
    parent_id: Optional[str] = None
    keyword_profile: KeywordProfile = field(default_factory=KeywordProfile)
    incoming_link_count: int = 0
    outgoing_link_count: int = 0
    text_excerpt: str = ""

    @property
    def keywords(self) -> list[str]:
        return self.keyword_profile.keywords

    @property
    def content_score(self) -> int:
        return self.keyword_profile.score

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "depth": self.depth,
            "parent_id": self.parent_id,
            "keywords": self.keywords,
            "keyword_profile": self.keyword_profile.to_dict(),
            "incoming_links": self.incoming_link_count,
            "outgoing_links": self.outgoing_link_count,
            "content_score": self.content_score,
            "text_excerpt": self.text_excerpt,
        }


@dataclass(frozen=True)
class Link:
    """A directed link between two pages (graph edge)."""

    source: str
    target: str

    def to_dict(self) -> dict:
        return {"source": self.source, "target": self.target}


@dataclass(frozen=True)
class FrontierEntry:
    """A pending page visit."""

    url: str
    depth: int
    parent_id: Optional[str] = None


@dataclass
class FetchResult:
    """Outbound hrefs and plain text of one fetched page."""

    outbound_urls: list[str] = field(default_factory=list)
    page_text: str = ""


@dataclass
class CrawlStats:
    """Aggregate statistics of a crawl (or of a snapshot of one)."""

    total_pages: int
    total_links: int
    depth: int
    duplicates_removed: int
    crawl_time_seconds: int
    average_links_per_page: float
    algorithm: str

    def to_dict(self) -> dict:
        return {
            "total_pages": self.total_pages,
            "total_links": self.total_links,
            "depth": self.depth,
            "duplicates_removed": self.duplicates_removed,
            "crawl_time_seconds": self.crawl_time_seconds,
            "average_links_per_page": self.average_links_per_page,
            "algorithm": self.algorithm,
        }


@dataclass
class CrawlResult:
    """Nodes, links and statistics of a crawl.

    Progress snapshots and the final result share this shape. Only the final
    result carries the finalized graph.
    """

    nodes: list[Page]
    links: list[Link]
    algorithm: str
    stats: CrawlStats
    graph: Optional["SiteGraph"] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
            "algorithm": self.algorithm,
            "stats": self.stats.to_dict(),
        }


@dataclass
class SiteSummary:
    """Graph-level analytics of a finished crawl."""

    ranks: dict[str, float] = field(default_factory=dict)  # node id -> rank
    top_pages: list[tuple[Page, float]] = field(default_factory=list)
    depth_distribution: dict[int, int] = field(default_factory=dict)  # depth -> pages
    top_keywords: list[tuple[str, int]] = field(default_factory=list)  # keyword -> pages
    most_connected: list[Page] = field(default_factory=list)
    components: list[list[str]] = field(default_factory=list)
    is_acyclic: bool = True

    def to_dict(self) -> dict:
        return {
            "top_pages": [
                {"node_id": page.id, "url": page.url, "rank": rank}
                for page, rank in self.top_pages
            ],
            "depth_distribution": dict(self.depth_distribution),
            "top_keywords": [
                {"keyword": keyword, "pages": count}
                for keyword, count in self.top_keywords
            ],
            "most_connected": [
                {"node_id": page.id, "url": page.url, "incoming_links": page.incoming_link_count}
                for page in self.most_connected
            ],
            "component_count": len(self.components),
            "is_acyclic": self.is_acyclic,
        }


@dataclass
class SearchResult:
    """A page matched by a search query."""

    node: Page
    score: float
    matched_fields: list[str] = field(default_factory=list)
    relevance: float = 0.0  # score per query word

    def to_dict(self) -> dict:
        return {
            "node_id": self.node.id,
            "url": self.node.url,
            "title": self.node.title,
            "score": self.score,
            "matched_fields": list(self.matched_fields),
            "relevance": self.relevance,
        }
