# src/sitegraph/constants.py
"""Centralized constants for the site graph crawler.

This module contains magic numbers and policy values that are used across
multiple modules. For user-configurable crawler settings, see config.py
and CrawlerConfig.
"""

# =============================================================================
# Crawl Request Bounds
# =============================================================================

# Allowed range for the maximum traversal depth
MIN_CRAWL_DEPTH = 1
MAX_CRAWL_DEPTH = 50

# Allowed range for the page budget
MIN_PAGES_TO_CRAWL = 5
MAX_PAGES_TO_CRAWL = 1000

# Defaults used when a caller omits the bounds
DEFAULT_MAX_DEPTH = 3
DEFAULT_MAX_PAGES_TO_CRAWL = 50

# Supported visitation orders
ALGORITHM_BFS = "bfs"
ALGORITHM_DFS = "dfs"
CRAWL_ALGORITHMS = (ALGORITHM_BFS, ALGORITHM_DFS)


# =============================================================================
# Crawler Constants
# =============================================================================

# Default request timeout in seconds
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30

# Default number of fetches allowed in flight at once (1 = one at a time)
DEFAULT_MAX_CONCURRENT_REQUESTS = 1

# Default retries for a failed fetch (0 = single attempt)
DEFAULT_MAX_RETRIES = 0

# Base for exponential backoff calculation
EXPONENTIAL_BACKOFF_BASE = 2

# Initial backoff delay in seconds
INITIAL_BACKOFF_DELAY_SECONDS = 2.0

# Maximum backoff delay in seconds (cap for exponential growth)
MAX_BACKOFF_DELAY_SECONDS = 30.0

# Progress snapshot cadence (processed pages)
SNAPSHOT_INTERVAL_PAGES = 5

# Characters of raw page text kept on each node for search
PAGE_EXCERPT_LENGTH = 10000

# Default user agent for the HTTP fetcher
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SiteGraph-Crawler/1.0)"

# Node identifiers are "node_0", "node_1", ...
NODE_ID_PREFIX = "node_"


# =============================================================================
# Content Analysis Constants
# =============================================================================

# Sizes of the keyword lists in a profile
PRIMARY_KEYWORDS_COUNT = 8
SECONDARY_KEYWORDS_COUNT = 10
TECHNICAL_KEYWORDS_COUNT = 8
BUSINESS_KEYWORDS_COUNT = 8
ENTITY_KEYWORDS_COUNT = 8

# Rank window (before truncation) for primary and secondary terms
PRIMARY_RANK_CUTOFF = 10
SECONDARY_RANK_CUTOFF = 25

# Entity candidates kept before truncation
MAX_ENTITY_CANDIDATES = 20

# Tokens must be longer than this to count as content words
MIN_CONTENT_WORD_LENGTH = 2

# Entities must be longer than this (characters)
MIN_ENTITY_LENGTH = 3

# Term score multipliers
PHRASE_BOOST = 1.5
LONG_PHRASE_BOOST = 1.2
LONG_TERM_LENGTH = 6
LONG_TERM_BOOST = 1.2
VERY_LONG_TERM_LENGTH = 12
VERY_LONG_TERM_BOOST = 1.1
TECHNICAL_TERM_BOOST = 2.5
BUSINESS_TERM_BOOST = 2.0
DOMAIN_SPECIFIC_BOOST = 1.5
DOMAIN_SPECIFIC_MIN_LENGTH = 7

# Text length floor for the log dampening factor
MIN_DAMPENING_TEXT_LENGTH = 100

# Content score thresholds: (threshold, points)
WORD_COUNT_POINTS = ((200, 20), (600, 20), (1200, 10))
LEXICAL_DIVERSITY_POINTS = ((0.3, 20), (0.5, 10))
ENTITY_COUNT_POINTS = ((5, 10), (10, 10))
MAX_CONTENT_SCORE = 100


# =============================================================================
# Graph Analytics Constants
# =============================================================================

# PageRank defaults
DEFAULT_PAGERANK_ITERATIONS = 10
DEFAULT_DAMPING_FACTOR = 0.85

# Summary limits
TOP_RANKED_PAGES_LIMIT = 10
TOP_KEYWORDS_LIMIT = 15
MOST_CONNECTED_LIMIT = 5


# =============================================================================
# Search Constants
# =============================================================================

SEARCH_ALGORITHMS = ("exact", "fuzzy", "semantic", "boolean")
SEARCH_FIELDS = ("title", "url", "keywords", "content")
KEYWORD_CATEGORIES = ("all", "technical", "business", "entities")

# Relative importance of each searchable field
FIELD_WEIGHTS = {
    "title": 3.0,
    "url": 2.0,
    "keywords": 2.5,
    "content": 1.0,
}

# Points per matched query word
EXACT_MATCH_POINTS = 10
FUZZY_MATCH_POINTS = 5
SEMANTIC_MATCH_POINTS = 3
BOOLEAN_MATCH_POINTS = 5

# Fuzzy partial match: prefix fraction and its credit
FUZZY_PREFIX_FRACTION = 0.8
FUZZY_PARTIAL_CREDIT = 0.8
FUZZY_MIN_WORD_LENGTH = 4

# Credit per related term found in semantic mode
SEMANTIC_RELATED_CREDIT = 0.7

# Query words this short are ignored
MIN_QUERY_WORD_LENGTH = 2
