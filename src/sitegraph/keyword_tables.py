"""Word lists and pattern predicates used by the content analyzer.

The analyzer takes a ``KeywordTables`` instance, so every table here can be
replaced or extended without touching the scoring code.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, FrozenSet


STOPWORDS = frozenset({
    # Common English words
    "the", "and", "or", "is", "at", "be", "by", "for", "from", "in", "of", "to", "with",
    "a", "an", "as", "are", "was", "were", "been", "have", "has", "had", "do", "does", "did",
    "will", "would", "should", "could", "can", "may", "might", "must", "shall", "this", "that",
    "these", "those", "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
    "my", "your", "his", "its", "our", "their", "mine", "yours", "hers", "ours", "theirs",
    "who", "what", "when", "where", "why", "how", "which", "whose", "whom",
    "on", "up", "down", "out", "off", "over", "under", "again", "further", "then", "once",
    "here", "there", "all", "any", "both", "each", "few", "more",
    "most", "other", "some", "such", "no", "nor", "not", "only", "own", "same", "so", "than", "too",
    "very", "s", "t", "just", "don", "now", "also", "into", "about",
    # Web boilerplate
    "www", "http", "https", "html", "htm", "php", "asp", "jsp", "com", "org", "net", "edu", "gov",
    "click", "read", "view", "see", "get", "go", "home", "contact", "page",
    "site", "website", "web", "link", "links", "menu", "navigation", "nav", "footer", "header",
    "copyright", "rights", "reserved", "privacy", "policy", "terms", "conditions", "login", "sign",
    "signup", "register", "account", "profile", "dashboard", "admin", "logout", "search",
    # Script noise
    "var", "let", "const", "function", "return", "true", "false", "null", "undefined", "void",
    "class", "import", "export", "default", "extends", "implements", "interface", "package",
    "private", "protected", "public", "static", "yield", "typeof", "instanceof", "window",
    "document", "console", "log", "error", "warn", "info", "debug", "alert", "prompt", "confirm",
    "navigator", "location", "history", "screen", "performance", "localstorage", "sessionstorage",
    "cookie", "json", "ajax", "fetch", "axios", "jquery", "bootstrap", "tailwind", "sass", "less",
    "u002f", "u0026", "u003c", "u003e", "nbsp", "amp", "quot", "apos", "copy", "reg", "trade",
})

TECHNICAL_TERMS = frozenset({
    "javascript", "typescript", "python", "java", "react", "vue", "angular", "node", "express",
    "database", "sql", "mongodb", "api", "rest", "graphql", "cloud", "aws", "docker", "kubernetes",
    "machine learning", "artificial intelligence", "blockchain", "cryptocurrency", "security",
    "privacy", "analytics", "data science", "algorithm", "framework", "library", "development",
    "software engineering", "design", "interface", "user experience", "mobile", "responsive",
    "frontend", "backend", "fullstack", "devops", "ci/cd", "git", "github", "gitlab",
    "serverless", "microservices", "architecture", "system design", "scalability", "performance",
})

BUSINESS_TERMS = frozenset({
    "business", "company", "corporation", "startup", "enterprise", "marketing", "sales", "revenue",
    "profit", "investment", "finance", "banking", "insurance", "consulting", "strategy", "management",
    "leadership", "team", "employee", "career", "job", "opportunity", "growth", "innovation",
    "customer", "client", "service", "support", "product", "solution", "industry", "market",
    "b2b", "b2c", "saas", "ecommerce", "marketplace", "venture capital", "funding", "acquisition",
})

# Substrings that make a long term "domain specific"
DOMAIN_MARKERS = (
    "system", "platform", "solution", "framework",
    "application", "service", "network", "protocol",
)

# Substrings that mark a token as script residue
CODE_MARKERS = ("function", "return", "typeof")

TECHNICAL_ACRONYM_PATTERN = re.compile(
    r"^(api|sdk|ui|ux|css|html|xml|json|yaml|sql|nosql|crud|auth|oauth|jwt|ssl|tls|vpn|cdn|dns|"
    r"seo|crm|erp|saas|paas|iaas|devops|cicd|ide|git|npm|yarn|webpack|babel|eslint|jest|cypress|"
    r"redux|graphql|restful|microservice|serverless)$"
)
TECHNICAL_SUFFIXES = ("js", "py", "db")
TECHNICAL_FRAGMENTS = ("tech", "dev", "code", "data", "cloud")

BUSINESS_ROLE_PATTERN = re.compile(
    r"^(ceo|cto|cfo|cmo|vp|director|manager|analyst|consultant|sales|marketing|finance|"
    r"operations|strategy|revenue|profit|roi|kpi|b2b|b2c|startup|enterprise|saas|ecommerce|"
    r"marketplace|growth|scale)$"
)

_DIGITS = re.compile(r"^\d+$")
_HEX = re.compile(r"^[0-9a-f]{8,}$")


def looks_technical(term: str) -> bool:
    """Heuristic: acronym list, technical suffix, or technical fragment."""
    return (
        bool(TECHNICAL_ACRONYM_PATTERN.match(term))
        or term.endswith(TECHNICAL_SUFFIXES)
        or any(fragment in term for fragment in TECHNICAL_FRAGMENTS)
    )


def looks_business(term: str) -> bool:
    """Heuristic: business role or metric acronym."""
    return bool(BUSINESS_ROLE_PATTERN.match(term))


def looks_like_garbage(token: str) -> bool:
    """True for tokens that are script or encoding residue rather than words."""
    if len(token) > 30:
        return True
    if "u00" in token:
        return True
    if _DIGITS.match(token):
        return True
    if _HEX.match(token):
        return True
    if "_" in token or "=" in token:
        return True
    return any(marker in token for marker in CODE_MARKERS)


@dataclass(frozen=True)
class KeywordTables:
    """Dictionaries and predicates the content analyzer scores against."""

    stopwords: FrozenSet[str] = STOPWORDS
    technical_terms: FrozenSet[str] = TECHNICAL_TERMS
    business_terms: FrozenSet[str] = BUSINESS_TERMS
    domain_markers: tuple = DOMAIN_MARKERS
    is_technical: Callable[[str], bool] = field(default=looks_technical)
    is_business: Callable[[str], bool] = field(default=looks_business)
    is_garbage: Callable[[str], bool] = field(default=looks_like_garbage)


DEFAULT_TABLES = KeywordTables()
