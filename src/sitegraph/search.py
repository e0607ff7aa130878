"""Free-text search over crawled pages."""

import logging
import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from sitegraph.constants import (
    BOOLEAN_MATCH_POINTS,
    EXACT_MATCH_POINTS,
    FIELD_WEIGHTS,
    FUZZY_MATCH_POINTS,
    FUZZY_MIN_WORD_LENGTH,
    FUZZY_PARTIAL_CREDIT,
    FUZZY_PREFIX_FRACTION,
    KEYWORD_CATEGORIES,
    MIN_QUERY_WORD_LENGTH,
    SEARCH_ALGORITHMS,
    SEARCH_FIELDS,
    SEMANTIC_MATCH_POINTS,
    SEMANTIC_RELATED_CREDIT,
)
from sitegraph.models import Page, SearchResult

logger = logging.getLogger(__name__)

# Query word -> related terms credited by semantic search
DEFAULT_SYNONYMS: Dict[str, tuple] = {
    "web": ("website", "site", "page", "online", "internet", "browser"),
    "development": ("dev", "coding", "programming", "software", "engineering"),
    "design": ("ui", "ux", "interface", "visual", "layout", "creative"),
    "business": ("company", "enterprise", "corporate", "commercial", "startup"),
    "technology": ("tech", "technical", "digital", "innovation", "modern"),
    "data": ("analytics", "statistics", "information", "database", "science"),
    "security": ("privacy", "protection", "safe", "secure", "auth"),
}


class SearchEngine:
    """Scores pages against a query with one of four matching strategies.

    Each requested field gets a raw score from the query words, which is
    multiplied by the field weight (title 3, url 2, keywords 2.5, content 1)
    and summed over fields:
    - exact: 10 points per word found as a substring
    - fuzzy: 5 points per word found, 4 when only its leading 80% is found
    - semantic: 3 * 0.7 per related term of the word found
    - boolean: 5 points per word, but the field scores 0 unless all are found
    """

    def __init__(self, synonyms: Optional[Mapping[str, Sequence[str]]] = None):
        self.synonyms = dict(DEFAULT_SYNONYMS if synonyms is None else synonyms)

    def search(
        self,
        nodes: Iterable[Page],
        query: str,
        algorithm: str = "fuzzy",
        fields: Sequence[str] = SEARCH_FIELDS,
        min_score: float = 0,
        category: str = "all",
    ) -> List[SearchResult]:
        """Rank pages by how well they match a query.

        Args:
            nodes: Pages to search
            query: Free-text query (words shorter than 3 characters are ignored)
            algorithm: "exact", "fuzzy", "semantic" or "boolean"
            fields: Subset of "title", "url", "keywords", "content"
            min_score: Results scoring below this are dropped
            category: Keyword list the keywords field is scored against
                ("all", "technical", "business" or "entities")

        Returns:
            SearchResults sorted by descending score

        Raises:
            ValueError: For an unknown algorithm, field or category
        """
        if algorithm not in SEARCH_ALGORITHMS:
            raise ValueError(f"Unknown search algorithm: {algorithm}")
        unknown = [name for name in fields if name not in SEARCH_FIELDS]
        if unknown:
            raise ValueError(f"Unknown search fields: {', '.join(unknown)}")
        if category not in KEYWORD_CATEGORIES:
            raise ValueError(f"Unknown keyword category: {category}")

        words = [word for word in query.lower().split() if len(word) > MIN_QUERY_WORD_LENGTH]

        results = []
        for node in nodes:
            score = 0.0
            matched = []
            for name in fields:
                field_score = self._field_score(self._field_text(node, name, category), words, algorithm)
                score += field_score * FIELD_WEIGHTS[name]
                if field_score > 0:
                    matched.append(name)

            if score < min_score:
                continue
            results.append(SearchResult(
                node=node,
                score=score,
                matched_fields=matched,
                relevance=score / max(len(words), 1),
            ))

        results.sort(key=lambda result: result.score, reverse=True)
        logger.debug(f"Search {query!r} ({algorithm}): {len(results)} results")
        return results

    @staticmethod
    def _field_text(node: Page, name: str, category: str) -> str:
        if name == "title":
            return node.title.lower()
        if name == "url":
            return node.url.lower()
        if name == "keywords":
            return " ".join(node.keyword_profile.category(category)).lower()
        return node.text_excerpt.lower()

    def _field_score(self, text: str, words: List[str], algorithm: str) -> float:
        score = 0.0
        for word in words:
            if algorithm == "exact":
                if word in text:
                    score += EXACT_MATCH_POINTS
            elif algorithm == "fuzzy":
                score += self._fuzzy_match(text, word) * FUZZY_MATCH_POINTS
            elif algorithm == "semantic":
                score += self._semantic_match(text, word) * SEMANTIC_MATCH_POINTS
            elif word in text:
                score += BOOLEAN_MATCH_POINTS
            else:
                # AND semantics: one missing word zeroes the field
                return 0.0
        return score

    @staticmethod
    def _fuzzy_match(text: str, word: str) -> float:
        if word in text:
            return 1.0
        if len(word) > FUZZY_MIN_WORD_LENGTH:
            prefix = word[:math.ceil(len(word) * FUZZY_PREFIX_FRACTION)]
            if prefix in text:
                return FUZZY_PARTIAL_CREDIT
        return 0.0

    def _semantic_match(self, text: str, word: str) -> float:
        related = self.synonyms.get(word, ())
        return sum(SEMANTIC_RELATED_CREDIT for term in related if term in text)
