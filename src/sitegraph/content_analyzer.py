"""Keyword extraction and content scoring for crawled page text."""

import math
import re
from collections import Counter
from typing import Iterable, Iterator, List, Optional, Tuple

from sitegraph.constants import (
    BUSINESS_KEYWORDS_COUNT,
    BUSINESS_TERM_BOOST,
    DOMAIN_SPECIFIC_BOOST,
    DOMAIN_SPECIFIC_MIN_LENGTH,
    ENTITY_COUNT_POINTS,
    ENTITY_KEYWORDS_COUNT,
    LEXICAL_DIVERSITY_POINTS,
    LONG_PHRASE_BOOST,
    LONG_TERM_BOOST,
    LONG_TERM_LENGTH,
    MAX_CONTENT_SCORE,
    MAX_ENTITY_CANDIDATES,
    MIN_CONTENT_WORD_LENGTH,
    MIN_DAMPENING_TEXT_LENGTH,
    MIN_ENTITY_LENGTH,
    PHRASE_BOOST,
    PRIMARY_KEYWORDS_COUNT,
    PRIMARY_RANK_CUTOFF,
    SECONDARY_KEYWORDS_COUNT,
    SECONDARY_RANK_CUTOFF,
    TECHNICAL_KEYWORDS_COUNT,
    TECHNICAL_TERM_BOOST,
    VERY_LONG_TERM_BOOST,
    VERY_LONG_TERM_LENGTH,
    WORD_COUNT_POINTS,
)
from sitegraph.keyword_tables import DEFAULT_TABLES, KeywordTables
from sitegraph.models import KeywordProfile


class ContentAnalyzer:
    """Turns page text into categorized, scored keyword lists.

    Candidates are unigrams, bigrams and trigrams of the cleaned text,
    scored by frequency with boosts for phrases, long terms, dictionary
    terms and domain-specific terms, then deduplicated by a crude stem and
    by substring containment. Named entities are capitalized phrases taken
    from the original-case text.
    """

    TAG_PATTERN = re.compile(r"<[^>]*>")
    # Hyphens survive so compound words stay together
    NON_WORD_PATTERN = re.compile(r"[^A-Za-z0-9_\s-]")
    WHITESPACE_PATTERN = re.compile(r"\s+")
    ENTITY_PATTERN = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b", re.ASCII)
    STEM_SUFFIXES = (re.compile(r"s$"), re.compile(r"ing$"), re.compile(r"ed$"))

    def __init__(self, tables: Optional[KeywordTables] = None):
        """Initialize the analyzer.

        Args:
            tables: Word lists and predicates to score against
        """
        self.tables = tables or DEFAULT_TABLES

    def analyze(self, text: str) -> KeywordProfile:
        """Extract a keyword profile from page text.

        Args:
            text: Raw page text (markup-like tags are stripped)

        Returns:
            KeywordProfile; empty lists and score 0 for empty text
        """
        if not text:
            return KeywordProfile()

        text_content = self.TAG_PATTERN.sub(" ", text)
        tokens = self._tokenize(text_content)

        words = [token for token in tokens if self._is_content_word(token)]
        candidates = words + self._ngrams(tokens, 2) + self._ngrams(tokens, 3)
        frequencies = self._count_candidates(candidates)

        entities = self._extract_entities(text_content)

        text_length = len(text_content)
        scored = sorted(
            (
                (term, self._score_term(term, count, text_length))
                for term, count in frequencies.items()
            ),
            key=lambda item: item[1],
            reverse=True,
        )

        ranked, technical, business = self._categorize(self._deduplicate(scored))

        return KeywordProfile(
            primary=ranked[:PRIMARY_RANK_CUTOFF][:PRIMARY_KEYWORDS_COUNT],
            secondary=ranked[PRIMARY_RANK_CUTOFF:SECONDARY_RANK_CUTOFF][:SECONDARY_KEYWORDS_COUNT],
            technical=technical[:TECHNICAL_KEYWORDS_COUNT],
            business=business[:BUSINESS_KEYWORDS_COUNT],
            entities=entities[:ENTITY_KEYWORDS_COUNT],
            score=self._content_score(len(words), len(set(words)), len(entities)),
        )

    def _tokenize(self, text: str) -> List[str]:
        """Lowercase, drop punctuation (keeping hyphens) and split on whitespace.

        Args:
            text: Tag-stripped text

        Returns:
            List of tokens
        """
        cleaned = self.NON_WORD_PATTERN.sub(" ", text.lower())
        cleaned = self.WHITESPACE_PATTERN.sub(" ", cleaned).strip()
        return cleaned.split(" ") if cleaned else []

    def _is_content_word(self, token: str) -> bool:
        return (
            len(token) > MIN_CONTENT_WORD_LENGTH
            and token not in self.tables.stopwords
            and not self.tables.is_garbage(token)
        )

    def _ngrams(self, tokens: List[str], n: int) -> List[str]:
        """Build n-grams that contain at least one content word.

        Args:
            tokens: Token stream
            n: Phrase length

        Returns:
            List of space-joined n-grams
        """
        ngrams = []
        for i in range(len(tokens) - n + 1):
            window = tokens[i:i + n]
            if any(self._is_content_word(token) for token in window):
                ngrams.append(" ".join(window))
        return ngrams

    def _count_candidates(self, candidates: Iterable[str]) -> Counter:
        """Count candidate terms, skipping phrases bounded by stopwords.

        Args:
            candidates: Unigrams followed by bigrams and trigrams

        Returns:
            Counter in first-seen order
        """
        stopwords = self.tables.stopwords
        frequencies: Counter = Counter()
        for term in candidates:
            parts = term.split(" ")
            if len(parts) > 1 and (parts[0] in stopwords or parts[-1] in stopwords):
                continue
            frequencies[term] += 1
        return frequencies

    def _extract_entities(self, text: str) -> List[str]:
        """Find capitalized phrases in the original-case text.

        Args:
            text: Tag-stripped text with original casing

        Returns:
            Up to MAX_ENTITY_CANDIDATES phrases, most frequent first
        """
        counts: Counter = Counter()
        for match in self.ENTITY_PATTERN.finditer(text):
            entity = match.group(0)
            if entity.lower() in self.tables.stopwords or len(entity) <= MIN_ENTITY_LENGTH:
                continue
            counts[entity] += 1

        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [entity for entity, _ in ranked[:MAX_ENTITY_CANDIDATES]]

    def _score_term(self, term: str, frequency: int, text_length: int) -> float:
        """Score a candidate term.

        Args:
            term: Candidate unigram or phrase
            frequency: Occurrences in the text
            text_length: Length of the tag-stripped text

        Returns:
            Frequency with boosts applied, dampened by log of text length
        """
        score = float(frequency)
        word_count = len(term.split(" "))

        if word_count > 1:
            score *= PHRASE_BOOST
        if word_count > 2:
            score *= LONG_PHRASE_BOOST

        if len(term) > LONG_TERM_LENGTH:
            score *= LONG_TERM_BOOST
        if len(term) > VERY_LONG_TERM_LENGTH:
            score *= VERY_LONG_TERM_BOOST

        if term in self.tables.technical_terms:
            score *= TECHNICAL_TERM_BOOST
        if term in self.tables.business_terms:
            score *= BUSINESS_TERM_BOOST

        if self._is_domain_specific(term):
            score *= DOMAIN_SPECIFIC_BOOST

        return score / math.log(max(text_length, MIN_DAMPENING_TEXT_LENGTH))

    def _is_domain_specific(self, term: str) -> bool:
        return (
            len(term) > DOMAIN_SPECIFIC_MIN_LENGTH
            and "http" not in term
            and any(marker in term for marker in self.tables.domain_markers)
        )

    def _stem(self, term: str) -> str:
        for suffix in self.STEM_SUFFIXES:
            term = suffix.sub("", term)
        return term

    def _deduplicate(self, scored: List[Tuple[str, float]]) -> Iterator[str]:
        """Yield terms in score order, skipping redundant ones.

        A term is redundant when it shares a stem with a kept term, or when
        it and a kept term contain one another and the kept term scores
        strictly higher.

        Args:
            scored: (term, score) pairs sorted by descending score

        Yields:
            Surviving terms
        """
        kept: List[Tuple[str, float]] = []
        kept_stems = set()

        for term, score in scored:
            stem = self._stem(term)
            if stem in kept_stems:
                continue

            redundant = False
            for existing, existing_score in kept:
                if existing in term and score < existing_score:
                    redundant = True
                    break
                if term in existing and existing_score > score:
                    redundant = True
                    break
            if redundant:
                continue

            kept.append((term, score))
            kept_stems.add(stem)
            yield term

    def _categorize(self, terms: Iterator[str]) -> Tuple[List[str], List[str], List[str]]:
        """Split deduplicated terms into ranked, technical and business lists.

        Consumption stops once every list that is later truncated is full.

        Args:
            terms: Deduplicated terms in score order

        Returns:
            Tuple of (ranked, technical, business)
        """
        ranked: List[str] = []
        technical: List[str] = []
        business: List[str] = []
        tables = self.tables

        for term in terms:
            if len(ranked) < SECONDARY_RANK_CUTOFF:
                ranked.append(term)
            if term in tables.technical_terms or tables.is_technical(term):
                technical.append(term)
            if term in tables.business_terms or tables.is_business(term):
                business.append(term)

            if (
                len(ranked) >= SECONDARY_RANK_CUTOFF
                and len(technical) >= TECHNICAL_KEYWORDS_COUNT
                and len(business) >= BUSINESS_KEYWORDS_COUNT
            ):
                break

        return ranked, technical, business

    def _content_score(self, total_words: int, unique_words: int, entity_count: int) -> int:
        """Additive 0-100 quality score from length, diversity and entities.

        Args:
            total_words: Content words in the text
            unique_words: Distinct content words
            entity_count: Entity candidates found

        Returns:
            Score capped to 0..100
        """
        if total_words == 0:
            return 0

        lexical_diversity = unique_words / total_words
        score = 0

        for threshold, points in WORD_COUNT_POINTS:
            if total_words > threshold:
                score += points

        for threshold, points in LEXICAL_DIVERSITY_POINTS:
            if lexical_diversity > threshold:
                score += points

        for threshold, points in ENTITY_COUNT_POINTS:
            if entity_count > threshold:
                score += points

        return max(0, min(MAX_CONTENT_SCORE, score))
