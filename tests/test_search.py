"""Tests for the search engine."""

import pytest

from sitegraph.models import KeywordProfile, Page
from sitegraph.search import SearchEngine


def make_page(node_id, title, url=None, keywords=(), technical=(), text=""):
    return Page(
        id=node_id,
        url=url or f"https://example.com/{node_id}",
        title=title,
        depth=1,
        keyword_profile=KeywordProfile(primary=list(keywords), technical=list(technical)),
        text_excerpt=text,
    )


class TestSearchEngine:
    """Test suite for SearchEngine."""

    @pytest.fixture
    def engine(self):
        return SearchEngine()

    def test_exact_beats_fuzzy_near_miss(self, engine):
        """An exact title hit outscores a fuzzy near miss on the same page."""
        page = make_page("p1", "Documentation")

        exact = engine.search([page], "documentation", algorithm="exact", fields=("title",))
        fuzzy = engine.search([page], "documentations", algorithm="fuzzy", fields=("title",))

        assert exact[0].score == 30
        assert fuzzy[0].score == pytest.approx(12)
        assert exact[0].score > fuzzy[0].score

    def test_fuzzy_full_match(self, engine):
        page = make_page("p1", "Python guide")
        results = engine.search([page], "python", algorithm="fuzzy", fields=("title",))
        assert results[0].score == 15

    def test_fuzzy_short_words_need_full_match(self, engine):
        """Words of four characters or fewer get no partial credit."""
        page = make_page("p1", "cod")
        results = engine.search([page], "code", algorithm="fuzzy", fields=("title",))
        assert results[0].score == 0

    def test_field_weights(self, engine):
        """Title, url, keywords and content are weighted 3, 2, 2.5 and 1."""
        page = make_page(
            "p1", "python", url="https://example.com/python",
            keywords=["python"], text="python",
        )
        results = engine.search([page], "python", algorithm="exact")

        assert results[0].score == 10 * (3 + 2 + 2.5 + 1)
        assert results[0].matched_fields == ["title", "url", "keywords", "content"]

    def test_semantic_uses_related_terms(self, engine):
        """Each related term found earns 3 * 0.7 before weighting."""
        page = make_page("p1", "Online browser tips")
        results = engine.search([page], "web", algorithm="semantic", fields=("title",))

        assert results[0].score == pytest.approx(2 * 0.7 * 3 * 3)

    def test_semantic_unknown_word_scores_zero(self, engine):
        page = make_page("p1", "Gardening")
        results = engine.search([page], "gardening", algorithm="semantic", fields=("title",))
        assert results[0].score == 0

    def test_custom_synonyms(self):
        engine = SearchEngine(synonyms={"garden": ["plants"]})
        page = make_page("p1", "Indoor plants")
        results = engine.search([page], "garden", algorithm="semantic", fields=("title",))
        assert results[0].score == pytest.approx(0.7 * 3 * 3)

    def test_boolean_requires_every_word_per_field(self, engine):
        """A field missing any word scores zero; other fields are unaffected."""
        both = make_page("p1", "Python guide")
        one = make_page("p2", "Python basics", text="a guide to python")

        results = engine.search(
            [one, both], "python guide", algorithm="boolean", fields=("title", "content")
        )

        assert results[0].node.id == "p1"
        assert results[0].score == 30
        assert results[1].node.id == "p2"
        assert results[1].score == 10
        assert results[1].matched_fields == ["content"]

    def test_results_sorted_and_filtered(self, engine):
        pages = [
            make_page("p1", "Nothing here"),
            make_page("p2", "Python"),
            make_page("p3", "Python python"),
        ]
        everything = engine.search(pages, "python", algorithm="exact", fields=("title",))
        assert [r.node.id for r in everything][:2] in (["p2", "p3"], ["p3", "p2"])
        assert everything[-1].node.id == "p1"
        assert everything[-1].score == 0

        filtered = engine.search(pages, "python", algorithm="exact", fields=("title",), min_score=1)
        assert {r.node.id for r in filtered} == {"p2", "p3"}

    def test_short_query_words_are_ignored(self, engine):
        """Words of two characters or fewer do not count."""
        page = make_page("p1", "Python on AI")
        results = engine.search([page], "on ai python", algorithm="exact", fields=("title",))

        assert results[0].score == 30
        assert results[0].relevance == 30

    def test_relevance_is_score_per_word(self, engine):
        page = make_page("p1", "Python guide")
        results = engine.search([page], "python guide", algorithm="exact", fields=("title",))
        assert results[0].relevance == results[0].score / 2

    def test_category_selects_keyword_list(self, engine):
        """The keywords field is scored against the chosen category."""
        page = make_page("p1", "Recipes", keywords=["cooking"], technical=["docker"])

        technical = engine.search([page], "docker", algorithm="exact",
                                  fields=("keywords",), category="technical")
        everything = engine.search([page], "docker", algorithm="exact",
                                   fields=("keywords",), category="all")

        assert technical[0].score == 25
        assert everything[0].score == 0

    def test_case_insensitive(self, engine):
        page = make_page("p1", "KUBERNETES Deployments")
        results = engine.search([page], "Kubernetes", algorithm="exact", fields=("title",))
        assert results[0].score == 30

    @pytest.mark.parametrize("kwargs", [
        {"algorithm": "regex"},
        {"fields": ("title", "body")},
        {"category": "people"},
    ])
    def test_invalid_options(self, engine, kwargs):
        with pytest.raises(ValueError):
            engine.search([make_page("p1", "x")], "python", **kwargs)

    def test_to_dict(self, engine):
        page = make_page("p1", "Python")
        data = engine.search([page], "python", algorithm="exact", fields=("title",))[0].to_dict()

        assert data["node_id"] == "p1"
        assert data["score"] == 30
        assert data["matched_fields"] == ["title"]
