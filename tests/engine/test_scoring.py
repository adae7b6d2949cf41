"""Lexical relevance scoring tests."""

from __future__ import annotations

import pytest

from linkfinder.engine.keywords import extract_keywords, extract_slug_keywords
from linkfinder.engine.scoring import calculate_relevance, get_score_category

from .conftest import ARTICLE_A, URL_A


def test_exact_matches_score_by_frequency():
    slug_keywords = extract_slug_keywords(URL_A)
    relevance = calculate_relevance(slug_keywords, extract_keywords(ARTICLE_A))

    assert slug_keywords == ["keyword", "research", "guide"]
    assert relevance.matched_keywords == ["keyword", "research"]
    assert relevance.score == 80
    assert relevance.explanation == "Matched keywords focus on: keyword, research."


def test_excluded_keyword_is_not_matched():
    relevance = calculate_relevance(
        extract_slug_keywords(URL_A),
        extract_keywords(ARTICLE_A),
        excluded_keywords=["Research"],
    )

    assert relevance.matched_keywords == ["keyword"]
    assert relevance.score == 40


def test_url_without_slug_keywords():
    relevance = calculate_relevance(extract_slug_keywords("/"), extract_keywords(ARTICLE_A))

    assert relevance.score == 0
    assert relevance.matched_keywords == []
    assert relevance.explanation == "No identifiable keywords in URL"


def test_no_overlap_explanation():
    relevance = calculate_relevance(["coffee", "grinder"], {"keyword": 3})

    assert relevance.score == 0
    assert relevance.explanation == "No significant keyword overlap detected."


def test_per_keyword_cap_and_total_cap():
    index = {"coffee": 1, "grinder": 2, "espresso": 3, "burr": 9}

    assert calculate_relevance(["coffee"], index).score == 20
    assert calculate_relevance(["grinder"], index).score == 40
    assert calculate_relevance(["espresso"], index).score == 50
    assert calculate_relevance(["burr"], index).score == 50
    assert calculate_relevance(["espresso", "burr", "coffee"], index).score == 100


def test_matching_is_exact_token_only():
    index = {"research": 2, "keyword research": 1}

    relevance = calculate_relevance(["researcher", "keyword"], index)

    assert relevance.matched_keywords == []
    assert relevance.score == 0


def test_explanation_lists_first_three_matches():
    index = {"alpha": 1, "bravo": 1, "charlie": 1, "delta": 1}

    relevance = calculate_relevance(["alpha", "bravo", "charlie", "delta"], index)

    assert relevance.matched_keywords == ["alpha", "bravo", "charlie", "delta"]
    assert relevance.explanation == "Matched keywords focus on: alpha, bravo, charlie."


def test_excluding_a_matched_keyword_never_raises_the_score():
    index = extract_keywords(ARTICLE_A)
    slug_keywords = extract_slug_keywords(URL_A)
    baseline = calculate_relevance(slug_keywords, index)

    for keyword in baseline.matched_keywords:
        excluded = calculate_relevance(slug_keywords, index, excluded_keywords=[keyword])
        assert excluded.score <= baseline.score
        assert keyword not in excluded.matched_keywords


@pytest.mark.parametrize(
    "score, category",
    [(100, "high"), (75, "high"), (74, "medium"), (45, "medium"), (44, "low"), (0, "low")],
)
def test_score_category(score, category):
    assert get_score_category(score) == category
