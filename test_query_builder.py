"""Tests for request parameter validation and normalisation."""

import pytest

from conftest import make_config
from searchproxy.search.exceptions import InvalidRequest
from searchproxy.search.query_builder import build_query, parse_alpha, parse_days, parse_phrase, parse_top_k


def test_missing_or_blank_query_is_rejected():
    """Test that empty query text raises InvalidRequest."""
    config = make_config()
    for q in (None, "", "   ", "\t\n"):
        with pytest.raises(InvalidRequest) as exc_info:
            build_query(config, q)
        assert exc_info.value.message == "Missing q"
        assert exc_info.value.status_code == 400


def test_query_text_is_trimmed():
    query = build_query(make_config(), "  education  ")
    assert query.text == "education"


def test_top_k_defaults_and_clamping():
    """Test that topK always lands in [1, MAX]."""
    assert parse_top_k(None, 10, 50) == 10
    assert parse_top_k("", 10, 50) == 10
    assert parse_top_k("abc", 10, 50) == 10
    assert parse_top_k("0", 10, 50) == 10
    assert parse_top_k("-3", 10, 50) == 10
    assert parse_top_k("5", 10, 50) == 5
    assert parse_top_k(" 7 ", 10, 50) == 7
    assert parse_top_k("50", 10, 50) == 50
    assert parse_top_k("9999", 10, 50) == 50
    assert parse_top_k("9999", 10, 100) == 100
    assert parse_top_k(None, 10, 5) == 5


def test_top_k_uses_configured_maximum():
    config = make_config(max_top_k=100)
    assert build_query(config, "x", top_k="75").result_limit == 75
    assert build_query(make_config(), "x", top_k="75").result_limit == 50


def test_days_only_accepts_positive_integers():
    assert parse_days(None) is None
    assert parse_days("") is None
    assert parse_days("0") is None
    assert parse_days("-7") is None
    assert parse_days("soon") is None
    assert parse_days("7") == 7
    assert parse_days("365") == 365


def test_alpha_parsing():
    assert parse_alpha(None, 0.8) == 0.8
    assert parse_alpha("", 0.8) == 0.8
    assert parse_alpha("0.25", 0.8) == 0.25
    assert parse_alpha("nope", 0.8) == 0.8
    assert parse_alpha("nan", 0.8) == 0.8
    assert parse_alpha("1.5", 0.8) == 1.0
    assert parse_alpha("-0.5", 0.8) == 0.0


def test_exact_phrase_blank_is_absent():
    assert parse_phrase(None) is None
    assert parse_phrase("   ") is None
    assert parse_phrase("  machine learning ") == "machine learning"


def test_build_query_full():
    query = build_query(
        make_config(),
        "education",
        top_k="5",
        content_type=" essay ",
        days="7",
        alpha="0.6",
        exact=" school choice ",
    )
    assert query.text == "education"
    assert query.result_limit == 5
    assert query.content_type_selector == "essay"
    assert query.recency_window_days == 7
    assert query.exact_phrase == "school choice"
    assert query.hybrid_alpha == 0.6


def test_build_query_defaults():
    query = build_query(make_config(default_alpha=0.7), "education")
    assert query.result_limit == 10
    assert query.content_type_selector == ""
    assert query.recency_window_days is None
    assert query.exact_phrase is None
    assert query.hybrid_alpha == 0.7


def test_integers_are_read_from_leading_digits():
    """Test that trailing junk after the digits is ignored rather than dropping the value."""
    assert parse_days("7.5") == 7
    assert parse_days("30d") == 30
    assert parse_days("1_0") == 1
    assert parse_days(".5") is None
    assert parse_top_k("5.5", 10, 50) == 5
    assert parse_top_k("1_000", 10, 50) == 1
    assert parse_top_k("+8", 10, 50) == 8


def test_fractional_days_keep_the_recency_window():
    query = build_query(make_config(), "education", days="7.5", top_k="5.5")
    assert query.recency_window_days == 7
    assert query.result_limit == 5
