"""Unit tests for recommendation service payloads."""

import json

import pytest

from screenrank.models import Category, Item
from screenrank.recommendations import build_favorites_payload, parse_recommendations

pytestmark = pytest.mark.unit


def test_payload_lists_titles_with_service_types():
    movies = [Item(id="1", title="Heat", category=Category.MOVIE, rating=1040)]
    shows = [Item(id="2", title="The Wire", category=Category.SHOW)]

    payload = build_favorites_payload(movies, shows)

    assert payload == {
        "favorites": [
            {"title": "Heat", "type": "movie"},
            {"title": "The Wire", "type": "tv"},
        ]
    }


def test_parse_response_body():
    raw = json.dumps({
        "recommendations": [
            {"title": "Collateral", "type": "movie", "reason": "Same director", "year": 2004},
            {"title": "The Shield", "type": "tv", "reason": "Gritty cops", "poster_path": "/s.jpg"},
        ]
    })

    recs = parse_recommendations(raw)

    assert [r.title for r in recs] == ["Collateral", "The Shield"]
    assert recs[0].year == "2004"
    assert recs[1].category == Category.SHOW


@pytest.mark.parametrize("raw", ["not json", {"recommendations": [{"title": "x"}]}, "[{\"type\": \"book\"}]"])
def test_malformed_response_is_empty(raw):
    assert parse_recommendations(raw) == []


def test_missing_key_is_empty():
    assert parse_recommendations({}) == []
