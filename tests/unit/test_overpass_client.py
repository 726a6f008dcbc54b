"""Overpassクライアントのテスト"""

from unittest.mock import Mock

import pytest

from locability.features.importing.providers.overpass_client import (
    OverpassClient,
    build_overpass_query,
)
from locability.shared.exceptions.errors import GeodataImportError, HTTPError, ParsingError
from locability.shared.http.client import HTTPClient
from locability.shared.http.rate_limiter import RateLimiter

from spot_helpers import SYNTAGMA

ENDPOINT = "https://overpass.example.com/api/interpreter"


def make_client(payload=None, error=None) -> tuple[OverpassClient, Mock]:
    http_client = Mock(spec=HTTPClient)
    if error is not None:
        http_client.post_json.side_effect = error
    else:
        http_client.post_json.return_value = payload

    client = OverpassClient(
        http_client=http_client,
        endpoint=ENDPOINT,
        rate_limiter=RateLimiter(min_interval=0),
    )
    return client, http_client


def test_build_overpass_query() -> None:
    """クエリは中心・半径と各設備の条件を含む"""
    query = build_overpass_query(SYNTAGMA, 1000)

    assert query.startswith("[out:json][timeout:25];")
    assert "(around:1000,37.9755,23.7348)" in query
    assert 'node["highway"="elevator"]' in query
    assert 'way["amenity"="parking"]["wheelchair"="yes"]' in query
    assert query.endswith("out center body;")


def test_fetch_elements_posts_query_and_parses_elements() -> None:
    """クエリをPOSTし、要素を RawElement に変換する"""
    payload = {
        "elements": [
            {"type": "node", "id": 1, "lat": 37.97, "lon": 23.73, "tags": {"ramp": "yes"}},
            {
                "type": "way",
                "id": 2,
                "center": {"lat": 37.98, "lon": 23.74},
                "tags": {"amenity": "parking", "wheelchair": "yes"},
            },
            "garbage",
        ]
    }
    client, http_client = make_client(payload)

    elements = client.fetch_elements(SYNTAGMA, 500)

    http_client.post_json.assert_called_once()
    args, kwargs = http_client.post_json.call_args
    assert args[0] == ENDPOINT
    assert "(around:500," in kwargs["data"]["data"]

    assert [e.element_id for e in elements] == ["node/1", "way/2"]
    assert (elements[1].latitude, elements[1].longitude) == (37.98, 23.74)


def test_fetch_elements_wraps_http_error() -> None:
    """通信エラーは GeodataImportError"""
    client, _ = make_client(error=HTTPError("timeout"))

    with pytest.raises(GeodataImportError):
        client.fetch_elements(SYNTAGMA, 500)


def test_fetch_elements_rejects_invalid_json() -> None:
    """JSONとして解釈できない応答は GeodataImportError"""
    client, _ = make_client(error=ParsingError("Expected JSON, got text/html"))

    with pytest.raises(GeodataImportError):
        client.fetch_elements(SYNTAGMA, 500)


@pytest.mark.parametrize("payload", [{}, {"elements": "nope"}, []])
def test_fetch_elements_requires_elements_list(payload) -> None:
    """elements のリストがない応答は GeodataImportError"""
    client, _ = make_client(payload)

    with pytest.raises(GeodataImportError):
        client.fetch_elements(SYNTAGMA, 500)
