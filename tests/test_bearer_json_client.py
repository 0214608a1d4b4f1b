from __future__ import annotations

import pytest


class FakeResp:
    def __init__(self, status_code: int = 200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            e = requests.exceptions.HTTPError(str(self.status_code))
            e.response = self
            raise e

    def json(self):
        return self._payload


def _client(responses: list[FakeResp], seen: list[dict]):
    import requests

    from beat_the_intro.clients.http_client import BearerJSONClient
    from beat_the_intro.utils.utilities import RateLimiter

    class FakeSession(requests.Session):
        def get(self, url, **kwargs):
            seen.append({"url": url, **kwargs})
            return responses.pop(0)

    return BearerJSONClient(FakeSession(), "tok", RateLimiter(0.0), context_prefix="Test")


def test_server_error_is_retried_then_succeeds(monkeypatch) -> None:
    monkeypatch.setattr("time.sleep", lambda s: None)
    seen: list[dict] = []
    client = _client([FakeResp(503), FakeResp(200, {"id": "x"})], seen)

    assert client.get_json("https://api/x", context="x") == {"id": "x"}
    assert len(seen) == 2
    assert seen[0]["headers"] == {"Authorization": "Bearer tok"}
    assert client.stats["http_get"] == 2
    assert client.stats["http_errors"] == 1


def test_unauthorized_raises_without_retrying() -> None:
    from beat_the_intro.clients.http_client import TokenRejectedError

    seen: list[dict] = []
    client = _client([FakeResp(401), FakeResp(200, {})], seen)
    with pytest.raises(TokenRejectedError, match="Test: x"):
        client.get_json("https://api/x", context="x")
    assert len(seen) == 1


def test_not_found_and_non_object_payloads_read_as_missing() -> None:
    seen: list[dict] = []
    client = _client([FakeResp(404), FakeResp(200, ["not", "a", "dict"])], seen)
    assert client.get_json("https://api/a", context="a") is None
    assert client.get_json("https://api/b", context="b") is None


def test_iter_pages_follows_next_and_respects_page_cap() -> None:
    seen: list[dict] = []
    client = _client(
        [
            FakeResp(200, {"items": [1], "next": "https://api/p?offset=1"}),
            FakeResp(200, {"items": [2], "next": "https://api/p?offset=2"}),
            FakeResp(200, {"items": [3], "next": None}),
        ],
        seen,
    )
    pages = list(client.iter_pages("https://api/p", params={"limit": 1}, context="p", max_pages=2))
    assert [p["items"] for p in pages] == [[1], [2]]
    assert seen[0]["params"] == {"limit": 1}
    assert seen[1]["url"] == "https://api/p?offset=1"
    assert seen[1]["params"] is None
