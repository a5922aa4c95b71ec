from __future__ import annotations

import pytest

from shpdat.common.http import HttpClient, HttpRequestError, RetryConfig, RetryableHttpError


class FakeResponse:
    def __init__(self, status_code: int, chunks=None):
        self.status_code = status_code
        self._chunks = chunks or []

    def iter_content(self, chunk_size: int):
        yield from self._chunks


def test_http_download_writes_chunks(monkeypatch, tmp_path):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, [b"ab", b"", b"cd"]))

    target = tmp_path / "downloads" / "archive.zip"
    size = client.download("https://example.com/archive.zip", target)

    assert size == 4
    assert target.read_bytes() == b"abcd"


def test_http_retryable_status_raises_retryable_error(monkeypatch, tmp_path):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(503))

    with pytest.raises(RetryableHttpError):
        client.download("https://example.com/archive.zip", tmp_path / "a.zip")


def test_http_client_error_is_not_retried(monkeypatch, tmp_path):
    calls = []

    def fake_request(**kwargs):
        calls.append(kwargs["url"])
        return FakeResponse(404)

    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0.01, max_wait=0.01))
    monkeypatch.setattr(client.session, "request", fake_request)

    with pytest.raises(HttpRequestError):
        client.download("https://example.com/archive.zip", tmp_path / "a.zip")
    assert len(calls) == 1


def test_http_retries_until_success(monkeypatch, tmp_path):
    responses = [FakeResponse(502), FakeResponse(200, [b"ok"])]
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0.01, max_wait=0.01))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: responses.pop(0))

    assert client.download("https://example.com/archive.zip", tmp_path / "a.zip") == 2
