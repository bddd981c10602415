import asyncio
import os
import time

import httpx
import pytest

from swordminder.core import cache, filesystem
from swordminder.core.async_http import AsyncHttpError, fetch


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_fetch_retries_then_succeeds():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(500)
        return httpx.Response(200, text="ok")

    text = asyncio.run(fetch("https://example.test/a", client=_client(handler), retries=2, backoff=0))
    assert text == "ok"
    assert len(calls) == 2


def test_fetch_gives_up_after_retries():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(404)

    with pytest.raises(AsyncHttpError):
        asyncio.run(fetch("https://example.test/a", client=_client(handler), retries=0, backoff=0))
    assert len(calls) == 1


def test_fetch_uses_fresh_cache(tmp_path):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, text="body")

    url = "https://example.test/bible.json"
    first = asyncio.run(fetch(url, client=_client(handler), cache_dir=tmp_path))
    second = asyncio.run(fetch(url, client=_client(handler), cache_dir=tmp_path))
    assert first == second == "body"
    assert len(calls) == 1


def test_cache_entry_expires(tmp_path):
    url = "https://example.test/x"
    cache.set(tmp_path, url, "stale")
    entry = next(tmp_path.glob("*.cache"))
    old = time.time() - 120
    os.utime(entry, (old, old))
    assert cache.get(tmp_path, url, ttl=60) is None
    assert cache.get(tmp_path, url, ttl=3600) == "stale"


def test_write_bytes_replaces_whole_file(tmp_path):
    target = tmp_path / "doc.json"
    filesystem.write_bytes(target, b"first document, rather long")
    filesystem.write_bytes(target, b"short")
    assert filesystem.read_bytes(target) == b"short"
    assert not (tmp_path / "doc.json.tmp").exists()
