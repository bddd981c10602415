"""Async HTTP utilities using httpx with optional caching."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx

from swordminder.config import settings
from . import cache

_log = logging.getLogger(__name__)


class AsyncHttpError(RuntimeError):
    pass


async def fetch(
    url: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    retries: int | None = None,
    backoff: float | None = None,
    cache_dir: Path | None = None,
    cache_ttl: int = cache.DEFAULT_TTL,
) -> str:
    """GET ``url`` and return the body text.

    When ``cache_dir`` is given a fresh cached copy short-circuits the request
    and successful responses are written back to it.
    """
    retries = retries if retries is not None else settings.DEFAULT_RETRIES
    backoff = backoff if backoff is not None else settings.DEFAULT_BACKOFF_FACTOR
    if cache_dir is not None:
        cached = cache.get(cache_dir, url, ttl=cache_ttl)
        if cached is not None:
            _log.debug("cache hit for %s", url)
            return cached
    close_client = False
    if client is None:
        headers = {"User-Agent": settings.DEFAULT_USER_AGENT}
        client = httpx.AsyncClient(
            headers=headers, timeout=settings.DEFAULT_TIMEOUT, follow_redirects=True
        )
        close_client = True
    try:
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = await client.get(url)
                resp.raise_for_status()
                text = resp.text
                break
            except httpx.HTTPError as e:
                if attempt > retries:
                    raise AsyncHttpError(f"Failed to fetch {url} after {retries} retries: {e}") from e
                delay = backoff * (2 ** (attempt - 1))
                _log.info(
                    "attempt %d/%d for %s failed: %s; retrying in %.1fs",
                    attempt,
                    retries,
                    url,
                    e,
                    delay,
                )
                await asyncio.sleep(delay)
    finally:
        if close_client:
            await client.aclose()
    if cache_dir is not None:
        try:
            cache.set(cache_dir, url, text)
        except OSError:
            _log.warning("could not cache response for %s", url, exc_info=True)
    return text
