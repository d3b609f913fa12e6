"""
Resilient catalog loader.

Fetches the catalog document once and keeps it in memory:

  primary source   → up to 1 + primary_retries attempts (fixed delay between)
  fallback source  → up to 1 + fallback_retries attempts (fixed delay between)
  both exhausted   → CatalogUnavailable, cache re-armed for the next call

Cache phases:
  UNRESOLVED  no document yet (a fetch may be in flight)
  RESOLVED    document held in memory, served without I/O
  BROKEN      last fetch failed or the cache was invalidated; next call refetches

Concurrent callers during an unresolved phase share one fetch (single-flight).
Each caller awaits the shared task through asyncio.shield, so a caller that is
cancelled or times out never cancels the fetch for everyone else.
"""
from __future__ import annotations

import asyncio
from enum import Enum
from typing import List, Optional

import httpx
from pydantic import ValidationError

from storefront.core.config import StorefrontConfig, get_config
from storefront.data.models import CatalogDocument
from storefront.utils.logger import get_logger

logger = get_logger("data.catalog_loader")


class CatalogError(RuntimeError):
    """Base class for catalog loading errors."""


class TransportError(CatalogError):
    """A single fetch attempt failed (network, HTTP status, JSON or schema)."""

    def __init__(self, url: str, attempt: int, message: str) -> None:
        super().__init__(f"{url} (attempt {attempt}): {message}")
        self.url = url
        self.attempt = attempt


class CatalogUnavailable(CatalogError):
    """Primary and fallback sources were both exhausted."""

    def __init__(self, sources: List[str]) -> None:
        super().__init__(f"Catalog unavailable after trying: {', '.join(sources)}")
        self.sources = sources


class CachePhase(str, Enum):
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"
    BROKEN = "broken"


class CatalogLoader:
    """
    Loads and caches the catalog document.

    Args:
        config: Loader settings; defaults to the global config.
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(
        self,
        config: Optional[StorefrontConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or get_config()
        self._transport = transport
        self._phase = CachePhase.UNRESOLVED
        self._document: Optional[CatalogDocument] = None
        self._inflight: Optional[asyncio.Task] = None

    @property
    def phase(self) -> CachePhase:
        return self._phase

    @property
    def document(self) -> Optional[CatalogDocument]:
        """The cached document, or None when not resolved."""
        return self._document

    async def get_catalog(self) -> CatalogDocument:
        """Return the cached catalog, fetching it (once) when needed."""
        if self._phase is CachePhase.RESOLVED and self._document is not None:
            return self._document

        if self._inflight is None:
            logger.info("Creating new catalog fetch (phase=%s)", self._phase.value)
            task = asyncio.ensure_future(self._load())
            task.add_done_callback(self._on_load_done)
            self._inflight = task
        return await asyncio.shield(self._inflight)

    def invalidate(self) -> None:
        """Discard the cached document; the next get_catalog() fetches again."""
        if self._phase is CachePhase.RESOLVED:
            logger.warning("Catalog cache invalidated, resetting for next request")
        self._mark_broken()

    async def aclose(self) -> None:
        """Cancel an in-flight fetch and forget the cached document."""
        task, self._inflight = self._inflight, None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        self._document = None
        self._phase = CachePhase.UNRESOLVED

    def _mark_broken(self) -> None:
        self._document = None
        self._phase = CachePhase.BROKEN

    async def _load(self) -> CatalogDocument:
        self._phase = CachePhase.UNRESOLVED
        try:
            document = await self._fetch_with_fallback()
        except CatalogUnavailable:
            logger.warning("Catalog fetch failed, resetting cache")
            self._mark_broken()
            raise
        except asyncio.CancelledError:
            self._phase = CachePhase.UNRESOLVED
            raise
        finally:
            # aclose() may already have handed the slot to a newer fetch
            if self._inflight is asyncio.current_task():
                self._inflight = None

        self._document = document
        self._phase = CachePhase.RESOLVED
        logger.info("Catalog loaded: %d products", len(document.products))
        return document

    @staticmethod
    def _on_load_done(task: asyncio.Task) -> None:
        # Retrieve the exception so an unawaited failure is not reported as lost
        if not task.cancelled():
            task.exception()

    async def _fetch_with_fallback(self) -> CatalogDocument:
        cfg = self.config
        async with httpx.AsyncClient(
            base_url=cfg.base_url,
            timeout=cfg.request_timeout,
            transport=self._transport,
        ) as client:
            try:
                return await self._fetch_source(client, cfg.primary_url, cfg.primary_retries)
            except TransportError as primary_error:
                logger.warning("Primary URL failed, trying fallback: %s", primary_error)

            try:
                return await self._fetch_source(client, cfg.fallback_url, cfg.fallback_retries)
            except TransportError as fallback_error:
                logger.error("Both catalog URLs failed: %s", fallback_error)
                raise CatalogUnavailable([cfg.primary_url, cfg.fallback_url]) from fallback_error

    async def _fetch_source(
        self, client: httpx.AsyncClient, url: str, retries: int
    ) -> CatalogDocument:
        """Fetch one source, retrying the same URL up to `retries` more times."""
        attempt = 1
        while True:
            try:
                return await self._fetch_once(client, url, attempt)
            except TransportError as e:
                if attempt > retries:
                    raise
                logger.warning("%s, retrying in %.1fs...", e, self.config.retry_delay)
            await asyncio.sleep(self.config.retry_delay)
            attempt += 1

    @staticmethod
    async def _fetch_once(client: httpx.AsyncClient, url: str, attempt: int) -> CatalogDocument:
        try:
            resp = await client.get(url)
            resp.raise_for_status()
            return CatalogDocument.model_validate(resp.json())
        except httpx.HTTPStatusError as e:
            raise TransportError(url, attempt, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TransportError(url, attempt, f"request failed: {e!r}") from e
        except ValidationError as e:
            raise TransportError(url, attempt, f"invalid catalog document ({e.error_count()} errors)") from e
        except ValueError as e:
            raise TransportError(url, attempt, f"invalid JSON: {e}") from e
