"""
Document source client.

Read-only access to the document browser API: collection listings, paged
documents, single documents and cross-database lookups by id. Every call
goes through a TTLCache unless force_refresh is passed, and every failure
surfaces as FetchError. One attempt per call, no retries.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from .cache import TTLCache
from .config import get_config
from .errors import FetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Database:
    id: str
    name: str


AVAILABLE_DATABASES: list[Database] = [
    Database("ecm", "ECM DB"),
    Database("gatsby", "Gatsby DB"),
    Database("pydiver_partners_prep", "EPS Prep"),
    Database("pydiver_partners_prod", "EPS Prod"),
    Database("harvester_links", "EPS Migration"),
]


@dataclass
class DocumentPage:
    """One page of a collection plus the collection's total size."""
    documents: list[Any] = field(default_factory=list)
    total: int = 0


@dataclass
class FetchCaches:
    """The three caches a client reads through, sharing one ttl and clock."""
    collections: TTLCache
    documents: TTLCache
    document: TTLCache

    @classmethod
    def create(cls, ttl: float | None = None, clock: Callable[[], float] | None = None) -> FetchCaches:
        ttl = get_config().source.cache_ttl if ttl is None else ttl
        kwargs: dict[str, Any] = {"ttl": ttl}
        if clock is not None:
            kwargs["clock"] = clock
        return cls(TTLCache(**kwargs), TTLCache(**kwargs), TTLCache(**kwargs))

    def clear(self) -> None:
        self.collections.clear()
        self.documents.clear()
        self.document.clear()


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class DocumentSourceClient:
    """
    Client for the document browser API.

    Args:
        base_url: API root (config source.base_url by default)
        http: httpx.Client to send requests with; one is created if omitted
        caches: FetchCaches to read through; fresh ones are created if omitted
        timeout: request timeout for the created client
    """

    def __init__(
        self,
        base_url: str | None = None,
        http: httpx.Client | None = None,
        caches: FetchCaches | None = None,
        timeout: float | None = None,
    ):
        cfg = get_config().source
        self.base_url = (base_url or cfg.base_url).rstrip("/")
        self.default_database = cfg.default_database
        self._owns_http = http is None
        self._http = http or httpx.Client(timeout=cfg.timeout if timeout is None else timeout)
        self.caches = caches or FetchCaches.create()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> DocumentSourceClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_json(self, url: str, what: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = self._http.get(url, params=params)
        except httpx.HTTPError as e:
            logger.error("Error fetching %s: %s", what, e)
            raise FetchError(f"Failed to fetch {what}: {e}") from e

        if not response.is_success:
            logger.error("Error fetching %s: HTTP %d", what, response.status_code)
            raise FetchError(
                f"Failed to fetch {what}: {response.reason_phrase or response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Failed to fetch {what}: response is not JSON") from e

    def fetch_url(self, url: str) -> Any:
        """GET any URL and decode its JSON body. Not cached."""
        if not url:
            raise ValueError("URL is required")
        return self._get_json(url, url)

    def fetch_collections(self, database: str | None = None, force_refresh: bool = False) -> list[str]:
        """Collection names of a database, sorted."""
        database = database or self.default_database
        cache = self.caches.collections

        if not force_refresh and cache.is_fresh(database):
            logger.debug("Using cached collections for database: %s", database)
            return copy.deepcopy(cache.get(database))

        data = self._get_json(
            f"{self.base_url}/api/browser/{_segment(database)}/collections",
            f"collections for {database}",
        )
        if not isinstance(data, dict):
            data = {}
        collections = sorted(data.get("collections") or [])
        cache.set(database, collections)
        return list(collections)

    def fetch_documents(
        self,
        collection: str,
        page: int = 0,
        page_size: int = 10,
        database: str | None = None,
        force_refresh: bool = False,
    ) -> DocumentPage:
        """One page of a collection (skip = page * page_size)."""
        if not collection:
            raise ValueError("Collection name is required")
        database = database or self.default_database
        cache = self.caches.documents
        cache_key = f"{database}:{collection}:{page}:{page_size}"

        if not force_refresh and cache.is_fresh(cache_key):
            logger.debug("Using cached documents for key: %s", cache_key)
            return copy.deepcopy(cache.get(cache_key))

        data = self._get_json(
            f"{self.base_url}/api/browser/{_segment(database)}/{_segment(collection)}/documents",
            f"documents for {cache_key}",
            params={"skip": page * page_size, "limit": page_size},
        )
        if not isinstance(data, dict):
            data = {}
        result = DocumentPage(documents=data.get("documents") or [], total=data.get("total") or 0)
        cache.set(cache_key, result)
        return copy.deepcopy(result)

    def fetch_document(
        self,
        collection: str,
        document_id: str,
        database: str | None = None,
        force_refresh: bool = False,
    ) -> Any:
        """A single document of a collection."""
        if not collection or not document_id:
            raise ValueError("Collection name and document ID are required")
        database = database or self.default_database
        cache = self.caches.document
        cache_key = f"{database}:{collection}:{document_id}"

        if not force_refresh and cache.is_fresh(cache_key):
            logger.debug("Using cached document for key: %s", cache_key)
            return copy.deepcopy(cache.get(cache_key))

        data = self._get_json(
            f"{self.base_url}/api/browser/{_segment(database)}/{_segment(collection)}"
            f"/document/{_segment(document_id)}",
            f"document {cache_key}",
        )
        cache.set(cache_key, data)
        return copy.deepcopy(data)

    def fetch_by_id(self, document_id: str, force_refresh: bool = False) -> Any:
        """A document looked up directly by id, across databases."""
        if not document_id:
            raise ValueError("Document ID is required")
        cache = self.caches.document
        cache_key = f"pydiver:{document_id}"

        if not force_refresh and cache.is_fresh(cache_key):
            logger.debug("Using cached document for key: %s", cache_key)
            return copy.deepcopy(cache.get(cache_key))

        data = self._get_json(
            f"{self.base_url}/api/pydiver/{_segment(document_id)}",
            f"document {document_id}",
        )
        cache.set(cache_key, data)
        return copy.deepcopy(data)

    def clear_all_caches(self) -> None:
        self.caches.clear()
        logger.info("All API caches cleared")

    def clear_database_cache(self, database: str) -> None:
        """Drop every cached result that belongs to one database."""
        if not database:
            return
        self.caches.collections.discard(database)
        self.caches.documents.clear_prefix(f"{database}:")
        self.caches.document.clear_prefix(f"{database}:")
        logger.info("Cache cleared for database: %s", database)
