"""
Document database import sources.

All three read through DocumentSourceClient and convert in Mongo mode, so
Extended JSON wrappers like {"$oid": ...} show up as single nodes.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import get_config
from ..errors import EmptyResultError
from .base import ImportSource, SourceContext, registry

logger = logging.getLogger(__name__)


class IdSource(ImportSource):
    """A document fetched directly by id, whatever database holds it."""

    mongo = True

    @property
    def name(self) -> str:
        return "id"

    def fetch(self, target: str, context: SourceContext) -> Any:
        return context.require_client().fetch_by_id(target, force_refresh=context.force_refresh)


class DocumentSource(ImportSource):
    """One document of a collection; context.collection names the collection."""

    mongo = True

    @property
    def name(self) -> str:
        return "document"

    def fetch(self, target: str, context: SourceContext) -> Any:
        if not context.collection:
            raise ValueError("Collection name is required")
        return context.require_client().fetch_document(
            context.collection,
            target,
            database=context.database,
            force_refresh=context.force_refresh,
        )


class CollectionSource(ImportSource):
    """A whole collection, paged in and imported as one array."""

    mongo = True

    def __init__(self, page_size: int | None = None):
        self._page_size = page_size

    @property
    def name(self) -> str:
        return "collection"

    def fetch(self, target: str, context: SourceContext) -> Any:
        """
        Collect every page of the collection.

        Stops once the collected count reaches the reported total, or on a
        short or empty page. Raises EmptyResultError for an empty collection.
        """
        client = context.require_client()
        page_size = self._page_size or get_config().source.collection_page_size

        documents: list[Any] = []
        page = 0
        while True:
            result = client.fetch_documents(
                target,
                page=page,
                page_size=page_size,
                database=context.database,
                force_refresh=context.force_refresh,
            )
            if not result.documents:
                break
            documents.extend(result.documents)
            if len(documents) >= result.total or len(result.documents) < page_size:
                break
            page += 1

        if not documents:
            raise EmptyResultError("No documents found in this collection")

        logger.debug("Loaded %d documents from collection %s in %d pages", len(documents), target, page + 1)
        return documents


registry.register(IdSource())
registry.register(DocumentSource())
registry.register(CollectionSource())
