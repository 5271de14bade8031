"""
Base import source interface and registry.

Each import source turns an external target (a path, a URL, a document id,
a collection name) into JSON text plus the parser options it should be
converted with. The registry manages source detection and selection.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..classify import is_array, is_object
from ..engine import ParserOptions
from ..errors import InvalidImportError
from ..jsonutil import format_json_like_data

if TYPE_CHECKING:
    from ..client import DocumentSourceClient
    from ..store import JsonEngine

logger = logging.getLogger(__name__)


@dataclass
class SourceContext:
    """What a source may need besides its target."""
    client: DocumentSourceClient | None = None
    database: str | None = None
    collection: str | None = None
    force_refresh: bool = False
    indent: int | None = 2
    mongo: bool = False  # force Mongo mode even for sources that do not default to it
    skip_root_edges: bool = False

    def parser_options(self, source_mongo: bool) -> ParserOptions:
        return ParserOptions(is_mongo_data=source_mongo or self.mongo, skip_root_edges=self.skip_root_edges)

    def require_client(self) -> DocumentSourceClient:
        if self.client is None:
            raise ValueError("This import source needs a document source client")
        return self.client


@dataclass
class ImportResult:
    """JSON text ready for the engine, and how to convert it."""
    text: str
    options: ParserOptions = field(default_factory=ParserOptions)


class ImportSource(ABC):
    """Base class for import handlers."""

    # Database imports are converted in Mongo-compatibility mode
    mongo: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name used on the command line."""
        ...

    def detect(self, target: str) -> bool:
        """
        Magic detection: returns True if target looks like something this source reads.
        Default implementation returns False (must be selected by name).
        """
        return False

    @abstractmethod
    def fetch(self, target: str, context: SourceContext) -> Any:
        """Fetch and decode the target. Returns a decoded JSON value."""
        ...

    def load(self, target: str, context: SourceContext) -> ImportResult:
        """
        Fetch target and format it as JSON text.

        Only objects and arrays are accepted; anything else raises
        InvalidImportError so the engine keeps its current document.
        """
        data = self.fetch(target, context)
        if not (is_object(data) or is_array(data)):
            raise InvalidImportError(f"Invalid data format received from {self.name} source")
        return ImportResult(
            text=format_json_like_data(data, indent=context.indent),
            options=context.parser_options(self.mongo),
        )


def import_into(engine: JsonEngine, source: ImportSource, target: str, context: SourceContext) -> bool:
    """
    Run one import against the engine.

    The engine ticket is taken before fetching, so if the document changed
    while the fetch was in flight the result is dropped and False returned.
    """
    ticket = engine.begin_import()
    result = source.load(target, context)
    applied = engine.apply_import(ticket, result.text, result.options)
    if applied:
        logger.info("Imported %s from %s source", target, source.name)
    return applied


class SourceRegistry:
    """Registry of import sources with detection and selection."""

    def __init__(self):
        self._sources: list[ImportSource] = []
        self._by_name: dict[str, ImportSource] = {}

    def register(self, source: ImportSource) -> None:
        """Register an import source."""
        self._sources.append(source)
        self._by_name[source.name] = source

    def get_by_name(self, name: str) -> ImportSource | None:
        """Get source by name (for --source override)."""
        return self._by_name.get(name)

    def detect(self, target: str) -> ImportSource | None:
        """First registered source whose detect() accepts target, else None."""
        for source in self._sources:
            if source.detect(target):
                return source
        return None

    @property
    def sources(self) -> list[ImportSource]:
        """List all registered sources."""
        return list(self._sources)


# Global registry instance
registry = SourceRegistry()
