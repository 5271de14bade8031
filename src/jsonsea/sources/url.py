"""URL import source: one GET against any http(s) URL."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from .base import ImportSource, SourceContext, registry


class UrlSource(ImportSource):
    """JSON served over HTTP."""

    @property
    def name(self) -> str:
        return "url"

    def detect(self, target: str) -> bool:
        return urlparse(target).scheme in ("http", "https")

    def fetch(self, target: str, context: SourceContext) -> Any:
        return context.require_client().fetch_url(target)


registry.register(UrlSource())
