"""
File import source.

Reads a JSON file from disk (the drag-and-drop path). Any valid JSON is
accepted and the file text is passed through unchanged, so the editor shows
the document exactly as it was written.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..jsonutil import parse
from .base import ImportResult, ImportSource, SourceContext, registry


class FileSource(ImportSource):
    """Local JSON file."""

    @property
    def name(self) -> str:
        return "file"

    def detect(self, target: str) -> bool:
        return Path(target).is_file()

    def read(self, target: str) -> str:
        path = Path(target)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {target}")
        return path.read_text(encoding="utf-8-sig")

    def fetch(self, target: str, context: SourceContext) -> Any:
        return parse(self.read(target))

    def load(self, target: str, context: SourceContext) -> ImportResult:
        text = self.read(target)
        parse(text)  # raises JsonParseError before the engine sees the text
        return ImportResult(text=text, options=context.parser_options(self.mongo))


registry.register(FileSource())
