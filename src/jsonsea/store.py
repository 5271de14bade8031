"""
JSON engine store: validity tracking over edited JSON text.

Every set_stringified_json() call moves the engine to Valid or Invalid:
- Valid: text parsed, tree rebuilt from scratch, text becomes the last good text
- Invalid: only the raw text and error change; tree and last good text stay

State is a frozen snapshot replaced in one assignment, so a reader never sees
a half-updated tree. Each transition bumps a generation counter that import
tickets are checked against, which lets late fetch results be dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from . import serialize
from .config import get_config
from .engine import JsonTree, ParserOptions, convert_json_tree
from .errors import JsonParseError
from .jsonutil import DEFAULT_STRINGIFIED_JSON, format_json_like_data, parse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineState:
    """One immutable snapshot of the engine."""
    stringified_json: str
    is_valid_json: bool
    latest_valid_stringified_json: str
    json_tree: JsonTree
    options: ParserOptions = ParserOptions()
    error: str | None = None  # message of the last JsonParseError, None while valid
    generation: int = 0


@dataclass(frozen=True)
class ImportTicket:
    """Handed out when an import starts; only honoured if nothing changed since."""
    generation: int


def initial_state(default_json: str = DEFAULT_STRINGIFIED_JSON) -> EngineState:
    """Build the starting snapshot. The default document must itself be valid JSON."""
    tree = convert_json_tree(parse(default_json))
    return EngineState(
        stringified_json=default_json,
        is_valid_json=True,
        latest_valid_stringified_json=default_json,
        json_tree=tree,
    )


class JsonEngine:
    """Holds the current EngineState and drives its transitions."""

    def __init__(self, default_json: str = DEFAULT_STRINGIFIED_JSON, indent: int | None = None):
        self._initial = initial_state(default_json)
        self._state = self._initial
        self._indent = get_config().engine.indent if indent is None else indent

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def stringified_json(self) -> str:
        return self._state.stringified_json

    @property
    def is_valid_json(self) -> bool:
        return self._state.is_valid_json

    @property
    def latest_valid_stringified_json(self) -> str:
        return self._state.latest_valid_stringified_json

    @property
    def json_tree(self) -> JsonTree:
        return self._state.json_tree

    @property
    def error(self) -> str | None:
        return self._state.error

    def _accept(self, text: str, value: Any, options: ParserOptions) -> None:
        # Conversion finishes before the snapshot is swapped
        tree = convert_json_tree(value, options)
        self._state = EngineState(
            stringified_json=text,
            is_valid_json=True,
            latest_valid_stringified_json=text,
            json_tree=tree,
            options=options,
            generation=self._state.generation + 1,
        )

    def set_stringified_json(self, text: str, options: ParserOptions | None = None) -> bool:
        """
        Feed new JSON text into the engine. Returns True if it was valid.

        Invalid text is recorded (so the editor keeps showing it) together with
        the parse error, but the tree and last good text are left untouched.
        """
        options = options or ParserOptions()
        try:
            value = parse(text)
        except JsonParseError as e:
            logger.debug("Rejected edit: %s", e)
            self._state = replace(
                self._state,
                stringified_json=text,
                is_valid_json=False,
                error=str(e),
                generation=self._state.generation + 1,
            )
            return False

        self._accept(text, value, options)
        return True

    def reset(self) -> None:
        """Return to the default document."""
        self._state = replace(self._initial, generation=self._state.generation + 1)

    def begin_import(self) -> ImportTicket:
        """Start an import; the ticket goes stale on the next transition."""
        return ImportTicket(generation=self._state.generation)

    def apply_import(self, ticket: ImportTicket, text: str, options: ParserOptions | None = None) -> bool:
        """
        Apply imported JSON text if the ticket is still current.

        Returns False (state untouched) for a stale ticket. Raises JsonParseError
        (state untouched) if the imported text is not valid JSON.
        """
        if ticket.generation != self._state.generation:
            logger.info(
                "Ignoring stale import (started at generation %d, now %d)",
                ticket.generation, self._state.generation,
            )
            return False
        value = parse(text)
        self._accept(text, value, options or ParserOptions())
        return True

    def _apply_edit(self, value: Any) -> bool:
        text = format_json_like_data(value, indent=self._indent)
        return self.set_stringified_json(text, self._state.options)

    def update_node_value(self, node_id: str, value: Any) -> bool:
        """Replace the value held by a node and rebuild the tree."""
        return self._apply_edit(serialize.update_node_value(self.json_tree, node_id, value))

    def rename_node_key(self, node_id: str, new_key: str) -> bool:
        """Rename an object member and rebuild the tree."""
        return self._apply_edit(serialize.rename_node_key(self.json_tree, node_id, new_key))

    def remove_node(self, node_id: str) -> bool:
        """Drop a member or element and rebuild the tree."""
        return self._apply_edit(serialize.remove_node(self.json_tree, node_id))

    def export_json(self) -> str:
        """The last valid JSON text (what a download would contain)."""
        return self._state.latest_valid_stringified_json

    def download(self, path: str | Path | None = None) -> Path:
        """Write the last valid JSON text to path (config download name by default)."""
        target = Path(path) if path is not None else Path(get_config().output.download_name)
        target.write_text(self.export_json(), encoding="utf-8")
        logger.info("Exported JSON to %s", target)
        return target
