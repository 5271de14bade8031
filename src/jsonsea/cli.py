"""
CLI interface for jsonsea.

Import JSON from a file, URL, stdin or the document browser, convert it into
a node/edge graph, print the graph and export the document again.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .client import DocumentSourceClient
from .config import get_config
from .dom import ArrayNode, MongoSpecialNode, ObjectNode, RootNode, ScalarNode, SeaNode
from .engine import JsonTree, ParserOptions
from .errors import JsonSeaError
from .serialize import serialize
from .sources import (
    database as _database,  # noqa: F401 - ensure database sources are registered
)
from .sources import file as _file  # noqa: F401 - ensure file source is registered
from .sources import url as _url  # noqa: F401 - ensure url source is registered
from .sources.base import ImportSource, SourceContext, import_into, registry
from .store import JsonEngine

logger = logging.getLogger(__name__)

SHOW_CHOICES = ("tree", "nodes", "edges", "json")


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    cfg = get_config()

    parser = argparse.ArgumentParser(
        prog="jsonsea",
        description="Explore JSON documents as a node/edge graph",
    )

    parser.add_argument(
        "target",
        nargs="?",
        help="File, URL, document id or collection name (reads stdin if not provided)",
    )

    parser.add_argument(
        "--source",
        "-S",
        type=str,
        help="Import source: file, url, id, document or collection (detected for files and URLs)",
    )

    parser.add_argument(
        "--database",
        "-D",
        type=str,
        default=cfg.source.default_database,
        help=f"Database for document and collection imports (default: {cfg.source.default_database})",
    )

    parser.add_argument(
        "--collection",
        "-c",
        type=str,
        help="Collection holding the document (with --source document)",
    )

    parser.add_argument(
        "--mongo",
        "-m",
        action="store_true",
        default=cfg.engine.is_mongo_data,
        help="Collapse Mongo Extended JSON wrappers ($oid, $date, ...) into single nodes",
    )

    parser.add_argument(
        "--skip-root-edges",
        action="store_true",
        default=cfg.engine.skip_root_edges,
        help="Omit edges from the root to its direct children",
    )

    parser.add_argument(
        "--show",
        choices=SHOW_CHOICES,
        default="tree",
        help="What to print: indented tree (default), node table, edge list or JSON",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Write the exported JSON to this file",
    )

    parser.add_argument(
        "--indent",
        type=int,
        default=cfg.engine.indent,
        help=f"Indent for exported JSON (default: {cfg.engine.indent})",
    )

    parser.add_argument(
        "--base-url",
        type=str,
        default=cfg.source.base_url,
        help="Document browser API root",
    )

    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Bypass cached fetch results",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging on stderr",
    )

    return parser.parse_args(args)


def describe_node(node: SeaNode) -> str:
    """One-line label for a node, as drawn in the diagram."""
    prefix = f"{node.key}: " if node.key is not None else ""
    if isinstance(node, RootNode):
        if node.wraps_value:
            return "(root)"
        brackets = "[]" if node.kind == "array" else "{}"
        return f"(root) {brackets[0]}{len(node.child_ids)}{brackets[1]}"
    if isinstance(node, ObjectNode):
        return f"{prefix}{{{len(node.child_ids)}}}"
    if isinstance(node, ArrayNode):
        return f"{prefix}[{node.size}]"
    if isinstance(node, ScalarNode):
        return f"{prefix}{json.dumps(node.value, ensure_ascii=False)}"
    if isinstance(node, MongoSpecialNode):
        return f"{prefix}{node.kind}({json.dumps(node.wrapped_value, ensure_ascii=False)})"
    return f"{prefix}?"


def format_tree(tree: JsonTree, indent: str = "  ") -> str:
    """Indented outline of the graph in traversal order."""
    return "\n".join(f"{indent * node.depth}{describe_node(node)}" for node in tree.depth_first())


def format_nodes(tree: JsonTree) -> str:
    """Tab-separated node table: id, type, key, detail."""
    lines = []
    for node in tree.sea_nodes:
        detail = ""
        if isinstance(node, ScalarNode):
            detail = f"{node.value_type} {json.dumps(node.value, ensure_ascii=False)}"
        elif isinstance(node, MongoSpecialNode):
            detail = f"{node.kind} {json.dumps(node.raw, ensure_ascii=False)}"
        elif isinstance(node, ArrayNode):
            detail = f"size={node.size}"
        elif isinstance(node, RootNode):
            detail = node.kind
        key = node.key if node.key is not None else "-"
        lines.append(f"{node.id}\t{node.type}\t{key}\t{detail}")
    return "\n".join(lines)


def format_edges(tree: JsonTree) -> str:
    """One edge per line: source -> target [label]."""
    return "\n".join(f"{edge.source} -> {edge.target} [{edge.label}]" for edge in tree.edges)


def render(tree: JsonTree, show: str, indent: int | None) -> str:
    if show == "nodes":
        return format_nodes(tree)
    if show == "edges":
        return format_edges(tree)
    if show == "json":
        return serialize(tree, indent=indent)
    return format_tree(tree)


def get_source(target: str, force_source: str | None) -> ImportSource:
    """Get import source via override or detection."""
    if force_source:
        source = registry.get_by_name(force_source)
        if source is None:
            names = ", ".join(s.name for s in registry.sources)
            raise ValueError(f"Unknown source: {force_source} (choose from {names})")
        return source

    source = registry.detect(target)
    if source is None:
        raise ValueError(f"Cannot detect a source for {target!r}; pass --source")
    return source


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)
    _configure_logging(parsed.verbose)

    engine = JsonEngine(indent=parsed.indent)
    options = ParserOptions(is_mongo_data=parsed.mongo, skip_root_edges=parsed.skip_root_edges)

    try:
        if parsed.target is None and parsed.source is None:
            if not engine.set_stringified_json(sys.stdin.read(), options):
                print(f"Error: Invalid JSON: {engine.error}", file=sys.stderr)
                return 1
        elif parsed.target is None:
            print(f"Error: --source {parsed.source} requires a target", file=sys.stderr)
            return 1
        else:
            source = get_source(parsed.target, parsed.source)
            context = SourceContext(
                database=parsed.database,
                collection=parsed.collection,
                force_refresh=parsed.refresh,
                indent=parsed.indent,
                mongo=parsed.mongo,
                skip_root_edges=parsed.skip_root_edges,
            )
            if source.name == "file":
                import_into(engine, source, parsed.target, context)
            else:
                with DocumentSourceClient(base_url=parsed.base_url) as client:
                    context.client = client
                    import_into(engine, source, parsed.target, context)
    except FileNotFoundError:
        print(f"Error: File not found: {parsed.target}", file=sys.stderr)
        return 1
    except (JsonSeaError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(render(engine.json_tree, parsed.show, parsed.indent))

    if parsed.output:
        try:
            engine.download(parsed.output)
        except OSError as e:
            print(f"Error writing {parsed.output}: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
