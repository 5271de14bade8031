"""
Configuration for jsonsea.

All tunable parameters in one place. Loaded from:
1. Defaults (this file)
2. Config file (~/.config/jsonsea/config.toml) if exists
3. Environment variables (JSONSEA_*) override file
4. CLI flags override everything
"""

from __future__ import annotations

import contextlib
import logging
import os
import tomllib  # stdlib in 3.11+
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Conversion defaults."""
    is_mongo_data: bool = False
    skip_root_edges: bool = False
    indent: int = 2  # indent used when edits are re-serialized


@dataclass
class SourceConfig:
    """Remote document source settings."""
    base_url: str = "https://ecm.earthdiver.com"
    default_database: str = "ecm"
    cache_ttl: float = 5 * 60  # seconds a cached fetch stays fresh
    timeout: float = 10.0
    collection_page_size: int = 100  # page size when importing a whole collection


@dataclass
class OutputConfig:
    """Export settings."""
    download_name: str = "json-sea.json"


@dataclass
class Config:
    """Root config with all settings."""
    engine: EngineConfig = field(default_factory=EngineConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def get_config_path() -> Path:
    """Get config file path, respecting XDG."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "jsonsea" / "config.toml"
    return Path.home() / ".config" / "jsonsea" / "config.toml"


def load_config() -> Config:
    """Load config from file if exists, else return defaults."""
    config = Config()
    path = get_config_path()

    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
            config = _apply_toml(config, data)
        except (OSError, tomllib.TOMLDecodeError, ValueError, TypeError) as e:
            logger.warning("Ignoring unreadable config file %s: %s", path, e)
            config = Config()

    # env var overrides
    config = _apply_env(config)

    return config


def _apply_toml(config: Config, data: dict) -> Config:
    """Apply toml data to config."""
    if "engine" in data:
        e = data["engine"]
        if "is_mongo_data" in e:
            config.engine.is_mongo_data = bool(e["is_mongo_data"])
        if "skip_root_edges" in e:
            config.engine.skip_root_edges = bool(e["skip_root_edges"])
        if "indent" in e:
            config.engine.indent = int(e["indent"])

    if "source" in data:
        s = data["source"]
        if "base_url" in s:
            config.source.base_url = str(s["base_url"])
        if "default_database" in s:
            config.source.default_database = str(s["default_database"])
        if "cache_ttl" in s:
            config.source.cache_ttl = float(s["cache_ttl"])
        if "timeout" in s:
            config.source.timeout = float(s["timeout"])
        if "collection_page_size" in s:
            config.source.collection_page_size = int(s["collection_page_size"])

    if "output" in data:
        o = data["output"]
        if "download_name" in o:
            config.output.download_name = str(o["download_name"])

    return config


def _apply_env(config: Config) -> Config:
    """Apply environment variable overrides."""
    env_map: dict[str, tuple[str, str, type]] = {
        "JSONSEA_MONGO": ("engine", "is_mongo_data", bool),
        "JSONSEA_SKIP_ROOT_EDGES": ("engine", "skip_root_edges", bool),
        "JSONSEA_INDENT": ("engine", "indent", int),
        "JSONSEA_BASE_URL": ("source", "base_url", str),
        "JSONSEA_DATABASE": ("source", "default_database", str),
        "JSONSEA_CACHE_TTL": ("source", "cache_ttl", float),
        "JSONSEA_TIMEOUT": ("source", "timeout", float),
        "JSONSEA_PAGE_SIZE": ("source", "collection_page_size", int),
        "JSONSEA_DOWNLOAD_NAME": ("output", "download_name", str),
    }

    for env_key, (section, attr, conv) in env_map.items():
        val = os.environ.get(env_key)
        if val is not None:
            with contextlib.suppress(ValueError, AttributeError):
                # Bool needs special handling: "true", "1", "yes" -> True
                converted = val.lower() in ("true", "1", "yes") if conv is bool else conv(val)
                setattr(getattr(config, section), attr, converted)

    return config


# Module-level config instance, loaded once on first use
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
