"""
TOML-based configuration for ZeroSeed.

Loads settings from a TOML file and/or environment variables.
Environment variables take precedence over file values; command-line
flags (see run_search.py) take precedence over both.

Usage:
    from zeroseed_core.config import load_config
    cfg = load_config("zeroseed.toml")

Example file::

    [search]
    workers = 8
    rule = "leading-zero-nibbles"
    derivation_path = "m/44'/60'/0'/0/0"

    [logging]
    level = "INFO"
    format = "human"
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib  # type: ignore[import]
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[import,no-redef]

from zeroseed_core.scoring import DEFAULT_RULE
from zeroseed_core.wallet import DEFAULT_DERIVATION_PATH


@dataclass
class SearchConfig:
    """Worker pool and candidate pipeline settings."""
    workers: int = 0                   # 0 = one per CPU
    rule: str = DEFAULT_RULE
    derivation_path: str = DEFAULT_DERIVATION_PATH
    wordlist_file: str | None = None   # None = bundled English list
    poll_interval: float = 0.5         # coordinator queue poll (seconds)


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    format: str = "human"   # "human" or "json"
    file: str | None = None


@dataclass
class ZeroSeedConfig:
    """Top-level configuration container."""
    search: SearchConfig = field(default_factory=SearchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _merge(dc: Any, raw: dict[str, Any]) -> None:
    """Merge a raw dict into a dataclass instance (in-place)."""
    for key, value in raw.items():
        key_under = key.replace("-", "_")
        if hasattr(dc, key_under):
            setattr(dc, key_under, value)


def _validate(cfg: ZeroSeedConfig) -> None:
    """Reject values of the wrong type before they reach the worker pool."""
    workers = cfg.search.workers
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 0:
        raise ValueError(f"search.workers must be a non-negative integer, got {workers!r}")
    interval = cfg.search.poll_interval
    if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval <= 0:
        raise ValueError(f"search.poll_interval must be a positive number, got {interval!r}")


def load_config(path: str | None = None) -> ZeroSeedConfig:
    """
    Load configuration from a TOML file, then overlay environment variables.

    Raises ValueError for malformed TOML (``TOMLDecodeError`` subclasses it)
    and for values of the wrong type.

    Env-var mapping:
        ZEROSEED_WORKERS   -> search.workers
        ZEROSEED_RULE      -> search.rule
        ZEROSEED_PATH      -> search.derivation_path
        ZEROSEED_WORDLIST  -> search.wordlist_file
        ZEROSEED_LOG_LEVEL -> logging.level
        ZEROSEED_LOG_FMT   -> logging.format
        ZEROSEED_LOG_FILE  -> logging.file
    """
    cfg = ZeroSeedConfig()

    # ── TOML file ────────────────────────────────────────────────
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                data = tomllib.load(f)
            for section_name, section_dc in [
                ("search", cfg.search),
                ("logging", cfg.logging),
            ]:
                if section_name in data:
                    _merge(section_dc, data[section_name])

    # ── Environment variable overrides ───────────────────────────
    if v := os.environ.get("ZEROSEED_WORKERS"):
        cfg.search.workers = int(v)
    if v := os.environ.get("ZEROSEED_RULE"):
        cfg.search.rule = v
    if v := os.environ.get("ZEROSEED_PATH"):
        cfg.search.derivation_path = v
    if v := os.environ.get("ZEROSEED_WORDLIST"):
        cfg.search.wordlist_file = v
    if v := os.environ.get("ZEROSEED_LOG_LEVEL"):
        cfg.logging.level = v.upper()
    if v := os.environ.get("ZEROSEED_LOG_FMT"):
        cfg.logging.format = v
    if v := os.environ.get("ZEROSEED_LOG_FILE"):
        cfg.logging.file = v

    _validate(cfg)
    return cfg
