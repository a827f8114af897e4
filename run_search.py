#!/usr/bin/env python3
"""
ZeroSeed search runner — hunts for a vanity address behind a fresh
12-word mnemonic and logs every improvement until interrupted.

Usage:
    python run_search.py --rule leading-zero-bytes --workers 8
    python run_search.py --config zeroseed.toml --log-format json

Environment variables (alternative to flags):
    ZEROSEED_WORKERS, ZEROSEED_RULE, ZEROSEED_PATH, ZEROSEED_WORDLIST,
    ZEROSEED_LOG_LEVEL, ZEROSEED_LOG_FMT, ZEROSEED_LOG_FILE
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import os
import sys

# ---------------------------------------------------------------------------
# Ensure the project root is in sys.path so imports work before pip install
# ---------------------------------------------------------------------------
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from zeroseed_core.config import ZeroSeedConfig, load_config  # noqa: E402
from zeroseed_core.logging_config import setup_logging  # noqa: E402
from zeroseed_core.scoring import RULES, get_rule  # noqa: E402
from zeroseed_core.search import SearchCoordinator  # noqa: E402
from zeroseed_core.wallet import (  # noqa: E402
    DerivationPath,
    WordlistError,
    generate_entropy,
    load_wordlist,
    to_checksum_address,
)

logger = logging.getLogger("zeroseed")


def parse_args(argv: list[str] | None = None):
    p = argparse.ArgumentParser(description="ZeroSeed vanity address search")
    p.add_argument("--config", default=None, help="Path to zeroseed.toml config file")
    p.add_argument("--workers", type=int, default=None,
                   help="Worker processes (default: one per CPU)")
    p.add_argument("--rule", choices=sorted(RULES), default=None,
                   help="Scoring rule")
    p.add_argument("--path", default=None,
                   help="BIP-44 derivation path, e.g. \"m/44'/60'/0'/0/0\"")
    p.add_argument("--wordlist", default=None,
                   help="BIP-39 wordlist file (default: bundled English list)")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    p.add_argument("--log-format", choices=("human", "json"), default=None)
    p.add_argument("--log-file", default=None, help="Also write JSON logs here")
    return p.parse_args(argv)


def apply_args(cfg: ZeroSeedConfig, args) -> ZeroSeedConfig:
    """CLI flags override config file and environment."""
    if args.workers is not None:
        cfg.search.workers = args.workers
    if args.rule is not None:
        cfg.search.rule = args.rule
    if args.path is not None:
        cfg.search.derivation_path = args.path
    if args.wordlist is not None:
        cfg.search.wordlist_file = args.wordlist
    if args.log_level is not None:
        cfg.logging.level = args.log_level.upper()
    if args.log_format is not None:
        cfg.logging.format = args.log_format
    if args.log_file is not None:
        cfg.logging.file = args.log_file
    return cfg


def build_coordinator(cfg: ZeroSeedConfig) -> SearchCoordinator:
    """Validate everything workers depend on before any process starts."""
    rule = get_rule(cfg.search.rule)
    path = DerivationPath.parse(cfg.search.derivation_path)
    load_wordlist(cfg.search.wordlist_file)
    try:
        generate_entropy()
    except NotImplementedError as exc:
        raise RuntimeError(f"No secure random source available: {exc}") from exc
    return SearchCoordinator(
        rule,
        workers=cfg.search.workers or None,
        path=path,
        wordlist_path=cfg.search.wordlist_file,
        log_settings={
            "level": cfg.logging.level,
            "fmt": cfg.logging.format,
            "log_file": cfg.logging.file,
        },
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        # Load config (TOML + env overrides), then CLI flags
        cfg = apply_args(load_config(args.config), args)
        setup_logging(level=cfg.logging.level, fmt=cfg.logging.format,
                      log_file=cfg.logging.file)
        coordinator = build_coordinator(cfg)
    except (WordlistError, RuntimeError, ValueError, OSError) as exc:
        logger.error("Cannot start search: %s", exc)
        return 1

    state = coordinator.search(poll_interval=cfg.search.poll_interval)
    if state.best_address:
        logger.info(
            "Best: score=%d address=0x%s phrase=%s",
            state.best_score, to_checksum_address(state.best_address), state.best_phrase,
        )
    if coordinator.failed:
        logger.error("Search aborted: every worker process exited")
        return 1
    return 0


def main_sync():
    """Synchronous entry point for console_scripts."""
    with contextlib.suppress(KeyboardInterrupt):
        sys.exit(main())


if __name__ == "__main__":
    main_sync()
