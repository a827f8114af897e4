"""
Tests for zeroseed_core.config — TOML configuration and environment overrides.

Covers:
  - Default values for all dataclass sections
  - TOML parsing and section merging
  - Environment variable overrides (precedence over TOML)
  - _merge helper edge cases
  - Missing TOML files
  - Hyphenated key handling
  - Rejection of malformed TOML and mistyped values
"""

from __future__ import annotations

import os
import tempfile
import textwrap
import unittest
from unittest.mock import patch

from zeroseed_core.config import (
    LoggingConfig,
    SearchConfig,
    ZeroSeedConfig,
    _merge,
    load_config,
)


def _write_toml(content: str) -> str:
    fd, path = tempfile.mkstemp(suffix=".toml")
    with os.fdopen(fd, "w") as f:
        f.write(textwrap.dedent(content))
    return path


# ═══════════════════════════════════════════════════════════════════
#  Defaults
# ═══════════════════════════════════════════════════════════════════

class TestDefaults(unittest.TestCase):

    def test_search_defaults(self):
        s = SearchConfig()
        self.assertEqual(s.workers, 0)
        self.assertEqual(s.rule, "leading-zero-bytes")
        self.assertEqual(s.derivation_path, "m/44'/60'/0'/0/0")
        self.assertIsNone(s.wordlist_file)
        self.assertEqual(s.poll_interval, 0.5)

    def test_logging_defaults(self):
        lg = LoggingConfig()
        self.assertEqual(lg.level, "INFO")
        self.assertEqual(lg.format, "human")
        self.assertIsNone(lg.file)

    def test_container(self):
        cfg = ZeroSeedConfig()
        self.assertIsInstance(cfg.search, SearchConfig)
        self.assertIsInstance(cfg.logging, LoggingConfig)

    @patch.dict(os.environ, {}, clear=True)
    def test_load_without_file(self):
        cfg = load_config()
        self.assertEqual(cfg.search, SearchConfig())


# ═══════════════════════════════════════════════════════════════════
#  TOML
# ═══════════════════════════════════════════════════════════════════

class TestTOML(unittest.TestCase):

    def setUp(self):
        self.path = _write_toml("""
            [search]
            workers = 6
            rule = "longest-uniform-run"
            derivation-path = "m/44'/0'/0'/0/0"

            [logging]
            level = "DEBUG"
            format = "json"
            file = "logs/zeroseed.jsonl"

            [unknown]
            ignored = true
        """)

    def tearDown(self):
        os.unlink(self.path)

    @patch.dict(os.environ, {}, clear=True)
    def test_sections_merged(self):
        cfg = load_config(self.path)
        self.assertEqual(cfg.search.workers, 6)
        self.assertEqual(cfg.search.rule, "longest-uniform-run")
        self.assertEqual(cfg.search.derivation_path, "m/44'/0'/0'/0/0")
        self.assertEqual(cfg.logging.level, "DEBUG")
        self.assertEqual(cfg.logging.format, "json")
        self.assertEqual(cfg.logging.file, "logs/zeroseed.jsonl")

    @patch.dict(os.environ, {"ZEROSEED_WORKERS": "2", "ZEROSEED_RULE": "zero-bytes"}, clear=True)
    def test_env_beats_toml(self):
        cfg = load_config(self.path)
        self.assertEqual(cfg.search.workers, 2)
        self.assertEqual(cfg.search.rule, "zero-bytes")
        self.assertEqual(cfg.search.derivation_path, "m/44'/0'/0'/0/0")

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_file_uses_defaults(self):
        cfg = load_config("/nonexistent/zeroseed.toml")
        self.assertEqual(cfg.search.workers, 0)


# ═══════════════════════════════════════════════════════════════════
#  Environment
# ═══════════════════════════════════════════════════════════════════

class TestEnvironment(unittest.TestCase):

    @patch.dict(os.environ, {
        "ZEROSEED_PATH": "m/44'/60'/1'/0/0",
        "ZEROSEED_WORDLIST": "/tmp/words.txt",
        "ZEROSEED_LOG_LEVEL": "warning",
        "ZEROSEED_LOG_FMT": "json",
        "ZEROSEED_LOG_FILE": "out.log",
    }, clear=True)
    def test_all_overrides(self):
        cfg = load_config()
        self.assertEqual(cfg.search.derivation_path, "m/44'/60'/1'/0/0")
        self.assertEqual(cfg.search.wordlist_file, "/tmp/words.txt")
        self.assertEqual(cfg.logging.level, "WARNING")
        self.assertEqual(cfg.logging.format, "json")
        self.assertEqual(cfg.logging.file, "out.log")

    @patch.dict(os.environ, {"ZEROSEED_WORKERS": "many"}, clear=True)
    def test_bad_worker_count(self):
        with self.assertRaises(ValueError):
            load_config()


class TestValidation(unittest.TestCase):

    def _load(self, content: str) -> ZeroSeedConfig:
        path = _write_toml(content)
        self.addCleanup(os.unlink, path)
        with patch.dict(os.environ, {}, clear=True):
            return load_config(path)

    def test_malformed_toml(self):
        with self.assertRaises(ValueError):
            self._load("[search\nworkers = 2\n")

    def test_string_workers(self):
        with self.assertRaises(ValueError):
            self._load('[search]\nworkers = "4"\n')

    def test_boolean_workers(self):
        with self.assertRaises(ValueError):
            self._load("[search]\nworkers = true\n")

    def test_negative_workers(self):
        with self.assertRaises(ValueError):
            self._load("[search]\nworkers = -2\n")

    def test_non_positive_poll_interval(self):
        with self.assertRaises(ValueError):
            self._load("[search]\npoll_interval = 0\n")

    def test_integer_poll_interval_accepted(self):
        cfg = self._load("[search]\nworkers = 3\npoll_interval = 1\n")
        self.assertEqual(cfg.search.workers, 3)
        self.assertEqual(cfg.search.poll_interval, 1)


class TestMerge(unittest.TestCase):

    def test_hyphen_to_underscore(self):
        s = SearchConfig()
        _merge(s, {"poll-interval": 0.1})
        self.assertEqual(s.poll_interval, 0.1)

    def test_unknown_keys_ignored(self):
        s = SearchConfig()
        _merge(s, {"nonsense": 1})
        self.assertFalse(hasattr(s, "nonsense"))


if __name__ == "__main__":
    unittest.main()
