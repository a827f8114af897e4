"""
Tests for zeroseed_core.logging_config — formatters and root logger setup.
"""

import json
import logging
import os
import tempfile
import unittest

from zeroseed_core.logging_config import _HumanFormatter, _JSONFormatter, setup_logging


def _record(msg: str, level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord("zeroseed.search", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters(unittest.TestCase):

    def test_json_fields(self):
        out = json.loads(_JSONFormatter().format(_record("hello", score=3, rule="zero-bytes")))
        self.assertEqual(out["msg"], "hello")
        self.assertEqual(out["level"], "INFO")
        self.assertEqual(out["logger"], "zeroseed.search")
        self.assertEqual(out["score"], 3)
        self.assertEqual(out["rule"], "zero-bytes")
        self.assertIn("process", out)

    def test_json_omits_absent_extras(self):
        out = json.loads(_JSONFormatter().format(_record("plain")))
        self.assertNotIn("score", out)

    def test_human_indents_continuation(self):
        text = _HumanFormatter(colour=False).format(_record("head\nline one\nline two"))
        lines = text.splitlines()
        self.assertTrue(lines[0].endswith("zeroseed.search: head"))
        self.assertEqual(lines[1], "    line one")
        self.assertEqual(lines[2], "    line two")
        self.assertNotIn("\033[", text)

    def test_human_colour(self):
        text = _HumanFormatter(colour=True).format(_record("x", level=logging.ERROR))
        self.assertIn("\033[31m", text)


class TestSetupLogging(unittest.TestCase):

    def setUp(self):
        root = logging.getLogger()
        self._saved = (root.level, list(root.handlers))

    def tearDown(self):
        root = logging.getLogger()
        for handler in root.handlers:
            handler.close()
        root.setLevel(self._saved[0])
        root.handlers[:] = self._saved[1]

    def test_level_and_single_console(self):
        setup_logging(level="debug")
        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)

    def test_file_is_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "sub", "zeroseed.log")
            setup_logging(fmt="human", log_file=path)
            logging.getLogger("zeroseed.test").info("found it", extra={"score": 2})
            for handler in logging.getLogger().handlers:
                handler.flush()
            with open(path) as f:
                entry = json.loads(f.readline())
            for handler in logging.getLogger().handlers:
                handler.close()
            logging.getLogger().handlers.clear()
        self.assertEqual(entry["msg"], "found it")
        self.assertEqual(entry["score"], 2)

    def test_unknown_format(self):
        with self.assertRaises(ValueError):
            setup_logging(fmt="xml")


if __name__ == "__main__":
    unittest.main()
