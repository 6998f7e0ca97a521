"""Tests for config loading, default merging and validation."""

import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from MetaCPANClient.config import load_config, load_config_with_defaults, parse_config_dict


_BASE_YAML = """
log:
  level: INFO
  to_file: false
  dir: log

api:
  base_url: https://fastapi.metacpan.org/v1
  base_url_env: METACPAN_TEST_BASE_URL
  user_agent: MetaCPANClient/test
  timeout: 30
  page_size: 100

output:
  format: console
  max_results: 20
"""


class TestConfigOverride(unittest.TestCase):
    def _write(self, tmp: str, name: str, text: str) -> Path:
        path = Path(tmp) / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_override_merges_with_defaults(self) -> None:
        override_yaml = """
log:
  level: DEBUG

api:
  page_size: 50

output:
  format: json
"""
        with tempfile.TemporaryDirectory() as tmp:
            default_path = self._write(tmp, "default.yml", _BASE_YAML)
            override_path = self._write(tmp, "override.yml", override_yaml)

            cfg = load_config_with_defaults(override_path, default_path=default_path)

        self.assertEqual(cfg.runtime.level, "DEBUG")
        self.assertFalse(cfg.runtime.to_file)
        self.assertEqual(cfg.api.page_size, 50)
        self.assertEqual(cfg.api.timeout, 30.0)
        self.assertEqual(cfg.api.user_agent, "MetaCPANClient/test")
        self.assertEqual(cfg.output.format, "json")
        self.assertEqual(cfg.output.max_results, 20)

    def test_empty_override_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            default_path = self._write(tmp, "default.yml", _BASE_YAML)
            override_path = self._write(tmp, "override.yml", "{}")

            cfg = load_config_with_defaults(override_path, default_path=default_path)

        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertEqual(cfg.api.base_url, "https://fastapi.metacpan.org/v1")
        self.assertEqual(cfg.output.format, "console")

    def test_missing_default_file_uses_builtin_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            override_path = self._write(tmp, "override.yml", "output:\n  max_results: 5\n")

            cfg = load_config_with_defaults(override_path, default_path=Path(tmp) / "absent.yml")

        self.assertEqual(cfg.output.max_results, 5)
        self.assertEqual(cfg.api.page_size, 100)
        self.assertTrue(cfg.api.user_agent.startswith("MetaCPANClient/"))

    def test_env_overrides_base_url(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(tmp, "config.yml", _BASE_YAML)
            with patch.dict(os.environ, {"METACPAN_TEST_BASE_URL": "http://localhost:5000/v1/"}):
                cfg = load_config(path)

        self.assertEqual(cfg.api.base_url, "http://localhost:5000/v1")


class TestConfigValidation(unittest.TestCase):
    def test_invalid_values_raise(self) -> None:
        cases = [
            {"log": {"level": "LOUD"}},
            {"api": {"base_url": "ftp://example.org"}},
            {"api": {"page_size": 0}},
            {"api": {"timeout": -1}},
            {"output": {"format": "markdown"}},
            {"output": {"max_results": 0}},
        ]
        for raw in cases:
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    parse_config_dict(raw)

    def test_wrong_types_raise(self) -> None:
        cases = [
            {"api": {"page_size": "100"}},
            {"api": {"timeout": True}},
            {"log": {"to_file": "yes"}},
            {"api": "https://fastapi.metacpan.org/v1"},
        ]
        for raw in cases:
            with self.subTest(raw=raw):
                with self.assertRaises(TypeError):
                    parse_config_dict(raw)

    def test_root_must_be_mapping(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yml"
            path.write_text("- just\n- a list\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_config(path)


if __name__ == "__main__":
    unittest.main()
