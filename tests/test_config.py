from __future__ import annotations

import json
from pathlib import Path
import tempfile
import unittest

from funcscan.config import DEFAULT_CONFIG, load_config


class ConfigLoaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.project_root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def _write(self, relative: str, data: dict) -> Path:
        path = self.project_root / relative
        path.write_text(json.dumps(data))
        return path

    def test_uses_defaults_when_no_files_present(self) -> None:
        config = load_config(self.project_root)
        self.assertEqual(config.project_root, self.project_root.resolve())
        self.assertEqual(config.exclude_dirs, DEFAULT_CONFIG["exclude_dirs"])
        self.assertEqual(config.extensions, [".cjs", ".js", ".mjs"])
        self.assertEqual(config.sinks, {"eval": "sink.eval.direct"})

    def test_merges_default_file(self) -> None:
        self._write(
            ".funcscanrc.json",
            {"exclude_dirs": ["generated"], "extensions": ["js", ".TS"]},
        )
        config = load_config(self.project_root)
        self.assertEqual(config.exclude_dirs, ["generated"])
        self.assertEqual(config.extensions, [".js", ".ts"])

    def test_sink_rules_extend_defaults(self) -> None:
        self._write(
            ".funcscanrc.json",
            {"sinks": {"execScript": "sink.exec.script"}},
        )
        config = load_config(self.project_root)
        self.assertEqual(
            config.sinks,
            {"eval": "sink.eval.direct", "execScript": "sink.exec.script"},
        )

    def test_overrides_take_precedence(self) -> None:
        self._write(".funcscanrc.json", {"extensions": [".jsx"]})
        config = load_config(self.project_root, overrides={"extensions": [".tsx"]})
        self.assertEqual(config.extensions, [".tsx"])

    def test_additional_config_file(self) -> None:
        self._write(".funcscanrc.json", {"exclude_dirs": ["a"]})
        custom = self._write("custom.json", {"exclude_dirs": ["b"]})
        config = load_config(self.project_root, config_path=custom)
        self.assertEqual(config.exclude_dirs, ["b"])

    def test_relative_config_path_resolves_against_root(self) -> None:
        self._write("custom.json", {"extensions": [".mts"]})
        config = load_config(self.project_root, config_path=Path("custom.json"))
        self.assertEqual(config.extensions, [".mts"])

    def test_extensions_without_a_grammar_are_dropped(self) -> None:
        with self.assertLogs("funcscan.config", level="WARNING") as logs:
            config = load_config(
                self.project_root,
                overrides={"extensions": [".js", "py", ".vue"]},
            )
        self.assertEqual(config.extensions, [".js"])
        self.assertIn(".py, .vue", logs.output[0])

    def test_invalid_json_raises_value_error(self) -> None:
        (self.project_root / ".funcscanrc.json").write_text("{not json")
        with self.assertRaises(ValueError):
            load_config(self.project_root)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
