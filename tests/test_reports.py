from __future__ import annotations

import json
from pathlib import Path
import unittest

from funcscan.function_detection import FunctionFinding
from funcscan.reporters import (
    BANNER_TITLE,
    NO_FUNCTIONS_MESSAGE,
    NO_SINKS_MESSAGE,
    render_human,
    render_json,
)
from funcscan.scanner import ScanResult
from funcscan.sink_detection import SinkFinding


class ReportTests(unittest.TestCase):
    def setUp(self) -> None:
        self.result = ScanResult(
            project_root=Path("/project"),
            functions=(
                FunctionFinding(name="bar", path="lib/a.js", line=3, column=7, kind="variable"),
                FunctionFinding(name="foo", path="b.js", line=1, column=10, kind="declaration"),
            ),
            sinks=(
                SinkFinding(
                    kind="sink.eval.direct",
                    path="lib/a.js",
                    line=5,
                    column=3,
                    snippet="eval(code)",
                ),
            ),
            skipped=("broken.js",),
        )

    def test_human_report_renders_both_tables(self) -> None:
        output = render_human(self.result)
        self.assertIn("Functions", output)
        self.assertIn("Function Name", output)
        self.assertIn("Sink Calls", output)
        self.assertIn("lib/a.js:3:7", output)
        self.assertIn("b.js:1:10", output)
        self.assertIn("lib/a.js:5:3", output)
        self.assertIn("sink.eval.direct", output)
        self.assertLess(output.index("bar"), output.index("foo"))
        self.assertNotIn(NO_FUNCTIONS_MESSAGE, output)
        self.assertNotIn(NO_SINKS_MESSAGE, output)

    def test_human_report_starts_with_banner(self) -> None:
        output = render_human(ScanResult(project_root=Path("/project")))
        first_line = output.splitlines()[0]
        self.assertIn(BANNER_TITLE, first_line)
        self.assertIn("\u2500", first_line)

    def test_human_report_empty_messages(self) -> None:
        output = render_human(ScanResult(project_root=Path("/project")))
        self.assertIn(NO_FUNCTIONS_MESSAGE, output)
        self.assertIn(NO_SINKS_MESSAGE, output)
        self.assertNotIn("Function Name", output)

    def test_human_report_only_sinks_missing(self) -> None:
        result = ScanResult(project_root=Path("/project"), functions=self.result.functions)
        output = render_human(result)
        self.assertIn("Function Name", output)
        self.assertIn(NO_SINKS_MESSAGE, output)

    def test_json_report(self) -> None:
        payload = json.loads(render_json(self.result))
        self.assertEqual(payload["projectRoot"], str(Path("/project")))
        self.assertEqual([item["name"] for item in payload["functions"]], ["bar", "foo"])
        self.assertEqual(payload["functions"][0]["location"], "lib/a.js:3:7")
        self.assertEqual(payload["sinks"][0]["kind"], "sink.eval.direct")
        self.assertEqual(payload["sinks"][0]["snippet"], "eval(code)")
        self.assertEqual(payload["parseFailures"], ["broken.js"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
