import base64
import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

from chart import collect_chart
from chart.errors import CaptureError
from chart.persist import CaptureResult
from tests._fakes import FakeActor, make_png


def _result(data: bytes) -> CaptureResult:
    b64 = base64.b64encode(data).decode("ascii")
    return CaptureResult(
        symbol="BINANCE:BTCUSDT",
        interval="1h",
        indicators=["RSI"],
        theme="dark",
        width=1280,
        height=720,
        screenshot_base64=b64,
        screenshot_data_url="data:image/png;base64," + b64,
        screenshot_url="",
        screenshot_key="btc.png",
        timestamp="2024-05-01T12:30:45.000Z",
    )


class BuildInputTests(unittest.TestCase):
    def test_cli_flags_override_file_values(self) -> None:
        args = collect_chart.parse_args(["--symbol", "NASDAQ:AAPL", "--indicator", "RSI", "--indicator", "EMA 20", "--no-hide-ui"])
        raw = collect_chart.build_input({"symbol": "X", "interval": "4h"}, args)
        self.assertEqual(raw, {"symbol": "NASDAQ:AAPL", "interval": "4h", "indicators": ["RSI", "EMA 20"], "hideUi": False})

    def test_no_flags_keep_input(self) -> None:
        args = collect_chart.parse_args([])
        self.assertEqual(collect_chart.build_input({"theme": "light"}, args), {"theme": "light"})
        self.assertIsNone(args.headless)


class MainTests(unittest.TestCase):
    def setUp(self) -> None:
        self.actor = FakeActor()
        patcher = mock.patch("chart.collect_chart.Actor", self.actor)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, argv, **patch_kwargs):
        buf = io.StringIO()
        with mock.patch("chart.collect_chart.run_capture", new_callable=mock.AsyncMock, **patch_kwargs) as run, redirect_stdout(buf):
            code = collect_chart.main(argv + ["--quiet"])
        return code, run, buf.getvalue()

    def test_success_prints_summary_and_saves_local_copy(self) -> None:
        data = make_png(8, 4)
        self.actor.input_value = {"symbol": "NASDAQ:AAPL"}
        with tempfile.TemporaryDirectory() as tmp:
            out_dir = os.path.join(tmp, "out")
            code, run, out = self._run(["--save-to", out_dir], return_value=_result(data))
            self.assertEqual(code, 0)
            summary = json.loads(out)
            self.assertRegex(summary["screenshotBase64"], r"^\[\d+ characters\]$")
            with open(os.path.join(out_dir, "btc.png"), "rb") as f:
                self.assertEqual(f.read(), data)
            with open(os.path.join(out_dir, "result.json"), encoding="utf-8") as f:
                self.assertTrue(json.load(f)["screenshotBase64"].endswith("..."))
        self.assertEqual(run.call_args.args, ({"symbol": "NASDAQ:AAPL"}, self.actor))
        self.assertEqual(self.actor.events, ["init", "exit"])
        self.assertEqual(self.actor.fail_calls, [])

    def test_missing_actor_input_means_defaults(self) -> None:
        code, run, _ = self._run([], return_value=_result(make_png()))
        self.assertEqual(code, 0)
        self.assertEqual(run.call_args.args[0], {})

    def test_headless_follows_actor_config_unless_overridden(self) -> None:
        self.actor.config.headless = False
        _, run, _ = self._run([], return_value=_result(make_png()))
        self.assertFalse(run.call_args.kwargs["headless"])
        self.actor.config.headless = True
        _, run, _ = self._run(["--no-headless"], return_value=_result(make_png()))
        self.assertFalse(run.call_args.kwargs["headless"])

    def test_input_file_is_used(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "input.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"symbol": "FX:EURUSD"}, f)
            code, run, _ = self._run(["--input", path, "--interval", "1D"], return_value=_result(make_png()))
        self.assertEqual(code, 0)
        self.assertEqual(run.call_args.args[0], {"symbol": "FX:EURUSD", "interval": "1D"})

    def test_fatal_error_fails_the_actor(self) -> None:
        err = CaptureError(code="NAV_TIMEOUT", stage="navigate", message="timed out")
        code, _, out = self._run([], side_effect=err)
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertEqual(self.actor.fail_calls, [{"exit_code": 1, "status_message": "[NAV_TIMEOUT@navigate] timed out"}])

    def test_missing_input_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            code, run, _ = self._run(["--input", os.path.join(tmp, "nope.json")])
        self.assertEqual(code, 1)
        run.assert_not_called()
        self.assertEqual(self.actor.fail_calls[0]["exit_code"], 1)
        self.assertIn("INVALID_INPUT", self.actor.fail_calls[0]["status_message"])


if __name__ == "__main__":
    unittest.main()
