#!/usr/bin/env python3
"""
Capture a TradingView chart screenshot and persist it through the Apify SDK.

Input comes from, in order of precedence:
  1) CLI flags (--symbol/--interval/--indicator/...)
  2) --input <file.json>
  3) the Actor input (INPUT record of the default key-value store;
     locally ./storage/key_value_stores/default/INPUT.json)
Missing fields fall back to the built-in defaults (BINANCE:BTCUSDT, 1h, RSI/EMA 20/EMA 50, ...).

Usage:
  python -m chart.collect_chart [--input input.json] [--symbol NASDAQ:AAPL] [--interval 4h] \
    [--indicator RSI --indicator "EMA 20"] [--theme light] [--width 1600 --height 900] \
    [--no-hide-ui] [--output-name my_chart] \
    [--no-headless] [--keep-open-ms 5000] [--save-to ./out] [--quiet]

Outputs:
  - <name>.png in the default key-value store
  - one record in the default dataset
  - Prints a result summary (base64 fields replaced by their lengths)
  - Exit code 0 on success, 1 on fatal error
"""

from __future__ import annotations

import argparse
import asyncio
import base64
import json
import logging
import os
from typing import Any, Dict, Optional

from apify import Actor

from .errors import CaptureError
from .log import setup_logging
from .persist import CaptureResult
from .pipeline import run_capture
from .utils import load_json_file, write_json

logger = logging.getLogger(__name__)

SUMMARY_PREVIEW_CHARS = 100


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Capture a TradingView chart screenshot with Playwright")
    ap.add_argument("--input", default=None, help="JSON input file (default: the Actor input)")
    ap.add_argument("--symbol", default=None, help="Chart symbol, e.g. BINANCE:BTCUSDT")
    ap.add_argument("--interval", default=None, help="Timeframe, e.g. 1m, 4h, 1D")
    ap.add_argument("--indicator", dest="indicators", action="append", default=None, help="Indicator to add (repeatable, order kept)")
    ap.add_argument("--theme", default=None, choices=["dark", "light"], help="Chart theme (default: dark)")
    ap.add_argument("--width", type=int, default=None, help="Viewport width in px (default: 1280)")
    ap.add_argument("--height", type=int, default=None, help="Viewport height in px (default: 720)")
    ap.add_argument("--no-hide-ui", dest="hide_ui", action="store_false", help="Keep toolbars/watermark visible")
    ap.add_argument("--output-name", default=None, help="Screenshot name without extension")
    ap.add_argument("--no-headless", dest="headless", action="store_false", help="Run headed browser (default: $APIFY_HEADLESS)")
    ap.add_argument("--keep-open-ms", type=int, default=0, help="Keep the page open this long before closing (debugging)")
    ap.add_argument("--save-to", default=None, help="Also write <name>.png and result.json into this directory")
    ap.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    ap.set_defaults(hide_ui=None, headless=None)
    return ap.parse_args(argv)


def build_input(base: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """CLI 参数覆盖输入文件中的同名字段（仅覆盖显式给出的参数）。"""
    raw = dict(base)
    overrides = {
        "symbol": args.symbol,
        "interval": args.interval,
        "indicators": args.indicators,
        "theme": args.theme,
        "width": args.width,
        "height": args.height,
        "hideUi": args.hide_ui,
        "outputFileName": args.output_name,
    }
    raw.update({k: v for k, v in overrides.items() if v is not None})
    return raw


def summarize(record: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(record)
    out["screenshotBase64"] = f"[{len(record.get('screenshotBase64') or '')} characters]"
    out["screenshotDataUrl"] = f"[{len(record.get('screenshotDataUrl') or '')} characters]"
    return out


def save_local_copy(result: CaptureResult, png: bytes, out_dir: str) -> str:
    """本地调试：写出 PNG 与截断了 base64 的 result.json，返回 PNG 路径。"""
    os.makedirs(out_dir, exist_ok=True)
    png_path = os.path.join(out_dir, result.screenshot_key)
    with open(png_path, "wb") as f:
        f.write(png)
    record = result.to_record()
    record["screenshotBase64"] = record["screenshotBase64"][:SUMMARY_PREVIEW_CHARS] + "..."
    record["screenshotDataUrl"] = record["screenshotDataUrl"][:SUMMARY_PREVIEW_CHARS] + "..."
    record["screenshotPath"] = os.path.abspath(png_path)
    write_json(os.path.join(out_dir, "result.json"), record)
    return png_path


async def load_input(actor, path: Optional[str]) -> Dict[str, Any]:
    try:
        if not path:
            return await actor.get_input() or {}
        if not os.path.exists(path):
            raise FileNotFoundError(f"input file not found: {path}")
        return load_json_file(path)
    except (OSError, ValueError) as e:
        err = CaptureError(code="INVALID_INPUT", stage="config", message=f"failed to load input: {e}", original=e)
        logger.error("%s", err)
        raise err from e


async def run(args: argparse.Namespace) -> int:
    # Actor 退出时（exit/fail）平台 SDK 会以相应退出码结束进程
    async with Actor:
        headless = Actor.config.headless if args.headless is None else args.headless
        try:
            base = await load_input(Actor, args.input)
            result = await run_capture(
                build_input(base, args),
                Actor,
                headless=headless,
                keep_open_ms=max(0, int(args.keep_open_ms or 0)),
            )
        except CaptureError as e:
            # 已在出错处记录
            await Actor.fail(exit_code=1, status_message=str(e))
            return 1

        if args.save_to:
            try:
                png_path = save_local_copy(result, base64.b64decode(result.screenshot_base64), args.save_to)
                logger.info("local copy saved: %s", png_path)
            except OSError as e:
                logger.warning("failed to save local copy: %s", e)

        print(json.dumps(summarize(result.to_record()), ensure_ascii=False, indent=2))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=not args.quiet)
    return asyncio.run(run(args))


if __name__ == "__main__":
    raise SystemExit(main())
