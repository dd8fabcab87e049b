"""
chart.pipeline
单次截图流水线：配置 → 启动浏览器 → 导航 → 交互 → 截图 → 持久化。

严格按顺序执行；交互子步骤失败只记录，其余失败向上抛出。
浏览器部分使用 Playwright 同步 API，在工作线程中运行（capture_chart），
浏览器在任何退出路径上都会被关闭（见 browser.env.make_session）；
持久化在事件循环中经 Apify SDK 完成。
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Mapping, Optional, Tuple

from browser.env import make_session

from .config import CaptureRequest, resolve_config
from .constants import LAUNCH_ARGS, USER_AGENT
from .errors import CaptureError
from .interact import apply_interactions
from .navigate import open_chart
from .persist import CaptureResult, persist_capture
from .screenshot import Screenshot, capture_viewport
from .steps import StepOutcome

logger = logging.getLogger(__name__)


def capture_chart(
    request: CaptureRequest,
    *,
    headless: bool = True,
    keep_open_ms: int = 0,
) -> Tuple[Screenshot, List[StepOutcome]]:
    """启动浏览器 → 导航 → 交互 → 截图；返回截图与各交互步骤的结果。"""
    with make_session(
        request.viewport,
        user_agent=USER_AGENT,
        headless=headless,
        launch_args=LAUNCH_ARGS,
    ) as session:
        page = session.page
        open_chart(page, request.symbol)
        steps = apply_interactions(page, request)
        screenshot = capture_viewport(page, expected=(request.width, request.height))
        session.hold(keep_open_ms)
    return screenshot, steps


async def run_capture(
    raw_input: Optional[Mapping[str, Any]],
    actor,
    *,
    headless: bool = True,
    keep_open_ms: int = 0,
) -> CaptureResult:
    """Run the whole capture once and return the persisted CaptureResult."""
    try:
        request = resolve_config(raw_input)
        logger.info("starting TradingView chart capture %s", request.describe())
        # 同步 API 不能在事件循环所在线程中使用
        screenshot, steps = await asyncio.to_thread(
            capture_chart, request, headless=headless, keep_open_ms=keep_open_ms
        )
        result = await persist_capture(actor, request, screenshot, steps)
    except CaptureError as e:
        logger.exception("failed to capture chart: %s", e)
        raise
    except Exception:
        logger.exception("failed to capture chart: unexpected error")
        raise
    logger.info("chart capture completed successfully: %s", result.screenshot_key)
    return result
