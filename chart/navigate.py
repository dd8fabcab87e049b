"""
chart.navigate
打开图表页并等待就绪。

就绪约定：goto 使用 domcontentloaded（行情页的长连接使 networkidle 很少达成），
随后最多等待 30s 出现图例标记元素；超时只记录警告，并固定等待一段时间后继续。
导航本身失败（网络错误/超时）是致命错误。
"""

from __future__ import annotations

import logging

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .constants import NAV_TIMEOUT_MS, READY_SELECTOR, READY_SETTLE_MS, READY_TIMEOUT_MS
from .errors import CaptureError
from .utils import build_chart_url

logger = logging.getLogger(__name__)


def goto_chart(page, symbol: str, *, timeout_ms: int = NAV_TIMEOUT_MS) -> str:
    url = build_chart_url(symbol)
    logger.info("navigating to: %s", url)
    try:
        page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        raise CaptureError(
            code="NAV_TIMEOUT",
            stage="navigate",
            message=f"navigation to {url} timed out after {timeout_ms} ms",
            original=e,
        ) from e
    except Exception as e:
        raise CaptureError(
            code="NAV_ERROR",
            stage="navigate",
            message=f"navigation to {url} failed: {e}",
            original=e,
        ) from e
    return url


def wait_until_ready(
    page,
    *,
    selector: str = READY_SELECTOR,
    timeout_ms: int = READY_TIMEOUT_MS,
    settle_ms: int = READY_SETTLE_MS,
) -> bool:
    """等待就绪标记；成功返回 True，超时或出错时固定等待 settle_ms 后返回 False。"""
    try:
        page.wait_for_selector(selector, state="attached", timeout=timeout_ms)
    except Exception as e:
        logger.warning("ready marker %s not found (%s); continuing after %d ms", selector, e, settle_ms)
        try:
            page.wait_for_timeout(settle_ms)
        except Exception as e:
            logger.warning("settle wait failed: %s", e)
        return False
    logger.info("chart loaded successfully")
    return True


def open_chart(page, symbol: str) -> bool:
    """导航到 symbol 对应的图表页并等待就绪，返回是否看到了就绪标记。"""
    goto_chart(page, symbol)
    return wait_until_ready(page)
