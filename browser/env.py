"""
Playwright-backed browser session for one chart capture run.

A session owns exactly one browser, one context and one page. The context
manager guarantees that page, context and browser are closed once, on every
exit path (normal return, handled CaptureError, or any other exception).

Usage:
  from browser.env import make_session
  with make_session({"width": 1280, "height": 720}, user_agent=UA) as session:
      session.page.goto(url)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from playwright.sync_api import sync_playwright

from chart.errors import CaptureError

logger = logging.getLogger(__name__)


class BrowserSession:
    def __init__(self, browser, context, page) -> None:
        self.browser = browser
        self.context = context
        self.page = page
        self.closed = False

    def hold(self, ms: int) -> None:
        """本地调试：在关闭前保持页面若干毫秒，便于肉眼检查结果。"""
        if not ms or ms <= 0:
            return
        logger.info("keeping browser open for %d ms", ms)
        try:
            self.page.wait_for_timeout(int(ms))
        except Exception as e:
            logger.warning("hold interrupted: %s", e)

    def close(self) -> None:
        """依次关闭 page/context/browser；重复调用无副作用，单个 close 失败只记录。"""
        if self.closed:
            return
        self.closed = True
        for name, obj in (("page", self.page), ("context", self.context), ("browser", self.browser)):
            if obj is None:
                continue
            try:
                obj.close()
            except Exception as e:
                logger.warning("%s close failed: %s", name, e)
        logger.info("browser closed")


@contextmanager
def make_session(
    viewport: Dict[str, int],
    *,
    user_agent: Optional[str] = None,
    headless: bool = True,
    launch_args: Optional[List[str]] = None,
) -> Iterator[BrowserSession]:
    """Launch Chromium and yield a BrowserSession; always tears it down.

    headless=True by default; set False to run headed for local debugging.
    Launch/context/page failures raise CaptureError(code="LAUNCH_ERROR").
    """
    with sync_playwright() as pw:
        browser = None
        context = None
        try:
            browser = pw.chromium.launch(headless=headless, args=list(launch_args or []))
            context_args: Dict[str, Any] = {"viewport": dict(viewport)}
            if user_agent:
                context_args["user_agent"] = user_agent
            context = browser.new_context(**context_args)
            page = context.new_page()
        except Exception as e:
            # 部分创建成功时也要释放已启动的进程
            BrowserSession(browser, context, None).close()
            raise CaptureError(
                code="LAUNCH_ERROR",
                stage="launch",
                message=f"failed to start browser: {e}",
                original=e,
            ) from e
        logger.info(
            "browser launched (headless=%s, viewport=%sx%s)",
            headless,
            viewport.get("width"),
            viewport.get("height"),
        )
        session = BrowserSession(browser, context, page)
        try:
            yield session
        finally:
            session.close()
