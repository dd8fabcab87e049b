"""
chart.interact
把页面状态调整为请求描述的样子：登录、主题、周期、指标、隐藏 UI。

每个子步骤都经 steps.attempt 包装，失败只记录，不影响其它步骤。
周期与指标依赖 TradingView 的键盘快捷键（外部页面约定）：
  - 直接键入数字再键入周期字母即切换周期（如 "4" "h"）；
  - Shift+I 打开指标搜索，回车选中第一个结果。
所有等待都是固定时长（page.wait_for_timeout）。
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .config import CaptureRequest, Credentials
from .constants import (
    ACCEPT_KEY,
    FIELD_TIMEOUT_MS,
    HIDE_UI_SCRIPT,
    INDICATOR_SEARCH_KEY,
    PASSWORD_SELECTOR,
    SIGN_IN_SELECTOR,
    SUBMIT_SELECTOR,
    THEME_TOGGLE_KEY,
    TYPE_DELAY_MS,
    USERNAME_SELECTOR,
    WAITS,
)
from .steps import FAILED, StepOutcome, StepSkipped, attempt, skipped
from .utils import parse_interval

logger = logging.getLogger(__name__)


def login(page, credentials: Credentials) -> None:
    logger.info("attempting to login...")
    sign_in = page.query_selector(SIGN_IN_SELECTOR)
    if sign_in is None:
        raise StepSkipped("sign-in button not found")
    sign_in.click()
    page.wait_for_timeout(WAITS["login_click"])

    username_input = page.wait_for_selector(USERNAME_SELECTOR, timeout=FIELD_TIMEOUT_MS)
    username_input.fill(credentials.username)
    page.wait_for_timeout(WAITS["login_field"])

    password_input = page.wait_for_selector(PASSWORD_SELECTOR, timeout=FIELD_TIMEOUT_MS)
    password_input.fill(credentials.password)
    page.wait_for_timeout(WAITS["login_field"])

    submit = page.query_selector(SUBMIT_SELECTOR)
    if submit is None:
        raise StepSkipped("submit button not found")
    submit.click()
    page.wait_for_timeout(WAITS["login_submit"])
    logger.info("login completed")


def toggle_theme(page) -> None:
    # 默认渲染为暗色，切换一次即为亮色；不校验结果
    logger.info("switching to light theme...")
    page.keyboard.press(THEME_TOGGLE_KEY)
    page.wait_for_timeout(WAITS["theme"])


def select_timeframe(page, interval: str) -> None:
    number, code = parse_interval(interval)
    logger.info("setting timeframe to: %s (keys %r + %r)", interval, number, code)
    for digit in number:
        page.keyboard.press(digit)
        page.wait_for_timeout(WAITS["interval_digit"])
    if code:
        page.keyboard.press(code)
        page.wait_for_timeout(WAITS["interval_code"])


def add_indicator(page, indicator: str) -> None:
    logger.info("adding indicator: %s", indicator)
    page.keyboard.press(INDICATOR_SEARCH_KEY)
    page.wait_for_timeout(WAITS["indicator_open"])
    page.keyboard.type(indicator, delay=TYPE_DELAY_MS)
    page.wait_for_timeout(WAITS["indicator_typed"])
    page.keyboard.press(ACCEPT_KEY)
    page.wait_for_timeout(WAITS["indicator_accept"])
    logger.info('indicator "%s" added', indicator)


def add_indicators(page, indicators) -> List[StepOutcome]:
    """按顺序逐个添加指标；某个指标失败不影响后续指标。"""
    logger.info("adding %d indicator(s)...", len(indicators))
    outcomes = []
    for indicator in indicators:
        outcomes.append(attempt(f"indicator:{indicator}", lambda ind=indicator: add_indicator(page, ind)))
    return outcomes


def hide_ui(page) -> None:
    logger.info("hiding UI elements...")
    page.evaluate(HIDE_UI_SCRIPT)
    page.wait_for_timeout(WAITS["hide_ui"])


def _settle(page, key: str) -> None:
    try:
        page.wait_for_timeout(WAITS[key])
    except Exception as e:
        logger.warning("settle wait %s failed: %s", key, e)


def apply_interactions(page, request: CaptureRequest) -> List[StepOutcome]:
    """按固定顺序执行全部交互步骤，返回每一步的结果。"""
    outcomes: List[StepOutcome] = []

    creds: Optional[Credentials] = request.login
    if creds is not None and creds.complete:
        outcomes.append(attempt("login", lambda: login(page, creds)))
    else:
        outcomes.append(skipped("login", "no credentials"))

    if request.theme == "light":
        outcomes.append(attempt("theme", lambda: toggle_theme(page)))
    else:
        outcomes.append(skipped("theme", "dark theme is the default"))

    outcomes.append(attempt("timeframe", lambda: select_timeframe(page, request.interval)))
    _settle(page, "interval_settle")

    outcomes.extend(add_indicators(page, request.indicators))
    _settle(page, "indicator_settle")

    if request.hide_ui:
        outcomes.append(attempt("hide_ui", lambda: hide_ui(page)))
    else:
        outcomes.append(skipped("hide_ui", "hideUi is false"))

    failed = [o.name for o in outcomes if o.status == FAILED]
    if failed:
        logger.warning("interaction steps failed: %s", ", ".join(failed))
    return outcomes
