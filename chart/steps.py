"""
chart.steps
尽力而为的步骤包装：attempt(name, action) -> StepOutcome。

单个交互步骤失败只记录警告，不中断后续步骤；结果写入输出记录的 steps 字段，
便于调用方判断“部分成功”。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

OK = "ok"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass(frozen=True)
class StepOutcome:
    name: str
    status: str
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class StepSkipped(Exception):
    """在步骤内部抛出，表示该步骤因前置条件不满足而跳过（非错误）。"""


def skipped(name: str, reason: str) -> StepOutcome:
    logger.info("%s skipped: %s", name, reason)
    return StepOutcome(name, SKIPPED, reason)


def attempt(name: str, action: Callable[[], Any]) -> StepOutcome:
    """执行 action；异常被捕获并记录，返回对应的 StepOutcome。"""
    try:
        action()
    except StepSkipped as e:
        return skipped(name, str(e))
    except Exception as e:
        logger.warning("%s failed: %s", name, e)
        return StepOutcome(name, FAILED, str(e) or type(e).__name__)
    return StepOutcome(name, OK)
