"""
chart.errors
采集流程的致命错误类型。

CaptureError 是整个截图流水线唯一的致命异常：
配置校验、浏览器启动、导航、截图、元数据写入失败时抛出，
其余步骤（登录/主题/周期/指标/隐藏 UI/存储 blob）只记录警告。
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CaptureError(Exception):
    """截图流水线致命错误。

    code: 错误码（INVALID_INPUT/LAUNCH_ERROR/NAV_TIMEOUT/NAV_ERROR/SCREENSHOT_ERROR/PERSIST_ERROR）
    stage: 出错阶段（config/launch/navigate/capture/persist）
    message: 人类可读的错误信息
    original: 可选，原始异常对象
    """

    code: str
    stage: str
    message: str
    original: Optional[BaseException] = None

    def __str__(self) -> str:
        return f"[{self.code}@{self.stage}] {self.message}"
