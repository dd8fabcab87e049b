"""
chart.persist
截图持久化：编码 → 写入键值存储 → 解析公开 URL → 推送元数据记录。

actor 是 Apify SDK 的 Actor（或同接口的对象）：
  await actor.set_value(key, value, content_type=...)
  await actor.open_key_value_store() → store.get_public_url(key)
  await actor.push_data(record)

只有最后一步是致命的：记录推送失败（平台对单条记录约 9MB 的限制，通常因 base64 过大）时，
用占位字符串替换 base64/data URL 再推送一次，仍失败才抛 CaptureError。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from .config import CaptureRequest
from .constants import CONTENT_TYPE_PNG
from .errors import CaptureError
from .screenshot import Screenshot
from .steps import StepOutcome
from .utils import build_output_name, encode_png, iso_timestamp, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptureResult:
    symbol: str
    interval: str
    indicators: List[str]
    theme: str
    width: int
    height: int
    screenshot_base64: str
    screenshot_data_url: str
    screenshot_url: str
    screenshot_key: str
    timestamp: str
    steps: List[Dict[str, Any]] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "interval": self.interval,
            "indicators": list(self.indicators),
            "theme": self.theme,
            "width": self.width,
            "height": self.height,
            "screenshotBase64": self.screenshot_base64,
            "screenshotDataUrl": self.screenshot_data_url,
            "screenshotUrl": self.screenshot_url,
            "screenshotKey": self.screenshot_key,
            "timestamp": self.timestamp,
            "steps": list(self.steps),
        }


def placeholder_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """把 base64/data URL 替换为注明原始长度的占位字符串。"""
    fallback = dict(record)
    fallback["screenshotBase64"] = f"[Base64 data too large: {len(record['screenshotBase64'])} chars]"
    fallback["screenshotDataUrl"] = f"[Data URL too large: {len(record['screenshotDataUrl'])} chars]"
    return fallback


async def store_blob(actor, key: str, data: bytes) -> bool:
    try:
        await actor.set_value(key, data, content_type=CONTENT_TYPE_PNG)
    except Exception as e:
        logger.warning("failed to store screenshot %s: %s", key, e)
        return False
    logger.info("screenshot saved: %s", key)
    return True


async def resolve_public_url(actor, key: str) -> str:
    try:
        store = await actor.open_key_value_store()
        return await store.get_public_url(key) or ""
    except Exception as e:
        logger.warning("failed to resolve public URL for %s: %s", key, e)
        return ""


async def push_record(actor, record: Dict[str, Any]) -> Dict[str, Any]:
    """推送记录，失败时以占位记录重试一次；返回实际写入的记录。"""
    try:
        await actor.push_data(record)
        logger.info("metadata pushed to dataset with base64 image")
        return record
    except Exception as e:
        logger.warning("failed to push record (%s); retrying without image data", e)
    fallback = placeholder_record(record)
    try:
        await actor.push_data(fallback)
    except Exception as e:
        raise CaptureError(
            code="PERSIST_ERROR",
            stage="persist",
            message=f"failed to push metadata record: {e}",
            original=e,
        ) from e
    logger.info("metadata pushed to dataset without image data")
    return fallback


async def persist_capture(
    actor,
    request: CaptureRequest,
    screenshot: Screenshot,
    steps: Sequence[StepOutcome] = (),
    *,
    now: Optional[datetime] = None,
) -> CaptureResult:
    now = now or utc_now()
    key = build_output_name(request.symbol, request.output_file_name, now) + ".png"
    b64, data_url = encode_png(screenshot.data)

    await store_blob(actor, key, screenshot.data)
    public_url = await resolve_public_url(actor, key)

    result = CaptureResult(
        symbol=request.symbol,
        interval=request.interval,
        indicators=list(request.indicators),
        theme=request.theme,
        width=request.width,
        height=request.height,
        screenshot_base64=b64,
        screenshot_data_url=data_url,
        screenshot_url=public_url,
        screenshot_key=key,
        timestamp=iso_timestamp(now),
        steps=[s.to_dict() for s in steps],
    )
    await push_record(actor, result.to_record())
    return result
