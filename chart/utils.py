"""
chart.utils
通用工具函数：URL 拼接、周期解析、文件名/时间戳、图片编码、JSON 读写。
"""

from __future__ import annotations

import base64
import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

from .constants import CHART_BASE_URL, DATA_URL_PREFIX

# 与 JavaScript encodeURIComponent 保留的字符集一致
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_chart_url(symbol: str, base_url: str = CHART_BASE_URL) -> str:
    """拼接图表页 URL，symbol 做 URI 组件转义（BINANCE:BTCUSDT → BINANCE%3ABTCUSDT）。"""
    return f"{base_url}?symbol={quote(symbol, safe=_URI_COMPONENT_SAFE)}"


def parse_interval(interval: str) -> Tuple[str, str]:
    """将周期字符串拆成 (数字部分, 字母代码)。

    取第一段连续数字作为数字部分，其余字符转小写后作为代码：
    "4h" → ("4", "h")；"1D" → ("1", "d")；"D" → ("", "d")。
    """
    m = re.search(r"\d+", interval)
    number = m.group(0) if m else ""
    code = re.sub(r"\d+", "", interval.lower(), count=1)
    return number, code


def sanitize_symbol(symbol: str) -> str:
    """把 symbol 中 [A-Za-z0-9] 以外的字符替换为下划线。"""
    return re.sub(r"[^A-Za-z0-9]", "_", symbol)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def file_timestamp(now: Optional[datetime] = None) -> str:
    """可排序的时间戳，精确到秒：2024-05-01T12-30-45。"""
    now = now or utc_now()
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")


def iso_timestamp(now: Optional[datetime] = None) -> str:
    """记录用 ISO-8601 时间（UTC，毫秒，Z 结尾）。"""
    now = now or utc_now()
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_output_name(symbol: str, output_file_name: Optional[str] = None, now: Optional[datetime] = None) -> str:
    if output_file_name:
        return output_file_name
    return f"chart_{sanitize_symbol(symbol)}_{file_timestamp(now)}"


def encode_png(data: bytes) -> Tuple[str, str]:
    """返回 (base64, data URL)。"""
    b64 = base64.b64encode(data).decode("ascii")
    return b64, DATA_URL_PREFIX + b64


def write_json(path: str, obj: Any) -> None:
    """以 UTF-8 与缩进写入 JSON 文件。"""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)


def load_json_file(path: str) -> Dict[str, Any]:
    """读取 JSON 对象文件；内容不是对象时抛 ValueError。"""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data
