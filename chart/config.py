"""
chart.config
把平台输入（任意 dict）解析为完整、不可变的 CaptureRequest。

规则：
- 缺失的键使用 constants.DEFAULT_INPUT 中的缺省值；
- 有缺省值的键显式给出 null 视为非法输入（login/outputFileName 的缺省即为 null）；
- 已提供的值原样透传（只校验，不改写）；
- 校验失败抛出 CaptureError(code="INVALID_INPUT", stage="config")。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .constants import DEFAULT_INPUT, THEMES
from .errors import CaptureError


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str

    @property
    def complete(self) -> bool:
        return bool(self.username) and bool(self.password)

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class CaptureRequest:
    symbol: str
    interval: str
    indicators: Tuple[str, ...]
    theme: str
    width: int
    height: int
    hide_ui: bool
    login: Optional[Credentials] = None
    output_file_name: Optional[str] = None

    @property
    def viewport(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}

    def describe(self) -> Dict[str, Any]:
        """日志用摘要（不含凭据）。"""
        return {
            "symbol": self.symbol,
            "interval": self.interval,
            "indicators": list(self.indicators),
            "theme": self.theme,
            "dimensions": f"{self.width}x{self.height}",
        }


def _invalid(message: str) -> CaptureError:
    return CaptureError(code="INVALID_INPUT", stage="config", message=message)


def _pick(raw: Mapping[str, Any], key: str) -> Any:
    if key not in raw:
        return DEFAULT_INPUT[key]
    if raw[key] is None:
        raise _invalid(f"{key} must not be null")
    return raw[key]


def _positive_int(name: str, value: Any) -> int:
    # bool 是 int 的子类，这里显式排除
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise _invalid(f"{name} must be a positive integer, got {value!r}")
    return value


def _non_empty_str(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _invalid(f"{name} must be a non-empty string, got {value!r}")
    return value


def _credentials(value: Any) -> Optional[Credentials]:
    if not isinstance(value, Mapping):
        return None
    return Credentials(
        username=str(value.get("username") or ""),
        password=str(value.get("password") or ""),
    )


def resolve_config(raw: Optional[Mapping[str, Any]]) -> CaptureRequest:
    """Merge caller input over DEFAULT_INPUT and return a frozen CaptureRequest."""
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise _invalid(f"input must be a JSON object, got {type(raw).__name__}")

    indicators = _pick(raw, "indicators")
    if not isinstance(indicators, (list, tuple)) or not all(isinstance(i, str) for i in indicators):
        raise _invalid(f"indicators must be a list of strings, got {indicators!r}")

    theme = _pick(raw, "theme")
    if theme not in THEMES:
        raise _invalid(f"theme must be one of {', '.join(THEMES)}, got {theme!r}")

    hide_ui = _pick(raw, "hideUi")
    if not isinstance(hide_ui, bool):
        raise _invalid(f"hideUi must be a boolean, got {hide_ui!r}")

    output_file_name = raw.get("outputFileName")
    if output_file_name is not None and not isinstance(output_file_name, str):
        raise _invalid(f"outputFileName must be a string, got {output_file_name!r}")

    return CaptureRequest(
        symbol=_non_empty_str("symbol", _pick(raw, "symbol")),
        interval=_non_empty_str("interval", _pick(raw, "interval")),
        indicators=tuple(indicators),
        theme=theme,
        width=_positive_int("width", _pick(raw, "width")),
        height=_positive_int("height", _pick(raw, "height")),
        hide_ui=hide_ui,
        login=_credentials(raw.get("login")),
        output_file_name=output_file_name or None,
    )
