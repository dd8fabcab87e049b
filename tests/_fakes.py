"""Test doubles for the Playwright page / keyboard and the Apify Actor."""

from __future__ import annotations

import io
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from PIL import Image


def make_png(width: int = 32, height: int = 18, color=(20, 30, 40)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


class FakeElement:
    def __init__(self, page: "FakePage", name: str) -> None:
        self.page = page
        self.name = name

    def click(self) -> None:
        self.page.calls.append(("click", self.name))

    def fill(self, value: str) -> None:
        self.page.calls.append(("fill", self.name, value))


class FakeKeyboard:
    def __init__(self, page: "FakePage") -> None:
        self.page = page
        self.fail_on_type: set = set()
        self.fail_on_press: set = set()

    def press(self, key: str) -> None:
        self.page.calls.append(("press", key))
        if key in self.fail_on_press:
            raise RuntimeError(f"press {key} failed")

    def type(self, text: str, delay: Optional[int] = None) -> None:
        self.page.calls.append(("type", text, delay))
        if text in self.fail_on_type:
            raise RuntimeError(f"type {text} failed")


class FakePage:
    def __init__(self, *, width: int = 32, height: int = 18) -> None:
        self.calls: List[tuple] = []
        self.keyboard = FakeKeyboard(self)
        self.present: Dict[str, bool] = {}
        self.missing_selectors: set = set()
        self.goto_error: Optional[BaseException] = None
        self.evaluate_error: Optional[BaseException] = None
        self.screenshot_error: Optional[BaseException] = None
        self.wait_error: Optional[BaseException] = None
        self.screenshot_bytes = make_png(width, height)
        self.url = ""
        self.viewport_size = {"width": width, "height": height}

    # navigation
    def goto(self, url: str, **kwargs: Any) -> None:
        self.calls.append(("goto", url, kwargs))
        if self.goto_error is not None:
            raise self.goto_error
        self.url = url

    def wait_for_selector(self, selector: str, **kwargs: Any) -> FakeElement:
        self.calls.append(("wait_for_selector", selector, kwargs))
        if selector in self.missing_selectors:
            raise TimeoutError(f"waiting for {selector} timed out")
        return FakeElement(self, selector)

    def query_selector(self, selector: str) -> Optional[FakeElement]:
        self.calls.append(("query_selector", selector))
        if not self.present.get(selector, False):
            return None
        return FakeElement(self, selector)

    def wait_for_timeout(self, ms: int) -> None:
        self.calls.append(("wait", ms))
        if self.wait_error is not None:
            raise self.wait_error

    def evaluate(self, script: str, *args: Any) -> Any:
        self.calls.append(("evaluate",))
        if self.evaluate_error is not None:
            raise self.evaluate_error
        return None

    def screenshot(self, **kwargs: Any) -> bytes:
        self.calls.append(("screenshot", kwargs))
        if self.screenshot_error is not None:
            raise self.screenshot_error
        return self.screenshot_bytes

    def close(self) -> None:
        self.calls.append(("close",))

    # helpers
    def named(self, kind: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == kind]


class FakeKeyValueStore:
    def __init__(self, actor: "FakeActor") -> None:
        self.actor = actor

    async def get_public_url(self, key: str) -> str:
        if self.actor.public_url_error is not None:
            raise self.actor.public_url_error
        return f"https://api.apify.com/v2/key-value-stores/local/records/{key}"


class FakeActor:
    """Mirrors the async Apify Actor surface; records writes, failures can be injected."""

    def __init__(self, input_value: Optional[Dict[str, Any]] = None, *, headless: bool = True) -> None:
        self.input_value = input_value
        self.config = SimpleNamespace(headless=headless)
        self.events: List[str] = []
        self.fail_calls: List[Dict[str, Any]] = []
        self.values: Dict[str, Any] = {}
        self.records: List[Dict[str, Any]] = []
        self.push_attempts: List[Dict[str, Any]] = []
        self.set_value_error: Optional[BaseException] = None
        self.public_url_error: Optional[BaseException] = None
        self.push_errors: List[Optional[BaseException]] = []

    async def __aenter__(self) -> "FakeActor":
        self.events.append("init")
        return self

    async def __aexit__(self, exc_type, exc_value, tb) -> None:
        self.events.append("exit")

    async def get_input(self) -> Optional[Dict[str, Any]]:
        return self.input_value

    async def fail(self, *, exit_code: int = 1, status_message: Optional[str] = None) -> None:
        self.fail_calls.append({"exit_code": exit_code, "status_message": status_message})

    async def set_value(self, key: str, value: Any, *, content_type: Optional[str] = None) -> None:
        if self.set_value_error is not None:
            raise self.set_value_error
        self.values[key] = (value, content_type)

    async def open_key_value_store(self) -> FakeKeyValueStore:
        return FakeKeyValueStore(self)

    async def push_data(self, record: Dict[str, Any]) -> None:
        self.push_attempts.append(record)
        if self.push_errors:
            err = self.push_errors.pop(0)
            if err is not None:
                raise err
        self.records.append(record)
