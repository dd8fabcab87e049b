"""
chart.constants
常量定义：输入缺省值、目标站点、选择器、快捷键与固定等待时长。

TradingView 的快捷键与 data-name 属性属于外部页面约定，随上游版本可能变化；
集中放在这里，流水线其余部分不直接引用这些字面量。
"""

# 输入缺省值（键名与平台输入保持一致，camelCase）
DEFAULT_INPUT = {
    "symbol": "BINANCE:BTCUSDT",
    "interval": "1h",
    "indicators": ["RSI", "EMA 20", "EMA 50"],
    "theme": "dark",
    "width": 1280,
    "height": 720,
    "hideUi": True,
    "login": None,
    "outputFileName": None,
}

THEMES = ("dark", "light")

CHART_BASE_URL = "https://www.tradingview.com/chart/"

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

# Timeouts (ms)
NAV_TIMEOUT_MS = 60000
READY_TIMEOUT_MS = 30000
READY_SETTLE_MS = 5000
FIELD_TIMEOUT_MS = 5000

# Selectors
READY_SELECTOR = '[data-name="legend-source-item"]'
SIGN_IN_SELECTOR = "text=/sign in/i"
USERNAME_SELECTOR = 'input[type="text"], input[type="email"]'
PASSWORD_SELECTOR = 'input[type="password"]'
SUBMIT_SELECTOR = 'button[type="submit"], button:has-text("Sign in")'

# Keyboard shortcuts
THEME_TOGGLE_KEY = "Alt+t"
INDICATOR_SEARCH_KEY = "Shift+I"
ACCEPT_KEY = "Enter"

# Fixed waits (ms)
WAITS = {
    "login_click": 2000,
    "login_field": 500,
    "login_submit": 5000,
    "theme": 1000,
    "interval_digit": 200,
    "interval_code": 1000,
    "interval_settle": 2000,
    "indicator_open": 1000,
    "indicator_typed": 1500,
    "indicator_accept": 2000,
    "indicator_settle": 3000,
    "hide_ui": 1000,
}
TYPE_DELAY_MS = 100

# 隐藏 UI：仅修改样式（display/opacity），不移除节点
HIDE_UI_SCRIPT = """
() => {
  const hide = (sel) => {
    const el = document.querySelector(sel);
    if (el) el.style.display = 'none';
  };
  hide('[data-name="header-chart-panel"]');
  hide('[data-name="toolbar"]');
  hide('[data-name="watermark"]');
  const legend = document.querySelector('[data-name="legend-source-item"]');
  if (legend) {
    const container = legend.closest('[class*="legend"]');
    if (container) container.style.opacity = '0.7';
  }
  const modals = document.querySelectorAll('[class*="modal"], [class*="popup"], [class*="dialog"]');
  modals.forEach((m) => {
    if (m.style.display !== 'none') m.style.display = 'none';
  });
}
"""

# Output record
CONTENT_TYPE_PNG = "image/png"
DATA_URL_PREFIX = "data:image/png;base64,"
