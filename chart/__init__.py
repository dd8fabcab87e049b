"""Chart capture package.

Loads a TradingView chart in a headless Playwright browser, applies the
requested timeframe / indicators / theme, takes a viewport screenshot and
persists it through the Apify SDK.

Usage:
  python -m chart.collect_chart --symbol NASDAQ:AAPL --interval 4h --indicator RSI
"""
