"""Browser package: Playwright session lifecycle used by the chart pipeline."""
