"""
Test suites package.

This repository intentionally keeps `testsuites` importable to support:
  - IDE navigation
  - programmatic runners (e.g., `run_tests.py`)
  - the cross-browser pytest plugin (`ui_testing.framework.pytest_plugin`)

No grid or cloud credentials are stored here.
"""
