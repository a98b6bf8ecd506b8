#!/usr/bin/env python3
# ================================================================================
# Test Runner Script
# ================================================================================
#
# This is the main entry point for executing test suites.
# It provides a unified interface for running the unit suite and the
# cross-browser UI suite with various configurations.
#
# Features:
#   - Run unit tests (no browser needed)
#   - Run UI tests across selected browser variants
#   - Parallel execution via pytest-xdist
#   - Allure results collection
#   - CI/CD pipeline support
#
# Usage:
#   python run_tests.py --suite unit
#   python run_tests.py --suite ui --browsers chrome-headless,firefox-headless
#   python run_tests.py --suite ui --category headless --parallel 3
#
# ================================================================================

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger


# Configure logging
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    level="INFO"
)


SUITE_PATHS = {
    "unit": "testsuites/unit",
    "ui": "testsuites/ui_testing/tests",
    "all": "testsuites/",
}


class TestRunner:
    """
    Main test runner class for orchestrating test execution.

    This class handles:
    - Test suite selection and execution
    - Browser variant selection for UI suites
    - Parallel execution configuration
    """

    def __init__(
        self,
        suite: str = "all",
        tags: List[str] = None,
        parallel: int = 1,
        browsers: Optional[str] = None,
        category: Optional[str] = None,
        headless: bool = True,
        allure_report: bool = True,
        verbose: bool = False
    ):
        """
        Initialize test runner.

        Args:
            suite: Test suite to run - "unit", "ui", "all"
            tags: List of pytest markers to filter tests
            parallel: Number of parallel workers
            browsers: Comma-separated browser variant keys for UI tests
            category: Browser category for UI tests (desktop, headless, ...)
            headless: Force headless mode for every local browser
            allure_report: Collect Allure results
            verbose: Enable verbose output
        """
        self.suite = suite
        self.tags = tags or []
        self.parallel = parallel
        self.browsers = browsers
        self.category = category
        self.headless = headless
        self.allure_report = allure_report
        self.verbose = verbose

        # Paths
        self.root_dir = Path(__file__).parent
        self.reports_dir = self.root_dir / "reports"
        self.allure_results = self.reports_dir / "allure-results"

    @property
    def runs_browsers(self) -> bool:
        return self.suite in ("ui", "all")

    def run(self) -> int:
        """
        Execute the test run.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        logger.info("=" * 60)
        logger.info("Starting Test Execution")
        logger.info("=" * 60)
        logger.info(f"Suite: {self.suite}")
        logger.info(f"Tags: {self.tags or 'All'}")
        logger.info(f"Parallel Workers: {self.parallel}")
        if self.runs_browsers:
            logger.info(f"Browsers: {self.browsers or self.category or 'configured targets'}")
            logger.info(f"Headless: {self.headless}")
        logger.info("=" * 60)

        self._prepare_environment()

        cmd = self._build_pytest_command()
        logger.info(f"Executing: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, cwd=str(self.root_dir), env=self._build_env())
            exit_code = result.returncode
        except Exception as e:
            logger.error(f"Test execution failed: {e}")
            exit_code = 1

        self._print_summary(exit_code)
        return exit_code

    def _prepare_environment(self) -> None:
        """Prepare test environment."""
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        if self.allure_report:
            self.allure_results.mkdir(parents=True, exist_ok=True)
        logger.debug("Environment prepared")

    def _build_env(self) -> Dict[str, str]:
        """Environment for the pytest process (overrides config.yaml)."""
        env = dict(os.environ)
        if self.runs_browsers:
            env["RUN_BROWSER_TESTS"] = "1"
            env["BROWSER_HEADLESS"] = "true" if self.headless else "false"
        return env

    def _build_pytest_command(self) -> List[str]:
        """Build the pytest command with all options."""
        cmd = [sys.executable, "-m", "pytest", SUITE_PATHS[self.suite]]

        # Add tags filter
        if self.tags:
            marker_expr = " or ".join(self.tags)
            cmd.extend(["-m", marker_expr])

        # Add parallel execution
        if self.parallel > 1:
            cmd.extend(["-n", str(self.parallel)])

        # Add Allure
        if self.allure_report:
            cmd.extend(["--alluredir", str(self.allure_results)])

        # Add verbosity
        cmd.append("-v" if self.verbose else "-q")

        # Add UI-specific options
        if self.runs_browsers:
            if self.browsers:
                cmd.append(f"--browsers={self.browsers}")
            elif self.category:
                cmd.append(f"--browser-category={self.category}")

        return cmd

    def _print_summary(self, exit_code: int) -> None:
        """Print test execution summary."""
        logger.info("=" * 60)
        if exit_code == 0:
            logger.info("✅ TEST EXECUTION COMPLETED SUCCESSFULLY")
        else:
            logger.error(f"❌ TEST EXECUTION FAILED (exit code: {exit_code})")

        if self.allure_report:
            logger.info(f"📊 Allure results written to: {self.allure_results}")

        logger.info("=" * 60)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cross-Browser Automation Test Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the unit suite
  python run_tests.py --suite unit

  # Run UI smoke tests on two headless browsers
  python run_tests.py --suite ui --tags smoke --browsers chrome-headless,firefox-headless

  # Run every desktop browser with a visible window
  python run_tests.py --suite ui --category desktop --no-headless

  # Run UI tests in parallel
  python run_tests.py --suite ui --category headless --parallel 3
        """
    )

    parser.add_argument(
        "--suite",
        choices=sorted(SUITE_PATHS),
        default="all",
        help="Test suite to run (default: all)"
    )

    parser.add_argument(
        "--tags",
        nargs="+",
        default=[],
        help="Pytest markers to filter tests (e.g., P0 smoke regression)"
    )

    parser.add_argument(
        "--parallel", "-n",
        type=int,
        default=1,
        help="Number of parallel workers (default: 1)"
    )

    parser.add_argument(
        "--browsers",
        default=None,
        help="Comma-separated browser variant keys (e.g., chrome,firefox-headless)"
    )

    parser.add_argument(
        "--category",
        choices=["desktop", "mobile", "headless", "remote", "docker"],
        default=None,
        help="Run every browser variant of a category"
    )

    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Run browsers in headed mode (visible)"
    )

    parser.add_argument(
        "--no-allure",
        action="store_true",
        help="Do not collect Allure results"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    return parser


def main():
    """Main entry point."""
    args = build_parser().parse_args()

    runner = TestRunner(
        suite=args.suite,
        tags=args.tags,
        parallel=args.parallel,
        browsers=args.browsers,
        category=args.category,
        headless=not args.no_headless,
        allure_report=not args.no_allure,
        verbose=args.verbose
    )

    exit_code = runner.run()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
