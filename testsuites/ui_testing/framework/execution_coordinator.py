"""
================================================================================
Cross-Browser Execution Coordinator
================================================================================

Runs one test procedure against a list of browser variants and collects the
outcome of each run into an ExecutionResult.

Features:
    - Every variant runs, failures never abort the run
    - Session creation, registration and teardown handled per variant
    - Failure screenshots sent to the reporter when the variant supports them
    - Optional thread-pool execution with results kept in input order
    - Compatibility matrix attached to the reporter at the end of the run

Usage:
    executor = CrossBrowserExecutor(reporter=AllureReporter())

    def login(variant, context):
        context.driver.get("https://example.com/login")
        assert "Login" in context.driver.title

    result = executor.run_across_category(Category.DESKTOP, login)
    assert result.all_passed(), result.summary_report()

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, Sequence, Tuple, Union

from loguru import logger

from crossbrowser_tools.report_tools.allure_utils import LoguruReporter, ReporterSink

from .browser_variants import BrowserVariant, Category, all_of_category, resolve_many
from .config_loader import ConfigLoader
from .driver_factory import DriverSessionFactory
from .execution_result import (
    ErrorInfo,
    ExecutionResult,
    ExecutionStatus,
    VariantOutcome,
)
from .session_handle import SessionHandle
from .session_registry import SessionRegistry, WorkerContext


Procedure = Callable[[BrowserVariant, WorkerContext], Any]

MATRIX_TITLE = "Browser Compatibility Matrix"


class CrossBrowserExecutor:
    """
    Executes a procedure once per browser variant.

    Args:
        factory: Session factory (built from config if None)
        registry: Per-worker session registry (a private one if None)
        reporter: Reporter sink (LoguruReporter if None)
        config: Configuration provider (the factory's if None)
        max_workers: Number of variants run concurrently; 1 runs sequentially
    """

    def __init__(
        self,
        factory: Optional[DriverSessionFactory] = None,
        registry: Optional[SessionRegistry] = None,
        reporter: Optional[ReporterSink] = None,
        config: Optional[ConfigLoader] = None,
        max_workers: int = 1,
    ) -> None:
        if factory is not None:
            self.config = config or factory.config
        else:
            self.config = config or ConfigLoader.instance()
        self.factory = factory or DriverSessionFactory(config=self.config)
        self.registry = registry or SessionRegistry()
        self.reporter = reporter or LoguruReporter()
        self.max_workers = max(1, int(max_workers))

    # =========================================================================
    # Runs
    # =========================================================================

    def run_across_variants(
        self,
        variants: Sequence[BrowserVariant],
        procedure: Procedure,
        name: Optional[str] = None,
    ) -> ExecutionResult:
        """
        Run the procedure against each variant.

        Args:
            variants: Variants to run, in reporting order
            procedure: Called as procedure(variant, context); any exception
                       it raises marks that variant as failed
            name: Run name used in the summary and matrix

        Returns:
            ExecutionResult with one outcome per variant, in input order
        """
        variants = list(variants)
        result = ExecutionResult(name=name or getattr(procedure, "__name__", "cross-browser run"))

        logger.info(
            f"Starting cross-browser run '{result.name}' on {len(variants)} browser(s): "
            f"{', '.join(v.key for v in variants)}"
        )

        if self.max_workers > 1 and len(variants) > 1:
            workers = min(self.max_workers, len(variants))
            logger.info(f"Running in parallel with {workers} workers")
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="browser") as pool:
                outcomes = list(pool.map(lambda v: self._run_variant(v, procedure), variants))
        else:
            outcomes = [self._run_variant(variant, procedure) for variant in variants]

        for outcome in outcomes:
            result.add(outcome)

        logger.info(f"Cross-browser execution completed\n{result.summary_report()}")
        if result.outcomes:
            self.reporter.attach_table(f"{MATRIX_TITLE}: {result.name}", result.table_rows())
        return result

    def run_across_category(
        self,
        category: Union[Category, str],
        procedure: Procedure,
        name: Optional[str] = None,
    ) -> ExecutionResult:
        """Run the procedure against every variant of a category."""
        return self.run_across_variants(all_of_category(category), procedure, name=name)

    def run_across_targets(
        self,
        procedure: Procedure,
        name: Optional[str] = None,
    ) -> ExecutionResult:
        """Run the procedure against the configured browser.targets."""
        return self.run_across_variants(self.target_browsers(), procedure, name=name)

    def target_browsers(self) -> Tuple[BrowserVariant, ...]:
        """Variants listed in browser.targets (browser.default if empty)."""
        targets = self.config.get_list("browser.targets")
        if not targets:
            targets = [self.config.get("browser.default", "chrome")]
        return resolve_many(targets)

    # =========================================================================
    # Reporting Helpers
    # =========================================================================

    @staticmethod
    def generate_compatibility_matrix(result: ExecutionResult) -> str:
        """Markdown compatibility table for a finished run."""
        return result.compatibility_matrix()

    @staticmethod
    def browser_supports_feature(variant: BrowserVariant, feature: str) -> bool:
        """
        Check a named capability of a variant.

        Known features: headless, screenshots, downloads, mobile, remote.
        Unknown feature names are reported as unsupported.
        """
        checks = {
            "headless": variant.supports_headless,
            "screenshots": variant.supports_screenshots,
            "downloads": variant.supports_downloads,
            "mobile": variant.is_mobile,
            "remote": variant.is_remote,
        }
        return checks.get(feature.strip().lower(), False)

    # =========================================================================
    # Single Variant
    # =========================================================================

    def _run_variant(self, variant: BrowserVariant, procedure: Procedure) -> VariantOutcome:
        execution_id = f"{variant.key.upper()}_{int(time.time() * 1000)}"
        self.reporter.start_test(f"Cross-browser run on {variant.display_name}")
        started = time.perf_counter()

        status = ExecutionStatus.FAILED
        error: Optional[ErrorInfo] = None
        session: Optional[SessionHandle] = None
        context, detached = self._variant_context()

        try:
            session = self.factory.create_session(variant)
            context.set(session)

            self.reporter.log("INFO", f"Running on {variant.display_name} ({execution_id})")
            procedure(variant, context)

            status = ExecutionStatus.PASSED
            self.reporter.log("INFO", f"✓ Test passed on {variant.display_name}")
        except Exception as e:
            error = ErrorInfo.from_exception(e)
            logger.error(f"✗ Test failed on {variant.display_name}: {error.message}")
            self.reporter.log("ERROR", f"✗ Test failed on {variant.display_name}: {error.message}")
            self._capture_failure_screenshot(variant, session)
        finally:
            # Both contexts start empty, so teardown only reaches this run's session
            if detached:
                teardown_error = context.teardown()
            else:
                teardown_error = self.registry.teardown_current()
            if teardown_error is not None:
                self.reporter.log("WARNING", str(teardown_error))
            if session is not None and not session.closed:
                # Cleared by the procedure, so teardown did not reach it
                try:
                    session.close()
                except Exception as e:
                    logger.warning(f"Error while closing cleared session: {e}")

            duration_ms = (time.perf_counter() - started) * 1000
            self.reporter.end_test(status.value)

        return VariantOutcome(
            variant=variant,
            status=status,
            error=error,
            duration_ms=duration_ms,
            execution_id=execution_id,
        )

    def _variant_context(self) -> Tuple[WorkerContext, bool]:
        """
        Context a single variant run registers its session in.

        The calling thread's registry context is used unless it already
        holds a session; that session belongs to the caller, so the run
        gets a detached context instead.

        Returns:
            (context, detached) where detached is True for a context the
            registry does not track
        """
        context = self.registry.context()
        if context.session is None:
            return context, False
        logger.debug(
            f"Worker {context.worker_id} already owns a {context.session.variant.display_name} "
            f"session; running in a detached context"
        )
        return WorkerContext(context.worker_id), True

    def _capture_failure_screenshot(
        self,
        variant: BrowserVariant,
        session: Optional[SessionHandle],
    ) -> None:
        if session is None or session.closed or not variant.supports_screenshots:
            return
        try:
            png = session.take_screenshot()
        except Exception as e:
            logger.warning(f"Failed to capture screenshot for {variant.display_name}: {e}")
            return
        self.reporter.attach_screenshot(f"{variant.key}_failure", png)


__all__ = [
    "CrossBrowserExecutor",
    "Procedure",
]
