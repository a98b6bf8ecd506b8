"""
================================================================================
Allure Report Utilities
================================================================================

Reporter sinks for cross-browser runs plus Allure attachment helpers.

Features:
- ReporterSink protocol (start/log/attach/end per variant run)
- LoguruReporter: default sink, writes everything to the log
- AllureReporter: steps and attachments in the Allure report
- Custom attachment helpers

================================================================================
"""

import csv
import io
import threading
from contextlib import ExitStack
from typing import Any, Dict, List, Protocol, Sequence

import allure
from loguru import logger


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_png(png: bytes, name: str = "Screenshot"):
    """
    Attach a PNG screenshot to Allure report.

    Args:
        png: Raw PNG bytes
        name: Attachment name
    """
    allure.attach(
        png,
        name=name,
        attachment_type=allure.attachment_type.PNG
    )


def attach_table(rows: Sequence[Sequence[Any]], name: str = "Table"):
    """
    Attach tabular data as CSV.

    Args:
        rows: Header row followed by data rows
        name: Attachment name
    """
    allure.attach(
        rows_to_csv(rows),
        name=name,
        attachment_type=allure.attachment_type.CSV
    )


def rows_to_csv(rows: Sequence[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for row in rows:
        writer.writerow(["" if cell is None else cell for cell in row])
    return buffer.getvalue()


# ================================================================================
# Reporter Sinks
# ================================================================================

class ReporterSink(Protocol):
    """
    Receives the lifecycle of each variant run.

    start_test and end_test bracket one variant; log, attach_screenshot and
    attach_table may be called in between or, for run-level artifacts,
    after the last variant.
    """

    def start_test(self, name: str) -> None: ...

    def log(self, level: str, message: str) -> None: ...

    def attach_screenshot(self, name: str, png: bytes) -> None: ...

    def attach_table(self, title: str, rows: Sequence[Sequence[Any]]) -> None: ...

    def end_test(self, status: str) -> None: ...


class LoguruReporter:
    """Default sink: everything goes to the loguru log."""

    def start_test(self, name: str) -> None:
        logger.info(f"▶ Starting: {name}")

    def log(self, level: str, message: str) -> None:
        logger.log(level.upper(), message)

    def attach_screenshot(self, name: str, png: bytes) -> None:
        logger.info(f"📸 Screenshot captured: {name} ({len(png)} bytes)")

    def attach_table(self, title: str, rows: Sequence[Sequence[Any]]) -> None:
        logger.info(f"{title}\n{rows_to_csv(rows)}")

    def end_test(self, status: str) -> None:
        logger.info(f"■ Finished with status: {status}")


class AllureReporter:
    """
    Maps each variant run to an Allure step.

    Open steps are tracked per thread, so one reporter can serve parallel
    workers. Log entries become text attachments inside the open step.

    Usage:
        executor = CrossBrowserExecutor(reporter=AllureReporter())
    """

    def __init__(self) -> None:
        self._steps: Dict[int, List[ExitStack]] = {}
        self._lock = threading.Lock()

    def start_test(self, name: str) -> None:
        stack = ExitStack()
        stack.enter_context(allure.step(name))
        with self._lock:
            self._steps.setdefault(threading.get_ident(), []).append(stack)

    def log(self, level: str, message: str) -> None:
        logger.log(level.upper(), message)
        attach_text(message, name=level.upper())

    def attach_screenshot(self, name: str, png: bytes) -> None:
        attach_png(png, name=name)

    def attach_table(self, title: str, rows: Sequence[Sequence[Any]]) -> None:
        attach_table(rows, name=title)

    def end_test(self, status: str) -> None:
        with self._lock:
            open_steps = self._steps.get(threading.get_ident())
            stack = open_steps.pop() if open_steps else None
        if stack is None:
            logger.warning("end_test called without a matching start_test")
            return
        attach_text(status, name="Status")
        stack.close()


__all__ = [
    "attach_text",
    "attach_png",
    "attach_table",
    "rows_to_csv",
    "ReporterSink",
    "LoguruReporter",
    "AllureReporter",
]
