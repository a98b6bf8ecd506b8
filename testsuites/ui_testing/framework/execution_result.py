"""
================================================================================
Execution Results
================================================================================

Outcome models for cross-browser runs.

    VariantOutcome   result of one procedure run on one variant
    ExecutionResult  ordered outcomes of a whole run, with statistics,
                     a summary report and the compatibility matrix

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .browser_variants import BrowserVariant


class ExecutionStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"


@dataclass(frozen=True)
class ErrorInfo:
    """
    Captured failure of a variant run.

    Attributes:
        error_type: Exception class name
        message: str(exception), or the class name when empty
        traceback: Formatted traceback text
    """
    error_type: str
    message: str
    traceback: str = ""

    @classmethod
    def from_exception(cls, error: BaseException) -> "ErrorInfo":
        return cls(
            error_type=type(error).__name__,
            message=str(error) or type(error).__name__,
            traceback="".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ),
        )


@dataclass(frozen=True)
class VariantOutcome:
    """Result of running the procedure against one variant."""
    variant: BrowserVariant
    status: ExecutionStatus
    error: Optional[ErrorInfo] = None
    duration_ms: float = 0.0
    execution_id: str = ""

    @property
    def passed(self) -> bool:
        return self.status == ExecutionStatus.PASSED

    @property
    def status_string(self) -> str:
        return "PASS" if self.passed else "FAIL"

    @property
    def error_message(self) -> str:
        if self.error is not None:
            return self.error.message
        return "N/A" if self.passed else "Unknown error"


@dataclass
class ExecutionResult:
    """
    Aggregate of a cross-browser run, in input order.

    Usage:
        >>> result = executor.run_across_variants([CHROME, FIREFOX], procedure)
        >>> result.pass_count, result.fail_count
        (2, 0)
        >>> print(result.compatibility_matrix())
    """
    name: str = "cross-browser run"
    outcomes: List[VariantOutcome] = field(default_factory=list)

    def add(self, outcome: VariantOutcome) -> None:
        self.outcomes.append(outcome)

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self):
        return iter(self.outcomes)

    @property
    def total_count(self) -> int:
        return len(self.outcomes)

    @property
    def pass_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.passed)

    @property
    def fail_count(self) -> int:
        return self.total_count - self.pass_count

    @property
    def success_rate(self) -> float:
        """Pass percentage (0.0 for an empty run)."""
        if self.total_count == 0:
            return 0.0
        return self.pass_count / self.total_count * 100.0

    def all_passed(self) -> bool:
        """True when at least one variant ran and none failed."""
        return self.fail_count == 0 and self.pass_count > 0

    def any_failed(self) -> bool:
        return self.fail_count > 0

    def passed_variants(self) -> List[BrowserVariant]:
        return [outcome.variant for outcome in self.outcomes if outcome.passed]

    def failed_variants(self) -> List[BrowserVariant]:
        return [outcome.variant for outcome in self.outcomes if not outcome.passed]

    def summary_report(self) -> str:
        """Human-readable pass/fail summary."""
        lines = [
            "Cross-Browser Execution Summary:",
            "================================",
            f"Total Browsers: {self.total_count}",
            f"Passed: {self.pass_count}",
            f"Failed: {self.fail_count}",
            f"Success Rate: {self.success_rate:.1f}%",
            "",
        ]

        if self.pass_count:
            lines.append("Passed Browsers:")
            lines.extend(f"  ✓ {variant.display_name}" for variant in self.passed_variants())
            lines.append("")

        if self.fail_count:
            lines.append("Failed Browsers:")
            for outcome in self.outcomes:
                if not outcome.passed:
                    lines.append(f"  ✗ {outcome.variant.display_name} - {outcome.error_message}")

        return "\n".join(lines)

    def compatibility_matrix(self) -> str:
        """
        Markdown table, one row per variant in input order.

        Contains no timestamps or durations, so the same result always
        renders to the same string.
        """
        header = ["Browser", "Key", "Status", "Headless", "Screenshots", "Downloads", "Error"]
        rows = [
            [
                outcome.variant.display_name,
                outcome.variant.key,
                outcome.status_string,
                _flag(outcome.variant.supports_headless),
                _flag(outcome.variant.supports_screenshots),
                _flag(outcome.variant.supports_downloads),
                "" if outcome.passed else _cell(outcome.error_message),
            ]
            for outcome in self.outcomes
        ]

        widths = [
            max([len(header[i])] + [len(row[i]) for row in rows])
            for i in range(len(header))
        ]

        def render(cells: List[str]) -> str:
            return "| " + " | ".join(c.ljust(w) for c, w in zip(cells, widths)) + " |"

        lines = [
            f"## Browser Compatibility Matrix: {self.name}",
            "",
            render(header),
            "|" + "|".join("-" * (w + 2) for w in widths) + "|",
        ]
        lines.extend(render(row) for row in rows)
        lines.append("")
        lines.append(
            f"**{self.pass_count}/{self.total_count} passed** "
            f"({self.success_rate:.1f}%)"
        )
        return "\n".join(lines) + "\n"

    def table_rows(self) -> List[List[str]]:
        """Header plus one row per outcome, for tabular reporter sinks."""
        rows = [["Browser", "Status", "Duration (ms)", "Error"]]
        for outcome in self.outcomes:
            rows.append([
                outcome.variant.display_name,
                outcome.status_string,
                f"{outcome.duration_ms:.0f}",
                "" if outcome.passed else outcome.error_message,
            ])
        return rows

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "total": self.total_count,
            "passed": self.pass_count,
            "failed": self.fail_count,
            "success_rate": f"{self.success_rate:.1f}%",
            "outcomes": [
                {
                    "browser": outcome.variant.key,
                    "status": outcome.status.value,
                    "duration_ms": round(outcome.duration_ms, 1),
                    "execution_id": outcome.execution_id,
                    "error": outcome.error.message if outcome.error else None,
                }
                for outcome in self.outcomes
            ],
        }

    def __str__(self) -> str:
        return (
            f"ExecutionResult(total={self.total_count}, passed={self.pass_count}, "
            f"failed={self.fail_count}, success_rate={self.success_rate:.1f}%)"
        )


def _flag(value: bool) -> str:
    return "yes" if value else "no"


def _cell(text: str) -> str:
    """Single-line, pipe-safe table cell."""
    first_line = text.strip().splitlines()[0] if text.strip() else ""
    return first_line.replace("|", "\\|")


__all__ = [
    "ExecutionStatus",
    "ErrorInfo",
    "VariantOutcome",
    "ExecutionResult",
]
