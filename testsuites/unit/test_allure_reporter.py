from contextlib import contextmanager

import pytest

from crossbrowser_tools.report_tools import allure_utils
from crossbrowser_tools.report_tools.allure_utils import AllureReporter, LoguruReporter, rows_to_csv


@pytest.fixture
def allure_calls(monkeypatch):
    calls = []

    def fake_attach(body, name=None, attachment_type=None, extension=None):
        calls.append(("attach", name, attachment_type, body))

    @contextmanager
    def fake_step(title):
        calls.append(("enter", title))
        yield
        calls.append(("exit", title))

    monkeypatch.setattr(allure_utils.allure, "attach", fake_attach)
    monkeypatch.setattr(allure_utils.allure, "step", fake_step)
    return calls


def test_allure_reporter_wraps_variant_in_step(allure_calls):
    reporter = AllureReporter()

    reporter.start_test("Cross-browser run on Google Chrome")
    reporter.log("info", "Running on Google Chrome")
    reporter.attach_screenshot("chrome_failure", b"\x89PNG")
    reporter.end_test("failed")

    kinds = [(call[0], call[1]) for call in allure_calls]
    assert kinds == [
        ("enter", "Cross-browser run on Google Chrome"),
        ("attach", "INFO"),
        ("attach", "chrome_failure"),
        ("attach", "Status"),
        ("exit", "Cross-browser run on Google Chrome"),
    ]
    assert allure_calls[2][2] == allure_utils.allure.attachment_type.PNG


def test_allure_reporter_attaches_tables_as_csv(allure_calls):
    AllureReporter().attach_table("Matrix", [["Browser", "Status"], ["Safari", "FAIL"]])

    _, name, attachment_type, body = allure_calls[0]
    assert name == "Matrix"
    assert attachment_type == allure_utils.allure.attachment_type.CSV
    assert body == "Browser,Status\nSafari,FAIL\n"


def test_end_without_start_is_ignored(allure_calls, log_messages):
    AllureReporter().end_test("passed")

    assert allure_calls == []
    assert any("without a matching start_test" in message for message in log_messages)


def test_loguru_reporter_logs_lifecycle(log_messages):
    reporter = LoguruReporter()

    reporter.start_test("run on Firefox")
    reporter.log("warning", "slow page")
    reporter.attach_screenshot("firefox_failure", b"1234")
    reporter.end_test("passed")

    assert log_messages == [
        "▶ Starting: run on Firefox",
        "slow page",
        "📸 Screenshot captured: firefox_failure (4 bytes)",
        "■ Finished with status: passed",
    ]


def test_rows_to_csv_quotes_and_blanks():
    assert rows_to_csv([["a,b", None], ["x", 1]]) == '"a,b",\nx,1\n'
