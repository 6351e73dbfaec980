"""
Where: services/adapter/tests/test_exceptions.py
What: Tests for failure classification and error reports.
Why: Every processor failure must land in exactly one outcome variant with a full report.
"""

import logging

import pytest

from services.adapter.core.exceptions import (
    UnhandledInvocationError,
    classify_failure,
    error_report,
    log_failure,
)
from services.adapter.models.aws_v1 import APIGatewayProxyResponse
from services.adapter.models.result import (
    AggregateFailure,
    AssemblyLoadFailure,
    Success,
    UnclassifiedFailure,
)


def _raise_chained():
    try:
        try:
            raise KeyError("inner-key")
        except KeyError as e:
            raise ValueError("middle") from e
    except ValueError as e:
        raise RuntimeError("outer") from e


def test_error_report_includes_cause_chain():
    with pytest.raises(RuntimeError) as exc_info:
        _raise_chained()

    report = error_report(exc_info.value)

    assert report.startswith("RuntimeError:\n")
    assert "Traceback" in report
    assert "RuntimeError:\nouter" in report
    assert "ValueError:\nmiddle" in report
    assert "KeyError:\n'inner-key'" in report


def test_exception_group_is_aggregate_failure():
    group = ExceptionGroup("several", [ValueError("a"), TypeError("b")])

    outcome = classify_failure(group)

    assert isinstance(outcome, AggregateFailure)
    assert outcome.error_type == "ExceptionGroup"
    assert len(outcome.reports) == 2
    assert outcome.reports[0].startswith("ValueError:")
    assert outcome.reports[1].startswith("TypeError:")


def test_missing_module_is_reported_by_name():
    outcome = classify_failure(ModuleNotFoundError("No module named 'pandas'", name="pandas"))

    assert isinstance(outcome, AssemblyLoadFailure)
    assert outcome.error_type == "ModuleNotFoundError"
    assert outcome.reports == ["Missing file: pandas"]


def test_import_error_caused_by_missing_file():
    try:
        try:
            raise FileNotFoundError(2, "No such file or directory", "/opt/lib/libnative.so")
        except FileNotFoundError as e:
            raise ImportError("cannot load native extension") from e
    except ImportError as e:
        outcome = classify_failure(e)

    assert isinstance(outcome, AssemblyLoadFailure)
    assert len(outcome.reports) == 2
    assert outcome.reports[0].startswith("ImportError:")
    assert outcome.reports[1] == "Missing file: /opt/lib/libnative.so"


def test_import_error_without_file_is_reported_generically():
    outcome = classify_failure(ImportError("cannot import name 'x' from 'y'"))

    assert isinstance(outcome, AssemblyLoadFailure)
    assert outcome.reports[0].startswith("ImportError:")
    assert "cannot import name" in outcome.reports[0]


def test_other_exceptions_are_unclassified():
    outcome = classify_failure(ZeroDivisionError("division by zero"))

    assert isinstance(outcome, UnclassifiedFailure)
    assert outcome.error_type == "ZeroDivisionError"
    assert "division by zero" in outcome.reports[0]


def test_success_has_no_error_type():
    assert Success().error_type is None


def test_log_failure_reports_each_inner_failure(caplog):
    caplog.set_level(logging.ERROR, logger="adapter.test")
    outcome = classify_failure(ExceptionGroup("several", [ValueError("first"), KeyError("second")]))

    log_failure(outcome, logging.getLogger("adapter.test"))

    messages = [record.getMessage() for record in caplog.records]
    assert any(m.startswith("Caught ExceptionGroup") for m in messages)
    assert any("first" in m and "second" in m for m in messages)


def test_log_failure_rejects_success():
    with pytest.raises(TypeError):
        log_failure(Success())


def test_unhandled_invocation_error_carries_response():
    original = RuntimeError("boom")
    outcome = classify_failure(original)
    response = APIGatewayProxyResponse(statusCode=500, headers={"ErrorType": "RuntimeError"})

    error = UnhandledInvocationError(outcome, response)

    assert error.response is response
    assert error.outcome.exception is original
    assert "RuntimeError" in str(error)
