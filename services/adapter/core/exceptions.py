"""
Adapter exception classes and failure classification.

Failures raised by the processor are converted into a tagged
InvocationOutcome instead of being handled by sequential except clauses.
"""

import logging
import traceback
from typing import List

from services.adapter.models.aws_v1 import APIGatewayProxyResponse
from services.adapter.models.result import (
    AggregateFailure,
    AssemblyLoadFailure,
    Failure,
    UnclassifiedFailure,
)

logger = logging.getLogger(__name__)


class ProxyAdapterError(Exception):
    """Base exception class for the proxy adapter."""

    pass


class UnhandledInvocationError(ProxyAdapterError):
    """
    Raised in rethrow mode after the processing context has been released.

    Carries the already-built 500 response so custom error handling never
    has to marshal one itself.
    """

    def __init__(self, outcome: Failure, response: APIGatewayProxyResponse):
        self.outcome = outcome
        self.response = response
        super().__init__(f"Unhandled {outcome.error_type} while processing request")


def iter_exception_chain(exc: BaseException):
    """Yield exc and its explicit or implicit causes, outermost first."""
    seen = set()
    inner = exc
    while inner is not None and id(inner) not in seen:
        seen.add(id(inner))
        yield inner
        inner = inner.__cause__ or inner.__context__


def error_report(exc: BaseException) -> str:
    """
    Format an exception with every nested cause.

    The first entry carries the full traceback; each cause follows as its
    type name and message.
    """
    lines = [f"{type(exc).__name__}:", "".join(traceback.format_exception(exc)).rstrip()]
    for inner in iter_exception_chain(exc):
        lines.append(f"{type(inner).__name__}:\n{inner}")
    return "\n".join(lines) + "\n"


def missing_file_name(exc: BaseException):
    if isinstance(exc, ModuleNotFoundError) and exc.name:
        return exc.name
    if isinstance(exc, FileNotFoundError) and exc.filename:
        return exc.filename
    return None


def load_failure_reports(exc: ImportError) -> List[str]:
    reports = []
    for loader_exc in iter_exception_chain(exc):
        filename = missing_file_name(loader_exc)
        if filename:
            reports.append(f"Missing file: {filename}")
        else:
            reports.append(error_report(loader_exc))
    return reports


def classify_failure(exc: Exception) -> Failure:
    """Map an exception raised by the processor onto the failure taxonomy."""
    if isinstance(exc, BaseExceptionGroup):
        return AggregateFailure(exc, [error_report(inner) for inner in exc.exceptions])
    if isinstance(exc, ImportError):
        return AssemblyLoadFailure(exc, load_failure_reports(exc))
    return UnclassifiedFailure(exc, [error_report(exc)])


def log_failure(outcome: Failure, log: logging.Logger = logger) -> None:
    """Report a classified failure through logging."""
    if isinstance(outcome, AggregateFailure):
        log.error("Caught %s: '%s'", outcome.error_type, outcome.exception)
    elif isinstance(outcome, AssemblyLoadFailure):
        log.error("Caught %s: '%s'", outcome.error_type, outcome.exception)
    elif isinstance(outcome, UnclassifiedFailure):
        log.error("Unknown error responding to request: %s", outcome.exception)
    else:
        raise TypeError(f"Unexpected outcome: {outcome!r}")

    log.error(
        "\n".join(outcome.reports),
        extra={"error_type": outcome.error_type},
    )
