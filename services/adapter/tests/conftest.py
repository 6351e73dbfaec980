import base64
from typing import Any, Dict, Optional

import pytest

from services.common.core.request_context import clear_trace_id


@pytest.fixture(autouse=True)
def _clear_request_context():
    """Request/trace IDs are ContextVars; keep tests isolated."""
    clear_trace_id()
    yield
    clear_trace_id()


class FakeLambdaContext:
    """Minimal stand-in for the Lambda runtime context object."""

    def __init__(self, aws_request_id: str = "lambda-req-1"):
        self.aws_request_id = aws_request_id
        self.function_name = "proxy-function"
        self.memory_limit_in_mb = 128


def build_event(
    method: str = "GET",
    path: str = "/items",
    resource: Optional[str] = None,
    path_params: Optional[Dict[str, str]] = None,
    query_params: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
    body: Optional[Any] = None,
    is_base64: bool = False,
    api_id: Optional[str] = "x1",
    stage: Optional[str] = "prod",
    source_ip: Optional[str] = "203.0.113.10",
) -> Dict[str, Any]:
    """Build an API Gateway v1 proxy event the way API Gateway serializes it."""
    if isinstance(body, bytes):
        body = base64.b64encode(body).decode("ascii")
        is_base64 = True

    return {
        "resource": resource or path,
        "path": path,
        "httpMethod": method,
        "headers": headers,
        "queryStringParameters": query_params,
        "pathParameters": path_params,
        "stageVariables": None,
        "requestContext": {
            "apiId": api_id,
            "stage": stage,
            "requestId": "gw-req-1",
            "identity": {"sourceIp": source_ip, "userAgent": "pytest"},
        },
        "body": body,
        "isBase64Encoded": is_base64,
    }


@pytest.fixture
def lambda_context():
    return FakeLambdaContext()


@pytest.fixture
def make_event():
    return build_event
