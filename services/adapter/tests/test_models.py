"""
Where: services/adapter/tests/test_models.py
What: Tests for the proxy event models, header dictionary and processing context.
Why: These types carry every invocation; their tolerance and cleanup rules matter.
"""

import io

import pytest
from pydantic import ValidationError

from services.adapter.models.aws_v1 import APIGatewayProxyRequest, APIGatewayProxyResponse
from services.adapter.models.context import ProcessingContext
from services.adapter.models.features import (
    HeaderDictionary,
    HttpRequestFeatures,
    HttpResponseFeatures,
)


class TestAPIGatewayProxyRequestModel:
    def test_all_fields_optional(self):
        event = APIGatewayProxyRequest.model_validate({})

        assert event.httpMethod is None
        assert event.isBase64Encoded is False

    def test_unknown_fields_are_ignored(self):
        event = APIGatewayProxyRequest.model_validate({"path": "/", "version": "1.0"})

        assert event.path == "/"

    def test_model_is_immutable(self):
        event = APIGatewayProxyRequest(path="/a")

        with pytest.raises(ValidationError):
            event.path = "/b"

    def test_query_parameter_order_is_preserved(self):
        event = APIGatewayProxyRequest.model_validate(
            {"queryStringParameters": {"z": "1", "a": "2", "m": "3"}}
        )

        assert list(event.queryStringParameters) == ["z", "a", "m"]

    def test_nested_request_context(self):
        event = APIGatewayProxyRequest.model_validate(
            {"requestContext": {"apiId": "abc", "stage": "dev", "identity": {"sourceIp": "1.2.3.4"}}}
        )

        assert event.requestContext.apiId == "abc"
        assert event.requestContext.identity.sourceIp == "1.2.3.4"


def test_proxy_response_requires_status_code():
    with pytest.raises(ValidationError):
        APIGatewayProxyResponse()


class TestHeaderDictionary:
    def test_case_insensitive_lookup_keeps_first_casing(self):
        headers = HeaderDictionary()
        headers["Content-Type"] = "text/plain"
        headers["content-type"] = "application/json"

        assert headers["CONTENT-TYPE"] == ["application/json"]
        assert list(headers) == ["Content-Type"]

    def test_append_keeps_existing_values(self):
        headers = HeaderDictionary({"Set-Cookie": ["a=1"]})
        headers.append("set-cookie", "b=2")
        headers.append("Vary", "Accept")

        assert headers["Set-Cookie"] == ["a=1", "b=2"]
        assert headers["Vary"] == ["Accept"]

    def test_get_first_and_delete(self):
        headers = HeaderDictionary({"Host": ["example.com"]})

        assert headers.get_first("host") == "example.com"
        assert headers.get_first("missing") is None

        del headers["HOST"]
        assert "Host" not in headers
        assert len(headers) == 0


class TestProcessingContext:
    def test_close_runs_registered_callbacks_once(self):
        calls = []
        context = ProcessingContext(HttpRequestFeatures())
        context.call_on_close(calls.append, "released")

        context.close()
        context.close()

        assert calls == ["released"]
        assert context.closed is True

    def test_context_manager_releases_streams_on_error(self):
        request = HttpRequestFeatures(body=io.BytesIO(b"payload"))
        response = HttpResponseFeatures()

        with pytest.raises(RuntimeError):
            with ProcessingContext(request, response) as context:
                context.response.write(b"partial")
                raise RuntimeError("boom")

        assert context.closed is True
        assert request.body.closed is True
        assert response.body.closed is True

    def test_enter_resource_is_exited_on_close(self):
        handle = io.BytesIO(b"temp")
        context = ProcessingContext(HttpRequestFeatures())

        assert context.enter_resource(handle) is handle
        context.close()

        assert handle.closed is True
