"""
Invocation Dispatcher - Service Layer

Standardizes the flow: proxy event -> HttpRequestFeatures -> processor ->
HttpResponseFeatures -> proxy response, containing processor failures.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from services.common.core.request_context import (
    clear_trace_id,
    generate_request_id,
    set_request_id,
    set_trace_id,
)
from services.adapter.core.encoding import EncodingPolicy
from services.adapter.core.exceptions import (
    UnhandledInvocationError,
    classify_failure,
    log_failure,
)
from services.adapter.core.request_marshaller import RequestMarshaller
from services.adapter.core.response_marshaller import ResponseMarshaller
from services.adapter.models.aws_v1 import APIGatewayProxyRequest, APIGatewayProxyResponse
from services.adapter.models.context import (
    APIGATEWAY_REQUEST,
    LAMBDA_CONTEXT,
    ProcessingContext,
)
from services.adapter.models.features import HttpRequestFeatures
from services.adapter.models.result import (
    AggregateFailure,
    AssemblyLoadFailure,
    InvocationOutcome,
    Success,
    UnclassifiedFailure,
)
from services.adapter.services.processor import RequestProcessor

logger = logging.getLogger("adapter.dispatcher")

TRACE_ID_HEADER = "x-amzn-trace-id"
ERROR_TYPE_HEADER = "ErrorType"


@dataclass(frozen=True)
class DispatchResult:
    """Proxy response together with the classified outcome that produced it."""

    response: APIGatewayProxyResponse
    outcome: InvocationOutcome

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, Success)


def _bind_request_context(event: APIGatewayProxyRequest, lambda_context: Any) -> None:
    request_id = getattr(lambda_context, "aws_request_id", None)
    if not request_id and event.requestContext is not None:
        request_id = event.requestContext.requestId
    if request_id:
        set_request_id(request_id)
    else:
        generate_request_id()

    trace_header = None
    for key, value in (event.headers or {}).items():
        if key.lower() == TRACE_ID_HEADER and value:
            trace_header = value
            break
    trace_header = trace_header or os.environ.get("_X_AMZN_TRACE_ID")
    if trace_header:
        set_trace_id(trace_header)


class InvocationDispatcher:
    """
    Orchestrates one proxy invocation.

    Building -> Processing -> (Succeeded | Faulted) -> Finalizing -> Done.
    The processing context is released exactly once on every path. A
    response is always built; in rethrow mode it travels on the raised
    UnhandledInvocationError.
    """

    def __init__(
        self,
        processor: RequestProcessor,
        request_marshaller: Optional[RequestMarshaller] = None,
        response_marshaller: Optional[ResponseMarshaller] = None,
        rethrow_unhandled_error: bool = False,
        default_status_code: int = 200,
    ):
        self.processor = processor
        self.request_marshaller = request_marshaller or RequestMarshaller()
        self.response_marshaller = response_marshaller or ResponseMarshaller()
        self.rethrow_unhandled_error = rethrow_unhandled_error
        self.default_status_code = default_status_code

    @classmethod
    def from_config(
        cls,
        processor: RequestProcessor,
        config,
        encoding_policy: Optional[EncodingPolicy] = None,
    ) -> "InvocationDispatcher":
        policy = encoding_policy or EncodingPolicy.from_config(config)
        return cls(
            processor,
            response_marshaller=ResponseMarshaller(policy),
            rethrow_unhandled_error=config.RETHROW_UNHANDLED_ERROR,
            default_status_code=config.DEFAULT_STATUS_CODE,
        )

    @property
    def encoding_policy(self) -> EncodingPolicy:
        return self.response_marshaller.encoding_policy

    def create_context(
        self,
        features: HttpRequestFeatures,
        event: APIGatewayProxyRequest,
        lambda_context: Any = None,
    ) -> ProcessingContext:
        context = ProcessingContext(features)
        # Expose the Lambda objects to the application behind the processor.
        context.items[LAMBDA_CONTEXT] = lambda_context
        context.items[APIGATEWAY_REQUEST] = event
        return context

    async def process_request(self, context: ProcessingContext) -> InvocationOutcome:
        """Invoke the processor and classify whatever it raises."""
        try:
            await self.processor.process_request(context)
        except Exception as e:
            outcome = classify_failure(e)
            log_failure(outcome, logger)
            return outcome
        return Success()

    def build_response(
        self, context: ProcessingContext, outcome: InvocationOutcome
    ) -> APIGatewayProxyResponse:
        if isinstance(outcome, Success):
            status_code_if_unset = self.default_status_code
        elif isinstance(outcome, (AggregateFailure, AssemblyLoadFailure, UnclassifiedFailure)):
            status_code_if_unset = 500
        else:
            raise TypeError(f"Unexpected outcome: {outcome!r}")

        response = self.response_marshaller.marshal(context.response, status_code_if_unset)
        if outcome.error_type is not None:
            response.headers[ERROR_TYPE_HEADER] = outcome.error_type

        logger.info(f"Response Base 64 Encoded: {response.isBase64Encoded}")
        return response

    async def invoke(
        self,
        event: Union[APIGatewayProxyRequest, Dict[str, Any]],
        lambda_context: Any = None,
    ) -> DispatchResult:
        """
        Run one invocation and return the response with its outcome.

        Request marshalling errors (schema violations, a malformed
        X-Forwarded-Port header, an invalid Base64 body) are not contained.
        """
        if not isinstance(event, APIGatewayProxyRequest):
            event = APIGatewayProxyRequest.model_validate(event)

        _bind_request_context(event, lambda_context)
        try:
            logger.info(f"Incoming {event.httpMethod} requests to {event.path}")
            features = self.request_marshaller.build(event)

            with self.create_context(features, event, lambda_context) as context:
                outcome = await self.process_request(context)
                response = self.build_response(context, outcome)
        finally:
            clear_trace_id()

        if self.rethrow_unhandled_error and not isinstance(outcome, Success):
            raise UnhandledInvocationError(outcome, response) from outcome.exception

        return DispatchResult(response=response, outcome=outcome)

    async def dispatch(
        self,
        event: Union[APIGatewayProxyRequest, Dict[str, Any]],
        lambda_context: Any = None,
    ) -> APIGatewayProxyResponse:
        result = await self.invoke(event, lambda_context)
        return result.response
