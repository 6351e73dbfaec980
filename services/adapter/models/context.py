"""
Processing context model.

Per-invocation resource scope handed to the processor.
"""

import logging
from contextlib import ExitStack
from typing import Any, Callable, Dict, Optional

from .features import HttpRequestFeatures, HttpResponseFeatures

logger = logging.getLogger("adapter.context")

# Keys under which correlation metadata is exposed in ProcessingContext.items.
LAMBDA_CONTEXT = "LambdaContext"
APIGATEWAY_REQUEST = "APIGatewayRequest"


class ProcessingContext:
    """
    Request/response features plus correlation metadata for one invocation.

    Use as a context manager: resources registered on the context (the
    response body buffer, handles opened by the processor) are released
    exactly once when the scope exits, on every exit path.
    """

    def __init__(
        self,
        request: HttpRequestFeatures,
        response: Optional[HttpResponseFeatures] = None,
    ):
        self.request = request
        self.response = response if response is not None else HttpResponseFeatures()
        self.items: Dict[str, Any] = {}
        self._resources = ExitStack()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def enter_resource(self, resource):
        """Enter a context manager whose exit is tied to this context."""
        return self._resources.enter_context(resource)

    def call_on_close(self, callback: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self._resources.callback(callback, *args, **kwargs)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._resources.close()
        finally:
            if self.request.body is not None:
                self.request.body.close()
            if self.response.body is not None:
                self.response.body.close()
        logger.debug("Processing context released")

    def __enter__(self) -> "ProcessingContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
