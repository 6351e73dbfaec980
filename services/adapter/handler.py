"""
Where: services/adapter/handler.py
What: Lambda entrypoint that serves an ASGI application behind API Gateway.
Why: Wire configuration, the encoding policy and the dispatcher together once
     per cold start and reuse them across warm invocations.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from .config import AdapterConfig
from .core.encoding import EncodingPolicy, ResponseContentEncoding
from .core.logging_config import setup_logging
from .services.asgi_processor import ASGIApp, AsgiProcessor
from .services.dispatcher import InvocationDispatcher

logger = logging.getLogger("adapter.handler")


class ProxyFunction:
    """
    API Gateway proxy Lambda function backed by an ASGI application.

    Either pass the application directly or subclass and override init():

        class Function(ProxyFunction):
            def init(self):
                from app.main import app
                return app

        handler = Function()
    """

    def __init__(
        self,
        app: Optional[ASGIApp] = None,
        config: Optional[AdapterConfig] = None,
        configure_logging: bool = True,
    ):
        self.config = config if config is not None else AdapterConfig()
        if configure_logging:
            setup_logging(self.config.LOG_CONFIG_PATH)
        self.app = app if app is not None else self.init()
        self.encoding_policy = EncodingPolicy.from_config(self.config)
        self.dispatcher = InvocationDispatcher.from_config(
            AsgiProcessor(self.app), self.config, self.encoding_policy
        )
        logger.info(
            "Proxy function initialized",
            extra={
                "default_encoding": self.encoding_policy.default_encoding.value,
                "rethrow_unhandled_error": self.config.RETHROW_UNHANDLED_ERROR,
            },
        )
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def init(self) -> ASGIApp:
        """Return the ASGI application to serve. Override in subclasses."""
        raise NotImplementedError("Pass an ASGI app or override ProxyFunction.init()")

    @property
    def default_response_content_encoding(self) -> ResponseContentEncoding:
        return self.encoding_policy.default_encoding

    @default_response_content_encoding.setter
    def default_response_content_encoding(self, encoding: ResponseContentEncoding) -> None:
        self.encoding_policy.default_encoding = ResponseContentEncoding(encoding)

    def register_response_content_encoding(
        self, content_type: str, encoding: ResponseContentEncoding
    ) -> None:
        """
        Register how responses of `content_type` are encoded.

        Call during startup only; binary types must also be registered as
        binary media types on the API Gateway.
        """
        self.encoding_policy.register(content_type, encoding)

    async def function_handler_async(
        self, event: Dict[str, Any], lambda_context: Any
    ) -> Dict[str, Any]:
        response = await self.dispatcher.dispatch(event, lambda_context)
        return response.model_dump(exclude_none=True)

    def __call__(self, event: Dict[str, Any], lambda_context: Any) -> Dict[str, Any]:
        # One loop per execution environment; Lambda runs one invocation at a time.
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
        return self._loop.run_until_complete(self.function_handler_async(event, lambda_context))

    def close(self) -> None:
        if self._loop is not None and not self._loop.is_closed():
            self._loop.close()
