"""
Where: services/adapter/services/asgi_processor.py
What: RequestProcessor that drives an ASGI application (FastAPI, Starlette).
Why: ASGI is the request-processing pipeline of Python web apps; this lets any
     of them sit behind the proxy adapter unchanged.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

from services.adapter.models.context import (
    APIGATEWAY_REQUEST,
    LAMBDA_CONTEXT,
    ProcessingContext,
)
from services.adapter.models.features import HttpRequestFeatures

logger = logging.getLogger("adapter.asgi")

Scope = Dict[str, Any]
Message = Dict[str, Any]
ASGIApp = Callable[
    [Scope, Callable[[], Awaitable[Message]], Callable[[Message], Awaitable[None]]],
    Awaitable[None],
]

DEFAULT_PORTS = {"http": 80, "https": 443}


def encode_headers(request: HttpRequestFeatures) -> List[Tuple[bytes, bytes]]:
    return [
        (name.lower().encode("latin-1"), value.encode("utf-8"))
        for name, values in request.headers.items()
        for value in values
    ]


def server_address(request: HttpRequestFeatures) -> Tuple[str, int]:
    host = request.headers.get_first("Host") or ""
    name, _, port = host.partition(":")
    if port.isdigit():
        return name, int(port)
    return name, DEFAULT_PORTS.get(request.scheme, 443)


def build_scope(context: ProcessingContext) -> Scope:
    """Build an ASGI 3 HTTP connection scope from the request features."""
    request = context.request
    client: Optional[Tuple[str, int]] = None
    if request.remote_address is not None:
        client = (str(request.remote_address), request.remote_port or 0)

    return {
        "type": "http",
        "asgi": {"version": "3.0", "spec_version": "2.3"},
        "http_version": request.protocol.rpartition("/")[2] or "1.1",
        "method": request.method,
        "scheme": request.scheme,
        "path": request.path,
        "raw_path": quote(request.path).encode("ascii"),
        "query_string": request.query_string.removeprefix("?").encode("ascii"),
        "root_path": request.path_base,
        "headers": encode_headers(request),
        "client": client,
        "server": server_address(request),
        "aws.event": context.items.get(APIGATEWAY_REQUEST),
        "aws.context": context.items.get(LAMBDA_CONTEXT),
    }


class AsgiProcessor:
    """
    Runs one ASGI HTTP cycle per processing context.

    Exceptions raised by the application propagate to the dispatcher, which
    owns failure containment. The application lifespan protocol is not run.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def process_request(self, context: ProcessingContext) -> None:
        scope = build_scope(context)
        response = context.response
        response_complete = asyncio.Event()
        pending: List[Message] = [
            {"type": "http.request", "body": context.request.read_body(), "more_body": False}
        ]

        async def receive() -> Message:
            if pending:
                return pending.pop(0)
            # Report the disconnect only once the response has been sent, so
            # streaming responses are not cut short.
            await response_complete.wait()
            return {"type": "http.disconnect"}

        async def send(message: Message) -> None:
            message_type = message["type"]
            if message_type == "http.response.start":
                if response.has_started:
                    raise RuntimeError("http.response.start sent twice")
                response.status_code = message["status"]
                for name, value in message.get("headers", []):
                    response.headers.append(name.decode("latin-1"), value.decode("latin-1"))
                response.has_started = True
            elif message_type == "http.response.body":
                if not response.has_started:
                    raise RuntimeError("http.response.body sent before http.response.start")
                response.write(message.get("body", b""))
                if not message.get("more_body", False):
                    response_complete.set()
            else:
                logger.debug("Ignoring ASGI message %s", message_type)

        context.call_on_close(response_complete.set)
        await self.app(scope, receive, send)
