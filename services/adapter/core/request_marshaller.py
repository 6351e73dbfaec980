"""
Where: services/adapter/core/request_marshaller.py
What: Convert an API Gateway v1 proxy event into HttpRequestFeatures.
Why: The processor only understands generic HTTP features; the gateway hands
     us path templates, a parameter dictionary instead of a query string, and
     a possibly Base64-wrapped body.
"""

import base64
import io
import ipaddress
import logging
from typing import Any, Dict, Optional, Union
from urllib.parse import quote_plus, unquote_plus

from services.adapter.models.aws_v1 import APIGatewayProxyRequest
from services.adapter.models.features import HttpRequestFeatures

logger = logging.getLogger("adapter.request_marshaller")

PROXY_PLACEHOLDER = "{proxy+}"
FORWARDED_PORT_HEADER = "X-Forwarded-Port"


def resolve_path(event: APIGatewayProxyRequest) -> str:
    """
    Rebuild the request path.

    A greedy `{proxy+}` resource is re-expanded from the matched `proxy` path
    parameter; otherwise the concrete path of the event is used.
    """
    path = None
    path_params = event.pathParameters
    if path_params is not None and "proxy" in path_params:
        path = (event.resource or "").replace(PROXY_PLACEHOLDER, path_params["proxy"] or "")

    if not path:
        path = event.path or ""

    if not path.startswith("/"):
        path = "/" + path

    return unquote_plus(path)


def build_query_string(query_params: Optional[Dict[str, Optional[str]]]) -> str:
    """
    Reassemble the query string in the order API Gateway delivered the keys.

    Returns "" when the event carried no query parameters at all.
    """
    if query_params is None:
        return ""

    pairs = [
        f"{quote_plus(key)}={quote_plus(value if value is not None else '')}"
        for key, value in query_params.items()
    ]
    return "?" + "&".join(pairs)


def decode_body(event: APIGatewayProxyRequest) -> Optional[bytes]:
    if not event.body:
        return None
    if event.isBase64Encoded:
        # Whitespace is tolerated; any other non-alphabet character is an error.
        return base64.b64decode("".join(event.body.split()), validate=True)
    return event.body.encode("utf-8")


def parse_source_ip(event: APIGatewayProxyRequest):
    """Return the caller IP as an ipaddress object, or None when absent/invalid."""
    request_context = event.requestContext
    if request_context is None or request_context.identity is None:
        return None

    source_ip = request_context.identity.sourceIp
    if not source_ip:
        return None

    try:
        return ipaddress.ip_address(source_ip)
    except ValueError:
        logger.debug("Ignoring unparsable sourceIp %r", source_ip)
        return None


class RequestMarshaller:
    """API Gateway v1 proxy event -> HttpRequestFeatures."""

    scheme = "https"

    def build(self, event: Union[APIGatewayProxyRequest, Dict[str, Any]]) -> HttpRequestFeatures:
        features = HttpRequestFeatures()
        self.marshal(features, event)
        return features

    def marshal(
        self,
        features: HttpRequestFeatures,
        event: Union[APIGatewayProxyRequest, Dict[str, Any]],
    ) -> None:
        """
        Populate `features` from `event` in place.

        Malformed input is tolerated with defaults, except a non-numeric
        X-Forwarded-Port header which raises ValueError: it means the
        upstream gateway is misconfigured.
        """
        if not isinstance(event, APIGatewayProxyRequest):
            event = APIGatewayProxyRequest.model_validate(event)

        features.scheme = self.scheme
        features.method = event.httpMethod or features.method
        features.path = resolve_path(event)
        features.query_string = build_query_string(event.queryStringParameters)

        if event.headers:
            for key, value in event.headers.items():
                if value is None:
                    continue
                features.headers[key] = value

        if "Host" not in features.headers:
            request_context = event.requestContext
            api_id = (request_context.apiId if request_context else None) or ""
            stage = (request_context.stage if request_context else None) or ""
            features.headers["Host"] = f"apigateway-{api_id}-{stage}"

        body = decode_body(event)
        if body is not None:
            features.body = io.BytesIO(body)

        remote_address = parse_source_ip(event)
        if remote_address is not None:
            features.remote_address = remote_address

        forwarded_port = features.headers.get_first(FORWARDED_PORT_HEADER)
        if forwarded_port is not None:
            features.remote_port = int(forwarded_port)

        logger.debug(
            "Marshalled request",
            extra={
                "method": features.method,
                "path": features.path,
                "query_string": features.query_string,
                "body_size": len(body) if body is not None else 0,
            },
        )
