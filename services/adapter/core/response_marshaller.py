"""
Where: services/adapter/core/response_marshaller.py
What: Convert HttpResponseFeatures into the API Gateway v1 proxy response.
Why: API Gateway expects single-valued headers and a string body; binary
     content has to be Base64-wrapped according to the EncodingPolicy.
"""

import base64
import logging
from typing import Dict, Optional

from services.adapter.core.encoding import EncodingPolicy, ResponseContentEncoding
from services.adapter.models.aws_v1 import APIGatewayProxyResponse
from services.adapter.models.features import HttpResponseFeatures

logger = logging.getLogger("adapter.response_marshaller")

CONTENT_TYPE_HEADER = "content-type"


class ResponseMarshaller:
    """HttpResponseFeatures -> API Gateway v1 proxy response."""

    def __init__(self, encoding_policy: Optional[EncodingPolicy] = None):
        self.encoding_policy = encoding_policy if encoding_policy is not None else EncodingPolicy()

    def marshal(
        self, features: HttpResponseFeatures, status_code_if_unset: int = 200
    ) -> APIGatewayProxyResponse:
        """
        Build the proxy response.

        `status_code_if_unset` applies when the processor left the status at 0,
        which some pipelines do on success.
        """
        status_code = features.status_code if features.status_code != 0 else status_code_if_unset

        headers: Dict[str, str] = {}
        content_type = None
        for key, values in features.headers.items():
            if len(values) == 1:
                headers[key] = values[0]
            else:
                headers[key] = ",".join(values)

            # Remember the Content-Type for the encoding decision.
            if key.lower() == CONTENT_TYPE_HEADER:
                content_type = headers[key]

        body = None
        is_base64 = False
        if features.body is not None:
            encoding = self.encoding_policy.resolve(content_type)
            raw = features.body.getvalue()

            if encoding == ResponseContentEncoding.BASE64:
                body = base64.b64encode(raw).decode("ascii")
                is_base64 = True
            else:
                body = raw.decode("utf-8", errors="replace")

        return APIGatewayProxyResponse(
            statusCode=status_code,
            headers=headers,
            body=body,
            isBase64Encoded=is_base64,
        )
