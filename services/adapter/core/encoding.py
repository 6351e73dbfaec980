"""
Where: services/adapter/core/encoding.py
What: Content-type driven response encoding policy.
Why: API Gateway only carries UTF-8 strings, so binary response content must be
     Base64-wrapped and flagged. The content types that need this are decided here.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, Optional

logger = logging.getLogger("adapter.encoding")


class ResponseContentEncoding(str, Enum):
    """Transport encoding of response content."""

    DEFAULT = "DEFAULT"  # UTF-8 text
    BASE64 = "BASE64"  # Base64-wrapped binary


# The complete list of registered MIME types lives at
# http://www.iana.org/assignments/media-types/media-types.xhtml
# Only types commonly returned by Web APIs are seeded here.
DEFAULT_CONTENT_ENCODINGS: Dict[str, ResponseContentEncoding] = {
    "text/plain": ResponseContentEncoding.DEFAULT,
    "text/xml": ResponseContentEncoding.DEFAULT,
    "application/xml": ResponseContentEncoding.DEFAULT,
    "application/json": ResponseContentEncoding.DEFAULT,
    "text/html": ResponseContentEncoding.DEFAULT,
    "text/css": ResponseContentEncoding.DEFAULT,
    "text/javascript": ResponseContentEncoding.DEFAULT,
    "text/ecmascript": ResponseContentEncoding.DEFAULT,
    "text/markdown": ResponseContentEncoding.DEFAULT,
    "text/csv": ResponseContentEncoding.DEFAULT,
    "application/octet-stream": ResponseContentEncoding.BASE64,
    "image/png": ResponseContentEncoding.BASE64,
    "image/gif": ResponseContentEncoding.BASE64,
    "image/jpeg": ResponseContentEncoding.BASE64,
    "application/zip": ResponseContentEncoding.BASE64,
    "application/pdf": ResponseContentEncoding.BASE64,
}


def strip_content_type_parameters(content_type: str) -> str:
    """'application/json; charset=utf-8' -> 'application/json'"""
    return content_type.split(";", 1)[0].strip()


class EncodingPolicy:
    """
    Registry mapping bare MIME types to a ResponseContentEncoding.

    Meant to be configured once at startup and only read afterwards;
    register() is not synchronized against concurrent resolve() calls.
    """

    def __init__(
        self,
        default_encoding: ResponseContentEncoding = ResponseContentEncoding.DEFAULT,
        encodings: Optional[Dict[str, ResponseContentEncoding]] = None,
    ):
        self.default_encoding = default_encoding
        self._encodings: Dict[str, ResponseContentEncoding] = dict(
            DEFAULT_CONTENT_ENCODINGS if encodings is None else encodings
        )

    @classmethod
    def from_config(cls, config) -> "EncodingPolicy":
        """Build a policy from AdapterConfig settings."""
        policy = cls(
            default_encoding=ResponseContentEncoding(config.DEFAULT_RESPONSE_CONTENT_ENCODING)
        )
        policy.register_many(config.TEXT_CONTENT_TYPES, ResponseContentEncoding.DEFAULT)
        policy.register_many(config.BINARY_CONTENT_TYPES, ResponseContentEncoding.BASE64)
        return policy

    def register(self, content_type: str, encoding: ResponseContentEncoding) -> None:
        """
        Register the encoding for a MIME type; the last registration wins.

        Binary types registered here must also be declared as binary media
        types on the API Gateway side, otherwise the gateway re-encodes them.
        """
        self._encodings[content_type] = ResponseContentEncoding(encoding)
        logger.debug("Registered response encoding %s for %s", encoding, content_type)

    def register_many(
        self, content_types: Iterable[str], encoding: ResponseContentEncoding
    ) -> None:
        for content_type in content_types:
            self.register(content_type, encoding)

    def resolve(self, content_type: Optional[str]) -> ResponseContentEncoding:
        if not content_type:
            return self.default_encoding
        return self._encodings.get(
            strip_content_type_parameters(content_type), self.default_encoding
        )

    def __contains__(self, content_type: str) -> bool:
        return content_type in self._encodings
