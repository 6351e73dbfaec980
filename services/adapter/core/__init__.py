"""
Core logic package.

Provides the marshallers, the response encoding policy and failure classification.
"""

from .encoding import EncodingPolicy, ResponseContentEncoding
from .exceptions import ProxyAdapterError, UnhandledInvocationError, classify_failure
from .request_marshaller import RequestMarshaller
from .response_marshaller import ResponseMarshaller

__all__ = [
    "EncodingPolicy",
    "ResponseContentEncoding",
    "ProxyAdapterError",
    "UnhandledInvocationError",
    "classify_failure",
    "RequestMarshaller",
    "ResponseMarshaller",
]
