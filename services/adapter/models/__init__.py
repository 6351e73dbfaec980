"""
Data model definitions package.

Aggregates the proxy event models, HTTP features and invocation outcomes.
"""

from .aws_v1 import APIGatewayProxyRequest, APIGatewayProxyResponse
from .context import APIGATEWAY_REQUEST, LAMBDA_CONTEXT, ProcessingContext
from .features import HeaderDictionary, HttpRequestFeatures, HttpResponseFeatures
from .result import (
    AggregateFailure,
    AssemblyLoadFailure,
    InvocationOutcome,
    Success,
    UnclassifiedFailure,
)

__all__ = [
    "APIGatewayProxyRequest",
    "APIGatewayProxyResponse",
    "APIGATEWAY_REQUEST",
    "LAMBDA_CONTEXT",
    "ProcessingContext",
    "HeaderDictionary",
    "HttpRequestFeatures",
    "HttpResponseFeatures",
    "AggregateFailure",
    "AssemblyLoadFailure",
    "InvocationOutcome",
    "Success",
    "UnclassifiedFailure",
]
