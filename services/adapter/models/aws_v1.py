# services/adapter/models/aws_v1.py

"""
Pydantic models for AWS API Gateway v1 (REST API) proxy integration payloads.

Reference: https://docs.aws.amazon.com/apigateway/latest/developerguide/set-up-lambda-proxy-integrations.html#api-gateway-simple-proxy-for-lambda-input-format

Every inbound field is optional: API Gateway omits or nulls fields freely
(test invocations from the console, direct Lambda invokes), and the adapter
falls back to best-effort defaults instead of rejecting the event.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiGatewayIdentity(BaseModel):
    """API Gateway Identity object."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    sourceIp: Optional[str] = None
    userAgent: Optional[str] = None
    user: Optional[str] = None
    userArn: Optional[str] = None
    accountId: Optional[str] = None
    caller: Optional[str] = None
    apiKey: Optional[str] = None
    cognitoIdentityId: Optional[str] = None
    cognitoIdentityPoolId: Optional[str] = None


class ApiGatewayRequestContext(BaseModel):
    """API Gateway Request Context object."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    apiId: Optional[str] = None
    stage: Optional[str] = None
    requestId: Optional[str] = None
    resourceId: Optional[str] = None
    resourcePath: Optional[str] = None
    httpMethod: Optional[str] = None
    accountId: Optional[str] = None
    path: Optional[str] = None
    protocol: Optional[str] = None
    identity: Optional[ApiGatewayIdentity] = None
    authorizer: Optional[Dict[str, Any]] = None


class APIGatewayProxyRequest(BaseModel):
    """
    AWS API Gateway Proxy Integration (v1) request event.

    Immutable once validated. Mapping fields keep the insertion order of the
    source document.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    resource: Optional[str] = None
    path: Optional[str] = None
    httpMethod: Optional[str] = None
    headers: Optional[Dict[str, Optional[str]]] = None
    multiValueHeaders: Optional[Dict[str, List[str]]] = None
    queryStringParameters: Optional[Dict[str, Optional[str]]] = None
    multiValueQueryStringParameters: Optional[Dict[str, List[str]]] = None
    pathParameters: Optional[Dict[str, Optional[str]]] = None
    stageVariables: Optional[Dict[str, str]] = None
    requestContext: Optional[ApiGatewayRequestContext] = None
    body: Optional[str] = None
    isBase64Encoded: bool = False


class APIGatewayProxyResponse(BaseModel):
    """
    AWS API Gateway Proxy Integration (v1) response document.

    Use model_dump(exclude_none=True) to convert to the dict returned from
    the Lambda handler.
    """

    statusCode: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None
    isBase64Encoded: bool = False
