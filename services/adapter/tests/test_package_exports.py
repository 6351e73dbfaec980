"""
Where: services/adapter/tests/test_package_exports.py
What: Guard tests for package-level exports.
Why: Prevent regressions when editing package __init__.py files.
"""


def test_core_package_re_exports() -> None:
    from services.adapter.core import EncodingPolicy, RequestMarshaller, ResponseMarshaller

    assert EncodingPolicy.__name__ == "EncodingPolicy"
    assert RequestMarshaller.__name__ == "RequestMarshaller"
    assert ResponseMarshaller.__name__ == "ResponseMarshaller"


def test_services_package_re_exports() -> None:
    from services.adapter.services import AsgiProcessor, InvocationDispatcher, RequestProcessor

    assert AsgiProcessor.__name__ == "AsgiProcessor"
    assert InvocationDispatcher.__name__ == "InvocationDispatcher"
    assert isinstance(AsgiProcessor(app=None), RequestProcessor)


def test_models_package_re_exports() -> None:
    from services.adapter.models import APIGatewayProxyRequest, ProcessingContext

    assert APIGatewayProxyRequest.__name__ == "APIGatewayProxyRequest"
    assert ProcessingContext.__name__ == "ProcessingContext"
