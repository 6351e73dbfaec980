from .asgi_processor import AsgiProcessor
from .dispatcher import DispatchResult, InvocationDispatcher
from .processor import RequestProcessor

__all__ = ["AsgiProcessor", "DispatchResult", "InvocationDispatcher", "RequestProcessor"]
