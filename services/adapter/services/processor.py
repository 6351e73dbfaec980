"""
Request processor contract.

The downstream request-processing pipeline the dispatcher invokes. It reads
context.request, populates context.response, and may raise.
"""

from typing import Protocol, runtime_checkable

from services.adapter.models.context import ProcessingContext


@runtime_checkable
class RequestProcessor(Protocol):
    async def process_request(self, context: ProcessingContext) -> None: ...
