"""
Invocation outcome models.

Tagged result of the processor-invocation step. The response-building step
consumes it by case analysis over the four variants.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Success:
    """The processor completed without raising."""

    @property
    def error_type(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class AggregateFailure:
    """The processor raised an exception group; each inner failure is reported."""

    exception: BaseExceptionGroup
    reports: List[str] = field(default_factory=list)

    @property
    def error_type(self) -> str:
        return type(self.exception).__name__


@dataclass(frozen=True)
class AssemblyLoadFailure:
    """A module/type loading failure surfaced during processing."""

    exception: ImportError
    reports: List[str] = field(default_factory=list)

    @property
    def error_type(self) -> str:
        return type(self.exception).__name__


@dataclass(frozen=True)
class UnclassifiedFailure:
    """Any other failure raised by the processor."""

    exception: Exception
    reports: List[str] = field(default_factory=list)

    @property
    def error_type(self) -> str:
        return type(self.exception).__name__


InvocationOutcome = Union[Success, AggregateFailure, AssemblyLoadFailure, UnclassifiedFailure]
Failure = Union[AggregateFailure, AssemblyLoadFailure, UnclassifiedFailure]
