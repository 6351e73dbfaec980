"""
HTTP feature models.

Generic request/response representation exchanged between the marshallers
and the processor. Deliberately independent of any web framework.
"""

import io
import ipaddress
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class HeaderDictionary(MutableMapping):
    """
    Case-insensitive multi-valued header mapping.

    Keys keep the casing they were first set with; values are ordered lists.
    Assigning a plain string replaces the value list with a single entry.
    """

    def __init__(self, initial: Optional[Dict[str, Iterable[str]]] = None):
        self._store: Dict[str, Tuple[str, List[str]]] = {}
        if initial:
            for key, values in initial.items():
                self[key] = values

    def __getitem__(self, key: str) -> List[str]:
        return self._store[key.lower()][1]

    def __setitem__(self, key: str, value: Union[str, Iterable[str]]) -> None:
        values = [value] if isinstance(value, str) else list(value)
        existing = self._store.get(key.lower())
        original_key = existing[0] if existing else key
        self._store[key.lower()] = (original_key, values)

    def __delitem__(self, key: str) -> None:
        del self._store[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return (original_key for original_key, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"HeaderDictionary({dict(self.items())!r})"

    def append(self, key: str, value: str) -> None:
        """Add a value, keeping any values already present for the key."""
        if key.lower() in self._store:
            self[key].append(value)
        else:
            self[key] = value

    def get_first(self, key: str) -> Optional[str]:
        values = self._store.get(key.lower())
        if not values or not values[1]:
            return None
        return values[1][0]


@dataclass
class HttpRequestFeatures:
    """Request side of the generic HTTP representation."""

    scheme: str = "http"
    method: str = "GET"
    path_base: str = ""
    path: str = ""
    query_string: str = ""
    protocol: str = "HTTP/1.1"
    headers: HeaderDictionary = field(default_factory=HeaderDictionary)
    body: Optional[io.BytesIO] = None
    remote_address: Optional[IPAddress] = None
    remote_port: Optional[int] = None

    def read_body(self) -> bytes:
        if self.body is None:
            return b""
        return self.body.getvalue()


@dataclass
class HttpResponseFeatures:
    """
    Response side of the generic HTTP representation.

    status_code 0 means the processor never set one.
    """

    status_code: int = 0
    headers: HeaderDictionary = field(default_factory=HeaderDictionary)
    body: Optional[io.BytesIO] = field(default_factory=io.BytesIO)
    has_started: bool = False

    def write(self, chunk: bytes) -> None:
        if self.body is None:
            self.body = io.BytesIO()
        self.body.write(chunk)
