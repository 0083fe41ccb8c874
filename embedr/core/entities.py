from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Tuple
import importlib.util

from embedr.core.errors import UsageError


class ClientState(Enum):
    CONSTRUCTED = "CONSTRUCTED"
    FETCHED = "FETCHED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class ProviderDescriptor:
    """Where a provider serves its discovery endpoint and how it takes the format."""
    endpoint: str
    dot_format: bool = False

    @classmethod
    def coerce(cls, value: Any) -> ProviderDescriptor:
        """
        Build a descriptor from a descriptor or a plain mapping.

        Mappings may use ``endpoint`` or the older ``base`` key for the
        endpoint URL, and ``dot_format`` for the URL shape.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            endpoint = value.get("endpoint") or value.get("base")
            if not endpoint:
                raise UsageError(f"Provider entry has no endpoint: {dict(value)!r}")
            return cls(endpoint=str(endpoint), dot_format=bool(value.get("dot_format", False)))
        raise UsageError(f"Invalid provider entry: {value!r}")


@dataclass(frozen=True)
class FormatDescriptor:
    """A response codec and the module it needs at runtime."""
    id: str
    requires: str
    decode: Callable[[bytes], Dict[str, Any]]

    def is_available(self) -> bool:
        """Check whether the backing module can be imported."""
        try:
            return importlib.util.find_spec(self.requires) is not None
        except (ImportError, ValueError):
            return False


@dataclass(frozen=True)
class RequestSpec:
    """Everything resolved at construction time; immutable afterwards."""
    url: str
    domain: str
    provider: ProviderDescriptor
    format: FormatDescriptor
    params: Tuple[Tuple[str, str], ...]
    request_url: str


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    body: bytes = b""
