from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from formrelay.constants import FORM_CONTENT_TYPE, JSON_CONTENT_TYPE, TEXT_CONTENT_TYPE


class Format(str, Enum):
    """Wire formats, valued by their media type."""

    JSON = JSON_CONTENT_TYPE
    FORM = FORM_CONTENT_TYPE
    TEXT = TEXT_CONTENT_TYPE
    UNKNOWN = "unknown"


class TransportEncoding(str, Enum):
    NONE = "none"
    BASE64 = "base64"


def lookup_header(headers: Mapping[str, Any] | None, name: str) -> Optional[str]:
    """Case-insensitive header lookup; the canonical spelling wins over other casings.

    Null values count as absent, so ``{"Accept": None, "accept": "..."}`` finds the latter.
    """
    if not headers:
        return None
    lowered = name.lower()
    for key in (name, lowered):
        if headers.get(key) is not None:
            return headers[key]
    for key, value in headers.items():
        if value is not None and isinstance(key, str) and key.lower() == lowered:
            return value
    return None


@dataclass(frozen=True)
class RequestContext:
    headers: Dict[str, str] = field(default_factory=dict)
    body: Union[bytes, str, None] = None
    transport_encoding: TransportEncoding = TransportEncoding.NONE

    def header(self, name: str) -> Optional[str]:
        return lookup_header(self.headers, name)

    @classmethod
    def from_gateway(cls, event: Mapping[str, Any]) -> "RequestContext":
        """Build from a gateway invocation: {"body", "headers", "isBase64Encoded"}."""
        return cls(
            headers=dict(event.get("headers") or {}),
            body=event.get("body"),
            transport_encoding=TransportEncoding.BASE64 if event.get("isBase64Encoded") else TransportEncoding.NONE,
        )


@dataclass(frozen=True)
class NegotiationResult:
    request_format: Format
    content_type_missing: bool
    # ranked by descending q, then specificity, then endpoint declaration order
    accepted_response_formats: Tuple[Format, ...]
    response_format: Optional[Format]
    accept: Optional[str] = None
    content_type: Optional[str] = None

    @property
    def acceptable(self) -> bool:
        return bool(self.accepted_response_formats)
