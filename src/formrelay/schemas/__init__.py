"""Typed values that flow through the request pipeline.

Request-side values are frozen dataclasses; wire-facing ones (the response
envelope, notifier payloads) are pydantic models.
"""

from .envelope import ResponseEnvelope
from .notifications import AnalyticsEvent, ContactMessage
from .request import Format, NegotiationResult, RequestContext, TransportEncoding, lookup_header

__all__ = [
    "ResponseEnvelope",
    "AnalyticsEvent",
    "ContactMessage",
    "Format",
    "NegotiationResult",
    "RequestContext",
    "TransportEncoding",
    "lookup_header",
]
