"""Analytics-event ingester.

JSON in, 204 out. The ``event`` field selects which optional fields an event
may carry: page loads report their URL, session starts describe the device,
and every other event carries only the common fields.
"""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable, Dict, Tuple

from formrelay.config import SiteConfig, load_config
from formrelay.notifier.adapters import Notifier, create_notifier
from formrelay.pipeline.orchestrator import EndpointProfile, Orchestrator
from formrelay.schemas.notifications import AnalyticsEvent
from formrelay.schemas.request import Format, NegotiationResult
from formrelay.validation import rules
from formrelay.validation.schema import FieldSpec, Kind, forbidden, optional, required

PAGE_LOAD_EVENT = "PageLoad"
PAGE_UNLOAD_EVENT = "PageUnload"
SESSION_START_EVENT = "SessionStart"
SESSION_TIMEOUT_EVENT = "SessionTimeout"
EVENTS = (PAGE_LOAD_EVENT, PAGE_UNLOAD_EVENT, SESSION_START_EVENT, SESSION_TIMEOUT_EVENT)

SUPPORTED_FORMATS = (Format.JSON,)

# clients may be this far out of sync with the server in either direction
TIMESTAMP_WINDOW_MS = 26 * 60 * 60 * 1_000
URL_MAX_LENGTH = 200
DEVICE_FIELD_MAX_LENGTH = 100

DEVICE_FIELDS = (
    "browser_name",
    "browser_version_major",
    "browser_version",
    "cpu_arch",
    "device_model",
    "device_type",
    "device_vendor",
    "os_name",
    "os_version",
    "screen_resolution",
)


def now_ms() -> int:
    return int(time.time() * 1000)


def analytics_schema(config: SiteConfig, clock: Callable[[], int] = now_ms):
    """Return ``schema_for(event)``: the field specs for an event type."""
    common: Tuple[FieldSpec, ...] = (
        required("event", rules.one_of(EVENTS)),
        required("session_id", rules.uuid_string()),
        required(
            "timestamp",
            rules.integer_between(lambda: clock() - TIMESTAMP_WINDOW_MS, lambda: clock() + TIMESTAMP_WINDOW_MS),
            kind=Kind.INTEGER,
        ),
    )
    page_load = (
        optional("referrer", rules.absolute_uri(), rules.max_length(URL_MAX_LENGTH)),
        required(
            "url",
            rules.absolute_uri(),
            rules.max_length(URL_MAX_LENGTH),
            rules.same_site(config.website_hostname),
        ),
    )
    device_allowed = tuple(optional(name, rules.max_length(DEVICE_FIELD_MAX_LENGTH)) for name in DEVICE_FIELDS)
    device_forbidden = tuple(forbidden(name) for name in DEVICE_FIELDS)

    def schema_for(event: Any) -> Tuple[FieldSpec, ...]:
        specs = common
        if event == PAGE_LOAD_EVENT:
            specs = specs + page_load
        if event == SESSION_START_EVENT:
            return specs + device_allowed
        return specs + device_forbidden

    return schema_for


def event_type(data: Any, _negotiation: NegotiationResult) -> Any:
    return data.get("event") if isinstance(data, dict) else None


def build_analytics_event(values: Dict[str, Any]) -> AnalyticsEvent:
    attributes = {k: v for k, v in values.items() if k not in ("event", "timestamp")}
    return AnalyticsEvent(
        event=values["event"],
        timestamp=datetime.fromtimestamp(values["timestamp"] / 1000, tz=timezone.utc),
        attributes=attributes,
    )


def create_analytics_handler(config: SiteConfig, notifier: Notifier | None = None, clock: Callable[[], int] = now_ms) -> Orchestrator:
    if notifier is None:
        notifier = create_notifier(config.analytics_notifier, config)
    profile = EndpointProfile(
        name="analytics",
        supported_formats=SUPPORTED_FORMATS,
        schema_for=analytics_schema(config, clock),
        discriminant=event_type,
        build_payload=build_analytics_event,
    )
    return Orchestrator(profile, config, notifier)


@lru_cache(maxsize=1)
def default_handler() -> Orchestrator:
    return create_analytics_handler(load_config())


def lambda_handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """AWS Lambda entry point. Uncaught notifier errors surface as a gateway 5xx."""
    return asyncio.run(default_handler()(event))
