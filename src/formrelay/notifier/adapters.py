from __future__ import annotations

import asyncio
from email.utils import formataddr
from typing import Any, Dict, List, Protocol, Union

from formrelay.config import SiteConfig
from formrelay.sanitizer.adapters import Sanitizer, create_sanitizer
from formrelay.schemas.notifications import AnalyticsEvent, ContactMessage
from formrelay.utils.logger_util import get_logger, logging
logger=get_logger(__name__,logging.DEBUG)

Payload = Union[ContactMessage, AnalyticsEvent]

CONTACT_SUBJECT = "Contact form message"


class Notifier(Protocol):
    """Pluggable dispatch of the one side effect a valid request triggers.

    Implementations provide ``async send(payload) -> ack``. Failures are raised,
    never swallowed: the caller's own fault handling reports them.
    """

    async def send(self, payload: Payload) -> Any:
        ...


class MockNotifier:
    """Deterministic in-memory notifier used in tests and local dev.

    Records every payload in ``sent``; raises ``fail_with`` when configured.
    """

    def __init__(self, fail_with: Exception | None = None):
        self.sent: List[Payload] = []
        self.fail_with = fail_with

    async def send(self, payload: Payload) -> Dict[str, Any]:
        logger.debug("MockNotifier.send called: kind=%s id=%s", payload.kind, payload.id)
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(payload)
        return {"MessageId": payload.id}


class SESNotifier:
    """Email contact messages to the site owner through Amazon SES.

    The sender and recipient are both the configured site address (the IAM role
    must be allowed to send as it); replies go to the visitor.
    """

    def __init__(self, config: SiteConfig, sanitizer: Sanitizer | None = None, client: Any = None):
        self.config = config
        self.sanitizer = sanitizer or create_sanitizer()
        if client is None:
            import boto3
            client = boto3.client("ses", region_name=config.aws_region)
        self.client = client

    def build_request(self, message: ContactMessage) -> Dict[str, Any]:
        site = self.config.website_hostname
        intro = f"The following message was sent from the contact form on {site}:"
        return {
            "Source": formataddr((site, self.config.email_address)),
            "ReplyToAddresses": [formataddr((message.name, message.email))],
            "Destination": {"ToAddresses": [self.config.email_address]},
            "Message": {
                "Subject": {"Data": CONTACT_SUBJECT},
                "Body": {
                    "Html": {"Data": f"<p>{intro}</p>{message.message}"},
                    "Text": {"Data": f"{intro}\n\n{self.sanitizer.strip_html(message.message)}"},
                },
            },
        }

    async def send(self, payload: Payload) -> Any:
        if not isinstance(payload, ContactMessage):
            raise TypeError(f"SESNotifier cannot send {type(payload).__name__}")
        request = self.build_request(payload)
        logger.info("Sending to SES: %s", request)
        result = await asyncio.to_thread(lambda: self.client.send_email(**request))
        logger.info("Result from SES: %s", result)
        return result


class PinpointNotifier:
    """Record analytics events through Amazon Pinpoint ``put_events``."""

    def __init__(self, config: SiteConfig, client: Any = None):
        if not config.pinpoint_application_id:
            raise ValueError("PinpointNotifier requires pinpoint_application_id; set FORMRELAY_PINPOINT_APPLICATION_ID")
        self.config = config
        if client is None:
            import boto3
            client = boto3.client("pinpoint", region_name=config.aws_region)
        self.client = client

    def build_request(self, event: AnalyticsEvent) -> Dict[str, Any]:
        return {
            "ApplicationId": self.config.pinpoint_application_id,
            "EventsRequest": {
                "BatchItem": {
                    "endpoint-id": {
                        "Endpoint": {},
                        "Events": {
                            event.id: {
                                "EventType": event.event,
                                "Timestamp": event.timestamp.isoformat(),
                                "Attributes": dict(event.attributes),
                            }
                        },
                    }
                }
            },
        }

    async def send(self, payload: Payload) -> Any:
        if not isinstance(payload, AnalyticsEvent):
            raise TypeError(f"PinpointNotifier cannot send {type(payload).__name__}")
        request = self.build_request(payload)
        logger.info("Sending to Pinpoint: %s", request)
        result = await asyncio.to_thread(lambda: self.client.put_events(**request))
        logger.info("Result from Pinpoint: %s", result)
        return result


def create_notifier(name: str | None, config: SiteConfig, **kwargs) -> Notifier:
    n = (name or "mock").strip().lower()
    if n in ("mock", "none"):
        return MockNotifier(**kwargs)
    if n in ("ses", "email"):
        return SESNotifier(config, **kwargs)
    if n in ("pinpoint",):
        return PinpointNotifier(config, **kwargs)
    raise ValueError(f"Unknown notifier name: {name}")
