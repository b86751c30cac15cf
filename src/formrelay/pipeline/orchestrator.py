from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

from formrelay.config import SiteConfig
from formrelay.decoding.decoder import decode
from formrelay.errors import (
    MissingContentType,
    NegotiationFailure,
    ParseFailure,
    RequestError,
    UnsupportedContentType,
    ValidationFailure,
)
from formrelay.negotiation.negotiator import Negotiator
from formrelay.notifier.adapters import Notifier, Payload
from formrelay.responses.builder import ResponseBuilder
from formrelay.schemas.envelope import ResponseEnvelope
from formrelay.schemas.request import Format, NegotiationResult, RequestContext
from formrelay.validation.schema import SchemaFor
from formrelay.validation.validator import Validator
from formrelay.utils.logger_util import get_logger, logging
logger=get_logger(__name__,logging.DEBUG)


@dataclass(frozen=True)
class EndpointProfile:
    """Everything that differs between the contact and analytics endpoints."""

    name: str
    # declared preference order; breaks ties in the caller's Accept weights
    supported_formats: Sequence[Format]
    schema_for: SchemaFor
    discriminant: Callable[[Any, NegotiationResult], Any]
    build_payload: Callable[[Dict[str, Any]], Payload]
    # answer indifferent callers in the format they sent
    mirror_request_format: bool = False
    # report a missing Content-Type as such (400) rather than as unsupported (415)
    requires_content_type: bool = False
    # field holding a post-success redirect target; only honoured for form responses
    redirect_field: Optional[str] = None


class Orchestrator:
    """Run one request through negotiate -> decode -> validate -> dispatch -> respond.

    Every RequestError is logged and turned into a 4xx envelope here. Notifier
    failures are not caught: they propagate to the invoking environment.
    """

    def __init__(self, profile: EndpointProfile, config: SiteConfig, notifier: Notifier, builder: ResponseBuilder | None = None):
        self.profile = profile
        self.config = config
        self.notifier = notifier
        self.negotiator = Negotiator(profile.supported_formats, mirror_request_format=profile.mirror_request_format)
        self.validator = Validator(profile.schema_for)
        self.builder = builder or ResponseBuilder(config)

    def _check(self, ctx: RequestContext, negotiation: NegotiationResult) -> Dict[str, Any]:
        """Run the failure checks in precedence order; return the validated values."""
        if negotiation.content_type_missing and self.profile.requires_content_type:
            raise MissingContentType()
        if not negotiation.acceptable:
            raise NegotiationFailure(negotiation.accept)
        if negotiation.request_format == Format.UNKNOWN:
            raise UnsupportedContentType(negotiation.content_type or "<missing>")

        logger.debug("Raw request body: %r", ctx.body)
        decoded = decode(ctx.body, ctx.transport_encoding, negotiation.request_format)
        if not decoded.ok:
            logger.debug("body could not be decoded: %s", decoded.reason)
            raise ParseFailure()
        logger.debug("Parsed request body: %r", decoded.value)

        outcome = self.validator.validate(decoded.value, self.profile.discriminant(decoded.value, negotiation))
        if not outcome.ok:
            raise ValidationFailure(outcome.message)
        return outcome.values

    async def handle(self, ctx: RequestContext) -> ResponseEnvelope:
        negotiation = self.negotiator.negotiate(ctx.headers)
        try:
            values = self._check(ctx, negotiation)
        except RequestError as e:
            logger.error("%s: %s", self.profile.name, e.message)
            fmt = Format.TEXT if isinstance(e, NegotiationFailure) else negotiation.response_format
            return self.builder.message(fmt, e.status_code, e.message)

        payload = self.profile.build_payload(values)
        ack = await self.notifier.send(payload)
        logger.info("%s: notifier acknowledged %s -> %s", self.profile.name, payload.id, ack)

        target = values.get(self.profile.redirect_field) if self.profile.redirect_field else None
        if target and negotiation.response_format == Format.FORM:
            return self.builder.redirect(negotiation.response_format, target)
        return self.builder.no_content()

    async def __call__(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """Gateway-shaped entry: ``{"body", "headers", "isBase64Encoded"}`` in, dict out."""
        envelope = await self.handle(RequestContext.from_gateway(event))
        return envelope.to_gateway()
