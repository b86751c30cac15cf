"""Contact-form submitter.

Accepts JSON or URL-encoded form bodies and emails the message to the site
owner. HTML forms may post a same-site ``redirect`` to be sent back (302)
after a successful submission; JSON callers may not.
"""

from __future__ import annotations

import asyncio
from functools import lru_cache
from typing import Any, Dict, Tuple

from formrelay.config import SiteConfig, load_config
from formrelay.notifier.adapters import Notifier, create_notifier
from formrelay.pipeline.orchestrator import EndpointProfile, Orchestrator
from formrelay.sanitizer.adapters import Sanitizer, create_sanitizer
from formrelay.schemas.notifications import ContactMessage
from formrelay.schemas.request import Format, NegotiationResult
from formrelay.validation import rules
from formrelay.validation.schema import FieldSpec, forbidden, optional, required

SUPPORTED_FORMATS = (Format.FORM, Format.JSON)

FORM_MODE = "form"
JSON_MODE = "json"

EMAIL_MAX_LENGTH = 100
NAME_MAX_LENGTH = 100
MESSAGE_MAX_LENGTH = 10_000
REDIRECT_MAX_LENGTH = 100


def contact_schema(config: SiteConfig, sanitizer: Sanitizer):
    """Return ``schema_for(mode)``: the field specs for a response-format mode."""
    common: Tuple[FieldSpec, ...] = (
        required("email", rules.email_address(), rules.max_length(EMAIL_MAX_LENGTH)),
        required(
            "message",
            rules.max_length(MESSAGE_MAX_LENGTH),
            rules.safe_multiline(sanitizer),
            rules.language(sanitizer, config.language),
        ),
        required("name", rules.max_length(NAME_MAX_LENGTH), rules.safe(sanitizer, disallow_html=True)),
    )
    form_only = (
        optional(
            "redirect",
            rules.max_length(REDIRECT_MAX_LENGTH),
            rules.same_site(config.website_hostname, base_url=config.website_url),
        ),
    )
    json_only = (forbidden("redirect"),)

    def schema_for(mode: Any) -> Tuple[FieldSpec, ...]:
        return common + (form_only if mode == FORM_MODE else json_only)

    return schema_for


def response_mode(_data: Any, negotiation: NegotiationResult) -> str:
    return FORM_MODE if negotiation.response_format == Format.FORM else JSON_MODE


def build_contact_message(values: Dict[str, Any]) -> ContactMessage:
    return ContactMessage(email=values["email"], message=values["message"], name=values["name"])


def create_contact_handler(config: SiteConfig, notifier: Notifier | None = None, sanitizer: Sanitizer | None = None) -> Orchestrator:
    sanitizer = sanitizer or create_sanitizer()
    if notifier is None:
        notifier = create_notifier(config.contact_notifier, config)
    profile = EndpointProfile(
        name="contact",
        supported_formats=SUPPORTED_FORMATS,
        schema_for=contact_schema(config, sanitizer),
        discriminant=response_mode,
        build_payload=build_contact_message,
        mirror_request_format=True,
        requires_content_type=True,
        redirect_field="redirect",
    )
    return Orchestrator(profile, config, notifier)


@lru_cache(maxsize=1)
def default_handler() -> Orchestrator:
    return create_contact_handler(load_config())


def lambda_handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """AWS Lambda entry point. Uncaught notifier errors surface as a gateway 5xx."""
    return asyncio.run(default_handler()(event))
