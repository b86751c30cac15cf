"""Constraint predicates composed into field specs.

Each rule is a callable ``rule(value) -> reason | None``; the reason is the tail of
the diagnostic (the validator prefixes the quoted field name).
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional
from urllib.parse import urljoin, urlsplit

from email_validator import EmailNotValidError, validate_email

from formrelay.sanitizer.adapters import Sanitizer

Rule = Callable[[object], Optional[str]]

_UUID = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")
# whitespace, controls and backslashes are resolved differently by browsers and urllib
_URL_UNSAFE = re.compile(r"[\s\x00-\x1F\x7F\\]")


def max_length(limit: int) -> Rule:
    def rule(value):
        if len(value) > limit:
            return f"length must be less than or equal to {limit} characters long"
        return None
    return rule


def one_of(allowed: Iterable[str]) -> Rule:
    allowed = tuple(allowed)

    def rule(value):
        if value not in allowed:
            return f"must be one of [{', '.join(allowed)}]"
        return None
    return rule


def uuid_string() -> Rule:
    def rule(value):
        return None if _UUID.match(value) else "must be a valid GUID"
    return rule


def email_address() -> Rule:
    def rule(value):
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            return "must be a valid email"
        return None
    return rule


def absolute_uri() -> Rule:
    """Require ``scheme://host...``."""
    def rule(value):
        if _URL_UNSAFE.search(value):
            return "must be a valid uri"
        try:
            parts = urlsplit(value)
            host = parts.hostname
        except ValueError:
            return "must be a valid uri"
        if not parts.scheme or not _SCHEME.match(parts.scheme) or not host:
            return "must be a valid uri"
        return None
    return rule


def same_site(hostname: str, base_url: str | None = None) -> Rule:
    """Require the URL's hostname to equal ``hostname``.

    With ``base_url`` relative values are resolved against it first (and so
    are accepted); without it only absolute URLs can pass.
    """
    expected = hostname.lower()

    def rule(value):
        if _URL_UNSAFE.search(value):
            return "must be a same-site uri"
        try:
            target = urljoin(base_url, value) if base_url else value
            host = urlsplit(target).hostname
        except ValueError:
            return "must be a same-site uri"
        if host != expected:
            return "must be a same-site uri"
        return None
    return rule


def integer_between(minimum: Callable[[], int], maximum: Callable[[], int]) -> Rule:
    """Bounds are callables so windows relative to "now" are evaluated per request."""
    def rule(value):
        lo, hi = minimum(), maximum()
        if value < lo:
            return f"must be greater than or equal to {lo}"
        if value > hi:
            return f"must be less than or equal to {hi}"
        return None
    return rule


def safe(sanitizer: Sanitizer, multiline: bool = False, disallow_html: bool = False) -> Rule:
    """Reject values that stripping control characters or html would change.

    Without ``disallow_html`` harmless markup (``<strong>``) passes and only
    unsafe markup (``<script>``) is rejected.
    """
    def rule(value):
        if sanitizer.strip_unsafe_control_chars(value, multiline) != value:
            return "contains unsafe characters"
        cleaned = sanitizer.strip_html(value) if disallow_html else sanitizer.sanitize_html(value)
        if cleaned != value:
            return "contains unsafe characters"
        return None
    return rule


def safe_multiline(sanitizer: Sanitizer, disallow_html: bool = False) -> Rule:
    return safe(sanitizer, multiline=True, disallow_html=disallow_html)


def language(sanitizer: Sanitizer, code: str) -> Rule:
    def rule(value):
        detected = sanitizer.detect_language(sanitizer.strip_html(value))
        # undecidable input (digits, a single symbol) is tolerated
        if detected is not None and detected != code:
            return f"must be written in language '{code}'"
        return None
    return rule
