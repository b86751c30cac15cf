from __future__ import annotations

import html
import re
from typing import Optional, Protocol

import nh3
from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException

from formrelay.utils.logger_util import get_logger, logging
logger=get_logger(__name__,logging.DEBUG)

# langdetect is non-deterministic on short inputs unless seeded
DetectorFactory.seed = 0

_LOW_CHARS = re.compile(r"[\x00-\x1F\x7F]")
_LOW_CHARS_KEEP_NEWLINES = re.compile(r"[\x00-\x09\x0B\x0C\x0E-\x1F\x7F]")
# stands in for CR while html is parsed; parsers rewrite CR and CRLF to LF
_CR_PLACEHOLDER = "\ue000"


class Sanitizer(Protocol):
    """Capabilities the validator needs from third-party text libraries.

    Implementations should provide:
      - strip_unsafe_control_chars(value, multiline) -> value with low ASCII
        control characters removed (CR/LF kept when multiline)
      - strip_html(value) -> plain text with every tag removed
      - sanitize_html(value) -> html with only unsafe markup removed
      - detect_language(value) -> ISO 639-1 code, or None when undecidable
    """

    def strip_unsafe_control_chars(self, value: str, multiline: bool = False) -> str:
        ...

    def strip_html(self, value: str) -> str:
        ...

    def sanitize_html(self, value: str) -> str:
        ...

    def detect_language(self, value: str) -> Optional[str]:
        ...


class LibrarySanitizer:
    """Default sanitizer backed by nh3 (html) and langdetect (language)."""

    def strip_unsafe_control_chars(self, value: str, multiline: bool = False) -> str:
        pattern = _LOW_CHARS_KEEP_NEWLINES if multiline else _LOW_CHARS
        return pattern.sub("", value)

    def _clean(self, value: str, **kwargs) -> str:
        protected = value.replace("\r", _CR_PLACEHOLDER)
        return nh3.clean(protected, **kwargs).replace(_CR_PLACEHOLDER, "\r")

    def strip_html(self, value: str) -> str:
        return html.unescape(self._clean(value, tags=set()))

    def sanitize_html(self, value: str) -> str:
        return self._clean(value, link_rel=None)

    def detect_language(self, value: str) -> Optional[str]:
        try:
            return detect(value)
        except LangDetectException:
            logger.debug("language detection undecidable for value of length %s", len(value))
            return None


def create_sanitizer(name: str | None = None, **kwargs) -> Sanitizer:
    n = (name or "library").strip().lower()
    if n in ("library", "default"):
        return LibrarySanitizer(**kwargs)
    raise ValueError(f"Unknown sanitizer name: {name}")
