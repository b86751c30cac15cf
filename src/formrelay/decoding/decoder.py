from __future__ import annotations

import base64
import binascii
import json
import re
from dataclasses import dataclass
from typing import Any, Union
from urllib.parse import parse_qsl

from formrelay.schemas.request import Format, TransportEncoding
from formrelay.utils.logger_util import get_logger, logging
logger=get_logger(__name__,logging.DEBUG)

_NON_BASE64 = re.compile(r"[^A-Za-z0-9+/]")


@dataclass(frozen=True)
class Decoded:
    value: Any
    ok: bool = True


@dataclass(frozen=True)
class Undecodable:
    reason: str
    ok: bool = False


DecodeResult = Union[Decoded, Undecodable]


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise ValueError(f"invalid JSON constant {name}")


def _as_text(body: Union[bytes, str, None]) -> str:
    if body is None:
        return ""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body).decode("utf-8", errors="replace")
    return body


def transport_decode(body: Union[bytes, str, None]) -> str:
    """Permissively decode a base64 transport envelope to text. Never raises.

    Characters outside the base64 alphabet are dropped and padding is repaired,
    so a damaged envelope degrades into a body that fails to parse downstream
    instead of failing here.
    """
    text = _as_text(body).replace("-", "+").replace("_", "/")
    cleaned = _NON_BASE64.sub("", text.split("=", 1)[0])
    if len(cleaned) % 4 == 1:
        # a single dangling sextet carries no complete byte
        cleaned = cleaned[:-1]
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        raw = base64.b64decode(cleaned)
    except (binascii.Error, ValueError):
        logger.debug("base64 transport decode failed after cleanup; treating body as empty")
        return ""
    return raw.decode("utf-8", errors="replace")


def _encodable(value: Any) -> bool:
    """True when every string in a parsed JSON value is valid Unicode (no lone surrogates)."""
    stack = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            try:
                item.encode("utf-8")
            except UnicodeEncodeError:
                return False
        elif isinstance(item, dict):
            stack.extend(item.keys())
            stack.extend(item.values())
        elif isinstance(item, list):
            stack.extend(item)
    return True


def decode(body: Union[bytes, str, None], transport_encoding: TransportEncoding, request_format: Format) -> DecodeResult:
    """Decode a request body into structured input for ``request_format``."""
    if transport_encoding == TransportEncoding.BASE64:
        text = transport_decode(body)
        logger.debug("Decoded request body: %r", text)
    else:
        text = _as_text(body)

    if not _encodable(text):
        return Undecodable("body is not valid unicode")

    if request_format == Format.JSON:
        if not text:
            return Undecodable("empty body")
        try:
            value = json.loads(text, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            return Undecodable(str(e))
        if not _encodable(value):
            # "\ud800"-style escapes decode to lone surrogates
            return Undecodable("body contains unpaired surrogate escapes")
        return Decoded(value)

    if request_format == Format.FORM:
        # an empty form is not a parse failure; required-field validation rejects it
        return Decoded(dict(parse_qsl(text, keep_blank_values=True)))

    return Undecodable(f"no decoder for {request_format.value}")
