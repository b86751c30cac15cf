from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from formrelay.constants import ACCEPT, CONTENT_TYPE
from formrelay.schemas.request import Format, NegotiationResult, lookup_header
from formrelay.utils.logger_util import get_logger, logging
logger=get_logger(__name__,logging.DEBUG)


@dataclass(frozen=True)
class MediaRange:
    type: str
    subtype: str
    params: Dict[str, str]
    q: float
    # position in the Accept header
    index: int


def _split_params(raw: str) -> Tuple[str, Dict[str, str]]:
    parts = [p.strip() for p in raw.split(";")]
    params: Dict[str, str] = {}
    for part in parts[1:]:
        if "=" not in part:
            continue
        key, _, value = part.partition("=")
        params[key.strip().lower()] = value.strip().strip('"')
    return parts[0], params


def _parse_q(value: Optional[str]) -> float:
    if value is None:
        return 1.0
    try:
        q = float(value)
    except ValueError:
        return 0.0
    if q < 0.0 or q > 1.0:
        return 0.0
    return q


def parse_accept(header: str) -> List[MediaRange]:
    """Parse an Accept header into media ranges. Malformed entries are skipped."""
    ranges: List[MediaRange] = []
    for index, entry in enumerate(header.split(",")):
        entry = entry.strip()
        if not entry:
            continue
        media, params = _split_params(entry)
        if "/" not in media:
            continue
        mtype, _, subtype = media.partition("/")
        mtype, subtype = mtype.strip().lower(), subtype.strip().lower()
        if not mtype or not subtype:
            continue
        q = _parse_q(params.pop("q", None))
        ranges.append(MediaRange(type=mtype, subtype=subtype, params=params, q=q, index=index))
    return ranges


def parse_content_type(header: Optional[str]) -> Optional[str]:
    """Return the lower-cased ``type/subtype`` of a Content-Type value, or None if unparsable."""
    if not header:
        return None
    media, _ = _split_params(header)
    if media.count("/") != 1:
        return None
    mtype, _, subtype = media.lower().partition("/")
    if not mtype or not subtype or any(c.isspace() for c in media):
        return None
    return f"{mtype}/{subtype}"


def _specificity(media_type: str, candidate: MediaRange) -> Optional[int]:
    """Score how specifically ``candidate`` matches ``media_type``; None when it doesn't."""
    mtype, _, subtype = media_type.partition("/")
    s = 0
    if candidate.type == mtype:
        s |= 4
    elif candidate.type != "*":
        return None
    if candidate.subtype == subtype:
        s |= 2
    elif candidate.subtype != "*":
        return None
    # our media types carry no parameters; a range with parameters only matches via wildcards
    if candidate.params:
        return None
    return s


def _quality(media_type: str, ranges: Sequence[MediaRange]) -> Tuple[float, int]:
    """Return (q, specificity) for ``media_type``; the most specific matching range decides."""
    best: Optional[Tuple[int, float]] = None
    for r in ranges:
        s = _specificity(media_type, r)
        if s is None:
            continue
        if best is None or (s, r.q) > best:
            best = (s, r.q)
    if best is None:
        return 0.0, 0
    return best[1], best[0]


class Negotiator:
    """Resolve request and response wire formats from raw request headers.

    ``supported_formats`` is the endpoint's declared preference order; it breaks
    ties between formats the caller weights equally. With ``mirror_request_format``
    an indifferent caller (no Accept, ``*/*``, or a tie) is answered in the format
    it sent.
    """

    def __init__(self, supported_formats: Sequence[Format], mirror_request_format: bool = False):
        if not supported_formats:
            raise ValueError("at least one supported format is required")
        self.supported_formats: Tuple[Format, ...] = tuple(supported_formats)
        self.mirror_request_format = bool(mirror_request_format)

    def rank(self, accept: Optional[str]) -> Tuple[Tuple[Format, ...], Tuple[Format, ...]]:
        """Rank the acceptable supported formats.

        Returns ``(ranked, leaders)`` where ``leaders`` are the top-ranked formats
        the caller weights equally (all of them for an absent/empty/``*/*`` Accept).
        """
        if accept is None or not accept.strip() or accept.strip() == "*/*":
            return self.supported_formats, self.supported_formats

        ranges = parse_accept(accept)
        scored = []
        for order, fmt in enumerate(self.supported_formats):
            q, s = _quality(fmt.value, ranges)
            if q > 0.0:
                scored.append((q, s, order, fmt))
        scored.sort(key=lambda item: (-item[0], -item[1], item[2]))
        ranked = tuple(item[3] for item in scored)
        leaders = tuple(item[3] for item in scored if item[:2] == scored[0][:2])
        return ranked, leaders

    def negotiate(self, headers: Mapping[str, str] | None) -> NegotiationResult:
        accept = lookup_header(headers, ACCEPT)
        content_type = lookup_header(headers, CONTENT_TYPE)

        parsed = parse_content_type(content_type)
        request_format = Format.UNKNOWN
        for fmt in self.supported_formats:
            if parsed == fmt.value:
                request_format = fmt
                break

        ranked, leaders = self.rank(accept)
        response_format: Optional[Format] = None
        if ranked:
            if self.mirror_request_format and len(leaders) > 1:
                # answer in the format the caller used, provided it's acceptable
                response_format = request_format if request_format in leaders else None
            else:
                response_format = ranked[0]

        result = NegotiationResult(
            request_format=request_format,
            content_type_missing=not content_type,
            accepted_response_formats=ranked,
            response_format=response_format,
            accept=accept,
            content_type=content_type,
        )
        logger.debug("negotiated accept=%r content_type=%r -> %s", accept, content_type, result)
        return result
