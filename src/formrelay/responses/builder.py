from __future__ import annotations

import json
from typing import Any, Dict, Optional
from urllib.parse import urlencode, urljoin

from formrelay.config import SiteConfig
from formrelay.constants import CONTENT_TYPE, LOCATION, cors_headers
from formrelay.schemas.envelope import ResponseEnvelope
from formrelay.schemas.request import Format
from formrelay.utils.logger_util import get_logger, logging
logger=get_logger(__name__,logging.DEBUG)


class ResponseBuilder:
    """Render status, headers and body for one of the three wire formats."""

    def __init__(self, config: SiteConfig):
        self.config = config

    def _render(self, fmt: Format, content: Any) -> str:
        if fmt == Format.JSON:
            return json.dumps(content)
        if fmt == Format.FORM:
            return urlencode(content)
        if fmt == Format.TEXT:
            return str(content)
        raise ValueError(f"cannot render content as {fmt.value}")

    def build(
        self,
        fmt: Optional[Format],
        status_code: int,
        content: Any = None,
        redirect: Optional[str] = None,
    ) -> ResponseEnvelope:
        headers: Dict[str, str] = dict(cors_headers(self.config.website_url))
        body = None
        if content is not None:
            body = self._render(fmt, content)
        if (content is not None or redirect) and fmt is not None:
            headers[CONTENT_TYPE] = fmt.value
        if redirect:
            headers[LOCATION] = urljoin(self.config.website_url, redirect)

        envelope = ResponseEnvelope(status_code=status_code, headers=headers, body=body)
        logger.info("Response: %s", envelope.to_gateway())
        return envelope

    def message(self, fmt: Optional[Format], status_code: int, message: str) -> ResponseEnvelope:
        """Render a diagnostic: ``{"message": ...}`` for JSON/FORM, the bare string for TEXT."""
        fmt = fmt or Format.TEXT
        content = message if fmt == Format.TEXT else {"message": message}
        return self.build(fmt, status_code, content)

    def no_content(self) -> ResponseEnvelope:
        return self.build(None, 204)

    def redirect(self, fmt: Optional[Format], target: str) -> ResponseEnvelope:
        return self.build(fmt, 302, redirect=target)
