from __future__ import annotations

from formrelay.constants import (
    MISSING_CONTENT_TYPE,
    UNPARSABLE_CONTENT,
    UNSUPPORTED_ACCEPT_TYPES,
    UNSUPPORTED_CONTENT_TYPE,
    VALIDATION_ERROR,
)


class RequestError(Exception):
    """A request failure that is answered with a structured 4xx response.

    The orchestrator raises these and converts them into envelopes in one place.
    Notifier failures are not part of this hierarchy.
    """

    status_code = 400
    prefix = ""

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        if self.detail is None:
            return self.prefix
        return f"{self.prefix}: {self.detail}"


class MissingContentType(RequestError):
    status_code = 400
    prefix = MISSING_CONTENT_TYPE


class NegotiationFailure(RequestError):
    status_code = 406
    prefix = UNSUPPORTED_ACCEPT_TYPES


class UnsupportedContentType(RequestError):
    status_code = 415
    prefix = UNSUPPORTED_CONTENT_TYPE


class ParseFailure(RequestError):
    status_code = 400
    prefix = UNPARSABLE_CONTENT


class ValidationFailure(RequestError):
    status_code = 422
    prefix = VALIDATION_ERROR
