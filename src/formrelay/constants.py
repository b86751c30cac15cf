"""Header names, media types and diagnostic message prefixes shared by both endpoints.

Callers branch on the message prefixes, so treat them as part of the wire contract.
"""

CONTENT_TYPE = "Content-Type"
ACCEPT = "Accept"
LOCATION = "Location"

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
TEXT_CONTENT_TYPE = "text/plain"

MISSING_CONTENT_TYPE = "Missing Content-Type header"
UNSUPPORTED_CONTENT_TYPE = "Unsupported Content-Type"
UNSUPPORTED_ACCEPT_TYPES = "Unsupported Accept type(s)"
UNPARSABLE_CONTENT = "Unparsable content"
VALIDATION_ERROR = "Validation error"


def cors_headers(website_url: str) -> dict:
    return {
        "Access-Control-Allow-Headers": f"{CONTENT_TYPE}, X-Requested-With",
        "Access-Control-Allow-Methods": "POST",
        "Access-Control-Allow-Origin": website_url,
    }
