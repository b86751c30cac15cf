from __future__ import annotations

import os
from typing import Optional

import dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator


class SiteConfig(BaseModel):
    """Per-deployment settings injected into the pipeline at construction.

    Nothing in the request path reads the environment; build one of these
    (directly in tests, via ``load_config()`` in entry points) and pass it in.
    """

    model_config = ConfigDict(frozen=True)

    website_hostname: str = "example.com"
    # derived from website_hostname when left empty
    website_url: Optional[str] = None
    email_address: str = "contact@example.com"
    aws_region: str = "us-east-1"
    pinpoint_application_id: Optional[str] = None
    language: str = Field("en", description="language required for free-text message bodies")
    contact_notifier: str = "mock"
    analytics_notifier: str = "mock"

    @model_validator(mode="before")
    @classmethod
    def _derive_website_url(cls, data):
        if isinstance(data, dict) and not data.get("website_url"):
            data = dict(data)
            data["website_url"] = f"https://{data.get('website_hostname') or 'example.com'}"
        return data


_ENV_FIELDS = {
    "website_hostname": "FORMRELAY_WEBSITE_HOSTNAME",
    "website_url": "FORMRELAY_WEBSITE_URL",
    "email_address": "FORMRELAY_EMAIL_ADDRESS",
    "aws_region": "FORMRELAY_AWS_REGION",
    "pinpoint_application_id": "FORMRELAY_PINPOINT_APPLICATION_ID",
    "language": "FORMRELAY_LANGUAGE",
    "contact_notifier": "FORMRELAY_CONTACT_NOTIFIER",
    "analytics_notifier": "FORMRELAY_ANALYTICS_NOTIFIER",
}


def load_config(env_file: str | None = ".env") -> SiteConfig:
    """Build a SiteConfig from FORMRELAY_* environment variables (after loading .env)."""
    if env_file:
        dotenv.load_dotenv(env_file)
    values = {}
    for field_name, env_name in _ENV_FIELDS.items():
        value = os.environ.get(env_name)
        if value:
            values[field_name] = value
    return SiteConfig(**values)
