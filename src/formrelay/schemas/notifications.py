from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ContactMessage(BaseModel):
    """What the contact endpoint hands to its notifier. Never the raw input."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["contact"] = "contact"
    id: str = Field(default_factory=_new_id)
    timestamp: datetime = Field(default_factory=_now)
    email: str
    message: str
    name: str


class AnalyticsEvent(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["analytics"] = "analytics"
    id: str = Field(default_factory=_new_id)
    timestamp: datetime
    event: str
    # everything else that survived validation, session_id included
    attributes: Dict[str, str] = Field(default_factory=dict)
