from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ResponseEnvelope(BaseModel):
    """The single response produced per invocation.

    Frozen: built once by the ResponseBuilder and returned unchanged.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., ge=100, le=599)
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None

    def to_gateway(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"statusCode": self.status_code, "headers": dict(self.headers)}
        if self.body is not None:
            out["body"] = self.body
        return out
