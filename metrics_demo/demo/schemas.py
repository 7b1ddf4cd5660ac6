"""Pydantic schemas for demo endpoint outcomes."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RequestOutcome(BaseModel):
    """Result of one simulated unit of work."""

    latency_ms: int = Field(..., ge=0)
    failed: bool = False

    def json_payload(self) -> dict[str, object]:
        if self.failed:
            return {"ok": False, "error": "simulated failure"}
        return {"ok": True, "data": {"message": "Hello World!"}}
