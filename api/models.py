"""
API response models for the ranking REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in core/models.py, which
own the internal domain representation. Route handlers map between the two.

Every JSON response carries a `success` flag: true with `message` and `data`
on success, false with a single human-readable `error` string on failure.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from core.models import RankResult


class RankingResponse(BaseModel):
    """Response body for GET /api/ranking/promote and /api/ranking/demote."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str
    data: Any = None

    @classmethod
    def from_result(cls, result: RankResult) -> "RankingResponse":
        """Build the success envelope from a core RankResult.

        `data` is the upstream result exactly as Roblox returned it.
        """
        return cls(
            message=f"Successfully processed rank for user {result.handle} (ID: {result.user_id}).",
            data=result.data,
        )


class ErrorResponse(BaseModel):
    """Envelope returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    success: bool = False
    error: str
