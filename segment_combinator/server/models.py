"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation.

HOW: One model per request body and per response. UnavailableReason is
reused from the core index so the wire values match the engine exactly.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Asset lists may be empty; the engine reports that as exhausted
- current_index on requests must be >= 0 when present
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from segment_combinator.core.index import UnavailableReason


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CombinationRequest(BaseModel):
    """A single (front, mid, end) combination."""

    front: str = Field(description="Front segment identifier (e.g. a filename).")
    mid: str = Field(description="Middle segment identifier.")
    end: str = Field(description="End segment identifier.")

    model_config = {"json_schema_extra": {
        "examples": [
            {"front": "intro_01.mp4", "mid": "body_07.mp4", "end": "outro_02.mp4"}
        ]
    }}


class NextCombinationRequest(BaseModel):
    """Asset lists to enumerate, with an optional starting cursor.

    RULES:
    - current_index defaults to the persisted cursor
    """

    front_assets: List[str] = Field(description="Candidate front segments, in order.")
    mid_assets: List[str] = Field(description="Candidate middle segments, in order.")
    end_assets: List[str] = Field(description="Candidate end segments, in order.")
    current_index: Optional[int] = Field(
        default=None,
        ge=0,
        description="Linear index to start scanning from. Defaults to the persisted cursor.",
    )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class CheckResponse(BaseModel):
    available: bool = Field(description="True if neither adjacent pair has been used.")
    reason: Optional[UnavailableReason] = Field(
        default=None,
        description="Which pair is already used; front_mid_exists wins when both are.",
    )


class NextCombinationResponse(BaseModel):
    """Result of a get-next scan.

    RULES:
    - front/mid/end are only present when found is true
    - current_index is the matched index, or the unchanged start on exhaustion
    - used_combinations approximates assignments (count of front→mid pairs)
    """

    found: bool = Field(description="Whether an available combination was found.")
    front: Optional[str] = Field(default=None, description="Chosen front segment.")
    mid: Optional[str] = Field(default=None, description="Chosen middle segment.")
    end: Optional[str] = Field(default=None, description="Chosen end segment.")
    current_index: int = Field(description="Linear index of the match, or the start index.")
    exhausted: bool = Field(description="True when every combination is blocked.")
    total_combinations: int = Field(description="Size of the front × mid × end product.")
    used_combinations: int = Field(description="Number of recorded front→mid pairs.")


class StatsResponse(BaseModel):
    front_mid_count: int = Field(description="Recorded front→mid pairs.")
    mid_end_count: int = Field(description="Recorded mid→end pairs.")
    total_records: int = Field(description="Sum of both counts.")


class IndexResponse(BaseModel):
    current_index: int = Field(description="Persisted iteration cursor.")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
