"""FastAPI application exposing the combination engine over HTTP.

WHY: The rendering front-end (and anything else that composes videos)
needs to ask "is this triple free?", "give me the next free triple",
"remember that I used this one", and to reset the history. An HTTP API with
OpenAPI docs makes those operations available to any process.

HOW: create_app() builds a FastAPI app whose lifespan handler opens one
CombinationService for the configured snapshot file and stores it on
app.state; shutdown drops it. Endpoints are plain (sync) functions so
FastAPI runs them in its threadpool, where the service lock serializes them.

RULES:
- The service instance is created at startup and owned by the app
- Storage-write failures map to 503 with the ErrorResponse schema
- Mutations that return nothing respond 204
- Request validation errors are FastAPI's standard 422
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response

from segment_combinator import __version__
from segment_combinator.config import data_file_path
from segment_combinator.core.service import CombinationService
from segment_combinator.core.store import SnapshotWriteError
from segment_combinator.server.models import (
    CheckResponse,
    CombinationRequest,
    ErrorResponse,
    HealthResponse,
    IndexResponse,
    NextCombinationRequest,
    NextCombinationResponse,
    StatsResponse,
)

logger = logging.getLogger(__name__)

_STORAGE_ERROR = {503: {"model": ErrorResponse, "description": "Snapshot could not be written"}}


def _service(request: Request) -> CombinationService:
    return request.app.state.service


def _storage_failure(exc: SnapshotWriteError) -> HTTPException:
    logger.exception("Snapshot write failed")
    return HTTPException(status_code=503, detail=str(exc))


def create_app(data_file: Optional[Path] = None) -> FastAPI:
    """Build the API app backed by ``data_file`` (default: configured path)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        path = data_file if data_file is not None else data_file_path()
        app.state.service = CombinationService.open(path)
        logger.info("Combination service ready (snapshot: %s)", path)
        yield
        app.state.service = None

    app = FastAPI(
        lifespan=lifespan,
        title="Segment Combinator API",
        description=(
            "Assigns (front, mid, end) media segment combinations so that no "
            "front→mid or mid→end pair is ever used twice. Check a triple, "
            "fetch the next free one, record usage, and inspect or reset the "
            "history."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # -----------------------------------------------------------------------
    # Endpoints: Combinations
    # -----------------------------------------------------------------------

    @app.post(
        "/combinations/check",
        response_model=CheckResponse,
        response_model_exclude_none=True,
        tags=["combinations"],
        summary="Check whether a combination is available",
    )
    def check_combination(body: CombinationRequest, request: Request) -> CheckResponse:
        result = _service(request).check(body.front, body.mid, body.end)
        return CheckResponse(available=result.available, reason=result.reason)

    @app.post(
        "/combinations/record",
        status_code=204,
        tags=["combinations"],
        summary="Record a used combination",
        description="Marks both adjacent pairs of the combination as used.",
        responses=_STORAGE_ERROR,
    )
    def record_combination(body: CombinationRequest, request: Request) -> Response:
        try:
            _service(request).record(body.front, body.mid, body.end)
        except SnapshotWriteError as exc:
            raise _storage_failure(exc)
        return Response(status_code=204)

    @app.post(
        "/combinations/next",
        response_model=NextCombinationResponse,
        tags=["combinations"],
        summary="Get the next available combination",
        description=(
            "Scans the front × mid × end product from the persisted cursor "
            "(or current_index) and returns the first combination whose "
            "adjacent pairs are both unused. The cursor advances past a match."
        ),
        responses=_STORAGE_ERROR,
    )
    def next_combination(body: NextCombinationRequest, request: Request) -> NextCombinationResponse:
        try:
            result = _service(request).get_next(
                body.front_assets,
                body.mid_assets,
                body.end_assets,
                current_index=body.current_index,
            )
        except SnapshotWriteError as exc:
            raise _storage_failure(exc)
        return NextCombinationResponse(
            found=result.found,
            front=result.front,
            mid=result.mid,
            end=result.end,
            current_index=result.current_index,
            exhausted=result.exhausted,
            total_combinations=result.total_combinations,
            used_combinations=result.used_combinations,
        )

    @app.get(
        "/combinations/stats",
        response_model=StatsResponse,
        tags=["combinations"],
        summary="Count recorded pairs",
    )
    def combination_stats(request: Request) -> StatsResponse:
        stats = _service(request).get_stats()
        return StatsResponse(
            front_mid_count=stats.front_mid_count,
            mid_end_count=stats.mid_end_count,
            total_records=stats.total_records,
        )

    @app.delete(
        "/combinations",
        status_code=204,
        tags=["combinations"],
        summary="Clear all recorded combinations",
        description="Empties both pair sets and resets the cursor to 0.",
        responses=_STORAGE_ERROR,
    )
    def clear_combinations(request: Request) -> Response:
        try:
            _service(request).clear()
        except SnapshotWriteError as exc:
            raise _storage_failure(exc)
        return Response(status_code=204)

    # -----------------------------------------------------------------------
    # Endpoints: Cursor
    # -----------------------------------------------------------------------

    @app.get(
        "/combinations/index",
        response_model=IndexResponse,
        tags=["cursor"],
        summary="Get the persisted iteration cursor",
    )
    def get_index(request: Request) -> IndexResponse:
        return IndexResponse(current_index=_service(request).get_index())

    @app.post(
        "/combinations/index/reset",
        status_code=204,
        tags=["cursor"],
        summary="Reset the iteration cursor to 0",
        responses=_STORAGE_ERROR,
    )
    def reset_index(request: Request) -> Response:
        try:
            _service(request).reset_index()
        except SnapshotWriteError as exc:
            raise _storage_failure(exc)
        return Response(status_code=204)

    # -----------------------------------------------------------------------
    # Endpoints: Health
    # -----------------------------------------------------------------------

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["health"],
        summary="Health check",
    )
    def health_check() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


app = create_app()


def run_api(host: str, port: int, data_file: Optional[Path] = None) -> None:
    """Serve the API with uvicorn."""
    import uvicorn
    uvicorn.run(create_app(data_file), host=host, port=port)
