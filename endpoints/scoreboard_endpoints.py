from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from persistence.repositories import AsyncDocumentMatchRepository
from persistence.scoreboard_state import MatchSetup, ScoreboardPatch
from settings import get_settings

router = APIRouter(prefix="/api", tags=["scoreboard"])
logger = logging.getLogger(__name__)

SETTINGS = get_settings()
DEBUG_LOG_REQUESTS = SETTINGS.debug_log_requests

SCOREBOARD_REPO = AsyncDocumentMatchRepository.from_settings(SETTINGS)

MATCH_ID_REQUIRED = "Match ID is required."
MATCH_DATA_NOT_FOUND = "Match data not found."
TOTAL_RUNS_REQUIRED = "Match ID and total runs are required."
MATCH_NOT_FOUND = "Match not found."


class ScoreboardRequestError(Exception):
    """A client-facing failure, rendered as a plain-text response."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


async def scoreboard_error_handler(request: Request, exc: ScoreboardRequestError) -> PlainTextResponse:
    if DEBUG_LOG_REQUESTS:
        logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


class TotalRunsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_runs: Any = Field(default=None, alias="totalRuns")

    @property
    def has_total_runs(self) -> bool:
        # An explicit null counts as sent; only an absent key is missing.
        return "total_runs" in self.model_fields_set


def _require_match_id(match: str | None) -> str:
    if not match:
        raise ScoreboardRequestError(400, MATCH_ID_REQUIRED)
    return match


@router.get("/scoreboard-data")
async def scoreboard_data(match: str | None = None) -> JSONResponse:
    match_id = _require_match_id(match)
    record = await SCOREBOARD_REPO.get_match(match_id)
    if record is None:
        raise ScoreboardRequestError(404, MATCH_DATA_NOT_FOUND)
    return JSONResponse(record)


@router.post("/update-scoreboard")
async def update_scoreboard(
    match: str | None = None,
    patch: ScoreboardPatch | None = Body(default=None),
) -> PlainTextResponse:
    match_id = _require_match_id(match)
    changes = patch.changes() if patch is not None else {}
    if not await SCOREBOARD_REPO.merge_match(match_id, changes):
        raise ScoreboardRequestError(404, MATCH_DATA_NOT_FOUND)
    if DEBUG_LOG_REQUESTS:
        logger.info("SCOREBOARD UPDATE: %s keys=%s", match_id, sorted(changes))
    return PlainTextResponse("Scoreboard updated successfully.")


@router.post("/save-total-runs")
async def save_total_runs(
    match: str | None = None,
    body: TotalRunsRequest | None = Body(default=None),
) -> PlainTextResponse:
    if not match or body is None or not body.has_total_runs:
        raise ScoreboardRequestError(400, TOTAL_RUNS_REQUIRED)
    total_runs = body.total_runs
    if not await SCOREBOARD_REPO.set_total_runs(match, total_runs):
        raise ScoreboardRequestError(404, MATCH_NOT_FOUND)
    if DEBUG_LOG_REQUESTS:
        logger.info("SCOREBOARD TOTAL RUNS: %s -> %s", match, total_runs)
    return PlainTextResponse("Total runs saved successfully.")


@router.post("/setup-match")
async def setup_match(setup: MatchSetup | None = Body(default=None)) -> JSONResponse:
    setup = setup or MatchSetup()
    match_id = await SCOREBOARD_REPO.create_match(setup)
    if DEBUG_LOG_REQUESTS:
        logger.info(
            "MATCH SETUP: %s %s vs %s (organizer=%s)",
            match_id,
            setup.team_a,
            setup.team_b,
            setup.organizer_name,
        )
    return JSONResponse({"message": "Match setup successful.", "matchId": match_id})
