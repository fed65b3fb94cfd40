"""
api/routes/ranking.py -- Promote and demote route handlers.

Both routes set an ABSOLUTE rank through the same upstream call. "promote"
and "demote" only differ in the log line; neither moves a user one step up
or down the role ladder. Existing integrations rely on this, so the naming
mismatch is kept as-is.

Handlers are plain `def` functions: the Roblox client is blocking
(requests), and FastAPI runs sync handlers on its thread pool so one slow
upstream call never holds up other requests.

Query params are declared Optional so that a missing userId/rankId reaches
core.ranking and gets its 400 message, instead of FastAPI's generic 422.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Query, Request

from api.models import ErrorResponse, RankingResponse
from core.models import RankRequest
from core.ranking import set_rank

logger = logging.getLogger("rankbridge.api.ranking")

# Auth policy:
# - every /api/ranking/* route requires ?key= -- the gate is a dependency of
#   the /api parent router in api/router.py, so it runs before the handler.
router = APIRouter(
    prefix="/ranking",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)

UserIdParam = Annotated[Optional[str], Query(alias="userId", description="Roblox username to rank.")]
RankIdParam = Annotated[Optional[str], Query(alias="rankId", description="Target rank value, 0-255.")]


def _rank(request: Request, verb: str, user_id: Optional[str], rank_id: Optional[str]) -> RankingResponse:
    def log_action(rank_request: RankRequest, roblox_id: int) -> None:
        logger.info("%s user %s to rank %s", verb, roblox_id, rank_request.rank_value)

    result = set_rank(
        request.app.state.roblox,
        request.app.state.settings.group_id,
        user_id,
        rank_id,
        on_resolved=log_action,
    )
    return RankingResponse.from_result(result)


@router.get("/promote", response_model=RankingResponse)
def promote(request: Request, user_id: UserIdParam = None, rank_id: RankIdParam = None) -> RankingResponse:
    """Set the user's rank in the configured group to rankId."""
    return _rank(request, "Promoting", user_id, rank_id)


@router.get("/demote", response_model=RankingResponse)
def demote(request: Request, user_id: UserIdParam = None, rank_id: RankIdParam = None) -> RankingResponse:
    """Set the user's rank in the configured group to rankId. Same call as promote."""
    return _rank(request, "Demoting", user_id, rank_id)
