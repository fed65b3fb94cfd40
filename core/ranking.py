"""
core/ranking.py -- Shared rank-change pipeline behind the promote and demote routes.

No FastAPI imports. Designed to be called by api/routes/ranking.py with the
raw query values; every failure is raised as a core.errors type that the API
layer maps straight onto a response.

Order of checks follows the public contract: both parameters present, then
username resolution, then rank-value validation, then the rank-set call. A
bad rankId for an unknown user therefore reports the upstream failure, not
the invalid rank.
"""

import logging
from typing import Callable, Optional

from core.errors import InvalidRankValue, MissingParameter, RobloxAPIError, UpstreamFailure
from core.models import MAX_RANK, MIN_RANK, RankRequest, RankResult, parse_leading_int
from core.roblox import RobloxClient

logger = logging.getLogger("rankbridge.ranking")


def parse_rank_value(raw: str) -> int:
    """Parse a rankId query value. Leading digits count: "50abc" -> 50.

    Raises InvalidRankValue when no integer can be read or the value falls
    outside [MIN_RANK, MAX_RANK].
    """
    value = parse_leading_int(raw)
    if value is None or not MIN_RANK <= value <= MAX_RANK:
        raise InvalidRankValue()
    return value


def set_rank(
    client: RobloxClient,
    group_id: Optional[int],
    handle: Optional[str],
    rank_value: Optional[str],
    on_resolved: Optional[Callable[[RankRequest, int], None]] = None,
) -> RankResult:
    """Resolve `handle` and set its absolute rank in `group_id`.

    on_resolved is called with the validated request and the numeric user id
    just before the rank-set call; routes use it to log their own verb.

    Raises MissingParameter, InvalidRankValue, or UpstreamFailure.
    """
    if not handle or not rank_value:
        raise MissingParameter()

    try:
        user_id = client.get_id_from_username(handle)
    except Exception as e:
        logger.exception("Username lookup failed for %r", handle)
        raise UpstreamFailure.from_exception(e) from e

    request = RankRequest(handle=handle, rank_value=parse_rank_value(rank_value))
    if on_resolved is not None:
        on_resolved(request, user_id)

    try:
        if group_id is None:
            raise RobloxAPIError("GROUP_ID is not configured.")
        data = client.set_rank(group_id, user_id, request.rank_value)
    except Exception as e:
        logger.exception("Rank change failed for user %s (ID: %s)", handle, user_id)
        raise UpstreamFailure.from_exception(e) from e

    return RankResult(handle=handle, user_id=user_id, data=data)
