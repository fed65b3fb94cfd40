"""
api/router.py -- The /api parent router and its API key gate.

Every path under /api sits behind require_api_key, not only the routes that
exist. A catch-all route is registered LAST on this router so that an unknown
/api path still runs the gate: no key gives 401, a wrong key 403, and only a
valid key reaches the 404.

Route registration order matters: the catch-all must come after every
included router or it would capture their paths.
"""

from fastapi import APIRouter, Depends
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes.ranking import router as ranking_router
from auth.dependencies import require_api_key

router = APIRouter(prefix="/api", dependencies=[Depends(require_api_key)])

router.include_router(ranking_router, tags=["Ranking"])


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
def unknown_api_path(path: str) -> None:
    raise StarletteHTTPException(status_code=404)
