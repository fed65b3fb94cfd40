"""
auth/dependencies.py -- FastAPI Depends() helper for the shared-secret API key.

Callers pass the key as the `key` query parameter. There is one key for the
whole service, configured through API_KEY; there are no users or roles.

require_api_key() is attached as a router-level dependency of the /api parent
router in api/router.py, so it runs before any /api/* handler, including the
catch-all for unknown paths, and a failure short-circuits the request:
  - no key            -> MissingApiKey (401)
  - key does not match -> InvalidApiKey (403)

When API_KEY is not configured every supplied key is rejected with 403.

Layer rule: no imports from api/ or web/. Import from core/ is allowed --
core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import secrets

from fastapi import Request

from core.errors import InvalidApiKey, MissingApiKey


def require_api_key(request: Request) -> None:
    """Reject the request unless ?key= exactly matches the configured API key.

    Use as a FastAPI dependency:
        router = APIRouter(dependencies=[Depends(require_api_key)])
    """
    supplied = request.query_params.get("key")
    if not supplied:
        raise MissingApiKey()

    expected: str = request.app.state.settings.api_key
    if not expected or not secrets.compare_digest(supplied.encode(), expected.encode()):
        raise InvalidApiKey()
