"""
web/routes.py -- Plain-text routes served outside the JSON API.

They share app.state with the API routes but never touch it: the status
banner must answer even when no credentials are configured and the Roblox
login never ran, so uptime monitors can ping it.

Routes:
  GET  /   -- status banner, no auth
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

BANNER = "Ranking API is running. Use the /api/ranking endpoints to perform actions."

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def index() -> str:
    return BANNER
