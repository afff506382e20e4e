# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Scanner page endpoint.

Serves the page that carries the CSRF token in its metadata.
"""

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ticketscan import __version__
from ticketscan.api.csrf import CSRF_COOKIE_NAME, get_or_create_token

router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


@router.get("/", response_class=HTMLResponse)
async def scanner_page(request: Request):
    """Render the scanner page and (re)issue the CSRF cookie."""
    token = get_or_create_token(request)
    response = templates.TemplateResponse(
        request,
        "index.html",
        {
            "csrf_token": token,
            "app_name": "Ticket Scanner",
            "version": __version__,
        },
    )
    response.set_cookie(
        CSRF_COOKIE_NAME,
        token,
        httponly=False,
        samesite="lax",
    )
    return response
