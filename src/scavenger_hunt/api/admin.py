"""Admin pages with simple token auth."""

from __future__ import annotations

import logging
import secrets
from typing import TYPE_CHECKING
from urllib.parse import quote, urlencode

import httpx
from fastapi import (
    APIRouter,
    Depends,
    Header,
    HTTPException,
    Query,
    Request,
    Response,
    status,
)
from fastapi.responses import HTMLResponse

from scavenger_hunt.api.rendering import templates
from scavenger_hunt.config import resolve_base_url

if TYPE_CHECKING:
    from scavenger_hunt.containers import AppContainer
    from scavenger_hunt.domain.events import EventDefinition

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    token: str | None = Query(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> str:
    """Ensure requests carry the admin token as a header or query parameter."""
    supplied = x_admin_token or token
    if not supplied or not secrets.compare_digest(supplied, admin_token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return supplied


@router.get("/leaderboard/{event_id}", response_class=HTMLResponse)
async def admin_leaderboard(
    event_id: str, request: Request, _token: str = Depends(require_admin)
) -> Response:
    """Dashboard of ranked finishers and teams still racing."""
    container: AppContainer = request.app.state.container
    event = container.catalog.get(event_id)
    leaderboard = container.leaderboard_service
    now = container.race_service.clock()
    in_progress = [
        {
            "name": race.name,
            "email": race.email,
            "current_clue": race.current_clue,
            "clue": event.clue_at(race.current_clue - 1),
            "elapsed_ms": max(now - race.start_time, 0),
        }
        for race in leaderboard.in_progress(event.id)
    ]
    return templates.TemplateResponse(
        request,
        "admin_leaderboard.html",
        {
            "event": event,
            "completed": leaderboard.completed(event.id),
            "in_progress": in_progress,
        },
    )


@router.get("/print-qr/{event_id}", response_class=HTMLResponse)
async def print_qr(
    event_id: str, request: Request, token: str = Depends(require_admin)
) -> Response:
    """Printable sheet with one QR code per clue."""
    container: AppContainer = request.app.state.container
    event = container.catalog.get(event_id)
    base_url = resolve_base_url(
        container.settings.public_base_url, str(request.base_url)
    )
    pages = [
        {
            "target_url": _clue_url(base_url, event, code),
            "image_url": (
                f"/admin/qr-image/{quote(event.id)}/{quote(code)}"
                f"?{urlencode({'token': token})}"
            ),
        }
        for code in event.ordered_codes
    ]
    return templates.TemplateResponse(
        request, "print_qr.html", {"event": event, "pages": pages}
    )


@router.get("/qr-image/{event_id}/{code}", dependencies=[Depends(require_admin)])
async def qr_image(event_id: str, code: str, request: Request) -> Response:
    """Proxy the QR image for one clue from the image generation service."""
    container: AppContainer = request.app.state.container
    event = container.catalog.get(event_id)
    normalized = code.strip().upper()
    if event.index_of(normalized) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    base_url = resolve_base_url(
        container.settings.public_base_url, str(request.base_url)
    )
    try:
        content = await container.qr_image_client.render_png(
            _clue_url(base_url, event, normalized), container.settings.qr_image_size
        )
    except httpx.HTTPError as exc:
        logger.exception("QR image request failed", extra={"event_id": event.id})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY) from exc
    return Response(content=content, media_type="image/png")


def _clue_url(base_url: str, event: EventDefinition, code: str) -> str:
    return f"{base_url}/{quote(event.id)}/qr/{quote(code)}"
