"""FastAPI application factory."""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from scavenger_hunt.api.admin import router as admin_router
from scavenger_hunt.api.rendering import templates
from scavenger_hunt.app_logging import configure_logging
from scavenger_hunt.containers import AppContainer
from scavenger_hunt.domain.decisions import Decision, Outcome
from scavenger_hunt.domain.errors import (
    EntrantValidationError,
    EventNotFoundError,
    MissingSessionError,
)
from scavenger_hunt.domain.events import EventDefinition

SESSION_COOKIE = "sessionId"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    logger.info(
        "Loaded event catalog: %s", ", ".join(sorted(container.catalog.events))
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(EventNotFoundError)
    async def event_not_found(request: Request, exc: EventNotFoundError) -> Response:
        return templates.TemplateResponse(
            request,
            "message.html",
            {"title": "Event not found", "message": str(exc), "back_url": None},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    @app.exception_handler(MissingSessionError)
    async def missing_session(request: Request, exc: MissingSessionError) -> Response:
        return RedirectResponse(
            f"/{exc.event_id}", status_code=status.HTTP_303_SEE_OTHER
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/{event_id}/leaderboard", response_class=HTMLResponse)
    async def public_leaderboard(event_id: str, request: Request) -> Response:
        """Public ranking of finished and racing teams."""
        state_container: AppContainer = request.app.state.container
        event = state_container.catalog.get(event_id)
        leaderboard = state_container.leaderboard_service
        return templates.TemplateResponse(
            request,
            "leaderboard.html",
            {
                "event": event,
                "completed": leaderboard.completed(event.id),
                "in_progress": leaderboard.in_progress(event.id),
                "highlight_email": None,
            },
        )

    @app.get("/{event_id}/qr/{code}", response_class=HTMLResponse)
    async def scan_code(event_id: str, code: str, request: Request) -> Response:
        """Redeem a scanned clue code for the team behind the session cookie."""
        state_container: AppContainer = request.app.state.container
        event = state_container.catalog.get(event_id)
        session = state_container.race_service.load_session(
            request.cookies.get(SESSION_COOKIE)
        )
        if session is None or session.event_id != event.id:
            raise MissingSessionError(event.id)
        race = state_container.race_service.load_race(session)
        if race is None:
            logger.warning("Session without race row", extra={"event_id": event.id})
            raise MissingSessionError(event.id)

        decision = state_container.progress_service.redeem(event, session, race, code)

        if decision.outcome == Outcome.ALREADY_FINISHED:
            response: Response = RedirectResponse(
                f"/{event.id}/leaderboard", status_code=status.HTTP_303_SEE_OTHER
            )
            response.delete_cookie(SESSION_COOKIE, path="/")
            return response
        if decision.outcome == Outcome.INVALID_CODE:
            return _render_message(
                request,
                event,
                "Invalid QR code",
                "That QR code is not part of this race.",
                status.HTTP_404_NOT_FOUND,
            )
        if decision.outcome == Outcome.OUT_OF_ORDER:
            return _render_message(
                request,
                event,
                "Not so fast",
                (
                    "You must complete the clues in order! Please go back and "
                    "complete the previous clue first."
                ),
                status.HTTP_409_CONFLICT,
            )

        response = _render_clue(request, state_container, event, decision, race.email)
        if decision.outcome == Outcome.FINISHED:
            response.delete_cookie(SESSION_COOKIE, path="/")
        return response

    @app.post("/{event_id}/start")
    async def start_race(
        event_id: str,
        request: Request,
        name: str = Form(default=""),
        email: str = Form(default=""),
    ) -> Response:
        """Start or resume a race and hand the team its session cookie."""
        state_container: AppContainer = request.app.state.container
        event = state_container.catalog.get(event_id)
        try:
            result = state_container.race_service.start(event, name, email)
        except EntrantValidationError as exc:
            return _render_start(
                request,
                state_container,
                event,
                error=str(exc),
                name=name.strip(),
                email=email.strip(),
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        if result.finished or result.token is None:
            return RedirectResponse(
                f"/{event.id}/leaderboard", status_code=status.HTTP_303_SEE_OTHER
            )
        response = RedirectResponse(
            f"/{event.id}/qr/{result.redirect_code}",
            status_code=status.HTTP_303_SEE_OTHER,
        )
        response.set_cookie(
            SESSION_COOKIE,
            result.token,
            max_age=state_container.settings.session_ttl_seconds,
            path="/",
            httponly=True,
            samesite="lax",
        )
        return response

    @app.get("/{event_id}", response_class=HTMLResponse)
    async def start_page(event_id: str, request: Request) -> Response:
        """Landing page with the team registration form."""
        state_container: AppContainer = request.app.state.container
        event = state_container.catalog.get(event_id)
        return _render_start(request, state_container, event)

    return app


def _render_start(  # noqa: PLR0913
    request: Request,
    state_container: AppContainer,
    event: EventDefinition,
    error: str | None = None,
    name: str = "",
    email: str = "",
    status_code: int = status.HTTP_200_OK,
) -> Response:
    leaderboard = state_container.leaderboard_service
    return templates.TemplateResponse(
        request,
        "start.html",
        {
            "event": event,
            "error": error,
            "name": name,
            "email": email,
            "team_names_json": json.dumps(leaderboard.team_names(event.id)),
            "completed": leaderboard.completed(event.id),
            "in_progress": leaderboard.in_progress(event.id),
            "highlight_email": None,
        },
        status_code=status_code,
    )


def _render_clue(
    request: Request,
    state_container: AppContainer,
    event: EventDefinition,
    decision: Decision,
    email: str,
) -> Response:
    context: dict[str, object] = {"event": event, "decision": decision}
    if decision.outcome == Outcome.FINISHED:
        leaderboard = state_container.leaderboard_service
        context.update(
            completed=leaderboard.completed(event.id),
            in_progress=leaderboard.in_progress(event.id),
            highlight_email=email,
        )
    return templates.TemplateResponse(request, "clue.html", context)


def _render_message(
    request: Request,
    event: EventDefinition,
    title: str,
    message: str,
    status_code: int,
) -> Response:
    return templates.TemplateResponse(
        request,
        "message.html",
        {"title": title, "message": message, "back_url": f"/{event.id}"},
        status_code=status_code,
    )
