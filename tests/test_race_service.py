"""Tests for starting and resuming races."""

from dataclasses import replace

import pytest

from scavenger_hunt.domain.errors import EntrantValidationError
from scavenger_hunt.domain.events import EventDefinition
from scavenger_hunt.services.races import RaceService
from tests.conftest import (
    START_MS,
    FixedClock,
    InMemoryRaceRepository,
    InMemorySessionRepository,
)


def test_start_creates_race_and_session(
    event: EventDefinition,
    race_service: RaceService,
    race_repository: InMemoryRaceRepository,
    session_repository: InMemorySessionRepository,
) -> None:
    result = race_service.start(event, "  Team Rocket ", " Rocket@Example.COM ")

    assert not result.resumed
    assert not result.finished
    assert result.redirect_code == "A"
    race = race_repository.get_race("rocket@example.com", "hunt")
    assert race is not None
    assert race.name == "Team Rocket"
    assert race.current_clue == 0
    assert race.start_time == START_MS
    session = session_repository.sessions[result.token]
    assert session.email == "rocket@example.com"
    assert session.expires_at == START_MS + 24 * 60 * 60 * 1000


def test_start_resumes_existing_race(
    event: EventDefinition,
    race_service: RaceService,
    race_repository: InMemoryRaceRepository,
    session_repository: InMemorySessionRepository,
    clock: FixedClock,
) -> None:
    first = race_service.start(event, "Team Rocket", "rocket@example.com")
    key = ("rocket@example.com", "hunt")
    race_repository.races[key] = replace(race_repository.races[key], current_clue=2)
    clock.advance(60_000)

    second = race_service.start(event, "Team Rocket", "rocket@example.com")

    assert second.resumed
    assert second.token != first.token
    assert second.redirect_code == "C"
    assert second.race.start_time == START_MS
    session = session_repository.sessions[second.token]
    assert session.start_time == START_MS
    assert session.current_clue == 2
    assert len(race_repository.races) == 1


def test_start_for_finished_race_creates_no_session(
    event: EventDefinition,
    race_service: RaceService,
    race_repository: InMemoryRaceRepository,
    session_repository: InMemorySessionRepository,
) -> None:
    race_service.start(event, "Team Rocket", "rocket@example.com")
    session_repository.sessions.clear()
    key = ("rocket@example.com", "hunt")
    race_repository.races[key] = replace(
        race_repository.races[key], end_time=START_MS + 10, time_taken=10
    )

    result = race_service.start(event, "Team Rocket", "rocket@example.com")

    assert result.finished
    assert result.token is None
    assert session_repository.sessions == {}


@pytest.mark.parametrize(("name", "email"), [("", "a@b.c"), ("Team", "   ")])
def test_start_requires_name_and_email(
    name: str, email: str, event: EventDefinition, race_service: RaceService
) -> None:
    with pytest.raises(EntrantValidationError):
        race_service.start(event, name, email)


def test_load_session_ignores_missing_and_expired(
    event: EventDefinition,
    race_service: RaceService,
    clock: FixedClock,
) -> None:
    token = race_service.start(event, "Team", "team@example.com").token

    assert race_service.load_session(None) is None
    assert race_service.load_session("unknown") is None
    assert race_service.load_session(token) is not None

    clock.advance(24 * 60 * 60 * 1000)

    assert race_service.load_session(token) is None


def test_start_purges_expired_sessions(
    event: EventDefinition,
    race_service: RaceService,
    session_repository: InMemorySessionRepository,
    clock: FixedClock,
) -> None:
    stale = race_service.start(event, "Team", "team@example.com").token
    clock.advance(24 * 60 * 60 * 1000)
    assert race_service.load_session(stale) is None

    fresh = race_service.start(event, "Team", "team@example.com").token

    assert stale not in session_repository.sessions
    assert list(session_repository.sessions) == [fresh]
