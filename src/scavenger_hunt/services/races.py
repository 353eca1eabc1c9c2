"""Race start/resume and the persistence contracts for races and sessions."""

import logging
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from scavenger_hunt.config import SESSION_TTL_SECONDS
from scavenger_hunt.domain.errors import EntrantValidationError
from scavenger_hunt.domain.events import EventDefinition
from scavenger_hunt.domain.races import RaceRecord, SessionRecord

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class RaceRepository(Protocol):
    """Persistence interface for race rows keyed by (email, event)."""

    def get_race(self, email: str, event_id: str) -> RaceRecord | None:
        """Return the race row for a participant, if present."""

    def create_race(self, race: RaceRecord) -> RaceRecord:
        """Insert a race row and return it."""

    def list_races(self, event_id: str) -> list[RaceRecord]:
        """Return every race row for an event."""

    def list_completed_races(self, event_id: str) -> list[RaceRecord]:
        """Return finished race rows ordered by time taken."""

    def list_in_progress_races(self, event_id: str) -> list[RaceRecord]:
        """Return race rows without an end time."""

    def advance_race(
        self, email: str, event_id: str, expected_clue: int, next_clue: int
    ) -> bool:
        """Move the clue index if it still equals ``expected_clue``."""

    def finish_race(
        self, email: str, event_id: str, end_time: int, time_taken: int
    ) -> bool:
        """Record the finish if the race is not finished yet."""


class SessionRepository(Protocol):
    """Persistence interface for expiring browser sessions."""

    def create_session(self, session: SessionRecord) -> None:
        """Store a new session."""

    def get_session(self, token: str, now: int) -> SessionRecord | None:
        """Return a session that has not expired at ``now``."""

    def update_session_clue(self, token: str, current_clue: int) -> None:
        """Mirror a new clue index into the session."""

    def delete_session(self, token: str) -> None:
        """Remove a session."""

    def delete_expired_sessions(self, now: int) -> None:
        """Remove every session whose expiry is at or before ``now``."""


@dataclass(frozen=True)
class StartResult:
    """Outcome of submitting the start form."""

    race: RaceRecord
    resumed: bool
    token: str | None = None
    redirect_code: str | None = None

    @property
    def finished(self) -> bool:
        return self.race.is_finished


@dataclass
class RaceService:
    """Creates or resumes races and issues sessions for them."""

    race_repository: RaceRepository
    session_repository: SessionRepository
    session_ttl_seconds: int = SESSION_TTL_SECONDS
    clock: Clock = field(default=now_ms)

    def start(self, event: EventDefinition, name: str, email: str) -> StartResult:
        """Start a race, or resume the participant's existing one."""
        cleaned_name = name.strip()
        cleaned_email = email.strip().lower()
        if not cleaned_name or not cleaned_email:
            raise EntrantValidationError("Team name and email are required.")

        race = self.race_repository.get_race(cleaned_email, event.id)
        resumed = race is not None
        if race is None:
            race = self.race_repository.create_race(
                RaceRecord(
                    name=cleaned_name,
                    email=cleaned_email,
                    event_id=event.id,
                    start_time=self.clock(),
                    current_clue=0,
                )
            )
            logger.info(
                "Race created", extra={"event_id": event.id, "email": cleaned_email}
            )
        else:
            logger.info(
                "Race resumed",
                extra={"event_id": event.id, "current_clue": race.current_clue},
            )

        if race.is_finished:
            return StartResult(race=race, resumed=resumed)

        now = self.clock()
        self.session_repository.delete_expired_sessions(now)
        session = SessionRecord(
            token=secrets.token_urlsafe(16),
            name=race.name,
            email=race.email,
            event_id=event.id,
            start_time=race.start_time,
            current_clue=race.current_clue,
            expires_at=now + self.session_ttl_seconds * 1000,
        )
        self.session_repository.create_session(session)
        redirect_index = min(race.current_clue, event.last_index)
        return StartResult(
            race=race,
            resumed=resumed,
            token=session.token,
            redirect_code=event.ordered_codes[redirect_index],
        )

    def load_session(self, token: str | None) -> SessionRecord | None:
        """Return the live session for a cookie token, if any."""
        if not token:
            return None
        return self.session_repository.get_session(token, self.clock())

    def load_race(self, session: SessionRecord) -> RaceRecord | None:
        """Return the race row a session mirrors."""
        return self.race_repository.get_race(session.email, session.event_id)
