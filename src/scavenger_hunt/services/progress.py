"""Clue redemption state machine."""

import logging
from dataclasses import dataclass, field

from scavenger_hunt.domain.decisions import Decision, Outcome
from scavenger_hunt.domain.events import EventDefinition
from scavenger_hunt.domain.races import RaceRecord, SessionRecord
from scavenger_hunt.services.races import (
    Clock,
    RaceRepository,
    SessionRepository,
    now_ms,
)

logger = logging.getLogger(__name__)


@dataclass
class ProgressService:
    """Decides what a scanned code does to a team's race.

    Scans are evaluated against the clue index mirrored in the session. The
    final code only finishes the race when it is the next expected code;
    earlier codes can be replayed freely and later codes are refused without
    revealing their clue.
    """

    race_repository: RaceRepository
    session_repository: SessionRepository
    clock: Clock = field(default=now_ms)

    def redeem(
        self,
        event: EventDefinition,
        session: SessionRecord,
        race: RaceRecord,
        scanned_code: str,
    ) -> Decision:
        """Evaluate a scan and apply the resulting race/session updates."""
        code = scanned_code.strip().upper()
        clue = event.clues.get(code)
        code_index = event.index_of(code)
        if clue is None or code_index is None:
            return Decision(outcome=Outcome.INVALID_CODE)

        expected_index = session.current_clue
        clue_number = code_index + 1

        if code_index == event.last_index and code_index == expected_index:
            return self._finish(event, session, race, clue, clue_number)

        if code_index < expected_index:
            return Decision(
                outcome=Outcome.ALREADY_REDEEMED,
                clue=clue,
                clue_number=clue_number,
                total_clues=event.total_clues,
            )

        if code_index > expected_index:
            return Decision(
                outcome=Outcome.OUT_OF_ORDER,
                clue_number=clue_number,
                total_clues=event.total_clues,
            )

        advanced = self.race_repository.advance_race(
            race.email, event.id, expected_clue=code_index, next_clue=code_index + 1
        )
        if not advanced:
            return self._resync(event, session, race, clue, clue_number)
        self.session_repository.update_session_clue(session.token, code_index + 1)
        return Decision(
            outcome=Outcome.ADVANCED,
            clue=clue,
            clue_number=clue_number,
            total_clues=event.total_clues,
        )

    def _finish(
        self,
        event: EventDefinition,
        session: SessionRecord,
        race: RaceRecord,
        clue: str,
        clue_number: int,
    ) -> Decision:
        if race.is_finished:
            self.session_repository.delete_session(session.token)
            return Decision(outcome=Outcome.ALREADY_FINISHED)

        end_time = self.clock()
        time_taken = end_time - race.start_time
        recorded = self.race_repository.finish_race(
            race.email, event.id, end_time=end_time, time_taken=time_taken
        )
        self.session_repository.delete_session(session.token)
        if not recorded:
            logger.warning(
                "Race already finished by a concurrent scan",
                extra={"event_id": event.id, "email": race.email},
            )
            return Decision(outcome=Outcome.ALREADY_FINISHED)

        logger.info(
            "Race finished",
            extra={"event_id": event.id, "email": race.email, "time_taken": time_taken},
        )
        return Decision(
            outcome=Outcome.FINISHED,
            clue=clue,
            clue_number=clue_number,
            total_clues=event.total_clues,
            time_taken_ms=time_taken,
        )

    def _resync(
        self,
        event: EventDefinition,
        session: SessionRecord,
        race: RaceRecord,
        clue: str,
        clue_number: int,
    ) -> Decision:
        # Another request moved the race row first; follow the stored index.
        stored = self.race_repository.get_race(race.email, event.id)
        if stored is not None:
            self.session_repository.update_session_clue(
                session.token, stored.current_clue
            )
        logger.warning(
            "Clue advance lost to a concurrent scan",
            extra={"event_id": event.id, "email": race.email},
        )
        return Decision(
            outcome=Outcome.ALREADY_REDEEMED,
            clue=clue,
            clue_number=clue_number,
            total_clues=event.total_clues,
        )
