"""Supabase-backed race repository."""

from dataclasses import dataclass

from supabase import Client

from scavenger_hunt.domain.races import RaceRecord
from scavenger_hunt.services.races import RaceRepository

_COLUMNS = (
    "name, email, event_name, start_time, end_time, time_taken, current_clue"
)


@dataclass
class SupabaseRaceRepository(RaceRepository):
    """Supabase implementation for race rows."""

    client: Client

    def get_race(self, email: str, event_id: str) -> RaceRecord | None:
        """Return the race row for a participant, if present."""
        response = (
            self.client.table("races")
            .select(_COLUMNS)
            .eq("email", email)
            .eq("event_name", event_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_race(self, race: RaceRecord) -> RaceRecord:
        """Insert a race row and return it."""
        response = (
            self.client.table("races")
            .insert(
                {
                    "name": race.name,
                    "email": race.email,
                    "event_name": race.event_id,
                    "start_time": race.start_time,
                    "end_time": race.end_time,
                    "time_taken": race.time_taken,
                    "current_clue": race.current_clue,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create race")
        return _parse_row(response.data[0])

    def list_races(self, event_id: str) -> list[RaceRecord]:
        """Return every race row for an event."""
        response = (
            self.client.table("races")
            .select(_COLUMNS)
            .eq("event_name", event_id)
            .order("start_time", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_completed_races(self, event_id: str) -> list[RaceRecord]:
        """Return finished race rows, fastest first."""
        response = (
            self.client.table("races")
            .select(_COLUMNS)
            .eq("event_name", event_id)
            .not_.is_("end_time", "null")
            .order("time_taken", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_in_progress_races(self, event_id: str) -> list[RaceRecord]:
        """Return race rows without an end time."""
        response = (
            self.client.table("races")
            .select(_COLUMNS)
            .eq("event_name", event_id)
            .is_("end_time", "null")
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def advance_race(
        self, email: str, event_id: str, expected_clue: int, next_clue: int
    ) -> bool:
        """Move the clue index only while it still equals ``expected_clue``."""
        response = (
            self.client.table("races")
            .update({"current_clue": next_clue})
            .eq("email", email)
            .eq("event_name", event_id)
            .eq("current_clue", expected_clue)
            .is_("end_time", "null")
            .execute()
        )
        return bool(response.data)

    def finish_race(
        self, email: str, event_id: str, end_time: int, time_taken: int
    ) -> bool:
        """Record the finish only if no end time is stored yet."""
        response = (
            self.client.table("races")
            .update({"end_time": end_time, "time_taken": time_taken})
            .eq("email", email)
            .eq("event_name", event_id)
            .is_("end_time", "null")
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> RaceRecord:
    end_time = row.get("end_time")
    time_taken = row.get("time_taken")
    return RaceRecord(
        name=str(row["name"]),
        email=str(row["email"]),
        event_id=str(row["event_name"]),
        start_time=int(row["start_time"]),
        current_clue=int(row.get("current_clue") or 0),
        end_time=int(end_time) if end_time is not None else None,
        time_taken=int(time_taken) if time_taken is not None else None,
    )
