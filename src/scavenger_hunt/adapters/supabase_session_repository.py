"""Supabase-backed race session repository."""

from dataclasses import dataclass

from supabase import Client

from scavenger_hunt.domain.races import SessionRecord
from scavenger_hunt.services.races import SessionRepository


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for expiring race sessions."""

    client: Client

    def create_session(self, session: SessionRecord) -> None:
        """Insert a session row."""
        self.client.table("race_sessions").insert(
            {
                "id": session.token,
                "name": session.name,
                "email": session.email,
                "event_name": session.event_id,
                "start_time": session.start_time,
                "current_clue": session.current_clue,
                "expires_at": session.expires_at,
            }
        ).execute()

    def get_session(self, token: str, now: int) -> SessionRecord | None:
        """Return the session unless it is missing or expired."""
        response = (
            self.client.table("race_sessions")
            .select(
                "id, name, email, event_name, start_time, current_clue, expires_at"
            )
            .eq("id", token)
            .gt("expires_at", now)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return SessionRecord(
            token=str(row["id"]),
            name=str(row["name"]),
            email=str(row["email"]),
            event_id=str(row["event_name"]),
            start_time=int(row["start_time"]),
            current_clue=int(row.get("current_clue") or 0),
            expires_at=int(row["expires_at"]),
        )

    def update_session_clue(self, token: str, current_clue: int) -> None:
        """Mirror the race's clue index into the session."""
        self.client.table("race_sessions").update({"current_clue": current_clue}).eq(
            "id", token
        ).execute()

    def delete_session(self, token: str) -> None:
        """Delete a session row."""
        self.client.table("race_sessions").delete().eq("id", token).execute()

    def delete_expired_sessions(self, now: int) -> None:
        """Delete session rows that expired at or before ``now``."""
        self.client.table("race_sessions").delete().lte("expires_at", now).execute()
