"""Domain models for races, sessions and leaderboard rows."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RaceRecord:
    """Durable progress of one participant for one event.

    Times are epoch milliseconds. ``end_time`` and ``time_taken`` are either
    both set (finished race) or both ``None``.
    """

    name: str
    email: str
    event_id: str
    start_time: int
    current_clue: int
    end_time: int | None = None
    time_taken: int | None = None

    @property
    def is_finished(self) -> bool:
        return self.end_time is not None


@dataclass(frozen=True)
class SessionRecord:
    """Browser-bound mirror of an active race."""

    token: str
    name: str
    email: str
    event_id: str
    start_time: int
    current_clue: int
    expires_at: int


@dataclass(frozen=True)
class LeaderboardEntry:
    """Best finishing time of a team."""

    name: str
    email: str
    best_time_ms: int
