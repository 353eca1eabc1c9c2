"""Leaderboard projections over race rows."""

import math
from dataclasses import dataclass

from scavenger_hunt.domain.races import LeaderboardEntry, RaceRecord
from scavenger_hunt.services.races import RaceRepository

SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60


@dataclass
class LeaderboardService:
    """Read-only views of an event's races, recomputed per request."""

    repository: RaceRepository

    def completed(self, event_id: str) -> list[LeaderboardEntry]:
        """Return each team's best finishing time, fastest first."""
        best: dict[str, LeaderboardEntry] = {}
        for race in self.repository.list_completed_races(event_id):
            if race.time_taken is None:
                continue
            current = best.get(race.name)
            if current is None or race.time_taken < current.best_time_ms:
                best[race.name] = LeaderboardEntry(
                    name=race.name, email=race.email, best_time_ms=race.time_taken
                )
        return sorted(
            best.values(),
            key=lambda entry: (entry.best_time_ms, entry.name.lower(), entry.email),
        )

    def in_progress(self, event_id: str) -> list[RaceRecord]:
        """Return races that have not finished yet."""
        return [
            race
            for race in self.repository.list_in_progress_races(event_id)
            if not race.is_finished
        ]

    def team_names(self, event_id: str) -> list[str]:
        """Return the lower-cased names already taken for an event."""
        races = self.repository.list_races(event_id)
        return list(dict.fromkeys(race.name.lower() for race in races))


def format_duration(time_ms: float | None) -> str:
    """Format milliseconds as ``1h 2m 3s``, dropping leading zero units."""
    if not time_ms or time_ms < 0 or not math.isfinite(time_ms):
        return "0s"
    total_seconds = int(time_ms // 1000)
    hours, remainder = divmod(total_seconds, SECONDS_PER_HOUR)
    minutes, seconds = divmod(remainder, SECONDS_PER_MINUTE)
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"
