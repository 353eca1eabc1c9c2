"""Domain models for configured scavenger-hunt events."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class EventDefinition:
    """An event with its ordered clue codes and the clue text behind each code."""

    id: str
    title: str
    description: str
    host: str
    ordered_codes: tuple[str, ...]
    clues: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "clues", MappingProxyType(dict(self.clues)))

    @property
    def total_clues(self) -> int:
        return len(self.ordered_codes)

    @property
    def last_index(self) -> int:
        return len(self.ordered_codes) - 1

    def index_of(self, code: str) -> int | None:
        """Return the sequence position of a code, if it belongs to the event."""
        try:
            return self.ordered_codes.index(code)
        except ValueError:
            return None

    def clue_at(self, index: int) -> str | None:
        """Return the clue text unlocked by the code at a sequence position."""
        if 0 <= index < len(self.ordered_codes):
            return self.clues.get(self.ordered_codes[index])
        return None
