"""Event catalog loading and lookup."""

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from scavenger_hunt.domain.errors import CatalogError, EventNotFoundError
from scavenger_hunt.domain.events import EventDefinition


class EventConfig(BaseModel):
    """Schema of one event entry in a catalog file."""

    title: str
    description: str = ""
    host: str = ""
    ordered_codes: list[str] = Field(min_length=1)
    clues: dict[str, str]

    @model_validator(mode="after")
    def _check_codes(self) -> "EventConfig":
        codes = [code.strip().upper() for code in self.ordered_codes]
        if len(set(codes)) != len(codes):
            raise ValueError("ordered_codes must be unique")
        clues = {code.strip().upper(): text for code, text in self.clues.items()}
        if set(codes) != set(clues):
            raise ValueError("every ordered code needs exactly one clue")
        self.ordered_codes = codes
        self.clues = clues
        return self


@dataclass(frozen=True)
class EventCatalog:
    """Process-wide, read-only set of events."""

    events: Mapping[str, EventDefinition]

    @classmethod
    def from_definitions(cls, events: Iterable[EventDefinition]) -> "EventCatalog":
        return cls(events={event.id: event for event in events})

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> "EventCatalog":
        """Build a catalog from ``{event_id: {...}}`` data."""
        definitions = []
        for event_id, payload in raw.items():
            try:
                config = EventConfig.model_validate(payload)
            except ValidationError as exc:
                raise CatalogError(f"Invalid event '{event_id}': {exc}") from exc
            definitions.append(
                EventDefinition(
                    id=event_id,
                    title=config.title,
                    description=config.description,
                    host=config.host,
                    ordered_codes=tuple(config.ordered_codes),
                    clues=config.clues,
                )
            )
        return cls.from_definitions(definitions)

    @classmethod
    def from_file(cls, path: str | Path) -> "EventCatalog":
        """Load a JSON catalog file."""
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CatalogError(f"Cannot read event catalog {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise CatalogError("Event catalog must be a JSON object keyed by event id")
        return cls.from_mapping(raw)

    def get(self, event_id: str) -> EventDefinition:
        """Return the event or raise ``EventNotFoundError``."""
        event = self.events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event


def load_catalog(events_file: str | None) -> EventCatalog:
    """Load the configured catalog, falling back to the built-in events."""
    if events_file:
        return EventCatalog.from_file(events_file)
    return EventCatalog.from_mapping(DEFAULT_EVENTS)


DEFAULT_EVENTS: dict[str, object] = {
    "global-leaders": {
        "title": "Riccarton Market Amazing Race",
        "description": (
            "Team up with your friends or go solo for an Amazing Race tour around "
            "Riccarton Market, hosted by the UC Global Leaders. Scan each QR code "
            "to get a hint leading to the next one. Complete the course as fast "
            "as you can and the quickest time wins a reward."
        ),
        "host": "UC Global Leaders",
        "ordered_codes": ["HEARTYHANGI", "MUSSELMAD", "ADAMSMALAY", "PRICKLYPEAR"],
        "clues": {
            "HEARTYHANGI": "Hearty Hangi: Tradition below ground and warm above",
            "MUSSELMAD": "Mussel Madness: Flex your crazy sea creature",
            "ADAMSMALAY": (
                "Adam's Malaysian Noodles: First man's feast with a Southeast twist"
            ),
            "PRICKLYPEAR": "Prickly Pear: Spikes guard the sweetest secret",
        },
    }
}
