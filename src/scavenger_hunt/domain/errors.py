"""Domain errors raised at the request boundary."""


class ScavengerHuntError(Exception):
    """Base error for the scavenger hunt service."""


class EventNotFoundError(ScavengerHuntError):
    """Raised when an event identifier is not in the catalog."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event '{event_id}' not found.")
        self.event_id = event_id


class MissingSessionError(ScavengerHuntError):
    """Raised when a scan arrives without a live session."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"No active session for event '{event_id}'.")
        self.event_id = event_id


class EntrantValidationError(ScavengerHuntError):
    """Raised when the start form is missing a team name or email."""


class CatalogError(ScavengerHuntError):
    """Raised when an event catalog cannot be loaded."""
