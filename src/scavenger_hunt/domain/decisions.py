"""Outcomes of scanning a clue code."""

from dataclasses import dataclass
from enum import StrEnum


class Outcome(StrEnum):
    """Result of evaluating a single scan."""

    ADVANCED = "ADVANCED"
    ALREADY_REDEEMED = "ALREADY_REDEEMED"
    OUT_OF_ORDER = "OUT_OF_ORDER"
    FINISHED = "FINISHED"
    ALREADY_FINISHED = "ALREADY_FINISHED"
    INVALID_CODE = "INVALID_CODE"


@dataclass(frozen=True)
class Decision:
    """What the scan did, plus what the page may show about it."""

    outcome: Outcome
    clue: str | None = None
    clue_number: int | None = None
    total_clues: int | None = None
    time_taken_ms: int | None = None
