"""Level curriculum and checklist tracking for times_drill.

A level's checklist holds every canonical fact (n, level) for n in
[0, level]. The checklist must be fully mastered, with no open
corrections, before the learner graduates to the next level.
"""

from collections.abc import Mapping

from times_drill.constants import MAX_LEVEL, MIN_LEVEL
from times_drill.models.fact import FactDTO, fact_key, parse_fact_key
from times_drill.models.state import ChecklistRowDTO

__all__ = [
    "build_checklist",
    "checklist_rows",
    "clamp_level",
    "incomplete_keys",
    "is_complete",
    "mark_complete",
    "merge_checklist",
]


def clamp_level(level: int) -> int:
    """Clamp a level into [MIN_LEVEL, MAX_LEVEL]."""
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


def build_checklist(level: int) -> dict[str, bool]:
    """Build a fresh checklist for a level.

    Args:
        level: Level in [0, MAX_LEVEL]

    Returns:
        Mapping of fact key -> False, ordered by the non-level operand
    """
    return {fact_key(n, level): False for n in range(level + 1)}


def merge_checklist(level: int, saved: Mapping[str, bool] | None) -> dict[str, bool]:
    """Rebuild a level's checklist, keeping saved progress where it applies.

    Keys that do not belong to the level are dropped and missing
    required keys are added as incomplete.

    Args:
        level: Active level
        saved: Previously persisted checklist, if any

    Returns:
        Checklist covering exactly the level's facts
    """
    checklist = build_checklist(level)
    for key, done in (saved or {}).items():
        if key in checklist:
            checklist[key] = bool(done)
    return checklist


def mark_complete(checklist: Mapping[str, bool], fact: FactDTO) -> dict[str, bool]:
    """Mark a fact as mastered for the current level.

    No-op when the fact is not part of the checklist.
    """
    updated = dict(checklist)
    if fact.key in updated:
        updated[fact.key] = True
    return updated


def is_complete(checklist: Mapping[str, bool]) -> bool:
    """Check whether every checklist entry is mastered (and there is at least one)."""
    return len(checklist) > 0 and all(checklist.values())


def incomplete_keys(checklist: Mapping[str, bool]) -> list[str]:
    """List checklist keys still to master, in checklist order."""
    return [key for key, done in checklist.items() if not done]


def checklist_rows(checklist: Mapping[str, bool], level: int) -> list[ChecklistRowDTO]:
    """Project a checklist for display.

    Each row carries the operand paired with the level, so "3x5" at
    level 5 shows as 3.
    """
    rows: list[ChecklistRowDTO] = []
    for key, done in checklist.items():
        fact = parse_fact_key(key)
        other = fact.a if fact.b == level else fact.b
        rows.append(ChecklistRowDTO(key=key, other=other, done=bool(done)))
    rows.sort(key=lambda row: row.other)
    return rows
