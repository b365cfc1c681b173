"""Correction tracking and lifetime miss records for times_drill.

All functions are pure: they return new lists and never mutate
their inputs. A missed fact enters the correction list and must be
answered correctly CORRECTIONS_REQUIRED times in a row to leave it;
any fresh miss restarts its count.
"""

from collections.abc import Sequence

from times_drill.constants import CORRECTIONS_REQUIRED, MISS_RECORD_DISPLAY_LIMIT
from times_drill.models.fact import FactDTO
from times_drill.models.progress import CorrectionEntryDTO, MissRecordDTO

__all__ = [
    "credit_entry",
    "ensure_entry",
    "find_entry",
    "record_hit",
    "record_miss",
    "reset_progress",
    "sorted_corrections",
    "top_miss_records",
]


def find_entry(corrections: Sequence[CorrectionEntryDTO], fact: FactDTO) -> int:
    """Return the index of the fact's correction entry, or -1."""
    for idx, entry in enumerate(corrections):
        if entry.key == fact.key:
            return idx
    return -1


def ensure_entry(
    corrections: Sequence[CorrectionEntryDTO],
    fact: FactDTO,
) -> list[CorrectionEntryDTO]:
    """Insert a correction entry for the fact, or reset its requirement.

    Args:
        corrections: Current correction list
        fact: Missed fact

    Returns:
        New correction list containing exactly one entry for the fact
    """
    updated = list(corrections)
    idx = find_entry(updated, fact)
    if idx == -1:
        updated.append(
            CorrectionEntryDTO(
                key=fact.key,
                a=fact.a,
                b=fact.b,
                got=0,
                required=CORRECTIONS_REQUIRED,
            )
        )
    else:
        updated[idx] = updated[idx].model_copy(update={"required": CORRECTIONS_REQUIRED})
    return updated


def reset_progress(
    corrections: Sequence[CorrectionEntryDTO],
    fact: FactDTO,
) -> list[CorrectionEntryDTO]:
    """Restart the fact's consecutive-correct count. No-op if absent."""
    updated = list(corrections)
    idx = find_entry(updated, fact)
    if idx != -1:
        updated[idx] = updated[idx].model_copy(
            update={"got": 0, "required": CORRECTIONS_REQUIRED}
        )
    return updated


def credit_entry(
    corrections: Sequence[CorrectionEntryDTO],
    fact: FactDTO,
) -> tuple[list[CorrectionEntryDTO], bool]:
    """Credit one correct answer towards the fact's correction.

    Args:
        corrections: Current correction list
        fact: Correctly answered fact

    Returns:
        Tuple of (new correction list, True if the entry was cleared)
    """
    updated = list(corrections)
    idx = find_entry(updated, fact)
    if idx == -1:
        return updated, False

    entry = updated[idx]
    got = min(entry.required, entry.got + 1)
    if got >= entry.required:
        del updated[idx]
        return updated, True

    updated[idx] = entry.model_copy(update={"got": got})
    return updated, False


def record_miss(records: Sequence[MissRecordDTO], fact: FactDTO) -> list[MissRecordDTO]:
    """Count a miss in the lifetime records, creating the record if needed."""
    updated = list(records)
    for idx, record in enumerate(updated):
        if record.key == fact.key:
            updated[idx] = record.model_copy(update={"wrong_count": record.wrong_count + 1})
            return updated

    updated.append(
        MissRecordDTO(key=fact.key, a=fact.a, b=fact.b, wrong_count=1, right_count=0)
    )
    return updated


def record_hit(records: Sequence[MissRecordDTO], fact: FactDTO) -> list[MissRecordDTO]:
    """Count a correct answer for a fact that has been missed before."""
    updated = list(records)
    for idx, record in enumerate(updated):
        if record.key == fact.key:
            updated[idx] = record.model_copy(update={"right_count": record.right_count + 1})
            break
    return updated


def sorted_corrections(corrections: Sequence[CorrectionEntryDTO]) -> list[CorrectionEntryDTO]:
    """Corrections ordered by operands for display."""
    return sorted(corrections, key=lambda entry: (entry.a, entry.b))


def top_miss_records(
    records: Sequence[MissRecordDTO],
    limit: int = MISS_RECORD_DISPLAY_LIMIT,
) -> list[MissRecordDTO]:
    """Most-missed facts first, capped for display.

    Ties are broken by operands so the order is stable.
    """
    ordered = sorted(records, key=lambda record: (-record.wrong_count, record.a, record.b))
    return ordered[:limit]
