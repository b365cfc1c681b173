"""Delayed-reinforcement review queue for times_drill.

Each miss schedules two batches of repeats. Visible repeats activate
at the current level and come due 1, 2 and 3 turns later. Hidden
repeats activate at the next level and stay dormant until the learner
is promoted, then resurface silently to reinforce retention.

Countdowns only run for items whose activation level has been
reached, and advance once per scheduler turn via pop_due_review_item.
"""

from collections.abc import Sequence

from times_drill.constants import (
    CURRENT_REVIEW_REPEATS,
    MAX_LEVEL,
    NEXT_LEVEL_HIDDEN_REPEATS,
)
from times_drill.models.fact import FactDTO
from times_drill.models.review import DueReview, ReviewQueueItemDTO

__all__ = [
    "pop_due_review_item",
    "purge_current_level_items",
    "restore_item",
    "schedule_current_level_repeats",
    "schedule_next_level_hidden_repeats",
]


def _schedule(
    queue: Sequence[ReviewQueueItemDTO],
    fact: FactDTO,
    activate_at_level: int,
    hidden: bool,
    repeats: int,
) -> list[ReviewQueueItemDTO]:
    updated = [
        item
        for item in queue
        if not (
            item.key == fact.key
            and item.activate_at_level == activate_at_level
            and item.hidden == hidden
        )
    ]
    for due in range(1, repeats + 1):
        updated.append(
            ReviewQueueItemDTO(
                key=fact.key,
                a=fact.a,
                b=fact.b,
                answer=fact.answer,
                activate_at_level=activate_at_level,
                due_review_turns=due,
                hidden=hidden,
            )
        )
    return updated


def schedule_current_level_repeats(
    queue: Sequence[ReviewQueueItemDTO],
    fact: FactDTO,
    level: int,
) -> list[ReviewQueueItemDTO]:
    """Replace the fact's visible same-level repeats with a fresh batch.

    Args:
        queue: Current review queue
        fact: Missed fact
        level: Active level

    Returns:
        New queue with CURRENT_REVIEW_REPEATS visible items due in 1..N turns
    """
    return _schedule(queue, fact, level, hidden=False, repeats=CURRENT_REVIEW_REPEATS)


def schedule_next_level_hidden_repeats(
    queue: Sequence[ReviewQueueItemDTO],
    fact: FactDTO,
    level: int,
) -> list[ReviewQueueItemDTO]:
    """Replace the fact's hidden next-level repeats with a fresh batch.

    At MAX_LEVEL the "next" level is MAX_LEVEL itself.
    """
    activate_at = min(level + 1, MAX_LEVEL)
    return _schedule(queue, fact, activate_at, hidden=True, repeats=NEXT_LEVEL_HIDDEN_REPEATS)


def pop_due_review_item(
    queue: Sequence[ReviewQueueItemDTO],
    level: int,
) -> tuple[list[ReviewQueueItemDTO], DueReview | None]:
    """Advance countdowns by one turn and pop the first due item.

    Every active item (activate_at_level <= level) is decremented,
    whether or not anything is popped. Visible items win over hidden
    ones; within each group the oldest insertion wins.

    Args:
        queue: Current review queue
        level: Active level

    Returns:
        Tuple of (new queue, popped item or None)
    """
    ticked = [
        item.model_copy(update={"due_review_turns": item.due_review_turns - 1})
        if item.is_active(level)
        else item
        for item in queue
    ]

    for want_hidden in (False, True):
        for idx, item in enumerate(ticked):
            if item.hidden == want_hidden and item.is_due(level):
                remaining = ticked[:idx] + ticked[idx + 1 :]
                return remaining, DueReview(item=item, index=idx)

    return ticked, None


def restore_item(
    queue: Sequence[ReviewQueueItemDTO],
    due: DueReview,
) -> list[ReviewQueueItemDTO]:
    """Put a popped item back at its original position.

    The item keeps its already-elapsed countdown, so it is due again
    on the next pop.
    """
    updated = list(queue)
    updated.insert(min(due.index, len(updated)), due.item)
    return updated


def purge_current_level_items(
    queue: Sequence[ReviewQueueItemDTO],
    key: str,
    level: int,
) -> list[ReviewQueueItemDTO]:
    """Drop a fact's visible repeats at the given level.

    Used once a correction clears: remediation is proven, so no more
    forced same-level resurfacing is needed. Hidden repeats are kept.
    """
    return [
        item
        for item in queue
        if not (item.key == key and item.activate_at_level == level and not item.hidden)
    ]
