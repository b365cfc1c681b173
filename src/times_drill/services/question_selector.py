"""Question selection for times_drill.

Turns alternate between two pools. Even turns draw from the new pool
(unmastered checklist facts); odd turns draw from the review pool (due
review items, then open corrections, then occasionally a lifetime miss).
A fact is never asked twice in a row; the only sanctioned repeat is the
re-ask right after a missed answer, handled by the progression layer.
"""

import random
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from times_drill.constants import (
    MISS_RECORD_REVIEW_PROBABILITY,
    NON_REPEAT_RANDOM_DRAWS,
    NON_REPEAT_RETRIES,
)
from times_drill.logging import get_logger
from times_drill.models.fact import FactDTO, make_fact, parse_fact_key
from times_drill.models.progress import CorrectionEntryDTO, MissRecordDTO
from times_drill.models.review import ReviewQueueItemDTO
from times_drill.models.state import SchedulerStateDTO
from times_drill.services.curriculum import incomplete_keys
from times_drill.services.review_queue import pop_due_review_item, restore_item

__all__ = [
    "QuestionSelector",
    "Selection",
]

logger = get_logger(__name__)


@dataclass(frozen=True)
class Selection:
    """Result of drawing the next question.

    Attributes:
        fact: Fact to ask
        review_queue: Review queue after this turn's countdown tick
        from_review: Fact was popped from the review queue
        hidden: Popped item was a hidden next-level repeat
    """

    fact: FactDTO
    review_queue: list[ReviewQueueItemDTO]
    from_review: bool = False
    hidden: bool = False


class QuestionSelector:
    """Draws the next fact to ask.

    All randomness goes through the injected random.Random, so a seeded
    generator makes selection fully deterministic.

    Example:
        selector = QuestionSelector(random.Random(7))
        selection = selector.next_question(state)
        print(selection.fact, selection.from_review)
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        """Initialize selector.

        Args:
            rng: Random source (default: a fresh unseeded generator)
        """
        self._rng = rng or random.Random()

    def pick_any(self, level: int) -> FactDTO:
        """Uniformly random operands within [0, level] x [0, level]."""
        return make_fact(self._rng.randint(0, level), self._rng.randint(0, level))

    def pick_new(self, level: int, checklist: Mapping[str, bool]) -> FactDTO:
        """Random unmastered checklist fact, or any fact once all are mastered."""
        remaining = incomplete_keys(checklist)
        if not remaining:
            return self.pick_any(level)
        return parse_fact_key(remaining[self._rng.randint(0, len(remaining) - 1)])

    def pick_review(
        self,
        level: int,
        corrections: Sequence[CorrectionEntryDTO],
        miss_records: Sequence[MissRecordDTO],
    ) -> FactDTO:
        """Review candidate when no queue item is due.

        Priority: an open correction, else (sometimes) a lifetime miss,
        else any fact in range.
        """
        if corrections:
            return corrections[self._rng.randint(0, len(corrections) - 1)].fact
        if miss_records and self._rng.random() < MISS_RECORD_REVIEW_PROBABILITY:
            return miss_records[self._rng.randint(0, len(miss_records) - 1)].fact
        return self.pick_any(level)

    def choose_non_repeating(
        self,
        generate: Callable[[], FactDTO],
        last_key: str | None,
        level: int,
        checklist: Mapping[str, bool],
    ) -> FactDTO:
        """Draw from a candidate generator, avoiding the previous fact.

        Fallback ladder when the generator keeps repeating: any other
        unmastered checklist fact, then random draws in range, then
        whatever the generator yields (only reachable when the level
        has a single fact).

        Args:
            generate: Candidate generator
            last_key: Key of the previously asked fact
            level: Active level
            checklist: Active checklist

        Returns:
            Chosen fact
        """
        if last_key is None:
            return generate()

        for _ in range(NON_REPEAT_RETRIES):
            candidate = generate()
            if candidate.key != last_key:
                return candidate

        for key in incomplete_keys(checklist):
            if key != last_key:
                return parse_fact_key(key)

        for _ in range(NON_REPEAT_RANDOM_DRAWS):
            candidate = self.pick_any(level)
            if candidate.key != last_key:
                return candidate

        logger.warning("non_repeat_exhausted", last_key=last_key, level=level)
        return generate()

    def next_question(self, state: SchedulerStateDTO) -> Selection:
        """Draw the question for a normal turn.

        The review queue is popped at most once per turn, so countdowns
        advance exactly once. A popped item that would repeat the
        previous fact is put back and stays due for the next review turn.

        Args:
            state: Practicing state with a level set

        Returns:
            Selection with the fact and the updated review queue
        """
        if state.level is None:
            raise ValueError("Cannot draw a question without a level")
        level = state.level

        use_new_pool = state.force_next_new or state.turn_parity % 2 == 0
        if use_new_pool:
            fact = self.choose_non_repeating(
                lambda: self.pick_new(level, state.checklist),
                state.last_question_key,
                level,
                state.checklist,
            )
            return Selection(fact=fact, review_queue=list(state.review_queue))

        queue, due = pop_due_review_item(state.review_queue, level)
        offered_due = False

        def review_candidate() -> FactDTO:
            nonlocal offered_due
            if due is not None and not offered_due:
                offered_due = True
                return due.fact
            return self.pick_review(level, state.corrections, state.miss_records)

        fact = self.choose_non_repeating(
            review_candidate,
            state.last_question_key,
            level,
            state.checklist,
        )

        if due is None:
            return Selection(fact=fact, review_queue=queue)
        if fact == due.fact:
            return Selection(fact=fact, review_queue=queue, from_review=True, hidden=due.hidden)

        logger.debug("review_item_deferred", key=due.item.key, last_key=state.last_question_key)
        return Selection(fact=fact, review_queue=restore_item(queue, due))
