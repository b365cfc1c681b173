"""Review queue models for times_drill."""

from pydantic import BaseModel, Field

from times_drill.models.fact import FactDTO, make_fact

__all__ = [
    "DueReview",
    "ReviewQueueItemDTO",
]


class ReviewQueueItemDTO(BaseModel, frozen=True):
    """One pending forced resurfacing of a missed fact.

    Attributes:
        key: Canonical fact key
        a: Smaller operand
        b: Larger operand
        answer: Product, kept for display
        activate_at_level: Level at which the countdown starts
        due_review_turns: Turns left before the item is due
        hidden: True for next-level repeats that resurface silently
    """

    key: str
    a: int = Field(ge=0)
    b: int = Field(ge=0)
    answer: int = Field(ge=0)
    activate_at_level: int = Field(ge=0)
    due_review_turns: int
    hidden: bool = False

    @property
    def fact(self) -> FactDTO:
        return make_fact(self.a, self.b)

    def is_active(self, level: int) -> bool:
        """Check whether the item's countdown runs at this level."""
        return self.activate_at_level <= level

    def is_due(self, level: int) -> bool:
        """Check whether the item may be popped at this level."""
        return self.is_active(level) and self.due_review_turns <= 0


class DueReview(BaseModel, frozen=True):
    """Review item removed from the queue for asking.

    Attributes:
        item: The popped queue item
        index: Queue position the item was popped from
    """

    item: ReviewQueueItemDTO
    index: int = Field(ge=0)

    @property
    def fact(self) -> FactDTO:
        return self.item.fact

    @property
    def hidden(self) -> bool:
        return self.item.hidden
