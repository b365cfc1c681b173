"""Scheduler services for times_drill.

Curriculum, correction tracking, review queue, question selection and
the progression state machine. All bookkeeping functions are pure.
"""

from times_drill.services.question_selector import QuestionSelector, Selection

__all__ = [
    "QuestionSelector",
    "Selection",
]
