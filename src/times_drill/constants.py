"""Fixed curriculum and scheduling constants for times_drill.

Runtime-tunable values (TTL, cool-downs, storage key) live in
times_drill.config instead.
"""

__all__ = [
    "MIN_LEVEL",
    "MAX_LEVEL",
    "CORRECTIONS_REQUIRED",
    "CURRENT_REVIEW_REPEATS",
    "NEXT_LEVEL_HIDDEN_REPEATS",
    "MISS_RECORD_REVIEW_PROBABILITY",
    "NON_REPEAT_RETRIES",
    "NON_REPEAT_RANDOM_DRAWS",
    "MISS_RECORD_DISPLAY_LIMIT",
]

# Level range: a level is the largest operand drilled
MIN_LEVEL: int = 0
MAX_LEVEL: int = 12

# Consecutive correct answers needed to clear a correction
CORRECTIONS_REQUIRED: int = 3

# Review items enqueued per miss, due 1..N turns later
CURRENT_REVIEW_REPEATS: int = 3
NEXT_LEVEL_HIDDEN_REPEATS: int = 3

# Chance that an idle review turn revisits a lifetime miss
MISS_RECORD_REVIEW_PROBABILITY: float = 0.2

# Non-repeat ladder bounds
NON_REPEAT_RETRIES: int = 12
NON_REPEAT_RANDOM_DRAWS: int = 24

MISS_RECORD_DISPLAY_LIMIT: int = 18
