"""Manually advanced clock for testing."""

START_TIME = 1_704_067_200.0


class FakeClock:
    """Time source that only moves when told to."""

    def __init__(self, start: float = START_TIME) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
