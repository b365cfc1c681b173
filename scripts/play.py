"""Terminal driver for a times_drill session.

Usage:
    python scripts/play.py            # in-memory session
    TIMES_DRILL_REDIS_URL=redis://localhost:6379/0 python scripts/play.py
"""

import asyncio
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from times_drill import (  # noqa: E402
    InMemoryStateStore,
    InvalidInputError,
    Phase,
    RedisStateStore,
    TimesDrill,
    TimesDrillConfig,
)
from times_drill.constants import MAX_LEVEL, MIN_LEVEL  # noqa: E402
from times_drill.logging import bind_session, configure_logging  # noqa: E402


def _print_progress(drill: TimesDrill) -> None:
    snap = drill.snapshot()
    done = "".join("#" if row.done else "." for row in snap.checklist)
    print(f"  level {snap.level}  checklist [{done}]  corrections {len(snap.corrections)}")


async def _wait_until_armed(drill: TimesDrill) -> None:
    while not drill.is_ack_armed():
        await asyncio.sleep(0.05)


async def main() -> None:
    config = TimesDrillConfig()
    configure_logging(level=config.log_level, json_output=config.log_json, force=True)

    if config.redis_enabled:
        store = await RedisStateStore.from_config(config)
        bind_session(store="redis")
    else:
        store = InMemoryStateStore(ttl_seconds=config.drill.state_ttl_seconds)
        bind_session(store="memory")

    async with TimesDrill(store=store, config=config) as drill:
        while True:
            snap = drill.snapshot()

            if drill.phase is Phase.CHOOSING_LEVEL:
                raw = input(f"Pick a level ({MIN_LEVEL}-{MAX_LEVEL}, q to quit): ").strip()
                if raw == "q":
                    return
                if raw.isdigit():
                    await drill.start_level(int(raw))
                continue

            if drill.phase is Phase.AWAITING_MISS_ACK:
                fact = snap.pending_fact
                assert fact is not None
                print(f"  Not quite: {fact} = {fact.answer}")
                await _wait_until_armed(drill)
                input("  Press Enter to try it again...")
                await drill.acknowledge_miss()
                continue

            if drill.phase is Phase.AWAITING_LEVEL_UP:
                print(f"  Level {snap.level} mastered! Next up: level {snap.next_level}")
                await _wait_until_armed(drill)
                input("  Press Enter to continue...")
                await drill.acknowledge_level_up()
                continue

            if drill.phase is Phase.COMPLETED:
                print("  You mastered every level!")
                await _wait_until_armed(drill)
                input("  Press Enter to start over...")
                await drill.reset_all()
                continue

            raw = input(f"{snap.question} = ")
            if raw.strip() == "q":
                return
            try:
                result = await drill.submit_answer(raw)
            except InvalidInputError as e:
                print(f"  {e.reason}")
                continue
            if result is not None and result.notice:
                print(f"  {result.notice}")
            _print_progress(drill)


if __name__ == "__main__":
    asyncio.run(main())
