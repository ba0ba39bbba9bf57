"""Wall-clock timer with a few independent accumulating slots."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

SLOT_COUNT = 4


@dataclass
class Timer:
    """Accumulates elapsed microseconds per slot across repetitions."""

    clock: Callable[[], float] = time.perf_counter
    _started: List[Optional[float]] = field(
        init=False, default_factory=lambda: [None] * SLOT_COUNT
    )
    _elapsed_us: List[float] = field(
        init=False, default_factory=lambda: [0.0] * SLOT_COUNT
    )

    @staticmethod
    def _check_slot(slot: int) -> None:
        if not 0 <= slot < SLOT_COUNT:
            raise IndexError(f"timer slot {slot} out of range 0..{SLOT_COUNT - 1}")

    def start(self, slot: int = 0, rep: int = 0) -> None:
        """Start timing a slot; the first repetition clears what it held."""
        self._check_slot(slot)
        if rep == 0:
            self._elapsed_us[slot] = 0.0
        self._started[slot] = self.clock()

    def stop(self, slot: int = 0) -> None:
        """Stop timing a slot and add the elapsed time to its total."""
        self._check_slot(slot)
        started = self._started[slot]
        if started is None:
            raise RuntimeError(f"timer slot {slot} was stopped before being started")
        self._elapsed_us[slot] += (self.clock() - started) * 1_000_000.0
        self._started[slot] = None

    def milliseconds(self, slot: int = 0, reps: int = 1) -> float:
        """Average time per repetition of a slot, in milliseconds."""
        self._check_slot(slot)
        if reps <= 0:
            raise ValueError("reps must be positive")
        return self._elapsed_us[slot] / (1000 * reps)

    def report(self, slot: int = 0, reps: int = 1) -> str:
        """The average time per repetition formatted as printed output."""
        return f"{self.milliseconds(slot, reps):f}\t"