# progress.py

import logging
import math
import constants

logger = logging.getLogger("particle_choreography")


class ProgressState:
    """
    The smoothed progress signal.

    `target` is the raw value last supplied by the progress source (scroll
    position or auto-advance driver), clamped to [0, 1]. `value` follows it by
    exponential smoothing, once per tick, and is what drives the formations.

    Data Contract:
    - Invariants: 0 <= target <= 1 and 0 <= value <= 1 at all times.
    """
    def __init__(self, initial: float = 0.0, smoothing: float = constants.PROGRESS_SMOOTHING):
        if not 0.0 < smoothing <= 1.0:
            raise ValueError(f"progress smoothing must be in (0, 1], got {smoothing}")
        self.smoothing = smoothing
        self.target = 0.0
        self.set_target(initial)
        self.value = self.target

    def set_target(self, value: float):
        """Stores a new smoothing target, clamped to [0, 1]. Non-finite values are ignored."""
        value = float(value)
        if not math.isfinite(value):
            logger.warning(f"Ignoring non-finite progress target {value}; keeping {self.target:.4f}.")
            return
        self.target = min(max(value, 0.0), 1.0)

    def advance(self) -> float:
        """Moves the smoothed value one tick towards the target and returns it."""
        self.value += (self.target - self.value) * self.smoothing
        return self.value


class AutoAdvanceDriver:
    """
    Animates the progress target from wherever it is to 1 over a fixed
    wall-clock duration. It only ever produces targets; it never touches
    particle state.

    Data Contract:
    - Inputs: duration (float) - Seconds for a run from 0 to 1.
    - Outputs: update() returns the new target, or None when inactive.
    - Side Effects: Stops itself once the target reaches 1.
    """
    def __init__(self, duration: float = 30.0):
        if duration <= 0:
            raise ValueError(f"auto-advance duration must be positive, got {duration}")
        self.duration = duration
        self.active = False
        self._start_time = 0.0
        self._start_value = 0.0

    def start(self, now: float, current_target: float):
        self.active = True
        self._start_time = now
        self._start_value = current_target
        logger.info(f"Auto-advance started from {current_target:.3f} over {self.duration:.1f}s.")

    def stop(self):
        if self.active:
            logger.info("Auto-advance stopped.")
        self.active = False

    def toggle(self, now: float, current_target: float):
        if self.active:
            self.stop()
        else:
            self.start(now, current_target)

    def update(self, now: float):
        if not self.active:
            return None
        fraction = min(max((now - self._start_time) / self.duration, 0.0), 1.0)
        target = self._start_value + (1.0 - self._start_value) * fraction
        if fraction >= 1.0:
            self.active = False
            logger.info("Auto-advance reached the end.")
        return target
