"""Fixed-timestep scheduler decoupling simulated time from frame time."""

import logging
import math

from nbody_sim.errors import ConfigurationError

logger = logging.getLogger(__name__)


class FixedTimestepScheduler:
    """Accumulates wall-clock frame time and hands it out in whole timesteps.

    Each frame may yield zero, one or several steps. At most
    ``max_steps_per_frame`` steps are granted per frame; whole timesteps
    beyond that are dropped (only the sub-timestep remainder is carried
    over), so a slow frame costs simulated time instead of piling up
    catch-up work on the next ones.
    """

    def __init__(self, timestep: float, max_steps_per_frame: int = 8):
        """Initialize scheduler.

        Args:
            timestep: Fixed simulation step (seconds)
            max_steps_per_frame: Cap on steps granted per frame
        """
        if not math.isfinite(timestep) or timestep <= 0:
            raise ConfigurationError(f"timestep must be positive, got {timestep!r}")
        if max_steps_per_frame < 1:
            raise ConfigurationError(f"max_steps_per_frame must be >= 1, got {max_steps_per_frame}")
        self.timestep = timestep
        self.max_steps_per_frame = max_steps_per_frame
        self.accumulator = 0.0
        self.total_steps = 0
        self.dropped_steps = 0
        self.pending_steps = 0

    def steps_available(self, frame_dt: float) -> int:
        """Add one frame's elapsed time and return how many steps may run.

        Granted steps stay pending until ``consume()`` is called for each one,
        so steps whose sweep never completed are offered again next frame.

        Args:
            frame_dt: Wall-clock time since the previous frame (seconds, >= 0)

        Returns:
            Number of fixed steps granted (pending steps included)
        """
        if not math.isfinite(frame_dt) or frame_dt < 0:
            raise ValueError(f"Frame delta must be finite and >= 0, got {frame_dt!r}")

        self.accumulator += frame_dt
        steps = self.pending_steps
        while self.accumulator >= self.timestep and steps < self.max_steps_per_frame:
            self.accumulator -= self.timestep
            steps += 1

        if self.accumulator >= self.timestep:
            dropped = int(self.accumulator // self.timestep)
            self.accumulator -= dropped * self.timestep
            # Guard against rounding leaving a full step (or a negative sliver) behind
            if self.accumulator >= self.timestep or self.accumulator < 0.0:
                self.accumulator = 0.0
            self.dropped_steps += dropped
            logger.warning(
                "Frame took %.4fs; ran %d steps and dropped %d to keep up",
                frame_dt, steps, dropped,
            )

        self.pending_steps = steps
        return steps

    def consume(self):
        """Record one granted step as simulated."""
        if self.pending_steps == 0:
            raise RuntimeError("No granted step left to consume")
        self.pending_steps -= 1
        self.total_steps += 1

    def advance(self, frame_dt: float) -> int:
        """Grant and immediately consume this frame's steps.

        Returns:
            Number of fixed steps to run this frame
        """
        steps = self.steps_available(frame_dt)
        for _ in range(steps):
            self.consume()
        return steps

    @property
    def alpha(self) -> float:
        """Fraction of a timestep left in the accumulator, in [0, 1)."""
        return self.accumulator / self.timestep

    @property
    def simulated_time(self) -> float:
        return self.total_steps * self.timestep

    def reset(self):
        """Clear the accumulator and counters."""
        self.accumulator = 0.0
        self.total_steps = 0
        self.dropped_steps = 0
        self.pending_steps = 0
