"""Main simulator controller."""

import logging
from typing import Callable, Optional

import numpy as np

from nbody_sim.physics.bodies import BodyStore
from nbody_sim.physics.force_calculator import ForceCalculator
from nbody_sim.physics.integrators.base import Integrator
from nbody_sim.physics.integrators.verlet import VerletIntegrator
from nbody_sim.physics.scheduler import FixedTimestepScheduler
from nbody_sim.physics.sweep import SweepExecutor
from nbody_sim.physics import diagnostics
from nbody_sim.render.bridge import FrameView, RenderBridge
from nbody_sim.utils.config import SimulationConfig

logger = logging.getLogger(__name__)


class Simulator:
    """Simulation context: owns the bodies, the scheduler and the worker pool.

    Call ``tick(frame_dt)`` once per rendered frame. It runs as many fixed
    timestep sweeps as the accumulated frame time allows and returns the
    frame's position view for the renderer.
    """

    def __init__(
        self,
        store: BodyStore,
        config: Optional[SimulationConfig] = None,
        integrator: Optional[Integrator] = None,
        workers: Optional[int] = None,
    ):
        """Initialize simulator.

        Args:
            store: Body state (ownership passes to the simulator)
            config: Simulation configuration (defaults if None)
            integrator: Integrator to use (default: Verlet with the config's force law)
            workers: Worker pool size (config.effective_workers if None)
        """
        self.config = config or SimulationConfig()
        self.config.validate()
        self.config.validate_body_count(store.n_bodies)

        self.store = store
        self.force_calculator = ForceCalculator(
            self.config.gravitational_constant, self.config.softening
        )
        self.integrator = integrator or VerletIntegrator(
            self.force_calculator, center_attraction=self.config.center_attraction
        )
        self.scheduler = FixedTimestepScheduler(
            self.config.timestep, self.config.max_steps_per_frame
        )
        self.executor = SweepExecutor(
            workers or self.config.effective_workers,
            check_finite=self.config.check_finite,
        )
        self.bridge = RenderBridge(store)

        self.step_count = 0
        self.frame_count = 0

        # Callbacks
        self.on_step_callback: Optional[Callable] = None

        logger.info(
            "Simulator ready: %d bodies, dt=%.6g, %d worker(s), integrator=%s",
            store.n_bodies, self.dt, self.executor.workers, self.integrator.name,
        )

    @classmethod
    def from_config(cls, n_bodies: int, config: Optional[SimulationConfig] = None, **kwargs) -> "Simulator":
        """Validate the body count, draw initial conditions and build a simulator."""
        config = config or SimulationConfig()
        config.validate()
        config.validate_body_count(n_bodies)
        store = BodyStore.random(n_bodies, config)
        return cls(store, config, **kwargs)

    @property
    def dt(self) -> float:
        return self.config.timestep

    @property
    def time(self) -> float:
        """Simulated time elapsed."""
        return self.step_count * self.dt

    def step(self):
        """Run one sweep over all bodies (one fixed timestep)."""
        self._sweep()
        if self.on_step_callback:
            self.on_step_callback(self)

    def _sweep(self):
        self.executor.sweep(self.store, self.integrator, self.dt)
        # The swap rewrites the buffer published views alias
        self.bridge.invalidate()
        self.step_count += 1

    def run_steps(self, k: int):
        """Run k sweeps, bypassing the frame scheduler."""
        for _ in range(k):
            self.step()

    def tick(self, frame_dt: float) -> FrameView:
        """Advance by one rendered frame.

        Args:
            frame_dt: Wall-clock seconds since the previous frame

        Returns:
            View of the positions for this frame
        """
        n_sweeps = self.scheduler.steps_available(frame_dt)
        for _ in range(n_sweeps):
            self._sweep()
            self.scheduler.consume()
            if self.on_step_callback:
                self.on_step_callback(self)
        self.frame_count += 1
        logger.debug("Frame %d: %d sweep(s), accumulator=%.6f", self.frame_count, n_sweeps, self.scheduler.accumulator)
        return self.bridge.publish(n_sweeps)

    def get_state(self):
        """Get current simulation state.

        Returns:
            Tuple of (positions, velocities, accelerations, masses, time, step_count)
        """
        pos, vel, acc, mass = self.store.get_state()
        return pos, vel, acc, mass, self.time, self.step_count

    def get_kinetic_energy(self) -> float:
        return diagnostics.kinetic_energy(self.store)

    def get_max_speed(self) -> float:
        return diagnostics.max_speed(self.store)

    def get_momentum(self) -> np.ndarray:
        return diagnostics.total_momentum(self.store)

    def close(self):
        """Release the worker pool."""
        self.executor.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
