"""Body state storage with double-buffered kinematics."""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from nbody_sim.errors import ConfigurationError
from nbody_sim.utils.config import SimulationConfig
from nbody_sim.utils.reproducibility import make_rng

logger = logging.getLogger(__name__)

# Rounds of redrawing non-positive masses before giving up on the distribution
MASS_RESAMPLE_ROUNDS = 64


@dataclass
class BodyBuffer:
    """One generation of kinematic state: positions, velocities, prior accelerations (n, 2)."""
    positions: np.ndarray
    velocities: np.ndarray
    accelerations: np.ndarray

    @classmethod
    def empty(cls, n_bodies: int) -> "BodyBuffer":
        return cls(
            np.zeros((n_bodies, 2)),
            np.zeros((n_bodies, 2)),
            np.zeros((n_bodies, 2)),
        )


class BodyStore:
    """Fixed-size store of N bodies, indexed 0..N-1.

    Masses never change after construction. Kinematic state lives in two
    pre-allocated buffers: sweeps read ``current`` and write ``next``, then
    ``swap()`` exchanges their roles. Nothing is reallocated while running.
    """

    def __init__(self, positions, velocities, masses, accelerations=None):
        """Initialize body store from explicit state.

        Args:
            positions: Array of shape (n, 2)
            velocities: Array of shape (n, 2)
            masses: Array of shape (n,), every entry finite and > 0
            accelerations: Optional prior accelerations (n, 2), zeros if None

        Raises:
            ConfigurationError: On shape mismatch, non-finite values or non-positive masses
        """
        positions = np.array(positions, dtype=np.float64)
        velocities = np.array(velocities, dtype=np.float64)
        masses = np.array(masses, dtype=np.float64).reshape(-1)
        if accelerations is None:
            accelerations = np.zeros_like(positions)
        else:
            accelerations = np.array(accelerations, dtype=np.float64)

        n = masses.shape[0]
        if n == 0:
            raise ConfigurationError("A body store needs at least one body")
        for name, arr in (("positions", positions), ("velocities", velocities), ("accelerations", accelerations)):
            if arr.shape != (n, 2):
                raise ConfigurationError(f"{name} must have shape ({n}, 2), got {arr.shape}")
            if not np.all(np.isfinite(arr)):
                raise ConfigurationError(f"{name} contains non-finite values")
        if not np.all(np.isfinite(masses)) or np.any(masses <= 0):
            raise ConfigurationError("Every body mass must be finite and strictly positive")

        self.n_bodies = n
        self.masses = masses
        self.masses.setflags(write=False)
        self._buffers = (BodyBuffer.empty(n), BodyBuffer.empty(n))
        self._current = 0
        front = self._buffers[0]
        np.copyto(front.positions, positions)
        np.copyto(front.velocities, velocities)
        np.copyto(front.accelerations, accelerations)

    @classmethod
    def from_arrays(cls, positions, velocities, masses, accelerations=None) -> "BodyStore":
        """Build a store from explicit state (see __init__)."""
        return cls(positions, velocities, masses, accelerations)

    @classmethod
    def random(cls, n_bodies: int, config: SimulationConfig, rng: Optional[np.random.Generator] = None) -> "BodyStore":
        """Draw initial conditions from the configured distributions.

        Positions are normal around the origin with standard deviation
        sqrt(sim_boundary) * log10(n_bodies); velocities and accelerations
        start at zero; masses are normal around ``body_mass``.

        Args:
            n_bodies: Number of bodies, validated against the config
            config: Simulation configuration
            rng: Generator to draw from (seeded from config.seed if None)

        Returns:
            New BodyStore
        """
        config.validate()
        config.validate_body_count(n_bodies)
        if rng is None:
            rng = make_rng(config.seed)

        spread = math.sqrt(config.sim_boundary) * math.log10(n_bodies)
        positions = rng.normal(0.0, spread, (n_bodies, 2))
        velocities = np.zeros((n_bodies, 2))
        masses = draw_masses(n_bodies, config.body_mass, config.effective_mass_spread, rng)
        return cls(positions, velocities, masses)

    @property
    def current(self) -> BodyBuffer:
        """Buffer holding the latest completed state (the sweep snapshot)."""
        return self._buffers[self._current]

    @property
    def next(self) -> BodyBuffer:
        """Buffer the running sweep writes into."""
        return self._buffers[1 - self._current]

    @property
    def positions(self) -> np.ndarray:
        return self.current.positions

    @property
    def velocities(self) -> np.ndarray:
        return self.current.velocities

    @property
    def accelerations(self) -> np.ndarray:
        return self.current.accelerations

    def swap(self):
        """Make the freshly written buffer current."""
        self._current = 1 - self._current

    def __len__(self) -> int:
        return self.n_bodies

    def get_state(self):
        """Get a copy of the current state.

        Returns:
            Tuple of (positions, velocities, accelerations, masses)
        """
        cur = self.current
        return (
            cur.positions.copy(),
            cur.velocities.copy(),
            cur.accelerations.copy(),
            self.masses.copy(),
        )

    def set_state(self, positions, velocities, accelerations=None):
        """Overwrite the current kinematic state in place (body count is fixed)."""
        cur = self.current
        positions = np.asarray(positions, dtype=np.float64)
        velocities = np.asarray(velocities, dtype=np.float64)
        if positions.shape != cur.positions.shape or velocities.shape != cur.velocities.shape:
            raise ConfigurationError(f"State must have shape ({self.n_bodies}, 2)")
        if not (np.isfinite(positions).all() and np.isfinite(velocities).all()):
            raise ConfigurationError("State contains non-finite values")
        np.copyto(cur.positions, positions)
        np.copyto(cur.velocities, velocities)
        if accelerations is None:
            cur.accelerations.fill(0.0)
        else:
            np.copyto(cur.accelerations, np.asarray(accelerations, dtype=np.float64))


def draw_masses(n_bodies: int, mean: float, spread: float, rng: np.random.Generator) -> np.ndarray:
    """Draw n masses from Normal(mean, spread), redrawing any non-positive sample.

    Raises:
        ConfigurationError: If non-positive draws persist after MASS_RESAMPLE_ROUNDS
    """
    masses = rng.normal(mean, spread, n_bodies)
    for _ in range(MASS_RESAMPLE_ROUNDS):
        bad = ~(masses > 0)
        n_bad = int(np.count_nonzero(bad))
        if n_bad == 0:
            return masses
        logger.debug("Redrawing %d non-positive mass samples", n_bad)
        masses[bad] = rng.normal(mean, spread, n_bad)
    if np.all(masses > 0):
        return masses
    raise ConfigurationError(
        f"Mass distribution N({mean}, {spread}) keeps producing non-positive masses"
    )
