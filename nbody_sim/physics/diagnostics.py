"""Diagnostics for N-body simulations."""

import numpy as np

from nbody_sim.physics.bodies import BodyStore


def kinetic_energy(store: BodyStore) -> float:
    """Total kinetic energy: 0.5 * sum(m_i * v_i^2)."""
    v_sq = np.sum(store.velocities ** 2, axis=1)
    return float(0.5 * np.sum(store.masses * v_sq))


def total_momentum(store: BodyStore) -> np.ndarray:
    """Total linear momentum sum(m_i * v_i), shape (2,).

    The center-of-mass force law is not pairwise antisymmetric for unequal
    masses, so this drifts; useful for watching how much.
    """
    return np.sum(store.masses[:, np.newaxis] * store.velocities, axis=0)


def center_of_mass(store: BodyStore) -> np.ndarray:
    """Mass-weighted mean position, shape (2,)."""
    return np.sum(store.masses[:, np.newaxis] * store.positions, axis=0) / np.sum(store.masses)


def max_speed(store: BodyStore) -> float:
    """Largest body speed."""
    return float(np.max(np.linalg.norm(store.velocities, axis=1)))


def speed_bound(store: BodyStore, G: float, softening: float, elapsed: float) -> float:
    """Upper bound on any speed after ``elapsed`` simulated time from rest.

    Each pair contributes at most G * m_i * m_j / softening to body i's
    acceleration, so no body can accelerate faster than the largest such
    row sum.
    """
    m = store.masses
    per_body = G * m * (np.sum(m) - m) / softening
    return float(np.max(per_body) * elapsed)


def is_finite(store: BodyStore) -> bool:
    """True if positions, velocities and accelerations are all finite."""
    return bool(
        np.isfinite(store.positions).all()
        and np.isfinite(store.velocities).all()
        and np.isfinite(store.accelerations).all()
    )
