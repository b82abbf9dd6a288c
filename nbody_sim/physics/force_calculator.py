"""Pairwise gravitational force evaluation.

The pull on body i from body j points from p_i toward the pair's center of
mass, with magnitude G * m_i * m_j / (d^2 + softening) where d is the distance
from p_i to that center of mass (not the full separation). This is not
textbook Newtonian gravity and does not conserve momentum exactly; it is the
force law the simulation is tuned for. The result is also not divided by m_i.
"""

from typing import Optional, Sequence

import numpy as np


def evaluate_acceleration(
    i: int,
    positions: np.ndarray,
    masses: np.ndarray,
    G: float,
    softening: float,
) -> np.ndarray:
    """Net acceleration on body i from every other body.

    Reads ``positions`` and ``masses`` only; safe to call concurrently for
    distinct i against the same snapshot.

    Args:
        i: Body index in [0, n)
        positions: Snapshot positions (n, 2)
        masses: Masses (n,)
        G: Gravitational constant
        softening: Added to the squared distance

    Returns:
        Acceleration vector (2,)
    """
    p_i = positions[i]
    m_i = masses[i]

    # Pairwise center of mass of (i, j) for every j
    pair_mass = m_i + masses
    com = (p_i * m_i + positions * masses[:, np.newaxis]) / pair_mass[:, np.newaxis]
    delta = com - p_i
    d_sq = np.sum(delta ** 2, axis=1)
    d = np.sqrt(d_sq)

    # Unit direction; a coincident center of mass has no direction and contributes nothing
    direction = np.zeros_like(delta)
    np.divide(delta, d[:, np.newaxis], out=direction, where=d[:, np.newaxis] > 0.0)

    magnitude = G * m_i * masses / (d_sq + softening)
    magnitude[i] = 0.0

    return np.sum(direction * magnitude[:, np.newaxis], axis=0)


class ForceCalculator:
    """Force evaluator bound to a gravitational constant and softening length."""

    def __init__(self, G: float, softening: float):
        self.G = G
        self.softening = softening

    def acceleration(self, i: int, positions: np.ndarray, masses: np.ndarray) -> np.ndarray:
        """Acceleration on body i (see evaluate_acceleration)."""
        return evaluate_acceleration(i, positions, masses, self.G, self.softening)

    def accelerations(
        self,
        positions: np.ndarray,
        masses: np.ndarray,
        indices: Optional[Sequence[int]] = None,
    ) -> np.ndarray:
        """Accelerations for several bodies against one snapshot.

        Args:
            positions: Snapshot positions (n, 2)
            masses: Masses (n,)
            indices: Bodies to evaluate (all if None)

        Returns:
            Array (len(indices), 2)
        """
        if indices is None:
            indices = range(positions.shape[0])
        out = np.zeros((len(indices), 2))
        for k, i in enumerate(indices):
            out[k] = self.acceleration(i, positions, masses)
        return out
