"""Velocity Verlet integrator (symplectic, O(h²) accuracy)."""

import numpy as np

from nbody_sim.physics.force_calculator import ForceCalculator
from nbody_sim.physics.integrators.base import Integrator


class VerletIntegrator(Integrator):
    """Velocity Verlet integrator - second-order, symplectic.

    Per body, with a_old the acceleration stored by the previous sweep:
    1. a_new = force evaluation against the sweep snapshot
    2. x_new = x + v*dt + 0.5*a_old*dt^2
    3. v_new = v + 0.5*(a_old + a_new)*dt
    4. store a_new as next sweep's a_old

    a_new is evaluated at the snapshot positions, i.e. before this sweep moves
    anything, so the whole sweep sees one consistent configuration.

    With ``center_attraction`` enabled, a unit pull toward the origin scaled by
    dt is added to the stored acceleration after the update.
    """

    def __init__(self, force_calculator: ForceCalculator, center_attraction: bool = False):
        """Initialize integrator.

        Args:
            force_calculator: Evaluator for a_new
            center_attraction: Add a pull toward the origin after each update
        """
        self.force_calculator = force_calculator
        self.center_attraction = center_attraction

    @property
    def name(self) -> str:
        return "verlet"

    @property
    def order(self) -> int:
        return 2

    def integrate(self, i: int, store, dt: float):
        cur = store.current
        nxt = store.next

        a_old = cur.accelerations[i]
        a_new = self.force_calculator.acceleration(i, cur.positions, store.masses)

        p_new = cur.positions[i] + cur.velocities[i] * dt + a_old * (0.5 * dt * dt)
        nxt.positions[i] = p_new
        nxt.velocities[i] = cur.velocities[i] + 0.5 * (a_old + a_new) * dt

        if self.center_attraction:
            r = np.sqrt(np.sum(p_new ** 2))
            if r > 0.0:
                a_new = a_new - (p_new / r) * dt
        nxt.accelerations[i] = a_new
