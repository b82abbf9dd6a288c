"""Physics engine for N-body simulations."""

from nbody_sim.physics.bodies import BodyStore
from nbody_sim.physics.force_calculator import ForceCalculator, evaluate_acceleration
from nbody_sim.physics.scheduler import FixedTimestepScheduler
from nbody_sim.physics.sweep import SweepExecutor
from nbody_sim.physics.simulator import Simulator

__all__ = [
    "BodyStore",
    "ForceCalculator",
    "evaluate_acceleration",
    "FixedTimestepScheduler",
    "SweepExecutor",
    "Simulator",
]
