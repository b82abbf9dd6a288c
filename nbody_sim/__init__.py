"""
N-Body Simulator - brute-force 2D gravity with a fixed-timestep parallel integrator.

Features:
- Double-buffered velocity Verlet sweeps on a fixed-size worker pool
- Fixed-timestep scheduler decoupled from render frame rate
- Per-frame read-only position hand-off for renderers
- Matplotlib point-cloud viewer with temporal smoothing
- YAML/JSON configuration and a CLI
"""

__version__ = "0.1.0"

from nbody_sim.physics.simulator import Simulator
from nbody_sim.physics.bodies import BodyStore
from nbody_sim.utils.config import SimulationConfig, load_config
from nbody_sim.errors import ConfigurationError, NumericalInstabilityError

__all__ = [
    "Simulator",
    "BodyStore",
    "SimulationConfig",
    "load_config",
    "ConfigurationError",
    "NumericalInstabilityError",
]
