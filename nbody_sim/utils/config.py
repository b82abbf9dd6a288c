"""Configuration management."""

import json
import math
import os
import yaml
from typing import Optional
from pathlib import Path
from dataclasses import dataclass, asdict, fields

from nbody_sim.errors import ConfigurationError


@dataclass
class SimulationConfig:
    """Tunable constants of a simulation run.

    Defaults reproduce the reference scene: ~1000 bodies of mass 2.5e4 spread
    over a region a few tens of units wide, stepped at 120 Hz.
    """
    # Physics
    gravitational_constant: float = 1e-7
    body_mass: float = 2.5e4
    mass_spread: Optional[float] = None  # sqrt(body_mass) if None
    softening: float = 1.0

    # Time stepping
    timestep: float = 1.0 / 120.0
    max_steps_per_frame: int = 8

    # Initial placement (not enforced after start)
    sim_boundary: float = 100.0

    # Limits and execution
    max_bodies: int = 1024
    workers: Optional[int] = None  # os.cpu_count() if None

    # Extensions and checks
    center_attraction: bool = False
    check_finite: bool = True

    # Reproducibility
    seed: Optional[int] = None

    @property
    def effective_mass_spread(self) -> float:
        if self.mass_spread is None:
            return math.sqrt(self.body_mass)
        return self.mass_spread

    @property
    def effective_workers(self) -> int:
        if self.workers is None:
            return os.cpu_count() or 1
        return self.workers

    def validate(self):
        """Check every parameter, raising ConfigurationError on the first bad one."""
        positive = {
            "gravitational_constant": self.gravitational_constant,
            "body_mass": self.body_mass,
            "softening": self.softening,
            "timestep": self.timestep,
            "sim_boundary": self.sim_boundary,
        }
        for name, value in positive.items():
            if not math.isfinite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive finite number, got {value!r}")
        if self.mass_spread is not None and (not math.isfinite(self.mass_spread) or self.mass_spread < 0):
            raise ConfigurationError(f"mass_spread must be >= 0, got {self.mass_spread!r}")
        if self.max_steps_per_frame < 1:
            raise ConfigurationError(f"max_steps_per_frame must be >= 1, got {self.max_steps_per_frame}")
        if self.max_bodies < 1:
            raise ConfigurationError(f"max_bodies must be >= 1, got {self.max_bodies}")
        if self.workers is not None and self.workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {self.workers}")

    def validate_body_count(self, n_bodies: int):
        """Reject body counts outside (0, max_bodies].

        The force sweep is O(N^2), so the ceiling keeps a frame's work bounded.
        """
        if isinstance(n_bodies, bool) or not isinstance(n_bodies, int):
            raise ConfigurationError(f"Body count must be an integer, got {n_bodies!r}")
        if n_bodies <= 0:
            raise ConfigurationError(f"Invalid number of bodies: {n_bodies}")
        if n_bodies > self.max_bodies:
            raise ConfigurationError(
                f"Too many bodies: {n_bodies} > {self.max_bodies}; "
                "the simulation is O(N^2) and will not keep up"
            )


def load_config(config_path: str) -> SimulationConfig:
    """Load configuration from file.

    Args:
        config_path: Path to config file (.json or .yaml)

    Returns:
        Validated SimulationConfig
    """
    config_path = Path(config_path)

    with open(config_path, 'r') as f:
        if config_path.suffix in ('.yaml', '.yml'):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    data = data or {}
    known = {field.name for field in fields(SimulationConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown config keys in {config_path}: {unknown}")

    config = SimulationConfig(**data)
    config.validate()
    return config


def save_config(config: SimulationConfig, output_path: str):
    """Save configuration to file.

    Args:
        config: SimulationConfig object
        output_path: Output file path (.json or .yaml)
    """
    output_path = Path(output_path)
    data = asdict(config)

    with open(output_path, 'w') as f:
        if output_path.suffix in ('.yaml', '.yml'):
            yaml.dump(data, f, default_flow_style=False)
        else:
            json.dump(data, f, indent=2)
