"""Exception types raised by the simulation core."""


class ConfigurationError(ValueError):
    """Invalid simulation parameters (body count, timestep, masses, ...).

    Raised before any simulation state is allocated.
    """


class NumericalInstabilityError(FloatingPointError):
    """A sweep produced NaN or Inf in the body state."""
