"""Abstract base class for per-body integrators."""

from abc import ABC, abstractmethod
from typing import Iterable


class Integrator(ABC):
    """Abstract interface for numerical integrators.

    An integrator advances one body by one timestep. It reads the store's
    ``current`` buffer and writes only row i of the ``next`` buffer, so calls
    for distinct bodies within a sweep never interfere.
    """
    
    @abstractmethod
    def integrate(self, i: int, store, dt: float):
        """Advance body i by one timestep.
        
        Args:
            i: Body index
            store: BodyStore (reads ``current``, writes ``next[i]``)
            dt: Time step
        """
        pass

    def integrate_range(self, indices: Iterable[int], store, dt: float):
        """Advance a block of bodies; one worker's share of a sweep."""
        for i in indices:
            self.integrate(i, store, dt)
    
    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this integrator."""
        pass
    
    @property
    @abstractmethod
    def order(self) -> int:
        """Return the order of accuracy (e.g. 2 for Verlet)."""
        pass
