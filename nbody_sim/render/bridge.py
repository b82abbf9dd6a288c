"""Hand-off of body positions to a renderer, once per frame."""

import numpy as np

from nbody_sim.physics.bodies import BodyStore


class FrameView:
    """Read-only view of the positions published for one frame.

    The view aliases the simulation's position buffer. It stays valid until
    the bridge publishes the next frame or is told a sweep swapped the
    buffers; after that the view refuses access.
    """

    def __init__(self, bridge: "RenderBridge", generation: int, positions: np.ndarray, n_sweeps: int):
        self._bridge = bridge
        self.generation = generation
        self.n_sweeps = n_sweeps
        self._positions = positions.view()
        self._positions.setflags(write=False)

    @property
    def valid(self) -> bool:
        return self._bridge.generation == self.generation

    @property
    def positions(self) -> np.ndarray:
        """Positions (n, 2), read-only."""
        if not self.valid:
            raise RuntimeError(
                f"Frame {self.generation} was invalidated by frame {self._bridge.generation}"
            )
        return self._positions

    def interleaved(self) -> np.ndarray:
        """Copy of the positions as a flat float32 x0, y0, x1, y1, ... buffer."""
        return np.ascontiguousarray(self.positions, dtype=np.float32).reshape(-1)

    def __len__(self) -> int:
        return self.positions.shape[0]


class RenderBridge:
    """Publishes the store's current positions after each frame's sweeps."""

    def __init__(self, store: BodyStore):
        self.store = store
        self.generation = 0

    def publish(self, n_sweeps: int = 0) -> FrameView:
        """Expose the current positions; invalidates every earlier view."""
        self.generation += 1
        return FrameView(self, self.generation, self.store.positions, n_sweeps)

    def invalidate(self):
        """Invalidate every published view (call after each buffer swap)."""
        self.generation += 1
