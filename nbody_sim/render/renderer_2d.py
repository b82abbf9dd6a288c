"""2D point-cloud renderer using matplotlib."""

import math
from collections import deque
from typing import Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from nbody_sim.render.base import Renderer
from nbody_sim.render.bridge import FrameView
from nbody_sim.utils.reproducibility import make_rng


class Renderer2D(Renderer):
    """Draws bodies as colored points over a fading afterglow of earlier frames.

    Every rendered frame is kept in a short history whose opacity decays by
    exp(-frame_dt / persistence) per frame, which smooths motion across frames
    regardless of frame rate.
    """

    def __init__(
        self,
        scale: float = 100.0,
        figsize: Tuple[int, int] = (16, 9),
        dpi: int = 100,
        persistence: float = 0.15,
        history_length: int = 32,
        interactive: bool = True,
        seed: Optional[int] = None,
    ):
        """Initialize 2D renderer.

        Args:
            scale: Half-width of the visible square around the origin
            figsize: Figure size (width, height)
            dpi: Dots per inch
            persistence: Afterglow decay time (seconds)
            history_length: Maximum number of earlier frames kept
            interactive: Open a window (False for off-screen capture)
            seed: Seed for the per-body colors
        """
        self.scale = scale
        self.figsize = figsize
        self.dpi = dpi
        self.persistence = persistence
        self.interactive = interactive
        self._rng = make_rng(seed)

        self.fig: Optional[Figure] = None
        self.ax = None
        self.scatter = None
        self.colors: Optional[np.ndarray] = None
        self.point_size = 1.0
        self.history = deque(maxlen=history_length)  # (positions, alpha) pairs
        self.initialized = False
        self.window_closed = False

    def _initialize(self, n_bodies: int):
        """Create the figure and per-body colors on first use."""
        if self.initialized:
            return
        self.fig, self.ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        self.fig.patch.set_facecolor('black')
        self.ax.set_facecolor('black')
        self.ax.set_aspect('equal')
        self.ax.set_axis_off()
        self.ax.set_xlim(-self.scale, self.scale)
        self.ax.set_ylim(-self.scale, self.scale)

        self.colors = self._rng.uniform(0.0, 1.0, (n_bodies, 3))
        # Points shrink as the cloud gets denser
        self.point_size = 10.0 / (1.0 + math.log10(n_bodies))
        self.scatter = self.ax.scatter([], [], s=self.point_size ** 2, linewidths=0)

        if self.interactive:
            plt.show(block=False)
            plt.pause(0.1)
        self.initialized = True

    def _is_figure_open(self) -> bool:
        """Check if the figure window is still open."""
        if self.fig is None:
            return False
        if self.interactive and not plt.fignum_exists(self.fig.number):
            self.window_closed = True
            self.fig = None
            self.ax = None
            return False
        return True

    @property
    def closed(self) -> bool:
        """True once the user has closed the window."""
        if self.initialized and not self.window_closed:
            self._is_figure_open()
        return self.window_closed

    def render(self, frame: FrameView, frame_dt: float):
        """Render current frame."""
        if self.closed:
            return
        positions = np.array(frame.positions)
        self._initialize(positions.shape[0])

        decay = math.exp(-max(frame_dt, 0.0) / self.persistence) if self.persistence > 0 else 0.0
        aged = [(pos, alpha * decay) for pos, alpha in self.history]
        self.history.clear()
        self.history.extend((pos, alpha) for pos, alpha in aged if alpha >= 0.02)
        self.history.append((positions, 1.0))

        offsets = np.concatenate([pos for pos, _ in self.history])
        rgba = np.concatenate([
            np.column_stack([self.colors, np.full(len(pos), alpha)])
            for pos, alpha in self.history
        ])
        self.scatter.set_offsets(offsets)
        self.scatter.set_facecolors(rgba)

        if self.interactive:
            self.fig.canvas.draw_idle()
            plt.pause(0.001)

    def capture_frame(self) -> np.ndarray:
        """Capture current frame as image array."""
        if self.fig is None:
            raise RuntimeError("Renderer not initialized. Call render() first.")

        self.fig.canvas.draw()
        buf = np.asarray(self.fig.canvas.buffer_rgba())
        return buf[..., :3].copy()

    def clear(self):
        """Drop the afterglow history."""
        self.history.clear()
        if self.scatter is not None:
            self.scatter.set_offsets(np.empty((0, 2)))

    def close(self):
        """Close the renderer."""
        if self.fig is not None:
            plt.close(self.fig)
            self.fig = None
            self.ax = None
            self.scatter = None
            self.initialized = False
