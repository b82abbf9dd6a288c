"""Base renderer interface."""

from abc import ABC, abstractmethod
import numpy as np

from nbody_sim.render.bridge import FrameView


class Renderer(ABC):
    """Abstract base class for consumers of the render bridge."""
    
    @abstractmethod
    def render(self, frame: FrameView, frame_dt: float):
        """Render one published frame.
        
        Args:
            frame: Positions published by the simulator for this frame
            frame_dt: Wall-clock time since the previous frame (drives fading)
        """
        pass
    
    @abstractmethod
    def capture_frame(self) -> np.ndarray:
        """Capture current frame as image array.
        
        Returns:
            Image array (H, W, 3) uint8
        """
        pass
    
    @abstractmethod
    def clear(self):
        """Clear the renderer."""
        pass
    
    @abstractmethod
    def close(self):
        """Close the renderer."""
        pass
