"""Rendering: the per-frame position hand-off and a matplotlib point-cloud viewer."""

from nbody_sim.render.bridge import RenderBridge, FrameView
from nbody_sim.render.base import Renderer

__all__ = ["RenderBridge", "FrameView", "Renderer"]
