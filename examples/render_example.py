"""Example: watch the point cloud in a matplotlib window."""

import time
from nbody_sim import Simulator, SimulationConfig
from nbody_sim.render.renderer_2d import Renderer2D

def main():
    config = SimulationConfig(seed=7, center_attraction=True)
    renderer = Renderer2D(scale=config.sim_boundary, seed=config.seed)

    with Simulator.from_config(512, config) as sim:
        last = time.perf_counter()
        while not renderer.closed:
            now = time.perf_counter()
            frame_dt, last = now - last, now
            renderer.render(sim.tick(frame_dt), frame_dt)
    renderer.close()

if __name__ == "__main__":
    main()
