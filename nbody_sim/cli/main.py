"""CLI main entry point."""

import argparse
import logging
import sys
import time
from typing import List, Optional

from nbody_sim.errors import ConfigurationError
from nbody_sim.physics.simulator import Simulator
from nbody_sim.utils.config import SimulationConfig, load_config

DEFAULT_HEADLESS_FRAMES = 600


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nbody-sim",
        description="N-Body Simulator - brute-force 2D gravity with a fixed-timestep integrator",
    )
    parser.add_argument('n_bodies', type=int, metavar='N_BODIES',
                        help='Number of bodies (1 .. max_bodies, default max 1024)')
    parser.add_argument('--config', type=str, default=None,
                        help='YAML or JSON file with simulation constants')

    # Frame loop
    parser.add_argument('--frames', type=int, default=None,
                        help=f'Number of frames to run (default: {DEFAULT_HEADLESS_FRAMES} headless, '
                             'until the window closes with --render)')
    parser.add_argument('--frame-dt', type=float, default=1.0 / 60.0,
                        help='Simulated wall-clock time per frame (default: 1/60 s)')
    parser.add_argument('--realtime', action='store_true',
                        help='Feed measured wall-clock frame time to the scheduler instead of --frame-dt')

    # Overrides
    parser.add_argument('--workers', type=int, default=None,
                        help='Worker threads per sweep (default: config, else CPU count)')
    parser.add_argument('--max-steps-per-frame', type=int, default=None,
                        help='Cap on catch-up sweeps per frame; excess time is dropped')
    parser.add_argument('--center-attraction', action='store_true',
                        help='Add a slight pull toward the origin')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')

    # Output
    parser.add_argument('--render', action='store_true',
                        help='Show the point cloud in a matplotlib window')
    parser.add_argument('--debug-every', type=int, default=60,
                        help='Print diagnostics every N frames')
    parser.add_argument('--log-level', type=str, default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    return parser


def make_config(args) -> SimulationConfig:
    """Load the config file (if any) and apply command-line overrides."""
    if not args.frame_dt >= 0:
        raise ConfigurationError(f"--frame-dt must be >= 0, got {args.frame_dt}")
    if args.debug_every < 1:
        raise ConfigurationError(f"--debug-every must be >= 1, got {args.debug_every}")
    config = load_config(args.config) if args.config else SimulationConfig()
    if args.seed is not None:
        config.seed = args.seed
    if args.workers is not None:
        config.workers = args.workers
    if args.max_steps_per_frame is not None:
        config.max_steps_per_frame = args.max_steps_per_frame
    if args.center_attraction:
        config.center_attraction = True
    config.validate()
    config.validate_body_count(args.n_bodies)
    return config


def run_simulation(args, config: SimulationConfig) -> int:
    """Run the frame loop."""
    renderer = None
    if args.render:
        from nbody_sim.render.renderer_2d import Renderer2D
        renderer = Renderer2D(scale=config.sim_boundary, seed=config.seed)

    n_frames = args.frames
    if n_frames is None and renderer is None:
        n_frames = DEFAULT_HEADLESS_FRAMES

    with Simulator.from_config(args.n_bodies, config) as sim:
        print(f"Running simulation: {args.n_bodies} bodies")
        print(f"Workers: {sim.executor.workers}, Integrator: {sim.integrator.name}, "
              f"dt: {sim.dt:.6f}, max steps/frame: {config.max_steps_per_frame}")
        print(f"{'Frame':<8} {'Time':<10} {'Sweeps':<8} {'K':<14} {'|p|':<14} {'v_max':<12}")
        print("-" * 70)

        last_time = time.perf_counter()
        frame = 0
        try:
            while n_frames is None or frame < n_frames:
                if args.realtime:
                    now = time.perf_counter()
                    frame_dt = now - last_time
                    last_time = now
                else:
                    frame_dt = args.frame_dt

                view = sim.tick(frame_dt)

                if renderer is not None:
                    renderer.render(view, frame_dt)
                    if renderer.closed:
                        break

                if frame % args.debug_every == 0:
                    K = sim.get_kinetic_energy()
                    p = float((sim.get_momentum() ** 2).sum() ** 0.5)
                    v_max = sim.get_max_speed()
                    print(f"{frame:<8} {sim.time:<10.3f} {view.n_sweeps:<8} {K:<14.6g} {p:<14.6g} {v_max:<12.6g}")
                frame += 1
        finally:
            if renderer is not None:
                renderer.close()

        if sim.scheduler.dropped_steps:
            print(f"Dropped {sim.scheduler.dropped_steps} steps to keep up with the frame rate")
        print(f"Simulation complete: {frame} frames, {sim.step_count} sweeps, t = {sim.time:.3f}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = make_config(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    return run_simulation(args, config)


if __name__ == '__main__':
    sys.exit(main())
