"""Basic example of driving the simulator from a render loop."""

from nbody_sim import Simulator, SimulationConfig

def main():
    """Run 256 bodies for five simulated seconds at a jittery frame rate."""
    config = SimulationConfig(seed=42, workers=4)

    with Simulator.from_config(256, config) as sim:
        print("Running simulation...")
        print(f"Initial kinetic energy: {sim.get_kinetic_energy():.6f}")

        frame_times = [1 / 60, 1 / 45, 1 / 75]
        for frame in range(300):
            view = sim.tick(frame_times[frame % len(frame_times)])
            buffer = view.interleaved()  # what a GPU upload would take
            if frame % 60 == 0:
                print(f"Frame {frame}: Time={sim.time:.2f}, Sweeps={view.n_sweeps}, "
                      f"K={sim.get_kinetic_energy():.4f}, first body=({buffer[0]:.2f}, {buffer[1]:.2f})")

        print(f"Final kinetic energy: {sim.get_kinetic_energy():.6f}")
    print("Simulation complete!")

if __name__ == "__main__":
    main()
