# main.py
"""
Main entry point for the Flow Field simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the window, the noise field and the particles.
4. Runs the main loop: one simulation tick and one render per frame.
5. Handles clean shutdown.
"""
import logging
import sys
import cProfile
import pstats
import io

from utils import setup_logging, load_config
from constants import FPS


def main(config_path: str = 'config.json'):
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Flow Field Simulation Starting ---")

    sim_params = config['simulation_parameters']
    run_params = config['run_control']

    from settings import SimulationConfig
    from simulation import Simulation
    from visualization import Visualizer

    # --- Component Initialization ---
    # 1. The visualizer owns the window and so determines the bounds.
    visualizer = Visualizer()

    # 2. Build the simulation over those bounds.
    settings = SimulationConfig.from_dict(sim_params)
    sim = Simulation(settings, visualizer.bounds)

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    log_throttle = run_params.get('log_throttle_steps', 100)
    max_steps = run_params.get('max_steps', 0) # 0 runs until the window closes

    running = True
    frame_num = 0

    if profiler:
        profiler.enable()
    while running:
        elapsed = visualizer.tick(FPS)
        sim.tick(elapsed)
        frame_num += 1

        # The visualizer's draw method controls the loop by checking for
        # the QUIT event, and applies any settings changed from the keyboard.
        if not visualizer.draw(sim):
            running = False

        # Hot loops must throttle logs
        if frame_num % log_throttle == 0:
            logging.info(f"Frame {frame_num} (simulation step {sim.step_count})")
            logging.debug(
                f"Frame {frame_num} | Particles: {sim.particles.particle_count} | "
                f"Mean speed: {sim.particles.mean_speed():.4f}"
            )

        if max_steps and frame_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False

    visualizer.close()
    logging.info("Simulation loop finished.")

    if profiler:
        profiler.disable()
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Flow Field Simulation Shutting Down ---")


if __name__ == "__main__":
    main(*sys.argv[1:2])
