# main.py
"""
Main entry point for the Drifting Sprites animation.

This script orchestrates the entire animation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the window, loads the templates and populates the sprites.
4. Runs the frame loop until the window is closed.
5. Handles clean shutdown.
"""
import logging
import os
from utils import setup_logging, load_config
import cProfile
import pstats
import io

CONFIG_PATH = 'config.json'


def main():
    """
    The main function to run the animation.
    """
    # Load configuration from the JSON file first.
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(CONFIG_PATH)
    except Exception as e:
        print(f"FATAL: Could not load {CONFIG_PATH}. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Drifting Sprites Starting ---")

    run_params = config.get('run_control', {})

    from configuration import AnimationConfig, ConfigurationError
    from assets import TemplateLoader
    from animation import FrameDriver
    from visualization import Visualizer

    try:
        animation_config = AnimationConfig.from_dict(config.get('animation', {}))
    except ConfigurationError as e:
        logging.critical(f"Invalid animation configuration: {e}")
        return

    # --- Component Initialization ---
    # 1. Initialize the visualizer first. It determines the surface dimensions.
    visualizer = Visualizer(animation_config)

    # 2. The driver renders onto the visualizer's animation surface. Image
    #    paths are resolved relative to the config file.
    loader = TemplateLoader(base_dir=os.path.dirname(os.path.abspath(CONFIG_PATH)))
    driver = FrameDriver(
        visualizer.sim_surface,
        animation_config,
        loader,
        log_throttle=run_params.get('log_throttle_steps', 300),
    )

    # 3. Register the Apply handler once, outside the frame loop.
    visualizer.set_apply_handler(driver.apply_config)

    # 4. Wait for every template, then build the first population.
    try:
        driver.start()
    except (OSError, ValueError, RuntimeError) as e:
        # pygame.error is a RuntimeError subclass.
        logging.critical(f"Could not load templates: {e}")
        visualizer.close()
        return

    profiler = cProfile.Profile()
    max_steps = run_params.get('max_steps') # None runs until the window closes

    profiler.enable()
    frames = driver.run(visualizer, max_steps=max_steps)
    profiler.disable()

    visualizer.close()
    logging.info(f"Animation loop finished after {frames} frames.")

    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    # Sort by cumulative time spent in the function
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20) # Print top 20 slowest functions
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Drifting Sprites Shutting Down ---")


if __name__ == "__main__":
    main()
