# main.py

import pygame
import constants
import json
import logging
import os
import logger_setup
import numpy as np
from choreography import ChoreographyEngine
from progress import ProgressState, AutoAdvanceDriver
from renderer import PointRenderer

# Get the application's dedicated logger
logger = logging.getLogger("particle_choreography")

import cProfile, pstats


def section_index(progress: float) -> int:
    """Which of the five narrative sections the progress target sits in."""
    return min(int(progress * len(constants.FORMATION_TITLES)), len(constants.FORMATION_TITLES) - 1)


def handle_event(event, progress: ProgressState, driver: AutoAdvanceDriver, engine: ChoreographyEngine,
                 scroll_step: float, now: float) -> bool:
    """
    Applies one pygame event to the progress source. Returns False when the
    application should quit.
    """
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.MOUSEWHEEL:
        # Wheel up scrolls back towards the start, as on a page.
        progress.set_target(progress.target - event.y * scroll_step)
    elif event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False
        elif event.key in (pygame.K_DOWN, pygame.K_PAGEDOWN):
            progress.set_target(progress.target + constants.SCROLL_KEY_STEP)
        elif event.key in (pygame.K_UP, pygame.K_PAGEUP):
            progress.set_target(progress.target - constants.SCROLL_KEY_STEP)
        elif event.key == pygame.K_SPACE:
            driver.toggle(now, progress.target)
        elif event.key == pygame.K_HOME:
            driver.stop()
            progress.set_target(0.0)
        elif event.key == pygame.K_r:
            engine.reset()
    return True


def run_simulation_loop(engine, progress, driver, renderer, clock, scroll_step, max_ticks=None):
    """
    The main loop: one choreography tick and one draw per frame.
    Runs until the window is closed, or for max_ticks frames when profiling.
    """
    running = True
    tick = 0
    start_ms = pygame.time.get_ticks()
    delta_time = 1.0 / constants.FPS
    current_section = None

    while running and (max_ticks is None or tick < max_ticks):
        elapsed_time = (pygame.time.get_ticks() - start_ms) / 1000.0

        for event in pygame.event.get():
            if not handle_event(event, progress, driver, engine, scroll_step, elapsed_time):
                running = False

        target = driver.update(elapsed_time)
        if target is not None:
            progress.set_target(target)

        engine.update(progress, elapsed_time, delta_time)
        renderer.draw(engine.attributes, elapsed_time, progress.value)

        section = section_index(progress.target)
        if section != current_section:
            current_section = section
            title = constants.FORMATION_TITLES[section]
            pygame.display.set_caption(f"{constants.TITLE} - {section + 1:02d} / 05 {title}")
            logger.info(f"Entered section {title}.")

        pygame.display.flip()
        delta_time = clock.tick(constants.FPS) / 1000.0
        tick += 1

    return tick


def main():
    """
    Main function to initialize and run the particle choreography.
    When profiling is enabled in config.json, runs a fixed number of ticks
    under cProfile and writes the top entries to profile.txt beside the run log.
    """
    # --- Setup ---
    log_file = logger_setup.setup_logging()

    with open('config.json', 'r') as f:
        config = json.load(f)
    sim_config = config['simulation']
    driver_config = config.get('driver', {})
    profiling = config.get('profiling', {})

    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {config}")

    # Initialize the master random number generator (RNG)
    rng = np.random.default_rng(config['master_seed'])
    logger.info(f"Master RNG initialized with seed: {config['master_seed']}")

    # --- Initialization ---
    engine = ChoreographyEngine(
        num_particles=sim_config.get('particle_count', constants.DEFAULT_PARTICLE_COUNT),
        config=sim_config,
        rng=rng
    )
    progress = ProgressState(smoothing=sim_config.get('progress_smoothing', constants.PROGRESS_SMOOTHING))
    driver = AutoAdvanceDriver(driver_config.get('auto_advance_duration', 30.0))
    scroll_step = driver_config.get('scroll_step', 0.02)

    pygame.init()
    try:
        screen = pygame.display.set_mode((constants.WIDTH, constants.HEIGHT))
        pygame.display.set_caption(constants.TITLE)
        clock = pygame.time.Clock()
        renderer = PointRenderer(screen)

        if profiling.get('enabled', False):
            profiler = cProfile.Profile()
            profiler.enable()
            ticks = run_simulation_loop(engine, progress, driver, renderer, clock, scroll_step,
                                        max_ticks=profiling.get('ticks', 3000))
            profiler.disable()
            stats_file = os.path.join(os.path.dirname(log_file), 'profile.txt')
            logger.info(f"Profiling complete after {ticks} ticks. Writing stats to {stats_file}")
            with open(stats_file, 'w') as f:
                stats = pstats.Stats(profiler, stream=f).sort_stats('cumtime')
                stats.print_stats(20)
        else:
            ticks = run_simulation_loop(engine, progress, driver, renderer, clock, scroll_step)
            logger.info(f"Ran {ticks} ticks.")
    except Exception:
        logger.exception("Application crashed.")
        raise
    finally:
        logger.info("Application shutting down.")
        pygame.quit()

if __name__ == "__main__":
    main()
