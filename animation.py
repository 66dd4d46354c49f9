# animation.py
"""
Drives the animation one frame at a time.

This module defines the FrameDriver class, which waits for every template
to load, populates the sprite pool and then, once per frame, clears the
drawing surface, paints the background and updates and draws each sprite
in pool order. A new configuration can be applied at any point between
frames without restarting the loop.
"""
import logging
from enum import Enum
from typing import List, Optional

import pygame

from assets import Template, TemplateLoader, default_identifiers
from configuration import AnimationConfig
from effects import SpriteImageCache
from pool import SpritePool

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from visualization import Visualizer

# --- Data Contracts ---
#
# class FrameDriver:
#   - __init__(self, surface: pygame.Surface, config: AnimationConfig,
#              loader: Optional[TemplateLoader] = None, log_throttle: int = 300):
#     - Side Effects: None until start() is called. State is UNINITIALIZED.
#
#   - start(self) -> None:
#     - Side Effects: Loads every template (blocking until all are ready),
#       populates the pool, moves to RUNNING.
#
#   - tick(self) -> None:
#     - Preconditions: state is RUNNING, otherwise RuntimeError.
#     - Side Effects: Clears and repaints the surface; every sprite is
#       updated then drawn, one sprite at a time, in pool order.
#
#   - apply_config(self, config: AnimationConfig) -> None:
#     - Side Effects: Replaces the live config and re-populates the pool.
#       Templates are reloaded only if the identifiers changed. If that
#       reload fails the error propagates and the previous config,
#       templates and pool stay in place.
#
#   - run(self, host: "Visualizer", max_steps: Optional[int] = None) -> int:
#     - Outputs: the number of frames rendered.
#     - Invariants: Runs until host.present() returns False or max_steps.


class DriverState(Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"


class FrameDriver:
    """
    Owns the per-frame clear, update and draw cycle.
    """
    def __init__(
        self,
        surface: pygame.Surface,
        config: AnimationConfig,
        loader: Optional[TemplateLoader] = None,
        log_throttle: int = 300,
    ):
        self.surface = surface
        self.config = config
        self.loader = loader if loader is not None else TemplateLoader()
        self.log_throttle = max(1, log_throttle)

        width, height = surface.get_size()
        self.pool = SpritePool(width, height)
        self.cache = SpriteImageCache()
        self.templates: List[Template] = []
        self.state = DriverState.UNINITIALIZED
        self.frame_count = 0

        logging.info(f"FrameDriver created for a {width}x{height} surface.")

    @property
    def running(self) -> bool:
        return self.state is DriverState.RUNNING

    def _identifiers(self, config: AnimationConfig) -> List[str]:
        if config.image_paths:
            return list(config.image_paths)
        logging.info("No image paths configured; using the default procedural templates.")
        return default_identifiers()

    def start(self) -> None:
        """Loads templates, builds the first population and starts running."""
        if self.running:
            logging.warning("FrameDriver.start() called while already running; ignoring.")
            return
        self.templates = self.loader.load_all(self._identifiers(self.config))
        self.pool.populate(self.templates, self.config)
        self.state = DriverState.RUNNING
        logging.info("FrameDriver running.")

    def apply_config(self, config: AnimationConfig) -> None:
        """
        Swaps in a replacement configuration and rebuilds the population.

        Registered once with the host as the configuration panel's Apply
        callback.
        """
        logging.info(
            f"Applying new configuration: {config.num_objects} objects, "
            f"wrap={'on' if config.wrap_around_mode.enabled else 'off'} "
            f"({config.wrap_around_mode.direction}), hue_shift={config.random_hue_shift}, "
            f"drop_shadow={config.drop_shadow}."
        )
        if not self.running:
            # start() will pick the new config up.
            self.config = config
            return

        # A failed reload raises here, before anything is swapped.
        new_identifiers = self._identifiers(config)
        if new_identifiers != self._identifiers(self.config):
            self.templates = self.loader.load_all(new_identifiers)
        self.config = config
        self.cache.clear()
        self.pool.populate(self.templates, config)

    def tick(self) -> None:
        """Renders one frame onto the surface."""
        if not self.running:
            raise RuntimeError("FrameDriver.tick() called before start(); templates are not loaded yet.")

        config = self.config
        self.surface.fill((0, 0, 0, 0))
        self.surface.fill(config.background)

        # Update then draw per sprite; sprites never interact.
        for sprite in self.pool:
            sprite.update(config)
            sprite.draw(self.surface, config, self.cache)

        self.frame_count += 1
        # Hot loops must throttle logs.
        if self.frame_count % self.log_throttle == 0:
            logging.info(f"Frame {self.frame_count}: {len(self.pool)} sprites.")
            logging.debug(
                f"Frame {self.frame_count} | Mean speed: {self.pool.mean_speed():.3f} | "
                f"Image cache: {len(self.cache)} entries, {self.cache.hits} hits, {self.cache.misses} misses"
            )

    def run(self, host: "Visualizer", max_steps: Optional[int] = None) -> int:
        """
        Ticks until the host asks to stop.

        The host paces frames and presents the surface; the driver never
        terminates on its own unless max_steps is given.
        """
        if not self.running:
            self.start()

        frames = 0
        while True:
            self.tick()
            frames += 1
            if not host.present(self.surface):
                break
            if max_steps is not None and frames >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Stopping animation.")
                break
        return frames
