# pool.py
"""
Manages the population of sprites.

This module defines the SpritePool class, which builds an even share of
sprites for every template and keeps them ordered by width, so drawing in
pool order paints small (far) sprites first and large (near) ones on top.
"""
import logging
from typing import Iterator, List, Sequence

import numpy as np

from assets import Template
from configuration import AnimationConfig
from sprite import MovingSprite
from utils import make_rng

# --- Data Contracts ---
#
# class SpritePool:
#   - __init__(self, world_width: int, world_height: int)
#
#   - populate(self, templates: Sequence[Template], config: AnimationConfig) -> None:
#     - Side Effects: Discards every existing sprite, then creates
#       config.num_objects // len(templates) sprites per template.
#     - Invariants:
#       - The remainder of the division is dropped, so len(pool) may be
#         less than num_objects.
#       - Sprites are sorted ascending by width afterwards.
#       - Safe to call repeatedly with the same or a new config.
#
#   - clear(self) -> None:
#     - Side Effects: Empties the pool. Nothing is re-sorted.


class SpritePool:
    """
    An ordered collection of MovingSprites, smallest first.
    """
    def __init__(self, world_width: int, world_height: int):
        self.world_width = world_width
        self.world_height = world_height
        self.sprites: List[MovingSprite] = []

    def __len__(self):
        return len(self.sprites)

    def __iter__(self) -> Iterator[MovingSprite]:
        return iter(self.sprites)

    def __getitem__(self, index):
        return self.sprites[index]

    def clear(self) -> None:
        self.sprites.clear()

    def populate(self, templates: Sequence[Template], config: AnimationConfig) -> None:
        """
        Rebuilds the pool from scratch.

        Args:
            templates (Sequence[Template]): Loaded templates to share out.
            config (AnimationConfig): The configuration to draw sprites from.
        """
        self.clear()
        if not templates:
            logging.warning("No templates available; the sprite pool stays empty.")
            return

        per_template = config.num_objects // len(templates)
        dropped = config.num_objects - per_template * len(templates)
        if dropped:
            logging.warning(
                f"{config.num_objects} objects do not divide evenly across "
                f"{len(templates)} templates; {dropped} will not be created."
            )

        rng = make_rng(config.seed)
        for template in templates:
            for _ in range(per_template):
                self.sprites.append(
                    MovingSprite(template, config, self.world_width, self.world_height, rng)
                )

        # Smaller sprites first so larger ones are drawn on top.
        self.sprites.sort(key=lambda sprite: sprite.width)

        logging.info(
            f"SpritePool populated with {len(self.sprites)} sprites "
            f"({per_template} per template, {len(templates)} templates)."
        )
        if self.sprites:
            widths = np.array([sprite.width for sprite in self.sprites])
            logging.debug(
                f"Sprite widths: min {widths.min():.1f}, "
                f"mean {widths.mean():.1f}, max {widths.max():.1f}"
            )

    def mean_speed(self) -> float:
        """Average speed across the pool, for diagnostics."""
        if not self.sprites:
            return 0.0
        velocities = np.array([(sprite.dx, sprite.dy) for sprite in self.sprites])
        return float(np.mean(np.linalg.norm(velocities, axis=1)))
