# sprite.py
"""
Defines a single moving sprite.

A MovingSprite owns its position, size and velocity, advances itself once
per frame, applies the configured boundary policy (wrap-around or bounce)
and draws itself with the configured depth blur, hue tint and drop shadow.
"""
import logging
from typing import Optional

import numpy as np
import pygame

from assets import Template
from configuration import AnimationConfig
from constants import SHADOW_BLUR_PER_SIZE
from effects import SpriteImageCache, drop_shadow, gaussian_blur, replace_hue
from utils import uniform, random_sign

# --- Data Contracts ---
#
# class MovingSprite:
#   - __init__(self, template, config, world_width, world_height, rng=None):
#     - Inputs:
#       - template: a loaded Template. None is a caller error.
#       - config: the AnimationConfig in force when the sprite is created.
#       - world_width, world_height: the drawing surface's extent.
#       - rng: optional numpy Generator for reproducible draws.
#     - Invariants:
#       - width == height == base_size * size.
#       - hue_shift is 0 unless config.random_hue_shift was set.
#       - flip starts False and only changes in bounce mode. It only
#         mirrors the drawn image while bounce mode is active.
#
#   - update(self, config: AnimationConfig) -> None:
#     - Side Effects: Moves the sprite by (dx, dy), then applies the wrap or
#       bounce policy chosen by the live config. dy always bounces.
#
#   - draw(self, surface, config, cache=None) -> None:
#     - Side Effects: Blits onto `surface` only. Never changes the sprite.


class MovingSprite:
    """
    A template-backed sprite moving in a straight line across the surface.
    """
    def __init__(
        self,
        template: Template,
        config: AnimationConfig,
        world_width: float,
        world_height: float,
        rng: Optional[np.random.Generator] = None,
    ):
        if template is None:
            raise ValueError("A MovingSprite needs a loaded template.")
        self.template = template
        self.world_width = world_width
        self.world_height = world_height

        # Multiplier and base size are independent draws.
        self.size = uniform(config.size_range.min, config.size_range.max, rng)
        self.base_size = uniform(config.object_size.min, config.object_size.max, rng)
        self.width = self.base_size * self.size
        self.height = self.width

        # Spawn fully on-surface. A sprite wider than the surface gets a
        # reversed range and may start partly off it.
        self.x = uniform(0, world_width - self.width, rng)
        self.y = uniform(0, world_height - self.height, rng)

        vx, vy = config.velocity_multiplier_x, config.velocity_multiplier_y
        self.dx = uniform(vx.min, vx.max, rng) * random_sign(rng)
        self.dy = uniform(vy.min, vy.max, rng) * random_sign(rng)

        self.hue_shift = uniform(0, 360, rng) if config.random_hue_shift else 0.0
        self.flip = False

    def __repr__(self):
        return (f"MovingSprite({self.template.name!r}, x={self.x:.1f}, y={self.y:.1f}, "
                f"width={self.width:.1f}, dx={self.dx:.2f}, dy={self.dy:.2f})")

    # --- Motion ---

    def update(self, config: AnimationConfig) -> None:
        """Advances the sprite one frame."""
        self.x += self.dx
        self.y += self.dy

        # Chosen per frame so a new config takes effect on the next tick.
        if config.wrap_around_mode.enabled:
            self._wrap_around(config.wrap_around_mode.direction)
        else:
            self._bounce_off_walls()

    def _wrap_around(self, direction: str) -> None:
        if direction == "left" and self.dx > 0:
            self.dx = -self.dx
        elif direction == "right" and self.dx < 0:
            self.dx = -self.dx

        if self.x > self.world_width:
            self.x = -self.width
        elif self.x + self.width < 0:
            self.x = self.world_width

        # No vertical wrap; top and bottom always bounce.
        self._bounce_vertical()

    def _bounce_off_walls(self) -> None:
        if self.x <= 0 or self.x + self.width >= self.world_width:
            self.dx = -self.dx
            # Mirror the image while moving right.
            self.flip = self.dx > 0
        self._bounce_vertical()

    def _bounce_vertical(self) -> None:
        if self.y <= 0 or self.y + self.height >= self.world_height:
            self.dy = -self.dy

    # --- Rendering ---

    def blur_amount(self, config: AnimationConfig) -> float:
        """
        Depth-of-field blur for this sprite, in pixels.

        Sprites smaller than the average configured base size are treated as
        farther away and blurred in proportion; the rest stay sharp.
        """
        average = config.average_object_size
        if self.width <= 0 or self.width >= average:
            return 0.0
        return config.depth_blur_strength / (average / self.width)

    def draw(self, surface: pygame.Surface, config: AnimationConfig,
             cache: Optional[SpriteImageCache] = None) -> None:
        """Draws the sprite and its effects onto `surface`."""
        pixel_size = int(round(self.width))
        if pixel_size < 1:
            return

        blur = round(self.blur_amount(config), 2)
        hue = round(self.hue_shift, 1) if config.random_hue_shift else None
        shadow_sigma = round(self.size * SHADOW_BLUR_PER_SIZE / 2, 2) if config.drop_shadow else None
        # flip is left over after a switch to wrap mode; only bounce mirrors.
        mirrored = self.flip and not config.wrap_around_mode.enabled
        key = (self.template.name, pixel_size, mirrored, hue, blur, shadow_sigma)

        prepared = cache.get(key) if cache is not None else None
        if prepared is None:
            prepared = self._prepare_image(pixel_size, mirrored, hue, blur, shadow_sigma)
            if cache is not None:
                cache.put(key, prepared)

        image, image_padding, shadow = prepared
        if shadow is not None:
            shadow_surface, shadow_padding = shadow
            surface.blit(shadow_surface, (self.x + self.size - shadow_padding,
                                          self.y + self.size - shadow_padding))
        surface.blit(image, (self.x - image_padding, self.y - image_padding))

    def _prepare_image(self, pixel_size: int, mirrored: bool, hue: Optional[float], blur: float,
                       shadow_sigma: Optional[float]):
        """Scales the template and applies every enabled effect."""
        image = pygame.transform.smoothscale(self.template.surface, (pixel_size, pixel_size))
        if mirrored:
            image = pygame.transform.flip(image, True, False)
        if hue is not None:
            image = replace_hue(image, hue)

        shadow = drop_shadow(image, shadow_sigma) if shadow_sigma is not None else None
        image, padding = gaussian_blur(image, blur)
        logging.debug(f"Prepared image for {self.template.name} at {pixel_size}px "
                      f"(blur={blur}, hue={hue}, shadow={shadow_sigma}).")
        return image, padding, shadow
