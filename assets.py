# assets.py
"""
Loads the visual templates that sprites are drawn from.

A template identifier is either a path to an image file or a procedural
shape of the form "shape:<kind>:<colour>" (for example "shape:circle:gold").
All templates are loaded concurrently and the loader only returns once every
one of them is ready, so no sprite is ever built from a missing image.
"""
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Sequence

import pygame

from configuration import parse_color, ConfigurationError
from constants import SHAPE_TEMPLATE_RESOLUTION, TEMPLATE_LOADER_WORKERS, VIBRANT_COLORS

# --- Data Contracts ---
#
# class TemplateLoader:
#   - load_all(self, identifiers: Sequence[str]) -> List[Template]:
#     - Inputs: template identifiers in config order.
#     - Outputs: one Template per identifier, in the same order.
#     - Side Effects: Reads image files from disk on worker threads.
#       Conversion to the display pixel format happens on the calling thread.
#     - Invariants: Returns only after every load has completed. The first
#       failing load is re-raised and nothing is returned.

SHAPE_PREFIX = "shape:"
SHAPE_KINDS = ("circle", "square", "triangle", "diamond")


@dataclass(frozen=True)
class Template:
    """A loaded, read-only image shared by every sprite that uses it."""
    name: str
    surface: pygame.Surface = field(compare=False, repr=False)

    @property
    def size(self):
        return self.surface.get_size()


def default_identifiers() -> List[str]:
    """Procedural templates used when the config lists no images."""
    kinds = SHAPE_KINDS
    return [
        f"{SHAPE_PREFIX}{kinds[i % len(kinds)]}:#{r:02x}{g:02x}{b:02x}"
        for i, (r, g, b) in enumerate(VIBRANT_COLORS)
    ]


def render_shape(kind: str, color: pygame.Color, resolution: int = SHAPE_TEMPLATE_RESOLUTION) -> pygame.Surface:
    """Draws a filled shape centred on a transparent square surface."""
    surface = pygame.Surface((resolution, resolution), pygame.SRCALPHA)
    surface.fill((0, 0, 0, 0))
    last = resolution - 1
    half = resolution / 2
    if kind == "circle":
        pygame.draw.circle(surface, color, (half, half), half)
    elif kind == "square":
        pygame.draw.rect(surface, color, pygame.Rect(0, 0, resolution, resolution), border_radius=resolution // 8)
    elif kind == "triangle":
        pygame.draw.polygon(surface, color, [(half, 0), (last, last), (0, last)])
    elif kind == "diamond":
        pygame.draw.polygon(surface, color, [(half, 0), (last, half), (half, last), (0, half)])
    else:
        raise ValueError(f"Unknown template shape '{kind}'. Expected one of {SHAPE_KINDS}.")
    return surface


class TemplateLoader:
    """
    Resolves template identifiers into Template handles.
    """
    def __init__(self, base_dir: str = ".", workers: int = TEMPLATE_LOADER_WORKERS):
        self.base_dir = base_dir
        self.workers = max(1, workers)

    def load(self, identifier: str) -> Template:
        """Loads a single template."""
        return self._to_pixel_format(self._read(identifier))

    def _read(self, identifier: str) -> Template:
        # Safe on worker threads: file and drawing work only, no display calls.
        if identifier.startswith(SHAPE_PREFIX):
            return self._load_shape(identifier)
        return self._load_image(identifier)

    def _load_shape(self, identifier: str) -> Template:
        parts = identifier[len(SHAPE_PREFIX):].split(":", 1)
        if len(parts) != 2:
            raise ValueError(f"Template '{identifier}' must look like 'shape:<kind>:<colour>'.")
        kind, color_value = parts
        try:
            color = parse_color(color_value)
        except ConfigurationError as e:
            raise ValueError(f"Template '{identifier}': {e}") from e
        return Template(identifier, render_shape(kind, color))

    def _load_image(self, identifier: str) -> Template:
        path = identifier if os.path.isabs(identifier) else os.path.join(self.base_dir, identifier)
        if not os.path.isfile(path):
            logging.error(f"Template image not found at {path}.")
            raise FileNotFoundError(path)
        surface = pygame.image.load(path)
        logging.debug(f"Loaded template image {path} ({surface.get_width()}x{surface.get_height()}).")
        return Template(identifier, surface)

    def _to_pixel_format(self, template: Template) -> Template:
        """
        Converts a freshly read image to 32-bit per-pixel alpha.

        convert_alpha talks to the display, so this runs on the calling
        thread. Off-screen runs copy into a 32-bit surface instead so that
        smoothscale accepts it. Procedural shapes are already in this format.
        """
        if template.name.startswith(SHAPE_PREFIX):
            return template
        surface = template.surface
        if pygame.display.get_surface() is not None:
            surface = surface.convert_alpha()
        else:
            rgba = pygame.Surface(surface.get_size(), pygame.SRCALPHA, 32)
            rgba.blit(surface, (0, 0))
            surface = rgba
        return Template(template.name, surface)

    def load_all(self, identifiers: Sequence[str]) -> List[Template]:
        """
        Loads every identifier and waits for all of them to finish.

        Returns:
            List[Template]: Templates in the order the identifiers were given.
        """
        if not identifiers:
            logging.warning("No template identifiers given; nothing to load.")
            return []

        logging.info(f"Loading {len(identifiers)} templates...")
        with ThreadPoolExecutor(max_workers=min(self.workers, len(identifiers))) as executor:
            futures = [executor.submit(self._read, identifier) for identifier in identifiers]
            # result() blocks per future, so this only completes once all have.
            loaded = [future.result() for future in futures]
        templates = [self._to_pixel_format(template) for template in loaded]
        logging.info(f"All {len(templates)} templates ready.")
        return templates
