# effects.py
"""
Per-sprite visual effects: depth blur, hue tint and drop shadow.

Pixel work happens on NumPy arrays pulled from pygame surfaces and is run
through Numba-jitted kernels, because these loops touch every pixel of every
sprite. Prepared images are memoised in SpriteImageCache so a sprite whose
appearance has not changed costs a single blit per frame.
"""
import logging
import math
from collections import OrderedDict
from typing import Hashable, Optional, Tuple

import numpy as np
import pygame
from numba import jit

from constants import BLUR_KERNEL_SIGMAS, MIN_BLUR_SIGMA, RENDER_CACHE_SIZE, SHADOW_COLOR

# --- Data Contracts ---
#
# gaussian_blur(surface: pygame.Surface, sigma: float) -> Tuple[pygame.Surface, int]:
#   - Inputs: a surface and the standard deviation of the blur in pixels.
#   - Outputs: a new SRCALPHA surface padded by `padding` pixels on every
#     side (so the blur is not clipped) and that padding.
#   - Invariants: sigma < MIN_BLUR_SIGMA returns an unpadded copy.
#
# replace_hue(surface: pygame.Surface, hue: float) -> pygame.Surface:
#   - Outputs: a copy whose pixels keep their saturation and lightness but
#     take the given hue (degrees). Greys are unchanged. Alpha is kept.
#
# drop_shadow(surface: pygame.Surface, sigma: float) -> Tuple[pygame.Surface, int]:
#   - Outputs: a blurred SHADOW_COLOR silhouette of the surface's alpha
#     mask, and its padding.


@jit(nopython=True)
def _convolve_rows_numba(src, kernel):
    """
    Numba-jitted 1D convolution along the first axis of a (W, H, C) array.

    Samples outside the array count as zero (transparent).
    """
    width, height, channels = src.shape
    radius = kernel.shape[0] // 2
    out = np.zeros_like(src)
    for x in range(width):
        for k in range(-radius, radius + 1):
            xx = x + k
            if xx < 0 or xx >= width:
                continue
            weight = kernel[k + radius]
            for y in range(height):
                for c in range(channels):
                    out[x, y, c] += src[xx, y, c] * weight
    return out


@jit(nopython=True)
def _replace_hue_numba(rgb, hue):
    """
    Numba-jitted hue replacement keeping each pixel's HSL saturation and lightness.

    Keeping saturation and lightness keeps the chroma (max - min), so only
    the hue sector needs recomputing.
    """
    width, height, _ = rgb.shape
    out = np.empty_like(rgb)
    h = (hue % 360.0) / 60.0
    sector = int(h) % 6
    for x in range(width):
        for y in range(height):
            r = rgb[x, y, 0] / 255.0
            g = rgb[x, y, 1] / 255.0
            b = rgb[x, y, 2] / 255.0
            max_c = max(r, max(g, b))
            min_c = min(r, min(g, b))
            chroma = max_c - min_c
            lightness = (max_c + min_c) / 2.0
            second = chroma * (1.0 - abs(h % 2.0 - 1.0))
            m = lightness - chroma / 2.0

            if sector == 0:
                r1, g1, b1 = chroma, second, 0.0
            elif sector == 1:
                r1, g1, b1 = second, chroma, 0.0
            elif sector == 2:
                r1, g1, b1 = 0.0, chroma, second
            elif sector == 3:
                r1, g1, b1 = 0.0, second, chroma
            elif sector == 4:
                r1, g1, b1 = second, 0.0, chroma
            else:
                r1, g1, b1 = chroma, 0.0, second

            out[x, y, 0] = min(255, max(0, int((r1 + m) * 255.0 + 0.5)))
            out[x, y, 1] = min(255, max(0, int((g1 + m) * 255.0 + 0.5)))
            out[x, y, 2] = min(255, max(0, int((b1 + m) * 255.0 + 0.5)))
    return out


def gaussian_kernel(sigma: float) -> np.ndarray:
    """A normalised 1D gaussian spanning BLUR_KERNEL_SIGMAS deviations either side."""
    radius = max(1, int(math.ceil(sigma * BLUR_KERNEL_SIGMAS)))
    offsets = np.arange(-radius, radius + 1, dtype=np.float32)
    kernel = np.exp(-(offsets ** 2) / (2.0 * sigma * sigma)).astype(np.float32)
    return kernel / kernel.sum()


def surface_to_rgba(surface: pygame.Surface) -> np.ndarray:
    """Copies a surface into a (W, H, 4) uint8 array."""
    rgb = pygame.surfarray.array3d(surface)
    if surface.get_flags() & pygame.SRCALPHA:
        alpha = pygame.surfarray.array_alpha(surface)
    else:
        alpha = np.full(rgb.shape[:2], 255, dtype=np.uint8)
    return np.dstack((rgb, alpha)).astype(np.uint8)


def rgba_to_surface(pixels: np.ndarray) -> pygame.Surface:
    """Builds an SRCALPHA surface from a (W, H, 4) uint8 array."""
    width, height = pixels.shape[0], pixels.shape[1]
    surface = pygame.Surface((width, height), pygame.SRCALPHA)
    if width == 0 or height == 0:
        return surface
    pygame.surfarray.blit_array(surface, np.ascontiguousarray(pixels[:, :, :3]))
    alpha_view = pygame.surfarray.pixels_alpha(surface)
    alpha_view[:, :] = pixels[:, :, 3]
    # Release the pixel lock before the surface is blitted.
    del alpha_view
    return surface


def _blur_rgba(pixels: np.ndarray, sigma: float) -> Tuple[np.ndarray, int]:
    kernel = gaussian_kernel(sigma)
    padding = kernel.shape[0] // 2

    rgba = pixels.astype(np.float32)
    # Blur premultiplied colour so transparent pixels do not bleed black.
    alpha = rgba[:, :, 3:4] / 255.0
    rgba[:, :, :3] *= alpha
    rgba = np.pad(rgba, ((padding, padding), (padding, padding), (0, 0)))

    rgba = _convolve_rows_numba(rgba, kernel)
    rgba = np.ascontiguousarray(rgba.transpose(1, 0, 2))
    rgba = _convolve_rows_numba(rgba, kernel)
    rgba = np.ascontiguousarray(rgba.transpose(1, 0, 2))

    alpha = rgba[:, :, 3:4] / 255.0
    safe_alpha = np.where(alpha > 0, alpha, 1.0)
    rgba[:, :, :3] = np.where(alpha > 0, rgba[:, :, :3] / safe_alpha, 0.0)
    return np.clip(np.rint(rgba), 0, 255).astype(np.uint8), padding


def gaussian_blur(surface: pygame.Surface, sigma: float) -> Tuple[pygame.Surface, int]:
    """Blurs a surface, growing it so the blur is not clipped at the edges."""
    if sigma < MIN_BLUR_SIGMA or surface.get_width() == 0 or surface.get_height() == 0:
        return surface.copy(), 0
    blurred, padding = _blur_rgba(surface_to_rgba(surface), sigma)
    return rgba_to_surface(blurred), padding


def replace_hue(surface: pygame.Surface, hue: float) -> pygame.Surface:
    """Re-colours a surface to the given hue in degrees."""
    pixels = surface_to_rgba(surface)
    if pixels.size == 0:
        return surface.copy()
    pixels[:, :, :3] = _replace_hue_numba(np.ascontiguousarray(pixels[:, :, :3]), float(hue))
    return rgba_to_surface(pixels)


def drop_shadow(surface: pygame.Surface, sigma: float) -> Tuple[pygame.Surface, int]:
    """Builds a soft shadow from a surface's alpha mask."""
    pixels = surface_to_rgba(surface)
    shadow = np.empty_like(pixels)
    shadow[:, :, 0] = SHADOW_COLOR[0]
    shadow[:, :, 1] = SHADOW_COLOR[1]
    shadow[:, :, 2] = SHADOW_COLOR[2]
    shadow[:, :, 3] = (pixels[:, :, 3].astype(np.uint16) * SHADOW_COLOR[3] // 255).astype(np.uint8)
    if sigma < MIN_BLUR_SIGMA or pixels.size == 0:
        return rgba_to_surface(shadow), 0
    blurred, padding = _blur_rgba(shadow, sigma)
    return rgba_to_surface(blurred), padding


class SpriteImageCache:
    """
    A bounded least-recently-used store of prepared sprite images.

    Keys must capture every input that changes the pixels; values are the
    prepared image tuples built by MovingSprite.
    """
    def __init__(self, max_entries: int = RENDER_CACHE_SIZE):
        self.max_entries = max_entries
        self._entries: "OrderedDict[Hashable, tuple]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self):
        return len(self._entries)

    def get(self, key: Hashable) -> Optional[tuple]:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        self._entries.move_to_end(key)
        self.hits += 1
        return entry

    def put(self, key: Hashable, entry: tuple) -> None:
        self._entries[key] = entry
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        if self._entries:
            logging.debug(f"Clearing sprite image cache ({len(self._entries)} entries, "
                          f"{self.hits} hits, {self.misses} misses).")
        self._entries.clear()
        self.hits = 0
        self.misses = 0
