"""Tests for the blur, hue and shadow kernels and the image cache."""

import numpy as np
import pygame
import pytest

from effects import (
    SpriteImageCache, drop_shadow, gaussian_blur, gaussian_kernel, replace_hue,
    rgba_to_surface, surface_to_rgba
)


def solid(size, color):
    surface = pygame.Surface(size, pygame.SRCALPHA)
    surface.fill(color)
    return surface


class TestGaussianBlur:

    def test_kernel_is_normalised_and_symmetric(self):
        kernel = gaussian_kernel(1.5)
        assert kernel.sum() == pytest.approx(1.0, abs=1e-5)
        np.testing.assert_allclose(kernel, kernel[::-1])
        assert kernel.argmax() == len(kernel) // 2

    def test_single_pixel_spreads(self):
        surface = pygame.Surface((9, 9), pygame.SRCALPHA)
        surface.fill((0, 0, 0, 0))
        surface.set_at((4, 4), (255, 255, 255, 255))

        blurred, padding = gaussian_blur(surface, 1.0)

        assert padding == 3
        assert blurred.get_size() == (15, 15)
        alpha = pygame.surfarray.array_alpha(blurred).astype(int)
        centre = 4 + padding
        assert 0 < alpha[centre, centre] < 255
        assert alpha[centre + 1, centre] > 0
        assert alpha[centre + 1, centre] < alpha[centre, centre]
        # Coverage is conserved up to rounding.
        assert alpha.sum() == pytest.approx(255, abs=30)

    def test_colour_does_not_darken_at_edges(self):
        blurred, padding = gaussian_blur(solid((10, 10), (200, 40, 40, 255)), 2.0)
        r, g, b, a = blurred.get_at((padding - 1, padding + 5))
        assert 0 < a < 255
        assert (r, g, b) == pytest.approx((200, 40, 40), abs=2)

    def test_tiny_sigma_is_identity(self):
        surface = solid((6, 4), (10, 20, 30, 255))
        blurred, padding = gaussian_blur(surface, 0.0)
        assert padding == 0
        assert blurred is not surface
        np.testing.assert_array_equal(surface_to_rgba(blurred), surface_to_rgba(surface))


class TestReplaceHue:

    def test_red_to_green(self):
        recoloured = replace_hue(solid((4, 4), (255, 0, 0, 200)), 120)
        assert tuple(recoloured.get_at((1, 1))) == (0, 255, 0, 200)

    def test_red_to_blue(self):
        recoloured = replace_hue(solid((2, 2), (255, 0, 0, 255)), 240)
        assert tuple(recoloured.get_at((0, 0))) == (0, 0, 255, 255)

    def test_greys_are_unchanged(self):
        recoloured = replace_hue(solid((3, 3), (128, 128, 128, 255)), 200)
        assert tuple(recoloured.get_at((2, 2))) == (128, 128, 128, 255)

    def test_keeps_lightness(self):
        # A dark red stays dark after turning green.
        recoloured = replace_hue(solid((2, 2), (128, 0, 0, 255)), 120)
        assert tuple(recoloured.get_at((0, 0))) == (0, 128, 0, 255)


class TestDropShadow:

    def test_unblurred_shadow_is_half_transparent_black(self):
        shadow, padding = drop_shadow(solid((5, 5), (255, 255, 0, 255)), 0.0)
        assert padding == 0
        assert tuple(shadow.get_at((2, 2))) == (0, 0, 0, 128)

    def test_shadow_follows_the_alpha_mask(self):
        surface = pygame.Surface((5, 5), pygame.SRCALPHA)
        surface.fill((0, 0, 0, 0))
        surface.set_at((0, 0), (255, 0, 0, 255))
        shadow, _ = drop_shadow(surface, 0.0)
        assert shadow.get_at((0, 0)).a == 128
        assert shadow.get_at((4, 4)).a == 0

    def test_blurred_shadow_is_padded(self):
        shadow, padding = drop_shadow(solid((8, 8), (255, 255, 255, 255)), 2.5)
        assert padding == 8
        assert shadow.get_size() == (24, 24)


def test_rgba_surface_round_trip_keeps_alpha():
    pixels = np.zeros((3, 2, 4), dtype=np.uint8)
    pixels[1, 1] = (10, 20, 30, 40)
    np.testing.assert_array_equal(surface_to_rgba(rgba_to_surface(pixels)), pixels)


class TestSpriteImageCache:

    def test_hits_and_misses(self):
        cache = SpriteImageCache()
        assert cache.get("a") is None
        cache.put("a", ("image", 0, None))
        assert cache.get("a") == ("image", 0, None)
        assert (cache.hits, cache.misses) == (1, 1)

    def test_evicts_least_recently_used(self):
        cache = SpriteImageCache(max_entries=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)
        assert len(cache) == 2
        assert cache.get("b") is None
        assert cache.get("a") == 1

    def test_clear(self):
        cache = SpriteImageCache()
        cache.put("a", 1)
        cache.clear()
        assert len(cache) == 0
        assert (cache.hits, cache.misses) == (0, 0)
