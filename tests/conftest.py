"""Pytest configuration and shared fixtures."""

import os
import sys
from pathlib import Path

# Off-screen rendering only; must be set before pygame opens anything.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from assets import TemplateLoader  # noqa: E402
from configuration import AnimationConfig  # noqa: E402

SHAPE_IDS = [
    "shape:circle:#ff0066",
    "shape:square:#00ffff",
    "shape:triangle:#ffcc00",
    "shape:diamond:#00ff66",
]


@pytest.fixture
def make_config():
    """Build an AnimationConfig from the defaults plus keyword overrides."""
    def _make(**overrides):
        data = {"image_paths": list(SHAPE_IDS), "seed": 1234}
        data.update(overrides)
        return AnimationConfig.from_dict(data)
    return _make


@pytest.fixture
def config(make_config):
    return make_config()


@pytest.fixture(scope="session")
def templates():
    """Four procedural templates, loaded once per session."""
    return TemplateLoader().load_all(SHAPE_IDS)


@pytest.fixture
def surface():
    """An off-screen drawing surface with per-pixel alpha."""
    return pygame.Surface((400, 300), pygame.SRCALPHA)
