# configuration.py
"""
The animation's tunable parameters.

This module defines AnimationConfig, the validated, immutable record that
the sprites, the pool and the frame driver read every frame, together with
ConfigEditor, which holds the pending edits made in the configuration panel
until they are applied as a full replacement record.
"""
import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Tuple

import pygame

from constants import TRANSPARENT

# --- Data Contracts ---
#
# AnimationConfig.from_dict(data: Dict[str, Any]) -> AnimationConfig:
#   - Inputs: the "animation" section of config.json. Missing keys take
#     their values from DEFAULT_ANIMATION_CONFIG.
#   - Outputs: a frozen AnimationConfig.
#   - Side Effects: Logs and raises ConfigurationError on invalid input.
#   - Invariants: every ValueRange has min <= max; num_objects is a
#     non-negative int; size and velocity ranges are non-negative;
#     wrap direction is one of WRAP_DIRECTIONS; background_color parses.
#
# class ConfigEditor:
#   - adjust(key, steps) / activate(key): mutate the pending dictionary,
#     keeping every range ordered.
#   - build() -> AnimationConfig: validates the pending edits.

WRAP_DIRECTIONS = ("left", "right", "both")

DEFAULT_ANIMATION_CONFIG: Dict[str, Any] = {
    "seed": None,
    "num_objects": 50,
    "size_range": {"min": 0.4, "max": 2.0},
    "object_size": {"min": 100, "max": 100},
    "velocity_multiplier_x": {"min": 2, "max": 4},
    "velocity_multiplier_y": {"min": 0, "max": 1},
    "depth_blur_strength": 1,
    "background_color": TRANSPARENT,
    "image_paths": [],
    "random_hue_shift": False,
    "drop_shadow": False,
    "wrap_around_mode": {"enabled": True, "direction": "left"},
}


class ConfigurationError(ValueError):
    """Raised when an animation configuration violates its invariants."""


def parse_color(value: Any) -> pygame.Color:
    """
    Converts a config colour into a pygame.Color.

    Accepts anything pygame.Color accepts (names, "#rrggbb", RGB(A) lists)
    plus the keyword "transparent".
    """
    if isinstance(value, str) and value.strip().lower() == TRANSPARENT:
        return pygame.Color(0, 0, 0, 0)
    try:
        if isinstance(value, (list, tuple)):
            return pygame.Color(*value)
        return pygame.Color(value)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Invalid colour {value!r}: {e}") from e


def _fail(msg: str) -> None:
    logging.error(f"Configuration error: {msg}")
    raise ConfigurationError(msg)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class ValueRange:
    """A closed numeric interval with min <= max."""
    min: float
    max: float

    @property
    def mean(self) -> float:
        return (self.min + self.max) / 2

    @classmethod
    def from_dict(cls, data: Any, name: str, non_negative: bool = True) -> "ValueRange":
        if not isinstance(data, dict) or "min" not in data or "max" not in data:
            _fail(f"'{name}' must be an object with 'min' and 'max' keys, got {data!r}.")
        low, high = data["min"], data["max"]
        if not (_is_number(low) and _is_number(high)):
            _fail(f"'{name}' bounds must be numbers, got min={low!r}, max={high!r}.")
        if low > high:
            _fail(f"'{name}' has min ({low}) greater than max ({high}).")
        if non_negative and low < 0:
            _fail(f"'{name}' must not be negative, got min={low}.")
        return cls(low, high)

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class WrapAroundMode:
    enabled: bool = True
    direction: str = "left"


@dataclass(frozen=True)
class AnimationConfig:
    """
    The complete, validated set of tunable animation parameters.

    Instances are immutable; applying new settings means building a new
    record and handing it to the frame driver.
    """
    num_objects: int
    size_range: ValueRange
    object_size: ValueRange
    velocity_multiplier_x: ValueRange
    velocity_multiplier_y: ValueRange
    depth_blur_strength: float
    background_color: Any
    image_paths: Tuple[str, ...]
    random_hue_shift: bool
    drop_shadow: bool
    wrap_around_mode: WrapAroundMode
    seed: Optional[int] = None
    background: pygame.Color = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Resolved once so the hot loop does not re-parse the colour.
        object.__setattr__(self, "background", parse_color(self.background_color))

    @property
    def average_object_size(self) -> float:
        """The mean of the configured base pixel-size range."""
        return self.object_size.mean

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> "AnimationConfig":
        """Validates a configuration dictionary and builds a record from it."""
        merged = copy.deepcopy(DEFAULT_ANIMATION_CONFIG)
        merged.update(data or {})

        num_objects = merged["num_objects"]
        if not isinstance(num_objects, int) or isinstance(num_objects, bool) or num_objects < 0:
            _fail(f"'num_objects' must be a non-negative integer, got {num_objects!r}.")

        blur = merged["depth_blur_strength"]
        if not _is_number(blur) or blur < 0:
            _fail(f"'depth_blur_strength' must be a non-negative number, got {blur!r}.")

        paths = merged["image_paths"]
        if not isinstance(paths, (list, tuple)) or not all(isinstance(p, str) for p in paths):
            _fail(f"'image_paths' must be a list of strings, got {paths!r}.")

        for flag in ("random_hue_shift", "drop_shadow"):
            if not isinstance(merged[flag], bool):
                _fail(f"'{flag}' must be true or false, got {merged[flag]!r}.")

        wrap = merged["wrap_around_mode"]
        if not isinstance(wrap, dict):
            _fail(f"'wrap_around_mode' must be an object, got {wrap!r}.")
        enabled = wrap.get("enabled", True)
        direction = wrap.get("direction", "left")
        if not isinstance(enabled, bool):
            _fail(f"'wrap_around_mode.enabled' must be true or false, got {enabled!r}.")
        if direction not in WRAP_DIRECTIONS:
            _fail(f"'wrap_around_mode.direction' must be one of {WRAP_DIRECTIONS}, got {direction!r}.")

        seed = merged["seed"]
        if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
            _fail(f"'seed' must be an integer or null, got {seed!r}.")

        try:
            parse_color(merged["background_color"])
        except ConfigurationError as e:
            _fail(str(e))

        return cls(
            num_objects=num_objects,
            size_range=ValueRange.from_dict(merged["size_range"], "size_range"),
            object_size=ValueRange.from_dict(merged["object_size"], "object_size"),
            velocity_multiplier_x=ValueRange.from_dict(merged["velocity_multiplier_x"], "velocity_multiplier_x"),
            velocity_multiplier_y=ValueRange.from_dict(merged["velocity_multiplier_y"], "velocity_multiplier_y"),
            depth_blur_strength=blur,
            background_color=merged["background_color"],
            image_paths=tuple(paths),
            random_hue_shift=merged["random_hue_shift"],
            drop_shadow=merged["drop_shadow"],
            wrap_around_mode=WrapAroundMode(enabled, direction),
            seed=seed,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Returns the record in the shape of config.json's "animation" section."""
        return {
            "seed": self.seed,
            "num_objects": self.num_objects,
            "size_range": self.size_range.to_dict(),
            "object_size": self.object_size.to_dict(),
            "velocity_multiplier_x": self.velocity_multiplier_x.to_dict(),
            "velocity_multiplier_y": self.velocity_multiplier_y.to_dict(),
            "depth_blur_strength": self.depth_blur_strength,
            "background_color": copy.deepcopy(self.background_color),
            "image_paths": list(self.image_paths),
            "random_hue_shift": self.random_hue_shift,
            "drop_shadow": self.drop_shadow,
            "wrap_around_mode": {
                "enabled": self.wrap_around_mode.enabled,
                "direction": self.wrap_around_mode.direction,
            },
        }


@dataclass(frozen=True)
class EditableField:
    """One row of the configuration panel."""
    key: str            # dotted path into the config dictionary
    label: str
    kind: str           # "int", "float", "bool" or "choice"
    step: float = 1
    minimum: float = 0


EDITABLE_FIELDS: List[EditableField] = [
    EditableField("num_objects", "Object Count", "int", step=1),
    EditableField("size_range.min", "Size Min", "float", step=0.1),
    EditableField("size_range.max", "Size Max", "float", step=0.1),
    EditableField("object_size.min", "Base Size Min", "int", step=5),
    EditableField("object_size.max", "Base Size Max", "int", step=5),
    EditableField("velocity_multiplier_x.min", "Speed X Min", "float", step=0.5),
    EditableField("velocity_multiplier_x.max", "Speed X Max", "float", step=0.5),
    EditableField("velocity_multiplier_y.min", "Speed Y Min", "float", step=0.5),
    EditableField("velocity_multiplier_y.max", "Speed Y Max", "float", step=0.5),
    EditableField("depth_blur_strength", "Blur Strength", "int", step=1),
    EditableField("random_hue_shift", "Hue Shift", "bool"),
    EditableField("drop_shadow", "Drop Shadow", "bool"),
    EditableField("wrap_around_mode.enabled", "Wrap Around", "bool"),
    EditableField("wrap_around_mode.direction", "Wrap Direction", "choice"),
]


class ConfigEditor:
    """
    Holds the configuration panel's pending edits.

    Edits accumulate in a plain dictionary and only become an AnimationConfig
    when build() is called, so half-finished edits never reach the animation.
    """
    def __init__(self, config: AnimationConfig):
        self.fields = {f.key: f for f in EDITABLE_FIELDS}
        self.reset(config)

    def reset(self, config: AnimationConfig) -> None:
        """Discards pending edits and starts again from `config`."""
        self.pending = config.to_dict()
        self._baseline = config.to_dict()

    @property
    def dirty(self) -> bool:
        return self.pending != self._baseline

    def discard(self) -> None:
        """Throws away pending edits, returning to the last applied values."""
        self.pending = copy.deepcopy(self._baseline)

    @staticmethod
    def _lookup(tree: Dict[str, Any], key: str) -> Any:
        node = tree
        for part in key.split("."):
            node = node[part]
        return node

    def value(self, key: str) -> Any:
        """The pending value of a dotted key such as "size_range.min"."""
        return self._lookup(self.pending, key)

    def baseline_value(self, key: str) -> Any:
        """The value of a dotted key in the last applied configuration."""
        return self._lookup(self._baseline, key)

    def _set(self, key: str, value: Any) -> None:
        *parents, leaf = key.split(".")
        node = self.pending
        for part in parents:
            node = node[part]
        node[leaf] = value

    def adjust(self, key: str, steps: int) -> None:
        """Moves a numeric field by `steps` increments, keeping ranges ordered."""
        row = self.fields[key]
        if row.kind not in ("int", "float"):
            return

        new_value = max(row.minimum, self.value(key) + steps * row.step)
        # A min may not pass its max and vice versa.
        if key.endswith(".min"):
            new_value = min(new_value, self.value(key[:-4] + ".max"))
        elif key.endswith(".max"):
            new_value = max(new_value, self.value(key[:-4] + ".min"))

        new_value = int(round(new_value)) if row.kind == "int" else round(new_value, 4)
        self._set(key, new_value)

    def activate(self, key: str) -> None:
        """Toggles a boolean field or cycles a choice field."""
        row = self.fields[key]
        if row.kind == "bool":
            self._set(key, not self.value(key))
        elif row.kind == "choice":
            current = self.value(key)
            index = WRAP_DIRECTIONS.index(current) if current in WRAP_DIRECTIONS else -1
            self._set(key, WRAP_DIRECTIONS[(index + 1) % len(WRAP_DIRECTIONS)])

    def build(self) -> AnimationConfig:
        """Validates the pending edits into a replacement record."""
        return AnimationConfig.from_dict(copy.deepcopy(self.pending))
