# constants.py
"""
Application-level constants.

These values are static and do not change between animation runs.
They are fundamental to the application's framework, such as rendering
properties, default window sizes, or effect settings that are not
part of the tunable animation configuration.
"""

# Visualization settings
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a fixed-size window (1500x800 plus the UI panel).
FULLSCREEN = False
WINDOW_WIDTH = 1500
WINDOW_HEIGHT = 800
UI_PANEL_WIDTH = 300
FPS = 60
BACKGROUND_COLOR = (24, 24, 24) # Dark Gray, shows through a transparent animation background

# Keyword accepted in place of a colour for a fully transparent background.
TRANSPARENT = "transparent"

# --- Templates ---
# Side length of procedurally generated "shape:" templates, in pixels.
SHAPE_TEMPLATE_RESOLUTION = 128
# Worker threads used to load templates before the animation starts.
TEMPLATE_LOADER_WORKERS = 4

# --- Effects ---
# Drop shadow colour (RGBA). Alpha 128 is roughly 50% opacity.
SHADOW_COLOR = (0, 0, 0, 128)
# Shadow blur per unit of size multiplier.
SHADOW_BLUR_PER_SIZE = 5
# A gaussian kernel extends this many standard deviations either side.
BLUR_KERNEL_SIGMAS = 3
# Blur amounts below this are drawn unblurred.
MIN_BLUR_SIGMA = 0.05
# Upper bound on prepared sprite images kept between frames.
RENDER_CACHE_SIZE = 512

# --- UI ---
UI_BACKGROUND_ALPHA = 100
UI_ROW_HEIGHT = 26


# A curated list of vibrant colours used for the default procedural
# templates when the config file does not list any images.
VIBRANT_COLORS = [
    (255, 0, 102),   # Hot Pink
    (0, 255, 255),   # Cyan
    (255, 204, 0),   # Gold
    (0, 255, 102),   # Bright Green
    (204, 0, 255),   # Purple
    (255, 102, 0)    # Orange
]
