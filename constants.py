# constants.py

"""
Application Constants

This module defines static configuration values for the choreography and its
pygame host. These are not expected to change between runs; tunables that do
change live in config.json.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
"""

# Screen dimensions
WIDTH = 1600  # Pixels
HEIGHT = 900  # Pixels

# Framerate
FPS = 60  # Frames per second

# Colors (RGB)
BACKGROUND = (5, 5, 8)

# Window Title
TITLE = "Particle Choreography"

# Particle field defaults
DEFAULT_PARTICLE_COUNT = 8000
ATTRACTION = 0.05   # Pull towards the target per tick.
FRICTION = 0.85     # Velocity retained per tick.
PROGRESS_SMOOTHING = 0.08  # Fraction of the remaining distance covered per tick.

# Formation identifiers, in narrative order.
GENESIS = 0
EXPANSION = 1
COLLAPSE = 2
FORMATION = 3
INFINITY = 4

FORMATION_TITLES = ("GENESIS", "EXPANSION", "COLLAPSE", "FORMATION", "INFINITY")

# Each stage owns a 20% window of progress and ramps in linearly across it.
STAGE_STARTS = (0.0, 0.2, 0.4, 0.6, 0.8)
STAGE_RAMP = 5.0  # 1 / window width

# Seed ranges: (low, span) so that value = low + random() * span.
SEED_RADIUS = (0.5, 2.0)
SEED_SIZE = (0.5, 1.5)
SEED_ALPHA = (0.3, 0.5)

# Color palette, as hex strings read directly as 0-1 RGB.
BLUE = "#1976d2"
LIGHT_BLUE = "#2196f3"
GOLD = "#ffd700"
PALE_GOLD = "#ffecb3"
SOFT_BLUE = "#90caf9"
PALETTE = (BLUE, LIGHT_BLUE, GOLD, PALE_GOLD, SOFT_BLUE)

# Alpha ramp: alpha = ALPHA_BASE + progress * ALPHA_GAIN
ALPHA_BASE = 0.4
ALPHA_GAIN = 0.3

# Camera
CAMERA_DISTANCE = 20.0  # World units from the origin along +z.
CAMERA_FOV = 50.0       # Vertical field of view in degrees.
POINT_SCALE = 200.0     # Point size numerator, divided by depth.
POINT_OPACITY = 0.6     # Overall opacity applied on top of per-particle alpha.

# Bloom effect settings
BLOOM_RADIUS = 12 # The downscale factor of the glow pass. Larger is more diffuse.
BLOOM_INTENSITY = 90 # The brightness of the glow (0-255).

# Host input
SCROLL_KEY_STEP = 0.01  # Progress per arrow-key press.


def hex_to_rgb(value: str):
    """Converts a '#rrggbb' string to a tuple of floats in [0, 1]."""
    value = value.lstrip('#')
    return tuple(int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
