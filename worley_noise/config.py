# worley_noise/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the noise
engine. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC VIEW.
Instead, pass a configuration dictionary to the NoiseEngine instance.
================================================================================
"""

# --- Grid ---
# The physical size (in pixels) of one side of a square grid cell.
RESOLUTION = 6

# --- Feature Points ---
# The number of feature (seed) points. The set is fixed-size once created.
MAX_FEATURES = 15
# Side length, in pixels, of the square marker/hit box drawn for each feature.
FEATURE_RADIUS = 8
# Fraction of the grid by which the feature domain is inflated beyond the
# visible area. 0.2 means features may land up to 10% outside each edge.
OVERFLOW = 0.0
# None draws fresh entropy from the OS on every run.
DEFAULT_SEED = None

# --- Depth ---
# The z plane the grid cells are sampled on. Also feeds the max-distance term.
DEPTH_Z = 0
# The z coordinate assigned to every generated feature point.
FEATURE_DEPTH_Z = 0

# --- Distance-to-Intensity Scale ---
DEFAULT_SCALE = 'logarithmic'

# The map_min offset subtracted from each distance before mapping.
# -1.0 keeps the logarithmic denominator sane near the feature itself.
SCALE_MAP_MIN = {
    'linear': 0.0,
    'logarithmic': -1.0,
    'exponential': 0.0,
}

# Divisor applied to half the grid diagonal to get max_distance. This is a
# visual contrast knob: larger values shrink each feature's bright halo.
# Other profiles seen in the wild use 2 / 4 / 8 / 40.
SCALE_NORMALIZER = {
    'linear': 2.0,
    'logarithmic': 2.0,
    'exponential': 4.0,
}

# --- Colors (RGB) ---
PIXEL_COLOR = (255, 255, 255)
FEATURE_COLOR = (0, 0, 255)
SELECTED_FEATURE_COLOR = (255, 0, 0)
DRAW_FEATURES = True

# --- Redraw Polling ---
# Seconds between dirty-flag checks made by the background poller.
POLL_INTERVAL_S = 0.03
