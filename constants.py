# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as grid and
window geometry, rendering properties, or core integration settings that
are not part of the experimental configuration.
"""

# Grid geometry. The simulation area is GRID_WIDTH x GRID_HEIGHT cells,
# and flow-field arrows are drawn once per cell.
GRID_WIDTH = 120
GRID_HEIGHT = 80
CELL_WIDTH = 10
CELL_HEIGHT = 10
PADDING = 0

WINDOW_WIDTH = GRID_WIDTH * CELL_WIDTH + PADDING * 2
WINDOW_HEIGHT = GRID_HEIGHT * CELL_HEIGHT + PADDING * 2

# Visualization settings
UI_PANEL_WIDTH = 300
FPS = 60
BACKGROUND_COLOR = (0, 0, 0) # Black
FLOWFIELD_COLOR = (64, 64, 64) # Dark Gray
PARTICLE_COLOR = (221, 160, 221) # Plum
UI_BACKGROUND_ALPHA = 100

# Length of a flow-field arrow in pixels.
ARROW_LENGTH = 8.0
ARROW_HEAD_LENGTH = 2.5

# --- Integration ---
# Elapsed seconds are multiplied by this so that speed sliders map to
# roughly "pixels per hundredth of a second".
TIME_MULTIPLIER = 100.0
# Longest frame the integrator will accept. Slower frames are clamped,
# which keeps the per-tick displacement under the domain size.
MAX_ELAPSED_SECONDS = 0.1
MAX_DT = MAX_ELAPSED_SECONDS * TIME_MULTIPLIER
# Per-tick cap on the flow contribution in acceleration mode.
FLOW_ACCELERATION_CAP = 0.04

# --- Noise ---
# Span of the sampling window in noise lattice units, i.e. [-3, 3].
NOISE_WINDOW_SPAN = 6
# Range of the per-axis coordinate offsets drawn from the seed.
NOISE_OFFSET_RANGE = 256.0
