"""Defaults and drawing constants for net generation.

Lengths are in output units (the same units as the input path after scaling).
"""

# Generation defaults
DEFAULT_DEPTH = 50.0              # prism extrusion depth
DEFAULT_SCALE = 1.0               # applied to input coordinates
DEFAULT_TOLERANCE = 0.5           # curve flattening step
MIN_RETRY_TOLERANCE = 0.1         # floor for the single finer-tolerance retry
DEFAULT_MIN_SEGMENT = 0.5         # panels shorter than this merge into the previous one
DEFAULT_MARGIN = 10.0             # page margin
DEFAULT_UNIT = "mm"               # suffix on document width/height
PAGE_A4 = (210.0, 297.0)          # width, height

# Glue tabs
TAB_DEPTH = 7.0                   # perpendicular extent of every tab
TOOTH_PITCH = TAB_DEPTH           # saw-tooth spacing along curved panel seams
STAR_SPIKE_PITCH = 8.0            # perimeter per star spike
MIN_SPIKES = 12
MAX_SPIKES = 48

# Styles
BASE_FILL = "#e5e5e5"
MIRROR_FILL = "white"
PANEL_FILL = "white"
TAB_FILL = "#e5e5e5"
STROKE = "#000"
STROKE_WIDTH = 0.6
FOLD_STROKE = "#FFF"
FOLD_WIDTH = 0.4
FOLD_DASH = "2,1"

# Info layer
INFO_X = 5.0
INFO_Y0 = 10.0
INFO_LINE_H = 6.0
INFO_FONT_SIZE = 6
