"""Layout constants and color definitions."""

# Timing
FPS = 60

# Layout dimensions
SCREEN_W = 720
SCREEN_H = 480
BANNER_H = 96
SIDEBAR_W = 200
STATUS_H = 32
PAD = 14
LINE_H = 22

FEATURE_H = SCREEN_H - BANNER_H - STATUS_H - 2 * PAD

# Colors
BG_COLOR = (20, 20, 30)
SIDEBAR_BG = (25, 25, 38)
STATUS_BG = (35, 35, 50)
BORDER = (50, 50, 70)
TEXT_COLOR = (200, 200, 210)
TEXT_DIM = (120, 120, 140)
BANNER_TEXT = (30, 30, 40)
DEFAULT_BANNER = (90, 90, 110)
WARMUP_COLOR = (255, 210, 120)
DONE_COLOR = (140, 220, 140)
ERROR_COLOR = (230, 120, 120)

# Boundary flash
FLASH_MS = 350
FLASH_ALPHA = 140

# Beeps (frequency Hz, length ms)
SAMPLE_RATE = 44100
INTRO_END_BEEP = (660, 120)
INTERVAL_END_BEEP = (880, 260)
