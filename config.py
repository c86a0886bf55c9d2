# config.py
# Application-wide constants for the circuit simulator.

import os
import logging

# --- Environment Overrides ---
# Tick period of the simulation loop in milliseconds (50 ms = 20 Hz)
SIM_TICK_MS = int(os.environ.get("CIRCUIT_SIM_TICK_MS", "50"))
LOG_LEVEL = os.environ.get("CIRCUIT_SIM_LOG_LEVEL", "INFO").upper()
SKETCH_PATH = os.environ.get("CIRCUIT_SIM_SKETCH_PATH", "arduino_sketch.ino")

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# --- Board ---
PIN_MIN = 2
PIN_MAX = 13
LINE_COUNT = 14  # D0..D13, D0/D1 reserved for serial

LED_DEFAULT_PIN = 10
BUTTON_DEFAULT_PIN = 2

# --- Display ---
SCREEN_WIDTH = 1200
SCREEN_HEIGHT = 800
FPS = 60
WINDOW_TITLE = "Circuit Simulator - Arduino Uno"

# Colors
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
GRAY = (200, 200, 200)
LIGHT_GRAY = (230, 230, 230)
DARK_GRAY = (50, 50, 50)
RED = (255, 0, 0)
GREEN = (0, 160, 0)
BLUE = (100, 100, 255)
YELLOW = (255, 255, 0)
GRID_COLOR = (220, 220, 220)
PALETTE_BG = (240, 240, 240)
LED_ON_COLOR = (255, 40, 40)
LED_OFF_COLOR = (120, 30, 30)

# UI Layout
PALETTE_WIDTH = 170
PROPERTIES_WIDTH = 190
TOOLBAR_HEIGHT = 50
CODE_PANEL_HEIGHT = 260
GRID_SIZE = 20


def log_level() -> int:
    """Resolve LOG_LEVEL to a logging constant, falling back to INFO."""
    level = logging.getLevelName(LOG_LEVEL)
    if isinstance(level, int):
        return level
    return logging.INFO
