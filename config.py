# config.py
import os

# Base folders
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
AUDIO_DIR = os.path.join(BASE_DIR, "audio")
PLAYCOUNT_FILE = os.environ.get("BEAR_CROSSING_PLAYCOUNT_FILE",
                                os.path.join(BASE_DIR, "playthroughs.txt"))

# Runtime switches
STRICT_STATE = os.environ.get("BEAR_CROSSING_STRICT", "0") == "1"
DEBUG = os.environ.get("BEAR_CROSSING_DEBUG", "0") == "1"

# Dimensions of the window
CELL_SIZE = 44
BOARD_WIDTH = 10 * CELL_SIZE
BOARD_HEIGHT = 15 * CELL_SIZE
WINDOW_WIDTH = BOARD_WIDTH + 260  # board + competition panel
WINDOW_HEIGHT = BOARD_HEIGHT + 50  # board + score bar

# Grid
GRID_ROWS = 15
GRID_COLS = 10
LANE_ROW_MIN = 1
LANE_ROW_MAX = 13  # inclusive
PLAYER_START = (14, 4)  # (row, col)

# Timing (milliseconds)
MOVE_PERIOD_MS = 400
SPAWN_PERIOD_MS = 1200
SPAWN_MIN = 2
SPAWN_MAX = 5

# Endless scroll: past this score, reaching the top rows moves everything down
SCROLL_SCORE_MIN = 13
SCROLL_ROW_LIMIT = 5
SCROLL_SHIFT = 10

# Milestones, index-aligned with COMPETITIONS
MILESTONES = (10, 20, 30, 40)

# Prior runs needed before every card is shown from the start (None disables)
PERMANENT_REVEAL_AFTER = 3

COMPETITIONS = [
    {"name": "Nasha", "city": "West Lafayette, IN",
     "host": "Purdue", "date": "Jan 31, 2026"},
    {"name": "Blacksburg Ki Badmaash (BKB)", "city": "Blacksburg, VA",
     "host": "Virginia Tech", "date": "Feb 7, 2026"},
    {"name": "River City Raas (RCR)", "city": "Richmond, VA",
     "host": "VCU", "date": "Feb 14, 2026"},
    {"name": "Maryland Masti", "city": "College Park, MD",
     "host": "University of Maryland", "date": "Mar 7, 2026"},
]


def audio_path(name: str) -> str:
    """path to the audio/."""
    return os.path.join(AUDIO_DIR, name)


SOUNDS = {
    "start": "begin.wav",
    "step": "step.wav",
    "reveal": "reveal.wav",
    "gameover": "gameover_impact.wav",
}
