"""
Configuration & paths for the capital map quiz.

Everything that would otherwise be hardcoded lives here: where the dataset
and the reference map come from, the quiz tuning constants and the canvas
size used by the Streamlit shell. Paths are anchored to this file so the app
survives working directory changes.

Environment overrides:
    MAP_QUIZ_DATA        dataset path or http(s) URL
    MAP_QUIZ_IMAGE       reference map image path
    MAP_QUIZ_LANGUAGE    "en" or "nl"
    MAP_QUIZ_LOG_LEVEL   logging level name (INFO, DEBUG, ...)
"""
import os
import pathlib

# ---------- Paths ----------
BASE_DIR = pathlib.Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"

DATASET_SOURCE = os.environ.get("MAP_QUIZ_DATA", str(DATA_DIR / "quizCapitals.json"))
MAP_IMAGE_PATH = pathlib.Path(os.environ.get("MAP_QUIZ_IMAGE", str(DATA_DIR / "map.svg")))

# ---------- Quiz rules ----------
DEFAULT_LANGUAGE = os.environ.get("MAP_QUIZ_LANGUAGE", "nl")
ROLLING_WINDOW = 20
STREAK_GOAL = 15
MAX_HINT_TIER = 3
REVEAL_DELAY_S = 2.0
# Length of the celebration clip; the banner closes itself after this
CELEBRATION_S = 8.0
CHOICE_COUNT = 3

# ---------- Rendering ----------
CANVAS_WIDTH = 850
CANVAS_HEIGHT = 1020
# Streamlit reruns are expensive, so frames are pumped at a modest rate
FRAME_INTERVAL_S = 0.1

# ---------- Logging ----------
LOG_LEVEL = os.environ.get("MAP_QUIZ_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.environ.get("MAP_QUIZ_LOG_FILE") or None

# ---------- Network ----------
HTTP_TIMEOUT_S = 20
USER_AGENT = "capital-map-quiz/1.0"
