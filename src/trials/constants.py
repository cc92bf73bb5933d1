"""Fixed benchmarks, timing windows and copy for the skill trials."""

from __future__ import annotations

# -- Reaction ----------------------------------------------------------
REACTION_TARGET_MS = 280
REACTION_MIN_DELAY_MS = 1200
REACTION_DELAY_JITTER_MS = 1800

# -- Typing ------------------------------------------------------------
TYPING_TARGET_WPM = 46
# Minimum elapsed time used for WPM scoring.
TYPING_MIN_ELAPSED_S = 0.5
CHARS_PER_WORD = 5

PHRASES = (
    "pixel hearts beat fast",
    "love loads at 60 fps",
    "sweet victory unlocked",
    "press start to sparkle",
    "tiny quests big smiles",
)

# -- Memory ------------------------------------------------------------
MEMORY_SEQUENCE_LENGTH = 5
MEMORY_TILE_COUNT = 9
MEMORY_FIRST_REVEAL_MS = 400
MEMORY_REVEAL_STAGGER_MS = 520
MEMORY_REVEAL_DURATION_MS = 360

# -- Aim ---------------------------------------------------------------
AIM_TARGET_HITS = 6
AIM_TIME_LIMIT = 7
# Target placement, in percent of the field.
AIM_X_RANGE = (10.0, 90.0)
AIM_Y_RANGE = (10.0, 70.0)

# -- Timing slider -----------------------------------------------------
TIMING_WINDOW = 0.16
TIMING_SWEEP_MS = 1200
TIMING_TARGET_RANGE = (0.25, 0.75)

# -- Maze --------------------------------------------------------------
MAZE_SIZE = 15
MAZE_TIME_LIMIT = 60
MAZE_TARGET_TIME = 25

# -- Shared ------------------------------------------------------------
COUNTDOWN_TICK_MS = 1000

# -- Run ---------------------------------------------------------------
FINAL_WIN_THRESHOLD = 3

FINAL_MESSAGE_UNLOCKED = (
    "Roses are red, pixels are sweet. You crushed the trials. Be my player two?"
)
FINAL_MESSAGE_LOCKED = "You are close! Sharpen those skills and rerun the trials."
