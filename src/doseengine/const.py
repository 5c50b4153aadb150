# src/doseengine/const.py
"""Fixed parameters of the modelled compound and of the tracker around it."""

# All time is in DAYS, all amounts in mg.
HALF_LIFE_DAYS = 5.0
BIOAVAILABILITY = 0.8
PEAK_DELAY_DAYS = 1.0

# Simulation window extends this far past the last dose, whatever its decay.
TAIL_DAYS = 28

WEEK_LENGTH_DAYS = 7
ROUND_DIGITS = 2

# Form limit of the entry panel; the engine itself accepts any number of doses.
MAX_DOSE_ENTRIES = 15

DEFAULT_STORAGE_KEY = "zepboundDoses"
