"""Core constants used across Lexidetect modules.

This module centralizes scoring parameters and configuration defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

UNDETERMINED_LANGUAGE_CODE = "und"
MIN_NGRAM_LENGTH = 1
MAX_NGRAM_LENGTH = 3
DEFAULT_MAX_TEXT_CHARS = 3000
DEFAULT_PROFILE_ROOT = Path(".lexidetect") / "profiles"
PROFILE_FILE_SUFFIX = ".json"
ISO_CODE_SEPARATOR = ","

# Additive smoothing shared by every language in a corpus table.
SMOOTHING_ALPHA = 0.01
SMOOTHING_VOCABULARY_SIZE = 1000

# Randomized-trial scoring.
ITERATION_LIMIT = 1000
MIN_TRIALS = 7
CONV_THRESHOLD = 1e-4
ALPHA_DEFAULT = 0.5
ALPHA_WIDTH = 0.05
BASE_FREQUENCY = 10000
RENORMALIZE_INTERVAL = 5
TRIAL_CONVERGENCE_THRESHOLD = 0.99999
PROBABILITY_THRESHOLD = 0.1
DEFAULT_MIN_FEATURE_COUNT = 1
CHINESE_LANGUAGE_CODES = ("zh-cn", "zh-tw")
JAPANESE_LANGUAGE_CODE = "ja"

HASH_ALGORITHM = "sha256"
SETTINGS_FILE_VERSION = 1
DEFAULT_ACCURACY_TOLERANCE = 1e-6
