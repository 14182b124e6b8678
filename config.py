"""Server-wide configuration constants for the Rulz engine."""

import os

RULES_DIR = os.environ.get(
    "RULES_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")
)  # Directory holding the SRD JSON tables
DEFAULT_POINT_BUY_BUDGET = int(os.environ.get("POINT_BUY_BUDGET", "28"))
ABILITY_SCORE_MIN = 1            # Configured range for final ability scores
ABILITY_SCORE_MAX = 30
POINT_BUY_MIN = 8                # Domain of the point-buy cost table
POINT_BUY_MAX = 18
DEFAULT_HP_POLICY = os.environ.get("HP_POLICY", "average")  # max, average or rolled
MAX_MONSTERS_PER_ENCOUNTER = int(os.environ.get("MAX_MONSTERS_PER_ENCOUNTER", "10"))
SYNERGY_RANKS = 5                # Ranks in a source skill needed for a synergy
SYNERGY_BONUS = 2
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
