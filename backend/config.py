"""
config.py
---------
Central configuration for the trip optimizer.
Every tunable is read from an environment variable with a documented default.
A `.env` file next to this module is loaded first; its values take precedence
over variables already set in the shell.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=True)


def _env_float(name: str, default: str) -> float:
    return float(os.getenv(name, default))


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
# Directory for JSONL structured records; empty → records go to the
# "observability" stdlib logger instead of files.
STRUCTURED_LOG_DIR: str = os.getenv("STRUCTURED_LOG_DIR", "")

# ── Transport cost (currency units per km, by travel style) ──────────────────
TRANSPORT_RATE_PER_KM: dict[str, float] = {
    "luxury":     _env_float("RATE_LUXURY",     "0.50"),
    "premium":    _env_float("RATE_PREMIUM",    "0.35"),
    "standard":   _env_float("RATE_STANDARD",   "0.25"),
    "budget":     _env_float("RATE_BUDGET",     "0.15"),
    "backpacker": _env_float("RATE_BACKPACKER", "0.10"),
}
# Cheapest → most expensive; used when proposing style alternatives.
TRAVEL_STYLE_ORDER: list[str] = ["backpacker", "budget", "standard", "premium", "luxury"]

# ── Route optimization ───────────────────────────────────────────────────────
# Weight of the cost matrix in W = normD·(1-w) + normC·w
COST_WEIGHT_STRICT: float = _env_float("COST_WEIGHT_STRICT", "0.7")
COST_WEIGHT_DEFAULT: float = _env_float("COST_WEIGHT_DEFAULT", "0.3")
# 0 → N² passes for N destinations
TWO_OPT_MAX_PASSES: int = int(os.getenv("TWO_OPT_MAX_PASSES", "0"))
TWO_OPT_TIME_BUDGET_MS: float = _env_float("TWO_OPT_TIME_BUDGET_MS", "2000")

# ── Allocation ───────────────────────────────────────────────────────────────
INTEREST_MATCH_BONUS: float = _env_float("INTEREST_MATCH_BONUS", "0.1")
MIN_DESTINATION_WEIGHT: float = _env_float("MIN_DESTINATION_WEIGHT", "0.1")

# ── Day scheduling (all time values in minutes) ──────────────────────────────
DAY_START_MINUTES: int = int(os.getenv("DAY_START_MINUTES", str(9 * 60)))    # 09:00
DAY_END_MINUTES: int = int(os.getenv("DAY_END_MINUTES", str(18 * 60)))       # 18:00
ACTIVITY_BUFFER_MINUTES: int = int(os.getenv("ACTIVITY_BUFFER_MINUTES", "30"))
MIN_USABLE_MINUTES: int = int(os.getenv("MIN_USABLE_MINUTES", "60"))
ACTIVITY_BUDGET_SHARE: float = _env_float("ACTIVITY_BUDGET_SHARE", "0.7")   # rest is dining
MEAL_SPLIT: dict[str, float] = {"breakfast": 0.2, "lunch": 0.3, "dinner": 0.5}

# ── Attraction scoring ───────────────────────────────────────────────────────
INTEREST_SCORE_BONUS: float = _env_float("INTEREST_SCORE_BONUS", "2.0")
ACCESSIBILITY_PENALTY: float = _env_float("ACCESSIBILITY_PENALTY", "5.0")
COST_PENALTY_FACTOR: float = _env_float("COST_PENALTY_FACTOR", "5.0")
COST_PENALTY_THRESHOLD: float = _env_float("COST_PENALTY_THRESHOLD", "0.5")
PRIORITY_MUST_SEE: float = _env_float("PRIORITY_MUST_SEE", "8.0")
PRIORITY_RECOMMENDED: float = _env_float("PRIORITY_RECOMMENDED", "6.0")

# ── Optimization score ───────────────────────────────────────────────────────
# [budget fit, attraction quality, day fill], must sum to 1.0
SCORE_WEIGHTS: tuple[float, float, float] = (
    _env_float("SCORE_WEIGHT_BUDGET",     "0.40"),
    _env_float("SCORE_WEIGHT_ATTRACTION", "0.35"),
    _env_float("SCORE_WEIGHT_DAY_FILL",   "0.25"),
)
ATTRACTION_SCORE_NORMALIZER: float = _env_float("ATTRACTION_SCORE_NORMALIZER", "10.0")
