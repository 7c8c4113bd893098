"""
Token prices for every spend in the marketplace.

Single source of truth for promotion tiers and per-action token costs.
"""
from typing import Dict, List, Optional

# Job promotion tiers: cost in tokens, visibility in days
JOB_PROMOTION_PLANS: Dict[str, Dict[str, int]] = {
    "Silver": {"cost": 5, "days": 3},
    "Gold": {"cost": 10, "days": 7},
    "Premium": {"cost": 20, "days": 20},
}

# Listing rank for active promotions (lower ranks first)
PROMOTION_RANK: Dict[str, int] = {
    "Premium": 1,
    "Gold": 2,
    "Silver": 3,
}
UNPROMOTED_RANK = 4

# Applicant profile promotion extends an active promotion instead of rejecting
PROFILE_PROMOTION_PLANS: Dict[str, Dict[str, int]] = {
    "silver": {"cost": 3, "days": 3},
    "gold": {"cost": 5, "days": 10},
    "premium": {"cost": 10, "days": 30},
}

PROJECT_PROMOTION_COST = 5
PROJECT_PROMOTION_DAYS = 7
PROJECT_PROMOTION_TAG = "Premium"

APPLICATION_COST = 3

MIN_TOKEN_PURCHASE = 1
MAX_TOKEN_PURCHASE = 10_000


def normalize_job_plan(plan: Optional[str]) -> Optional[str]:
    """Return the canonical job plan name ("Silver", "Gold", "Premium") or None."""
    if not plan:
        return None
    for name in JOB_PROMOTION_PLANS:
        if name.lower() == plan.strip().lower():
            return name
    return None


def get_profile_plan(plan: str) -> Optional[Dict[str, int]]:
    return PROFILE_PROMOTION_PLANS.get((plan or "").strip().lower())


def job_plan_names() -> List[str]:
    return list(JOB_PROMOTION_PLANS.keys())


def promotion_rank(tag: Optional[str]) -> int:
    """Listing rank for a promotion tag; anything unknown ranks last."""
    return PROMOTION_RANK.get(tag, UNPROMOTED_RANK)
