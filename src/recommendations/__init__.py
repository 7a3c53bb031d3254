"""Lantern recommendations package."""

from recommendations.engine import Recommendation, RecommendationEngine
from recommendations.rules import ALL_RULES, RULES_BY_CODE, Rule

__all__ = [
    "Recommendation",
    "RecommendationEngine",
    "ALL_RULES",
    "RULES_BY_CODE",
    "Rule",
]
