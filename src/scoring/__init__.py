"""Lantern scoring package."""

from scoring.aggregator import (
    INSTALLABLE_PWA_SCORE,
    Aggregator,
    AuditScores,
    CategoryScore,
    grade_for,
)
from scoring.metrics import Issue, Severity
from scoring.weights import CATEGORY_WEIGHTS, METRIC_WEIGHTS

__all__ = [
    "INSTALLABLE_PWA_SCORE",
    "Aggregator",
    "AuditScores",
    "CategoryScore",
    "grade_for",
    "Issue",
    "Severity",
    "CATEGORY_WEIGHTS",
    "METRIC_WEIGHTS",
]
