"""Turns a populated run context into category scores, grades and issues."""

import logging
from dataclasses import dataclass, field, replace

from core import slots
from core.budgets import PerformanceBudget
from core.context import RunContext
from recommendations.engine import Recommendation, RecommendationEngine
from scoring.metrics import METRICS, SEVERITY_RANK, Issue, clamp
from scoring.weights import CATEGORY_WEIGHTS, METRIC_WEIGHTS

logger = logging.getLogger(__name__)

INSTALLABLE_PWA_SCORE = 80.0

GRADE_THRESHOLDS = (
    (90.0, "A"),
    (80.0, "B"),
    (70.0, "C"),
    (60.0, "D"),
)


def grade_for(score: float) -> str:
    """Letter grade for a 0-100 score. The only grading scale in Lantern."""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


@dataclass
class CategoryScore:
    name: str
    score: float
    grade: str
    weight: int
    issues: list[Issue] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    metric_scores: dict[str, float] = field(default_factory=dict)
    missing_metrics: list[str] = field(default_factory=list)
    extras: dict = field(default_factory=dict)


@dataclass
class AuditScores:
    categories: dict[str, CategoryScore]
    overall_score: float
    overall_grade: str

    @property
    def missing_metrics(self) -> list[str]:
        """Every metric scored as missing, as ``category.metric``."""
        return [
            f"{category.name}.{metric}"
            for category in self.categories.values()
            for metric in category.missing_metrics
        ]

    @property
    def issues(self) -> list[Issue]:
        return [issue for category in self.categories.values() for issue in category.issues]


class Aggregator:
    """
    Applies the metric rules and the weight table to a run context.

    Missing data has one policy everywhere: an absent slot, or a rule that
    could not measure, scores 0 and is listed under ``missing_metrics``.
    Remaining weights are never renormalized, so scores stay comparable
    across runs with different failures.

    The aggregator only reads slot values and the run budget; calling it
    twice on the same context gives equal results.
    """

    def __init__(self, recommender: RecommendationEngine | None = None):
        self.recommender = recommender or RecommendationEngine()

    def aggregate(self, ctx: RunContext) -> AuditScores:
        categories = {
            name: self.score_category(name, ctx, ctx.budget) for name in CATEGORY_WEIGHTS
        }

        overall = sum(
            categories[name].score * weight for name, weight in CATEGORY_WEIGHTS.items()
        )
        overall = round(clamp(overall / 100), 1)

        scores = AuditScores(
            categories=categories,
            overall_score=overall,
            overall_grade=grade_for(overall),
        )
        if scores.missing_metrics:
            logger.info(f"Scored {ctx.url} with missing metrics: {', '.join(scores.missing_metrics)}")
        return scores

    def score_category(
        self, name: str, ctx: RunContext, budget: PerformanceBudget
    ) -> CategoryScore:
        weights = METRIC_WEIGHTS[name]
        total = 0.0
        metric_scores = {}
        missing = []
        issues = []

        for position, (metric_name, weight) in enumerate(weights.items()):
            metric = METRICS[name][metric_name]
            value = ctx.get(metric.slot)
            outcome = metric.evaluate(value, budget) if value is not None else None

            if outcome is None:
                missing.append(metric_name)
                metric_scores[metric_name] = 0.0
                continue

            sub_score = round(clamp(outcome.score), 1)
            metric_scores[metric_name] = sub_score
            total += weight * sub_score
            issues.extend(
                (SEVERITY_RANK[issue.severity], position, replace(issue, metric=metric_name))
                for issue in outcome.issues
            )

        # stable sort keeps rule order within one severity and metric
        issues.sort(key=lambda entry: (entry[0], entry[1]))
        ordered = [issue for _, _, issue in issues]

        score = round(clamp(total), 1)
        category = CategoryScore(
            name=name,
            score=score,
            grade=grade_for(score),
            weight=CATEGORY_WEIGHTS[name],
            issues=ordered,
            recommendations=self.recommender.recommend(ordered),
            metric_scores=metric_scores,
            missing_metrics=missing,
        )

        if name == "pwa":
            pwa = ctx.get(slots.PWA)
            category.extras["is_pwa"] = bool(pwa and pwa.is_pwa)
            category.extras["installable"] = score >= INSTALLABLE_PWA_SCORE

        return category
