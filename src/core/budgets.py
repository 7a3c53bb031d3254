"""Performance budget templates."""

import math
from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class BudgetThreshold:
    """Three-band threshold for one timing metric."""

    good: float
    needs_work: float
    max: float
    unit: str = "ms"

    def __post_init__(self):
        if not 0 < self.good <= self.needs_work <= self.max:
            raise ValueError(
                f"Invalid threshold {self.good}/{self.needs_work}/{self.max}: "
                "expected 0 < good <= needs_work <= max"
            )

    def score(self, value: float) -> float:
        """
        Score a measured value on a 0-100 scale.

        - up to ``good``: 100
        - ``good`` to ``needs_work``: linear 100 -> 70
        - ``needs_work`` to ``max``: linear 70 -> 30
        - beyond ``max``: exponential decay below 30
        """
        if value <= self.good:
            return 100.0
        if value <= self.needs_work:
            position = (value - self.good) / (self.needs_work - self.good)
            return 100.0 - position * 30.0
        if value <= self.max:
            position = (value - self.needs_work) / (self.max - self.needs_work)
            return 70.0 - position * 40.0

        excess = (value - self.max) / self.max
        return max(0.0, min(30.0, 30.0 * math.exp(-excess)))

    def to_dict(self) -> dict:
        return {
            "good": self.good,
            "needs_work": self.needs_work,
            "max": self.max,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class PerformanceBudget:
    name: str
    description: str
    thresholds: dict[str, BudgetThreshold] = field(default_factory=dict)

    def with_overrides(self, overrides: dict[str, dict]) -> "PerformanceBudget":
        """Return a copy with some thresholds replaced by caller values."""
        if not overrides:
            return self

        thresholds = dict(self.thresholds)
        for metric, values in overrides.items():
            values = {k: v for k, v in values.items() if v is not None}
            base = thresholds.get(metric)
            if base is None:
                thresholds[metric] = BudgetThreshold(**values)
            else:
                thresholds[metric] = replace(base, **values)

        return replace(self, name=f"{self.name}+custom", thresholds=thresholds)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "thresholds": {k: v.to_dict() for k, v in self.thresholds.items()},
        }


DEFAULT_BUDGET = PerformanceBudget(
    name="default",
    description="Google Web Vitals standard, the baseline for all websites",
    thresholds={
        "lcp": BudgetThreshold(good=2500, needs_work=4000, max=6000),
        "fcp": BudgetThreshold(good=1800, needs_work=3000, max=4500),
        "cls": BudgetThreshold(good=0.1, needs_work=0.25, max=0.5, unit="score"),
        "ttfb": BudgetThreshold(good=800, needs_work=1800, max=3000),
    },
)

ECOMMERCE_BUDGET = PerformanceBudget(
    name="ecommerce",
    description="Strict thresholds for shopping experiences and conversion",
    thresholds={
        "lcp": BudgetThreshold(good=2000, needs_work=3000, max=4000),
        "fcp": BudgetThreshold(good=1500, needs_work=2500, max=3500),
        "cls": BudgetThreshold(good=0.05, needs_work=0.1, max=0.25, unit="score"),
        "ttfb": BudgetThreshold(good=600, needs_work=1200, max=2000),
    },
)

CORPORATE_BUDGET = PerformanceBudget(
    name="corporate",
    description="Balanced thresholds for business websites and professional services",
    thresholds={
        "lcp": BudgetThreshold(good=2500, needs_work=4000, max=5500),
        "fcp": BudgetThreshold(good=1800, needs_work=3000, max=4000),
        "cls": BudgetThreshold(good=0.1, needs_work=0.25, max=0.4, unit="score"),
        "ttfb": BudgetThreshold(good=800, needs_work=1800, max=2500),
    },
)

BLOG_BUDGET = PerformanceBudget(
    name="blog",
    description="Relaxed thresholds for content and reading experiences",
    thresholds={
        "lcp": BudgetThreshold(good=3000, needs_work=4500, max=6000),
        "fcp": BudgetThreshold(good=2000, needs_work=3500, max=5000),
        "cls": BudgetThreshold(good=0.15, needs_work=0.3, max=0.5, unit="score"),
        "ttfb": BudgetThreshold(good=1000, needs_work=2000, max=3000),
    },
)

BUDGETS = {
    budget.name: budget
    for budget in (DEFAULT_BUDGET, ECOMMERCE_BUDGET, CORPORATE_BUDGET, BLOG_BUDGET)
}


def get_budget(name: str, overrides: dict[str, dict] | None = None) -> PerformanceBudget:
    """Look up a named budget, optionally overriding individual thresholds."""
    try:
        budget = BUDGETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown performance budget: {name}. Must be one of: {', '.join(BUDGETS)}"
        ) from None

    return budget.with_overrides(overrides or {})
