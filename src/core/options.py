"""Per-run audit options."""

from pydantic import BaseModel, Field, model_validator

from config import settings
from core.budgets import PerformanceBudget, get_budget


class ThresholdOverride(BaseModel):
    good: float
    needs_work: float
    max: float
    unit: str | None = None  # keeps the budget's unit when omitted

    @model_validator(mode="after")
    def check_order(self) -> "ThresholdOverride":
        if not 0 < self.good <= self.needs_work <= self.max:
            raise ValueError("thresholds must satisfy 0 < good <= needs_work <= max")
        return self


class AuditOptions(BaseModel):
    """Options consumed once at the start of a run."""

    url: str
    budget: str = Field(default_factory=lambda: settings.default_budget)
    budget_overrides: dict[str, ThresholdOverride] = Field(default_factory=dict)
    screenshots: bool = False
    screenshot_dir: str = Field(default_factory=lambda: settings.screenshot_dir)
    axe_script_path: str | None = Field(default_factory=lambda: settings.axe_script_path)
    output_path: str | None = None

    def resolve_budget(self) -> PerformanceBudget:
        overrides = {
            metric: override.model_dump(exclude_none=True)
            for metric, override in self.budget_overrides.items()
        }
        return get_budget(self.budget, overrides)
