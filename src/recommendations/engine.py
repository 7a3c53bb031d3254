"""Recommendation engine that turns scored issues into actionable fixes."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from recommendations.rules import RULES_BY_CODE, Rule

if TYPE_CHECKING:
    from scoring.metrics import Issue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recommendation:
    code: str
    severity: str
    title: str
    description: str
    fix_suggestion: str
    reference_url: str | None = None

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "severity": self.severity,
            "title": self.title,
            "description": self.description,
            "fix_suggestion": self.fix_suggestion,
            "reference_url": self.reference_url,
        }


class RecommendationEngine:
    """
    Derives one recommendation per issue from the rule catalog.

    The issue decides the severity; the catalog entry for its code supplies
    the title and the fix. Order follows the issue order exactly.
    """

    def __init__(self, rules: dict[str, Rule] | None = None):
        self.rules = rules if rules is not None else RULES_BY_CODE

    def recommend(self, issues: Iterable["Issue"]) -> list[Recommendation]:
        return [self._for_issue(issue) for issue in issues]

    def _for_issue(self, issue: "Issue") -> Recommendation:
        severity = issue.severity.value
        rule = self.rules.get(issue.code)

        if rule is None:
            logger.warning(f"No recommendation rule for issue code {issue.code}")
            return Recommendation(
                code=issue.code,
                severity=severity,
                title=issue.message,
                description=issue.message,
                fix_suggestion="Review this finding and address its cause.",
            )

        return Recommendation(
            code=issue.code,
            severity=severity,
            title=rule.title,
            description=rule.description,
            fix_suggestion=rule.fix_suggestion,
            reference_url=rule.reference_url,
        )
