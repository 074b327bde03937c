"""
Achievement evaluation for firecalc.

Purpose
-------
Derives the fixed, ordered catalog of milestone badges from a FIRE
summary. Evaluation is stateless: badges are recomputed on every call and
never persisted.

Catalog
-------
1. First $10K    - net worth >= 10,000
2. High Saver    - savings rate >= 20%
3. Super Saver   - savings rate >= 50%
4. Quarter Way   - net worth / FIRE number >= 25%
5. Halfway Hero  - net worth / FIRE number >= 50%

When the FIRE number is 0 the progress ratio is undefined and the two
progress badges are simply not achieved.

Example
-------
>>> summary = project(FireProfile())
>>> [a.name for a in evaluate_achievements(summary) if a.achieved]
['First $10K', 'High Saver']
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from .constants import (
    FIRST_MILESTONE,
    HALFWAY_RATIO,
    HIGH_SAVER_RATE,
    QUARTER_WAY_RATIO,
    SUPER_SAVER_RATE,
)
from .projection import FireSummary

__all__ = [
    "Achievement",
    "AchievementRule",
    "ACHIEVEMENT_CATALOG",
    "evaluate_achievements",
]


@dataclass(frozen=True)
class Achievement:
    """Evaluated badge."""
    name: str
    achieved: bool
    description: str
    icon: str = ""


@dataclass(frozen=True)
class AchievementRule:
    """
    Catalog entry: a badge and the predicate that unlocks it.

    The predicate receives the summary and returns True when achieved. It
    must not raise for degenerate summaries.
    """
    name: str
    description: str
    icon: str
    predicate: Callable[[FireSummary], bool]

    def evaluate(self, summary: FireSummary) -> Achievement:
        return Achievement(
            name=self.name,
            achieved=bool(self.predicate(summary)),
            description=self.description,
            icon=self.icon,
        )


def _ratio_at_least(threshold: float) -> Callable[[FireSummary], bool]:
    def predicate(summary: FireSummary) -> bool:
        ratio: Optional[float] = summary.progress_ratio
        return ratio is not None and ratio >= threshold
    return predicate


ACHIEVEMENT_CATALOG: tuple[AchievementRule, ...] = (
    AchievementRule(
        name="First $10K",
        description="Saved your first $10,000",
        icon="💰",
        predicate=lambda s: s.current_net_worth >= FIRST_MILESTONE,
    ),
    AchievementRule(
        name="High Saver",
        description="Saving 20%+ of income",
        icon="🎯",
        predicate=lambda s: s.savings_rate >= HIGH_SAVER_RATE,
    ),
    AchievementRule(
        name="Super Saver",
        description="Saving 50%+ of income",
        icon="🚀",
        predicate=lambda s: s.savings_rate >= SUPER_SAVER_RATE,
    ),
    AchievementRule(
        name="Quarter Way",
        description="25% to FIRE goal",
        icon="🏆",
        predicate=_ratio_at_least(QUARTER_WAY_RATIO),
    ),
    AchievementRule(
        name="Halfway Hero",
        description="50% to FIRE goal",
        icon="⭐",
        predicate=_ratio_at_least(HALFWAY_RATIO),
    ),
)


def evaluate_achievements(summary: FireSummary) -> List[Achievement]:
    """Evaluate every catalog entry, in catalog order (always 5 entries)."""
    return [rule.evaluate(summary) for rule in ACHIEVEMENT_CATALOG]
