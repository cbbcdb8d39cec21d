# monitoring/base_assessment_engine.py

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from core.config import AssessmentThresholds


class Category(str, Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    MODERATE = "MODERATE"
    BELOW_AVERAGE = "BELOW_AVERAGE"
    POOR = "POOR"


@dataclass(frozen=True)
class CategoryStyle:
    color: str
    icon: str


CATEGORY_STYLES: Dict[Category, CategoryStyle] = {
    Category.EXCELLENT: CategoryStyle(color="#4CAF50", icon="🏆"),
    Category.GOOD: CategoryStyle(color="#8BC34A", icon="✅"),
    Category.MODERATE: CategoryStyle(color="#FFC107", icon="⚠️"),
    Category.BELOW_AVERAGE: CategoryStyle(color="#FF9800", icon="📉"),
    Category.POOR: CategoryStyle(color="#F44336", icon="❌"),
}

# used for "no data yet" and for unknown categories read back from storage
NEUTRAL_STYLE = CategoryStyle(color="#666", icon="📊")

_missing = set(Category) - set(CATEGORY_STYLES)
if _missing:
    raise RuntimeError(f"CATEGORY_STYLES is missing {sorted(c.name for c in _missing)}")


def style_for(category: Optional[str]) -> CategoryStyle:
    """Style for a category or a stored category name; neutral if unknown."""
    try:
        return CATEGORY_STYLES[Category(category)]
    except ValueError:
        return NEUTRAL_STYLE


class BaseAssessmentEngine(ABC):
    """
    Base class for turning frame counts into a qualitative category.
    """

    def __init__(self, thresholds: Optional[AssessmentThresholds] = None):
        self.thresholds = thresholds or AssessmentThresholds()

    @abstractmethod
    def focus_ratio(self, total_frames: int, focused_frames: int) -> Optional[float]:
        """
        Must return a percentage between 0 and 100,
        or None when there is nothing to rate.
        """
        raise NotImplementedError

    def categorize(self, ratio: float) -> Category:
        """
        First match wins, high to low; lower bounds are inclusive.
        """
        if ratio >= self.thresholds.excellent:
            return Category.EXCELLENT
        if ratio >= self.thresholds.good:
            return Category.GOOD
        if ratio >= self.thresholds.moderate:
            return Category.MODERATE
        if ratio >= self.thresholds.below_average:
            return Category.BELOW_AVERAGE
        return Category.POOR
