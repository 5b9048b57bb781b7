from dataclasses import dataclass

from app.core.keywords import (
    CategoryRule,
    DEFAULT_EXPENSE_CATEGORY,
    EXPENSE_CATEGORIES,
    VEHICLE_CATEGORY,
)
from app.models.records import DEFAULT_SUBCATEGORY
from app.utils.text import fold


@dataclass(frozen=True)
class CategoryMatch:
    category: str
    subcategory: str
    emoji: str


class CategoryClassifier:
    """
    Expense categorisation by keyword.

    Vehicle keywords win outright. Otherwise the longest category key found in
    the text picks the category, and the first matching subcategory keyword of
    that category picks the subcategory.
    """

    def __init__(self, categories: tuple[CategoryRule, ...] = EXPENSE_CATEGORIES,
                 vehicle: CategoryRule = VEHICLE_CATEGORY,
                 default: CategoryRule = DEFAULT_EXPENSE_CATEGORY):
        self.categories = tuple(categories)
        self.vehicle = vehicle
        self.default = default

    def classify(self, text: str) -> CategoryMatch:
        lowered = fold(text)

        vehicle = self._match_vehicle(lowered)
        if vehicle:
            return vehicle

        best, best_len = None, 0
        for rule in self.categories:
            for key in rule.keys:
                # strictly longer, so the earlier rule keeps ties
                if key in lowered and len(key) > best_len:
                    best, best_len = rule, len(key)

        if best is None:
            return CategoryMatch(self.default.label, DEFAULT_SUBCATEGORY, self.default.emoji)
        return CategoryMatch(best.label, self._subcategory(best, lowered), best.emoji)

    def _match_vehicle(self, lowered: str) -> CategoryMatch | None:
        keywords = list(self.vehicle.keys)
        for sub in self.vehicle.subcategories:
            keywords.extend(sub.keywords)
        if not any(kw in lowered for kw in keywords):
            return None
        return CategoryMatch(self.vehicle.label, self._subcategory(self.vehicle, lowered), self.vehicle.emoji)

    @staticmethod
    def _subcategory(rule: CategoryRule, lowered: str) -> str:
        for sub in rule.subcategories:
            if any(kw in lowered for kw in sub.keywords):
                return sub.label
        return DEFAULT_SUBCATEGORY

    def describe(self) -> list[str]:
        """One line per category, used by the /categories command."""
        lines = []
        for rule in (self.vehicle, *self.categories):
            subs = ", ".join(s.label for s in rule.subcategories)
            lines.append(f"{rule.emoji} {rule.label}" + (f": {subs}" if subs else ""))
        return lines
