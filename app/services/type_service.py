from dataclasses import dataclass

from app.core.keywords import TYPE_RULES, TypeRule
from app.models.records import TransactionType
from app.utils.text import fold, has_word


@dataclass(frozen=True)
class TypeMatch:
    type: TransactionType
    rule: TypeRule | None = None

    @property
    def is_expense(self) -> bool:
        return self.rule is None


class TransactionTypeClassifier:
    """First matching rule wins; no rule means an expense."""

    def __init__(self, rules: tuple[TypeRule, ...] = TYPE_RULES):
        self.rules = tuple(rules)

    def classify(self, text: str) -> TypeMatch:
        lowered = fold(text)
        for rule in self.rules:
            if any(has_word(lowered, kw) for kw in rule.keywords):
                return TypeMatch(type=rule.type, rule=rule)
        return TypeMatch(type=TransactionType.EXPENSE)
