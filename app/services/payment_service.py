from app.core.keywords import PAYMENT_RULES, PaymentRule
from app.models.records import PaymentMethod
from app.utils.text import fold, has_word


SHORT_KEYWORD_LEN = 2


def keyword_in(lowered: str, keyword: str) -> bool:
    # "tk", "ck", "tm" must stand alone ("snack" is not a transfer)
    if len(keyword) <= SHORT_KEYWORD_LEN:
        return has_word(lowered, keyword)
    return keyword in lowered


class PaymentMethodResolver:
    def __init__(self, rules: tuple[PaymentRule, ...] = PAYMENT_RULES,
                 default: PaymentMethod = PaymentMethod.CASH):
        self.rules = tuple(rules)
        self.default = default

    def match(self, text: str) -> PaymentMethod | None:
        lowered = fold(text)
        for rule in self.rules:
            if keyword_in(lowered, rule.keyword):
                return rule.method
        return None

    def resolve(self, text: str, segment: str | None = None) -> PaymentMethod:
        """
        Look in the dedicated payment segment first (delimited input), then in
        the whole message. Falls back to cash.
        """
        if segment:
            method = self.match(segment)
            if method:
                return method
        return self.match(text) or self.default
