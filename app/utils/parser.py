import re
from dataclasses import dataclass, field
from datetime import date, datetime

from app.core.keywords import TASK_PREFIXES, TypeRule
from app.models.records import (
    DEFAULT_SUBCATEGORY,
    DEFAULT_TASK_STATUS,
    PaymentMethod,
    TaskRecord,
    TransactionRecord,
)
from app.services.category_service import CategoryClassifier
from app.services.payment_service import PaymentMethodResolver
from app.services.type_service import TransactionTypeClassifier
from app.utils.amounts import Amount, Quantity, best_amount, first_quantity, strip_amounts
from app.utils.dates import local_now, resolve_date, strip_date_expressions
from app.utils.text import collapse_spaces, normalize

DELIMITER = " - "
MAX_PAYMENT_SEGMENT_LEN = 10


@dataclass(frozen=True)
class Segments:
    description: str
    fields: tuple[str, ...] = ()

    @property
    def delimited(self) -> bool:
        return bool(self.fields)


@dataclass
class SegmentFields:
    amount: Amount | None = None
    quantity: Quantity | None = None
    payment: str | None = None
    leftovers: list[str] = field(default_factory=list)


def split_segments(text: str) -> Segments:
    """
    "Ăn trưa - 45k - tm" -> description "Ăn trưa", fields ("45k", "tm").
    Anything without at least two non-empty parts is free-form.
    """
    text = normalize(text)
    if DELIMITER in text:
        parts = [p.strip() for p in text.split(DELIMITER)]
        parts = [p for p in parts if p]
        if len(parts) >= 2:
            return Segments(description=parts[0], fields=tuple(parts[1:]))
    return Segments(description=text)


def classify_fields(fields: tuple[str, ...], payments: PaymentMethodResolver) -> SegmentFields:
    out = SegmentFields()
    for segment in fields:
        lexable = strip_date_expressions(segment)
        if not lexable.strip():
            continue  # a bare date like "10/6"; resolved from the whole text

        quantity = first_quantity(lexable)
        if quantity and out.quantity is None:
            out.quantity = quantity

        # quantity spans are never read as amounts
        amount = best_amount(lexable)
        if amount and (out.amount is None or amount.value > out.amount.value):
            out.amount = amount

        if quantity or amount:
            continue
        if len(segment) <= MAX_PAYMENT_SEGMENT_LEN and out.payment is None and payments.match(segment):
            out.payment = segment
        else:
            out.leftovers.append(segment)
    return out


def _remove_span(text: str, start: int, end: int) -> str:
    return collapse_spaces(text[:start] + " " + text[end:])


def _refund_description(description: str, rule: TypeRule) -> str:
    residual = strip_amounts(description)
    for kw in sorted(rule.keywords, key=len, reverse=True):
        residual = re.sub(rf"(?<!\w){re.escape(kw)}(?!\w)", " ", residual, flags=re.IGNORECASE)
    residual = collapse_spaces(residual).strip(" -")
    return f"{rule.category} - {residual}" if residual else rule.category


class MessageParser:
    """
    Turns a chat message into a TransactionRecord or TaskRecord.

    Pure given (text, now): the keyword tables are injected through the
    classifiers and nothing reads the clock unless `now` is omitted.
    """

    def __init__(self, categories: CategoryClassifier | None = None,
                 types: TransactionTypeClassifier | None = None,
                 payments: PaymentMethodResolver | None = None,
                 task_prefixes: tuple[str, ...] = TASK_PREFIXES):
        self.categories = categories or CategoryClassifier()
        self.types = types or TransactionTypeClassifier()
        self.payments = payments or PaymentMethodResolver()
        # longest first so "#task" never shadows a longer overlapping prefix
        self.task_prefixes = tuple(sorted(task_prefixes, key=len, reverse=True))

    # --- transactions ---

    def parse_transaction(self, text: str, now: datetime | date | None = None) -> TransactionRecord:
        text = normalize(text)
        now = now or local_now()
        segments = split_segments(text)

        payment_segment = None
        if segments.delimited:
            fields = classify_fields(segments.fields, self.payments)
            amount, quantity = fields.amount, fields.quantity
            payment_segment = fields.payment
            description = segments.description
            if amount is None:
                # "Tiền nhà 5tr/tháng - tk": the amount sits in the description
                amount = best_amount(strip_date_expressions(description))
                if amount:
                    description = _remove_span(description, amount.start, amount.end)
            if quantity is None:
                quantity = first_quantity(segments.description)
            description = DELIMITER.join([description, *fields.leftovers])
        else:
            amount = best_amount(strip_date_expressions(text))
            quantity = first_quantity(text)
            description = _remove_span(text, amount.start, amount.end) if amount else text

        record = dict(
            amount=amount.value if amount else 0,
            quantity=quantity.value if quantity else 1,
            description=description,
            occurred_on=resolve_date(text, now),
            payment_method=PaymentMethod.CASH,
        )

        kind = self.types.classify(text)
        if kind.is_expense:
            match = self.categories.classify(text)
            record.update(
                category=match.category,
                subcategory=match.subcategory,
                emoji=match.emoji,
                payment_method=self.payments.resolve(text, payment_segment),
            )
        else:
            rule = kind.rule
            if rule.rewrites_description:
                record["description"] = _refund_description(description, rule)
            record.update(category=rule.category, subcategory=DEFAULT_SUBCATEGORY, emoji=rule.emoji)

        return TransactionRecord(type=kind.type, **record)

    # --- tasks ---

    def strip_task_prefix(self, text: str) -> str | None:
        """Remainder after the task prefix, or None when the text has no prefix."""
        text = normalize(text)
        lowered = text.lower()
        for prefix in self.task_prefixes:
            if lowered.startswith(prefix):
                return text[len(prefix):].strip()
        return None

    def is_task(self, text: str) -> bool:
        return self.strip_task_prefix(text) is not None

    def parse_task(self, text: str) -> TaskRecord:
        """
        "Tên - mô tả - deadline - trạng thái - ghi chú" (5 parts),
        "Tên - deadline - trạng thái" (3 parts), or just a name.
        The prefix is optional so the same parser serves the task topic.
        """
        body = self.strip_task_prefix(text)
        if body is None:
            body = normalize(text)
        if not body:
            return TaskRecord(name="")

        parts = [p.strip() for p in body.split(DELIMITER)]
        if len(parts) == 5:
            name, description, deadline, status, notes = parts
        elif len(parts) == 3:
            name, deadline, status = parts
            description = notes = ""
        else:
            name, description, deadline, status, notes = parts[0], "", "", "", ""

        return TaskRecord(
            name=name,
            description=description,
            deadline=deadline,
            status=status or DEFAULT_TASK_STATUS,
            notes=notes,
        )


default_parser = MessageParser()


def parse_transaction(text: str, now: datetime | date | None = None) -> TransactionRecord:
    return default_parser.parse_transaction(text, now)


def parse_task(text: str) -> TaskRecord:
    return default_parser.parse_task(text)


def is_task_message(text: str) -> bool:
    return default_parser.is_task(text)
