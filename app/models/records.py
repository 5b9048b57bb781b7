from dataclasses import dataclass
from datetime import date
from enum import Enum

DEFAULT_SUBCATEGORY = "Other"
DEFAULT_TASK_STATUS = "Not started"


class TransactionType(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"


class PaymentMethod(str, Enum):
    TRANSFER = "Transfer"
    CASH = "Cash"


@dataclass(frozen=True)
class TransactionRecord:
    amount: int
    type: TransactionType
    category: str
    subcategory: str
    emoji: str
    payment_method: PaymentMethod
    quantity: float
    description: str
    occurred_on: date

    @property
    def is_valid(self) -> bool:
        # zero amount is the "could not parse" sentinel
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE


@dataclass(frozen=True)
class TaskRecord:
    name: str
    description: str = ""
    deadline: str = ""
    status: str = DEFAULT_TASK_STATUS
    notes: str = ""
    sequence_number: int | None = None  # assigned when the row is appended

    @property
    def is_valid(self) -> bool:
        return bool(self.name)

    @property
    def is_persisted(self) -> bool:
        return self.sequence_number is not None
