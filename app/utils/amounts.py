import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

AMOUNT_UNITS = {
    "k": 1_000,
    "nghìn": 1_000,
    "ngàn": 1_000,
    "tr": 1_000_000,
    "triệu": 1_000_000,
    "đ": 1,
    "đồng": 1,
    "d": 1,
    "vnd": 1,
}

QUANTITY_UNITS = (
    "l", "lít", "lit", "kg", "g", "cái", "chiếc", "ly", "chai", "hộp",
    "gói", "túi", "m", "cm", "km", "tô", "phần", "suất", "lần",
)

def _alternation(words) -> str:
    # longest first so "triệu" is tried before "tr" and "kg" before "g"
    return "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))

_AMOUNT_RE = re.compile(
    rf"(?<![\w.,/])(?P<number>\d+(?:[.,]\d+)*)"
    # "5tr/tháng" keeps its unit; a bare "12/" is left to the date patterns
    rf"(?:\s*(?P<unit>{_alternation(AMOUNT_UNITS)})(?!\w)|(?![\w/]))",
    re.IGNORECASE,
)
_QUANTITY_RE = re.compile(
    rf"(?<![\w.,/])(?P<number>\d+(?:[.,]\d+)?)\s*(?P<unit>{_alternation(QUANTITY_UNITS)})(?!\w)",
    re.IGNORECASE,
)
_DIGITS_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class Amount:
    value: int
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class Quantity:
    value: int | float
    unit: str
    start: int
    end: int


def parse_number(raw: str) -> Decimal | None:
    """
    Parse "1.500.000", "45", "1,5" or "1.250,5".
    A separator followed by exactly three digits groups thousands; otherwise
    the last separator is a decimal point.
    """
    parts = re.split(r"[.,]", raw)
    try:
        if len(parts) == 1 or all(len(p) == 3 for p in parts[1:]):
            return Decimal("".join(parts))
        return Decimal("".join(parts[:-1]) + "." + parts[-1])
    except InvalidOperation:
        return None


def find_quantities(text: str) -> list[Quantity]:
    found = []
    for m in _QUANTITY_RE.finditer(text or ""):
        number = parse_number(m.group("number"))
        if number is None or number <= 0:
            continue
        value = int(number) if number == number.to_integral_value() else float(number)
        found.append(Quantity(value=value, unit=m.group("unit").lower(), start=m.start(), end=m.end()))
    return found


def find_amounts(text: str) -> list[Amount]:
    """
    All monetary candidates in `text`, in order of appearance.
    Spans already claimed by a quantity ("70L", "2 ly") are skipped.
    """
    text = text or ""
    taken = [(q.start, q.end) for q in find_quantities(text)]
    found = []
    for m in _AMOUNT_RE.finditer(text):
        if any(m.start() < end and start < m.end() for start, end in taken):
            continue
        number = parse_number(m.group("number"))
        if number is None:
            continue
        unit = (m.group("unit") or "").lower()
        value = (number * AMOUNT_UNITS.get(unit, 1)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        found.append(Amount(value=int(value), start=m.start(), end=m.end(), text=m.group(0)))
    return found


def best_amount(text: str) -> Amount | None:
    """Largest candidate wins; the first one on ties."""
    best = None
    for candidate in find_amounts(text):
        if best is None or candidate.value > best.value:
            best = candidate
    return best


def first_quantity(text: str) -> Quantity | None:
    found = find_quantities(text)
    return found[0] if found else None


def strip_amounts(text: str) -> str:
    """Drop every amount and quantity token, then any stray digits."""
    text = _QUANTITY_RE.sub(" ", text or "")
    text = _AMOUNT_RE.sub(" ", text)
    return _DIGITS_RE.sub(" ", text)
