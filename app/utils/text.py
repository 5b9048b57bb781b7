import re
import unicodedata

_SPACES_RE = re.compile(r"\s{2,}")

def slugify(value: str) -> str:
    """
    Very small, dependency-free slugify. Lowercase, strip accents, keep alnum and hyphens.
    """
    value = value.replace("đ", "d").replace("Đ", "D")
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = value.lower().strip()
    value = re.sub(r"[^a-z0-9]+", "-", value)
    value = re.sub(r"-{2,}", "-", value).strip("-")
    return value or "other"

def normalize(text: str | None) -> str:
    """
    NFC-normalize so precomposed and combining Vietnamese diacritics compare equal.
    """
    return unicodedata.normalize("NFC", text or "").strip()

def fold(text: str | None) -> str:
    return normalize(text).lower()

def collapse_spaces(text: str) -> str:
    return _SPACES_RE.sub(" ", text).strip()

def has_word(text: str, keyword: str) -> bool:
    """True if `keyword` occurs in `text` not glued to other letters or digits."""
    return re.search(rf"(?<!\w){re.escape(keyword)}(?!\w)", text) is not None

def fmt_vnd(amount: int) -> str:
    """45000 -> "45.000₫" (vi-VN grouping)."""
    return f"{amount:,}".replace(",", ".") + "₫"
