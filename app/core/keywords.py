"""
Built-in Vietnamese keyword tables.

All tables are tuples of frozen dataclasses; classifiers receive them at
construction time, so alternative tables can be injected in tests.
Keywords are lowercase NFC strings. Order matters wherever a table is scanned
first-match-wins.
"""
from dataclasses import dataclass

from app.models.records import PaymentMethod, TransactionType


@dataclass(frozen=True)
class SubcategoryRule:
    label: str
    keywords: tuple[str, ...]


@dataclass(frozen=True)
class CategoryRule:
    label: str
    emoji: str
    keys: tuple[str, ...]
    subcategories: tuple[SubcategoryRule, ...] = ()


@dataclass(frozen=True)
class TypeRule:
    name: str
    keywords: tuple[str, ...]
    type: TransactionType
    category: str
    emoji: str
    rewrites_description: bool = False


@dataclass(frozen=True)
class PaymentRule:
    keyword: str
    method: PaymentMethod


DEFAULT_EXPENSE_CATEGORY = CategoryRule(label="Other expense", emoji="💰", keys=())

# Vehicle keywords override every other category. Subcategories are listed in
# priority order: fuel, car wash, toll tag, repair, parking.
VEHICLE_CATEGORY = CategoryRule(
    label="Car expenses",
    emoji="🚗",
    keys=("chi phí xe", "ô tô", "oto", "xe hơi"),
    subcategories=(
        SubcategoryRule("Fuel", ("đổ xăng", "xăng", "nhiên liệu", "dầu diesel")),
        SubcategoryRule("Car wash", ("rửa xe", "vệ sinh xe")),
        SubcategoryRule("Toll tag", ("vetc", "epass", "phí không dừng", "phí cầu đường")),
        SubcategoryRule("Repair", ("sửa xe", "sửa chữa", "bảo dưỡng", "thay nhớt")),
        SubcategoryRule("Parking", ("vé đỗ xe", "đỗ xe", "gửi xe", "bãi xe")),
    ),
)

EXPENSE_CATEGORIES: tuple[CategoryRule, ...] = (
    CategoryRule(
        label="Restaurant",
        emoji="🍽️",
        keys=("nhà hàng", "quán ăn"),
        subcategories=(
            SubcategoryRule("Breakfast", ("ăn sáng",)),
            SubcategoryRule("Lunch", ("ăn trưa",)),
            SubcategoryRule("Dinner", ("ăn tối",)),
            SubcategoryRule("Café", ("café", "cafe", "cà phê")),
        ),
    ),
    CategoryRule(
        label="Breakfast",
        emoji="🍳",
        keys=("ăn sáng", "bữa sáng"),
        subcategories=(
            SubcategoryRule("Phở", ("phở",)),
            SubcategoryRule("Bánh mì", ("bánh mì",)),
            SubcategoryRule("Rice", ("cơm",)),
            SubcategoryRule("Noodles", ("bún", "mì")),
        ),
    ),
    CategoryRule(
        label="Lunch",
        emoji="🍱",
        keys=("ăn trưa", "bữa trưa", "cơm trưa"),
        subcategories=(
            SubcategoryRule("Rice", ("cơm",)),
            SubcategoryRule("Noodles", ("bún", "mì")),
            SubcategoryRule("Phở", ("phở",)),
        ),
    ),
    CategoryRule(
        label="Dinner",
        emoji="🍽️",
        keys=("ăn tối", "bữa tối"),
        subcategories=(
            SubcategoryRule("Rice", ("cơm",)),
            SubcategoryRule("Hotpot", ("lẩu",)),
            SubcategoryRule("Grill", ("nướng",)),
        ),
    ),
    CategoryRule(
        label="Café",
        emoji="☕",
        keys=("café", "cafe", "cà phê"),
        subcategories=(
            SubcategoryRule("Coffee", ("cà phê", "café", "cafe")),
            SubcategoryRule("Tea", ("trà",)),
            SubcategoryRule("Drinks", ("nước",)),
        ),
    ),
    CategoryRule(
        label="Delivery",
        emoji="📦",
        keys=("giao đồ", "grab food"),
        subcategories=(
            SubcategoryRule("Food delivery", ("grab food", "đồ ăn")),
            SubcategoryRule("Parcels", ("giao đồ", "giao hàng")),
        ),
    ),
    CategoryRule(
        label="Shipping",
        emoji="📮",
        keys=("ship đồ", "phí ship"),
        subcategories=(
            SubcategoryRule("Shipping fee", ("phí ship",)),
            SubcategoryRule("Delivery", ("giao hàng",)),
        ),
    ),
    CategoryRule(
        label="Shopping",
        emoji="🛒",
        keys=("mua đồ", "mua sắm"),
        subcategories=(
            SubcategoryRule("Clothes", ("quần áo",)),
            SubcategoryRule("Shoes", ("giày", "dép")),
            SubcategoryRule("Cosmetics", ("mỹ phẩm",)),
        ),
    ),
    CategoryRule(
        label="Services",
        emoji="🔧",
        keys=("dịch vụ", "cắt tóc", "massage", "spa"),
        subcategories=(
            SubcategoryRule("Haircut", ("cắt tóc",)),
            SubcategoryRule("Massage", ("massage",)),
            SubcategoryRule("Spa", ("spa",)),
        ),
    ),
    CategoryRule(
        label="Other expense",
        emoji="💰",
        keys=("chi phí khác", "linh tinh"),
        subcategories=(
            SubcategoryRule("Miscellaneous", ("linh tinh",)),
        ),
    ),
)

REFUND_CATEGORY = "Refund to account"
INCOME_CATEGORY = "Income"

# Checked in order: refund beats income, income beats every expense category.
TYPE_RULES: tuple[TypeRule, ...] = (
    TypeRule(
        name="refund",
        keywords=("hoàn tiền", "hoàn"),
        type=TransactionType.INCOME,
        category=REFUND_CATEGORY,
        emoji="↩️",
        rewrites_description=True,
    ),
    TypeRule(
        name="income",
        keywords=("thu", "nhận", "lương", "ứng"),
        type=TransactionType.INCOME,
        category=INCOME_CATEGORY,
        emoji="💵",
    ),
)

PAYMENT_RULES: tuple[PaymentRule, ...] = (
    PaymentRule("tk", PaymentMethod.TRANSFER),
    PaymentRule("ck", PaymentMethod.TRANSFER),
    PaymentRule("chuyển khoản", PaymentMethod.TRANSFER),
    PaymentRule("banking", PaymentMethod.TRANSFER),
    PaymentRule("tm", PaymentMethod.CASH),
    PaymentRule("tiền mặt", PaymentMethod.CASH),
    PaymentRule("cash", PaymentMethod.CASH),
)

TASK_PREFIXES: tuple[str, ...] = (
    "công việc:",
    "nhiệm vụ:",
    "task:",
    "todo:",
    "việc:",
    "cv:",
    "#task",
    "#cv",
    "/task",
)
