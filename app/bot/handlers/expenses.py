from aiogram import Router, F
from aiogram.types import Message

from app.bot.handlers.tasks import save_task
from app.models.records import PaymentMethod, TransactionRecord
from app.services.sheet_service import SheetService
from app.utils.dates import format_vi_date, local_now
from app.utils.parser import is_task_message, parse_task, parse_transaction
from app.utils.text import fmt_vnd

router = Router(name="expenses")

PAYMENT_LABELS = {
    PaymentMethod.TRANSFER: "Chuyển khoản",
    PaymentMethod.CASH: "Tiền mặt",
}

AMOUNT_USAGE = (
    "❌ Không nhận diện được số tiền.\n\n"
    "💡 Ví dụ: \"Đổ xăng - 500k - tk\", \"Ăn trưa 45k tm\", \"Lương 20 triệu\""
)
SAVING = "⏳ Đang lưu..."
SAVED = "✅ Đã lưu thành công!"
SAVE_FAILED = "❌ Có lỗi khi lưu. Vui lòng thử lại."


def sender_name(message: Message) -> str:
    user = message.from_user
    return user.username or user.first_name or str(user.id)


def format_confirmation(record: TransactionRecord) -> str:
    if record.is_expense:
        lines = [
            "✅ Đã phân tích (CHI TIÊU):",
            "",
            f"{record.emoji} {record.category} · {record.subcategory}",
            f"💰 {fmt_vnd(record.amount)}",
            f"💳 {PAYMENT_LABELS[record.payment_method]}",
        ]
        if record.quantity != 1:
            lines.append(f"🔢 Số lượng: {record.quantity}")
    else:
        lines = [
            "✅ Đã phân tích (THU NHẬP):",
            "",
            f"{record.emoji} {record.category}",
            f"💰 {fmt_vnd(record.amount)}",
        ]
    lines.append(f"📅 {format_vi_date(record.occurred_on)}")
    if record.description:
        lines.append(f"📝 {record.description}")
    return "\n".join(lines)


async def save_transaction(message: Message, sheets: SheetService, record: TransactionRecord,
                           receipt_url: str | None = None, note: str | None = None):
    confirm = format_confirmation(record)
    if note:
        confirm += f"\n{note}"
    loading = await message.answer(f"{confirm}\n\n{SAVING}")
    saved = await sheets.append_transaction(
        record,
        username=sender_name(message),
        user_id=message.from_user.id,
        receipt_url=receipt_url,
    )
    await loading.edit_text(f"{confirm}\n\n{SAVED}" if saved else SAVE_FAILED)


@router.message(F.text & ~F.text.startswith("/"))
async def handle_text(message: Message, sheets: SheetService):
    """
    Plain text: "Ăn trưa - 45k - tm", "Lương tháng 6 20 triệu" or "task: ...".
    """
    text = message.text or ""
    if is_task_message(text):
        await save_task(message, sheets, parse_task(text))
        return

    record = parse_transaction(text, now=local_now())
    if not record.is_valid:
        await message.answer(AMOUNT_USAGE)
        return

    await save_transaction(message, sheets, record)
