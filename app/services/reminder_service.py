from datetime import datetime

from aiogram.exceptions import TelegramAPIError
from aiogram.utils.markdown import hbold
from aiogram.utils.text_decorations import html_decoration
from loguru import logger

EXPENSE_REMINDER_HOURS = (12, 18, 22)
TASK_REMINDER_HOURS = (7, 8, 9, 13, 18)
DIGEST_LIMIT = 5
CLOSED_STATUSES = ("hoàn thành", "hủy", "done", "cancel")

EXPENSE_REMINDERS = {
    12: (
        "🍱 GIỜ ĂN TRƯA RỒI! ({time})\n\n"
        "📝 Hôm nay ăn gì? Nhớ ghi chi phí ăn uống nhé!\n\n"
        "💡 Ví dụ:\n• \"Cơm văn phòng - 45k - tm\"\n• \"Ship đồ ăn - 80k - tk\""
    ),
    18: (
        "🌆 CUỐI NGÀY LÀM VIỆC! ({time})\n\n"
        "📝 Hôm nay có chi tiêu gì khác không?\n\n"
        "💡 Có thể bạn quên:\n• \"Café chiều - 30k - tm\"\n"
        "• \"Đổ xăng về nhà - 500k - tk\"\n• \"Mua đồ - 200k - tk\""
    ),
    22: (
        "🌙 TRƯỚC KHI NGỦ! ({time})\n\n"
        "📝 Kiểm tra lại chi tiêu hôm nay nhé!\n\n"
        "💡 Đừng quên:\n• \"Ăn tối - 100k - tm\"\n• \"Grab về nhà - 50k - tk\"\n• \"Mua thuốc - 80k - tm\""
    ),
}


def due_reminders(now: datetime) -> tuple[bool, bool]:
    """(expense reminder due, task digest due); both fire on minute 0 only."""
    if now.minute != 0:
        return False, False
    return now.hour in EXPENSE_REMINDER_HOURS, now.hour in TASK_REMINDER_HOURS


def expense_reminder_text(hour: int) -> str | None:
    template = EXPENSE_REMINDERS.get(hour)
    return template.format(time=f"{hour}:00") if template else None


def pending_tasks(tasks: list[dict]) -> list[dict]:
    pending = []
    for task in tasks:
        status = (task.get("status") or "").lower()
        if status and not any(s in status for s in CLOSED_STATUSES):
            pending.append(task)
    return pending


def task_digest_text(tasks: list[dict], hour: int) -> str:
    lines = [f"📋 {hbold('NHẮC NHỞ CÔNG VIỆC')} ({hour}:00)", ""]
    pending = pending_tasks(tasks)
    if not pending:
        lines.append(f"🎉 {hbold('Tuyệt vời!')} Tất cả công việc đã hoàn thành!")
        lines.append("")
        lines.append("💪 Hãy tiếp tục duy trì hiệu suất cao nhé!")
        return "\n".join(lines)

    lines.append(f"📊 {hbold('Tổng quan:')} {len(pending)} công việc đang thực hiện")
    lines.append("")
    for i, task in enumerate(pending[:DIGEST_LIMIT], start=1):
        lines.append(f"{i}. {hbold(task['name'])}")
        if task.get("deadline"):
            lines.append(f"   ⏰ Deadline: {html_decoration.quote(task['deadline'])}")
        lines.append(f"   📊 Trạng thái: {html_decoration.quote(task['status'])}")
        if task.get("progress") not in (None, "", 0, "0"):
            lines.append(f"   📈 Tiến độ: {html_decoration.quote(str(task['progress']))}%")
        if task.get("notes"):
            lines.append(f"   📝 Vướng mắc: {html_decoration.quote(task['notes'])}")
        lines.append("")

    if len(pending) > DIGEST_LIMIT:
        lines.append(f"📋 Và {len(pending) - DIGEST_LIMIT} công việc khác...")
        lines.append("")
    lines.append("💡 Gõ /tasks để xem danh sách đầy đủ")
    return "\n".join(lines)


async def send_due_reminders(bot, sheets, subscribers, now: datetime) -> list[str]:
    """
    Send whatever is due at `now` to every subscribed chat.
    `subscribers` is a SubscriberService; returns a list of actions taken.
    """
    expense_due, task_due = due_reminders(now)
    actions = []

    if expense_due:
        text = expense_reminder_text(now.hour)
        for chat_id in await subscribers.list_chat_ids("expense"):
            await _safe_send(bot, chat_id, text)
        actions.append(f"expense reminder {now.hour}:00")

    if task_due:
        text = task_digest_text(await sheets.list_tasks(), now.hour)
        for chat_id in await subscribers.list_chat_ids("task"):
            await _safe_send(bot, chat_id, text, parse_mode="HTML")
        actions.append(f"task reminder {now.hour}:00")

    return actions


async def _safe_send(bot, chat_id: int, text: str, **kwargs) -> bool:
    # one blocked chat must not stop the others
    try:
        await bot.send_message(chat_id, text, **kwargs)
    except TelegramAPIError:
        logger.exception("Failed to send reminder to {}", chat_id)
        return False
    return True
