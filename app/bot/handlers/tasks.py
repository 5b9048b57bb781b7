from aiogram import Router, F
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from app.core.config import settings
from app.models.records import TaskRecord
from app.services.reminder_service import pending_tasks
from app.services.sheet_service import SheetService
from app.utils.dates import local_now
from app.utils.parser import parse_task

router = Router(name="tasks")

TASKS_LIST_LIMIT = 20

TASK_USAGE = (
    "❌ Không nhận diện được tên công việc.\n\n"
    "💡 Ví dụ:\n"
    "• \"task: Họp team - 10/6 - Đang thực hiện\"\n"
    "• \"task: Báo cáo - Số liệu Q2 - 15/6 - Chưa bắt đầu - Chờ kế toán\""
)


def in_task_topic(message: Message) -> bool:
    return (
        settings.TASK_TOPIC_ID is not None
        and bool(message.is_topic_message)
        and message.message_thread_id == settings.TASK_TOPIC_ID
    )


def format_task(task: TaskRecord) -> str:
    lines = [f"📋 Công việc #{task.sequence_number}: {task.name}"]
    if task.description:
        lines.append(f"📝 {task.description}")
    if task.deadline:
        lines.append(f"⏰ Deadline: {task.deadline}")
    lines.append(f"📊 Trạng thái: {task.status}")
    if task.notes:
        lines.append(f"🗒 {task.notes}")
    return "\n".join(lines)


async def save_task(message: Message, sheets: SheetService, task: TaskRecord):
    if not task.is_valid:
        await message.answer(TASK_USAGE)
        return
    persisted = await sheets.append_task(task, now=local_now())
    if persisted is None:
        await message.answer("❌ Có lỗi khi lưu công việc. Vui lòng thử lại.")
        return
    await message.answer("✅ Đã lưu!\n\n" + format_task(persisted))


@router.message(Command("task"))
async def task_cmd(message: Message, command: CommandObject, sheets: SheetService):
    """
    Usage:
      /task Họp team - 10/6 - Đang thực hiện
    """
    await save_task(message, sheets, parse_task(command.args or ""))


@router.message(F.text & ~F.text.startswith("/"), in_task_topic)
async def task_topic_message(message: Message, sheets: SheetService):
    await save_task(message, sheets, parse_task(message.text))


@router.message(Command("tasks"))
async def tasks_cmd(message: Message, sheets: SheetService):
    pending = pending_tasks(await sheets.list_tasks())
    if not pending:
        await message.answer("🎉 Không có công việc nào đang chờ.")
        return
    lines = [f"📋 {len(pending)} công việc đang thực hiện:", ""]
    for i, task in enumerate(pending[:TASKS_LIST_LIMIT], start=1):
        line = f"{i}. {task['name']} · {task['status']}"
        if task.get("deadline"):
            line += f" · ⏰ {task['deadline']}"
        lines.append(line)
    if len(pending) > TASKS_LIST_LIMIT:
        lines.append(f"… và {len(pending) - TASKS_LIST_LIMIT} công việc khác")
    await message.answer("\n".join(lines))
