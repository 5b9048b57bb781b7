from aiogram import Router
from aiogram.filters import CommandStart, Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from app.bot.keyboards import main_menu_kb
from app.services.category_service import CategoryClassifier
from app.services.subscriber_service import SubscriberService, TOPICS

router = Router(name="start")


@router.message(CommandStart())
async def start_cmd(message: Message):
    await message.answer(
        f"🤖 Chào mừng {message.from_user.first_name}!\n\n"
        "📝 Nhập chi tiêu:\n"
        "• \"Đổ xăng - 500k - tk\"\n"
        "• \"Phở bò 55k tm\"\n\n"
        "💸 Nhập thu nhập:\n"
        "• \"Lương tháng 6 20 triệu\"\n"
        "• \"Hoàn vé máy bay 1.5 triệu\"\n\n"
        "📋 Công việc:\n"
        "• \"task: Họp team - 10/6 - Đang thực hiện\"\n\n"
        "💳 Thanh toán: tk/ck = Chuyển khoản, tm = Tiền mặt",
        reply_markup=main_menu_kb(),
    )


@router.message(Command("help"))
async def help_cmd(message: Message):
    await message.answer(
        "📖 Hướng dẫn:\n\n"
        "🔹 Chi tiêu: \"<mô tả> - <số tiền> - <tk|tm>\" hoặc viết tự do \"Ăn trưa 45k tm\"\n"
        "   Đơn vị: k, nghìn, tr, triệu, đ, vnd · Số lượng: 70l, 2 ly, 1kg...\n"
        "   Ngày: 10/6, ngày 10, tháng 7\n"
        "🔹 Thu nhập: thu, nhận, lương, ứng · Hoàn tiền: hoàn\n"
        "🔹 Gửi ảnh hoá đơn kèm chú thích để lưu hoá đơn\n"
        "🔹 Công việc: \"task: Tên - Mô tả - Deadline - Trạng thái - Ghi chú\"\n\n"
        "Lệnh:\n"
        "• /categories — danh mục\n"
        "• /task <nội dung> — thêm công việc\n"
        "• /tasks — công việc đang làm\n"
        "• /subscribe [all|expense|task] — bật nhắc nhở\n"
        "• /unsubscribe — tắt nhắc nhở\n",
        reply_markup=main_menu_kb(),
    )


@router.message(Command("menu"))
async def menu_cmd(message: Message):
    await message.answer("📋 Menu đã sẵn sàng.", reply_markup=main_menu_kb())


@router.message(Command("categories"))
async def categories_cmd(message: Message):
    lines = ["📋 Danh mục chi tiêu & thu nhập:", "", "💵 Income · ↩️ Refund to account", ""]
    lines.extend(CategoryClassifier().describe())
    await message.answer("\n".join(lines))


@router.message(Command("subscribe"))
async def subscribe_cmd(message: Message, command: CommandObject, db: AsyncSession):
    topics = (command.args or "all").strip().lower()
    if topics not in TOPICS:
        await message.answer("Usage: /subscribe [all|expense|task]")
        return
    svc = SubscriberService(db)
    await svc.add(message.chat.id, message.from_user.username, topics)
    await message.answer(f"🔔 Đã bật nhắc nhở ({topics}).")


@router.message(Command("unsubscribe"))
async def unsubscribe_cmd(message: Message, db: AsyncSession):
    svc = SubscriberService(db)
    removed = await svc.remove(message.chat.id)
    await message.answer("🔕 Đã tắt nhắc nhở." if removed else "Bạn chưa bật nhắc nhở.")
