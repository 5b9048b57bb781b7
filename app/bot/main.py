import asyncio
from aiogram import Bot, Dispatcher
from aiogram.types import BotCommand
from app.core.config import settings
from app.core.logging import setup_logging
from app.core.storage import ReceiptArchive
from app.db.session import SessionLocal, init_models
from app.services.sheet_service import SheetService
from app.bot.handlers.start import router as start_router
from app.bot.handlers.tasks import router as tasks_router
from app.bot.handlers.receipts import router as receipts_router
from app.bot.handlers.expenses import router as expenses_router

logger = setup_logging()

async def db_session_middleware(handler, event, data):
    async with SessionLocal() as session:
        data["db"] = session  # inject AsyncSession into handlers
        return await handler(event, data)

async def on_startup(bot: Bot):
    await bot.set_my_commands([
        BotCommand(command="start", description="Bắt đầu"),
        BotCommand(command="help", description="Hướng dẫn"),
        BotCommand(command="categories", description="Danh mục"),
        BotCommand(command="task", description="Thêm công việc: /task <tên> - <deadline> - <trạng thái>"),
        BotCommand(command="tasks", description="Công việc đang thực hiện"),
        BotCommand(command="subscribe", description="Bật nhắc nhở"),
        BotCommand(command="unsubscribe", description="Tắt nhắc nhở"),
    ])
    logger.info("Bot commands set.")

def build_dispatcher(sheets: SheetService, receipts: ReceiptArchive) -> Dispatcher:
    dp = Dispatcher()
    dp.update.middleware(db_session_middleware)
    dp["sheets"] = sheets
    dp["receipts"] = receipts

    # Routers; tasks before expenses so the task topic wins over free text
    dp.include_router(start_router)
    dp.include_router(tasks_router)
    dp.include_router(receipts_router)
    dp.include_router(expenses_router)
    return dp

async def main():
    if not settings.TELEGRAM_BOT_TOKEN:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not set")

    await init_models()

    bot = Bot(settings.TELEGRAM_BOT_TOKEN)
    dp = build_dispatcher(SheetService(), ReceiptArchive())

    await on_startup(bot)
    logger.info("🚀 Bot starting (long polling)...")
    await dp.start_polling(bot)

if __name__ == "__main__":
    asyncio.run(main())
