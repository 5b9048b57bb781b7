"""
Cron entry point: run every hour on minute 0 (Asia/Ho_Chi_Minh), e.g.

    0 * * * *  cd /srv/ledgerbot && python -m scripts.send_reminders
"""
import asyncio
from aiogram import Bot
from app.core.config import settings
from app.core.logging import setup_logging
from app.db.session import SessionLocal, init_models
from app.services.reminder_service import send_due_reminders
from app.services.sheet_service import SheetService
from app.services.subscriber_service import SubscriberService
from app.utils.dates import local_now

logger = setup_logging()

async def run():
    await init_models()
    now = local_now()
    bot = Bot(settings.TELEGRAM_BOT_TOKEN)
    try:
        async with SessionLocal() as session:
            actions = await send_due_reminders(bot, SheetService(), SubscriberService(session), now)
    finally:
        await bot.session.close()

    if actions:
        logger.info("Reminders sent at {:%H:%M}: {}", now, ", ".join(actions))
    else:
        logger.info("No reminders scheduled for {:%H:%M}", now)

if __name__ == "__main__":
    asyncio.run(run())
