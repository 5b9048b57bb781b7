import asyncio

from app.core.logging import setup_logging
from app.db.session import init_models

async def run():
    logger = setup_logging()
    await init_models()
    logger.info("✅ Subscriber table ready")

if __name__ == "__main__":
    asyncio.run(run())
