from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.models import ReminderSubscriber

TOPICS = ("all", "expense", "task")

class SubscriberService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, chat_id: int) -> ReminderSubscriber | None:
        q = select(ReminderSubscriber).where(ReminderSubscriber.chat_id == chat_id)
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def add(self, chat_id: int, username: str | None = None, topics: str = "all") -> ReminderSubscriber:
        """Subscribe a chat, or update the topics of an existing subscription."""
        if topics not in TOPICS:
            raise ValueError(f"Unknown reminder topic: {topics}")
        sub = await self.get(chat_id)
        if sub is None:
            sub = ReminderSubscriber(chat_id=chat_id, username=username, topics=topics)
            self.db.add(sub)
        else:
            sub.topics = topics
            if username:
                sub.username = username
        await self.db.commit()
        await self.db.refresh(sub)
        return sub

    async def remove(self, chat_id: int) -> ReminderSubscriber | None:
        sub = await self.get(chat_id)
        if not sub:
            return None
        await self.db.delete(sub)
        await self.db.commit()
        return sub

    async def list_chat_ids(self, topic: str | None = None) -> list[int]:
        q = select(ReminderSubscriber).order_by(ReminderSubscriber.created_at_utc)
        if topic:
            q = q.where(ReminderSubscriber.topics.in_(("all", topic)))
        res = await self.db.execute(q)
        return [s.chat_id for s in res.scalars().all()]
