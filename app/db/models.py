from sqlalchemy import String, DateTime, BigInteger, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
import uuid
from app.db.base import Base

class ReminderSubscriber(Base):
    __tablename__ = "reminder_subscribers"
    __table_args__ = (UniqueConstraint("chat_id", name="uq_reminder_subscribers_chat"),)

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    chat_id: Mapped[int] = mapped_column(BigInteger, index=True)
    username: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # which digests this chat gets: "expense", "task" or "all"
    topics: Mapped[str] = mapped_column(String(20), default="all")
    created_at_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
