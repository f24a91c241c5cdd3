from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer

from gmethod.database import Base


class TalkHistory(Base):
    """One visited node. Kept bounded per user, see history_service."""

    __tablename__ = "talk_histories"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    message_id = Column(Integer, ForeignKey("messages.id"), nullable=False)
    reply_pattern_id = Column(Integer, ForeignKey("reply_patterns.id"))
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
