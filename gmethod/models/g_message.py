from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text

from gmethod.database import Base
from gmethod.models.encrypted import EncryptedContentMixin

PERIOD_DAILY = "daily"
PERIOD_WEEKLY = "weekly"
PERIOD_WEEKLY_BLOG = "weekly_blog"
PERIOD_EXPERIENCE = "experience"
PERIOD_NOTICE = "notice"


class GMessage(EncryptedContentMixin, Base):
    """Admin-authored message delivered to users, grouped by period."""

    __tablename__ = "g_messages"

    id = Column(Integer, primary_key=True)
    period = Column(Text, nullable=False, default=PERIOD_DAILY)


class GMessageHistory(Base):
    __tablename__ = "g_message_histories"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    g_message_id = Column(Integer, ForeignKey("g_messages.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
