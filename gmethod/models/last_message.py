from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer

from gmethod.database import Base
from gmethod.models.encrypted import EncryptedContentMixin


class LastMessage(EncryptedContentMixin, Base):
    """Per-user scratch slot holding the last raw input of a multi-step flow."""

    __tablename__ = "last_messages"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
