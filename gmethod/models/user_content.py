from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text

from gmethod.database import Base
from gmethod.models.encrypted import EncryptedContentMixin

WISH_TYPE_DREAM = "dream"
WISH_TYPE_SOLUTION = "solution"


class Wish(EncryptedContentMixin, Base):
    __tablename__ = "wishes"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    wish_type = Column(Text, nullable=False)  # dream, solution
    s3_object_url = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


class Hate(EncryptedContentMixin, Base):
    __tablename__ = "hates"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


class Happiness(EncryptedContentMixin, Base):
    __tablename__ = "happiness"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


class FeelingSetting(EncryptedContentMixin, Base):
    """Text echoed back when the user presses feeling button `button_number`."""

    __tablename__ = "feeling_settings"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    button_number = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


DEFAULT_FEELING_SETTINGS = [
    (1, "嫌だ！"),
    (2, "ムカつく！"),
    (3, "悔しい！"),
    (4, "クソ！"),
    (5, "辛いよ"),
]
