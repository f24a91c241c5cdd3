from sqlalchemy import Column, ForeignKey, Integer, Text

from gmethod.database import Base


class ActionRecord(Base):
    __tablename__ = "action_records"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    thanks_count = Column(Integer, nullable=False, default=0)


class ThanksLevel(Base):
    """Cheering text shown when a user's thanks count reaches `count`."""

    __tablename__ = "thanks_levels"

    id = Column(Integer, primary_key=True)
    count = Column(Integer, nullable=False, unique=True)
    cheering = Column(Text)
