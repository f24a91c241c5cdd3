from sqlalchemy import Column, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from gmethod.database import Base

BASE_EXECUTION_METHOD = "base"


class ReplyPattern(Base):
    """An edge of the dialogue graph: sent message + position -> next message."""

    __tablename__ = "reply_patterns"
    __table_args__ = (
        UniqueConstraint("sent_message_id", "position", name="uq_reply_patterns_sent_message_position"),
    )

    id = Column(Integer, primary_key=True)
    sent_message_id = Column(Integer, ForeignKey("messages.id"), nullable=False)
    position = Column(Integer)  # NULL = wildcard edge
    next_message_id = Column(Integer, ForeignKey("messages.id"), nullable=False)
    execution_method = Column(Text, nullable=False, default=BASE_EXECUTION_METHOD)

    sent_message = relationship("Message", foreign_keys=[sent_message_id])
    next_message = relationship("Message", foreign_keys=[next_message_id])

    @property
    def has_action(self) -> bool:
        return bool(self.execution_method) and self.execution_method != BASE_EXECUTION_METHOD
