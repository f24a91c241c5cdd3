from sqlalchemy import Column, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from gmethod.database import Base


class Message(Base):
    """A dialogue node. Nodes with options expect a numeric selection."""

    __tablename__ = "messages"

    id = Column(Integer, primary_key=True)
    content = Column(Text)

    options = relationship("Option", back_populates="message", order_by="Option.position")

    @property
    def text(self) -> str:
        return self.content or ""


class Option(Base):
    __tablename__ = "options"
    __table_args__ = (UniqueConstraint("message_id", "position", name="uq_options_message_position"),)

    id = Column(Integer, primary_key=True)
    message_id = Column(Integer, ForeignKey("messages.id"), nullable=False)
    position = Column(Integer, nullable=False)  # 1-based, as shown to the user
    content = Column(Text)

    message = relationship("Message", back_populates="options")

    @property
    def text(self) -> str:
        return self.content or ""
