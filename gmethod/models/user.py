from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, Text

from gmethod.database import Base

ADMIN_MEMBER_TYPE = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    line_user_id = Column(Text, nullable=False, unique=True)
    member_type = Column(Text, nullable=False, default="basic")  # basic, admin
    plan_id = Column(Integer, default=1)
    display_name = Column(Text)
    picture_url = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    is_shik = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    @property
    def is_admin(self) -> bool:
        return self.member_type == ADMIN_MEMBER_TYPE
