from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from gmethod.models import ActionRecord, User


def get_or_create_user(db: Session, line_user_id: str) -> User:
    """Find user by LINE user id or create a new one."""
    user = db.query(User).filter(User.line_user_id == line_user_id).first()

    if not user:
        user = User(line_user_id=line_user_id, created_at=datetime.now(timezone.utc))
        db.add(user)
        db.flush()

    return user


def update_profile(db: Session, user: User, display_name: Optional[str], picture_url: Optional[str]) -> User:
    user.display_name = display_name
    user.picture_url = picture_url
    db.flush()
    return user


def get_action_record(db: Session, user_id: int) -> Optional[ActionRecord]:
    return db.query(ActionRecord).filter(ActionRecord.user_id == user_id).first()


def add_thanks_points(db: Session, user_id: int, points: int) -> int:
    """Increase the user's thanks counter and return the new value."""
    record = get_action_record(db, user_id)
    if record is None:
        record = ActionRecord(user_id=user_id, thanks_count=0)
        db.add(record)
    record.thanks_count = (record.thanks_count or 0) + points
    db.flush()
    return record.thanks_count


def get_thanks_count(db: Session, user_id: int) -> int:
    record = get_action_record(db, user_id)
    return record.thanks_count if record else 0


def reset_thanks_count(db: Session, user_id: int) -> None:
    record = get_action_record(db, user_id)
    if record:
        record.thanks_count = 0
        db.flush()
