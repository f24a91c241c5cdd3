from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from gmethod.config import settings
from gmethod.logging_config import get_logger
from gmethod.models import LastMessage, TalkHistory

logger = get_logger("history_service")


def parse_int(text: str) -> Optional[int]:
    """Signed integer typed by a user, or None.

    Only ASCII digits with an optional sign are accepted, so full-width digits
    and underscore-grouped numbers such as "1_0" are not numbers here.
    """
    text = text.strip()
    digits = text[1:] if text[:1] in ("+", "-") else text
    if not digits.isascii() or not digits.isdigit():
        return None
    return int(text)


class HistoryStore:
    """Per-user visit log (capped, oldest evicted first) and pending-selection slot.

    Concurrent turns of the same user are not serialized here; the last
    write wins on both the visit log and the pending selection.
    """

    def __init__(self, db: Session, limit: Optional[int] = None):
        self.db = db
        self.limit = limit or settings.history_limit

    def _visits_query(self, user_id: int):
        return (
            self.db.query(TalkHistory)
            .filter(TalkHistory.user_id == user_id)
            .order_by(TalkHistory.created_at.desc(), TalkHistory.id.desc())
        )

    def latest_visit(self, user_id: int) -> Optional[TalkHistory]:
        return self._visits_query(user_id).first()

    def recent_visits(self, user_id: int, limit: Optional[int] = None) -> List[TalkHistory]:
        return self._visits_query(user_id).limit(limit or self.limit).all()

    def append_visit(self, user_id: int, node_id: int, edge_id: Optional[int] = None) -> TalkHistory:
        visit = TalkHistory(
            user_id=user_id,
            message_id=node_id,
            reply_pattern_id=edge_id,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(visit)
        self.db.flush()

        overflow = self._visits_query(user_id).offset(self.limit).all()
        for old_visit in overflow:
            self.db.delete(old_visit)
        if overflow:
            self.db.flush()
            logger.debug(f"Evicted {len(overflow)} visits for user {user_id}")

        return visit

    def get_pending_selection(self, user_id: int) -> Optional[str]:
        slot = self.db.query(LastMessage).filter(LastMessage.user_id == user_id).first()
        if slot is None:
            return None
        return slot.plain_content

    def set_pending_selection(self, user_id: int, text: str) -> LastMessage:
        slot = self.db.query(LastMessage).filter(LastMessage.user_id == user_id).first()
        if slot is None:
            slot = LastMessage(user_id=user_id)
            self.db.add(slot)
        slot.set_plain_content(text)
        slot.updated_at = datetime.now(timezone.utc)
        self.db.flush()
        return slot

    def selected_index(self, user_id: int) -> Optional[int]:
        """0-based index of the number stored in the pending selection, if any."""
        raw = self.get_pending_selection(user_id)
        number = parse_int(raw) if raw is not None else None
        if number is None:
            return None
        return number - 1
