import random
from typing import List, Optional

from gmethod.logging_config import get_logger
from gmethod.models import GMessage, GMessageHistory, Message, User
from gmethod.models.g_message import (
    PERIOD_DAILY,
    PERIOD_EXPERIENCE,
    PERIOD_NOTICE,
    PERIOD_WEEKLY,
    PERIOD_WEEKLY_BLOG,
)
from gmethod.services.actions.base import BaseActions
from gmethod.services.line_service import ReplyContent

logger = get_logger("g_message_actions")

# Action name prefix of the admin menu that manages each period.
ADMIN_PREFIXES = {
    PERIOD_DAILY: "g_messages",
    PERIOD_WEEKLY: "weekly_g_messages",
    PERIOD_WEEKLY_BLOG: "weekly_blog_g_messages",
    PERIOD_EXPERIENCE: "experience_g_messages",
    PERIOD_NOTICE: "notices",
}

PERIOD_LABELS = {
    PERIOD_DAILY: "Gメッセージ",
    PERIOD_WEEKLY: "Gメッセージ",
    PERIOD_WEEKLY_BLOG: "サンデーブログ",
    PERIOD_EXPERIENCE: "体験談",
    PERIOD_NOTICE: "お知らせ",
}

PREVIEW_LENGTH = 30


def format_g_messages(messages: List[GMessage]) -> str:
    lines = []
    for i, message in enumerate(messages, start=1):
        plain = message.plain_content
        if len(plain) > PREVIEW_LENGTH:
            plain = plain[:PREVIEW_LENGTH] + "..."
        lines.append(f"{i}:\n{plain}")
    return "\n\n".join(lines)


def pick_unseen_g_message(db, user_id: int, period: str) -> Optional[GMessage]:
    """Random message of `period` the user has not received yet.

    Once every message was received the user's history for the period is
    cleared and the whole period is eligible again.
    """
    sent_ids = [
        row.g_message_id
        for row in db.query(GMessageHistory.g_message_id)
        .join(GMessage, GMessage.id == GMessageHistory.g_message_id)
        .filter(GMessageHistory.user_id == user_id, GMessage.period == period)
        .all()
    ]

    query = db.query(GMessage).filter(GMessage.period == period)
    candidates = query.filter(GMessage.id.notin_(sent_ids)).all() if sent_ids else query.all()

    if not candidates and sent_ids:
        db.query(GMessageHistory).filter(
            GMessageHistory.user_id == user_id,
            GMessageHistory.g_message_id.in_(sent_ids),
        ).delete(synchronize_session=False)
        db.flush()
        logger.info(f"Reset {period} g-message history for user {user_id}")
        candidates = query.all()

    if not candidates:
        return None
    return random.choice(candidates)


class GMessageActions(BaseActions):
    def show(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        """Today's daily g-message for the user."""
        message = pick_unseen_g_message(self.db, user.id, PERIOD_DAILY)
        if message is None:
            return node.text
        self.db.add(GMessageHistory(user_id=user.id, g_message_id=message.id))
        self.db.flush()
        return f"{node.text}\n\n{message.plain_content}"


class GMessageAdminActions(BaseActions):
    """Admin menu over the g-messages of one period."""

    def __init__(self, *args, period: str = PERIOD_DAILY, **kwargs):
        super().__init__(*args, **kwargs)
        self.period = period

    @property
    def label(self) -> str:
        return PERIOD_LABELS.get(self.period, self.period)

    def _messages(self) -> List[GMessage]:
        return self.db.query(GMessage).filter(GMessage.period == self.period).order_by(GMessage.id.asc()).all()

    def create(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        message = GMessage(period=self.period)
        message.set_plain_content(text)
        self.db.add(message)
        self.db.flush()
        logger.info(f"Admin {user.id} created {self.period} g-message {message.id}")
        return f"{node.text}\n\n{text}"

    def index(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        return f"{node.text}\n\n{format_g_messages(self._messages())}"

    def unresolved_selection(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        # TODO: pick the target from the admin's pending selection once the
        # admin menus store the chosen number before edit, update and destroy.
        logger.debug(f"No {self.label} selected for admin {user.id}")
        return node.text
