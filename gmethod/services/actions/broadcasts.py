from typing import Optional, Tuple

from gmethod.logging_config import get_logger
from gmethod.models import Message, User
from gmethod.services.actions.base import BaseActions
from gmethod.services.history_service import parse_int
from gmethod.services.line_service import ReplyContent

logger = get_logger("broadcast_actions")

RANGE_SEPARATOR = ":&:"
SHIK_ONLY_RANGE = "シックのみ"


class BroadcastActions(BaseActions):
    """Admin broadcast: confirm the text and audience, then send it."""

    def range_name(self, position: int) -> str:
        range_node = self.graph.find_node_by_scope("select_broadcast_range")
        if range_node is None:
            return ""
        choice = self.graph.find_choice(range_node.id, position)
        return choice.text if choice else ""

    def _pending_broadcast(self, user: User) -> Optional[Tuple[int, str]]:
        pending = self.history.get_pending_selection(user.id)
        if not pending or RANGE_SEPARATOR not in pending:
            return None
        raw_range, text = pending.split(RANGE_SEPARATOR, 1)
        return parse_int(raw_range) or 0, text

    def confirm(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        pending = self.history.get_pending_selection(user.id)
        range_position = (parse_int(pending) if pending else None) or 0

        self.history.set_pending_selection(user.id, f"{range_position}{RANGE_SEPARATOR}{text}")
        return f"{text}\n\n{self.formatted(node)}\n\n送信対象：{self.range_name(range_position)}"

    def send(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        pending = self._pending_broadcast(user)
        if pending is None or self.line is None:
            return node.text

        range_position, message = pending
        if self.range_name(range_position) == SHIK_ONLY_RANGE:
            line_user_ids = [
                row.line_user_id for row in self.db.query(User.line_user_id).filter(User.is_shik.is_(True)).all()
            ]
            sent = self.line.push_many(line_user_ids, message)
            logger.info(f"Pushed broadcast to {sent}/{len(line_user_ids)} shik users")
        else:
            self.line.broadcast(message)
            logger.info("Broadcast sent to all followers")
        return node.text
