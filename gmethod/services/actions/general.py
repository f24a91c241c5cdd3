from gmethod.models import Message, User
from gmethod.services import conversation_service
from gmethod.services.actions.base import BaseActions
from gmethod.services.line_service import ReplyContent


class GeneralActions(BaseActions):
    def save_selected_option(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        """Remember the number the user just picked for the next step."""
        self.history.set_pending_selection(user.id, text)
        return self.formatted(node)

    def thanks_count_show(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        count = conversation_service.get_thanks_count(self.db, user.id)
        return f"{node.text}\n\n現在の回数: {count}回\n達成度: {count / 10:.1f}%"

    def thanks_count_reset(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        conversation_service.reset_thanks_count(self.db, user.id)
        return self.formatted(node)
