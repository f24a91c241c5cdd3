from typing import List, Optional

from gmethod.models import Message, User, Wish
from gmethod.models.user_content import WISH_TYPE_DREAM
from gmethod.services.actions.base import BaseActions, format_date
from gmethod.services.history_service import parse_int
from gmethod.services.line_service import ImageUnit, ReplyContent

NO_WISHES_FALLBACK = "願いがまだ登録されていません"
NO_IMAGE_TEXT = "この願いには画像が投稿されていません。"


def format_wishes(wishes: List[Wish]) -> str:
    lines = []
    for i, wish in enumerate(wishes, start=1):
        has_image = "あり" if wish.s3_object_url else "なし"
        lines.append(f"{i}:\n日付: {format_date(wish.created_at)}\n内容: {wish.plain_content}\n画像: {has_image}")
    return "\n\n".join(lines)


class WishActions(BaseActions):
    """CRUD over the user's wishes of one type (dream or solution)."""

    def __init__(self, *args, wish_type: str = WISH_TYPE_DREAM, **kwargs):
        super().__init__(*args, **kwargs)
        self.wish_type = wish_type

    def _wishes(self, user: User) -> List[Wish]:
        return (
            self.db.query(Wish)
            .filter(Wish.user_id == user.id, Wish.wish_type == self.wish_type)
            .order_by(Wish.id.asc())
            .all()
        )

    def index(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        wishes = self._wishes(user)
        if not wishes:
            return self.graph.scope_text("no_wishes", NO_WISHES_FALLBACK)
        return f"{self.formatted(node)}\n\n{format_wishes(wishes)}"

    def create(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        wish = Wish(user_id=user.id, wish_type=self.wish_type)
        wish.set_plain_content(text)
        self.db.add(wish)
        self.db.flush()
        return self.formatted(node)

    def edit(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        wish = self.select(user, self._wishes(user))
        if wish is None:
            return node.text
        return f"{node.text}\n\n選択中の願い:\n{wish.plain_content}"

    def update(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        wish = self.select(user, self._wishes(user))
        if wish is None:
            return node.text
        wish.set_plain_content(text)
        self.db.flush()
        return f"{node.text}\n\n{text}"

    def destroy(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        wish = self.select(user, self._wishes(user))
        if wish is None:
            return node.text
        plain = wish.plain_content
        self.db.delete(wish)
        self.db.flush()
        return f"{node.text}\n\n{plain}"

    def file_show(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        """Picture attached to the wish whose number was just typed."""
        wish = self._wish_at(user, text)
        if wish is None or not wish.s3_object_url:
            return NO_IMAGE_TEXT
        return [self.formatted(node), ImageUnit(wish.s3_object_url)]

    def _wish_at(self, user: User, text: str) -> Optional[Wish]:
        number = parse_int(text)
        if number is None:
            return None
        wishes = self._wishes(user)
        if number < 1 or number > len(wishes):
            return None
        return wishes[number - 1]
