from typing import List, Optional

from gmethod.models import FeelingSetting, Happiness, Hate, Message, User
from gmethod.models.user_content import DEFAULT_FEELING_SETTINGS
from gmethod.services.actions.base import BaseActions, format_date
from gmethod.services.history_service import parse_int
from gmethod.services.line_service import ReplyContent

NO_HATES_TEXT = "まだ嫌だー！を投企してないようです。。"
NO_HAPPINESS_TEXT = "まだ良かったー！を書いてないようだね。これからどんどん書いていこう！"
CUSTOMIZE_OPTION_TEXT = "6: 設定をカスタマイズする"


def format_entries(entries) -> str:
    return "\n\n".join(
        f"{i}:\n日付: {format_date(entry.created_at)}\n内容: {entry.plain_content}"
        for i, entry in enumerate(entries, start=1)
    )


def format_feeling_settings(settings: List[FeelingSetting]) -> str:
    return "\n".join(f"{setting.button_number}: {setting.plain_content}" for setting in settings)


class HateActions(BaseActions):
    def _hates(self, user: User) -> List[Hate]:
        return self.db.query(Hate).filter(Hate.user_id == user.id).order_by(Hate.id.asc()).all()

    def index(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        hates = self._hates(user)
        if not hates:
            return NO_HATES_TEXT
        return f"{self.formatted(node)}\n\n{format_entries(hates)}"

    def create(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        hate = Hate(user_id=user.id)
        hate.set_plain_content(text)
        self.db.add(hate)
        self.db.flush()
        return self.formatted(node)

    def edit(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        hate = self.select(user, self._hates(user))
        if hate is None:
            return node.text
        return f"{node.text}\n\n選択中の嫌だー:\n{hate.plain_content}"

    def update(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        hate = self.select(user, self._hates(user))
        if hate is None:
            return node.text
        hate.set_plain_content(text)
        self.db.flush()
        return f"{node.text}\n\n{text}"

    def destroy(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        hate = self.select(user, self._hates(user))
        if hate is None:
            return node.text
        plain = hate.plain_content
        self.db.delete(hate)
        self.db.flush()
        return f"{node.text}\n\n{plain}"

    def destroy_all(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        self.db.query(Hate).filter(Hate.user_id == user.id).delete(synchronize_session=False)
        self.db.flush()
        return self.formatted(node)


class HappinessActions(BaseActions):
    def _happiness(self, user: User) -> List[Happiness]:
        return self.db.query(Happiness).filter(Happiness.user_id == user.id).order_by(Happiness.id.asc()).all()

    def index(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        entries = self._happiness(user)
        if not entries:
            return NO_HAPPINESS_TEXT
        return f"{self.formatted(node)}\n\n{format_entries(entries)}"

    def create(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        entry = Happiness(user_id=user.id)
        entry.set_plain_content(text)
        self.db.add(entry)
        self.db.flush()
        return self.formatted(node)

    def destroy(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        entry = self.select(user, self._happiness(user))
        if entry is None:
            return node.text
        plain = entry.plain_content
        self.db.delete(entry)
        self.db.flush()
        return f"{node.text}\n\n{plain}"


class FeelingButtonActions(BaseActions):
    """Customizable feeling buttons: pressing a number echoes the configured text."""

    def _settings(self, user: User) -> List[FeelingSetting]:
        return (
            self.db.query(FeelingSetting)
            .filter(FeelingSetting.user_id == user.id)
            .order_by(FeelingSetting.button_number.asc())
            .all()
        )

    def _find_button(self, user: User, button_number: int) -> Optional[FeelingSetting]:
        return (
            self.db.query(FeelingSetting)
            .filter(FeelingSetting.user_id == user.id, FeelingSetting.button_number == button_number)
            .first()
        )

    def _settings_overview(self, user: User) -> str:
        prompt = self.graph.find_node_by_scope("lets_customize_feeling_button")
        base = self.formatted(prompt) if prompt else ""
        return f"{base}\n\n{format_feeling_settings(self._settings(user))}"

    def find_or_create(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        settings = self._settings(user)
        if not settings:
            for button_number, default_text in DEFAULT_FEELING_SETTINGS:
                setting = FeelingSetting(user_id=user.id, button_number=button_number)
                setting.set_plain_content(default_text)
                self.db.add(setting)
            self.db.flush()
            settings = self._settings(user)
        return f"{self.formatted(node)}\n\n{format_feeling_settings(settings)}\n{CUSTOMIZE_OPTION_TEXT}"

    def echo(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        button_number = parse_int(text)
        if button_number is None:
            return self._settings_overview(user)
        setting = self._find_button(user, button_number)
        if setting is None:
            return self._settings_overview(user)
        return setting.plain_content

    def index(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        return self._settings_overview(user)

    def edit(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        self.history.set_pending_selection(user.id, text)
        setting = self.select(user, self._settings(user))
        if setting is None:
            return self._settings_overview(user)
        return f"{node.text}\n\n選択中の設定: {setting.plain_content}"

    def update(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        setting = self.select(user, self._settings(user))
        if setting is None:
            return node.text
        setting.set_plain_content(text)
        self.db.flush()
        return self.formatted(node)
