from typing import List, Optional

from sqlalchemy.orm import Session

from gmethod.models import Message, Option, ReplyPattern

# Well-known nodes of the dialogue graph, addressed by role instead of id.
MESSAGE_SCOPE_IDS = {
    "default": 110,
    "maintenance": 10,
    "validation_error": 16,
    "select_number": 18,
    "bad_talk_response": 21,
    "admin_default": 23,
    "new_moon_tomorrow": 27,
    "new_moon_today": 28,
    "full_moon_tomorrow": 29,
    "full_moon_today": 30,
    "duplicate_send": 31,
    "no_wishes": 62,
    "todays_g_message": 63,
    "todays_weekly_g_message": 93,
    "todays_experience_g_message": 109,
    "select_broadcast_range": 121,
    "over_post_capacity": 122,
    "unavailable": 125,
    "lets_customize_feeling_button": 127,
    "todays_weekly_blog_g_message": 130,
}

ROOT_SCOPE = "default"


class ContentGraphStore:
    """Read-only access to the dialogue graph (messages, options, reply patterns)."""

    def __init__(self, db: Session):
        self.db = db

    def find_node_by_id(self, node_id: int) -> Optional[Message]:
        return self.db.get(Message, node_id)

    def find_node_by_scope(self, scope: str) -> Optional[Message]:
        node_id = MESSAGE_SCOPE_IDS.get(scope)
        if node_id is None:
            return None
        return self.find_node_by_id(node_id)

    def root_node(self) -> Optional[Message]:
        return self.find_node_by_scope(ROOT_SCOPE)

    def find_choices_for_node(self, node_id: int) -> List[Option]:
        return self.db.query(Option).filter(Option.message_id == node_id).order_by(Option.position.asc()).all()

    def find_choice(self, node_id: int, position: int) -> Optional[Option]:
        return self.db.query(Option).filter(Option.message_id == node_id, Option.position == position).first()

    def find_edge(self, node_id: int, position: Optional[int] = None) -> Optional[ReplyPattern]:
        """Edge leaving `node_id` at `position`. A None position selects the wildcard edge."""
        query = self.db.query(ReplyPattern).filter(ReplyPattern.sent_message_id == node_id)
        if position is None:
            query = query.filter(ReplyPattern.position.is_(None))
        else:
            query = query.filter(ReplyPattern.position == position)
        return query.first()

    def find_first_edge(self, node_id: int) -> Optional[ReplyPattern]:
        return (
            self.db.query(ReplyPattern)
            .filter(ReplyPattern.sent_message_id == node_id)
            .order_by(ReplyPattern.id.asc())
            .first()
        )

    def find_edge_by_id(self, edge_id: Optional[int]) -> Optional[ReplyPattern]:
        if edge_id is None:
            return None
        return self.db.get(ReplyPattern, edge_id)

    def format_node(self, node: Message) -> str:
        """Node text followed by its numbered options and the select-number prompt."""
        content = node.text
        choices = self.find_choices_for_node(node.id)
        if not choices:
            return content

        option_lines = "\n".join(f"{choice.position}: {choice.text}" for choice in choices)
        prompt = self.find_node_by_scope("select_number")
        prompt_text = prompt.text if prompt else ""
        return "\n\n".join([content, option_lines, prompt_text])

    def scope_text(self, scope: str, default: str = "") -> str:
        node = self.find_node_by_scope(scope)
        return node.text if node else default
