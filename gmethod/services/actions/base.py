from datetime import datetime
from typing import Optional, Sequence, TypeVar

from sqlalchemy.orm import Session

from gmethod.models import Message, User
from gmethod.services.content_graph_service import ContentGraphStore
from gmethod.services.history_service import HistoryStore
from gmethod.services.line_service import LineService

T = TypeVar("T")


def format_date(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return f"{value.year}年{value.month}月{value.day}日"


class BaseActions:
    """Shared collaborators and helpers for a group of action handlers."""

    def __init__(
        self,
        db: Session,
        graph: ContentGraphStore,
        history: HistoryStore,
        line: Optional[LineService] = None,
    ):
        self.db = db
        self.graph = graph
        self.history = history
        self.line = line

    def formatted(self, node: Message) -> str:
        return self.graph.format_node(node)

    def select(self, user: User, items: Sequence[T]) -> Optional[T]:
        """Item picked by the number stored in the user's pending selection."""
        index = self.history.selected_index(user.id)
        if index is None or index < 0 or index >= len(items):
            return None
        return items[index]
