from dataclasses import dataclass
from typing import Optional

from gmethod.logging_config import get_logger
from gmethod.models import Message
from gmethod.services.content_graph_service import ContentGraphStore
from gmethod.services.history_service import HistoryStore

logger = get_logger("back_service")


@dataclass(frozen=True)
class BackTarget:
    node: Message
    edge_id: Optional[int] = None


def find_back_target(graph: ContentGraphStore, history: HistoryStore, user_id: int) -> Optional[BackTarget]:
    """Node to show for "戻る": the target of the edge that led to the previous visit.

    Falls back to the root node when there is no previous visit, when either
    of the two latest visits was not reached through an edge, or when that edge
    no longer resolves. Returns None only if the root node is missing too.
    """
    visits = history.recent_visits(user_id, limit=2)
    if len(visits) == 2 and all(visit.reply_pattern_id is not None for visit in visits):
        edge = graph.find_edge_by_id(visits[1].reply_pattern_id)
        target = graph.find_node_by_id(edge.next_message_id) if edge else None
        if target is not None:
            return BackTarget(node=target, edge_id=edge.id)

    logger.debug(f"Forcing back to root node for user {user_id}")
    root = graph.root_node()
    if root is None:
        return None
    return BackTarget(node=root)
