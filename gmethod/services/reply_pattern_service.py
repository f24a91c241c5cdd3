"""Reply-pattern resolution: which edge of the dialogue graph answers an input."""

from dataclasses import dataclass
from typing import Optional

from gmethod.logging_config import get_logger
from gmethod.models import Message, ReplyPattern, User
from gmethod.services.actions import ActionDeps, ActionRegistry
from gmethod.services.content_graph_service import ContentGraphStore
from gmethod.services.history_service import HistoryStore, parse_int
from gmethod.services.line_service import LineService, ReplyContent

logger = get_logger("reply_pattern_service")


@dataclass(frozen=True)
class Resolution:
    edge: ReplyPattern
    target: Message


def parse_selection(input_text: str) -> Optional[int]:
    """Option number typed by the user, or None for "no selection" ("0" or not a number)."""
    return parse_int(input_text) or None


class ReplyPatternResolver:
    def __init__(
        self,
        graph: ContentGraphStore,
        history: HistoryStore,
        actions: ActionRegistry,
        line: Optional[LineService] = None,
    ):
        self.graph = graph
        self.history = history
        self.actions = actions
        self.deps = ActionDeps(db=graph.db, graph=graph, history=history, line=line)

    def find_edge(self, user_id: int, input_text: str) -> Optional[ReplyPattern]:
        """Edge leaving the user's last visited node that matches the input.

        Nodes with options are answered by the edge at the typed position. An
        unparseable input, "0" or a number without its own edge falls through to
        the node's wildcard edge. Nodes without options use their first edge.
        """
        visit = self.history.latest_visit(user_id)
        if visit is None:
            return None

        node_id = visit.message_id
        if not self.graph.find_choices_for_node(node_id):
            return self.graph.find_first_edge(node_id)

        position = parse_selection(input_text)
        if position is not None:
            edge = self.graph.find_edge(node_id, position)
            if edge is not None:
                return edge
        return self.graph.find_edge(node_id)

    def resolve(self, user_id: int, input_text: str) -> Optional[Resolution]:
        edge = self.find_edge(user_id, input_text)
        if edge is None:
            return None
        target = self.graph.find_node_by_id(edge.next_message_id)
        if target is None:
            logger.warning(f"Reply pattern {edge.id} points to missing message {edge.next_message_id}")
            return None
        return Resolution(edge=edge, target=target)

    def content_for(
        self,
        resolution: Resolution,
        user: User,
        input_text: str,
        reply_token: str,
    ) -> ReplyContent:
        """Reply for a resolved edge: its action's output, else the target's formatted text."""
        edge, target = resolution.edge, resolution.target
        if edge.has_action:
            content = self.actions.execute(edge.execution_method, self.deps, user, input_text, reply_token, target)
            if content is not None:
                return content
        return self.graph.format_node(target)
