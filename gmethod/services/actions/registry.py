"""Action registry: maps a reply pattern's execution method to a handler."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from gmethod.logging_config import get_logger
from gmethod.models import Message, User
from gmethod.services.content_graph_service import ContentGraphStore
from gmethod.services.history_service import HistoryStore
from gmethod.services.line_service import LineService, ReplyContent

logger = get_logger("action_registry")


@dataclass(frozen=True)
class ActionDeps:
    """Collaborators of the current turn, bound to a handler when it runs."""

    db: Session
    graph: ContentGraphStore
    history: HistoryStore
    line: Optional[LineService] = None


# (user, input_text, reply_token, target_node) -> reply content or None
ActionHandler = Callable[[User, str, str, Message], Optional[ReplyContent]]
HandlerFactory = Callable[[ActionDeps], ActionHandler]


class ActionRegistry:
    """Registry for reply pattern actions.

    Handlers are registered once, as factories. Each call binds the factory to
    the turn's collaborators and runs the handler inside a savepoint, so a
    failed flush is rolled back without poisoning the rest of the turn.

    Unknown names are not an error: the target node's formatted text is
    returned, the same reply a pattern without an action produces. A handler
    that raises is logged and treated as having produced no content.

    Usage:
        registry = ActionRegistry()
        registry.register_method("hates_index", HateActions, "index")
        content = registry.execute("hates_index", deps, user, "1", reply_token, node)
    """

    def __init__(self) -> None:
        self._factories: Dict[str, HandlerFactory] = {}

    def register(self, name: str, factory: HandlerFactory) -> None:
        self._factories[name] = factory

    def register_method(self, name: str, group: Callable[..., Any], method: str, **options: Any) -> None:
        """Register `method` of an action group built from the turn's collaborators."""

        def bind(deps: ActionDeps) -> ActionHandler:
            return getattr(group(deps.db, deps.graph, deps.history, deps.line, **options), method)

        self.register(name, bind)

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def execute(
        self,
        name: str,
        deps: ActionDeps,
        user: User,
        input_text: str,
        reply_token: str,
        target_node: Message,
    ) -> Optional[ReplyContent]:
        factory = self._factories.get(name)
        if factory is None:
            logger.warning(f"Unknown action method: {name}")
            return deps.graph.format_node(target_node)

        try:
            with deps.db.begin_nested():
                return factory(deps)(user, input_text, reply_token, target_node)
        except Exception as e:
            logger.error(
                f"Action {name} failed: {e}",
                exc_info=True,
                extra={"context": {"action": name, "user_id": user.id, "node_id": target_node.id}},
            )
            return None
