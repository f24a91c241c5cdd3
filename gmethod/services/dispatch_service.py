"""Dispatch pipeline: the first matching handler answers the turn.

Handlers are checked in a fixed order and exactly one runs per inbound
message. The top-message fallback is always last and always matches.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from gmethod.logging_config import get_logger
from gmethod.models import Message, ThanksLevel, User
from gmethod.services import conversation_service
from gmethod.services.back_service import BackTarget, find_back_target
from gmethod.services.content_graph_service import ROOT_SCOPE, ContentGraphStore
from gmethod.services.history_service import HistoryStore
from gmethod.services.line_service import LineService, ReplyContent
from gmethod.services.reply_pattern_service import ReplyPatternResolver, Resolution

logger = get_logger("dispatch_service")

THANKS_PHRASE = "ありがとう、感謝します"
TOP_COMMAND = "TOP"
BACK_COMMAND = "戻る"
ADMIN_LOGIN_COMMAND = "ログイン"

THANKS_POINTS = 10
THANKS_MILESTONE = 20
THANKS_CHEERING_MILESTONE = 50


@dataclass(frozen=True)
class TurnContext:
    user: User
    input_text: str
    reply_token: str


@dataclass
class TurnServices:
    db: Session
    graph: ContentGraphStore
    history: HistoryStore
    line: LineService
    resolver: ReplyPatternResolver


class Handler:
    name = "handler"

    def __init__(self, turn: TurnContext, services: TurnServices):
        self.turn = turn
        self.services = services

    def matches(self) -> bool:
        raise NotImplementedError

    def run(self) -> None:
        raise NotImplementedError

    def deliver(self, node: Message, content: Optional[ReplyContent] = None, edge_id: Optional[int] = None) -> None:
        """Reply with `content` (default: the node's formatted text) and record the visit."""
        if content is None:
            content = self.services.graph.format_node(node)
        self.services.line.reply(content, self.turn.reply_token)
        self.services.history.append_visit(self.turn.user.id, node.id, edge_id)


class ScopeNodeHandler(Handler):
    """Sends a well-known node. Does not match when that node is missing."""

    scope = ROOT_SCOPE

    def __init__(self, turn: TurnContext, services: TurnServices):
        super().__init__(turn, services)
        self._node: Optional[Message] = None

    def applies(self) -> bool:
        return True

    def matches(self) -> bool:
        if not self.applies():
            return False
        self._node = self.services.graph.find_node_by_scope(self.scope)
        return self._node is not None

    def run(self) -> None:
        self.deliver(self._node)


class AvailabilityHandler(ScopeNodeHandler):
    name = "availability"
    scope = "unavailable"

    def applies(self) -> bool:
        return not self.turn.user.is_active


class ThanksCountHandler(Handler):
    name = "thanks_count"

    def matches(self) -> bool:
        return self.turn.input_text == THANKS_PHRASE

    def milestone_text(self, count: int) -> Optional[str]:
        if count % THANKS_MILESTONE != 0:
            return None
        text = f"あり感ツイート{count}回達成おめでとう！"
        if count % THANKS_CHEERING_MILESTONE == 0:
            level = self.services.db.query(ThanksLevel).filter(ThanksLevel.count == count).first()
            if level is not None and level.cheering:
                text += f"\n\n {level.cheering}"
        return text

    def run(self) -> None:
        count = conversation_service.add_thanks_points(self.services.db, self.turn.user.id, THANKS_POINTS)
        text = self.milestone_text(count)
        if text is not None:
            self.services.line.reply(text, self.turn.reply_token)


class TopShortcutHandler(ScopeNodeHandler):
    name = "top_shortcut"

    def applies(self) -> bool:
        return self.turn.input_text == TOP_COMMAND


class BackHandler(Handler):
    name = "back"

    def __init__(self, turn: TurnContext, services: TurnServices):
        super().__init__(turn, services)
        self._target: Optional[BackTarget] = None

    def matches(self) -> bool:
        if self.turn.input_text != BACK_COMMAND:
            return False
        self._target = find_back_target(self.services.graph, self.services.history, self.turn.user.id)
        return self._target is not None

    def run(self) -> None:
        self.deliver(self._target.node, edge_id=self._target.edge_id)


class AdminLoginHandler(ScopeNodeHandler):
    name = "admin_login"
    scope = "admin_default"

    def applies(self) -> bool:
        return self.turn.input_text == ADMIN_LOGIN_COMMAND and self.turn.user.is_admin


class ReplyPatternHandler(Handler):
    name = "reply_pattern"

    def __init__(self, turn: TurnContext, services: TurnServices):
        super().__init__(turn, services)
        self._resolution: Optional[Resolution] = None

    def matches(self) -> bool:
        self._resolution = self.services.resolver.resolve(self.turn.user.id, self.turn.input_text)
        return self._resolution is not None

    def run(self) -> None:
        resolver = self.services.resolver
        content = resolver.content_for(self._resolution, self.turn.user, self.turn.input_text, self.turn.reply_token)
        self.deliver(self._resolution.target, content, edge_id=self._resolution.edge.id)


class TopMessageHandler(Handler):
    name = "top_message"

    def matches(self) -> bool:
        return True

    def run(self) -> None:
        root = self.services.graph.root_node()
        if root is None:
            logger.warning("Root message is missing, no reply sent")
            return
        self.deliver(root)


HANDLER_CLASSES = (
    AvailabilityHandler,
    ThanksCountHandler,
    TopShortcutHandler,
    BackHandler,
    AdminLoginHandler,
    ReplyPatternHandler,
)


class DispatchPipeline:
    def __init__(self, handlers: Sequence[Handler], fallback: Handler):
        self.handlers: List[Handler] = [*handlers, fallback]

    def handle(self) -> Handler:
        """Run the first matching handler and return it."""
        for handler in self.handlers:
            if handler.matches():
                handler.run()
                return handler
        # unreachable while the fallback matches
        raise RuntimeError("No handler matched")


def build_pipeline(turn: TurnContext, services: TurnServices) -> DispatchPipeline:
    handlers = [handler_class(turn, services) for handler_class in HANDLER_CLASSES]
    return DispatchPipeline(handlers, TopMessageHandler(turn, services))
