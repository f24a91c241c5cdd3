"""Conversation engine: turns inbound LINE events into one dispatched turn each."""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gmethod.logging_config import TurnLogger, get_logger
from gmethod.models import User
from gmethod.services import conversation_service
from gmethod.services.actions import ActionRegistry, build_action_registry
from gmethod.services.content_graph_service import ContentGraphStore
from gmethod.services.dispatch_service import TurnContext, TurnServices, build_pipeline
from gmethod.services.history_service import HistoryStore
from gmethod.services.line_service import LineService
from gmethod.services.reply_pattern_service import ReplyPatternResolver
from gmethod.services.result import USER_ERROR, Result

logger = get_logger("event_service")


# Action handlers are registered once; each turn binds them to its own session.
ACTION_REGISTRY = build_action_registry()


class ConversationEngine:
    def __init__(self, db: Session, line: Optional[LineService] = None, actions: Optional[ActionRegistry] = None):
        self.db = db
        self.line = line or LineService()
        self.actions = actions or ACTION_REGISTRY

    def _resolve_user(self, line_user_id: str) -> Result[User]:
        if not line_user_id:
            return Result.failure("Event has no source user", USER_ERROR)
        try:
            return Result.success(conversation_service.get_or_create_user(self.db, line_user_id))
        except SQLAlchemyError as e:
            logger.error(f"Cannot resolve user {line_user_id}: {e}", exc_info=True)
            return Result.failure(str(e), USER_ERROR)

    def handle_follow(self, line_user_id: str) -> Result[User]:
        """Register a new follower and store their LINE profile."""
        result = self._resolve_user(line_user_id)
        if not result.ok:
            return result

        user = result.value
        profile = self.line.get_profile(line_user_id)
        if profile:
            conversation_service.update_profile(
                self.db, user, profile.get("displayName"), profile.get("pictureUrl")
            )
        logger.info("Follow handled", extra={"context": {"user_id": user.id, "profile": bool(profile)}})
        return Result.success(user)

    def handle_message(self, line_user_id: str, input_text: str, reply_token: str) -> Result[str]:
        """Dispatch one message. Returns the name of the handler that answered."""
        result = self._resolve_user(line_user_id)
        if not result.ok:
            return result.forward()

        user = result.value
        turn_logger = TurnLogger(logger, user.id, line_user_id)
        turn_logger.debug("Message received", context={"input_text": input_text})

        graph = ContentGraphStore(self.db)
        history = HistoryStore(self.db)
        services = TurnServices(
            db=self.db,
            graph=graph,
            history=history,
            line=self.line,
            resolver=ReplyPatternResolver(graph, history, self.actions, self.line),
        )

        turn = TurnContext(user=user, input_text=input_text, reply_token=reply_token)
        handler = build_pipeline(turn, services).handle()
        turn_logger.info("Message handled", context={"handler": handler.name})
        return Result.success(handler.name)
