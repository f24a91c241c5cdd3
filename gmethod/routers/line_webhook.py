import base64
import hashlib
import hmac

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from gmethod.config import settings
from gmethod.database import get_db
from gmethod.logging_config import get_logger
from gmethod.schemas.line import LineEvent, LineWebhookBody, LineWebhookResponse
from gmethod.services.event_service import ConversationEngine
from gmethod.services.line_service import LineService
from gmethod.services.result import Result

logger = get_logger("line_webhook")

router = APIRouter()


def compute_signature(body: bytes, channel_secret: str) -> str:
    digest = hmac.new(channel_secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(body: bytes, signature: str, channel_secret: str) -> bool:
    if not signature or not channel_secret:
        return False
    return hmac.compare_digest(compute_signature(body, channel_secret), signature)


async def verified_body(request: Request, x_line_signature: str = Header(default="")) -> bytes:
    """Raw request body, after checking it was signed with the channel secret."""
    body = await request.body()
    if not verify_signature(body, x_line_signature, settings.line_channel_secret):
        logger.warning("Rejected webhook with invalid signature")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid signature")
    return body


def get_line_service() -> LineService:
    return LineService()


def dispatch_event(engine: ConversationEngine, event: LineEvent) -> Result:
    user_id = event.source.user_id
    if event.type == "follow":
        return engine.handle_follow(user_id)
    if event.type == "message":
        return engine.handle_message(user_id, event.input_text, event.reply_token or "")
    logger.debug(f"Ignoring {event.type} event")
    return Result.success(None)


@router.post("/callback", response_model=LineWebhookResponse)
def handle_callback(
    body: bytes = Depends(verified_body),
    db: Session = Depends(get_db),
    line: LineService = Depends(get_line_service),
):
    """
    Handle LINE webhook events.
    Each event runs in its own transaction; a failing event is rolled back
    and does not stop the others.
    """
    try:
        payload = LineWebhookBody.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"Invalid webhook payload: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payload")

    engine = ConversationEngine(db, line)
    processed = failed = 0
    for event in payload.events:
        try:
            result = dispatch_event(engine, event)
        except Exception as e:
            db.rollback()
            failed += 1
            logger.error(
                f"Event processing failed: {e}",
                exc_info=True,
                extra={"context": {"event_type": event.type, "line_user_id": event.source.user_id}},
            )
            continue

        if result.ok:
            db.commit()
            processed += 1
        else:
            db.rollback()
            failed += 1
            logger.warning(
                f"Event skipped: {result.error}",
                extra={"context": {"event_type": event.type, "code": result.error_code}},
            )

    return LineWebhookResponse(status="ok", processed=processed, failed=failed)
