from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

import httpx

from gmethod.config import settings
from gmethod.logging_config import get_logger

logger = get_logger("line_service")

# LINE rejects reply, push and broadcast requests carrying more messages than this.
MAX_MESSAGES_PER_REQUEST = 5


@dataclass(frozen=True)
class ImageUnit:
    """An image reply unit; LINE shows `url` both as original and preview."""

    url: str


ReplyUnit = Union[str, ImageUnit]
ReplyContent = Union[str, Sequence[ReplyUnit]]


def split_message(text: str, max_length: int) -> List[str]:
    """Split text into chunks of at most `max_length` characters."""
    if len(text) <= max_length:
        return [text]
    return [text[i : i + max_length] for i in range(0, len(text), max_length)]


def build_line_messages(content: Optional[ReplyContent], max_length: Optional[int] = None) -> List[dict]:
    """Convert reply content into LINE message objects."""
    max_length = max_length or settings.max_message_length
    if content is None:
        return []
    if isinstance(content, (str, ImageUnit)):
        content = [content]

    messages = []
    for unit in content:
        if isinstance(unit, ImageUnit):
            messages.append({"type": "image", "originalContentUrl": unit.url, "previewImageUrl": unit.url})
        elif unit:
            messages.extend({"type": "text", "text": chunk} for chunk in split_message(unit, max_length))

    if len(messages) > MAX_MESSAGES_PER_REQUEST:
        logger.warning(
            "Reply truncated to the LINE message limit",
            extra={"context": {"messages": len(messages), "limit": MAX_MESSAGES_PER_REQUEST}},
        )
        messages = messages[:MAX_MESSAGES_PER_REQUEST]
    return messages


class LineService:
    """Service for sending messages through the LINE Messaging API."""

    def __init__(self, channel_token: Optional[str] = None, base_url: Optional[str] = None):
        self.channel_token = channel_token if channel_token is not None else settings.line_channel_token
        self.base_url = (base_url or settings.line_api_base_url).rstrip("/")

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.channel_token}"}

    def _make_request(self, method: str, path: str, data: Optional[dict] = None) -> dict:
        """Make request to LINE API."""
        url = f"{self.base_url}/{path}"
        try:
            with httpx.Client(timeout=30.0) as client:
                response = client.request(method, url, json=data, headers=self._headers())
            if response.status_code >= 400:
                logger.error(
                    "LINE API error",
                    extra={"context": {"path": path, "status": response.status_code, "body": response.text[:500]}},
                )
                return {"ok": False, "status": response.status_code, "error": response.text}
            return {"ok": True, "result": response.json() if response.content else {}}
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"LINE API request failed: {e}")
            return {"ok": False, "error": str(e)}

    def reply(self, content: Optional[ReplyContent], reply_token: str) -> dict:
        """Reply to an inbound event. Strings longer than the limit are split."""
        messages = build_line_messages(content)
        if not messages:
            return {"ok": False, "error": "empty reply"}
        return self._make_request("POST", "message/reply", {"replyToken": reply_token, "messages": messages})

    def push(self, line_user_id: str, text: str) -> dict:
        messages = build_line_messages(text)
        return self._make_request("POST", "message/push", {"to": line_user_id, "messages": messages})

    def push_many(self, line_user_ids: Iterable[str], text: str) -> int:
        """Push the same text to each user. Returns how many pushes succeeded."""
        return sum(1 for line_user_id in line_user_ids if self.push(line_user_id, text).get("ok"))

    def broadcast(self, text: str) -> dict:
        return self._make_request("POST", "message/broadcast", {"messages": build_line_messages(text)})

    def get_profile(self, line_user_id: str) -> Optional[dict]:
        result = self._make_request("GET", f"profile/{line_user_id}")
        if not result.get("ok"):
            logger.warning(f"Failed to fetch profile for {line_user_id}: {result.get('error')}")
            return None
        return result["result"]
