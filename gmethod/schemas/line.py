from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LineSource(BaseModel):
    type: str = "user"  # user, group, room
    user_id: Optional[str] = Field(default=None, alias="userId")

    model_config = ConfigDict(populate_by_name=True)


class LineMessage(BaseModel):
    id: str
    type: str  # text, image, sticker, ...
    text: Optional[str] = None


class LineEvent(BaseModel):
    type: str  # follow, message, unfollow, ...
    source: LineSource
    reply_token: Optional[str] = Field(default=None, alias="replyToken")
    message: Optional[LineMessage] = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def input_text(self) -> str:
        """Text of a message event; non-text messages are identified by their id."""
        if self.message is None:
            return ""
        return self.message.text if self.message.text is not None else self.message.id


class LineWebhookBody(BaseModel):
    destination: Optional[str] = None
    events: List[LineEvent] = []


class LineWebhookResponse(BaseModel):
    status: str = "ok"
    processed: int = 0
    failed: int = 0
