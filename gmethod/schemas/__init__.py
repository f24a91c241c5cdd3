from gmethod.schemas.line import LineEvent, LineMessage, LineSource, LineWebhookBody, LineWebhookResponse

__all__ = ["LineEvent", "LineMessage", "LineSource", "LineWebhookBody", "LineWebhookResponse"]
