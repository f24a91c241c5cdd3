from fastapi import FastAPI

from gmethod.config import settings
from gmethod.logging_config import setup_logging
from gmethod.routers import line_webhook

setup_logging(settings.log_level)

app = FastAPI(
    title="gmethod API",
    description="LINE webhook backend for the gmethod conversation bot",
    version="0.1.0",
)

app.include_router(line_webhook.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
