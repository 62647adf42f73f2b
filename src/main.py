"""Entry point for the dialer's token and voice webhook server."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.routes import router as api_router
from config.settings import get_settings
from voice.errors import DialerError

LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    missing = get_settings().missing_twilio_settings()
    if missing:
        # Not fatal: /token and /voice answer 500 until the values are provided.
        LOGGER.warning("Twilio environment variables not configured: %s", ", ".join(missing))
    yield


settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

app = FastAPI(
    title="ClickUp Dialer",
    description="Issues Twilio Voice tokens and TwiML for the browser dialer.",
    lifespan=lifespan,
)
app.include_router(api_router)


@app.exception_handler(DialerError)
async def dialer_error_handler(request: Request, exc: DialerError) -> JSONResponse:
    LOGGER.warning("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code)


def run() -> None:
    import uvicorn

    LOGGER.info("Voice token server listening on http://localhost:%s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
