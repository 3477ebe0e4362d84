"""FastAPI endpoints for the Weburle relay.

POST /api/generate - prompt -> {html, css, js} via the generation loop
POST /api/chat - single-turn assistant reply
GET /api/health - credential presence check (no network call)
"""

import time

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from backend.agent.assistant import chat_reply
from backend.api.schemas import ChatRequest, ChatResponse, GenerateRequest, HealthResponse, SiteBundle
from backend.core.errors import InvalidInput, RelayError
from backend.core.llm_adapter import MISSING_KEY_MESSAGE

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api")

CHAT_FAILURE_MESSAGE = "Gemini error"


@router.post("/generate", response_model=SiteBundle)
def generate(request: GenerateRequest, req: Request):
    """Generate a website bundle. Errors are rendered by the RelayError handler."""
    start = time.monotonic()
    logger.info("generate.request", prompt_len=len(request.prompt or ""))

    bundle = req.app.state.site_generator.generate(request.prompt)

    latency_ms = int((time.monotonic() - start) * 1000)
    logger.info("generate.response", latency_ms=latency_ms)
    return bundle


@router.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest, req: Request):
    """Answer a frontend question. Upstream failures are reported generically."""
    logger.info("chat.request", msg_len=len(request.message or ""))

    try:
        reply = chat_reply(req.app.state.llm_adapter, req.app.state.config, request.message)
    except InvalidInput:
        raise
    except RelayError as e:
        logger.error("chat.failed", error=e.message, kind=type(e).__name__)
        raise RelayError(CHAT_FAILURE_MESSAGE) from e

    return ChatResponse(reply=reply)


@router.get("/health", response_model=HealthResponse)
def health(req: Request):
    """Report whether the model credential is present in the running config."""
    if not req.app.state.config.has_credential:
        body = HealthResponse(status="error", message=MISSING_KEY_MESSAGE)
        return JSONResponse(status_code=500, content=body.model_dump())
    return HealthResponse(status="ok", message="Server running and API key loaded")
