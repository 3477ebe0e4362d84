"""FastAPI application entry point.

Startup sequence: load .env -> build config -> init LLM adapter -> wire generator.
A missing GEMINI_API_KEY is logged but never stops the process.
"""

import logging
import os
import time
from contextlib import asynccontextmanager

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from backend.agent.generator import SiteGenerator
from backend.api.routes import router
from backend.core.config import RelayConfig
from backend.core.errors import RelayError
from backend.core.llm_adapter import LLMAdapter

load_dotenv()

logger = structlog.get_logger(__name__)


def configure_logging(level: str) -> None:
    """Filter structlog output below the given level name."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    config = app.state.config
    logger.info("startup.complete", credential=app.state.llm_adapter.is_healthy(),
                generation_model=config.generation_model, chat_model=config.chat_model)
    yield
    logger.info("shutdown.complete")


def create_app(config: RelayConfig | None = None, llm_adapter: LLMAdapter | None = None) -> FastAPI:
    """Build the relay app around an explicit configuration.

    Args:
        config: Relay settings. Defaults to RelayConfig.from_env().
        llm_adapter: Model connector. Defaults to one built from config.
    """
    config = config or RelayConfig.from_env()
    llm_adapter = llm_adapter or LLMAdapter(config)

    app = FastAPI(
        title="Weburle API",
        description="Prompt-to-website relay for Gemini",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.llm_adapter = llm_adapter
    app.state.site_generator = SiteGenerator(llm_adapter, config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log method, path, status and latency for every request."""
        start = time.monotonic()
        response = await call_next(request)
        latency_ms = int((time.monotonic() - start) * 1000)
        logger.info("http.request", method=request.method, path=request.url.path,
                    status=response.status_code, latency_ms=latency_ms)
        return response

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        logger.warning("relay.error", path=request.url.path, kind=type(exc).__name__,
                       status=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content=exc.payload())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("relay.bad_request", path=request.url.path, errors=len(exc.errors()))
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    app.include_router(router)
    return app


configure_logging(os.environ.get("LOG_LEVEL", "INFO"))
app = create_app()
