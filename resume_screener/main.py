from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resume_screener.routers import evaluations, screening
from resume_screener.models.settings import load_settings
from resume_screener.services.evaluator_client import EvaluationClient
from resume_screener.services.notifier import LoggingNotifier
from resume_screener.services.orchestrator import ResumeEvaluator
from resume_screener.services.screening import ScreeningService
from resume_screener.services.store import CREDENTIAL_KEY, InMemoryStore

from resume_screener.utils.logging_config import configure_for_environment, get_logger
from resume_screener.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
)

VERSION = "1.0.0"

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Resume Screener API starting up...")

    settings = load_settings()
    notifier = LoggingNotifier()
    evaluator = ResumeEvaluator(client=EvaluationClient(settings), notifier=notifier)
    service = ScreeningService(InMemoryStore(), evaluator=evaluator, notifier=notifier)
    if settings.default_credential:
        service.store.set(CREDENTIAL_KEY, settings.default_credential)
        logger.info("Seeded screening session with credential from environment")

    app.state.evaluator = evaluator
    app.state.screening = service
    logger.info(f"Evaluator endpoint: {settings.api_url} (model {settings.model_name})")
    logger.info("Resume Screener API startup completed")

    yield

    logger.info("Resume Screener API shutting down...")


app = FastAPI(title="Resume Screener API", version=VERSION, lifespan=lifespan)

# Last added runs first
app.add_middleware(ExceptionHandlerMiddleware)
app.add_middleware(RequestLoggingMiddleware, slow_request_threshold=30.0)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    logger.debug("Root endpoint accessed")
    return {"message": "Welcome to the Resume Screener API", "version": VERSION, "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


app.include_router(evaluations.router, prefix="/api/evaluations", tags=["evaluations"])
app.include_router(screening.router, prefix="/api", tags=["screening"])

logger.info("Resume Screener API initialized successfully")
