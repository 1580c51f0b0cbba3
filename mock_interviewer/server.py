"""
FastAPI server for the Mock Interviewer.

This module wires the routers, the MongoDB repository and the knowledge base
into one application.
"""
import logging
import time
import contextlib
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from mock_interviewer import __version__
from mock_interviewer.core.knowledge_base import KnowledgeBase
from mock_interviewer.routers import chat_completions, interviews, knowledge_base
from mock_interviewer.services.interview_repository import InterviewRepository
from mock_interviewer.utils.config import get_db_config, get_server_config, log_config, validate_config
from mock_interviewer.utils.db import get_mongodb_client
from mock_interviewer.utils.event_log import log_api_request

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)


@contextlib.asynccontextmanager
async def lifespan(app_instance: FastAPI):
    """
    Lifespan context manager for FastAPI app.

    Creates the repository and the knowledge base on startup and closes the
    MongoDB client on shutdown. State that is already set (tests) is kept.
    """
    log_config()
    try:
        validate_config()
    except ValueError as e:
        logger.warning(f"Configuration incomplete: {e}")

    client = None
    if getattr(app_instance.state, "repository", None) is None:
        try:
            client = get_mongodb_client()
            app_instance.state.repository = InterviewRepository(client[get_db_config()["database"]])
        except Exception as e:
            logger.error(f"Failed to initialize interview repository: {e}")
            app_instance.state.repository = None

    if getattr(app_instance.state, "knowledge_base", None) is None:
        app_instance.state.knowledge_base = KnowledgeBase()

    yield

    if client is not None:
        client.close()
        logger.info("MongoDB client closed")


app = FastAPI(
    title="Mock Interviewer API",
    description="""
    REST API for AI-driven mock DevOps and cloud interviews.

    ## Features

    * OpenAI-compatible `/chat/completions` for voice agent platforms
    * Interview packs, sessions and text turns
    * Scoring and topic feedback with upskilling plans
    * Knowledge base coverage and retrieval checks
    """,
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_server_config()["cors_origins"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    log_api_request(request.method, request.url.path, response.status_code,
                    (time.perf_counter() - start_time) * 1000)
    return response


app.include_router(chat_completions.router)
app.include_router(interviews.router)
app.include_router(knowledge_base.router)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal server error occurred. Please try again later."}
    )


@app.get("/api/health")
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns:
        Status of the service and its database connection
    """
    database = "unavailable"
    repo = getattr(request.app.state, "repository", None)
    if repo is not None:
        try:
            repo.db.client.admin.command("ping")
            database = "connected"
        except Exception as e:
            logger.error(f"Health check database ping failed: {e}")
            database = "error"

    status = "healthy" if database == "connected" else "degraded"
    return {
        "status": status,
        "version": __version__,
        "database": database,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def run_server(host: str = None, port: int = None):
    """
    Start the FastAPI server.

    Args:
        host: Host to bind the server to, defaults to SERVER_HOST
        port: Port to bind the server to, defaults to SERVER_PORT
    """
    import uvicorn

    server_config = get_server_config()
    log_config_dict = uvicorn.config.LOGGING_CONFIG
    log_config_dict["formatters"]["access"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    log_config_dict["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

    uvicorn.run(
        app,
        host=host or server_config["host"],
        port=port or server_config["port"],
        log_config=log_config_dict,
    )
