from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from swipematch.core.arq import close_arq_pool
from swipematch.core.background import drain_background_tasks
from swipematch.core.cache import close_redis_pool
from swipematch.core.config import settings
from swipematch.core.exceptions import MatchingError, matching_exception_handler
from swipematch.core.logging import bind_request_context, configure_logging
from swipematch.core.websocket_manager import connection_manager
from swipematch.api.v1.swipes.endpoints import router as swipes_router
from swipematch.api.v1.matches.endpoints import router as matches_router
from swipematch.api.v1.messages.endpoints import router as messages_router
from swipematch.api.v1.me.endpoints import router as me_router
from swipematch.api.v1.candidates.endpoints import router as candidates_router
from swipematch.api.v1.websocket.endpoints import router as websocket_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.app_env)
    logger.info(f"SwipeMatch API starting (env={settings.app_env})")
    yield
    await drain_background_tasks()
    await close_arq_pool()
    await close_redis_pool()
    logger.info("SwipeMatch API stopped")


app = FastAPI(
    title="SwipeMatch API",
    description="Two-sided swipe matching between candidates and recruiters",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(MatchingError, matching_exception_handler)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Bind a request id to every log line of the request and echo it back."""
    request_id = bind_request_context(request.headers.get("X-Request-ID"))
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(swipes_router, prefix="/api/v1/swipes", tags=["Swipes"])
app.include_router(matches_router, prefix="/api/v1/matches", tags=["Matches"])
app.include_router(messages_router, prefix="/api/v1/messages", tags=["Messages"])
app.include_router(me_router, prefix="/api/v1/me", tags=["Settings"])
app.include_router(candidates_router, prefix="/api/v1/candidates", tags=["Discovery"])
app.include_router(websocket_router, prefix="/api/v1", tags=["WebSocket"])


@app.get("/healthz")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "version": "1.0.0",
        "connections": connection_manager.get_connection_count(),
    }
