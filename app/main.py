"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app import models  # noqa: F401  registers every table on Base.metadata
from app.config import settings
from app.database import engine, Base
from app.errors import register_exception_handlers
from app.logging_config import configure_logging
from app.routes import auth, users, teams, racks, master_descriptions, exported_racks

configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("startup", app=settings.APP_NAME, version=settings.APP_VERSION)
    yield


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request id to every log line of a request."""

    async def dispatch(self, request: Request, call_next):
        structlog.contextvars.clear_contextvars()
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
        response.headers["X-Request-ID"] = request_id
        return response


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Rack inventory tracking for site teams with role-based access control",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(teams.router, prefix="/api")
app.include_router(racks.router, prefix="/api")
app.include_router(master_descriptions.router, prefix="/api")
app.include_router(exported_racks.router, prefix="/api")


@app.get("/")
async def root():
    return {"success": True, "message": "Server is running."}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
