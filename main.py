"""
Main application entry point for the Contacts API.

This module initializes the FastAPI application, configures logging and
CORS, registers the global error handlers, initializes the rate limiter
with a Redis backend and includes the routers for authentication, users,
contacts and addresses.

Modules:
- FastAPI: Web framework
- CORSMiddleware: Middleware for handling CORS
- FastAPILimiter: Rate limiting
- redis.asyncio: Async Redis client
- fakeredis: In-process Redis used when no server is reachable
- app.database: Database engine
- app.models: SQLAlchemy models
- app.errors: Global error handlers
- app.auth, app.users, app.contacts, app.addresses: Routers
- app.core: Application settings
"""

import logging
from contextlib import asynccontextmanager

from fakeredis import FakeAsyncRedis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi_limiter import FastAPILimiter
import redis.asyncio as redis
from redis.exceptions import RedisError

from app.database import engine
from app import models, addresses, contacts
from app.auth import router as auth_router
from app.users import router as users_router
from app.core import get_settings
from app.errors import register_error_handlers

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup/shutdown lifecycle.

    Creates missing tables and initializes the rate limiter with the
    Redis backend. Falls back to an in-process fake Redis if the server
    is unavailable (e.g. during local development).
    """
    models.Base.metadata.create_all(bind=engine)

    redis_client = redis.from_url(
        settings.REDIS_URL, encoding="utf-8", decode_responses=True
    )
    try:
        await FastAPILimiter.init(redis_client)
    except (RedisError, OSError):
        logger.warning("Redis at %s unavailable, using in-process limiter", settings.REDIS_URL)
        await FastAPILimiter.init(FakeAsyncRedis(decode_responses=True))
    logger.info("Contacts API started")
    yield
    await FastAPILimiter.close()
    logger.info("Contacts API shutting down")


# Initialize FastAPI application
app = FastAPI(title="Contacts API", lifespan=lifespan)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers for application areas
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(contacts.router)
app.include_router(addresses.router)


@app.get("/")
def root():
    """
    Root endpoint for the API.

    Returns a simple JSON message directing users to the Swagger UI.

    Returns:
        dict: JSON message with information about the API
    """
    return {"msg": "Contacts API. Visit /docs for Swagger UI"}
