import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import redis
from fastapi import FastAPI

from app.utils.config import settings


logger = logging.getLogger(__name__)

_redis_client: Optional[redis.Redis] = None


def get_redis() -> redis.Redis:
    """Shared client for the result store and the exam change channel."""
    assert _redis_client is not None, "Redis not initialized"
    return _redis_client


def init_redis() -> None:
    global _redis_client
    _redis_client = redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        db=settings.redis_db,
        password=settings.redis_password,
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout,
    )
    try:
        _redis_client.ping()
        logger.info("Connected to Redis at %s:%s/%s", settings.redis_host, settings.redis_port, settings.redis_db)
    except redis.RedisError as exc:
        # Results and the today-exam stream report their own failures per request
        logger.warning("Redis unreachable at startup: %s", exc)


def close_redis() -> None:
    global _redis_client
    if _redis_client is None:
        return
    try:
        _redis_client.close()
    finally:
        _redis_client = None


@asynccontextmanager
async def redis_lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_redis()
    try:
        yield
    finally:
        close_redis()
