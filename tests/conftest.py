"""Pytest configuration and fixtures."""

import sqlite3
from typing import AsyncGenerator, Iterator, List

import pytest
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from config import Config
from shortlink.database.cache import RedisCache
from shortlink.database.sqlite import SQLiteLinkStore
from shortlink.service import LinkService
from shortlink.shortcode import ShortCodeGenerator
from shortlink.common.logging_config import setup_logging
from web_app import create_app


class FakeRedis:
    """In-memory stand-in for a redis.asyncio client."""

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.fail = False
        self.closed = False

    async def get(self, key):
        if self.fail:
            raise RedisConnectionError("redis is down")
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        if self.fail:
            raise RedisConnectionError("redis is down")
        self.data[key] = value
        self.ttls[key] = ttl

    async def ping(self):
        return True

    async def aclose(self):
        self.closed = True


class ScriptedGenerator:
    """Code generator that hands out a fixed sequence of codes."""

    def __init__(self, codes: List[str]):
        self.codes = list(codes)
        self.calls = 0

    def generate(self) -> str:
        self.calls += 1
        return self.codes.pop(0)


def read_tables(db_path) -> tuple:
    """Return (c2u, u2c) as dicts, read straight from the file."""
    conn = sqlite3.connect(str(db_path))
    try:
        c2u = dict(conn.execute("SELECT code, url FROM c2u"))
        u2c = dict(conn.execute("SELECT url, code FROM u2c"))
    finally:
        conn.close()
    return c2u, u2c


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def db_path(tmp_path):
    """Path of a fresh database file."""
    return tmp_path / "data" / "links.db"


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(num_bytes=4)


@pytest.fixture
def store(db_path, short_code_generator, logger) -> Iterator[SQLiteLinkStore]:
    """Create a link store with its schema in place."""
    store = SQLiteLinkStore(
        db_config=str(db_path),
        short_code_generator=short_code_generator,
        logger=logger,
    )
    store.ensure_schema_sync()

    yield store

    store.close()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache(fake_redis, logger) -> RedisCache:
    """Create a cache wired to the in-memory Redis stand-in."""
    cache = RedisCache(redis_url="redis://localhost:6379/0", ttl_seconds=60, logger=logger)
    cache.client = fake_redis
    return cache


@pytest.fixture
def service(store, logger) -> LinkService:
    """Create service instance."""
    return LinkService(
        store=store,
        cache=None,  # No cache unless a test asks for one
        logger=logger,
    )


@pytest.fixture
def cached_service(store, cache, logger) -> LinkService:
    """Create service instance with the Redis cache enabled."""
    return LinkService(store=store, cache=cache, logger=logger)


@pytest.fixture
def config(db_path):
    return Config(db_path=str(db_path))


@pytest.fixture
def app(service, config):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/page",
        "https://github.com/user/repo",
        "http://stackoverflow.com/questions/123456?tab=votes#answers",
    ]
