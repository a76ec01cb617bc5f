"""Whole-snapshot portfolio persistence.

The portfolio is stored as one JSON document:
- {"items": [{symbol, name, shares, averagePrice, purchaseDate, notes}, ...]}

Loading never fails: a missing, unreadable or invalid snapshot yields an
empty Portfolio. Saving never raises: failures are logged and reported as
False so the in-memory update that triggered the save still stands.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import orjson
import redis.asyncio as redis
from pydantic import ValidationError

from core.models import Portfolio

logger = logging.getLogger(__name__)

DEFAULT_KEY = "portfolio"


@runtime_checkable
class PortfolioStore(Protocol):
    """Protocol that portfolio storage backends must implement."""

    async def connect(self) -> bool:
        """Open backend resources. Returns False if the backend is unreachable."""
        ...

    async def close(self) -> None:
        ...

    async def ping(self) -> bool:
        """Whether the backend can currently be reached."""
        ...

    async def load(self) -> Portfolio:
        """Load the stored snapshot, or an empty Portfolio."""
        ...

    async def save(self, portfolio: Portfolio) -> bool:
        """Replace the stored snapshot. Returns True on success."""
        ...


def portfolio_to_json(portfolio: Portfolio) -> dict[str, Any]:
    """Serialize to the wire layout (camelCase field names)."""
    return portfolio.model_dump(mode="json", by_alias=True)


def portfolio_from_json(data: Any) -> Portfolio:
    """Parse a stored snapshot, falling back to an empty Portfolio."""
    if data is None:
        return Portfolio()

    try:
        return Portfolio.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Stored portfolio is invalid, starting empty: {e}")
        return Portfolio()


class RedisPortfolioStore:
    """Portfolio snapshot kept under a single Redis key.

    ``connect`` must run before use. When Redis is unreachable the store
    disables itself: loads return an empty Portfolio and saves return False.
    """

    def __init__(self, url: str, key: str = DEFAULT_KEY):
        self.url = url
        self.key = key
        self._client: redis.Redis | None = None

    @property
    def available(self) -> bool:
        return self._client is not None

    async def connect(self) -> bool:
        if self._client is not None:
            return True

        # Encoding is done with orjson, so keep raw bytes
        client = redis.from_url(self.url, decode_responses=False)
        try:
            await client.ping()
        except redis.RedisError as e:
            logger.warning(f"Redis connection failed: {e}. Portfolio will not persist.")
            await client.aclose()
            return False

        self._client = client
        logger.info(f"Redis connected: {self.url}")
        return True

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis connection closed")

    async def ping(self) -> bool:
        if self._client is None:
            return False

        try:
            return bool(await self._client.ping())
        except redis.RedisError:
            return False

    async def load(self) -> Portfolio:
        if self._client is None:
            logger.warning("Redis unavailable, starting with an empty portfolio")
            return Portfolio()

        try:
            raw = await self._client.get(self.key)
        except redis.RedisError as e:
            logger.warning(f"Redis GET {self.key} failed: {e}")
            return Portfolio()

        if raw is None:
            return Portfolio()

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            logger.warning(f"Stored portfolio under {self.key} is corrupt: {e}")
            return Portfolio()

        return portfolio_from_json(data)

    async def save(self, portfolio: Portfolio) -> bool:
        if self._client is None:
            logger.warning("Redis unavailable, portfolio not saved")
            return False

        try:
            await self._client.set(self.key, orjson.dumps(portfolio_to_json(portfolio)))
        except redis.RedisError as e:
            logger.warning(f"Failed to save portfolio to key {self.key}: {e}")
            return False
        return True


class FilePortfolioStore:
    """Portfolio snapshot kept in a JSON file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    async def connect(self) -> bool:
        return True

    async def close(self) -> None:
        pass

    async def ping(self) -> bool:
        parent = self.path.parent
        while not parent.exists() and parent != parent.parent:
            parent = parent.parent
        return os.access(parent, os.W_OK)

    def _read(self) -> bytes | None:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None

    def _write(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_bytes(data)
        os.replace(tmp, self.path)

    async def load(self) -> Portfolio:
        try:
            raw = await asyncio.to_thread(self._read)
        except OSError as e:
            logger.warning(f"Failed to read portfolio file {self.path}: {e}")
            return Portfolio()

        if raw is None:
            return Portfolio()

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            logger.warning(f"Portfolio file {self.path} is corrupt: {e}")
            return Portfolio()

        return portfolio_from_json(data)

    async def save(self, portfolio: Portfolio) -> bool:
        data = orjson.dumps(portfolio_to_json(portfolio), option=orjson.OPT_INDENT_2)
        try:
            await asyncio.to_thread(self._write, data)
        except OSError as e:
            logger.warning(f"Failed to write portfolio file {self.path}: {e}")
            return False
        return True
