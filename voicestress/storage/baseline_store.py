"""Baseline Store

Single-slot persistence for the calibration baseline. Every backend holds at
most one baseline, overwrites it wholesale on put, and keeps no history. Stored
values are immutable, so each get() is a snapshot that later overwrites cannot
change.

Backends:
    - InMemoryBaselineStore: process-local slot, optionally seeded at start-up
    - JsonFileBaselineStore: one JSON file replaced atomically
    - RedisBaselineStore: one Redis key
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from voicestress.errors import BaselineStoreError
from voicestress.models.features import CalibrationBaseline
from voicestress.models.interfaces import BaselineStore
from voicestress.config.config_loader import config


logger = logging.getLogger(__name__)


class InMemoryBaselineStore(BaselineStore):
    """Baseline slot held in process memory"""

    def __init__(self, initial: Optional[CalibrationBaseline] = None):
        self._baseline = initial

    async def get(self) -> Optional[CalibrationBaseline]:
        return self._baseline

    async def put(self, baseline: CalibrationBaseline) -> None:
        self._baseline = baseline
        logger.info("Baseline replaced (in-memory)")


class JsonFileBaselineStore(BaselineStore):
    """Baseline persisted as a single JSON object on disk.

    Writes go to a temporary file in the same directory which then replaces the
    target, so readers never see a half-written baseline.

    Attributes:
        path: Location of the baseline JSON file
    """

    def __init__(self, path: str = None):
        self.path = Path(path or config.get('storage.path', 'data/voice_baseline.json'))

    def _read(self) -> Optional[CalibrationBaseline]:
        if not self.path.exists():
            return None
        try:
            text = self.path.read_text(encoding='utf-8')
        except OSError as e:
            raise BaselineStoreError(f"Cannot read baseline file {self.path}: {e}")
        return CalibrationBaseline.from_json(text)

    def _write(self, baseline: CalibrationBaseline) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".baseline-", suffix=".json")
        except OSError as e:
            raise BaselineStoreError(f"Cannot write baseline file {self.path}: {e}")

        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(baseline.to_json())
            os.replace(tmp_path, self.path)
        except OSError as e:
            Path(tmp_path).unlink(missing_ok=True)
            raise BaselineStoreError(f"Cannot write baseline file {self.path}: {e}")
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    async def get(self) -> Optional[CalibrationBaseline]:
        return await asyncio.to_thread(self._read)

    async def put(self, baseline: CalibrationBaseline) -> None:
        await asyncio.to_thread(self._write, baseline)
        logger.info(f"Baseline written to {self.path}")


class RedisBaselineStore(BaselineStore):
    """Baseline persisted under one Redis key.

    Attributes:
        redis_url: Redis connection URL
        key: Key holding the baseline JSON
    """

    def __init__(self, redis_url: str = None, key: str = None, client: Optional[redis.Redis] = None):
        self.redis_url = redis_url or config.get('storage.redis_url', 'redis://localhost:6379')
        self.key = key or config.get('storage.redis_key', 'voiceBaseline')
        self.redis_client: Optional[redis.Redis] = client

    def _client(self) -> redis.Redis:
        if self.redis_client is None:
            self.redis_client = redis.from_url(self.redis_url)
            logger.info(f"Connected to Redis at {self.redis_url}")
        return self.redis_client

    async def get(self) -> Optional[CalibrationBaseline]:
        try:
            raw = await self._client().get(self.key)
        except RedisError as e:
            logger.error(f"Redis read of '{self.key}' failed: {e}")
            raise BaselineStoreError(f"Cannot read baseline from Redis: {e}")
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode('utf-8')
        return CalibrationBaseline.from_json(raw)

    async def put(self, baseline: CalibrationBaseline) -> None:
        try:
            await self._client().set(self.key, baseline.to_json())
        except RedisError as e:
            logger.error(f"Redis write of '{self.key}' failed: {e}")
            raise BaselineStoreError(f"Cannot write baseline to Redis: {e}")
        logger.info(f"Baseline written to Redis key '{self.key}'")

    async def close(self) -> None:
        if self.redis_client is not None:
            await self.redis_client.aclose()
            self.redis_client = None
            logger.info("Redis connection closed")


def create_baseline_store(backend: str = None) -> BaselineStore:
    """Create the baseline store selected by ``storage.backend``"""
    backend = backend or config.get('storage.backend', 'file')

    if backend == 'memory':
        return InMemoryBaselineStore()
    if backend == 'file':
        return JsonFileBaselineStore()
    if backend == 'redis':
        return RedisBaselineStore()

    raise ValueError(f"Unknown storage backend: {backend}")
