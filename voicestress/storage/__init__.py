"""Single-slot calibration baseline storage"""

from voicestress.storage.baseline_store import (
    InMemoryBaselineStore,
    JsonFileBaselineStore,
    RedisBaselineStore,
    create_baseline_store
)

__all__ = [
    'InMemoryBaselineStore',
    'JsonFileBaselineStore',
    'RedisBaselineStore',
    'create_baseline_store',
]
