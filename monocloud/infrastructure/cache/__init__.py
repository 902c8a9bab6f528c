"""Cache: tiered (memory + Redis) cache and cache key utilities.

Used by the repository-analysis, text-analysis and speech services.
TieredCache is built once per process in monocloud.core.lifespan; key
format lives in keys.py.
"""

from monocloud.infrastructure.cache.cache_protocol import CacheProtocol
from monocloud.infrastructure.cache.capability import CacheOperation, CapabilityStatus
from monocloud.infrastructure.cache.entry import CacheEntry
from monocloud.infrastructure.cache.errors import FailureKind, classify_error
from monocloud.infrastructure.cache.keys import (
    analysis_key,
    repo_description_key,
    repository_key,
    speech_key,
)
from monocloud.infrastructure.cache.local_tier import LocalTier
from monocloud.infrastructure.cache.persistent import PersistentTierClient
from monocloud.infrastructure.cache.prober import CapabilityProber
from monocloud.infrastructure.cache.tiered_cache import (
    CacheStatus,
    ClearResult,
    ClearScope,
    TieredCache,
)

__all__ = [
    "CacheEntry",
    "CacheOperation",
    "CacheProtocol",
    "CacheStatus",
    "CapabilityProber",
    "CapabilityStatus",
    "ClearResult",
    "ClearScope",
    "FailureKind",
    "LocalTier",
    "PersistentTierClient",
    "TieredCache",
    "analysis_key",
    "classify_error",
    "repo_description_key",
    "repository_key",
    "speech_key",
]
