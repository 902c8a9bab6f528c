"""Domain layer: exceptions shared by application, infrastructure and API.

No dependencies on infrastructure or presentation.
"""

from monocloud.domain.exceptions import (
    AdminNotConfiguredException,
    AuthenticationException,
    CacheReadOnlyException,
    InvalidCacheKeyException,
    InvalidTtlException,
    MonocloudException,
    ValidationException,
)

__all__ = [
    "AdminNotConfiguredException",
    "AuthenticationException",
    "CacheReadOnlyException",
    "InvalidCacheKeyException",
    "InvalidTtlException",
    "MonocloudException",
    "ValidationException",
]
