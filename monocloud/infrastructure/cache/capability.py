"""Capability status of the persistent tier and its state transitions.

The status changes in exactly two ways: a full probe (CapabilityProber)
or a downgrade after a failure observed during a normal operation.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any

from monocloud.infrastructure.cache.errors import FailureKind


class CacheOperation(str, Enum):
    """Persistent-tier command families that can be individually restricted."""

    READ = "read"
    WRITE = "write"
    SCAN = "scan"


@dataclass(frozen=True)
class CapabilityStatus:
    """Snapshot of what the persistent tier currently allows.

    available=False implies read_only=True and both command flags False.
    """

    available: bool
    read_only: bool
    keys_command_allowed: bool
    get_command_allowed: bool

    def __post_init__(self) -> None:
        if not self.available and (
            not self.read_only or self.keys_command_allowed or self.get_command_allowed
        ):
            raise ValueError("An unavailable store cannot grant any capability")

    @classmethod
    def unavailable(cls) -> CapabilityStatus:
        return cls(
            available=False,
            read_only=True,
            keys_command_allowed=False,
            get_command_allowed=False,
        )

    @classmethod
    def full_access(cls) -> CapabilityStatus:
        return cls(
            available=True,
            read_only=False,
            keys_command_allowed=True,
            get_command_allowed=True,
        )

    @property
    def can_read(self) -> bool:
        return self.available and self.get_command_allowed

    @property
    def can_write(self) -> bool:
        return self.available and not self.read_only

    @property
    def can_bulk_clear(self) -> bool:
        return self.can_write and self.keys_command_allowed

    def downgrade(self, kind: FailureKind, operation: CacheOperation) -> CapabilityStatus:
        """Return the status implied by a failure of `operation` with `kind`.

        Connectivity failures make the store unavailable. Permission failures
        revoke the capability the operation needed; a store that refuses
        reads is unusable. Unknown failures leave the status unchanged.
        """
        if kind is FailureKind.CONNECTIVITY:
            return CapabilityStatus.unavailable()
        if kind is FailureKind.PERMISSION:
            if operation is CacheOperation.READ:
                return CapabilityStatus.unavailable()
            if operation is CacheOperation.WRITE:
                return replace(self, read_only=True)
            if operation is CacheOperation.SCAN:
                return replace(self, keys_command_allowed=False)
        return self

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
