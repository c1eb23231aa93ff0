"""Outcome records for store writes and snapshot builds."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from gitvault.models.objects import ObjectKind, VaultObject


class WriteStatus(str, Enum):
    STORED = "stored"
    EXISTING = "existing"  # already durably stored under the same address


class WriteResult(BaseModel):
    """Result of persisting one object."""

    model_config = ConfigDict(frozen=True)

    address: str
    kind: ObjectKind
    status: WriteStatus
    path: Path

    @property
    def created(self) -> bool:
        return self.status is WriteStatus.STORED


class SkippedEntry(BaseModel):
    """A child left out of a best-effort snapshot build."""

    model_config = ConfigDict(frozen=True)

    path: Path
    reason: str


class BuildReport(BaseModel):
    """Summary of one snapshot build.

    ``skipped`` is non-empty only under the best-effort walk policy; each
    skipped child changes the resulting snapshot's address.
    """

    model_config = ConfigDict(frozen=True)

    root: Path
    root_address: str
    objects_written: int = 0
    objects_existing: int = 0
    skipped: tuple[SkippedEntry, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.skipped


class BuildResult(BaseModel):
    """The root object of a snapshot build together with its report."""

    model_config = ConfigDict(frozen=True)

    root: VaultObject
    report: BuildReport

    @property
    def address(self) -> str:
        return self.root.address
