"""gitvault data models — all Pydantic v2, all frozen (immutable)."""

from gitvault.models.config import VaultConfig, WalkPolicy
from gitvault.models.objects import (
    DIRECTORY_MODE,
    FILE_MODE,
    Author,
    ContentObject,
    ObjectKind,
    RevisionObject,
    SnapshotEntry,
    SnapshotObject,
    VaultObject,
)
from gitvault.models.reports import (
    BuildReport,
    BuildResult,
    SkippedEntry,
    WriteResult,
    WriteStatus,
)

__all__ = [
    # objects
    "ObjectKind",
    "ContentObject",
    "SnapshotEntry",
    "SnapshotObject",
    "Author",
    "RevisionObject",
    "VaultObject",
    "FILE_MODE",
    "DIRECTORY_MODE",
    # config
    "VaultConfig",
    "WalkPolicy",
    # reports
    "WriteStatus",
    "WriteResult",
    "SkippedEntry",
    "BuildReport",
    "BuildResult",
]
