"""Shared test fixtures for gitvault."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from gitvault.core.object_store import ObjectStore
from gitvault.core.revision_assembler import RevisionAssembler
from gitvault.core.snapshot_builder import SnapshotBuilder
from gitvault.core.vault import ObjectVault
from gitvault.models.config import VaultConfig, WalkPolicy


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test vaults."""
    return tmp_path

@pytest.fixture
def vault_config(tmp_dir: Path) -> VaultConfig:
    """Provide a VaultConfig rooted in a temp directory."""
    return VaultConfig(vault_dir=tmp_dir / ".gitvault")

@pytest.fixture
def strict_config(vault_config: VaultConfig) -> VaultConfig:
    return vault_config.model_copy(update={"walk_policy": WalkPolicy.STRICT})

@pytest.fixture
def object_store(vault_config: VaultConfig) -> ObjectStore:
    """Provide a fresh ObjectStore in a temp directory."""
    return ObjectStore(vault_config)

@pytest.fixture
def builder(object_store: ObjectStore, vault_config: VaultConfig) -> SnapshotBuilder:
    return SnapshotBuilder(object_store, vault_config)

@pytest.fixture
def assembler(object_store: ObjectStore, vault_config: VaultConfig) -> RevisionAssembler:
    return RevisionAssembler(object_store, vault_config)

@pytest.fixture
def vault(vault_config: VaultConfig) -> ObjectVault:
    """Provide an ObjectVault wired to the temp config."""
    return ObjectVault(vault_config)

@pytest.fixture
def make_tree(tmp_dir: Path) -> Callable[[dict], Path]:
    """Factory fixture: materialize a nested dict as files under a work dir.

    String or bytes values become files, dict values become directories.
    """

    def _factory(layout: dict, root: Path | None = None) -> Path:
        root = root or tmp_dir / "work"
        root.mkdir(parents=True, exist_ok=True)
        for name, value in layout.items():
            target = root / name
            if isinstance(value, dict):
                _factory(value, target)
            elif isinstance(value, bytes):
                target.write_bytes(value)
            else:
                target.write_text(value)
        return root

    return _factory
