"""gitvault: a content-addressed object store in git's loose-object format.

Stores file contents (blobs), directory snapshots (trees) and commits under
the SHA-1 of their canonical encoding, zlib-compressed on disk.
"""

__version__ = "0.1.0"

from gitvault.core.vault import ObjectVault, init_vault
from gitvault.models.config import VaultConfig

__all__ = ["ObjectVault", "VaultConfig", "init_vault", "__version__"]
