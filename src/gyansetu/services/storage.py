"""Blob storage for images attached to questions, answers and replies.

Objects live on the local filesystem under ``MEDIA_ROOT`` and are served
from ``MEDIA_BASE_URL``. Paths are always relative to the store root.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from gyansetu.core.settings import settings

logger = logging.getLogger(__name__)


class BlobStoreError(RuntimeError):
    """Raised when a blob cannot be written or a path escapes the store root."""


class BlobStore:
    """Filesystem-backed object store issuing public URLs."""

    def __init__(self, root: str | Path, base_url: str) -> None:
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")

    def local_path(self, path: str) -> Path:
        """Map a store path onto the filesystem, refusing paths that escape the root."""
        relative = PurePosixPath(path.lstrip("/"))
        if ".." in relative.parts or not relative.parts:
            raise BlobStoreError(f"Invalid blob path: {path!r}")
        return self.root.joinpath(*relative.parts)

    def upload(self, path: str, data: bytes) -> str:
        """Store ``data`` at ``path`` and return its public URL."""
        target = self.local_path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise BlobStoreError(f"Failed to store {path}: {exc}") from exc
        logger.info("Stored blob %s (%d bytes)", path, len(data))
        return self.get_public_url(path)

    def get_public_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def path_from_url(self, url: str | None) -> str | None:
        """Return the store path for one of our public URLs, or None for foreign URLs."""
        if not url:
            return None
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix):] or None

    def owned_path(self, url: str | None, owner_id: int) -> str | None:
        """Return the store path of ``url`` when it lies in the owner's ``<id>/`` prefix."""
        path = self.path_from_url(url)
        if path is None or not path.startswith(f"{owner_id}/"):
            return None
        return path

    def remove(self, paths: Iterable[str]) -> int:
        """Delete the given blobs; missing blobs are ignored. Returns the count removed."""
        removed = 0
        for path in paths:
            try:
                target = self.local_path(path)
                target.unlink()
                removed += 1
            except FileNotFoundError:
                continue
            except (OSError, BlobStoreError) as exc:
                logger.warning("Failed to remove blob %s: %s", path, exc)
        return removed

    def remove_owned(self, images: Iterable[tuple[int, str | None]]) -> int:
        """Delete blobs given as ``(owner_id, url)`` pairs.

        Only URLs inside the owner's own prefix are touched; foreign URLs and
        blobs uploaded by someone else are skipped.
        """
        paths = [p for p in (self.owned_path(url, owner) for owner, url in images) if p]
        if not paths:
            return 0
        return self.remove(paths)


class _BlobStoreSingleton:
    _instance: BlobStore | None = None

    @classmethod
    def get_instance(cls) -> BlobStore:
        if cls._instance is None:
            cls._instance = BlobStore(settings.media_root, settings.media_base_url)
        return cls._instance


def get_blob_store() -> BlobStore:
    """Return the shared blob store instance."""
    return _BlobStoreSingleton.get_instance()
