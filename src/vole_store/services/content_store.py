"""Content-addressed file store.

Uploads are staged owner-agnostically under their content hash and later
committed into an owner's file directory::

    stage(stream)            -> <staging>/<hash>
    commit(hash, owner_dir)  -> <owner_dir>/<hash>

Staging writes to a uniquely named temporary file while hashing, then
publishes it with ``os.replace``. Committing hard-links the staged blob into
place, which is atomic and refuses to overwrite, then unlinks the staged
copy. An owner whose staged copy was already consumed by another owner links
from that owner's committed copy. Neither step ever exposes a partially
written blob under a hash name.
"""

from __future__ import annotations

import errno
import logging
import os
import uuid
from collections.abc import Iterable
from itertools import chain
from pathlib import Path
from typing import BinaryIO

from vole_store.core.errors import (
    ConflictError,
    NotFoundError,
    PayloadTooLargeError,
    StoreError,
    StoreIOError,
)
from vole_store.utils.hash import is_valid_hash, new_hasher

# Configure logger for this module
logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
TEMP_PREFIX = ".upload-"


class ContentStore:
    """Stage uploaded bytes by content hash and commit them to owners."""

    def __init__(self, staging_dir: Path, *, algorithm: str = "sha256") -> None:
        """Initialize the store.

        Args:
            staging_dir: Directory holding staged, not yet committed blobs.
            algorithm: ``hashlib`` algorithm used to address content.
        """
        self.staging_dir = Path(staging_dir)
        self.algorithm = algorithm
        # Fail early on an unknown algorithm rather than on first upload.
        new_hasher(self.algorithm)

    def ensure_layout(self) -> None:
        """Create the staging directory if needed."""
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise StoreIOError(f"Cannot create staging area {self.staging_dir}: {err}") from err

    def staged_path(self, file_hash: str) -> Path:
        """Return where a staged blob with ``file_hash`` lives."""
        return self.staging_dir / self._checked(file_hash)

    def blob_path(self, file_hash: str, owner_dir: Path) -> Path:
        """Return where a committed blob with ``file_hash`` lives for an owner."""
        return Path(owner_dir) / self._checked(file_hash)

    def is_staged(self, file_hash: str) -> bool:
        """Return True if a blob with ``file_hash`` is waiting in staging."""
        return self.staged_path(file_hash).is_file()

    def stage(
        self,
        source: BinaryIO | bytes,
        *,
        expected_size: int | None = None,
        max_size: int | None = None,
    ) -> str:
        """Consume ``source`` into the staging area and return its hash.

        The digest is computed while the bytes are written. Staging the same
        content twice leaves one blob: the second upload is discarded once its
        hash is known.

        Args:
            source: Binary stream (read until EOF) or raw bytes.
            expected_size: If given, the number of bytes the stream must yield.
            max_size: If given, reading stops as soon as the stream yields more
                bytes than this.

        Returns:
            Hex digest addressing the staged blob.

        Raises:
            StoreIOError: On any filesystem failure or a truncated stream. No
                staged artifact is left behind.
            PayloadTooLargeError: If the stream exceeds ``max_size``.
            ConflictError: If a different blob already sits under the same hash.
        """
        self.ensure_layout()
        hasher = new_hasher(self.algorithm)
        tmp_path = self.staging_dir / f"{TEMP_PREFIX}{uuid.uuid4().hex}"
        size = 0
        try:
            with open(tmp_path, "xb") as tmp:
                for chunk in _iter_chunks(source):
                    size += len(chunk)
                    if max_size is not None and size > max_size:
                        raise PayloadTooLargeError(f"Uploads are limited to {max_size} bytes")
                    hasher.update(chunk)
                    tmp.write(chunk)
                tmp.flush()
                os.fsync(tmp.fileno())

            if expected_size is not None and size != expected_size:
                raise StoreIOError(
                    f"Truncated upload: expected {expected_size} bytes, got {size}"
                )

            file_hash = hasher.hexdigest()
            final_path = self.staging_dir / file_hash
            try:
                existing_size = final_path.stat().st_size
            except FileNotFoundError:
                existing_size = None
            if existing_size is not None:
                if existing_size != size:
                    raise ConflictError(
                        f"Hash {file_hash} already staged with {existing_size} bytes, "
                        f"upload has {size}"
                    )
                logger.debug("Blob %s already staged; discarding duplicate upload", file_hash)
                tmp_path.unlink()
                return file_hash

            os.replace(tmp_path, final_path)
        except StoreError:
            _remove_quietly(tmp_path)
            raise
        except OSError as err:
            _remove_quietly(tmp_path)
            raise StoreIOError(f"Staging failed: {err}") from err
        except BaseException:
            _remove_quietly(tmp_path)
            raise

        logger.info("Staged blob %s (%d bytes)", file_hash, size)
        return file_hash

    def commit(
        self,
        file_hash: str,
        owner_dir: Path,
        *,
        committed_copies: Iterable[Path] = (),
    ) -> Path:
        """Link a blob into ``owner_dir`` under its hash.

        The staged blob is the preferred source. Once one owner has committed
        it the staged copy is gone, so later owners who staged the same bytes
        link from ``committed_copies`` instead. The staged copy is removed
        whenever the owner ends up holding the blob, including when it already
        did. Two callers committing the same hash for the same owner race to
        the same result.

        Args:
            file_hash: Content hash to commit.
            owner_dir: Directory receiving the blob.
            committed_copies: Other owners' copies of the blob, tried in order
                when nothing is staged. Consumed lazily.

        Returns:
            Path of the committed blob.

        Raises:
            NotFoundError: If the blob is neither staged nor committed anywhere.
            StoreIOError: If the relocation fails. The staged copy is kept
                so the commit can be retried.
        """
        staged = self.staged_path(file_hash)
        owner_dir = Path(owner_dir)
        destination = owner_dir / file_hash
        if destination.is_file():
            logger.debug("Blob %s already committed to %s", file_hash, owner_dir)
            _remove_quietly(staged)
            return destination

        try:
            owner_dir.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise StoreIOError(f"Cannot create {owner_dir}: {err}") from err

        for source in chain((staged,), committed_copies):
            if Path(source) == destination:
                continue
            try:
                os.link(source, destination)
            except FileExistsError:
                logger.debug("Blob %s committed concurrently to %s", file_hash, owner_dir)
                break
            except FileNotFoundError:
                if destination.is_file():
                    break
                continue
            except OSError as err:
                if err.errno == errno.EXDEV:
                    raise StoreIOError(
                        f"Cannot commit {file_hash}: {source} and {owner_dir} are on different devices"
                    ) from err
                raise StoreIOError(f"Cannot commit {file_hash} to {owner_dir}: {err}") from err
            else:
                logger.info("Committed blob %s to %s from %s", file_hash, owner_dir, source)
                break
        else:
            raise NotFoundError(f"File {file_hash} was never staged")

        _remove_quietly(staged)
        return destination

    @staticmethod
    def _checked(file_hash: str) -> str:
        if not is_valid_hash(file_hash):
            raise NotFoundError(f"Not a content hash: {file_hash!r}")
        return file_hash


def _iter_chunks(source: BinaryIO | bytes):
    if isinstance(source, (bytes, bytearray, memoryview)):
        if source:
            yield bytes(source)
        return
    while True:
        chunk = source.read(CHUNK_SIZE)
        if not chunk:
            return
        yield chunk


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as err:  # pragma: no cover - best effort cleanup
        logger.warning("Could not remove %s: %s", path, err)
