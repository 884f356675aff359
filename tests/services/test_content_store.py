"""Tests for the content-addressed file store."""

from __future__ import annotations

import errno
import hashlib
import io
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from vole_store.core.errors import (
    ConflictError,
    NotFoundError,
    PayloadTooLargeError,
    StoreIOError,
)
from vole_store.services import content_store as content_store_module
from vole_store.services.content_store import TEMP_PREFIX, ContentStore

PAYLOAD = b"vole attachment bytes"
PAYLOAD_HASH = hashlib.sha256(PAYLOAD).hexdigest()


class _FailingStream(io.RawIOBase):
    """Stream that yields one chunk and then fails like a dropped connection."""

    def __init__(self) -> None:
        self._sent = False

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        if self._sent:
            raise OSError(errno.ECONNRESET, "connection reset")
        self._sent = True
        return b"partial"


@pytest.fixture()
def content(tmp_path) -> ContentStore:
    return ContentStore(tmp_path / "staging")


def _staging_entries(content: ContentStore) -> list[str]:
    return sorted(path.name for path in content.staging_dir.iterdir())


def test_stage_returns_content_hash(content: ContentStore) -> None:
    file_hash = content.stage(io.BytesIO(PAYLOAD))
    assert file_hash == PAYLOAD_HASH
    assert content.staged_path(file_hash).read_bytes() == PAYLOAD
    assert content.is_staged(file_hash)


def test_stage_accepts_raw_bytes(content: ContentStore) -> None:
    assert content.stage(PAYLOAD) == PAYLOAD_HASH


def test_stage_same_content_twice_keeps_one_blob(content: ContentStore) -> None:
    first = content.stage(io.BytesIO(PAYLOAD))
    second = content.stage(io.BytesIO(PAYLOAD))
    assert first == second
    assert _staging_entries(content) == [PAYLOAD_HASH]


def test_stage_truncated_stream_leaves_nothing(content: ContentStore) -> None:
    with pytest.raises(StoreIOError, match="Truncated"):
        content.stage(io.BytesIO(PAYLOAD), expected_size=len(PAYLOAD) + 10)
    assert _staging_entries(content) == []


def test_stage_read_failure_leaves_nothing(content: ContentStore) -> None:
    with pytest.raises(StoreIOError):
        content.stage(_FailingStream())
    assert _staging_entries(content) == []


def test_stage_detects_size_mismatch_under_same_hash(content: ContentStore) -> None:
    content.ensure_layout()
    (content.staging_dir / PAYLOAD_HASH).write_bytes(b"different bytes entirely, longer")
    with pytest.raises(ConflictError):
        content.stage(PAYLOAD)
    assert not any(name.startswith(TEMP_PREFIX) for name in _staging_entries(content))


def test_stage_supports_configured_algorithm(tmp_path) -> None:
    content = ContentStore(tmp_path / "staging", algorithm="md5")
    assert content.stage(PAYLOAD) == hashlib.md5(PAYLOAD).hexdigest()


def test_unknown_algorithm_is_rejected(tmp_path) -> None:
    with pytest.raises(ValueError):
        ContentStore(tmp_path / "staging", algorithm="not-a-digest")


def test_commit_moves_blob_into_owner_dir(content: ContentStore, tmp_path) -> None:
    owner_dir = tmp_path / "users" / "alice" / "files"
    file_hash = content.stage(PAYLOAD)

    committed = content.commit(file_hash, owner_dir)

    assert committed == owner_dir / file_hash
    assert committed.read_bytes() == PAYLOAD
    assert not content.is_staged(file_hash)


def test_commit_is_idempotent(content: ContentStore, tmp_path) -> None:
    owner_dir = tmp_path / "files"
    file_hash = content.stage(PAYLOAD)
    content.commit(file_hash, owner_dir)

    # Same bytes uploaded again after the first commit.
    assert content.stage(PAYLOAD) == file_hash
    content.commit(file_hash, owner_dir)

    assert sorted(path.name for path in owner_dir.iterdir()) == [file_hash]
    assert not content.is_staged(file_hash)


def test_commit_unknown_hash_is_not_found(content: ContentStore, tmp_path) -> None:
    with pytest.raises(NotFoundError):
        content.commit("ab" * 32, tmp_path / "files")


def test_commit_rejects_non_hash_names(content: ContentStore, tmp_path) -> None:
    with pytest.raises(NotFoundError):
        content.commit("../escape", tmp_path / "files")


def test_commit_failure_keeps_staged_copy(
    content: ContentStore, tmp_path, monkeypatch: pytest.MonkeyPatch
) -> None:
    owner_dir = tmp_path / "files"
    file_hash = content.stage(PAYLOAD)

    def _cross_device(src, dst):
        raise OSError(errno.EXDEV, "Invalid cross-device link")

    monkeypatch.setattr(content_store_module.os, "link", _cross_device)
    with pytest.raises(StoreIOError, match="different devices"):
        content.commit(file_hash, owner_dir)

    assert content.is_staged(file_hash)
    assert not (owner_dir / file_hash).exists()

    monkeypatch.undo()
    assert content.commit(file_hash, owner_dir).read_bytes() == PAYLOAD


def test_stage_stops_reading_past_max_size(content: ContentStore) -> None:
    stream = io.BytesIO(b"x" * (content_store_module.CHUNK_SIZE * 3))
    with pytest.raises(PayloadTooLargeError):
        content.stage(stream, max_size=content_store_module.CHUNK_SIZE)
    assert stream.tell() == content_store_module.CHUNK_SIZE * 2
    assert _staging_entries(content) == []


def test_stage_at_max_size_is_accepted(content: ContentStore) -> None:
    assert content.stage(PAYLOAD, max_size=len(PAYLOAD)) == PAYLOAD_HASH


def test_concurrent_stage_of_identical_bytes_keeps_one_blob(content: ContentStore) -> None:
    barrier = threading.Barrier(8)

    def _stage(_: int) -> str:
        barrier.wait()
        return content.stage(io.BytesIO(PAYLOAD))

    with ThreadPoolExecutor(max_workers=8) as pool:
        hashes = set(pool.map(_stage, range(8)))

    assert hashes == {PAYLOAD_HASH}
    assert _staging_entries(content) == [PAYLOAD_HASH]


def test_concurrent_commits_for_one_owner_leave_one_blob(content: ContentStore, tmp_path) -> None:
    owner_dir = tmp_path / "files"
    file_hash = content.stage(PAYLOAD)
    barrier = threading.Barrier(8)

    def _commit(_: int):
        barrier.wait()
        return content.commit(file_hash, owner_dir)

    with ThreadPoolExecutor(max_workers=8) as pool:
        paths = set(pool.map(_commit, range(8)))

    assert paths == {owner_dir / file_hash}
    assert sorted(path.name for path in owner_dir.iterdir()) == [file_hash]
    assert (owner_dir / file_hash).read_bytes() == PAYLOAD
    assert not content.is_staged(file_hash)


def test_commit_links_from_committed_copy_once_staging_is_consumed(
    content: ContentStore, tmp_path
) -> None:
    alice_dir = tmp_path / "alice" / "files"
    bob_dir = tmp_path / "bob" / "files"
    first = content.stage(PAYLOAD)
    second = content.stage(PAYLOAD)
    content.commit(first, alice_dir)
    assert not content.is_staged(second)

    committed = content.commit(second, bob_dir, committed_copies=[alice_dir / second])

    assert committed == bob_dir / second
    assert committed.read_bytes() == PAYLOAD


def test_commit_skips_missing_committed_copies(content: ContentStore, tmp_path) -> None:
    with pytest.raises(NotFoundError, match="never staged"):
        content.commit(PAYLOAD_HASH, tmp_path / "files", committed_copies=[tmp_path / "gone" / PAYLOAD_HASH])
