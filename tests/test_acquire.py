from pathlib import Path

import pytest

from archroot_installer.lib.acquire import acquire_artifacts, ensure_artifact
from archroot_installer.lib.errors import FetchError, VerificationError
from archroot_installer.lib.repo_index import PackageRecord

from .fakes import FakeFetcher, FakeHasher, sha256_bytes

PAYLOAD = b"package bytes"
MIRROR = "https://mirror.example/archlinux"


def _record(name: str = "bash", data: bytes = PAYLOAD) -> PackageRecord:
    return PackageRecord(
        name=name,
        version="1-1",
        depends=(),
        provides=(),
        filename=f"{name}-1-1-x86_64.pkg.tar.xz",
        sha256=sha256_bytes(data),
        directory=Path("/nonexistent"),
    )


def _ensure(record, cache: Path, fetcher: FakeFetcher):
    return ensure_artifact(
        record,
        cache_dir=cache,
        mirror=MIRROR,
        repo="core",
        arch="x86_64",
        fetcher=fetcher,
        hasher=FakeHasher(),
    )


def test_valid_cache_skips_fetch(tmp_path: Path) -> None:
    rec = _record()
    (tmp_path / rec.filename).write_bytes(PAYLOAD)
    fetcher = FakeFetcher({rec.filename: PAYLOAD})

    artifact = _ensure(rec, tmp_path, fetcher)

    assert fetcher.fetched == []
    assert artifact.path == tmp_path / rec.filename


def test_missing_artifact_is_fetched_from_repo_url(tmp_path: Path) -> None:
    rec = _record()
    fetcher = FakeFetcher({rec.filename: PAYLOAD})

    _ensure(rec, tmp_path, fetcher)

    assert fetcher.fetched == [f"{MIRROR}/core/os/x86_64/{rec.filename}"]
    assert (tmp_path / rec.filename).read_bytes() == PAYLOAD


def test_corrupt_cache_is_refetched_once(tmp_path: Path) -> None:
    rec = _record()
    (tmp_path / rec.filename).write_bytes(b"truncated")
    fetcher = FakeFetcher({rec.filename: PAYLOAD})

    _ensure(rec, tmp_path, fetcher)

    assert len(fetcher.fetched) == 1
    assert (tmp_path / rec.filename).read_bytes() == PAYLOAD


def test_bad_download_fails_without_retry(tmp_path: Path) -> None:
    rec = _record()
    fetcher = FakeFetcher({rec.filename: b"mirror served garbage"})

    with pytest.raises(VerificationError):
        _ensure(rec, tmp_path, fetcher)
    assert len(fetcher.fetched) == 1


def test_fetch_failure_aborts_pipeline(tmp_path: Path) -> None:
    good, missing, later = _record("a"), _record("b"), _record("c")
    fetcher = FakeFetcher({good.filename: PAYLOAD, later.filename: PAYLOAD})

    with pytest.raises(FetchError):
        acquire_artifacts(
            [good, missing, later],
            cache_dir=tmp_path / "packages",
            mirror=MIRROR,
            repo="core",
            arch="x86_64",
            fetcher=fetcher,
            hasher=FakeHasher(),
        )
    assert not any(u.endswith(later.filename) for u in fetcher.fetched)


def test_rerun_is_idempotent(tmp_path: Path) -> None:
    recs = [_record("a"), _record("b")]
    fetcher = FakeFetcher({r.filename: PAYLOAD for r in recs})
    kwargs = dict(cache_dir=tmp_path, mirror=MIRROR, repo="core", arch="x86_64", fetcher=fetcher, hasher=FakeHasher())

    acquire_artifacts(recs, **kwargs)
    acquire_artifacts(recs, **kwargs)

    assert len(fetcher.fetched) == 2
