"""Turn configured asset paths into upload jobs.

Regular files upload as-is. A directory is zipped next to itself as
``<name>.zip``; both the zip and the source directory are removed when the
``packaged`` scope exits, whether or not the upload succeeded.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from ghrelease.output.console import ConsoleProtocol
from ghrelease.release.errors import PackagingError
from ghrelease.release.model import AssetJob

__all__ = ["packaged", "plan_job", "zip_directory"]


def _collect_dir(base_dir: Path) -> list[tuple[Path, str]]:
    out: list[tuple[Path, str]] = []
    for p in sorted(base_dir.rglob("*")):
        if p.is_dir():
            continue
        out.append((p, p.relative_to(base_dir).as_posix()))
    return out


def zip_directory(source: Path, zip_path: Path) -> Path:
    """Write the recursive contents of ``source`` into ``zip_path``.

    Raises:
        PackagingError: If the archive cannot be written.
    """
    try:
        # Build outputs may carry mtime=0, which ZIP cannot represent.
        with ZipFile(zip_path, "w", compression=ZIP_DEFLATED, strict_timestamps=False) as zf:
            for src, arc in _collect_dir(source):
                zf.write(src, arcname=arc)
    except OSError as e:
        raise PackagingError(f"cannot zip {source} into {zip_path}: {e}") from e
    return zip_path


def _remove_packaged(source: Path, zip_path: Path) -> None:
    try:
        zip_path.unlink(missing_ok=True)
        # A linked directory loses only the link, never the target tree.
        if source.is_symlink():
            source.unlink()
        elif source.exists():
            shutil.rmtree(source)
    except OSError as e:
        raise PackagingError(f"cannot clean up {source}: {e}") from e


def plan_job(path: Path) -> AssetJob | None:
    """Describe the upload for ``path`` without touching the filesystem."""
    if not path.exists():
        return None
    if path.is_dir():
        zip_path = path.parent / f"{path.name}.zip"
        return AssetJob(source=path, upload_path=zip_path, name=zip_path.name, packaged=True)
    return AssetJob(source=path, upload_path=path, name=path.name)


@contextmanager
def packaged(path: Path, *, console: ConsoleProtocol) -> Iterator[AssetJob | None]:
    """Yield the upload job for ``path``, or None if it does not exist.

    Raises:
        PackagingError: If a directory asset cannot be zipped or cleaned up.
    """
    job = plan_job(path)
    if job is None:
        console.warning(f"File {path} does not exist.")
        yield None
        return

    if not job.packaged:
        yield job
        return

    if job.upload_path.exists():
        console.warning(f"Overwriting existing {job.upload_path}")
    try:
        zip_directory(path, job.upload_path)
        console.debug(f"zipped {path} -> {job.upload_path}")
        yield job
    finally:
        _remove_packaged(path, job.upload_path)
