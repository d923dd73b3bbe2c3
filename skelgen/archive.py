"""
archive.py

Responsibility: Turn a skeleton input (directory or zip archive) into a
directory on disk, and own the lifetime of any scratch directory created for
an archive.

- `extract()` expands a zip into a fresh temporary directory, entry by entry,
  copying bytes verbatim. Substitution never happens here.
- `open_skeleton()` is the scoped form used by the CLI: the scratch directory
  exists for the duration of the `with` block and is removed on every exit.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from typing import Iterator

from skelgen.errors import ArchiveExtractError, ArchiveOpenError, ScratchCleanupError

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "skel"


def _entry_target(root: Path, entry_name: str) -> Path:
    """
    Map an archive member name onto a path under `root`.

    Raises ValueError for names that would land outside of `root`.
    """
    rel = PurePosixPath(entry_name.replace("\\", "/"))
    if rel.is_absolute() or ".." in rel.parts:
        raise ValueError(f"entry escapes extraction root: {entry_name}")
    return root.joinpath(*rel.parts)


def extract(archive_path: str | Path) -> Path:
    """
    Extract `archive_path` into a new scratch directory and return its path.

    The archive is opened read-only. Raises ArchiveOpenError when it is not a
    readable zip file, and ArchiveExtractError (with `scratch_dir` set) when
    any single entry fails; the partial tree is left for the caller to remove.
    """
    path = Path(archive_path)
    try:
        archive = zipfile.ZipFile(path, "r")
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveOpenError(f"Unable to open archive '{path}': {e}") from e

    with archive:
        scratch_dir = Path(tempfile.mkdtemp(prefix=SCRATCH_PREFIX))
        logger.info("Using temporary directory '%s'", scratch_dir)

        for info in archive.infolist():
            try:
                target = _entry_target(scratch_dir, info.filename)
                if info.is_dir():
                    logger.debug("Creating directory '%s'", info.filename)
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                logger.debug("Unzipping file '%s'", info.filename)
                # Archives are not required to list parent directories.
                target.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info, "r") as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
            except (
                OSError,
                ValueError,
                EOFError,
                NotImplementedError,
                RuntimeError,
                zipfile.BadZipFile,
                zlib.error,
            ) as e:
                raise ArchiveExtractError(
                    f"Failed extracting '{info.filename}' from '{path}': {e}",
                    scratch_dir,
                ) from e

    return scratch_dir


def remove_scratch(scratch_dir: str | Path) -> None:
    """Delete a scratch directory tree. Raises ScratchCleanupError on failure."""
    logger.info("Removing unzip directory '%s'", scratch_dir)
    try:
        shutil.rmtree(scratch_dir)
    except FileNotFoundError:
        return
    except OSError as e:
        raise ScratchCleanupError(f"Unable to remove directory '{scratch_dir}': {e}") from e


def _remove_quietly(scratch_dir: Path) -> None:
    # Used on error paths, where the original error must win.
    try:
        remove_scratch(scratch_dir)
    except ScratchCleanupError as e:
        logger.error("%s", e)


@contextmanager
def open_skeleton(path: str | Path) -> Iterator[Path]:
    """
    Yield a directory holding the skeleton at `path`.

    Directories are yielded as-is. Anything else is treated as a zip archive,
    extracted to a scratch directory that is removed when the block exits,
    whether it completed or raised.
    """
    src = Path(path)
    if src.is_dir():
        yield src
        return

    try:
        scratch_dir = extract(src)
    except ArchiveExtractError as e:
        _remove_quietly(e.scratch_dir)
        raise

    try:
        yield scratch_dir
    except BaseException:
        _remove_quietly(scratch_dir)
        raise
    remove_scratch(scratch_dir)
