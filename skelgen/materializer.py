"""
materializer.py

Responsibility: Materialize a skeleton tree into an output directory.

Rules:
- Walk the skeleton root top-down in sorted order, visiting every directory
  (the root included) and every file once.
- Target path = output dir / [unique sub-directory] / path relative to the
  skeleton root, with `${...}` placeholders substituted in the whole string.
- File contents are substituted too. Binary files are not detected; bytes
  that are not UTF-8 pass through unchanged via `surrogateescape`.
- A failure on one entry is logged and recorded; the walk always goes on.
- Dry-run performs no filesystem mutation, it only plans.

This module does not prompt, parse arguments or deal with archives.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from skelgen.descriptor import Descriptor
from skelgen.substitutor import substitute

logger = logging.getLogger(__name__)

# Lets arbitrary bytes survive a decode/encode round trip unchanged.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def unique_subdir_name(skeleton_name: str) -> str:
    return f"{skeleton_name}-{time.time_ns()}"


@dataclass
class Skeleton:
    """
    Per-run context for one skeleton instantiation.

    `values` is read-only once collected; `unresolved` accumulates every
    placeholder left unsubstituted during the walk.
    """

    root: Path
    descriptor: Descriptor
    output_dir: Path
    values: dict[str, str] = field(default_factory=dict)
    dry_run: bool = False
    verbose: bool = False
    unique_subdir: bool = True
    subdir_name: str = ""
    unresolved: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        self.output_dir = Path(self.output_dir)
        if self.unique_subdir and not self.subdir_name:
            self.subdir_name = unique_subdir_name(self.descriptor.name)

    @property
    def base_dir(self) -> Path:
        """Directory the skeleton's relative tree is anchored under."""
        if self.unique_subdir:
            return self.output_dir / self.subdir_name
        return self.output_dir


@dataclass(frozen=True)
class EntryFailure:
    source: Path
    target: Path
    reason: str


@dataclass
class MaterializeResult:
    directories: list[Path] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)
    failures: list[EntryFailure] = field(default_factory=list)
    unresolved: set[str] = field(default_factory=set)


def _walk_error(error: OSError) -> None:
    logger.warning("Failed to read directory '%s': %s", error.filename, error.strerror or error)


def _iter_entries(root: Path, skip: set[Path]) -> Iterator[tuple[Path, bool]]:
    """
    Yield (path, is_dir) for `root` and everything below it, parents before
    children, siblings in lexicographic order.

    Directories in `skip` (resolved paths) are neither yielded nor descended
    into, so output written inside the skeleton root is never walked.
    """
    yield root, True
    for dirpath, dirnames, filenames in os.walk(root, onerror=_walk_error):
        current = Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if (current / d).resolve() not in skip)
        for name in dirnames:
            yield current / name, True
        for name in sorted(filenames):
            yield current / name, False


def target_path(skeleton: Skeleton, source: Path) -> Path:
    """Compute the substituted output path for a path inside the skeleton root."""
    rel = source.relative_to(skeleton.root)
    composed = os.path.normpath(os.path.join(skeleton.base_dir, rel))
    substituted, _ = substitute(composed, skeleton.values, skeleton.unresolved)
    return Path(substituted)


def _progress(skeleton: Skeleton, message: str, path: Path) -> None:
    level = logging.INFO if skeleton.verbose else logging.DEBUG
    logger.log(level, "%s %s", message, path)


def _materialize_dir(skeleton: Skeleton, source: Path, result: MaterializeResult) -> None:
    target = target_path(skeleton, source)
    _progress(skeleton, "Creating dir: ", target)
    if not skeleton.dry_run:
        # ValueError covers values that are not valid in a path (NUL bytes).
        try:
            target.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as e:
            logger.warning("Failed to create directory '%s': %s", target, e)
            result.failures.append(EntryFailure(source, target, str(e)))
            return
    result.directories.append(target)


def _materialize_file(skeleton: Skeleton, source: Path, result: MaterializeResult) -> None:
    target = target_path(skeleton, source)
    _progress(skeleton, "Creating file:", target)

    # The target exists (empty) even when the source turns out unreadable.
    if not skeleton.dry_run:
        try:
            target.touch()
        except (OSError, ValueError) as e:
            logger.warning("Failed to create file '%s': %s", target, e)
            result.failures.append(EntryFailure(source, target, str(e)))
            return

    try:
        original = source.read_bytes()
    except OSError as e:
        logger.warning("Failed to open file '%s': %s", source, e)
        result.failures.append(EntryFailure(source, target, str(e)))
        return

    text = original.decode(_ENCODING, errors=_ERRORS)
    contents, _ = substitute(text, skeleton.values, skeleton.unresolved)

    if not skeleton.dry_run:
        try:
            target.write_bytes(contents.encode(_ENCODING, errors=_ERRORS))
        except (OSError, ValueError) as e:
            logger.warning("Failed to write file '%s': %s", target, e)
            result.failures.append(EntryFailure(source, target, str(e)))
            return
    result.files.append(target)


def materialize(skeleton: Skeleton) -> MaterializeResult:
    """
    Materialize `skeleton` into its output directory.

    Returns the created (or, in dry-run, planned) directories and files, the
    per-entry failures, and the unresolved placeholder set, which is the same
    object as `skeleton.unresolved`.
    """
    root = skeleton.root
    if not root.is_dir():
        raise NotADirectoryError(f"Skeleton root is not a directory: {root}")

    skip = {skeleton.output_dir.resolve(), skeleton.base_dir.resolve()}
    result = MaterializeResult(unresolved=skeleton.unresolved)
    for source, is_dir in _iter_entries(root, skip):
        if is_dir:
            _materialize_dir(skeleton, source, result)
        else:
            _materialize_file(skeleton, source, result)

    logger.debug(
        "Materialized %d director(ies), %d file(s), %d failure(s)",
        len(result.directories),
        len(result.files),
        len(result.failures),
    )
    return result
