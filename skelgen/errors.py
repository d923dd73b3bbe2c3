"""
errors.py

Responsibility: The exception hierarchy shared by every skelgen module.

Fatal conditions (bad input, broken archive, missing descriptor) raise one of
these and bubble up to the CLI. Per-entry problems during materialization are
not exceptions at all; they are logged and recorded on the result.
"""

from __future__ import annotations

from pathlib import Path


class SkelgenError(RuntimeError):
    pass


class CLIError(SkelgenError):
    pass


class ArchiveError(SkelgenError):
    pass


class ArchiveOpenError(ArchiveError):
    pass


class ArchiveExtractError(ArchiveError):
    """An entry could not be extracted; `scratch_dir` may hold a partial tree."""

    def __init__(self, message: str, scratch_dir: Path) -> None:
        super().__init__(message)
        self.scratch_dir = scratch_dir


class ScratchCleanupError(ArchiveError):
    pass


class DescriptorError(SkelgenError):
    pass


class MissingDescriptorError(DescriptorError):
    pass
