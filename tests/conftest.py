from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Callable

import pytest

from tests.helpers import CONFIG_XML, write_tree


@pytest.fixture
def make_skeleton(tmp_path: Path) -> Callable[..., Path]:
    def _make(files: dict[str, str | bytes], *, name: str = "skel", config: str | None = CONFIG_XML) -> Path:
        tree = dict(files)
        if config is not None:
            tree.setdefault("config.xml", config)
        return write_tree(tmp_path / name, tree)

    return _make


@pytest.fixture
def scratch_base(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point tempfile at a private directory so scratch leftovers are observable."""
    base = tmp_path / "scratch"
    base.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(base))
    return base
