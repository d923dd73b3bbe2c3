from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from skelgen.archive import extract, open_skeleton, remove_scratch
from skelgen.errors import ArchiveExtractError, ArchiveOpenError

from tests.helpers import corrupt_entry, snapshot, write_tree, zip_tree

BINARY = bytes(range(256)) * 4


def test_extract_reproduces_tree_and_bytes(tmp_path: Path, scratch_base: Path) -> None:
    src = write_tree(
        tmp_path / "src",
        {
            "config.xml": "<skeleton/>",
            "docs/readme.txt": "Hello ${proj}!\n",
            "assets/logo.bin": BINARY,
        },
    )
    (src / "empty").mkdir()
    archive = zip_tree(src, tmp_path / "skel.zip")

    scratch = extract(archive)

    assert scratch.parent == scratch_base
    assert (scratch / "docs" / "readme.txt").read_bytes() == b"Hello ${proj}!\n"
    assert (scratch / "assets" / "logo.bin").read_bytes() == BINARY
    assert (scratch / "empty").is_dir()
    assert snapshot(scratch) == snapshot(src)


def test_extract_creates_missing_parents(tmp_path: Path, scratch_base: Path) -> None:
    archive = tmp_path / "flat.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("a/b/c.txt", "deep")

    scratch = extract(archive)
    assert (scratch / "a" / "b" / "c.txt").read_text() == "deep"


def test_extract_leaves_archive_untouched(tmp_path: Path, scratch_base: Path) -> None:
    archive = zip_tree(write_tree(tmp_path / "src", {"f.txt": "x"}), tmp_path / "skel.zip")
    before = archive.read_bytes()
    extract(archive)
    assert archive.read_bytes() == before


def test_extract_rejects_non_archive(tmp_path: Path, scratch_base: Path) -> None:
    bogus = tmp_path / "not-a.zip"
    bogus.write_text("plain text", encoding="utf-8")

    with pytest.raises(ArchiveOpenError):
        extract(bogus)
    assert list(scratch_base.iterdir()) == []


def test_extract_reports_scratch_dir_on_entry_failure(tmp_path: Path, scratch_base: Path) -> None:
    archive = tmp_path / "evil.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("ok.txt", "fine")
        zf.writestr("../escape.txt", "nope")

    with pytest.raises(ArchiveExtractError) as excinfo:
        extract(archive)

    scratch = excinfo.value.scratch_dir
    assert scratch.parent == scratch_base
    assert (scratch / "ok.txt").read_text() == "fine"
    assert not (scratch_base / "escape.txt").exists()


def test_remove_scratch_tolerates_missing_dir(tmp_path: Path) -> None:
    remove_scratch(tmp_path / "gone")


def test_open_skeleton_yields_directory_unchanged(tmp_path: Path) -> None:
    src = write_tree(tmp_path / "src", {"f.txt": "x"})
    with open_skeleton(src) as root:
        assert root == src
    assert (src / "f.txt").exists()


def test_open_skeleton_removes_scratch_after_use(tmp_path: Path, scratch_base: Path) -> None:
    archive = zip_tree(write_tree(tmp_path / "src", {"f.txt": "x"}), tmp_path / "skel.zip")

    with open_skeleton(archive) as root:
        assert (root / "f.txt").read_text() == "x"
        assert root.parent == scratch_base

    assert not root.exists()
    assert list(scratch_base.iterdir()) == []


def test_open_skeleton_removes_scratch_on_error(tmp_path: Path, scratch_base: Path) -> None:
    archive = zip_tree(write_tree(tmp_path / "src", {"f.txt": "x"}), tmp_path / "skel.zip")

    with pytest.raises(RuntimeError, match="boom"):
        with open_skeleton(archive):
            raise RuntimeError("boom")

    assert list(scratch_base.iterdir()) == []


def test_open_skeleton_cleans_partial_extraction(tmp_path: Path, scratch_base: Path) -> None:
    archive = tmp_path / "evil.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("ok.txt", "fine")
        zf.writestr("/abs.txt", "nope")

    with pytest.raises(ArchiveExtractError):
        with open_skeleton(archive):
            pass

    assert list(scratch_base.iterdir()) == []


def _deflated_skeleton(tmp_path: Path) -> Path:
    archive = tmp_path / "deflated.zip"
    with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("config.xml", "<skeleton><name>demo</name></skeleton>")
        zf.writestr("README.md", "Hello ${proj}!\n" * 200)
    return corrupt_entry(archive, "README.md")


def test_extract_wraps_corrupt_compressed_data(tmp_path: Path, scratch_base: Path) -> None:
    archive = _deflated_skeleton(tmp_path)

    with pytest.raises(ArchiveExtractError) as excinfo:
        extract(archive)

    assert "README.md" in str(excinfo.value)
    assert excinfo.value.scratch_dir.parent == scratch_base


def test_open_skeleton_cleans_up_after_corrupt_entry(tmp_path: Path, scratch_base: Path) -> None:
    archive = _deflated_skeleton(tmp_path)

    with pytest.raises(ArchiveExtractError):
        with open_skeleton(archive):
            pass

    assert list(scratch_base.iterdir()) == []
