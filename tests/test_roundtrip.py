"""End to end: compress_files followed by decompress_file."""
import pytest

from core.packager.packager import Packager
from core.unpacker.unpacker import Unpacker
from tests.conftest import snapshot


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_directory_round_trip(sample_tree, workdir):
    archive = workdir / "src.zst"
    Packager().compress_files([str(sample_tree)], str(archive), level=19)

    result = Unpacker().decompress_file(str(archive), "restored")

    restored = workdir / "restored"
    assert result["extracted_files"] == 3
    assert snapshot(restored / "src") == snapshot(sample_tree)
    assert (restored / "src" / "emptydir").is_dir()
    assert (restored / "src" / "empty.txt").read_bytes() == b""


def test_mixed_sources_round_trip(sample_tree, workdir):
    loose = workdir / "loose.txt"
    loose.write_text("standalone")

    stats = Packager().compress_files([str(sample_tree / "sub"), str(loose)])
    assert stats["output_file"] == "archive.zst"

    result = Unpacker().decompress_file("archive.zst")

    restored = workdir / "archive_extracted"
    assert result["extracted_files"] == 2
    assert (restored / "sub" / "b.bin").read_bytes() == (sample_tree / "sub" / "b.bin").read_bytes()
    assert (restored / "loose.txt").read_text() == "standalone"


def test_repeated_extraction_is_identical(sample_tree, workdir):
    Packager().compress_files([str(sample_tree)], "tree.zst")

    Unpacker().decompress_file("tree.zst")
    first = snapshot(workdir / "tree_extracted")
    Unpacker().decompress_file("tree.zst")

    assert snapshot(workdir / "tree_extracted") == first


@pytest.mark.parametrize("level", [1, 3, 19])
def test_round_trip_at_levels(sample_tree, workdir, level):
    stats = Packager().compress_files([str(sample_tree / "a.txt")], f"a{level}.zst", level=level)
    assert stats["level"] == level
    assert stats["compressed_size"] < stats["original_size"]

    Unpacker().decompress_file(f"a{level}.zst", f"out{level}")

    assert (workdir / f"out{level}" / "a.txt").read_bytes() == (sample_tree / "a.txt").read_bytes()
