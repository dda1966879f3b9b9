"""
Pytest configuration and fixtures for the zstar tests.
"""
import io
import sys
import tarfile
from pathlib import Path

import pytest
import zstandard as zstd

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture
def sample_tree(tmp_path):
    """
    src/
      a.txt
      empty.txt      (zero length)
      emptydir/
      sub/b.bin
    """
    root = tmp_path / "src"
    (root / "sub").mkdir(parents=True)
    (root / "emptydir").mkdir()
    (root / "a.txt").write_text("hello zstar\n" * 100)
    (root / "empty.txt").write_bytes(b"")
    (root / "sub" / "b.bin").write_bytes(bytes(range(256)) * 40)
    return root


def build_tar(entries):
    """
    Raw tar bytes from (name, data) pairs, data None means a directory.
    Names are written verbatim so hostile names survive.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w") as tar:
        for name, data in entries:
            info = tarfile.TarInfo(name)
            if data is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            else:
                info.mode = 0o644
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def make_tar():
    def _make(entries):
        return io.BytesIO(build_tar(entries))
    return _make


@pytest.fixture
def make_archive(tmp_path):
    """Write a .zst archive holding the given entries and return its path"""
    def _make(entries, name="crafted.zst"):
        path = tmp_path / name
        path.write_bytes(zstd.ZstdCompressor(level=3).compress(build_tar(entries)))
        return path
    return _make


def snapshot(root: Path) -> dict:
    """Relative path -> bytes (None for directories) for everything under root"""
    result = {}
    for p in sorted(root.rglob("*")):
        rel = p.relative_to(root).as_posix()
        result[rel] = None if p.is_dir() else p.read_bytes()
    return result
