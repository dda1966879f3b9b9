"""
zstar Packager
Walks source paths into a tar stream, compressed with zstd streaming.
"""
import os
import time
import tempfile
import shutil
import tarfile
from pathlib import Path
from typing import BinaryIO, Iterator, List, Tuple, Union
import zstandard as zstd
from ..utils.logger import logger
from ..utils.paths import sanitize_tar_path
from ..errors import ConfigError, ArchiveIOError
from ..config import config
from .entry import ContainerEntry


class Packager:
    COMPRESSION_LEVELS = {
        'low':    3,
        'medium': 10,
        'high':   19
    }

    EXTENSION = '.zst'
    DEFAULT_ARCHIVE_NAME = 'archive.zst'

    def __init__(self, chunk_size: int = None, threads: int = None):
        self.chunk_size = chunk_size or config.chunk_size
        self.threads = config.threads if threads is None else threads

    # ── Container stream ───────────────────────────────────────────────────

    def pack(self, sources: List[str], sink: BinaryIO) -> int:
        """
        Write every source root and its descendants as tar entries into sink.
        Returns the total size of regular file contents written.
        """
        if not sources:
            raise ConfigError("No files selected")

        total_size = 0
        try:
            with tarfile.open(fileobj=sink, mode='w|') as tar:
                for source in sources:
                    for fs_path, stored_path in self._walk(source):
                        total_size += self._add_entry(tar, fs_path, stored_path)
        except ArchiveIOError:
            raise
        except OSError as e:
            # End-of-archive marker goes out on close
            raise ArchiveIOError(f"Failed to write archive: {e}", phase='write') from e

        return total_size

    def _walk(self, root: str) -> Iterator[Tuple[str, str]]:
        """
        Pre-order walk yielding (filesystem path, stored path).
        Children are visited in lexical name order.
        """
        base = os.path.basename(os.path.normpath(os.path.abspath(root)))
        if not base:
            raise ConfigError(f"Cannot archive a filesystem root: {root}")

        stack = [(root, base)]
        while stack:
            fs_path, stored_path = stack.pop()
            yield fs_path, stored_path

            if os.path.isdir(fs_path) and not os.path.islink(fs_path):
                try:
                    names = sorted(os.listdir(fs_path))
                except OSError as e:
                    raise ArchiveIOError(f"Failed to list directory: {e}", path=fs_path, phase='read') from e
                # Reversed so the stack pops them in lexical order
                for name in reversed(names):
                    stack.append((os.path.join(fs_path, name), f"{stored_path}/{name}"))

    def _add_entry(self, tar: tarfile.TarFile, fs_path: str, stored_path: str) -> int:
        try:
            st = os.lstat(fs_path)
        except OSError as e:
            raise ArchiveIOError(f"Failed to stat source: {e}", path=fs_path, phase='read') from e

        entry = ContainerEntry.from_stat(sanitize_tar_path(stored_path), st)
        if entry is None:
            logger.warning(f"   Skipping unsupported file type: {fs_path}")
            return 0

        if entry.is_dir:
            try:
                tar.addfile(entry.to_tarinfo())
            except OSError as e:
                raise ArchiveIOError(f"Failed to write header: {e}", path=fs_path, phase='write') from e
            logger.debug(f"   + {entry.path}/")
            return 0

        try:
            with open(fs_path, 'rb') as in_f:
                tar.addfile(entry.to_tarinfo(), in_f)
        except OSError as e:
            raise ArchiveIOError(f"Failed to add file: {e}", path=fs_path, phase='read') from e

        logger.debug(f"   + {entry.path} ({entry.size} bytes)")
        return entry.size

    # ── Request level ──────────────────────────────────────────────────────

    def compress_files(self, files: List[str], output_path: str = None, level: Union[int, str] = None) -> dict:
        """
        Pack files into a .zst archive and report summary statistics.
        """
        if not files:
            raise ConfigError("No files selected")

        start_time = time.time()
        output_path = self.resolve_output_name(files, output_path)
        level = self.resolve_level(level)
        tmp_path = None

        try:
            logger.info(f"Packaging {len(files)} source(s) -> {output_path} [level {level}]")

            out_dir = Path(output_path).parent
            out_dir.mkdir(parents=True, exist_ok=True)

            tmp_fd, tmp_path = tempfile.mkstemp(suffix='.zst.tmp', dir=out_dir)
            cctx = self._build_compressor(level)

            with os.fdopen(tmp_fd, 'wb') as out_f:
                with cctx.stream_writer(out_f, closefd=False) as compressor:
                    original_size = self.pack(files, compressor)

            shutil.move(tmp_path, output_path)
            tmp_path = None

            compressed_size = os.path.getsize(output_path)
            elapsed = time.time() - start_time
            if original_size > 0:
                ratio = compressed_size / original_size * 100
                saved = 100 - ratio
            else:
                ratio = 0.0
                saved = 0.0

            logger.info(f"✅ Compression Complete!")
            logger.info(f"   Original:  {original_size/1024:.2f} KB")
            logger.info(f"   Archive:   {compressed_size/1024:.2f} KB")
            logger.info(f"   Ratio:     {ratio:.1f}%")
            logger.info(f"   Time:      {elapsed:.2f}s")

            return {
                'success': True,
                'output_file': output_path,
                'original_size': original_size,
                'compressed_size': compressed_size,
                'compression_ratio': ratio,
                'space_saved_percent': saved,
                'level': level,
                'duration': elapsed
            }

        except ConfigError as e:
            logger.error(f"Invalid request: {e}")
            raise
        except ArchiveIOError as e:
            logger.error(f"Packaging failed: {e}")
            raise
        except (OSError, zstd.ZstdError) as e:
            logger.error(f"Packaging failed: {e}", exc_info=True)
            raise ArchiveIOError(f"Compression failed: {e}", path=output_path, phase='write') from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _build_compressor(self, level: int) -> zstd.ZstdCompressor:
        params = zstd.ZstdCompressionParameters.from_level(level, threads=self.threads)
        return zstd.ZstdCompressor(compression_params=params)

    @classmethod
    def resolve_level(cls, level: Union[int, str, None]) -> int:
        """Named presets map to fixed levels, out of range ints fall back to the default"""
        if isinstance(level, str):
            if level in cls.COMPRESSION_LEVELS:
                return cls.COMPRESSION_LEVELS[level]
            try:
                level = int(level)
            except ValueError:
                return config.default_level

        if level is None or not config.min_level <= level <= config.max_level:
            return config.default_level
        return level

    @classmethod
    def resolve_output_name(cls, files: List[str], output_path: str = None) -> str:
        if not output_path:
            if len(files) == 1:
                output_path = Path(os.path.normpath(files[0])).stem + cls.EXTENSION
            else:
                output_path = cls.DEFAULT_ARCHIVE_NAME

        if not output_path.endswith(cls.EXTENSION):
            output_path += cls.EXTENSION
        return output_path


__all__ = ["Packager"]
