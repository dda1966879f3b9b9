"""
zstar Unpacker
Streaming extraction of zstd-compressed tar archives.
Unsafe entry names are skipped, never written.
"""
import os
import time
import shutil
import tarfile
from pathlib import Path
from typing import BinaryIO, Tuple
import zstandard as zstd
from ..utils.logger import logger
from ..utils.paths import sanitize_extract_path, is_within, sanitize_directory_name
from ..errors import ConfigError, ArchiveIOError
from ..config import config
from ..packager.entry import ContainerEntry, EntryKind


class Unpacker:
    EXTENSION = '.zst'
    SUFFIX = '_extracted'

    def __init__(self, chunk_size: int = None, restrictive: bool = None):
        self.chunk_size = chunk_size or config.chunk_size
        self.restrictive = config.restrictive_charset if restrictive is None else restrictive

    def unpack(self, source: BinaryIO, destination_root: str) -> Tuple[int, str]:
        """
        Extract the tar stream in source under destination_root.

        The destination is removed and recreated first, so repeated
        extractions never accumulate. Returns (files written, absolute root).
        """
        root = os.path.abspath(destination_root)

        try:
            if os.path.lexists(root):
                if os.path.isdir(root) and not os.path.islink(root):
                    shutil.rmtree(root)
                else:
                    os.remove(root)
            os.makedirs(root, config.default_dir_mode)
        except OSError as e:
            raise ArchiveIOError(f"Failed to prepare output directory: {e}", path=root, phase='write') from e

        file_count = 0
        try:
            with tarfile.open(fileobj=source, mode='r|') as tar:
                for member in tar:
                    if self._extract_member(tar, member, root):
                        file_count += 1
        except ArchiveIOError:
            raise
        except (tarfile.TarError, zstd.ZstdError) as e:
            raise ArchiveIOError(f"Failed to read archive: {e}", phase='decode') from e
        except OSError as e:
            raise ArchiveIOError(f"Failed to read archive: {e}", phase='read') from e

        return file_count, root

    def _extract_member(self, tar: tarfile.TarFile, member: tarfile.TarInfo, root: str) -> bool:
        """Write one member, True when a regular file was written"""
        entry = ContainerEntry.from_tarinfo(member)
        if entry is None:
            logger.debug(f"   Skipping unsupported entry type: {member.name}")
            return False

        clean_name = sanitize_extract_path(entry.path, self.restrictive)
        if clean_name is None:
            logger.warning(f"   Skipping unsafe path: {member.name!r}")
            return False

        target = os.path.normpath(os.path.join(root, clean_name))
        if not is_within(root, target):
            logger.warning(f"   Skipping path outside output directory: {member.name!r}")
            return False

        try:
            os.makedirs(os.path.dirname(target), config.default_dir_mode, exist_ok=True)
        except OSError as e:
            raise ArchiveIOError(f"Failed to create directory: {e}", path=target, phase='write') from e

        if entry.kind is EntryKind.DIRECTORY:
            self._write_directory(entry, target)
            return False
        elif entry.kind is EntryKind.REGULAR:
            self._write_file(tar, member, entry, target)
            return True

        raise AssertionError(f"Unhandled entry kind: {entry.kind}")

    def _write_directory(self, entry: ContainerEntry, target: str):
        # Owner keeps write access so later entries can land inside
        try:
            os.makedirs(target, entry.mode | 0o700, exist_ok=True)
        except OSError as e:
            raise ArchiveIOError(f"Failed to create directory: {e}", path=target, phase='write') from e
        logger.debug(f"   = {entry.path}/")

    def _write_file(self, tar: tarfile.TarFile, member: tarfile.TarInfo, entry: ContainerEntry, target: str):
        try:
            # Replace rather than truncate, an earlier duplicate may be read-only
            if os.path.lexists(target) and not os.path.isdir(target):
                os.remove(target)
            fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC | getattr(os, 'O_BINARY', 0), entry.mode)
            with os.fdopen(fd, 'wb') as out_f, tar.extractfile(member) as reader:
                while chunk := reader.read(self.chunk_size):
                    out_f.write(chunk)
        except OSError as e:
            raise ArchiveIOError(f"Failed to extract file: {e}", path=target, phase='write') from e
        logger.debug(f"   = {entry.path} ({entry.size} bytes)")

    # ── Request level ──────────────────────────────────────────────────────

    def decompress_file(self, archive_path: str, output_dir: str = None) -> dict:
        """
        Extract a .zst archive into a directory under the storage root.
        """
        start_time = time.time()

        if not archive_path:
            raise ConfigError("No archive file specified")
        if not os.path.isfile(archive_path):
            raise ConfigError(f"Archive not found: {archive_path}")

        dir_name = self.resolve_output_dir(archive_path, output_dir)
        destination = Path(config.output_dir) / dir_name

        # The destination is wiped before extraction starts
        if is_within(str(destination), archive_path):
            raise ConfigError(f"Archive is inside the output directory: {archive_path}")

        try:
            logger.info(f"🔓 Unpacking: {archive_path}")

            dctx = zstd.ZstdDecompressor()
            with open(archive_path, 'rb') as f:
                with dctx.stream_reader(f) as reader:
                    file_count, root = self.unpack(reader, str(destination))

            elapsed = time.time() - start_time
            logger.info(f"✅ Extracted {file_count} files to {root}")

            return {
                'success': True,
                'extracted_files': file_count,
                'output_dir': root,
                'duration': elapsed
            }

        except ArchiveIOError as e:
            logger.error(f"Unpack failed: {e}")
            raise
        except (OSError, zstd.ZstdError) as e:
            logger.error(f"Unpack failed: {e}", exc_info=True)
            raise ArchiveIOError(f"Decompression failed: {e}", path=archive_path, phase='read') from e

    @classmethod
    def resolve_output_dir(cls, archive_path: str, output_dir: str = None) -> str:
        """Single directory name for the extraction, never a path"""
        if not output_dir:
            base_name = os.path.basename(archive_path)
            if base_name.endswith(cls.EXTENSION):
                base_name = base_name[:-len(cls.EXTENSION)]
            output_dir = sanitize_directory_name(base_name) + cls.SUFFIX
        else:
            output_dir = sanitize_directory_name(output_dir)

        return os.path.basename(output_dir)


__all__ = ["Unpacker"]
