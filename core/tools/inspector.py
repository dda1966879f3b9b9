"""
zstar Archive Inspector
List the entries of a .zst archive without extracting anything.
"""
import tarfile
from pathlib import Path
import zstandard as zstd
from ..utils.logger import logger
from ..utils.paths import sanitize_extract_path
from ..errors import ConfigError, ArchiveIOError
from ..config import config
from ..packager.entry import ContainerEntry, EntryKind


class Inspector:

    def __init__(self, restrictive: bool = None):
        self.restrictive = config.restrictive_charset if restrictive is None else restrictive

    def inspect(self, archive_path: str, verbose: bool = True) -> dict:
        """
        Decode the archive and walk its headers.
        Entries the extractor would skip are flagged as rejected.
        """
        path = Path(archive_path)
        if not path.is_file():
            raise ConfigError(f"Archive not found: {archive_path}")

        archive_size = path.stat().st_size
        entries = []

        try:
            dctx = zstd.ZstdDecompressor()
            with open(path, 'rb') as f, dctx.stream_reader(f) as reader:
                with tarfile.open(fileobj=reader, mode='r|') as tar:
                    for member in tar:
                        entry = ContainerEntry.from_tarinfo(member)
                        if entry is None:
                            logger.debug(f"Unsupported entry type: {member.name}")
                            continue
                        rejected = sanitize_extract_path(entry.path, self.restrictive) is None
                        entries.append({
                            'path': entry.path,
                            'kind': entry.kind.value,
                            'size': entry.size,
                            'mode': entry.mode,
                            'rejected': rejected
                        })
        except (tarfile.TarError, zstd.ZstdError) as e:
            raise ArchiveIOError(f"Not a valid zstar archive: {e}", path=str(path), phase='decode') from e
        except OSError as e:
            raise ArchiveIOError(f"Failed to read archive: {e}", path=str(path), phase='read') from e

        files = [e for e in entries if e['kind'] == EntryKind.REGULAR.value]
        original_size = sum(e['size'] for e in files)
        ratio = archive_size / original_size * 100 if original_size > 0 else 0.0

        info = {
            'archive_path': str(path),
            'archive_size': archive_size,
            'entries': entries,
            'files': len(files),
            'directories': len(entries) - len(files),
            'rejected': sum(1 for e in entries if e['rejected']),
            'original_size': original_size,
            'compression_ratio': ratio,
        }

        if verbose:
            self._print(info)
        return info

    def _print(self, info: dict):
        def fmt_size(b):
            if b >= 1024 * 1024:
                return f"{b/1024/1024:.2f} MB"
            return f"{b/1024:.1f} KB"

        print(f"\n{'='*60}")
        print(f"  zstar Archive Inspection")
        print(f"{'='*60}")
        for e in info['entries']:
            flag = '!' if e['rejected'] else ' '
            if e['kind'] == EntryKind.DIRECTORY.value:
                print(f" {flag} {oct(e['mode'])[2:]:>4}  {'<dir>':>10}  {e['path']}/")
            else:
                print(f" {flag} {oct(e['mode'])[2:]:>4}  {e['size']:>10}  {e['path']}")
        print(f"{'-'*60}")
        print(f"  File:        {info['archive_path']}")
        print(f"  Files:       {info['files']}")
        print(f"  Directories: {info['directories']}")
        if info['rejected']:
            print(f"  Rejected:    {info['rejected']} (marked !, skipped on extract)")
        print()
        print(f"  Original:    {fmt_size(info['original_size'])}")
        print(f"  Compressed:  {fmt_size(info['archive_size'])}")
        print(f"  Ratio:       {info['compression_ratio']:.1f}%")
        print(f"{'='*60}\n")


__all__ = ["Inspector"]
