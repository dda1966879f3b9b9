"""
zstar Path Sanitization
Outbound cleanup for names written into the tar stream,
inbound validation for names read back during extraction.
"""
import os
import re
from typing import Optional

# Characters Windows refuses in file names
INVALID_CHARS = re.compile(r'[<>:"|?*]')
INVALID_DIR_CHARS = re.compile(r'[<>:"|?*\\/]')
DRIVE_PREFIX = re.compile(r'^[A-Za-z]:(?=[\\/]|$)')

MAX_DIR_NAME = 100


def _strip_root(path: str) -> str:
    """Drop a drive letter and any leading slashes/backslashes"""
    path = DRIVE_PREFIX.sub('', path)
    return path.lstrip('/\\')


def sanitize_tar_path(path: str) -> str:
    """
    Clean a path before it is stored in a tar header.
    Result is relative, forward-slash separated, and free of
    characters that would break extraction on Windows.
    """
    path = _strip_root(path)
    path = path.replace('\\', '/')
    return INVALID_CHARS.sub('_', path)


def sanitize_extract_path(path: str, restrictive: bool = None) -> Optional[str]:
    """
    Validate a stored tar name for extraction.

    Returns a relative native path, or None when the entry must be skipped:
    rooted names, names holding a NUL byte, empty names, names made only
    of dots, and anything with a '..' segment. A drive letter is dropped
    rather than rejected. The traversal check runs on the stripped
    candidate, not the raw name.
    """
    if restrictive is None:
        restrictive = os.name == 'nt'

    if path[:1] in ('/', '\\') or '\x00' in path:
        return None

    path = _strip_root(path)

    if not path or not path.strip('.'):
        return None

    segments = path.replace('\\', '/').split('/')
    if '..' in segments:
        return None

    segments = [s for s in segments if s not in ('', '.')]
    if not segments:
        return None

    if restrictive:
        segments = [INVALID_CHARS.sub('_', s) for s in segments]

    return os.path.join(*segments)


def is_within(root: str, target: str) -> bool:
    """True when target resolves strictly inside root"""
    root = os.path.normpath(os.path.abspath(root))
    target = os.path.normpath(os.path.abspath(target))
    return target.startswith(root.rstrip(os.sep) + os.sep)


def sanitize_directory_name(name: str) -> str:
    """Turn arbitrary user input into a single safe directory name"""
    name = INVALID_DIR_CHARS.sub('_', name)
    name = name.strip(' .')

    if not name:
        name = 'extracted'

    return name[:MAX_DIR_NAME]


__all__ = [
    "sanitize_tar_path",
    "sanitize_extract_path",
    "is_within",
    "sanitize_directory_name",
]
