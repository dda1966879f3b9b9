"""
zstar Errors
ConfigError is raised before any work starts.
ArchiveIOError aborts a whole pack/unpack call and is never retried.
"""


class ZstarError(Exception):
    pass


class ConfigError(ZstarError, ValueError):
    """Invalid request: no sources, empty or missing archive reference."""


class ArchiveIOError(ZstarError, OSError):
    """
    Read, write or decode failure during pack/unpack.

    `path` is the file or archive involved, `phase` is one of
    'read', 'write', 'decode'.
    """

    def __init__(self, message: str, path: str = None, phase: str = None):
        super().__init__(message)
        self.path = path
        self.phase = phase

    def __str__(self):
        msg = self.args[0] if self.args else ''
        if self.path:
            return f"{msg} [{self.phase or 'io'}: {self.path}]"
        return msg


__all__ = ["ZstarError", "ConfigError", "ArchiveIOError"]
