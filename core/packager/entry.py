"""
zstar Container Entry
One record of the tar stream: a regular file or a directory.
"""
import os
import stat
import tarfile
from enum import Enum
from typing import Optional
from ..config import config


class EntryKind(Enum):
    REGULAR = 'regular'
    DIRECTORY = 'directory'


class ContainerEntry:
    __slots__ = ('path', 'kind', 'mode', 'size', 'mtime')

    def __init__(self, path: str, kind: EntryKind, mode: int = None, size: int = 0, mtime: float = 0):
        self.path = path
        self.kind = kind
        self.mode = mode if mode else self.default_mode(kind)
        # Directories never carry a payload
        self.size = size if kind is EntryKind.REGULAR else 0
        self.mtime = mtime

    def __repr__(self):
        return f"ContainerEntry({self.path!r}, {self.kind.name}, mode={oct(self.mode)}, size={self.size})"

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @staticmethod
    def default_mode(kind: EntryKind) -> int:
        if kind is EntryKind.DIRECTORY:
            return config.default_dir_mode
        return config.default_file_mode

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> Optional['ContainerEntry']:
        """Entry for a walked filesystem object, None if it is not a file or directory"""
        if stat.S_ISDIR(st.st_mode):
            kind = EntryKind.DIRECTORY
        elif stat.S_ISREG(st.st_mode):
            kind = EntryKind.REGULAR
        else:
            return None

        # Windows only reports a read-only bit, use the defaults there
        mode = stat.S_IMODE(st.st_mode) & 0o777 if os.name != 'nt' else None
        return cls(path, kind, mode=mode, size=st.st_size, mtime=st.st_mtime)

    @classmethod
    def from_tarinfo(cls, member: tarfile.TarInfo) -> Optional['ContainerEntry']:
        if member.isdir():
            kind = EntryKind.DIRECTORY
        elif member.isreg():
            kind = EntryKind.REGULAR
        else:
            return None

        return cls(member.name, kind, mode=member.mode & 0o777, size=member.size, mtime=member.mtime)

    def to_tarinfo(self) -> tarfile.TarInfo:
        info = tarfile.TarInfo(self.path)
        info.type = tarfile.DIRTYPE if self.is_dir else tarfile.REGTYPE
        info.mode = self.mode
        info.size = self.size
        info.mtime = int(self.mtime)
        return info


__all__ = ["EntryKind", "ContainerEntry"]
