"""
zstar CLI Commands
Contains the executable modules for packing, extracting and inspecting archives.
"""

from . import compress
from . import decompress
from . import inspect

__all__ = ["compress", "decompress", "inspect"]
