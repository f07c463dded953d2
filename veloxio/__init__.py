"""
veloxio - Read-only virtual file system over a disk overlay and packed archives

Resolves logical paths to bytes, either from a sanitized directory on
disk or from immutable archive containers indexed by hashed path.
"""

__version__ = "1.0.0"
__author__ = "YSNRFD"

from .filesystem.provider import Provider
from .filesystem.path_sanitizer import PathSanitizer
from .filesystem.path_hasher import PathHasher, hash_path
from .archive.builder import ArchiveBuilder
from .exceptions import NotFoundError

__all__ = [
    'Provider',
    'PathSanitizer',
    'PathHasher',
    'hash_path',
    'ArchiveBuilder',
    'NotFoundError',
]
