"""
veloxio Archive Module

Packed archive containers addressed by hashed logical paths:
- On-disk format constants
- Container and byte sources
- Loader and entry reader
- Offline builder
"""

from .format import MAGIC, HEADER_SIZE, SUPPORTED_VERSIONS, VERSION_PLAIN, VERSION_CHECKSUM
from .container import ArchiveEntry, ArchiveContainer, ByteSource, BufferedSource, FileSource
from .loader import ArchiveLoader
from .reader import ArchiveEntryReader
from .builder import ArchiveBuilder, write_archive

__all__ = [
    # Format
    'MAGIC',
    'HEADER_SIZE',
    'SUPPORTED_VERSIONS',
    'VERSION_PLAIN',
    'VERSION_CHECKSUM',
    # Container
    'ArchiveEntry',
    'ArchiveContainer',
    'ByteSource',
    'BufferedSource',
    'FileSource',
    # Loading and reading
    'ArchiveLoader',
    'ArchiveEntryReader',
    # Building
    'ArchiveBuilder',
    'write_archive',
]
