"""
Archive Loader Module

Parses a container file into an ArchiveContainer, validating the header,
the entry table and every entry's byte range before anything becomes
visible to lookups.

Author: YSNRFD
Version: 1.0.0
"""

import struct
from typing import Optional

from .container import ArchiveContainer, ArchiveEntry, ByteSource, BufferedSource, FileSource
from .format import (
    MAGIC,
    HEADER_FMT,
    HEADER_SIZE,
    ENTRY_FMTS,
    ENTRY_SIZES,
    SUPPORTED_VERSIONS,
    VERSION_CHECKSUM,
)
from veloxio.exceptions import (
    BadMagicError,
    UnsupportedVersionError,
    DuplicateKeyError,
    TruncatedError,
)
from veloxio.logger import get_logger


class ArchiveLoader:
    """
    Loads archive containers from disk.
    
    Args:
        backing: ``"lazy"`` reads entry ranges from the open file on
            demand; ``"buffered"`` reads the whole container into memory
    
    Example:
        >>> loader = ArchiveLoader(backing="buffered")
        >>> container = loader.load("assets.pak")
        >>> len(container)
        42
    """
    
    def __init__(self, backing: str = "lazy"):
        if backing not in ("lazy", "buffered"):
            raise ValueError(f"Unknown backing strategy: {backing}")
        self._backing = backing
        self._logger = get_logger('archive')
    
    @property
    def backing(self) -> str:
        return self._backing
    
    def load(self, source_path: str) -> ArchiveContainer:
        """
        Open and parse a container.
        
        Args:
            source_path: Path of the archive file
        
        Returns:
            A fully validated ArchiveContainer owning a fresh byte source
        
        Raises:
            FormatError: If the container is structurally invalid
            ArchiveIOError: If the file cannot be read
        """
        if self._backing == "buffered":
            source: ByteSource = BufferedSource.from_file(source_path)
        else:
            source = FileSource(source_path)
        
        try:
            container = self.load_from_source(source_path, source)
        except Exception:
            source.close()
            raise
        
        self._logger.debug(
            "Loaded archive",
            context={
                'path': source_path,
                'entries': len(container),
                'version': container.version,
                'backing': self._backing,
            }
        )
        return container
    
    def load_bytes(self, data: bytes, source_path: Optional[str] = None) -> ArchiveContainer:
        """Parse a container already held in memory."""
        return self.load_from_source(source_path or "<memory>", BufferedSource(data, name=source_path))
    
    def load_from_source(self, source_path: str, source: ByteSource) -> ArchiveContainer:
        """Parse a container from any byte source. The container takes ownership of ``source``."""
        file_size = source.size()
        
        if file_size < HEADER_SIZE:
            raise TruncatedError(
                "Archive too small for header",
                path=source_path,
                context={'size': file_size}
            )
        
        magic, version, _flags, entry_count, table_offset = struct.unpack(
            HEADER_FMT, source.read(0, HEADER_SIZE)
        )
        
        if magic != MAGIC:
            raise BadMagicError(path=source_path, found=magic)
        if version not in SUPPORTED_VERSIONS:
            raise UnsupportedVersionError(version, path=source_path)
        
        entry_fmt = ENTRY_FMTS[version]
        entry_size = ENTRY_SIZES[version]
        table_end = table_offset + entry_count * entry_size
        
        if table_offset < HEADER_SIZE or table_end > file_size:
            raise TruncatedError(
                "Entry table extends past end of archive",
                path=source_path,
                context={'table_offset': table_offset, 'entries': entry_count, 'size': file_size}
            )
        
        table = source.read(table_offset, table_end - table_offset)
        entries: dict[int, ArchiveEntry] = {}
        
        for record in struct.iter_unpack(entry_fmt, table):
            key, offset, length = record[:3]
            crc32 = record[3] if version == VERSION_CHECKSUM else None
            
            if key in entries:
                raise DuplicateKeyError(key, path=source_path)
            if offset < table_end or offset + length > file_size:
                raise TruncatedError(
                    "Entry range outside data region",
                    path=source_path,
                    context={'key': f"{key:#018x}", 'offset': offset, 'length': length}
                )
            
            entries[key] = ArchiveEntry(key=key, offset=offset, length=length, crc32=crc32)
        
        return ArchiveContainer(source_path, entries, source, version)
