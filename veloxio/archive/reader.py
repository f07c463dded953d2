"""
Archive Entry Reader Module

Extracts entry payloads from a container's byte source.

Author: YSNRFD
Version: 1.0.0
"""

import zlib

from .container import ArchiveContainer, ArchiveEntry
from veloxio.exceptions import IntegrityError


class ArchiveEntryReader:
    """
    Reads entry payloads, optionally verifying stored checksums.
    
    Args:
        verify_checksums: Check CRC-32 on entries that carry one
    """
    
    def __init__(self, verify_checksums: bool = True):
        self.verify_checksums = verify_checksums
    
    def read(self, container: ArchiveContainer, entry: ArchiveEntry) -> bytes:
        """
        Read exactly ``entry.length`` bytes at ``entry.offset``.
        
        Raises:
            ArchiveIOError: If the read fails or the container is unmounted
            IntegrityError: If the payload does not match its checksum
        """
        if entry.length == 0:
            data = b""
        else:
            with container.lease():
                data = container.data_source.read(entry.offset, entry.length)
        
        if self.verify_checksums and entry.crc32 is not None:
            actual = zlib.crc32(data) & 0xFFFFFFFF
            if actual != entry.crc32:
                raise IntegrityError(
                    entry.key,
                    expected=entry.crc32,
                    actual=actual,
                    path=container.source_path
                )
        
        return data
