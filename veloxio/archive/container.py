"""
Archive Container Module

In-memory view of one mounted archive: its entry index and the byte
source backing it.

Author: YSNRFD
Version: 1.0.0
"""

import os
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Iterator, Mapping

from veloxio.exceptions import ArchiveIOError


@dataclass(frozen=True)
class ArchiveEntry:
    """One record of a container's entry table."""
    key: int
    offset: int
    length: int
    crc32: Optional[int] = None
    
    @property
    def end(self) -> int:
        return self.offset + self.length


class ByteSource(ABC):
    """Random-access, read-only bytes backing a single container."""
    
    @abstractmethod
    def size(self) -> int:
        """Total number of bytes available."""
    
    @abstractmethod
    def read(self, offset: int, length: int) -> bytes:
        """
        Read exactly ``length`` bytes starting at ``offset``.
        
        Raises:
            ArchiveIOError: If the range cannot be read in full
        """
    
    def close(self) -> None:
        """Release any underlying handle."""


class BufferedSource(ByteSource):
    """Whole container held in memory."""
    
    def __init__(self, data: bytes, name: Optional[str] = None):
        self._data = bytes(data)
        self._name = name
    
    def size(self) -> int:
        return len(self._data)
    
    def read(self, offset: int, length: int) -> bytes:
        if offset < 0 or length < 0 or offset + length > len(self._data):
            raise ArchiveIOError(
                "Read outside buffer", path=self._name, offset=offset, length=length
            )
        return self._data[offset:offset + length]
    
    def close(self) -> None:
        self._data = b""
    
    @classmethod
    def from_file(cls, path: str) -> 'BufferedSource':
        try:
            with open(path, 'rb') as f:
                return cls(f.read(), name=path)
        except OSError as e:
            raise ArchiveIOError(f"Cannot read archive: {e}", path=path) from e


class FileSource(ByteSource):
    """
    Reads ranges on demand from an open file.
    
    Seek and read happen under a lock so concurrent readers never
    interleave on the shared file position.
    """
    
    def __init__(self, path: str):
        self._path = path
        try:
            self._fh = open(path, 'rb', buffering=0)
            self._size = os.fstat(self._fh.fileno()).st_size
        except OSError as e:
            raise ArchiveIOError(f"Cannot open archive: {e}", path=path) from e
        self._lock = threading.Lock()
    
    def size(self) -> int:
        return self._size
    
    def read(self, offset: int, length: int) -> bytes:
        with self._lock:
            if self._fh.closed:
                raise ArchiveIOError("Archive is closed", path=self._path, offset=offset, length=length)
            try:
                self._fh.seek(offset)
                data = bytearray()
                while len(data) < length:
                    chunk = self._fh.read(length - len(data))
                    if not chunk:
                        break
                    data += chunk
            except OSError as e:
                raise ArchiveIOError(
                    f"Read failed: {e}", path=self._path, offset=offset, length=length
                ) from e
        if len(data) != length:
            raise ArchiveIOError("Short read", path=self._path, offset=offset, length=length)
        return bytes(data)
    
    def close(self) -> None:
        with self._lock:
            self._fh.close()


class ArchiveContainer:
    """
    A loaded archive: an immutable key index plus its byte source.
    
    Readers take a lease with ``lease()`` for the duration of a read.
    ``retire()`` marks the container as unmounted; its source is closed
    once no lease is outstanding.
    """
    
    def __init__(
        self,
        source_path: str,
        entries: Mapping[int, ArchiveEntry],
        data_source: ByteSource,
        version: int
    ):
        self._source_path = source_path
        self._entries = MappingProxyType(dict(entries))
        self._data_source = data_source
        self._version = version
        self._refs = 0
        self._retired = False
        self._closed = False
        self._lock = threading.Lock()
    
    @property
    def source_path(self) -> str:
        return self._source_path
    
    @property
    def entries(self) -> Mapping[int, ArchiveEntry]:
        return self._entries
    
    @property
    def data_source(self) -> ByteSource:
        return self._data_source
    
    @property
    def version(self) -> int:
        return self._version
    
    @property
    def closed(self) -> bool:
        return self._closed
    
    @property
    def retired(self) -> bool:
        """True once the container has been unmounted."""
        return self._retired
    
    def __len__(self) -> int:
        return len(self._entries)
    
    def __contains__(self, key: int) -> bool:
        return key in self._entries
    
    def has_file(self, key: int) -> bool:
        return key in self._entries
    
    def get_entry(self, key: int) -> Optional[ArchiveEntry]:
        return self._entries.get(key)
    
    @contextmanager
    def lease(self) -> Iterator['ArchiveContainer']:
        """
        Hold the container open while reading from it.
        
        Raises:
            ArchiveIOError: If the container is already closed
        """
        with self._lock:
            if self._closed:
                raise ArchiveIOError("Archive has been unmounted", path=self._source_path)
            self._refs += 1
        try:
            yield self
        finally:
            with self._lock:
                self._refs -= 1
                release = self._retired and self._refs == 0 and not self._closed
                if release:
                    self._closed = True
            if release:
                self._data_source.close()
    
    def retire(self) -> None:
        """Close the source now, or when the last lease is released."""
        with self._lock:
            self._retired = True
            release = self._refs == 0 and not self._closed
            if release:
                self._closed = True
        if release:
            self._data_source.close()
    
    def __repr__(self) -> str:
        return (
            f"ArchiveContainer(source_path={self._source_path!r}, "
            f"entries={len(self._entries)}, version={self._version})"
        )
