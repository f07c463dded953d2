#!/usr/bin/env python3
"""Packs files into a veloxio archive container.

Logical paths are hashed with the same function the Provider uses at
lookup time, so ``/textures/stone.png`` packed here is found by
``Provider.get("/textures/stone.png")``.

Usage::

    python -m veloxio.archive.builder assets/ assets.pak
"""

from __future__ import annotations

import argparse
import struct
import zlib
from pathlib import Path
from typing import Iterable

from .format import (
    MAGIC,
    HEADER_FMT,
    HEADER_SIZE,
    ENTRY_FMTS,
    ENTRY_SIZES,
    SUPPORTED_VERSIONS,
    VERSION_CHECKSUM,
)
from veloxio.exceptions import DuplicateKeyError
from veloxio.filesystem.path_hasher import PathHasher


def write_archive(
    records: Iterable[tuple[int, bytes]],
    version: int = VERSION_CHECKSUM,
    magic: bytes = MAGIC,
) -> bytes:
    """Serialize ``(key, payload)`` records verbatim, duplicates included."""
    records = list(records)
    entry_fmt = ENTRY_FMTS[version]
    table_offset = HEADER_SIZE
    offset = table_offset + len(records) * ENTRY_SIZES[version]

    table = bytearray()
    for key, data in records:
        if version == VERSION_CHECKSUM:
            table += struct.pack(entry_fmt, key, offset, len(data), zlib.crc32(data) & 0xFFFFFFFF)
        else:
            table += struct.pack(entry_fmt, key, offset, len(data))
        offset += len(data)

    header = struct.pack(HEADER_FMT, magic, version, 0, len(records), table_offset)
    return header + bytes(table) + b"".join(data for _, data in records)


class ArchiveBuilder:
    """Collects payloads keyed by logical path and writes one container."""

    def __init__(self, version: int = VERSION_CHECKSUM) -> None:
        if version not in SUPPORTED_VERSIONS:
            raise ValueError(f"unsupported archive version {version}")
        self.version = version
        self._records: dict[int, bytes] = {}
        self._names: dict[int, str] = {}

    def __len__(self) -> int:
        return len(self._records)

    def add(self, logical_path: str, data: bytes) -> int:
        key = self.add_key(PathHasher.hash(logical_path), data)
        self._names[key] = logical_path
        return key

    def add_key(self, key: int, data: bytes) -> int:
        if key in self._records:
            raise DuplicateKeyError(key, context={"existing": self._names.get(key)})
        self._records[key] = bytes(data)
        return key

    def add_directory(self, root: Path) -> int:
        """Add every regular file below ``root`` as ``/<relative posix path>``."""
        count = 0
        for path in sorted(Path(root).rglob("*")):
            if not path.is_file():
                continue
            self.add("/" + path.relative_to(root).as_posix(), path.read_bytes())
            count += 1
        return count

    def to_bytes(self) -> bytes:
        return write_archive(self._records.items(), version=self.version)

    def write(self, output: Path) -> None:
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("wb") as fh:
            fh.write(self.to_bytes())


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Build a veloxio archive")
    parser.add_argument("root", type=Path, help="Directory to package")
    parser.add_argument("output", type=Path, help="Output archive path")
    parser.add_argument(
        "--version",
        type=int,
        choices=SUPPORTED_VERSIONS,
        default=VERSION_CHECKSUM,
        help="Archive format version (2 stores CRC-32 per entry)",
    )
    args = parser.parse_args(argv)

    if not args.root.is_dir():
        raise SystemExit(f"archive root '{args.root}' does not exist")

    builder = ArchiveBuilder(version=args.version)
    if builder.add_directory(args.root) == 0:
        raise SystemExit(f"archive root '{args.root}' did not contain any files")

    builder.write(args.output)


if __name__ == "__main__":
    main()
