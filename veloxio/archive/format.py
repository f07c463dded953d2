"""
Archive container on-disk layout.

All integers are little-endian::

    header  : magic "VXPK" | version u16 | flags u16 | entry_count u32 | table_offset u64
    table   : entry_count fixed-size records
              v1: key u64 | offset u64 | length u64
              v2: key u64 | offset u64 | length u64 | crc32 u32 | pad[4]
    data    : from the end of the table to the end of the file

Entry offsets are absolute file offsets and must point into the data region.
"""

import struct

MAGIC = b"VXPK"

VERSION_PLAIN = 1
VERSION_CHECKSUM = 2
SUPPORTED_VERSIONS = (VERSION_PLAIN, VERSION_CHECKSUM)

HEADER_FMT = "<4sHHIQ"
HEADER_SIZE = struct.calcsize(HEADER_FMT)

ENTRY_FMTS = {
    VERSION_PLAIN: "<QQQ",
    VERSION_CHECKSUM: "<QQQI4x",
}
ENTRY_SIZES = {version: struct.calcsize(fmt) for version, fmt in ENTRY_FMTS.items()}
