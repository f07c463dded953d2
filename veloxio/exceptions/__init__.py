"""
veloxio Exception Hierarchy

All custom exceptions inherit from VFSException.

Architecture:
    VFSException (Base)
    ├── SanitizeError
    │   ├── DecodeError
    │   └── PathRejectedError
    ├── FormatError
    │   ├── BadMagicError
    │   ├── UnsupportedVersionError
    │   ├── DuplicateKeyError
    │   └── TruncatedError
    ├── ArchiveIOError
    │   └── IntegrityError
    ├── NotFoundError
    └── ConfigError
"""

from .vfs_exceptions import (
    VFSException,
    SanitizeError,
    DecodeError,
    PathRejectedError,
    NotFoundError,
    ConfigError,
)

from .archive_exceptions import (
    FormatErrorKind,
    FormatError,
    BadMagicError,
    UnsupportedVersionError,
    DuplicateKeyError,
    TruncatedError,
    ArchiveIOError,
    IntegrityError,
)

__all__ = [
    # VFS exceptions
    "VFSException",
    "SanitizeError",
    "DecodeError",
    "PathRejectedError",
    "NotFoundError",
    "ConfigError",
    # Archive exceptions
    "FormatErrorKind",
    "FormatError",
    "BadMagicError",
    "UnsupportedVersionError",
    "DuplicateKeyError",
    "TruncatedError",
    "ArchiveIOError",
    "IntegrityError",
]
