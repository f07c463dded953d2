"""
Archive Exceptions

Exceptions related to archive container parsing and entry extraction.

Author: YSNRFD
Version: 1.0.0
"""

from enum import Enum
from typing import Optional, Any

from .vfs_exceptions import VFSException


class FormatErrorKind(Enum):
    """Structural failure categories reported by the archive loader."""
    BAD_MAGIC = "bad_magic"
    UNSUPPORTED_VERSION = "unsupported_version"
    DUPLICATE_KEY = "duplicate_key"
    TRUNCATED = "truncated"


class FormatError(VFSException):
    """
    Base exception for malformed archive containers.
    
    Attributes:
        kind: Which structural check failed
    """
    
    kind: Optional[FormatErrorKind] = None
    
    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = dict(context or {})
        if self.kind is not None:
            ctx["kind"] = self.kind.value
        super().__init__(
            message=message,
            path=path,
            error_code=error_code or 6100,
            context=ctx
        )


class BadMagicError(FormatError):
    """
    The container does not start with the expected magic tag.
    
    Example:
        >>> raise BadMagicError("assets.pak", found=b"PK\\x03\\x04")
    """
    
    kind = FormatErrorKind.BAD_MAGIC
    
    def __init__(
        self,
        path: Optional[str] = None,
        found: Optional[bytes] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = dict(context or {})
        if found is not None:
            ctx["found"] = found
        super().__init__(
            message=f"Bad archive magic: {found!r}",
            path=path,
            error_code=6101,
            context=ctx
        )
        self.found = found


class UnsupportedVersionError(FormatError):
    """The container declares a format version this reader cannot parse."""
    
    kind = FormatErrorKind.UNSUPPORTED_VERSION
    
    def __init__(
        self,
        version: int,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = dict(context or {})
        ctx["version"] = version
        super().__init__(
            message=f"Unsupported archive version: {version}",
            path=path,
            error_code=6102,
            context=ctx
        )
        self.version = version


class DuplicateKeyError(FormatError):
    """
    Two entries in one container share a path key.
    
    Loading fails instead of shadowing, since a shadowed entry would be
    permanently unreachable.
    
    Example:
        >>> raise DuplicateKeyError(0xAF63DC4C8601EC8C, path="assets.pak")
    """
    
    kind = FormatErrorKind.DUPLICATE_KEY
    
    def __init__(
        self,
        key: int,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = dict(context or {})
        ctx["key"] = f"{key:#018x}"
        super().__init__(
            message=f"Duplicate path key: {key:#018x}",
            path=path,
            error_code=6103,
            context=ctx
        )
        self.key = key


class TruncatedError(FormatError):
    """A header, entry table or entry range extends past the container."""
    
    kind = FormatErrorKind.TRUNCATED
    
    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            path=path,
            error_code=6104,
            context=context
        )


class ArchiveIOError(VFSException):
    """
    Reading bytes from an archive's backing source failed.
    
    Example:
        >>> raise ArchiveIOError("Short read", path="assets.pak", offset=64)
    """
    
    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        offset: Optional[int] = None,
        length: Optional[int] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = dict(context or {})
        if offset is not None:
            ctx["offset"] = offset
        if length is not None:
            ctx["length"] = length
        super().__init__(
            message=message,
            path=path,
            error_code=error_code or 6201,
            context=ctx
        )
        self.offset = offset
        self.length = length


class IntegrityError(ArchiveIOError):
    """An entry payload does not match its stored CRC-32."""
    
    def __init__(
        self,
        key: int,
        expected: int,
        actual: int,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = dict(context or {})
        ctx["key"] = f"{key:#018x}"
        ctx["expected_crc32"] = f"{expected:#010x}"
        ctx["actual_crc32"] = f"{actual:#010x}"
        super().__init__(
            message="Entry checksum mismatch",
            path=path,
            error_code=6202,
            context=ctx
        )
        self.key = key
        self.expected = expected
        self.actual = actual
