"""
VFS Exceptions

Exceptions raised while resolving logical paths: decoding, sanitization
and lookup failures.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class VFSException(Exception):
    """
    Base exception for all veloxio errors.
    
    Attributes:
        message: Human-readable error description
        path: Logical or on-disk path associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error
    """
    
    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.error_code = error_code or 6000
        self.context = dict(context or {})
        if path:
            self.context["path"] = path
    
    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.path:
            base = f"{base} (path={self.path})"
        return base
    
    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"path={self.path!r}, "
            f"error_code={self.error_code})"
        )


class SanitizeError(VFSException):
    """Base class for a logical path refused by the sanitizer."""


class DecodeError(SanitizeError):
    """
    The logical path is not valid percent-encoded UTF-8.
    
    Example:
        >>> raise DecodeError("/a%zz", reason="bad escape at 2")
    """
    
    def __init__(
        self,
        path: str,
        reason: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = dict(context or {})
        if reason:
            ctx["reason"] = reason
        super().__init__(
            message="Cannot decode path",
            path=path,
            error_code=6001,
            context=ctx
        )
        self.reason = reason


class PathRejectedError(SanitizeError):
    """
    The logical path failed a sanitization gate.
    
    Raised for relative paths, traversal segments, markup characters
    and anything that would resolve outside the disk root.
    
    Example:
        >>> raise PathRejectedError("/../etc/passwd", reason="traversal")
    """
    
    def __init__(
        self,
        path: str,
        reason: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = dict(context or {})
        if reason:
            ctx["reason"] = reason
        super().__init__(
            message=f"Path rejected: {reason}" if reason else "Path rejected",
            path=path,
            error_code=6002,
            context=ctx
        )
        self.reason = reason


class NotFoundError(VFSException):
    """
    No disk file and no mounted archive provides the logical path.
    
    This is the only failure ``Provider.get`` exposes. Internal causes
    (rejected path, read failure after a key match) are chained through
    ``__cause__`` when present.
    
    Example:
        >>> raise NotFoundError("/missing.txt")
    """
    
    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"File not found: {path}",
            path=path,
            error_code=6301,
            context=context
        )


class ConfigError(VFSException):
    """Configuration file is missing, unreadable or malformed."""
    
    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            path=path,
            error_code=6401,
            context=context
        )
