"""
Path Sanitizer Module

Canonicalizes and validates untrusted logical paths before they are
allowed to touch the disk overlay.

The substring gates are coarse: they reject every `.`-prefixed or
`.`-suffixed segment, not just `.` and `..`. The final containment
check compares real paths, so a symlink inside the root cannot lead
outside it either.

Author: YSNRFD
Version: 1.0.0
"""

import os
import re
from typing import Optional
from urllib.parse import unquote_to_bytes

from veloxio.exceptions import DecodeError, PathRejectedError, SanitizeError


LOGICAL_SEPARATOR = '/'
MARKUP_CHARACTERS = frozenset('<>&"')

_BAD_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')


def decode_path(raw_path: str) -> str:
    """
    Form-decode a logical path: ``+`` is a space, ``%XX`` are UTF-8 bytes.
    
    Raises:
        DecodeError: On a malformed escape or invalid UTF-8
    """
    bad = _BAD_ESCAPE.search(raw_path)
    if bad:
        raise DecodeError(raw_path, reason=f"malformed escape at {bad.start()}")
    
    try:
        return unquote_to_bytes(raw_path.replace('+', ' ')).decode('utf-8')
    except UnicodeError as e:
        raise DecodeError(raw_path, reason=str(e)) from e


class PathSanitizer:
    """
    Maps logical paths onto files below a fixed disk root.
    
    Example:
        >>> sanitizer = PathSanitizer('/srv/assets')
        >>> sanitizer.sanitize('/img/logo%20big.png')
        '/srv/assets/img/logo big.png'
    """
    
    def __init__(self, root: str, sep: Optional[str] = None):
        self._root = root
        self._sep = sep or os.sep
    
    @property
    def root(self) -> str:
        return self._root
    
    def translate(self, raw_path: str) -> str:
        """
        Decode and validate a logical path without touching the disk.
        
        Args:
            raw_path: Untrusted logical path, expected to start with '/'
        
        Returns:
            The decoded path using the host separator
        
        Raises:
            DecodeError: If percent-decoding fails
            PathRejectedError: If any gate rejects the path
        """
        path = decode_path(raw_path)
        
        if not path or path[0] != LOGICAL_SEPARATOR:
            raise PathRejectedError(raw_path, reason="not absolute")
        
        path = path.replace(LOGICAL_SEPARATOR, self._sep)
        
        if (self._sep + '.') in path or ('.' + self._sep) in path:
            raise PathRejectedError(raw_path, reason="dot segment")
        if path[0] == '.' or path[-1] == '.':
            raise PathRejectedError(raw_path, reason="leading or trailing dot")
        if '\x00' in path:
            raise PathRejectedError(raw_path, reason="nul character")
        if any(c in MARKUP_CHARACTERS for c in path):
            raise PathRejectedError(raw_path, reason="markup character")
        
        return path
    
    def sanitize(self, raw_path: str) -> str:
        """
        Resolve a logical path to a location inside the disk root.
        
        Raises:
            DecodeError: If percent-decoding fails
            PathRejectedError: If the path is unsafe or escapes the root
        """
        translated = self.translate(raw_path)
        location = self._root.rstrip(self._sep) + translated
        
        real_root = os.path.realpath(self._root)
        real_location = os.path.realpath(location)
        try:
            inside = os.path.commonpath([real_root, real_location]) == real_root
        except ValueError:
            inside = False
        if not inside:
            raise PathRejectedError(raw_path, reason="outside disk root")
        
        return location
    
    def is_safe(self, raw_path: str) -> bool:
        """Check whether a logical path passes every sanitization gate."""
        try:
            self.sanitize(raw_path)
        except SanitizeError:
            return False
        return True
