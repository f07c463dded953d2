"""
veloxio Virtual File System Module

Read-only lookup of logical paths:
- Path sanitization for the disk overlay
- Path hashing for archive indexes
- Provider facade
"""

from .path_sanitizer import PathSanitizer, decode_path
from .path_hasher import PathHasher, hash_path, fnv1a_64
from .provider import Provider

__all__ = [
    # Path Sanitizer
    'PathSanitizer',
    'decode_path',
    # Path Hasher
    'PathHasher',
    'hash_path',
    'fnv1a_64',
    # Provider
    'Provider',
]
