"""
Path Hasher Module

Maps logical paths to the 64-bit keys used by archive entry tables.

The function is FNV-1a 64 over the UTF-8 bytes of the raw, undecoded
path. It has no seed, so archives packed offline stay addressable from
any process.

Author: YSNRFD
Version: 1.0.0
"""

FNV64_OFFSET_BASIS = 0xcbf29ce484222325
FNV64_PRIME = 0x100000001b3
KEY_MASK = 0xFFFFFFFFFFFFFFFF


def fnv1a_64(data: bytes) -> int:
    """Compute the FNV-1a 64-bit hash of a byte string."""
    h = FNV64_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV64_PRIME) & KEY_MASK
    return h


class PathHasher:
    """
    Computes archive keys for logical paths.
    
    Example:
        >>> PathHasher.hash('')
        14695981039346656037
    """
    
    @staticmethod
    def hash(raw_path: str) -> int:
        """
        Hash a logical path exactly as the caller supplied it.
        
        Args:
            raw_path: Logical path, not decoded or sanitized
        
        Returns:
            Unsigned 64-bit key
        """
        return fnv1a_64(raw_path.encode('utf-8', 'surrogatepass'))


def hash_path(raw_path: str) -> int:
    """Convenience wrapper around ``PathHasher.hash``."""
    return PathHasher.hash(raw_path)
