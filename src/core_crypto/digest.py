"""
SHA-256 Digest Helpers

Thin wrappers around the SHA-256 implementation from the `cryptography`
package. Every block digest in the ledger goes through these functions so the
hash primitive is defined in exactly one place.

Output: 256-bit (32-byte) digest, or its 64-character hex form.
"""

from cryptography.hazmat.primitives import hashes


DIGEST_SIZE = 32  # bytes
HEX_DIGEST_LENGTH = DIGEST_SIZE * 2


def sha256(data: bytes) -> bytes:
    """
    Compute the SHA-256 hash of the input data.
    
    Args:
        data: Input bytes to hash
        
    Returns:
        256-bit (32-byte) digest as bytes
        
    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("sha256() expects bytes")
    digest = hashes.Hash(hashes.SHA256())
    digest.update(bytes(data))
    return digest.finalize()


def sha256_hex(data: bytes) -> str:
    """
    Compute SHA-256 hash and return as hexadecimal string.
    
    Args:
        data: Input bytes to hash
        
    Returns:
        64-character hexadecimal string
    """
    return sha256(data).hex()


def sha256_string(text: str, encoding: str = 'utf-8') -> bytes:
    """Compute SHA-256 hash of a string."""
    return sha256(text.encode(encoding))
