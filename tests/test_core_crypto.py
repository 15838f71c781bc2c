"""
Unit tests for the SHA-256 digest helpers.
"""

import hashlib

import pytest
from src.core_crypto.digest import (
    sha256, sha256_hex, sha256_string, DIGEST_SIZE, HEX_DIGEST_LENGTH
)


class TestSHA256:
    """Tests for SHA-256 wrappers."""
    
    def test_empty_string(self):
        """Hash of empty string."""
        expected = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        assert sha256_hex(b"") == expected
    
    def test_hello(self):
        expected = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
        assert sha256_hex(b"hello") == expected
    
    def test_matches_hashlib(self):
        """Digest should match hashlib for various inputs."""
        for data in [b"", b"abc", b"x" * 1000, bytes(range(256))]:
            assert sha256(data) == hashlib.sha256(data).digest()
    
    def test_output_length(self):
        assert len(sha256(b"anything")) == DIGEST_SIZE
        assert len(sha256_hex(b"anything")) == HEX_DIGEST_LENGTH
    
    def test_string_helper(self):
        assert sha256_string("abc") == hashlib.sha256(b"abc").digest()
    
    def test_rejects_str(self):
        """Text must be encoded first."""
        with pytest.raises(TypeError):
            sha256("abc")
