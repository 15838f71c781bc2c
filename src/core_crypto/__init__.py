# Core Cryptography Module
"""
Hash primitives used by the ledger:
- SHA-256 digests (bytes and hex)
"""
