# StatChain Test Suite
"""
Test suite including:
- Unit tests (statistics, digests, blocks)
- Integration tests (full chain runs, command line)
- Security tests (tampered and out-of-range blocks)

Run with: pytest
"""
