# Blockchain Module
"""
Sample ledger implementation including:
- SHA-256 chaining over block fields
- Per-block statistics (mean, median, 2-SD spread)
- Validation gate before every append
- Chain driver with an explicit lifecycle

Security features:
- Immutable blocks (frozen dataclass)
- Tamper detection through hash recomputation
- Optional full chain verification
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues."""
    from . import ledger
    return getattr(ledger, name)

__all__ = [
    'Block',
    'Blockchain',
    'ChainState',
    'ChainStateError',
    'ValidationError',
    'ValidationReason',
    'ValidationResult',
    'check_block',
    'is_valid_block',
    'verify_chain',
    'compute_hash',
    'compute_block_hash',
    'create_genesis_block',
    'generate_block',
    'create_blockchain',
    'run_chain',
    'GENESIS_PREV_HASH',
]
