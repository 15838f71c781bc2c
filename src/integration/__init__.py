# Integration Module
"""
Event logging for the chain driver.

Every genesis, append and rejection is recorded as an event for the
run's audit trail.
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues."""
    from . import event_logger
    return getattr(event_logger, name)

__all__ = [
    'EventType',
    'ChainEvent',
    'ChainEventLogger',
    'INVALID_BLOCK_MESSAGE',
]
