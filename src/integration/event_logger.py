"""
Event Logger Module

Keeps an in-memory audit trail of what the chain driver did:
- Genesis creation
- Accepted blocks
- Rejected candidates (with the validator's reason)
- Chain verification and completion

Events never feed back into the chain itself; they exist for reporting
and for tests that need to observe rejections.

Author: StatChain Project
"""

import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict, Any, Callable


# ============================================================================
# Constants
# ============================================================================

EVENT_VERSION = "1.0"
INVALID_BLOCK_MESSAGE = "Invalid block detected. Skipping..."


# ============================================================================
# Event Types
# ============================================================================

class EventType(Enum):
    """Types of chain events that can be logged."""
    
    GENESIS_CREATED = "genesis_created"
    BLOCK_APPENDED = "block_appended"
    BLOCK_REJECTED = "block_rejected"
    CHAIN_VERIFIED = "chain_verified"
    CHAIN_FINISHED = "chain_finished"


# ============================================================================
# Event Structure
# ============================================================================

@dataclass
class ChainEvent:
    """A single driver event, tied to the block it concerns."""
    event_type: EventType
    index: int  # Index of the block (or candidate) involved
    timestamp: float  # Unix timestamp
    block_hash: str = ""
    details: Dict[str, Any] = field(default_factory=dict)
    
    def to_record(self) -> str:
        """Convert event to a compact JSON record."""
        return json.dumps({
            'version': EVENT_VERSION,
            'type': self.event_type.value,
            'index': self.index,
            'hash': self.block_hash,
            'time': self.timestamp,
            'iso_time': datetime.fromtimestamp(self.timestamp, tz=timezone.utc).isoformat(),
            'details': self.details,
        }, separators=(',', ':'))
    
    @classmethod
    def from_record(cls, record: str) -> 'ChainEvent':
        """Parse event from a JSON record."""
        data = json.loads(record)
        return cls(
            event_type=EventType(data['type']),
            index=data['index'],
            timestamp=data['time'],
            block_hash=data.get('hash', ""),
            details=data.get('details', {}),
        )
    
    def __str__(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp, tz=timezone.utc)
        return (
            f"[{dt.strftime('%Y-%m-%d %H:%M:%S')}] "
            f"{self.event_type.value} | "
            f"block:{self.index}"
        )


# ============================================================================
# Event Logger
# ============================================================================

class ChainEventLogger:
    """
    In-memory event log for a single chain run.
    
    Rejections are additionally echoed to stdout as the
    "Invalid block detected" diagnostic at the moment they happen.
    """
    
    def __init__(self, echo_rejections: bool = True):
        """
        Initialize the event logger.
        
        Args:
            echo_rejections: Print the diagnostic line for each rejection
        """
        self._events: List[ChainEvent] = []
        self._echo_rejections = echo_rejections
        self._callbacks: List[Callable[[ChainEvent], None]] = []
    
    @property
    def events(self) -> List[ChainEvent]:
        """All events in the order they were logged (copy)."""
        return list(self._events)
    
    def add_callback(self, callback: Callable[[ChainEvent], None]) -> None:
        """Add a callback to be notified of new events."""
        self._callbacks.append(callback)
    
    def remove_callback(self, callback: Callable[[ChainEvent], None]) -> None:
        """Remove a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)
    
    def _add_event(self, event: ChainEvent) -> ChainEvent:
        self._events.append(event)
        for callback in self._callbacks:
            callback(event)
        return event
    
    def log_genesis(self, index: int, block_hash: str) -> ChainEvent:
        """Log creation of the genesis block."""
        return self._add_event(ChainEvent(
            event_type=EventType.GENESIS_CREATED,
            index=index,
            timestamp=time.time(),
            block_hash=block_hash,
        ))
    
    def log_append(self, index: int, block_hash: str) -> ChainEvent:
        """Log a block that passed validation and joined the chain."""
        return self._add_event(ChainEvent(
            event_type=EventType.BLOCK_APPENDED,
            index=index,
            timestamp=time.time(),
            block_hash=block_hash,
        ))
    
    def log_rejection(
        self,
        index: int,
        block_hash: str,
        reason: str,
        detail: Optional[str] = None
    ) -> ChainEvent:
        """
        Log a candidate that failed validation.
        
        Args:
            index: Index the candidate would have taken
            block_hash: The candidate's stored hash
            reason: Validator reason code
            detail: Optional human readable explanation
            
        Returns:
            The logged event
        """
        details = {'reason': reason}
        if detail:
            details['detail'] = detail
        event = self._add_event(ChainEvent(
            event_type=EventType.BLOCK_REJECTED,
            index=index,
            timestamp=time.time(),
            block_hash=block_hash,
            details=details,
        ))
        if self._echo_rejections:
            print(INVALID_BLOCK_MESSAGE)
        return event
    
    def log_verified(self, length: int, last_hash: str) -> ChainEvent:
        """Log a successful full-chain verification."""
        return self._add_event(ChainEvent(
            event_type=EventType.CHAIN_VERIFIED,
            index=length - 1,
            timestamp=time.time(),
            block_hash=last_hash,
            details={'length': length},
        ))
    
    def log_finished(self, length: int, rejected: int) -> ChainEvent:
        """Log the end of the growth phase."""
        return self._add_event(ChainEvent(
            event_type=EventType.CHAIN_FINISHED,
            index=length - 1,
            timestamp=time.time(),
            details={'length': length, 'rejected': rejected},
        ))
    
    def get_events(self, event_type: Optional[EventType] = None) -> List[ChainEvent]:
        """Get logged events, optionally filtered by type."""
        if event_type is None:
            return self.events
        return [e for e in self._events if e.event_type == event_type]
    
    def get_stats(self) -> Dict[str, int]:
        """Count events per type."""
        stats: Dict[str, int] = {'total_events': len(self._events)}
        for event in self._events:
            key = event.event_type.value
            stats[key] = stats.get(key, 0) + 1
        return stats
