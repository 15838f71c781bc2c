"""
Blockchain Ledger Module

Implements an in-memory, append-only chain of sample blocks with:
- SHA-256 chaining over (index, timestamp, data, prev_hash)
- Per-block statistics (mean, median, 2-SD spread)
- Validation gate before every append (sample domain + self-hash)
- Optional full chain verification (linkage and index steps)

Security features:
- Immutable blocks (frozen dataclass)
- Tamper evidence through hash recomputation
- Rejected candidates never advance the chain tail

Author: StatChain Project
"""

import random
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..config import ChainConfig, DEFAULT_CONFIG, GENESIS_INDEX
from ..core_crypto.digest import sha256_hex
from ..integration.event_logger import ChainEventLogger
from ..stats.engine import summarize


# ============================================================================
# Constants
# ============================================================================

GENESIS_PREV_HASH = ""  # Genesis has no predecessor
FIELD_SEPARATOR = "|"
REPORT_SEPARATOR = "-" * 18


# ============================================================================
# Block Structure (Immutable)
# ============================================================================

@dataclass(frozen=True)
class Block:
    """
    Immutable block structure for the chain.

    frozen=True means a block cannot be modified after creation; a tampered
    copy has to be built with dataclasses.replace and is caught by the
    validator because its hash no longer matches its fields.
    """
    index: int
    timestamp: datetime
    data: Tuple[float, ...]
    prev_hash: str
    hash: str
    mean: Optional[float] = None
    median: Optional[float] = None
    spread: Optional[float] = None

    @property
    def is_genesis(self) -> bool:
        return self.index == GENESIS_INDEX

    def to_dict(self) -> Dict[str, Any]:
        """Convert block to a plain dictionary."""
        return {
            'index': self.index,
            'timestamp': self.timestamp.isoformat(),
            'data': list(self.data),
            'prev_hash': self.prev_hash,
            'hash': self.hash,
            'mean': self.mean,
            'median': self.median,
            'spread': self.spread,
        }

    def __str__(self) -> str:
        return (
            f"Index: {self.index}\n"
            f"Timestamp: {self.timestamp.isoformat()}\n"
            f"Data: {list(self.data)}\n"
            f"PrevHash: {self.prev_hash}\n"
            f"Hash: {self.hash}\n"
            f"Mean: {_format_stat(self.mean)}\n"
            f"Median: {_format_stat(self.median)}\n"
            f"2-SD Range: {_format_stat(self.spread)}"
        )


def _format_stat(value: Optional[float]) -> str:
    # Blocks without samples report zero statistics
    if value is None:
        value = 0.0
    return f"{value:f}"


# ============================================================================
# Hashing
# ============================================================================

def serialize_block_fields(
    index: int,
    timestamp: datetime,
    data: Sequence[float],
    prev_hash: str
) -> bytes:
    """
    Canonical byte form of a block's hashed fields.

    Layout: ``<index>|<iso timestamp>|[<s0>,<s1>,...]|<prev_hash>``

    - index as its decimal string
    - timestamp as ISO-8601 with microseconds and UTC offset
    - samples as repr(float), the shortest string that round-trips

    Args:
        index: Block index
        timestamp: Creation time (timezone-aware)
        data: Sample payload
        prev_hash: Hex digest of the predecessor

    Returns:
        UTF-8 encoded record
    """
    samples = ",".join(repr(float(value)) for value in data)
    record = FIELD_SEPARATOR.join([
        str(index),
        timestamp.isoformat(timespec='microseconds'),
        f"[{samples}]",
        prev_hash,
    ])
    return record.encode('utf-8')


def compute_block_hash(
    index: int,
    timestamp: datetime,
    data: Sequence[float],
    prev_hash: str
) -> str:
    """Compute the hex SHA-256 digest of a block's fields."""
    return sha256_hex(serialize_block_fields(index, timestamp, data, prev_hash))


def compute_hash(block: Block) -> str:
    """Recompute a block's digest from its own fields (ignores block.hash)."""
    return compute_block_hash(block.index, block.timestamp, block.data, block.prev_hash)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Block Factory
# ============================================================================

def create_genesis_block(timestamp: Optional[datetime] = None) -> Block:
    """
    Create the genesis block.

    Sentinel index, empty payload, empty prev_hash and no statistics.
    The hash is computed exactly like any other block's.
    """
    timestamp = timestamp or _now()
    block_hash = compute_block_hash(GENESIS_INDEX, timestamp, (), GENESIS_PREV_HASH)
    return Block(
        index=GENESIS_INDEX,
        timestamp=timestamp,
        data=(),
        prev_hash=GENESIS_PREV_HASH,
        hash=block_hash,
    )


def generate_block(
    prev_block: Block,
    data: Sequence[float],
    timestamp: Optional[datetime] = None
) -> Block:
    """
    Build a candidate block on top of prev_block.

    Args:
        prev_block: The current chain tail (or the genesis block)
        data: Sample payload; copied, never mutated
        timestamp: Creation time, defaults to now (UTC)

    Returns:
        The fully formed, not yet validated, candidate block
    """
    index = prev_block.index + 1  # Genesis sentinel -1 yields 0
    timestamp = timestamp or _now()
    samples = tuple(float(value) for value in data)
    block_hash = compute_block_hash(index, timestamp, samples, prev_block.hash)

    mean = median = spread = None
    if samples:
        mean, median, spread = summarize(samples)

    return Block(
        index=index,
        timestamp=timestamp,
        data=samples,
        prev_hash=prev_block.hash,
        hash=block_hash,
        mean=mean,
        median=median,
        spread=spread,
    )


# ============================================================================
# Validation
# ============================================================================

class ValidationError(Exception):
    """Raised when full chain verification fails."""
    pass


class ChainStateError(Exception):
    """Raised when the chain driver is asked for an illegal transition."""
    pass


class ValidationReason(Enum):
    """Why a block passed or failed the validation gate."""
    OK = "ok"
    OUT_OF_RANGE = "out_of_range"
    HASH_MISMATCH = "hash_mismatch"
    NOT_LINKED = "not_linked"  # Driver gate only; check_block never returns it


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of check_block; truthy only when the block is valid."""
    reason: ValidationReason
    detail: str = ""

    @property
    def valid(self) -> bool:
        return self.reason is ValidationReason.OK

    def __bool__(self) -> bool:
        return self.valid


def check_block(
    block: Block,
    domain_min: float = DEFAULT_CONFIG.domain_min,
    domain_max: float = DEFAULT_CONFIG.domain_max
) -> ValidationResult:
    """
    Validate a single block's payload domain and self-hash.

    Linkage to the predecessor and index steps are not checked here;
    see verify_chain for that.

    Args:
        block: Block to check
        domain_min: Smallest accepted sample (inclusive)
        domain_max: Largest accepted sample (inclusive)

    Returns:
        ValidationResult with the first failing reason, or OK
    """
    for position, value in enumerate(block.data):
        if not domain_min <= value <= domain_max:
            return ValidationResult(
                ValidationReason.OUT_OF_RANGE,
                f"sample {position} = {value!r} outside [{domain_min}, {domain_max}]"
            )

    if compute_hash(block) != block.hash:
        return ValidationResult(ValidationReason.HASH_MISMATCH, "stored hash does not match fields")

    return ValidationResult(ValidationReason.OK)


def is_valid_block(
    block: Block,
    domain_min: float = DEFAULT_CONFIG.domain_min,
    domain_max: float = DEFAULT_CONFIG.domain_max
) -> bool:
    """Boolean form of check_block."""
    return check_block(block, domain_min, domain_max).valid


def verify_chain(
    blocks: Sequence[Block],
    domain_min: float = DEFAULT_CONFIG.domain_min,
    domain_max: float = DEFAULT_CONFIG.domain_max
) -> bool:
    """
    Verify an entire chain.

    On top of check_block for every non-genesis block this checks the
    genesis shape, prev_hash linkage and that indices step by one.

    Returns:
        True if chain is valid

    Raises:
        ValidationError: If chain is invalid
    """
    if not blocks:
        raise ValidationError("Chain is empty")

    genesis = blocks[0]
    if (
        genesis.index != GENESIS_INDEX or
        genesis.data or
        genesis.prev_hash != GENESIS_PREV_HASH or
        compute_hash(genesis) != genesis.hash
    ):
        raise ValidationError("Invalid genesis block")

    for i in range(1, len(blocks)):
        block, prev_block = blocks[i], blocks[i - 1]
        if block.index != prev_block.index + 1:
            raise ValidationError(
                f"Invalid index at position {i}: expected {prev_block.index + 1}, got {block.index}"
            )
        if block.prev_hash != prev_block.hash:
            raise ValidationError(f"Previous hash mismatch at index {block.index}")
        result = check_block(block, domain_min, domain_max)
        if not result:
            raise ValidationError(
                f"Block {block.index} invalid ({result.reason.value}): {result.detail}"
            )

    return True


# ============================================================================
# Chain Driver
# ============================================================================

class ChainState(Enum):
    """Lifecycle of a Blockchain instance."""
    EMPTY = "empty"
    GENESIS_CREATED = "genesis_created"
    GROWING = "growing"
    DONE = "done"


class Blockchain:
    """
    Chain driver owning the append-only block list.

    Lifecycle: EMPTY -> GENESIS_CREATED -> GROWING -> DONE.
    Every candidate is generated from the current tail and validated; only
    valid candidates are appended. Once DONE the chain is read-only.
    """

    def __init__(
        self,
        config: Optional[ChainConfig] = None,
        event_logger: Optional[ChainEventLogger] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize an empty chain.

        Args:
            config: Run settings (defaults to DEFAULT_CONFIG)
            event_logger: Event log; a printing logger is created if omitted
            rng: Sample source; seeded from config.seed or the clock if omitted
        """
        self._config = config or DEFAULT_CONFIG
        self._events = event_logger or ChainEventLogger()
        if rng is None:
            seed = self._config.seed if self._config.seed is not None else time.time_ns()
            rng = random.Random(seed)
        self._rng = rng
        self._chain: List[Block] = []
        self._state = ChainState.EMPTY
        self._rejected = 0

    @property
    def config(self) -> ChainConfig:
        return self._config

    @property
    def events(self) -> ChainEventLogger:
        return self._events

    @property
    def state(self) -> ChainState:
        return self._state

    @property
    def chain(self) -> List[Block]:
        """Get the chain (read-only view)."""
        return list(self._chain)  # Return copy to prevent mutation

    @property
    def length(self) -> int:
        return len(self._chain)

    @property
    def last_block(self) -> Block:
        """Get the current chain tail."""
        if not self._chain:
            raise ChainStateError("Chain has no blocks yet")
        return self._chain[-1]

    @property
    def rejected(self) -> int:
        """Number of candidates discarded by validation."""
        return self._rejected

    def _require_state(self, *allowed: ChainState) -> None:
        if self._state not in allowed:
            raise ChainStateError(
                f"Operation not allowed in state {self._state.value}"
            )

    def create_genesis(self, timestamp: Optional[datetime] = None) -> Block:
        """Create and append the genesis block (never validated)."""
        self._require_state(ChainState.EMPTY)
        genesis = create_genesis_block(timestamp)
        self._chain.append(genesis)
        self._state = ChainState.GENESIS_CREATED
        self._events.log_genesis(genesis.index, genesis.hash)
        return genesis

    def generate_samples(self) -> List[float]:
        """Draw one payload of uniform samples in [domain_min, domain_max]."""
        low, high = self._config.domain_min, self._config.domain_max
        return [self._rng.uniform(low, high) for _ in range(self._config.samples_per_block)]

    def try_append(
        self,
        data: Sequence[float],
        timestamp: Optional[datetime] = None
    ) -> Optional[Block]:
        """
        Generate a candidate from the tail, validate it and append it.

        Args:
            data: Candidate payload
            timestamp: Optional creation time for the candidate

        Returns:
            The appended block, or None if the candidate was rejected
        """
        self._require_state(ChainState.GENESIS_CREATED, ChainState.GROWING)
        self._state = ChainState.GROWING

        candidate = generate_block(self.last_block, data, timestamp)
        return self.submit(candidate)

    def submit(self, candidate: Block) -> Optional[Block]:
        """
        Run the validation gate on an already built candidate.

        The candidate must extend the current tail (prev_hash and index);
        after that the usual domain and self-hash checks apply. Valid
        candidates are appended; invalid ones are logged, reported on
        stdout and discarded, leaving the tail unchanged.
        """
        self._require_state(ChainState.GENESIS_CREATED, ChainState.GROWING)
        self._state = ChainState.GROWING

        tail = self.last_block
        if candidate.prev_hash != tail.hash or candidate.index != tail.index + 1:
            result = ValidationResult(
                ValidationReason.NOT_LINKED,
                f"candidate {candidate.index} does not extend tail {tail.index}"
            )
        else:
            result = check_block(candidate, self._config.domain_min, self._config.domain_max)
        if not result:
            self._rejected += 1
            self._events.log_rejection(
                candidate.index, candidate.hash, result.reason.value, result.detail
            )
            return None

        self._chain.append(candidate)
        self._events.log_append(candidate.index, candidate.hash)
        return candidate

    def grow(
        self,
        count: Optional[int] = None,
        sample_source: Optional[Callable[[int], Sequence[float]]] = None
    ) -> int:
        """
        Run the growth loop.

        Args:
            count: Iterations to run (defaults to config.block_count)
            sample_source: Payload for iteration i; defaults to random samples

        Returns:
            Number of blocks appended by this call
        """
        if self._state is ChainState.EMPTY:
            self.create_genesis()
        self._require_state(ChainState.GENESIS_CREATED, ChainState.GROWING)

        count = self._config.block_count if count is None else count
        appended = 0
        for i in range(count):
            data = sample_source(i) if sample_source else self.generate_samples()
            if self.try_append(data) is not None:
                appended += 1
        return appended

    def finish(self) -> None:
        """Close the growth phase; the chain is read-only afterwards."""
        self._require_state(ChainState.GENESIS_CREATED, ChainState.GROWING)
        self._state = ChainState.DONE
        self._events.log_finished(self.length, self._rejected)

    def run(
        self,
        sample_source: Optional[Callable[[int], Sequence[float]]] = None
    ) -> List[Block]:
        """Genesis, config.block_count growth iterations, then finish."""
        self.create_genesis()
        self.grow(sample_source=sample_source)
        self.finish()
        return self.chain

    def validate_chain(self) -> bool:
        """
        Validate the entire chain (genesis, linkage, indices, every block).

        Raises:
            ValidationError: If chain is invalid
        """
        verify_chain(self._chain, self._config.domain_min, self._config.domain_max)
        self._events.log_verified(self.length, self.last_block.hash)
        return True

    def report(self) -> str:
        """Text report of every block in chain order."""
        lines = []
        for block in self._chain:
            lines.append(str(block))
            lines.append(REPORT_SEPARATOR)
        return "\n".join(lines)

    def print_chain(self) -> None:
        """Print the chain report to stdout."""
        if self._chain:
            print(self.report())


# ============================================================================
# Convenience Functions
# ============================================================================

def create_blockchain(config: Optional[ChainConfig] = None) -> Blockchain:
    """Create a chain with its genesis block already appended."""
    blockchain = Blockchain(config)
    blockchain.create_genesis()
    return blockchain


def run_chain(config: Optional[ChainConfig] = None) -> Blockchain:
    """Run a complete chain (genesis, growth, finish) and return it."""
    blockchain = Blockchain(config)
    blockchain.run()
    return blockchain
