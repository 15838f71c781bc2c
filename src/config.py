"""
Chain configuration.

Compiled-in defaults for the demo run plus a small immutable config object
that the chain driver and the command line share.
"""

from dataclasses import dataclass
from typing import Optional


# ============================================================================
# Constants
# ============================================================================

GENESIS_INDEX = -1  # Sentinel index, never used by a real block
DEFAULT_BLOCK_COUNT = 10  # Growth iterations
DEFAULT_SAMPLES_PER_BLOCK = 10  # Payload size
DEFAULT_DOMAIN_MIN = 0.0
DEFAULT_DOMAIN_MAX = 1.0


@dataclass(frozen=True)
class ChainConfig:
    """
    Settings for one chain run.
    
    Attributes:
        block_count: Number of growth iterations
        samples_per_block: Payload size of each generated block
        domain_min: Smallest accepted sample value (inclusive)
        domain_max: Largest accepted sample value (inclusive)
        seed: Seed for the sample generator; None seeds from the clock
    """
    block_count: int = DEFAULT_BLOCK_COUNT
    samples_per_block: int = DEFAULT_SAMPLES_PER_BLOCK
    domain_min: float = DEFAULT_DOMAIN_MIN
    domain_max: float = DEFAULT_DOMAIN_MAX
    seed: Optional[int] = None
    
    def __post_init__(self):
        if self.block_count < 0:
            raise ValueError("block_count must be >= 0")
        if self.samples_per_block < 0:
            raise ValueError("samples_per_block must be >= 0")
        if self.domain_min > self.domain_max:
            raise ValueError("domain_min must not exceed domain_max")


DEFAULT_CONFIG = ChainConfig()
