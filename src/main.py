"""
StatChain - Main Entry Point
Builds a hash-chained ledger of random sample blocks and prints it.
"""

import argparse
import sys

from src.blockchain.ledger import Blockchain, ValidationError
from src.config import (
    ChainConfig,
    DEFAULT_BLOCK_COUNT,
    DEFAULT_SAMPLES_PER_BLOCK,
    DEFAULT_DOMAIN_MIN,
    DEFAULT_DOMAIN_MAX,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statchain",
        description="Grow a hash-chained ledger of sample blocks and print it.",
    )
    parser.add_argument("--blocks", type=int, default=DEFAULT_BLOCK_COUNT,
                        help="number of growth iterations (default: %(default)s)")
    parser.add_argument("--samples", type=int, default=DEFAULT_SAMPLES_PER_BLOCK,
                        help="samples per block (default: %(default)s)")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the sample generator (default: clock)")
    parser.add_argument("--min", dest="domain_min", type=float, default=DEFAULT_DOMAIN_MIN,
                        help="smallest accepted sample (default: %(default)s)")
    parser.add_argument("--max", dest="domain_max", type=float, default=DEFAULT_DOMAIN_MAX,
                        help="largest accepted sample (default: %(default)s)")
    parser.add_argument("--verify", action="store_true",
                        help="run full chain verification after growth")
    return parser


def main(argv=None) -> int:
    """Main entry point for StatChain."""
    args = build_parser().parse_args(argv)
    try:
        config = ChainConfig(
            block_count=args.blocks,
            samples_per_block=args.samples,
            domain_min=args.domain_min,
            domain_max=args.domain_max,
            seed=args.seed,
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    blockchain = Blockchain(config)
    blockchain.run()
    blockchain.print_chain()

    if args.verify:
        try:
            blockchain.validate_chain()
        except ValidationError as e:
            print(f"Chain verification failed: {e}")
            return 1
        print(f"Chain verified: {blockchain.length} blocks")
    return 0


if __name__ == "__main__":
    sys.exit(main())
