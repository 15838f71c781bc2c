"""
Integration tests for StatChain.

Tests end-to-end runs combining the driver, validator, event log
and command line.
"""

import json
from datetime import datetime, timezone

import pytest

from src.blockchain.ledger import (
    Blockchain, ChainState, is_valid_block, run_chain
)
from src.config import ChainConfig, DEFAULT_BLOCK_COUNT, DEFAULT_SAMPLES_PER_BLOCK
from src.integration.event_logger import (
    ChainEventLogger, ChainEvent, EventType
)
from src.main import main


class TestEndToEnd:
    """Default run: genesis plus ten blocks of ten samples."""
    
    def test_default_run(self, capsys):
        bc = run_chain(ChainConfig(seed=2024))
        chain = bc.chain
        
        assert DEFAULT_BLOCK_COUNT == 10
        assert DEFAULT_SAMPLES_PER_BLOCK == 10
        assert bc.state is ChainState.DONE
        assert len(chain) == 11
        assert bc.rejected == 0
        
        genesis = chain[0]
        assert genesis.index == -1
        assert genesis.prev_hash == ""
        assert genesis.data == ()
        
        assert [b.index for b in chain[1:]] == list(range(10))
        for prev, block in zip(chain, chain[1:]):
            assert block.prev_hash == prev.hash
            assert len(block.data) == 10
            assert all(0.0 <= v <= 1.0 for v in block.data)
            assert is_valid_block(block)
        
        assert capsys.readouterr().out == ""
    
    def test_timestamps_non_decreasing(self):
        chain = run_chain(ChainConfig(seed=7)).chain
        for prev, block in zip(chain, chain[1:]):
            assert block.timestamp >= prev.timestamp
    
    def test_statistics_on_every_grown_block(self):
        chain = run_chain(ChainConfig(block_count=3, seed=8)).chain
        for block in chain[1:]:
            assert min(block.data) <= block.mean <= max(block.data)
            assert min(block.data) <= block.median <= max(block.data)
            assert block.spread >= 0
    
    def test_zero_blocks(self):
        bc = run_chain(ChainConfig(block_count=0, seed=1))
        assert bc.length == 1
        assert bc.validate_chain()


class TestEventLog:
    """Driver events are recorded in order."""
    
    def test_event_sequence(self):
        events = ChainEventLogger(echo_rejections=False)
        bc = Blockchain(ChainConfig(block_count=2, seed=3), event_logger=events)
        bc.run()
        bc.validate_chain()
        
        kinds = [e.event_type for e in events.events]
        assert kinds == [
            EventType.GENESIS_CREATED,
            EventType.BLOCK_APPENDED,
            EventType.BLOCK_APPENDED,
            EventType.CHAIN_FINISHED,
            EventType.CHAIN_VERIFIED,
        ]
        stats = events.get_stats()
        assert stats['total_events'] == 5
        assert stats['block_appended'] == 2
    
    def test_callbacks(self):
        seen = []
        events = ChainEventLogger(echo_rejections=False)
        events.add_callback(seen.append)
        bc = Blockchain(ChainConfig(block_count=1, seed=3), event_logger=events)
        bc.run()
        assert len(seen) == 3
        
        events.remove_callback(seen.append)
        events.log_verified(bc.length, bc.last_block.hash)
        assert len(seen) == 3
    
    def test_record_roundtrip(self):
        events = ChainEventLogger(echo_rejections=False)
        event = events.log_rejection(4, "ab" * 32, "out_of_range", "sample 0")
        parsed = ChainEvent.from_record(event.to_record())
        assert parsed.event_type is EventType.BLOCK_REJECTED
        assert parsed.index == 4
        assert parsed.block_hash == event.block_hash == "ab" * 32
        assert parsed.timestamp == event.timestamp
        assert parsed.details == {'reason': 'out_of_range', 'detail': 'sample 0'}
        assert "block_rejected" in str(event)

    def test_event_times_are_utc(self):
        """Event log shows the same UTC clock as block timestamps."""
        events = ChainEventLogger(echo_rejections=False)
        event = events.log_append(0, "cd" * 32)
        record = json.loads(event.to_record())
        expected = datetime.fromtimestamp(event.timestamp, tz=timezone.utc)
        assert record['iso_time'] == expected.isoformat()
        assert record['iso_time'].endswith("+00:00")
        assert expected.strftime('%Y-%m-%d %H:%M:%S') in str(event)


class TestConfig:
    """Tests for ChainConfig validation."""
    
    def test_defaults(self):
        config = ChainConfig()
        assert (config.domain_min, config.domain_max) == (0.0, 1.0)
        assert config.seed is None
    
    @pytest.mark.parametrize("kwargs", [
        {'block_count': -1},
        {'samples_per_block': -1},
        {'domain_min': 1.0, 'domain_max': 0.0},
    ])
    def test_invalid_config(self, kwargs):
        with pytest.raises(ValueError):
            ChainConfig(**kwargs)


class TestCommandLine:
    """Tests for the statchain entry point."""
    
    def test_run_and_verify(self, capsys):
        code = main(["--blocks", "3", "--samples", "4", "--seed", "7", "--verify"])
        out = capsys.readouterr().out
        assert code == 0
        assert out.count("Index: ") == 4
        assert "Index: -1" in out
        assert "Chain verified: 4 blocks" in out
    
    def test_default_report(self, capsys):
        assert main(["--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert out.count("------------------") == 11
    
    def test_invalid_domain(self, capsys):
        assert main(["--min", "2", "--max", "1"]) == 2
        assert "error" in capsys.readouterr().err
