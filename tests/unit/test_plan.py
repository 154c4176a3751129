"""
Test overlap-aware partitioning
"""
import pytest
from pydantic import ValidationError
from shard_search.core.errors import ConfigurationError
from shard_search.core.plan import ShardPlan, partition


class TestPartition:
    """Test shard plan construction"""

    def test_even_split(self):
        """Three workers over nine bytes with a three-byte pattern"""
        plan = partition(9, 3, 3)

        assert plan.sizes == (5, 5, 3)
        assert plan.starts == (0, 3, 6)
        assert plan.length == 9
        assert plan.overlap == 2

    def test_remainder_goes_to_lowest_ranks(self):
        """Leftover bytes are handed out starting at rank 0"""
        plan = partition(11, 1, 4)

        assert plan.sizes == (3, 3, 3, 2)
        assert plan.starts == (0, 3, 6, 9)

    def test_last_shard_has_no_lookahead(self):
        """Test that only non-final shards are extended"""
        plan = partition(10, 3, 3)

        assert plan.sizes == (6, 5, 3)
        assert plan.starts == (0, 4, 7)

    def test_single_worker(self):
        """A single shard covers everything without overlap"""
        plan = partition(5, 2, 1)

        assert plan.sizes == (5,)
        assert plan.starts == (0,)
        assert plan.claimed_range(0) == (0, 5)

    def test_size_invariant(self):
        """Shard sizes net of overlap sum to the searchable length"""
        for length in range(1, 40):
            for pattern_length in range(1, min(length, 6) + 1):
                for workers in range(1, 9):
                    plan = partition(length, pattern_length, workers)
                    overlap_total = (workers - 1) * (pattern_length - 1)
                    assert sum(plan.sizes) - overlap_total == length
                    assert plan.starts[-1] + plan.sizes[-1] == length

    def test_claimed_ranges_tile_the_input(self):
        """Claimed ranges are contiguous, disjoint and cover [0, L)"""
        for length in range(1, 40):
            for pattern_length in range(1, min(length, 6) + 1):
                for workers in range(1, 9):
                    plan = partition(length, pattern_length, workers)
                    position = 0
                    for rank in range(workers):
                        first, end = plan.claimed_range(rank)
                        assert first == position
                        assert end >= first
                        position = end
                    assert position == length

    def test_lookahead_clipped_to_searchable_length(self):
        """Shards whose lookahead would run past the end are delivered short"""
        plan = partition(10, 5, 4)

        assert plan.sizes == (7, 7, 6, 2)
        assert plan.starts == (0, 3, 6, 8)
        assert plan.shard_bounds(2) == (6, 10)
        assert plan.scatter_counts() == [7, 7, 4, 2]
        assert plan.claimed_range(2) == (6, 8)

    def test_more_workers_than_bytes(self):
        """Surplus workers get empty claimed ranges"""
        plan = partition(2, 1, 5)

        assert plan.sizes == (1, 1, 0, 0, 0)
        assert plan.claimed_range(4) == (2, 2)

    def test_pattern_longer_than_input(self):
        """Test rejection of a pattern that cannot fit"""
        with pytest.raises(ConfigurationError, match="pattern is larger than file"):
            partition(2, 3, 1)

    def test_empty_pattern(self):
        with pytest.raises(ConfigurationError):
            partition(5, 0, 2)

    def test_no_workers(self):
        with pytest.raises(ConfigurationError):
            partition(5, 1, 0)


class TestShardPlan:
    """Test the plan value type"""

    def test_plan_is_immutable(self):
        """Test that a plan cannot be changed after creation"""
        plan = partition(9, 3, 3)

        with pytest.raises(ValidationError):
            plan.sizes = (9, 0, 0)

    def test_rebuilt_plan_equals_sent_plan(self):
        """Workers rebuilding a plan from the broadcast tables get the same value"""
        plan = partition(100, 4, 7)
        rebuilt = ShardPlan(sizes=plan.sizes, starts=plan.starts, pattern_length=4)

        assert rebuilt == plan

    def test_inconsistent_starts_rejected(self):
        with pytest.raises(ConfigurationError):
            ShardPlan(sizes=(5, 5, 3), starts=(0, 4, 6), pattern_length=3)

    def test_nonzero_first_start_rejected(self):
        with pytest.raises(ConfigurationError):
            ShardPlan(sizes=(3,), starts=(1,), pattern_length=1)

    def test_mismatched_tables_rejected(self):
        with pytest.raises(ConfigurationError):
            ShardPlan(sizes=(5, 3), starts=(0,), pattern_length=3)


if __name__ == '__main__':
    pytest.main([__file__])
