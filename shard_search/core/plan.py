"""
Overlap-aware partitioning of a byte sequence into per-worker shards
"""
from typing import List, Tuple
from pydantic import BaseModel, ConfigDict, model_validator

from .errors import ConfigurationError


class ShardPlan(BaseModel):
    """
    Per-worker shard sizes and global starting offsets.

    Every non-final shard carries ``pattern_length - 1`` bytes of lookahead
    borrowed from its successor, and the successor's start backs up by the
    same amount, so consecutive shards physically overlap while their
    claimed ranges stay disjoint.
    """
    model_config = ConfigDict(frozen=True)

    sizes: Tuple[int, ...]
    starts: Tuple[int, ...]
    pattern_length: int

    @model_validator(mode='after')
    def _check_tables(self) -> "ShardPlan":
        if not self.sizes or len(self.sizes) != len(self.starts):
            raise ConfigurationError(
                f"shard tables disagree: {len(self.sizes)} sizes, {len(self.starts)} starts"
            )
        if self.pattern_length < 1:
            raise ConfigurationError("pattern length must be at least 1")
        if self.starts[0] != 0:
            raise ConfigurationError(f"first shard must start at 0, not {self.starts[0]}")
        for i in range(1, len(self.sizes)):
            expected = self.starts[i - 1] + self.sizes[i - 1] - self.overlap
            if self.starts[i] != expected:
                raise ConfigurationError(
                    f"shard {i} starts at {self.starts[i]}, expected {expected}"
                )
        return self

    @property
    def workers(self) -> int:
        return len(self.sizes)

    @property
    def overlap(self) -> int:
        return self.pattern_length - 1

    @property
    def length(self) -> int:
        """Searchable length covered by the plan"""
        return self.starts[-1] + self.sizes[-1]

    def claimed_range(self, rank: int) -> Tuple[int, int]:
        """
        Half-open range of global start offsets that ``rank`` alone reports

        Args:
            rank: Worker rank

        Returns:
            (first, end) pair
        """
        start = self.starts[rank]
        if rank == self.workers - 1:
            return start, self.length
        return start, start + self.sizes[rank] - self.overlap

    def shard_bounds(self, rank: int) -> Tuple[int, int]:
        """Half-open byte range of ``rank``'s shard, clipped to the searchable length"""
        start = self.starts[rank]
        return start, min(start + self.sizes[rank], self.length)

    def scatter_counts(self) -> List[int]:
        """Bytes actually delivered to each worker by the scatter"""
        return [end - start for start, end in map(self.shard_bounds, range(self.workers))]


def validate_inputs(length: int, pattern_length: int, workers: int) -> None:
    """
    Reject configurations that cannot be partitioned

    Raises:
        ConfigurationError: on an empty pattern, a pattern longer than the
            searchable length, or a worker count below one
    """
    if pattern_length < 1:
        raise ConfigurationError("pattern must not be empty")
    if length < pattern_length:
        raise ConfigurationError(
            f"pattern is larger than file: pattern length {pattern_length}, "
            f"searchable length {length}"
        )
    if workers < 1:
        raise ConfigurationError(f"worker count must be at least 1, got {workers}")


def partition(length: int, pattern_length: int, workers: int) -> ShardPlan:
    """
    Compute the shard plan for a search

    The remainder of ``length / workers`` goes one byte at a time to the
    lowest-indexed workers; every worker but the last then gets
    ``pattern_length - 1`` bytes of lookahead.

    Args:
        length: Searchable length L
        pattern_length: Pattern length M
        workers: Worker count W

    Returns:
        The ShardPlan
    """
    validate_inputs(length, pattern_length, workers)

    base, remainder = divmod(length, workers)
    sizes = []
    for i in range(workers):
        size = base
        if remainder > 0:
            size += 1
            remainder -= 1
        if i < workers - 1:
            size += pattern_length - 1
        sizes.append(size)

    starts = [0]
    for i in range(1, workers):
        starts.append(starts[i - 1] + sizes[i - 1] - (pattern_length - 1))

    return ShardPlan(sizes=tuple(sizes), starts=tuple(starts), pattern_length=pattern_length)
