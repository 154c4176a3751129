"""
Gathering of per-worker matches into the global result
"""
from typing import Iterator, List, Optional
from pydantic import BaseModel, Field

from shard_search.comm.base import Communicator
from shard_search.utils.logger import get_logger
from .errors import ResourceError


class GlobalResult(BaseModel):
    """All match offsets of a run, ascending, plus the per-rank counts they came from"""
    offsets: List[int] = Field(default_factory=list)
    counts: List[int] = Field(default_factory=list)

    def __iter__(self) -> Iterator[int]:
        return iter(self.offsets)

    def __len__(self) -> int:
        return len(self.offsets)

    def by_rank(self) -> List[List[int]]:
        """Split the offsets back into the blocks each worker contributed"""
        blocks = []
        offset = 0
        for count in self.counts:
            blocks.append(self.offsets[offset:offset + count])
            offset += count
        return blocks


def gather_displacements(counts: List[int]) -> List[int]:
    """
    Position of each worker's block in the result buffer

    Args:
        counts: Matches found by each worker, in rank order

    Returns:
        Exclusive prefix sums of ``counts``
    """
    displs = [0] * len(counts)
    for i in range(1, len(counts)):
        displs[i] = displs[i - 1] + counts[i - 1]
    return displs


class ResultCollector:
    """
    Two-stage gather: match counts first, then the variable-length match
    arrays at their computed displacements.

    Workers' claimed ranges are disjoint and increase with rank, so the
    concatenation in rank order is already sorted.
    """

    def __init__(self, comm: Communicator):
        self.comm = comm
        self.logger = get_logger(f"ResultCollector-{comm.rank}")

    def collect(self, matches: List[int]) -> Optional[GlobalResult]:
        """
        Gather every worker's matches on the root

        Args:
            matches: This worker's ascending MatchSet

        Returns:
            GlobalResult on the root, None on every other worker
        """
        comm = self.comm
        recv_counts = comm.gather(len(matches))

        displs = None
        total = 0
        if comm.is_root:
            displs = gather_displacements(recv_counts)
            total = sum(recv_counts)
            self.logger.debug(f"Gathering {total} matches, per worker: {recv_counts}")

        try:
            offsets = comm.gatherv(matches, recv_counts, displs, total)
        except MemoryError as e:
            raise ResourceError(f"Memory allocation failed for result buffer of {total} offsets") from e

        if not comm.is_root:
            return None
        return GlobalResult(offsets=offsets, counts=recv_counts)
