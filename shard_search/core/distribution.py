"""
Fan-out of the shared inputs and the shard data from the coordinator
"""
from typing import Optional, Tuple

from shard_search.comm.base import Communicator
from shard_search.utils.logger import get_logger
from .errors import ConfigurationError, ResourceError
from .plan import ShardPlan


class PatternBroadcaster:
    """
    Broadcasts the pattern and the shard tables from the root.

    Order on the wire: pattern length, pattern bytes, size table, start
    table. Every rank rebuilds the same immutable ShardPlan from them.
    """

    def __init__(self, comm: Communicator):
        self.comm = comm
        self.logger = get_logger(f"PatternBroadcaster-{comm.rank}")

    def broadcast(self, pattern: Optional[bytes] = None,
                  plan: Optional[ShardPlan] = None) -> Tuple[bytes, ShardPlan]:
        """
        Share pattern and plan with every worker

        Args:
            pattern: Pattern bytes (root only)
            plan: Shard plan computed by the root (root only)

        Returns:
            (pattern, plan) as seen by this worker
        """
        comm = self.comm
        if comm.is_root:
            pattern_length = comm.bcast(len(pattern))
            pattern = comm.bcast(bytes(pattern))
            sizes = comm.bcast(tuple(plan.sizes))
            starts = comm.bcast(tuple(plan.starts))
        else:
            pattern_length = comm.bcast(None)
            pattern = comm.bcast(None)
            sizes = comm.bcast(None)
            starts = comm.bcast(None)

        if len(pattern) != pattern_length:
            raise ConfigurationError(
                f"received {len(pattern)} pattern bytes, announced {pattern_length}"
            )
        if len(sizes) != comm.size:
            raise ConfigurationError(
                f"shard plan has {len(sizes)} entries for {comm.size} workers"
            )
        received = ShardPlan(sizes=sizes, starts=starts, pattern_length=pattern_length)
        self.logger.debug(f"Received pattern of {pattern_length} bytes and plan for {received.workers} workers")
        return pattern, received


class ShardDistributor:
    """Variable-length scatter of the searchable bytes into per-worker shards"""

    def __init__(self, comm: Communicator):
        self.comm = comm
        self.logger = get_logger(f"ShardDistributor-{comm.rank}")

    def distribute(self, plan: ShardPlan, data: Optional[bytes] = None) -> bytes:
        """
        Deliver each worker its shard

        Lookahead that would run past the searchable length is cut off, so
        bytes beyond it (an excluded trailer, or nothing) never complete a
        match.

        Args:
            plan: The broadcast shard plan
            data: Source bytes, at least ``plan.length`` long (root only)

        Returns:
            This worker's LocalShard
        """
        counts = plan.scatter_counts()
        sendbuf = None
        if self.comm.is_root:
            if len(data) < plan.length:
                raise ConfigurationError(
                    f"source holds {len(data)} bytes, plan needs {plan.length}"
                )
            sendbuf = memoryview(data)[:plan.length]

        try:
            shard = self.comm.scatterv(sendbuf, counts, plan.starts, counts[self.comm.rank])
        except MemoryError as e:
            raise ResourceError(
                f"Memory allocation failed for local buffer of worker {self.comm.rank}"
            ) from e

        self.logger.debug(f"Received shard of {len(shard)} bytes at offset {plan.starts[self.comm.rank]}")
        return shard

