"""
Search Node: the pipeline every worker runs
"""
from typing import Optional

from shard_search.comm.base import Communicator
from shard_search.search.patterns import PatternMatcher
from shard_search.storage.source import searchable_length
from shard_search.utils.logger import get_logger
from .collector import GlobalResult, ResultCollector
from .config import SearchConfig
from .distribution import PatternBroadcaster, ShardDistributor
from .errors import CollectiveAbortedError, ConfigurationError
from .plan import ShardPlan, partition


class SearchNode:
    """
    One worker of a parallel search.

    Stages run strictly in order: (root) validate and partition, broadcast,
    scatter, local scan, barrier, gather. A failure in any stage aborts the
    whole group; no partial result is ever returned.
    """

    def __init__(self, comm: Communicator, config: SearchConfig = None):
        self.comm = comm
        self.config = config or SearchConfig()
        self.logger = get_logger(f"SearchNode-{comm.rank}")

        self.matcher = PatternMatcher(self.config)
        self.broadcaster = PatternBroadcaster(comm)
        self.distributor = ShardDistributor(comm)
        self.collector = ResultCollector(comm)

    def prepare(self, data: bytes, pattern: bytes) -> ShardPlan:
        """Validate the root's inputs and compute the shard plan"""
        length = searchable_length(len(data), self.config.exclude_trailing_bytes)
        return partition(length, len(pattern), self.comm.size)

    def run(self, data: Optional[bytes] = None, pattern: Optional[bytes] = None) -> Optional[GlobalResult]:
        """
        Run the pipeline on this worker

        Args:
            data: Source bytes (root only)
            pattern: Pattern bytes (root only)

        Returns:
            GlobalResult on the root, None on every other worker
        """
        try:
            return self._run(data, pattern)
        except CollectiveAbortedError:
            raise
        except Exception as e:
            self.abort(e)
            raise

    def abort(self, exc: BaseException) -> None:
        """Log a fatal error on this worker and tear down the group"""
        self.logger.error(f"Search failed on worker {self.comm.rank}: {exc}")
        self.comm.abort(exc)

    def _run(self, data, pattern):
        comm = self.comm
        plan = None
        if comm.is_root:
            if data is None or pattern is None:
                raise ConfigurationError("the coordinator needs both the source and the pattern")
            plan = self.prepare(data, pattern)
            self.logger.info(
                f"Searching {plan.length} bytes for a {len(pattern)}-byte pattern on {plan.workers} workers"
            )

        pattern, plan = self.broadcaster.broadcast(pattern, plan)
        shard = self.distributor.distribute(plan, data)

        start = plan.starts[comm.rank]
        matches = self.matcher.scan(shard, pattern, start)
        del shard
        self.logger.debug(f"Found {len(matches)} matches in claimed range {plan.claimed_range(comm.rank)}")

        comm.barrier()
        result = self.collector.collect(matches)
        if result is not None:
            self.logger.info(f"Search completed: {len(result)} matches")
        return result
