"""
Search Coordinator: hosts a whole parallel search inside one process
"""
from typing import Optional

from shard_search.comm.base import ROOT, Communicator
from shard_search.comm.threaded import ThreadGroup
from shard_search.utils.logger import get_logger
from .collector import GlobalResult
from .config import Config
from .node import SearchNode
from .plan import ShardPlan, partition


class SearchCoordinator:
    """
    Launches one SearchNode per worker on a ThreadGroup and hands the
    source and pattern to the root
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.logger = get_logger("SearchCoordinator")

    @property
    def workers(self) -> int:
        return self.config.cluster.workers

    def plan(self, length: int, pattern_length: int) -> ShardPlan:
        """Preview the shard plan a search of this size would use"""
        return partition(length, pattern_length, self.workers)

    def search(self, data: bytes, pattern: bytes) -> GlobalResult:
        """
        Run a parallel search over ``data``

        Args:
            data: Source bytes
            pattern: Pattern bytes

        Returns:
            The GlobalResult produced on the root
        """
        group = ThreadGroup(self.workers, timeout=self.config.cluster.collective_timeout)
        self.logger.debug(f"Starting {self.workers} thread workers")

        def run_node(comm: Communicator):
            node = SearchNode(comm, self.config.search)
            if comm.is_root:
                return node.run(data, pattern)
            return node.run()

        results = group.run(run_node)
        return results[ROOT]
