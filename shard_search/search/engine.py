"""
Search Engine: entry point that picks the worker runtime
"""
from typing import Optional, Union

from shard_search.core.collector import GlobalResult
from shard_search.core.config import Config
from shard_search.core.coordinator import SearchCoordinator
from shard_search.core.node import SearchNode
from shard_search.storage.source import SourceReader
from shard_search.utils.logger import get_logger


def as_pattern_bytes(pattern: Union[str, bytes]) -> bytes:
    """Encode a text pattern the way the command line hands it over"""
    if isinstance(pattern, str):
        return pattern.encode('utf-8', 'surrogateescape')
    return bytes(pattern)


class SearchEngine:
    """
    Main search engine.

    With the ``threads`` backend the whole run happens in this process and
    every call returns the result. With the ``mpi`` backend every MPI rank
    calls the same method; only rank 0 reads the source and gets the result,
    the others get None. The worker count then comes from the MPI launcher.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.logger = get_logger("SearchEngine")
        self.reader = SourceReader()

    @property
    def backend(self) -> str:
        return self.config.cluster.backend

    def search(self, data: bytes, pattern: Union[str, bytes]) -> Optional[GlobalResult]:
        """
        Search an in-memory byte sequence

        Args:
            data: Source bytes (only needed on the root under mpi)
            pattern: Pattern to find

        Returns:
            GlobalResult, or None on non-root MPI ranks
        """
        pattern = as_pattern_bytes(pattern)
        if self.backend == "threads":
            return SearchCoordinator(self.config).search(data, pattern)

        node = self._mpi_node()
        if node.comm.is_root:
            return node.run(data, pattern)
        return node.run()

    def search_file(self, file_path: str, pattern: Union[str, bytes]) -> Optional[GlobalResult]:
        """Search the contents of a file"""
        pattern = as_pattern_bytes(pattern)
        if self.backend == "threads":
            return SearchCoordinator(self.config).search(self.reader.read(file_path), pattern)

        node = self._mpi_node()
        if not node.comm.is_root:
            return node.run()
        try:
            data = self.reader.read(file_path)
        except Exception as e:
            node.abort(e)
            raise
        return node.run(data, pattern)

    def _mpi_node(self) -> SearchNode:
        from shard_search.comm.mpi import MPICommunicator

        comm = MPICommunicator()
        if comm.size != self.config.cluster.workers:
            self.logger.debug(f"Using {comm.size} MPI ranks, configured worker count ignored")
        return SearchNode(comm, self.config.search)
