"""
Error taxonomy for parallel shard search
"""


class ShardSearchError(Exception):
    """Base class for every failure of a search run"""


class ConfigurationError(ShardSearchError):
    """Inputs or topology that make the run impossible"""


class ResourceError(ShardSearchError):
    """Allocation failure for a shard or result buffer"""


class SourceReadError(ShardSearchError, OSError):
    """The source byte sequence could not be read"""


class CollectiveAbortedError(ShardSearchError):
    """
    Raised on a worker whose collective operation was torn down because
    another worker aborted the run
    """

    def __init__(self, rank: int, reason: str = "run aborted by a peer worker"):
        super().__init__(f"worker {rank}: {reason}")
        self.rank = rank
