"""
Collective communication interface shared by every worker runtime
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

ROOT = 0


class Communicator(ABC):
    """
    A fixed group of workers that exchange data only through blocking
    collective operations.

    Every worker must call the same collectives in the same order. Arguments
    documented as root-only are ignored on the other ranks.
    """

    root = ROOT

    @property
    @abstractmethod
    def rank(self) -> int:
        """This worker's rank in [0, size)"""

    @property
    @abstractmethod
    def size(self) -> int:
        """Number of workers in the group"""

    @property
    def is_root(self) -> bool:
        return self.rank == self.root

    @abstractmethod
    def bcast(self, obj: Any) -> Any:
        """Return the root's ``obj`` on every rank"""

    @abstractmethod
    def scatterv(self, sendbuf: Optional[bytes], counts: Optional[Sequence[int]],
                 displs: Optional[Sequence[int]], recvcount: int) -> bytes:
        """
        Variable-length scatter of a byte buffer

        Args:
            sendbuf: Source buffer (root only)
            counts: Bytes sent to each rank (root only)
            displs: Offset into ``sendbuf`` for each rank (root only)
            recvcount: Bytes this rank expects

        Returns:
            This rank's slice as an independent bytes object
        """

    @abstractmethod
    def gather(self, obj: Any) -> Optional[List[Any]]:
        """Collect one object per rank on the root, in rank order"""

    @abstractmethod
    def gatherv(self, values: Sequence[int], counts: Optional[Sequence[int]],
                displs: Optional[Sequence[int]], total: int = 0) -> Optional[List[int]]:
        """
        Variable-length gather of integer arrays

        Args:
            values: This rank's integers
            counts: Integers expected from each rank (root only)
            displs: Position of each rank's block in the result (root only)
            total: Size of the result buffer (root only)

        Returns:
            The filled result buffer on the root, None elsewhere
        """

    @abstractmethod
    def barrier(self) -> None:
        """Block until every rank has arrived"""

    @abstractmethod
    def abort(self, exc: BaseException) -> None:
        """Tear down the whole group after a fatal error on this rank"""
