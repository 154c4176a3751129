"""
MPI worker runtime built on mpi4py

Launch with e.g. ``mpiexec -n 4 shard-search search --backend mpi PATTERN FILE``.
"""
from array import array
from typing import Any, List, Optional, Sequence

from mpi4py import MPI

from shard_search.utils.logger import get_logger
from .base import Communicator


class MPICommunicator(Communicator):
    """Communicator over an MPI intracommunicator (COMM_WORLD by default)"""

    def __init__(self, comm=None):
        self._comm = comm if comm is not None else MPI.COMM_WORLD
        self.logger = get_logger(f"MPICommunicator-{self.rank}")

    @property
    def rank(self) -> int:
        return self._comm.Get_rank()

    @property
    def size(self) -> int:
        return self._comm.Get_size()

    def bcast(self, obj: Any) -> Any:
        return self._comm.bcast(obj, root=self.root)

    def scatterv(self, sendbuf: Optional[bytes], counts: Optional[Sequence[int]],
                 displs: Optional[Sequence[int]], recvcount: int) -> bytes:
        recvbuf = bytearray(recvcount)
        send = [sendbuf, list(counts), list(displs), MPI.BYTE] if self.is_root else None
        self._comm.Scatterv(send, [recvbuf, MPI.BYTE], root=self.root)
        return bytes(recvbuf)

    def gather(self, obj: Any) -> Optional[List[Any]]:
        return self._comm.gather(obj, root=self.root)

    def gatherv(self, values: Sequence[int], counts: Optional[Sequence[int]],
                displs: Optional[Sequence[int]], total: int = 0) -> Optional[List[int]]:
        sendbuf = array('q', values)
        recvbuf = None
        recv = None
        if self.is_root:
            recvbuf = array('q', [0]) * total
            recv = [recvbuf, list(counts), list(displs), MPI.INT64_T]
        self._comm.Gatherv([sendbuf, MPI.INT64_T], recv, root=self.root)
        return recvbuf.tolist() if self.is_root else None

    def barrier(self) -> None:
        self._comm.Barrier()

    def abort(self, exc: BaseException) -> None:
        self.logger.error(f"Aborting all workers: {exc}")
        self._comm.Abort(1)
