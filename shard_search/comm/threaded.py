"""
In-process worker runtime: one thread per rank, collectives over a shared barrier
"""
import threading
from typing import Any, Callable, List, Optional, Sequence

from shard_search.core.errors import CollectiveAbortedError, ConfigurationError
from shard_search.utils.logger import get_logger
from .base import Communicator


class ThreadGroup:
    """
    A fixed-size group of thread workers.

    Each collective is a two-step rendezvous on one ``threading.Barrier``:
    writers fill their slot, everyone meets, readers copy what they need,
    everyone meets again so the slots can be reused. Aborting breaks the
    barrier, which releases every waiting worker with an error. A group
    runs once; an aborted group cannot be reused.
    """

    def __init__(self, size: int, timeout: Optional[float] = None):
        if size < 1:
            raise ConfigurationError(f"worker count must be at least 1, got {size}")
        self.size = size
        self.timeout = timeout
        self.logger = get_logger("ThreadGroup")

        self._barrier = threading.Barrier(size, timeout=timeout)
        self._slots: List[Any] = [None] * size
        self._failure: Optional[BaseException] = None
        self._lock = threading.Lock()

    @property
    def aborted(self) -> bool:
        return self._barrier.broken

    def communicator(self, rank: int) -> "ThreadCommunicator":
        """Get the communicator handle for one rank"""
        if not 0 <= rank < self.size:
            raise ConfigurationError(f"rank {rank} outside group of {self.size}")
        return ThreadCommunicator(self, rank)

    def abort(self, rank: int, exc: BaseException) -> None:
        """Record the first failure and release every blocked worker"""
        with self._lock:
            if self._failure is None:
                self._failure = exc
                self.logger.error(f"Worker {rank} aborted the run: {exc}")
        self._barrier.abort()

    def run(self, target: Callable[[Communicator], Any]) -> List[Any]:
        """
        Run ``target`` on every rank and wait for all of them

        Args:
            target: Called once per rank with that rank's communicator

        Returns:
            Per-rank return values in rank order

        Raises:
            The error that brought the run down. A worker's own failure is
            preferred over the CollectiveAbortedError it caused on its peers.
        """
        results: List[Any] = [None] * self.size
        errors: List[Optional[Exception]] = [None] * self.size

        def worker(rank: int):
            comm = self.communicator(rank)
            try:
                results[rank] = target(comm)
            except Exception as e:
                errors[rank] = e
                comm.abort(e)

        threads = [
            threading.Thread(target=worker, args=(rank,), name=f"shard-worker-{rank}", daemon=True)
            for rank in range(self.size)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        failures = [e for e in errors if e is not None]
        if failures:
            primary = next(
                (e for e in failures if not isinstance(e, CollectiveAbortedError)),
                failures[0]
            )
            raise primary
        return results


class ThreadCommunicator(Communicator):
    """Communicator handle bound to one rank of a ThreadGroup"""

    def __init__(self, group: ThreadGroup, rank: int):
        self._group = group
        self._rank = rank

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def size(self) -> int:
        return self._group.size

    def _wait(self):
        try:
            self._group._barrier.wait()
        except threading.BrokenBarrierError:
            if self._group._failure is None:
                reason = f"collective operation timed out after {self._group.timeout}s"
            else:
                reason = "run aborted by a peer worker"
            raise CollectiveAbortedError(self._rank, reason) from None

    def _check_tables(self, counts: Sequence[int], displs: Sequence[int]):
        if len(counts) != self.size or len(displs) != self.size:
            raise ConfigurationError(
                f"expected {self.size} counts and displacements, "
                f"got {len(counts)} and {len(displs)}"
            )

    def bcast(self, obj: Any) -> Any:
        slots = self._group._slots
        if self.is_root:
            slots[self.root] = obj
        self._wait()
        value = slots[self.root]
        self._wait()
        return value

    def scatterv(self, sendbuf: Optional[bytes], counts: Optional[Sequence[int]],
                 displs: Optional[Sequence[int]], recvcount: int) -> bytes:
        slots = self._group._slots
        if self.is_root:
            self._check_tables(counts, displs)
            slots[self.root] = (memoryview(sendbuf), tuple(counts), tuple(displs))
        self._wait()
        view, all_counts, all_displs = slots[self.root]
        count, displ = all_counts[self._rank], all_displs[self._rank]
        if count != recvcount:
            raise ConfigurationError(
                f"worker {self._rank} expects {recvcount} bytes but is sent {count}"
            )
        chunk = bytes(view[displ:displ + count])
        self._wait()
        return chunk

    def gather(self, obj: Any) -> Optional[List[Any]]:
        slots = self._group._slots
        slots[self._rank] = obj
        self._wait()
        gathered = list(slots) if self.is_root else None
        self._wait()
        return gathered

    def gatherv(self, values: Sequence[int], counts: Optional[Sequence[int]],
                displs: Optional[Sequence[int]], total: int = 0) -> Optional[List[int]]:
        slots = self._group._slots
        slots[self._rank] = list(values)
        self._wait()
        result = None
        if self.is_root:
            self._check_tables(counts, displs)
            result = [0] * total
            for rank, block in enumerate(slots):
                if len(block) != counts[rank]:
                    raise ConfigurationError(
                        f"worker {rank} sent {len(block)} values, expected {counts[rank]}"
                    )
                result[displs[rank]:displs[rank] + counts[rank]] = block
        self._wait()
        return result

    def barrier(self) -> None:
        self._wait()

    def abort(self, exc: BaseException) -> None:
        self._group.abort(self._rank, exc)
