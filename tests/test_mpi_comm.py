"""
Tests for the MPI runtime on a single-rank communicator

Multi-rank runs need a launcher, e.g. ``mpiexec -n 4 shard-search search --backend mpi PATTERN FILE``.
"""
import pytest

MPI = pytest.importorskip("mpi4py.MPI")

from shard_search.comm.mpi import MPICommunicator
from shard_search.core.node import SearchNode


class TestMPICommunicator:
    """Test collectives on COMM_SELF"""

    def setup_method(self):
        self.comm = MPICommunicator(MPI.COMM_SELF)

    def test_topology(self):
        assert self.comm.rank == 0
        assert self.comm.size == 1
        assert self.comm.is_root

    def test_collectives(self):
        assert self.comm.bcast(b"abc") == b"abc"
        assert self.comm.scatterv(b"abcdef", [4], [1], 4) == b"bcde"
        assert self.comm.gather(3) == [3]
        assert self.comm.gatherv([5, 9], [2], [0], 2) == [5, 9]
        self.comm.barrier()

    def test_search_node(self):
        result = SearchNode(self.comm).run(b"abcabcabc", b"abc")

        assert result.offsets == [0, 3, 6]


if __name__ == '__main__':
    pytest.main([__file__])
