"""
Tests for the in-process collective runtime
"""
import pytest
from shard_search.comm.threaded import ThreadGroup
from shard_search.core.errors import CollectiveAbortedError, ConfigurationError


class TestThreadGroup:
    """Test collective operations across thread workers"""

    def test_bcast(self):
        """Every rank receives the root's value"""
        group = ThreadGroup(3)
        results = group.run(lambda comm: comm.bcast("pattern" if comm.is_root else None))

        assert results == ["pattern", "pattern", "pattern"]

    def test_consecutive_bcasts_stay_ordered(self):
        """Test that back-to-back broadcasts do not overwrite each other"""
        def target(comm):
            values = [1, 2, 3, 4] if comm.is_root else [None] * 4
            return [comm.bcast(v) for v in values]

        results = ThreadGroup(4).run(target)

        assert results == [[1, 2, 3, 4]] * 4

    def test_scatterv(self):
        """Each rank gets its slice of the root's buffer"""
        counts = [4, 4, 2]
        displs = [0, 3, 6]

        def target(comm):
            sendbuf = b"abcdefgh" if comm.is_root else None
            return comm.scatterv(sendbuf, counts, displs, counts[comm.rank])

        results = ThreadGroup(3).run(target)

        assert results == [b"abcd", b"defg", b"gh"]

    def test_scatterv_count_mismatch(self):
        """A rank expecting a different size than it is sent fails the run"""
        def target(comm):
            sendbuf = b"abcd" if comm.is_root else None
            return comm.scatterv(sendbuf, [2, 2], [0, 2], 3)

        with pytest.raises(ConfigurationError, match="expects 3 bytes"):
            ThreadGroup(2).run(target)

    def test_gather(self):
        """Root collects one value per rank in rank order"""
        results = ThreadGroup(3).run(lambda comm: comm.gather(comm.rank * 10))

        assert results == [[0, 10, 20], None, None]

    def test_gatherv(self):
        """Variable-length blocks land at their displacements"""
        counts = [0, 1, 2]
        displs = [0, 0, 1]

        def target(comm):
            return comm.gatherv([comm.rank] * comm.rank, counts, displs, 3)

        results = ThreadGroup(3).run(target)

        assert results == [[1, 2, 2], None, None]

    def test_failure_aborts_blocked_peers(self):
        """A worker's own error is raised, not the aborts it caused"""
        seen = {}

        def target(comm):
            if comm.rank == 1:
                raise ValueError("allocation failed")
            try:
                comm.barrier()
            except CollectiveAbortedError as e:
                seen[comm.rank] = e
                raise

        group = ThreadGroup(3)
        with pytest.raises(ValueError, match="allocation failed"):
            group.run(target)

        assert group.aborted
        assert sorted(seen) == [0, 2]

    def test_collective_timeout(self):
        """A missing participant breaks the collective after the timeout"""
        def target(comm):
            if comm.rank == 0:
                comm.barrier()

        with pytest.raises(CollectiveAbortedError, match="timed out"):
            ThreadGroup(2, timeout=0.2).run(target)

    def test_invalid_topology(self):
        """Test rejection of empty groups and out-of-range ranks"""
        with pytest.raises(ConfigurationError):
            ThreadGroup(0)
        with pytest.raises(ConfigurationError):
            ThreadGroup(2).communicator(2)


if __name__ == '__main__':
    pytest.main([__file__])
