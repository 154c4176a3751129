"""
Exact-match pattern scanning over a local shard
"""
from typing import List
from shard_search.core.config import SearchConfig


class PatternMatcher:
    """
    Finds every occurrence of a byte pattern fully contained in a shard.

    Occurrences may overlap; all of them are reported, in ascending order,
    as global offsets (local index plus the shard's start).
    """

    def __init__(self, config: SearchConfig = None):
        self.config = config or SearchConfig()
        self._scanners = {
            "brute_force": self.brute_force,
            "find": self.find_all,
        }

    def scan(self, shard: bytes, pattern: bytes, start: int = 0) -> List[int]:
        """
        Scan a shard with the configured algorithm

        Args:
            shard: Local bytes to search
            pattern: Pattern to find
            start: Global offset of ``shard[0]``

        Returns:
            Ascending global offsets of every match
        """
        return self._scanners[self.config.algorithm](shard, pattern, start)

    @staticmethod
    def brute_force(shard: bytes, pattern: bytes, start: int = 0) -> List[int]:
        """
        Compare the pattern byte by byte at every candidate position

        Candidates run from 0 to ``len(shard) - len(pattern)`` inclusive, so a
        shard shorter than the pattern yields nothing.
        """
        found = []
        m = len(pattern)
        for i in range(len(shard) - m + 1):
            j = 0
            while j < m and shard[i + j] == pattern[j]:
                j += 1
            if j == m:
                found.append(i + start)
        return found

    @staticmethod
    def find_all(shard: bytes, pattern: bytes, start: int = 0) -> List[int]:
        """Same result as brute_force, using bytes.find and resuming one byte past each hit"""
        found = []
        pos = shard.find(pattern)
        while pos != -1:
            found.append(pos + start)
            pos = shard.find(pattern, pos + 1)
        return found
