"""
Loading of the source byte sequence on the coordinator
"""
from pathlib import Path

from shard_search.core.errors import ConfigurationError, ResourceError, SourceReadError
from shard_search.utils.helpers import format_file_size
from shard_search.utils.logger import get_logger


def searchable_length(raw_length: int, exclude_trailing: int = 0) -> int:
    """
    Length of the region that is searched

    Args:
        raw_length: Total bytes in the source
        exclude_trailing: Bytes at the end that never take part in a match

    Returns:
        ``raw_length - exclude_trailing``
    """
    if exclude_trailing < 0:
        raise ConfigurationError(f"cannot exclude a negative number of bytes ({exclude_trailing})")
    if exclude_trailing > raw_length:
        raise ConfigurationError(
            f"cannot exclude {exclude_trailing} trailing bytes from a {raw_length}-byte source"
        )
    return raw_length - exclude_trailing


class SourceReader:
    """
    Reads a whole file into memory for distribution
    """

    def __init__(self):
        self.logger = get_logger("SourceReader")

    def read(self, file_path: str) -> bytes:
        """
        Read the file at ``file_path``

        Raises:
            SourceReadError: if the file cannot be opened or read
            ResourceError: if the buffer cannot be allocated
        """
        path = Path(file_path)
        try:
            with open(path, 'rb') as f:
                data = f.read()
        except MemoryError as e:
            raise ResourceError(f"Memory allocation failed for file buffer of {path}") from e
        except OSError as e:
            raise SourceReadError(f"Unable to read file {path}: {e.strerror or e}") from e

        self.logger.info(f"Read {format_file_size(len(data))} from {path}")
        return data
