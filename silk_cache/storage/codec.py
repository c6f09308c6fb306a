"""
Reads and writes the cache file format: a plain sequence of pickled records with
no header or count. A clean end of file is the only terminator.
"""

import logging
import os
import pickle
import tempfile
from collections.abc import Iterable, Iterator
from contextlib import suppress
from pathlib import Path
from typing import BinaryIO

from silk_cache.exceptions import CacheDecodeError, CacheLoadError
from silk_cache.models.comparable import SilkComparable

log = logging.getLogger(__name__)


def iter_records(path: Path) -> Iterator[SilkComparable]:
    """
    Yields the items stored in a cache file, in file order.

    A missing file yields nothing. Each call re-opens the file, so the sequence can
    be restarted by calling again.

    Raises:
        CacheLoadError: If the file exists but cannot be opened.
        CacheDecodeError: If a record is corrupt, truncated, or is not a
        SilkComparable.
    """
    try:
        f = open(path, "rb")  # noqa: SIM115
    except FileNotFoundError:
        return
    except OSError as e:
        raise CacheLoadError(f"Could not open cache file '{path}': {e}") from e

    with f:
        index = 0
        while f.peek(1):
            try:
                item = pickle.load(f)
            except EOFError as e:
                raise CacheDecodeError(
                    f"Record {index} in '{path.name}' is truncated."
                ) from e
            except Exception as e:
                raise CacheDecodeError(
                    f"Record {index} in '{path.name}' could not be decoded: {e}"
                ) from e
            if item is not None:
                if not isinstance(item, SilkComparable):
                    raise CacheDecodeError(
                        f"Record {index} in '{path.name}' is a "
                        f"{type(item).__name__}, not a SilkComparable."
                    )
                yield item
            index += 1


def _dump_all(f: BinaryIO, items: Iterable[SilkComparable], protocol: int) -> int:
    count = 0
    for item in items:
        pickle.dump(item, f, protocol=protocol)
        count += 1
    return count


def write_records(
    path: Path,
    items: Iterable[SilkComparable],
    protocol: int = pickle.HIGHEST_PROTOCOL,
    atomic: bool = False,
) -> int:
    """
    Writes items to a cache file, replacing its previous contents.

    With `atomic`, the records go to a temporary file in the same directory which
    is then renamed over the cache file, so readers never see a half-written file.

    Returns:
        The number of records written.
    """
    if not atomic:
        with open(path, "wb") as f:
            return _dump_all(f, items, protocol)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            count = _dump_all(f, items, protocol)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        log.debug(f"Atomically replaced '{path.name}' with {count} records.")
        return count
    except BaseException:
        with suppress(FileNotFoundError):
            tmp_path.unlink()
        raise
