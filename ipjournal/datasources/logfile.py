# ipjournal/datasources/logfile.py

from __future__ import annotations
from pathlib import Path
from typing import Iterator, Union

from ipjournal.utils.logging import get_logger

log = get_logger(__name__)

PathLike = Union[str, Path]


def iter_lines(path: PathLike, encoding: str = "utf-8") -> Iterator[str]:
    """
    Yield the lines of a text log file one at a time, without trailing newlines.

    Undecodable bytes are replaced rather than failing the whole read. The
    file is closed when the generator is exhausted, closed, or errors.
    """
    path = Path(path)
    with path.open("r", encoding=encoding, errors="replace") as f:
        log.debug("Opened %s", path)
        for line in f:
            yield line.rstrip("\r\n")
