import contextlib
import logging
import os
import sys
from typing import Iterable, Iterator, Optional, TypeVar

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

T = TypeVar("T")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(debug: bool = False):
    """Configure root logging on stderr; ``LOGLEVEL`` picks the level unless ``debug`` is set."""
    level = "DEBUG" if debug else os.environ.get("LOGLEVEL", "INFO").upper()
    unknown = not isinstance(logging.getLevelName(level), int)
    if unknown:
        bad_level, level = level, "INFO"
    logging.basicConfig(
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        level=level,
        stream=sys.stderr,
        force=True,
    )
    if unknown:
        logging.getLogger(__name__).warning(f"Unknown LOGLEVEL {bad_level!r}, using INFO")


@contextlib.contextmanager
def progress_bar(iterable: Iterable[T], total: Optional[int] = None, desc: Optional[str] = None,
                 disable: bool = False) -> Iterator[Iterable[T]]:
    """
    Yield ``iterable`` wrapped in a transient tqdm bar on stderr. The bar is
    skipped when ``disable`` is set or stderr is not a terminal; log records
    emitted meanwhile are written above the bar.
    """
    bar = tqdm(
        iterable,
        total=total,
        desc=desc,
        unit="lines",
        file=sys.stderr,
        leave=False,
        dynamic_ncols=True,
        disable=True if disable else None,
    )
    try:
        with logging_redirect_tqdm():
            yield bar
    finally:
        bar.close()
