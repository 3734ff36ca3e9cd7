#!/usr/bin/env python3
import logging
import sys
import time
from typing import List, Optional, TextIO

from compar.cli.cli_options import CompareConfig, parse_args
from compar.cli.progress_bar import progress_bar, setup_logging
from compar.comparison import ClassificationResult, classify_lines, index_lines, split_lines
from compar.decoding import decode
from compar.typings import RunStats

logger = logging.getLogger(__name__)


def write_lines(lines: List[str], f: TextIO):
    for line in lines:
        f.write(line + "\n")


def print_stats(stats: RunStats, f: Optional[TextIO] = None):
    f = f or sys.stdout
    print("\n-- Statistics --", file=f)
    print(f"File 1 (needles): {stats['needle_lines']} lines", file=f)
    print(f"File 2 (haystack): {stats['haystack_lines']} lines ({stats['haystack_keys']} unique keys)", file=f)
    print(f"Lines found: {stats['found']}", file=f)
    print(f"Lines not found: {stats['missing']}", file=f)
    print(f"Processing time: {stats['seconds']:.3f}s", file=f)


def run(cfg: CompareConfig) -> RunStats:
    """Compare ``cfg.needle`` against ``cfg.haystack`` and emit the selected partition."""
    started = time.perf_counter()

    haystack_lines = split_lines(decode(cfg.haystack))
    index = index_lines(haystack_lines, cfg.length)
    logger.debug(f"{cfg.haystack}: {len(haystack_lines)} lines, {len(index)} unique keys")

    needle_lines = split_lines(decode(cfg.needle))
    with progress_bar(needle_lines, total=len(needle_lines), desc="Comparing",
                      disable=not cfg.progress) as lines:
        result: ClassificationResult = classify_lines(lines, index, cfg.length)

    selected = result.select(cfg.found)
    if cfg.output is not None:
        with open(cfg.output, 'wt', encoding='utf-8', newline='\n') as f:
            write_lines(selected, f)
    else:
        write_lines(selected, sys.stdout)
        sys.stdout.flush()

    return RunStats(
        needle_lines=len(needle_lines),
        haystack_lines=len(haystack_lines),
        haystack_keys=len(index),
        found=len(result.found),
        missing=len(result.missing),
        seconds=time.perf_counter() - started,
    )


def main(argv: Optional[List[str]] = None) -> int:
    cfg = parse_args(argv)
    setup_logging(debug=cfg.debug)
    try:
        stats = run(cfg)
    except OSError as e:
        logger.error(str(e))
        return 1
    if cfg.stat:
        print_stats(stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())
