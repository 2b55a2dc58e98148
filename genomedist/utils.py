"""
Utility functions for genomedist.

Logging setup, progress callbacks, and rendering of pairwise results.
"""

import sys
import logging
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, TextIO, Union

import pandas as pd

from .pairwise import PairwiseResult

# "<seconds since start>\t<message>"
ELAPSED_FORMAT = "%(elapsed)d\t%(message)s"


class ElapsedFormatter(logging.Formatter):
    """Prefix each message with whole seconds elapsed since logging started."""

    def format(self, record):
        record.elapsed = record.relativeCreated // 1000
        return super().format(record)


def setup_logging(verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None):
    """Set up logging configuration."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ElapsedFormatter(ELAPSED_FORMAT))
    handlers = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)


def make_progress(logger: logging.Logger, level: int = logging.INFO) -> Callable[[str], None]:
    """Return a progress callback that forwards messages to ``logger``."""
    def progress(message: str):
        logger.log(level, message)
    return progress


def format_pairs(results: Iterable[PairwiseResult]) -> Iterator[str]:
    """Render each result as a tab-separated ``a  b  distance`` line."""
    for result in results:
        yield "\t".join([result.sample_a, result.sample_b, str(result.distance)])


def write_pairs(results: Iterable[PairwiseResult], out: TextIO) -> int:
    """Stream results to ``out`` one line at a time; returns the pair count."""
    n_pairs = 0
    for line in format_pairs(results):
        out.write(line + "\n")
        out.flush()
        n_pairs += 1
    return n_pairs


def save_results(matrix: pd.DataFrame, output: Union[str, Path, TextIO]):
    """Save a square distance matrix as a tab-separated table."""
    if isinstance(output, (str, Path)):
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        matrix.to_csv(output, sep="\t", index_label=".")
        logging.info(f"Distance matrix saved to {output}")
    else:
        matrix.to_csv(output, sep="\t", index_label=".")
