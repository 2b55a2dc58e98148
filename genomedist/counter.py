"""
Exact k-mer counting for a single sample.

Counting runs in two explicit phases: every k-mer of every read is
accumulated into an owned ``Counter``, then entries seen fewer than
``min_coverage`` times are removed as likely sequencing noise.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Union

from .reader import stream_reads

logger = logging.getLogger(__name__)

DEFAULT_K = 18
DEFAULT_MIN_COVERAGE = 2

# k-mer string -> occurrence count
KmerSet = Counter

ProgressCallback = Callable[[str], None]


def validate_k(k: int) -> int:
    """Check that the k-mer length is a positive integer."""
    if isinstance(k, bool) or not isinstance(k, int):
        raise ValueError(f"k-mer length must be an integer, got {k!r}")
    if k < 1:
        raise ValueError(f"k-mer length must be at least 1, got {k}")
    return k


def normalize_min_coverage(min_coverage: Optional[int]) -> int:
    """
    Coerce a minimum coverage value into the usable range.

    A missing or zero value falls back to the default of 2; anything else
    below 1 is raised to 1.
    """
    if not min_coverage:
        return DEFAULT_MIN_COVERAGE
    return max(1, int(min_coverage))


def extract_kmers(read: str, k: int) -> Iterator[str]:
    """Yield the ``len(read) - k + 1`` substrings of length k, left to right."""
    for i in range(len(read) - k + 1):
        yield read[i : i + k]


def accumulate(reads: Iterable[str], k: int) -> KmerSet:
    """Count every k-mer across all reads of one sample."""
    validate_k(k)
    counts = Counter()
    for read in reads:
        counts.update(extract_kmers(read, k))
    return counts


def filter_low_coverage(counts: KmerSet, min_coverage: int) -> KmerSet:
    """Remove, in place, every k-mer seen fewer than ``min_coverage`` times."""
    for kmer in [kmer for kmer, count in counts.items() if count < min_coverage]:
        del counts[kmer]
    return counts


def count(
    reads: Iterable[str],
    k: int = DEFAULT_K,
    min_coverage: int = DEFAULT_MIN_COVERAGE,
    progress: Optional[ProgressCallback] = None,
) -> KmerSet:
    """
    Build the filtered k-mer set for one sample.

    Args:
        reads: Nucleotide strings of the sample, consumed once
        k: K-mer length
        min_coverage: Minimum occurrence count for a k-mer to be kept
        progress: Optional callback receiving informational messages

    Returns:
        Mapping of k-mer to count; every retained count is >= min_coverage
    """
    report = progress or logger.info
    min_coverage = normalize_min_coverage(min_coverage)

    counts = accumulate(reads, k)
    filter_low_coverage(counts, min_coverage)

    report(f"Found {len(counts)} unique kmers of depth >= {min_coverage}")
    return counts


def count_file(
    path: Union[str, Path],
    k: int = DEFAULT_K,
    min_coverage: int = DEFAULT_MIN_COVERAGE,
    progress: Optional[ProgressCallback] = None,
) -> KmerSet:
    """Stream a read file and build its filtered k-mer set."""
    report = progress or logger.info
    report(f"Counting {k}-mers for {path}")
    return count(stream_reads(path), k, min_coverage, progress=progress)
