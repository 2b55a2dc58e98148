"""
Pairwise k-mer distances across a list of samples.

Each sample's k-mer set is built exactly once (optionally in parallel
worker processes), then every unordered pair ``i < j`` is compared in input
order and emitted as soon as it is computed.
"""

import logging
import multiprocessing as mp
import time
from multiprocessing import Pool
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from scipy.spatial.distance import squareform

from .counter import DEFAULT_K, DEFAULT_MIN_COVERAGE, KmerSet, count_file, normalize_min_coverage, validate_k
from .errors import GenomeDistError
from .jaccard import LEGACY, distance, self_distance, validate_mode

logger = logging.getLogger(__name__)

Sample = Union[str, Path, Tuple[Union[str, Path], str]]


class PairwiseResult(NamedTuple):
    """Distance between two samples, reported once per unordered pair."""
    sample_a: str
    sample_b: str
    distance: float


def count_sample_worker(args):
    """
    Worker function for building one sample's k-mer set in a process pool.

    Args:
        args: Tuple containing (filepath, sample_name, k, min_coverage)

    Returns:
        Tuple containing (sample_name, kmer_set, error)
    """
    filepath, name, k, min_coverage = args
    try:
        return (name, count_file(filepath, k, min_coverage), None)
    except GenomeDistError as e:
        return (name, None, e)


def _resolve_samples(samples: Iterable[Sample]) -> List[Tuple[str, str]]:
    resolved = []
    for sample in samples:
        if isinstance(sample, tuple):
            filepath, name = sample
            resolved.append((str(filepath), str(name)))
        else:
            resolved.append((str(sample), str(sample)))
    return resolved


class KmerDistanceCalculator:
    """Compute k-mer distances for every pair of samples."""

    def __init__(
        self,
        k: int = DEFAULT_K,
        min_coverage: int = DEFAULT_MIN_COVERAGE,
        mode: str = LEGACY,
        n_processes: Optional[int] = 1,
        progress: Optional[Callable[[str], None]] = None,
    ):
        self.k = validate_k(k)
        self.min_coverage = normalize_min_coverage(min_coverage)
        self.mode = validate_mode(mode)
        if n_processes is None:
            n_processes = mp.cpu_count()
        if n_processes < 1:
            raise ValueError(f"n_processes must be positive, got {n_processes}")
        self.n_processes = n_processes
        self.progress = progress

    def _report(self, message: str):
        if self.progress is not None:
            self.progress(message)
        else:
            logger.info(message)

    def build_kmer_sets(self, samples: Sequence[Sample]) -> List[KmerSet]:
        """
        Build the filtered k-mer set of every sample, in input order.

        Any unreadable or unrecognised file aborts the whole run.
        """
        resolved = _resolve_samples(samples)
        start_time = time.time()

        if self.n_processes > 1 and len(resolved) > 1:
            kmer_sets = self._build_parallel(resolved)
        else:
            kmer_sets = [
                count_file(filepath, self.k, self.min_coverage, progress=self.progress)
                for filepath, _ in resolved
            ]

        logger.debug(f"Built {len(kmer_sets)} k-mer sets in {time.time() - start_time:.1f}s")
        return kmer_sets

    def _build_parallel(self, resolved: List[Tuple[str, str]]) -> List[KmerSet]:
        n_processes = min(self.n_processes, len(resolved))
        self._report(f"Counting k-mers for {len(resolved)} samples using {n_processes} processes")

        worker_args = [
            (filepath, name, self.k, self.min_coverage)
            for filepath, name in resolved
        ]
        with Pool(processes=n_processes) as pool:
            results = pool.map(count_sample_worker, worker_args)

        kmer_sets = []
        for name, kmer_set, error in results:
            if error is not None:
                logger.error(f"Failed to process {name}: {error}")
                raise error
            kmer_sets.append(kmer_set)
        return kmer_sets

    def iter_distances(self, samples: Sequence[Sample]) -> Iterator[PairwiseResult]:
        """
        Yield the distance of every unordered pair, i ascending then j ascending.

        Args:
            samples: Read file paths, or ``(path, name)`` tuples

        Yields:
            One PairwiseResult per pair ``i < j``; no self-pairs
        """
        resolved = _resolve_samples(samples)
        names = [name for _, name in resolved]
        yield from self._iter_pairs(names, self.build_kmer_sets(resolved))

    def _iter_pairs(self, names: List[str], kmer_sets: List[KmerSet]) -> Iterator[PairwiseResult]:
        for i in range(len(names) - 1):
            for j in range(i + 1, len(names)):
                self._report(f"Finding intersection and union of kmers for {names[i]} and {names[j]}")
                value = distance(
                    kmer_sets[i],
                    kmer_sets[j],
                    mode=self.mode,
                    sample_a=names[i],
                    sample_b=names[j],
                    progress=self.progress,
                )
                yield PairwiseResult(names[i], names[j], value)
            # Every pair involving sample i has been emitted.
            kmer_sets[i] = None

    def distance_matrix(self, samples: Sequence[Sample]) -> pd.DataFrame:
        """
        Collect all pairwise distances into a square, symmetric table.

        The diagonal holds the self-distance of the configured mode, or NaN
        for a sample whose k-mer set is empty (its self-distance is undefined).
        """
        resolved = _resolve_samples(samples)
        names = [name for _, name in resolved]
        kmer_sets = self.build_kmer_sets(resolved)
        empty = [len(kmer_set) == 0 for kmer_set in kmer_sets]
        condensed = np.array([r.distance for r in self._iter_pairs(names, kmer_sets)], dtype=float)

        if len(names) < 2:
            matrix = np.zeros((len(names), len(names)))
        else:
            matrix = squareform(condensed, checks=False)
        np.fill_diagonal(matrix, self_distance(self.mode))
        for i in np.flatnonzero(empty):
            matrix[i, i] = np.nan

        return pd.DataFrame(matrix, index=names, columns=names)


def jaccard_distances(
    samples: Sequence[Sample],
    k: int = DEFAULT_K,
    min_coverage: int = DEFAULT_MIN_COVERAGE,
    mode: str = LEGACY,
    n_processes: Optional[int] = 1,
    progress: Optional[Callable[[str], None]] = None,
) -> Iterator[PairwiseResult]:
    """Convenience wrapper around ``KmerDistanceCalculator.iter_distances``."""
    calculator = KmerDistanceCalculator(
        k=k, min_coverage=min_coverage, mode=mode, n_processes=n_processes, progress=progress
    )
    return calculator.iter_distances(samples)
