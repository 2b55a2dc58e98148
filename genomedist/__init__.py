"""
genomedist: reference-free k-mer distance between sequencing samples.

Streams reads from FASTQ files, counts exact k-mers, drops low-coverage
k-mers and reports a Jaccard-style distance for every pair of samples.
"""

__version__ = "1.0.0"

from .errors import GenomeDistError, UnsupportedFormat, ReadFileError, DivisionUndefined
from .reader import stream_reads, detect_format
from .counter import count, count_file, extract_kmers
from .jaccard import distance, compare, KmerSetComparison
from .pairwise import KmerDistanceCalculator, PairwiseResult, jaccard_distances
from .config import GenomeDistConfig

__all__ = [
    "GenomeDistError",
    "UnsupportedFormat",
    "ReadFileError",
    "DivisionUndefined",
    "stream_reads",
    "detect_format",
    "count",
    "count_file",
    "extract_kmers",
    "distance",
    "compare",
    "KmerSetComparison",
    "KmerDistanceCalculator",
    "PairwiseResult",
    "jaccard_distances",
    "GenomeDistConfig",
]
