"""
Set-based distance between two k-mer sets.

Two formulas are available:

``legacy`` (default)
    ``1 - symmetric_difference / union``. This is the number earlier
    genomedist releases report. Because ``symmetric_difference = union -
    intersection`` it is algebraically ``intersection / union``, i.e. the
    Jaccard *similarity*: identical sets score 1 and disjoint sets score 0.

``jaccard``
    The textbook Jaccard distance ``1 - intersection / union``: identical
    sets score 0 and disjoint sets score 1.

The legacy formula stays the default so existing tables keep their values.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from .errors import DivisionUndefined

logger = logging.getLogger(__name__)

LEGACY = "legacy"
JACCARD = "jaccard"
MODES = (LEGACY, JACCARD)


@dataclass(frozen=True)
class KmerSetComparison:
    """Sizes describing how two k-mer sets overlap."""
    symmetric_difference: int
    intersection: int
    union: int


def compare(a: Mapping[str, int], b: Mapping[str, int]) -> KmerSetComparison:
    """Count k-mers unique to one set, shared by both, and in either."""
    only_a = sum(1 for kmer in a if kmer not in b)
    only_b = sum(1 for kmer in b if kmer not in a)
    shared = len(a) - only_a
    return KmerSetComparison(
        symmetric_difference=only_a + only_b,
        intersection=shared,
        union=only_a + only_b + shared,
    )


def self_distance(mode: str = LEGACY) -> float:
    """Distance of any non-empty set to itself under the given mode."""
    validate_mode(mode)
    return 1.0 if mode == LEGACY else 0.0


def validate_mode(mode: str) -> str:
    if mode not in MODES:
        raise ValueError(f"Unknown distance mode {mode!r}; choose from {', '.join(MODES)}")
    return mode


def distance(
    a: Mapping[str, int],
    b: Mapping[str, int],
    mode: str = LEGACY,
    sample_a: Optional[str] = None,
    sample_b: Optional[str] = None,
    progress: Optional[Callable[[str], None]] = None,
) -> float:
    """
    Compute the distance between two k-mer sets.

    Only key membership matters; counts are ignored and neither mapping is
    modified.

    Args:
        a: K-mer set of the first sample
        b: K-mer set of the second sample
        mode: ``"legacy"`` or ``"jaccard"`` (see module docstring)
        sample_a: Identifier of the first sample, used in error messages
        sample_b: Identifier of the second sample, used in error messages
        progress: Optional callback receiving informational messages

    Returns:
        Value in [0, 1]

    Raises:
        DivisionUndefined: If both sets are empty
    """
    validate_mode(mode)
    report = progress or logger.debug

    sizes = compare(a, b)
    if sizes.union == 0:
        raise DivisionUndefined(sample_a, sample_b)

    if mode == LEGACY:
        result = 1 - (sizes.symmetric_difference / sizes.union)
        report(f"{result}=1-({sizes.symmetric_difference} / {sizes.union})")
    else:
        result = 1 - (sizes.intersection / sizes.union)
        report(f"{result}=1-({sizes.intersection} / {sizes.union})")
    return result
