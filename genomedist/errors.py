"""
Exception types raised by the k-mer distance engine.

Every error carries enough context (file path or sample identifiers) to
diagnose a failed run. All of them survive pickling so they can be raised
inside a worker process and re-raised in the parent.
"""

from typing import Optional


class GenomeDistError(Exception):
    """Base class for all genomedist errors."""


class UnsupportedFormat(GenomeDistError, ValueError):
    """The input filename does not end in a recognised read-file suffix."""

    def __init__(self, path: str):
        self.path = str(path)
        super().__init__(
            f"I do not understand the extension on {self.path} "
            f"(expected .fastq or .fastq.gz)"
        )

    def __reduce__(self):
        return (self.__class__, (self.path,))


class ReadFileError(GenomeDistError, IOError):
    """A read file could not be opened, read or decompressed."""

    def __init__(self, path: str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"I could not read {self.path}: {reason}")

    def __reduce__(self):
        return (self.__class__, (self.path, self.reason))


class DivisionUndefined(GenomeDistError, ZeroDivisionError):
    """Both k-mer sets of a pair are empty, so the union size is zero."""

    def __init__(self, sample_a: Optional[str] = None, sample_b: Optional[str] = None):
        self.sample_a = sample_a
        self.sample_b = sample_b
        if sample_a is not None and sample_b is not None:
            pair = f" between {sample_a} and {sample_b}"
        else:
            pair = ""
        super().__init__(f"Distance{pair} is undefined: both k-mer sets are empty")

    def __reduce__(self):
        return (self.__class__, (self.sample_a, self.sample_b))
