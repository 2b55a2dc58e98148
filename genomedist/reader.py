"""
Streaming reader for record-oriented sequencing read files.

Each FASTQ record spans four lines (identifier, sequence, separator,
quality); only the sequence line is yielded. Compressed input is detected
from the filename and decompressed on the fly.
"""

import gzip
import logging
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO, Union

from .errors import ReadFileError, UnsupportedFormat

logger = logging.getLogger(__name__)

PLAIN = "fastq"
COMPRESSED = "fastq.gz"

# Longest suffixes first so ".fastq.gz" wins over ".gz"-less matches.
FASTQ_SUFFIXES = {
    ".fastq.gz": COMPRESSED,
    ".fq.gz": COMPRESSED,
    ".fastq": PLAIN,
    ".fq": PLAIN,
}

LINES_PER_RECORD = 4
SEQUENCE_LINE = 1

# Single-byte codec: any header or quality byte decodes
READ_ENCODING = "latin-1"

PathLike = Union[str, Path]


def detect_format(path: PathLike) -> str:
    """
    Work out whether a read file is plain or gzip-compressed FASTQ.

    Args:
        path: Path to the read file

    Returns:
        Either ``"fastq"`` or ``"fastq.gz"``

    Raises:
        UnsupportedFormat: If the filename has no recognised suffix
    """
    name = Path(path).name
    for suffix, fmt in FASTQ_SUFFIXES.items():
        if name.endswith(suffix) and len(name) > len(suffix):
            return fmt
    raise UnsupportedFormat(str(path))


@contextmanager
def open_reads(path: PathLike) -> Iterator[TextIO]:
    """Open a read file as text, decompressing when the suffix says so."""
    fmt = detect_format(path)
    try:
        if fmt == COMPRESSED:
            handle = gzip.open(path, "rt", encoding=READ_ENCODING)
        else:
            handle = open(path, "r", encoding=READ_ENCODING)
    except OSError as e:
        raise ReadFileError(str(path), str(e)) from e

    try:
        yield handle
    finally:
        handle.close()


def stream_reads(path: PathLike) -> Iterator[str]:
    """
    Lazily yield the sequence line of every record in a read file.

    The file handle is held only while the generator is being consumed and
    is released on exhaustion, on error, or when the generator is closed.

    Args:
        path: Path to a ``.fastq`` or ``.fastq.gz`` file

    Yields:
        One nucleotide string per read, line ending removed

    Raises:
        UnsupportedFormat: If the filename has no recognised suffix
        ReadFileError: If the file cannot be opened, read or decompressed
    """
    logger.debug(f"Streaming reads from {path}")
    with open_reads(path) as handle:
        try:
            for line_num, line in enumerate(handle):
                if line_num % LINES_PER_RECORD == SEQUENCE_LINE:
                    yield line.rstrip("\r\n")
        except (OSError, EOFError, zlib.error) as e:
            raise ReadFileError(str(path), str(e)) from e
