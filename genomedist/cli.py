#!/usr/bin/env python3
"""
genomedist command line interface.

Finds the k-mer (Jaccard) distance between every pair of read sets given
on the command line and prints one tab-separated line per pair, or a
square matrix with ``--matrix``.
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import GenomeDistConfig, load_config_from_env
from .errors import GenomeDistError
from .jaccard import MODES
from .pairwise import KmerDistanceCalculator
from .utils import make_progress, save_results, setup_logging, write_pairs

logger = logging.getLogger("genomedist")

SUPPORTED_METHODS = ["jaccard"]


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="genomedist",
        description="Finds the k-mer distance between any two sets of raw reads. "
                    "With more samples, every pair is reported.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Pairwise distances with the default 18-mers seen at least twice
  genomedist sample1.fastq.gz sample2.fastq.gz sample3.fastq

  # Textbook Jaccard distance as a square matrix
  genomedist --mode jaccard --matrix -o distances.tsv *.fastq.gz

  # Count k-mers for four samples at once
  genomedist -p 4 -k 21 -c 3 *.fastq.gz
        """
    )

    parser.add_argument("reads", nargs="*", metavar="READS",
                        help="Read files (.fastq or .fastq.gz), one per sample")

    kmer_group = parser.add_argument_group("K-mer Options")
    kmer_group.add_argument("-k", "--kmer-length", type=int,
                            help="K-mer length (default: 18)")
    kmer_group.add_argument("-c", "--coverage", type=int,
                            help="Minimum k-mer coverage (default: 2)")

    distance_group = parser.add_argument_group("Distance Options")
    distance_group.add_argument("-m", "--method", default="jaccard",
                                help="Distance method. Only 'jaccard' (k-mer method) is available")
    distance_group.add_argument("--mode", choices=list(MODES),
                                help="legacy: 1 - (symmetric difference / union), as reported by "
                                     "earlier versions (default). jaccard: 1 - (intersection / union)")
    distance_group.add_argument("-p", "--processes", type=int,
                                help="Number of processes for k-mer counting (default: 1)")

    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument("--matrix", action="store_true",
                              help="Write a square distance matrix instead of one line per pair")
    output_group.add_argument("-o", "--output",
                              help="Output file (default: stdout)")
    output_group.add_argument("--config",
                              help="JSON configuration file")
    output_group.add_argument("--log-file",
                              help="Also write a detailed log to this file")
    output_group.add_argument("-q", "--quiet", action="store_true",
                              help="Only log warnings and errors")
    output_group.add_argument("-v", "--verbose", action="store_true",
                              help="Verbose logging")
    output_group.add_argument("--version", action="version",
                              version=f"%(prog)s {__version__}")

    return parser


def build_config(args) -> GenomeDistConfig:
    """Merge defaults, config file, environment and arguments, in that order."""
    config = GenomeDistConfig(args.config) if args.config else GenomeDistConfig()
    load_config_from_env(config)
    config.update_from_args(args)
    config.validate()
    return config


def run(args, config: GenomeDistConfig) -> int:
    """Run the pairwise computation and write the results."""
    calculator = KmerDistanceCalculator(
        k=config.kmer.k_size,
        min_coverage=config.kmer.min_coverage,
        mode=config.distance.mode,
        n_processes=config.distance.n_processes,
        progress=make_progress(logger),
    )

    if config.output.matrix:
        matrix = calculator.distance_matrix(args.reads)
        save_results(matrix, config.output.output or sys.stdout)
        return 0

    results = calculator.iter_distances(args.reads)
    if config.output.output:
        with open(config.output.output, "w") as out:
            n_pairs = write_pairs(results, out)
    else:
        n_pairs = write_pairs(results, sys.stdout)
    logger.info(f"Reported {n_pairs} pairwise distances")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.method.lower() not in SUPPORTED_METHODS:
        parser.error(f"I do not know how to perform method {args.method}")
    if len(args.reads) < 2:
        parser.error("at least two read files are required")

    try:
        config = build_config(args)
    except (ValueError, FileNotFoundError) as e:
        parser.error(str(e))

    setup_logging(verbose=config.output.verbose, quiet=config.output.quiet,
                  log_file=config.output.log_file)
    logger.debug(config.get_summary())

    try:
        return run(args, config)
    except GenomeDistError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
