"""
Configuration management for genomedist.

This module provides configuration classes and functions for managing
k-mer distance settings, defaults, and parameter validation.
"""

import os
import json
import logging
import multiprocessing
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Dict, Any

from .counter import DEFAULT_K, DEFAULT_MIN_COVERAGE, normalize_min_coverage
from .jaccard import LEGACY, MODES


@dataclass
class KmerConfig:
    """Configuration for k-mer counting."""
    k_size: int = DEFAULT_K
    min_coverage: int = DEFAULT_MIN_COVERAGE

    def __post_init__(self):
        if isinstance(self.k_size, bool) or not isinstance(self.k_size, int):
            raise ValueError(f"k_size must be an integer, got {self.k_size!r}")
        if self.k_size < 1:
            raise ValueError(f"k_size must be at least 1, got {self.k_size}")
        # Low coverage values are clamped, not rejected
        self.min_coverage = normalize_min_coverage(self.min_coverage)


@dataclass
class DistanceConfig:
    """Configuration for pairwise distance computation."""
    mode: str = LEGACY
    n_processes: Optional[int] = 1

    def __post_init__(self):
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {list(MODES)}, got {self.mode}")
        if self.n_processes is None:
            self.n_processes = multiprocessing.cpu_count()
        elif self.n_processes < 1:
            raise ValueError(f"n_processes must be positive, got {self.n_processes}")


@dataclass
class OutputConfig:
    """Configuration for output settings."""
    output: Optional[str] = None
    matrix: bool = False
    quiet: bool = False
    verbose: bool = False
    log_file: Optional[str] = None


class GenomeDistConfig:
    """Main configuration class for genomedist."""

    def __init__(self, config_file: Optional[str] = None):
        self.kmer = KmerConfig()
        self.distance = DistanceConfig()
        self.output = OutputConfig()

        if config_file:
            self.load_from_file(config_file)

    def load_from_file(self, config_file: str):
        """Load configuration from JSON file."""
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")

        try:
            with open(config_path, 'r') as f:
                config_data = json.load(f)

            if 'kmer' in config_data:
                self.kmer = KmerConfig(**config_data['kmer'])
            if 'distance' in config_data:
                self.distance = DistanceConfig(**config_data['distance'])
            if 'output' in config_data:
                self.output = OutputConfig(**config_data['output'])

            logging.info(f"Configuration loaded from {config_file}")

        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {e}")
        except TypeError as e:
            raise ValueError(f"Invalid configuration parameters: {e}")

    def save_to_file(self, config_file: str):
        """Save current configuration to JSON file."""
        config_path = Path(config_file)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

        logging.info(f"Configuration saved to {config_file}")

    def update_from_args(self, args):
        """Update configuration from command-line arguments."""
        if getattr(args, 'kmer_length', None) is not None:
            self.kmer.k_size = args.kmer_length
        if getattr(args, 'coverage', None) is not None:
            self.kmer.min_coverage = args.coverage
        if getattr(args, 'mode', None):
            self.distance.mode = args.mode
        if getattr(args, 'processes', None) is not None:
            self.distance.n_processes = args.processes

        if getattr(args, 'output', None):
            self.output.output = args.output
        if getattr(args, 'matrix', False):
            self.output.matrix = True
        if getattr(args, 'quiet', False):
            self.output.quiet = True
        if getattr(args, 'verbose', False):
            self.output.verbose = True
        if getattr(args, 'log_file', None):
            self.output.log_file = args.log_file

    def validate(self):
        """Validate all configuration parameters."""
        try:
            # Re-running __post_init__ validates and clamps
            self.kmer = KmerConfig(**asdict(self.kmer))
            self.distance = DistanceConfig(**asdict(self.distance))
        except ValueError as e:
            raise ValueError(f"Configuration validation failed: {e}")

        if self.output.quiet and self.output.verbose:
            logging.warning("Both quiet and verbose requested. Verbose logging wins.")

    def get_summary(self) -> str:
        """Get a human-readable summary of the configuration."""
        summary = []
        summary.append("genomedist Configuration Summary:")
        summary.append("=" * 40)

        summary.append(f"K-mer counting:")
        summary.append(f"  K-mer length: {self.kmer.k_size}")
        summary.append(f"  Min k-mer coverage: {self.kmer.min_coverage}")

        summary.append(f"Distance:")
        summary.append(f"  Mode: {self.distance.mode}")
        summary.append(f"  Processes: {self.distance.n_processes}")

        summary.append(f"Output:")
        summary.append(f"  Destination: {self.output.output or 'stdout'}")
        summary.append(f"  Square matrix: {self.output.matrix}")

        return "\n".join(summary)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'kmer': asdict(self.kmer),
            'distance': asdict(self.distance),
            'output': asdict(self.output)
        }


def load_config_from_env(config: Optional[GenomeDistConfig] = None) -> GenomeDistConfig:
    """Load configuration from environment variables."""
    if config is None:
        config = GenomeDistConfig()

    if 'GENOMEDIST_KMER_LENGTH' in os.environ:
        config.kmer.k_size = int(os.environ['GENOMEDIST_KMER_LENGTH'])
    if 'GENOMEDIST_COVERAGE' in os.environ:
        config.kmer.min_coverage = int(os.environ['GENOMEDIST_COVERAGE'])
    if 'GENOMEDIST_MODE' in os.environ:
        config.distance.mode = os.environ['GENOMEDIST_MODE'].lower()
    if 'GENOMEDIST_PROCESSES' in os.environ:
        config.distance.n_processes = int(os.environ['GENOMEDIST_PROCESSES'])

    return config
