#!/usr/bin/env python3
"""
Tests for the genomedist command line interface.
"""

import io
import logging
import unittest
import tempfile
import shutil
import sys
from pathlib import Path
from unittest.mock import patch

import pandas as pd

# Add the package to the path for testing
sys.path.insert(0, str(Path(__file__).parent))

from genomedist.cli import build_config, create_parser, main


class TestCli(unittest.TestCase):

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.s1 = self.temp_dir / "s1.fastq"
        self.s1.write_text("@r1\nACGTACGT\n+\nIIIIIIII\n")
        self.s2 = self.temp_dir / "s2.fastq"
        self.s2.write_text("@r1\nACGTACGA\n+\nIIIIIIII\n")
        self.s3 = self.temp_dir / "s3.fastq"
        self.s3.write_text("@r1\nTTTTGGGG\n+\nIIIIIIII\n")

    def tearDown(self):
        logging.basicConfig(handlers=[logging.NullHandler()], force=True)
        shutil.rmtree(self.temp_dir)

    def run_cli(self, argv):
        with patch("sys.stdout", new_callable=io.StringIO) as stdout, \
                patch("sys.stderr", new_callable=io.StringIO):
            code = main(argv)
        return code, stdout.getvalue()

    def test_pairs_output(self):
        code, out = self.run_cli(["-q", "-k", "4", "-c", "1", str(self.s1), str(self.s2), str(self.s3)])
        self.assertEqual(code, 0)
        lines = [line.split("\t") for line in out.splitlines()]
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[0][:2], [str(self.s1), str(self.s2)])
        self.assertAlmostEqual(float(lines[0][2]), 0.8)
        self.assertEqual(lines[2][:2], [str(self.s2), str(self.s3)])

    def test_jaccard_mode(self):
        code, out = self.run_cli(["-q", "-k", "4", "-c", "1", "--mode", "jaccard", str(self.s1), str(self.s2)])
        self.assertEqual(code, 0)
        self.assertAlmostEqual(float(out.split("\t")[2]), 0.2)

    def test_matrix_to_file(self):
        output = self.temp_dir / "matrix.tsv"
        code, out = self.run_cli(["-q", "-k", "4", "-c", "1", "--matrix", "-o", str(output),
                                  str(self.s1), str(self.s2)])
        self.assertEqual(code, 0)
        self.assertEqual(out, "")
        matrix = pd.read_csv(output, sep="\t", index_col=0)
        self.assertEqual(matrix.shape, (2, 2))
        self.assertAlmostEqual(matrix.loc[str(self.s1), str(self.s2)], 0.8)

    def test_pairs_to_file(self):
        output = self.temp_dir / "pairs.tsv"
        code, _ = self.run_cli(["-q", "-k", "4", "-c", "1", "-o", str(output), str(self.s1), str(self.s2)])
        self.assertEqual(code, 0)
        self.assertEqual(len(output.read_text().splitlines()), 1)

    def test_unsupported_file(self):
        bad = self.temp_dir / "s4.fasta"
        bad.write_text(">s4\nACGT\n")
        code, _ = self.run_cli(["-q", str(self.s1), str(bad)])
        self.assertEqual(code, 1)

    def test_missing_file(self):
        code, _ = self.run_cli(["-q", str(self.s1), str(self.temp_dir / "missing.fastq")])
        self.assertEqual(code, 1)

    def test_both_empty(self):
        code, _ = self.run_cli(["-q", "-k", "30", str(self.s1), str(self.s2)])
        self.assertEqual(code, 1)

    def test_too_few_inputs(self):
        with patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit) as ctx:
                main([str(self.s1)])
        self.assertEqual(ctx.exception.code, 2)

    def test_unknown_method(self):
        with patch("sys.stderr", new_callable=io.StringIO) as stderr:
            with self.assertRaises(SystemExit) as ctx:
                main(["-m", "mummer", str(self.s1), str(self.s2)])
        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("mummer", stderr.getvalue())

    def test_invalid_k(self):
        with patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit) as ctx:
                main(["-k", "0", str(self.s1), str(self.s2)])
        self.assertEqual(ctx.exception.code, 2)

    def test_build_config_from_args(self):
        args = create_parser().parse_args(["-k", "21", "-c", "0", "-p", "2", "a.fastq", "b.fastq"])
        config = build_config(args)
        self.assertEqual(config.kmer.k_size, 21)
        self.assertEqual(config.kmer.min_coverage, 2)
        self.assertEqual(config.distance.n_processes, 2)

    def test_config_file(self):
        config_file = self.temp_dir / "config.json"
        config_file.write_text('{"kmer": {"k_size": 4, "min_coverage": 1}}')
        code, out = self.run_cli(["-q", "--config", str(config_file), str(self.s1), str(self.s2)])
        self.assertEqual(code, 0)
        self.assertAlmostEqual(float(out.split("\t")[2]), 0.8)


if __name__ == "__main__":
    unittest.main()
