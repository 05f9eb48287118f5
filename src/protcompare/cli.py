# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
Command line interface: compare a query against the sequences of a
candidate table and write the ranked results.
"""

import argparse
import logging
import sys
from pathlib import Path
from tqdm import tqdm
from . import __version__
from .compare.session import ComparisonSession
from .config import ComparisonConfig, load_config
from .error import (
    ComparisonCancelled,
    ConfigurationError,
    InvalidQueryError,
    NoValidAlignmentsError,
)
from .io.table import TableFormatError, read_candidate_table, results_to_frame

logger = logging.getLogger(__name__)

EXIT_CONFIGURATION = 2
EXIT_NO_INPUT = 3
EXIT_TABLE = 4
EXIT_INTERRUPTED = 130


def build_parser():
    parser = argparse.ArgumentParser(
        prog="protcompare",
        description="Rank the protein sequences of a table by their similarity "
        "to a query sequence",
    )
    parser.add_argument(
        "table", type=Path, help="Candidate table (.xlsx, .csv or .tsv)"
    )
    query = parser.add_mutually_exclusive_group(required=True)
    query.add_argument("--query", "-q", help="Query protein sequence")
    query.add_argument(
        "--query-file",
        type=Path,
        help="File containing the query sequence, FASTA header lines are ignored",
    )
    parser.add_argument(
        "--samples", "-n", type=int, dest="sample_count",
        help="Random sequences per candidate for the p-value (default: 100)",
    )
    parser.add_argument(
        "--matrix", help="Substitution matrix name or NCBI matrix file (default: BLOSUM62)"
    )
    parser.add_argument("--gap-open", type=float, help="Gap opening penalty (default: 12)")
    parser.add_argument("--gap-extend", type=float, help="Gap extension penalty (default: 0.5)")
    parser.add_argument(
        "--workers", type=int, dest="max_workers",
        help="Worker processes (default: number of CPUs)",
    )
    parser.add_argument("--seed", type=int, help="Seed for reproducible p-values")
    parser.add_argument("--column", help="Sequence column of the table")
    parser.add_argument("--config", type=Path, help="TOML configuration file")
    parser.add_argument(
        "--output", "-o", type=Path,
        help="Output CSV file (default: similarity_results_<date>.csv)",
    )
    parser.add_argument(
        "--top", type=_positive_int, help="Print only the best K candidates"
    )
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug messages")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer")
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, not {number}")
    return number


def read_query(args):
    """Get the raw query from the command line or the query file."""
    if args.query is not None:
        return args.query
    try:
        text = args.query_file.read_text()
    except OSError as e:
        raise ConfigurationError(f"Cannot read query file '{args.query_file}': {e}")
    return "".join(
        line for line in text.splitlines() if not line.lstrip().startswith(">")
    )


def create_config(args):
    config = load_config(args.config) if args.config is not None else ComparisonConfig()
    overrides = {
        name: getattr(args, name)
        for name in (
            "matrix", "gap_open", "gap_extend", "sample_count", "max_workers", "seed",
        )
        if getattr(args, name) is not None
    }  # fmt: skip
    return config.replace(**overrides)


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)

    try:
        config = create_config(args)
        query = read_query(args)
        session = ComparisonSession(config)
        table = read_candidate_table(args.table)
        logger.info("Read %d candidates from '%s'", len(table), args.table)
        with tqdm(
            total=len(table), desc="Comparing", unit="seq", disable=args.no_progress
        ) as progress_bar:

            def progress(completed, total):
                progress_bar.update(completed - progress_bar.n)

            results = session.compare_table(query, table, args.column, progress)
        path = session.export(args.output)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return EXIT_CONFIGURATION
    except InvalidQueryError as e:
        logger.error("%s", e)
        return EXIT_NO_INPUT
    except NoValidAlignmentsError as e:
        reasons = ", ".join(
            f"{count} {reason.value}" for reason, count in e.skipped.items()
        )
        logger.error("No valid alignments were produced (%s)", reasons or "no candidates")
        return EXIT_NO_INPUT
    except TableFormatError as e:
        logger.error("Invalid candidate table: %s", e)
        return EXIT_TABLE
    except (ComparisonCancelled, KeyboardInterrupt):
        logger.error("Comparison was interrupted")
        return EXIT_INTERRUPTED

    records = results.top(args.top) if args.top is not None else results
    frame = results_to_frame(records, session.table)
    print(frame.to_string(index=False))
    if results.skipped_count > 0:
        logger.warning(
            "%d of %d candidates were skipped", results.skipped_count, results.total
        )
    logger.info("Results written to '%s'", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
