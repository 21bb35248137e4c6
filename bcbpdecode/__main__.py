"""Tools for decoding boarding pass barcode text."""

# Standard imports
import argparse
from datetime import date

# Third-party imports
from dateutil.parser import isoparse
from dotenv import load_dotenv

# Project imports
import bcbpdecode.tools as bdt

def expected_date_arg(value: str) -> date:
    """Parses an ISO 8601 date argument."""
    return isoparse(value).date()

def build_parser() -> argparse.ArgumentParser:
    """Builds the command line parser."""
    parser = argparse.ArgumentParser(
        prog="bcbp-decode",
        description="Tools for decoding boarding pass barcode text.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # decode
    decode_parser = subparsers.add_parser(
        "decode",
        help="Decode boarding passes",
    )
    decode_source_group = decode_parser.add_mutually_exclusive_group(
        required=True,
    )
    decode_source_group.add_argument("--bcbp",
        help="Decode a BCBP-coded text string",
        metavar="BCBP_TEXT",
        type=str,
    )
    decode_source_group.add_argument("--pkpasses",
        action="store_true",
        help="Decode .pkpass files in the import folder",
    )
    decode_parser.add_argument("--expected-date",
        help="Reject passes whose flight date is not this date",
        metavar="YYYY-MM-DD",
        type=expected_date_arg,
    )

    # batch
    batch_parser = subparsers.add_parser(
        "batch",
        help="Decode a file of scans, one per line",
    )
    batch_parser.add_argument("input",
        help="Text file of raw scans",
        type=str,
    )
    batch_parser.add_argument("--output",
        help="Write decoded scans to a CSV file",
        metavar="CSV_PATH",
        type=str,
    )
    batch_parser.add_argument("--expected-date",
        help="Reject passes whose flight date is not this date",
        metavar="YYYY-MM-DD",
        type=expected_date_arg,
    )
    return parser

def main(argv=None) -> None:
    """Runs the command line tools."""
    # Load environment variables from .env file.
    load_dotenv()
    args = build_parser().parse_args(argv)
    if args.command == "decode":
        if args.bcbp is not None:
            bdt.decode_bcbp(args.bcbp, args.expected_date)
        elif args.pkpasses:
            bdt.decode_pkpasses()
    elif args.command == "batch":
        bdt.decode_batch(args.input, args.output, args.expected_date)

if __name__ == "__main__":
    main()
