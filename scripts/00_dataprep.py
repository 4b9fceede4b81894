"""Run the full data prep: OES occupation tables, state populations,
case counts and the joined population/case table.

Usage:
    python scripts/00_dataprep.py
    python scripts/00_dataprep.py --raw-dir raw_data --output-dir processed_data
"""

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from state_data_prep.pipeline import run_pipeline


ROOT = Path(__file__).resolve().parent.parent


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--raw-dir", type=Path, default=None, help="raw extracts folder")
    parser.add_argument(
        "--output-dir", type=Path, default=None, help="where prepared tables are written"
    )
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv=None) -> dict:
    """Entry point when run as a script; returns the prepared tables."""
    load_dotenv(ROOT / ".env")
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    tables = run_pipeline(args.raw_dir, args.output_dir)
    for name, table in tables.items():
        print(f"{name}: {len(table)} rows, columns: {list(table.columns)}")
    return tables


if __name__ == "__main__":
    main()
