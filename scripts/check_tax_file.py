#!/usr/bin/env python
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from impot.core.errors import ConfigurationError  # noqa: E402
from impot.core.tax_years import load_tax_file  # noqa: E402

DEFAULT_TAX_FILE = Path(__file__).with_name("tax_tables.json")
LOGGER = logging.getLogger("check_tax_file")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate a JSON tax file and list its years")
    parser.add_argument(
        "tax_file",
        nargs="?",
        type=Path,
        default=DEFAULT_TAX_FILE,
        help="Path to the JSON tax file (default: scripts/tax_tables.json)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices={"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"},
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    _configure_logging(args.log_level)
    try:
        tables = load_tax_file(args.tax_file).tables()
    except ConfigurationError as exc:
        LOGGER.error("Tax file rejected: %s", exc)
        raise SystemExit(f"Invalid tax file {args.tax_file}: {exc}") from exc
    for year in sorted(tables):
        table = tables[year]
        print(f"{year}: {len(table)} tranches, top rate {table.top.percent} from {table.top.min}")
    print(f"Tax file OK: {len(tables)} year(s)")


if __name__ == "__main__":
    main()
