import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

if __package__ in (None, ""):
    sys.path.append(str(Path(__file__).resolve().parent.parent))

from impot import __version__
from impot.config import Settings, get_settings
from impot.core import (
    BracketTable,
    Household,
    ImpotError,
    Result,
    TaxTranche,
    calculate_reverse_tax,
    calculate_tax,
)
from impot.core.tax_years import available_tables, select_bracket_table

LOGGER = logging.getLogger("impot")
YES_ANSWERS = {"Y", "y", "Yes", "yes"}

ColorPreference = Literal["auto", "always", "never"]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def _resolve_color_preference(pref: ColorPreference) -> ColorPreference:
    if pref == "auto" and os.getenv("NO_COLOR"):
        return "never"
    return pref


def _get_console(pref: ColorPreference) -> Console:
    resolved = _resolve_color_preference(pref)
    if resolved == "never":
        return Console(no_color=True, highlight=False)
    return Console(force_terminal=resolved == "always" or None)


def _format_amount(value: int, currency: str) -> str:
    return f"{value} {currency}"


def _format_shares(shares: float) -> str:
    return f"{shares:g}"


def _tranche_label(result_row: TaxTranche, currency: str) -> str:
    if result_row.max is None:
        return f"> {_format_amount(result_row.min, currency)}"
    return f"{_format_amount(result_row.min, currency)} - {_format_amount(result_row.max, currency)}"


def _print_result(result: Result, table: BracketTable, console: Console, currency: str) -> None:
    summary = Table(title=f"Income tax {table.year}", expand=False)
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    summary.add_row("Income", _format_amount(result.income, currency))
    summary.add_row("Shares", _format_shares(result.shares))
    summary.add_row("Tax", _format_amount(result.tax, currency))
    summary.add_row("Remainder", _format_amount(result.remainder, currency))
    console.print(summary)

    details = Table(title="Tax by tranche", expand=False)
    details.add_column("Tranche")
    details.add_column("Rate", justify="right")
    details.add_column("Tax", justify="right")
    for tranche, row in zip(table, result.tax_tranches):
        details.add_row(_tranche_label(row, currency), tranche.percent, _format_amount(row.tax, currency))
    console.print(details)


def _print_years(tables: dict[int, BracketTable], settings: Settings, console: Console) -> None:
    listing = Table(title="Tax years", expand=False)
    listing.add_column("Year")
    listing.add_column("Tranches", justify="right")
    listing.add_column("Top rate", justify="right")
    for year in sorted(tables):
        label = f"{year} (default)" if year == settings.default_tax_year else str(year)
        listing.add_row(label, str(len(tables[year])), tables[year].top.percent)
    console.print(listing)


def _household_from_args(args: argparse.Namespace) -> Household:
    return Household(
        income=getattr(args, "income", None),
        target_remainder=getattr(args, "remainder", None),
        is_in_couple=args.couple,
        children=args.children,
    )


def _parse_int(text: str) -> int:
    return int(text.strip())


def _ask_household() -> Household:
    income = _parse_int(input("Enter your income (Revenu net imposable): "))
    couple = input("Are you in a couple (Y/n): ").strip() in YES_ANSWERS
    children_text = input("How many children do you have: ").strip()
    children = _parse_int(children_text) if children_text else 0
    return Household(income=income, is_in_couple=couple, children=children)


def _ask_restart() -> bool:
    answer = input("Would you want to enter a new income (Y/n): ").strip()
    if answer in YES_ANSWERS:
        LOGGER.info("Restarting program...")
        return True
    return False


def _start(table: BracketTable, console: Console, currency: str) -> bool:
    try:
        household = _ask_household()
    except ValueError as exc:
        LOGGER.info("Rejected household input: %s", exc)
        console.print(f"Error: value is not a whole number ({exc})")
        return False
    try:
        result = calculate_tax(household, table)
    except ImpotError as exc:
        console.print(f"Error: {exc}", markup=False)
        return False
    _print_result(result, table, console, currency)
    return True


def _run_interactive(table: BracketTable, console: Console, currency: str) -> None:
    console.print(f"impot {__version__} - tax year {table.year}")
    keep = True
    while keep:
        try:
            status = _start(table, console, currency)
            LOGGER.info("Status of operation: %s", status)
            keep = _ask_restart()
        except EOFError:
            keep = False
    LOGGER.info("Program exited...")


def _add_household_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--couple", action="store_true", help="Household is a married or PACS couple.")
    parser.add_argument("--children", type=int, default=0, help="Number of dependent children.")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="impot",
        description="Income tax by tranches with household shares (quotient familial).",
    )
    parser.add_argument("--year", type=int, help="Tax year to use (default: IMPOT_TAX_YEAR or current year).")
    parser.add_argument("--config", help="Path to a JSON tax file with additional tax years.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity (default: IMPOT_LOG_LEVEL or WARNING).",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output preference (default: auto).",
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_const",
        const="never",
        help="Alias for --color never.",
    )
    sub = parser.add_subparsers(dest="command")

    compute = sub.add_parser("compute", help="Tax owed for an income.")
    compute.add_argument("--income", type=int, required=True, help="Net taxable income.")
    _add_household_options(compute)

    reverse = sub.add_parser("reverse", help="Income needed to keep a remainder after tax.")
    reverse.add_argument("--remainder", type=int, required=True, help="Wanted income after tax.")
    _add_household_options(reverse)

    sub.add_parser("years", help="List the available tax years.")
    sub.add_parser("interactive", help="Prompt for incomes until told to stop.")
    return parser.parse_args(argv)


def _build_settings(args: argparse.Namespace) -> Settings:
    settings = get_settings()
    overrides: dict[str, object] = {}
    if args.config:
        overrides["tax_file"] = args.config
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.year is not None:
        overrides["tax_year"] = args.year
    if not overrides:
        return settings
    return Settings.model_validate({**settings.model_dump(), **overrides})


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    console = _get_console(args.color)
    try:
        settings = _build_settings(args)
    except ValidationError as exc:
        console.print("Invalid settings:")
        for error in exc.errors():
            location = " -> ".join(str(part) for part in error.get("loc", ("value",)))
            console.print(f"  - {location}: {error.get('msg')}")
        sys.exit(1)
    _configure_logging(settings.log_level)
    LOGGER.info("Project: impot %s", __version__)

    try:
        tables = available_tables(settings)
        if args.command == "years":
            _print_years(tables, settings, console)
            return
        table = select_bracket_table(tables, settings.tax_year, settings.default_tax_year)
        if args.command in (None, "interactive"):
            _run_interactive(table, console, settings.currency)
            return
        household = _household_from_args(args)
        if args.command == "reverse":
            result = calculate_reverse_tax(
                household,
                table,
                tolerance=settings.reverse_tolerance,
                max_iterations=settings.reverse_max_iterations,
            )
        else:
            result = calculate_tax(household, table)
    except ImpotError as exc:
        LOGGER.error("Calculation failed: %s", exc)
        console.print(f"Error: {exc}", markup=False)
        sys.exit(1)
    _print_result(result, table, console, settings.currency)


if __name__ == "__main__":
    main()
