"""Command-line interface for the invoice dashboard computations.

Provides subcommands: `summary`, `units`, and `download`. Each command is
implemented as a `cmd_*` function that accepts an argparse namespace.
"""
from __future__ import annotations

import argparse
import logging
from functools import partial
from pathlib import Path

from dotenv import load_dotenv

from invoice_pipeline.config import get_settings
from invoice_pipeline.errors import InvoiceFetchError
from invoice_pipeline.logging_config import configure_logging
from invoice_pipeline.models import CardSummary, SearchFilter

# FETCH
from invoice_pipeline.ingest.fetch_invoices import (
    fetch_all_records,
    fetch_records_by_search,
    fetch_summary_for_year,
)
from invoice_pipeline.ingest.documents import retrieve_and_save_document

# CORE
from invoice_pipeline.aggregate.periods import aggregate
from invoice_pipeline.aggregate.cards import build_card_summary, server_card_summary
from invoice_pipeline.pivot.units import (
    DuplicatePolicy,
    document_name,
    filter_records,
    group_by_unit,
)
from invoice_pipeline.download.coordinator import DownloadCoordinator
from invoice_pipeline.frames import UNIT_COLUMNS, aggregates_to_frame, units_to_frame
from invoice_pipeline.periods import MONTH_ABBREVIATIONS

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _print_cards(cards: CardSummary) -> None:
    """Print one line per card: title, value, unit and comparison text."""
    print(f"Cards: {cards.current_label or '-'} vs {cards.previous_label or '-'}")
    for m in cards.metrics:
        unit = f" {m.unit}" if m.unit else ""
        print(
            f"  {m.title:<20} {m.current:>14,.2f}{unit:<5} "
            f"{m.comparison.percentage_text} vs previous month"
        )


def _month_column(month: str) -> str:
    """Accept `jan`, `JAN` or `Jan` and return the table column label."""
    return MONTH_ABBREVIATIONS.get(month.strip().upper(), month.strip())


# --------------------------------------------------
# SUMMARY
# --------------------------------------------------
def cmd_summary(args: argparse.Namespace) -> None:
    """Print the dashboard cards and the monthly series for one year.

    Args:
        args: argparse namespace with `year` and `server`.
    """
    s = get_settings()
    year = args.year or s.default_year

    if args.server:
        summary = fetch_summary_for_year(year, s)
        cards = server_card_summary(summary)
        series = aggregates_to_frame(summary.period_series)
    else:
        aggregates = aggregate(fetch_all_records(s), year)
        cards = build_card_summary(aggregates)
        series = aggregates_to_frame(aggregates)

    _print_cards(cards)
    print()
    if series.empty:
        log.warning("No invoices found for %s", year)
    else:
        print(series.to_string(index=False))


# --------------------------------------------------
# UNITS
# --------------------------------------------------
def cmd_units(args: argparse.Namespace) -> None:
    """Print the consumer-unit x month invoice table.

    Args:
        args: argparse namespace with `year`, `unit`, `distributor`,
            `first_wins`.
    """
    s = get_settings()
    search = SearchFilter(
        year=args.year or s.default_year,
        consumer_unit_name=args.unit,
        distributor_name=args.distributor,
    )
    records = fetch_records_by_search(search, s)
    records = filter_records(records, args.unit or "", args.distributor or "")

    policy = DuplicatePolicy.FIRST_WINS if args.first_wins else DuplicatePolicy.LAST_WINS
    rows = group_by_unit(records, policy)
    log.info("Grouped %d invoices into %d consumer units", len(records), len(rows))

    table = units_to_frame(rows)
    if table.empty:
        log.warning("No invoices found for %s", search.to_params())
        return
    # locators are long; show which months have a document
    months = [c for c in table.columns if c not in UNIT_COLUMNS]
    table[months] = table[months].notna().apply(lambda col: col.map({True: "x", False: ""}))
    print(table.to_string(index=False))


# --------------------------------------------------
# DOWNLOAD
# --------------------------------------------------
def cmd_download(args: argparse.Namespace) -> int:
    """Download one unit's invoice document for one month.

    Args:
        args: argparse namespace with `year`, `unit`, `month`, `out`.

    Returns:
        Process exit status (0 on success).
    """
    s = get_settings()
    search = SearchFilter(year=args.year or s.default_year, consumer_unit_name=args.unit)
    records = [
        r for r in fetch_records_by_search(search, s) if r.consumer_unit_name == args.unit
    ]
    rows = group_by_unit(records)
    if not rows:
        log.error("No invoices for consumer unit %r in %s", args.unit, search.year)
        return 1

    row = rows[0]
    month = _month_column(args.month)
    locator = row.months_index.get(month)
    if not locator:
        log.error("No %s invoice for %s (months: %s)", month, row.consumer_unit_name, ", ".join(row.months_index))
        return 1

    out_dir = Path(args.out) if args.out else s.download_dir
    coordinator = DownloadCoordinator()
    outcome = coordinator.retrieve(
        key=f"{row.consumer_unit_name}:{month}",
        locator=locator,
        suggested_name=document_name(row, month),
        saver=partial(retrieve_and_save_document, out_dir=out_dir, timeout=s.request_timeout),
    )
    if not outcome.succeeded:
        log.error("Download failed: %s", outcome.error)
        return 1

    print(outcome.path)
    return 0


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    The returned parser has subcommands `summary`, `units` and `download`.
    `--year` defaults to `INVOICE_DEFAULT_YEAR` when omitted.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="invoice-pipeline")
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_summary = sub.add_parser("summary")
    p_summary.add_argument("--year", default=None)
    p_summary.add_argument("--server", action="store_true", help="use the server pre-aggregated summary")

    p_units = sub.add_parser("units")
    p_units.add_argument("--year", default=None)
    p_units.add_argument("--unit", default=None, help="consumer unit name filter")
    p_units.add_argument("--distributor", default=None, help="distributor name filter")
    p_units.add_argument("--first-wins", action="store_true", help="keep the first invoice of a duplicated month")

    p_download = sub.add_parser("download")
    p_download.add_argument("--year", default=None)
    p_download.add_argument("--unit", required=True)
    p_download.add_argument("--month", required=True, help="month code, e.g. JAN or Fev")
    p_download.add_argument("--out", default=None)

    return p


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(
        Path("logs/invoice_pipeline.log"),
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        if args.cmd == "summary":
            cmd_summary(args)
        elif args.cmd == "units":
            cmd_units(args)
        elif args.cmd == "download":
            raise SystemExit(cmd_download(args))
        else:
            raise SystemExit(2)
    except InvoiceFetchError as e:
        log.error("%s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
