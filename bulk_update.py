"""Command-line runner for bulk stock updates.

`template` writes a CSV pre-filled with current stock for offline editing.
`apply` parses an edited file, prints the proposed changes, and after
confirmation sends them to the inventory API.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from stock_update import CommitGate, InventoryItem, ParseResult, ReconciledUpdate, StockUpdateError, parse_upload
from stock_update.api import InventoryApiClient, InventoryApiError
from stock_update.config import Settings
from stock_update.exporter import DirectoryExporter
from stock_update.models import CATEGORIES, CommitResult, ItemCategory
from stock_update.reconcile import reconcile_rows
from stock_update.review import capped_errors, processing_message, render_preview, summarize
from stock_update.template import export_template
from stock_update.upload import read_upload

logger = logging.getLogger("bulk_update")

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_COMMIT_FAILED = 2


def load_items(path: Path) -> list[InventoryItem]:
    """Load an inventory snapshot from a JSON file of API-shaped records."""

    payload = json.loads(path.read_text(encoding="utf-8"))
    records = payload.get("data") if isinstance(payload, dict) else payload
    if not isinstance(records, list):
        raise ValueError(f"{path} must contain a JSON list of inventory records")
    return [InventoryItem.from_record(record) for record in records]


def _api_client(settings: Settings) -> InventoryApiClient:
    return InventoryApiClient(
        settings.api_base_url,
        settings.token_provider,
        timeout=settings.api_timeout,
    )


def _resolve_items(args: argparse.Namespace, settings: Settings) -> list[InventoryItem]:
    if args.items is not None:
        return load_items(args.items)
    if not settings.api_configured:
        raise ValueError("Pass --items or set STOCK_API_BASE_URL to fetch the inventory snapshot")
    return _api_client(settings).fetch_items(args.category)


def build_report(
    *,
    category: ItemCategory,
    upload_path: Path,
    parse_result: ParseResult,
    updates: list[ReconciledUpdate],
    commit_result: CommitResult | None,
) -> dict[str, Any]:
    """Build a JSON-friendly record of one bulk update run."""

    summary = summarize(updates, parse_result)
    return {
        "metadata": {
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "category": category,
            "upload_path": str(upload_path),
        },
        "summary": {
            "update_count": summary.update_count,
            "warning_count": summary.warning_count,
            "error_count": summary.error_count,
        },
        "updates": [update.to_payload() for update in updates],
        "row_errors": [
            {"row": error.source_row, "code": error.code, "message": error.message}
            for error in parse_result.row_errors
        ],
        "commit": None
        if commit_result is None
        else {
            "success": commit_result.success,
            "message": commit_result.message,
            "applied_count": commit_result.applied_count,
        },
    }


def write_report(report: dict[str, Any], *, output_path: Path) -> None:
    """Write report JSON to disk."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def _ask_confirmation(count: int) -> bool:
    answer = input(f"Apply updates ({count} items)? [y/N] ")
    return answer.strip().lower() in {"y", "yes"}


def run_template(args: argparse.Namespace, settings: Settings) -> int:
    items = _resolve_items(args, settings)
    path = export_template(items, args.category, DirectoryExporter(args.output_dir))
    print(f"Wrote template: {path}")
    print("Fill in the 'New Stock' column and upload the file.")
    return EXIT_OK


def run_apply(
    args: argparse.Namespace,
    settings: Settings,
    *,
    confirm: Callable[[int], bool] = _ask_confirmation,
) -> int:
    items = _resolve_items(args, settings)
    parse_result = parse_upload(read_upload(args.upload), items)
    updates = reconcile_rows(parse_result.rows, items, large_change_ratio=settings.large_change_ratio)
    summary = summarize(updates, parse_result)

    print(processing_message(summary))
    if parse_result.has_errors:
        print("Processing Errors:")
        for line in capped_errors(parse_result.error_messages):
            print(f"  {line}")
    if updates:
        print(render_preview(updates, args.category))
    if summary.warning_count:
        print(f"{summary.warning_count} warnings")

    commit_result: CommitResult | None = None
    exit_code = EXIT_OK
    if not summary.can_commit:
        print("Nothing to apply.")
    elif args.dry_run:
        print("Dry run: no changes sent.")
    else:
        apply_fn = lambda batch: _api_client(settings).apply_updates(args.category, batch)
        gate = CommitGate(updates, apply_fn)
        commit_result = gate.commit(args.yes or confirm(summary.update_count))
        if commit_result is None:
            gate.cancel()
            print("Cancelled.")
        elif commit_result.success:
            print(f"Stock Updated: {commit_result.message}")
        else:
            print(f"Update failed: {commit_result.message}", file=sys.stderr)
            exit_code = EXIT_COMMIT_FAILED

    if args.report is not None:
        report = build_report(
            category=args.category,
            upload_path=args.upload,
            parse_result=parse_result,
            updates=updates,
            commit_result=commit_result,
        )
        write_report(report, output_path=args.report)
        print(f"Wrote bulk update report: {args.report}")
    return exit_code


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for the bulk stock update commands."""

    parser = argparse.ArgumentParser(description="Bulk stock update via CSV template.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--category", choices=CATEGORIES, default="raw-materials", help="Item category")
    common.add_argument(
        "--items",
        type=Path,
        default=None,
        help="JSON inventory snapshot; fetched from the API when omitted",
    )

    template = subparsers.add_parser("template", parents=[common], help="Write a pre-filled CSV template")
    template.add_argument("--output-dir", type=Path, default=Path("."), help="Directory for the template")

    apply = subparsers.add_parser("apply", parents=[common], help="Review and apply an edited file")
    apply.add_argument("upload", type=Path, help="Edited CSV or XLSX file")
    apply.add_argument("--yes", action="store_true", help="Apply without asking for confirmation")
    apply.add_argument("--dry-run", action="store_true", help="Show the preview without applying it")
    apply.add_argument("--report", type=Path, default=None, help="Write a JSON report to this path")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for command-line execution."""

    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings.from_env()
        if args.command == "template":
            return run_template(args, settings)
        return run_apply(args, settings)
    except (StockUpdateError, InventoryApiError, ValueError, OSError) as e:
        logger.debug("Bulk update aborted", exc_info=True)
        print(f"Error: {str(e)}", file=sys.stderr)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
