"""Command-line client for browsing and filing accessibility reports."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from stationaccess.app import AppContext, create_app_context
from stationaccess.core.config import Settings
from stationaccess.core.errors import (
    NotFoundError,
    PhotoTooLargeError,
    ReportValidationError,
    TransportError,
)
from stationaccess.core.types import FilterState, ReportPatch, ReportStatus, SortOrder
from stationaccess.submission.form import PHOTO_TOO_LARGE_MESSAGE
from stationaccess.submission.models import PhotoAttachment
from stationaccess.views.analytics import AnalyticsSummary, build_analytics
from stationaccess.views.derive import derive_view
from stationaccess.views.report_card import ReportCard, build_report_card


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="stationaccess",
        description="Browse and submit transit station accessibility reports.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List reports matching filters.")
    list_cmd.add_argument("--search", default=None, help="Match station or description text.")
    list_cmd.add_argument("--status", default=None, choices=[s.value for s in ReportStatus])
    list_cmd.add_argument("--urgency", default=None)
    list_cmd.add_argument("--city", default=None)
    list_cmd.add_argument(
        "--sort",
        default=SortOrder.CREATED_DESC.value,
        choices=[s.value for s in SortOrder],
    )

    sub.add_parser("stats", help="Show aggregate statistics.")

    show_cmd = sub.add_parser("show", help="Show one report.")
    show_cmd.add_argument("report_id")

    submit_cmd = sub.add_parser("submit", help="Submit a new report.")
    submit_cmd.add_argument("--city", required=True)
    submit_cmd.add_argument("--station", required=True)
    submit_cmd.add_argument("--category", required=True)
    submit_cmd.add_argument("--description", required=True)
    submit_cmd.add_argument("--urgency", default="Medium")
    submit_cmd.add_argument("--contact", default="")
    submit_cmd.add_argument("--photo", default=None, help="Path to an image to attach.")

    update_cmd = sub.add_parser("update", help="Change a report's status or notes.")
    update_cmd.add_argument("report_id")
    update_cmd.add_argument("--status", default=None, choices=[s.value for s in ReportStatus])
    update_cmd.add_argument("--notes", default=None)

    return parser.parse_args(argv)


def format_card(card: ReportCard) -> str:
    parts = [
        f"#{card.id}",
        f"{card.station_name} ({card.station_city})" if card.station_city else card.station_name,
        card.issue_category,
        f"[{card.status} / {card.urgency_level}]",
    ]
    if card.created_label:
        parts.append(card.created_label)
    if card.reporter_label:
        parts.append(f"by {card.reporter_label}")
    return "  ".join(parts)


def format_analytics(summary: AnalyticsSummary) -> str:
    lines = [
        f"Total reports:   {summary.total}",
        f"Resolved:        {summary.resolved_count} ({summary.completion_rate}%)",
        f"Pending:         {summary.pending_count}",
    ]
    sections = [
        ("Top stations", summary.station_series),
        ("By category", summary.category_series),
        ("By urgency", summary.urgency_series),
        ("By city", summary.city_series),
    ]
    for title, series in sections:
        if not series:
            continue
        lines.append("")
        lines.append(f"{title}:")
        for point in series:
            lines.append(f"  {point.name:<32} {point.value}")
    return "\n".join(lines)


async def run(args: argparse.Namespace, context: AppContext) -> int:
    """Execute one command. Returns the process exit code."""
    try:
        if args.command == "list":
            filters = FilterState(
                search=args.search,
                status=args.status,
                urgency=args.urgency,
                city=args.city,
                sort=args.sort,
            )
            reports = derive_view(await context.queries.fetch_reports(filters), filters)
            if not reports:
                print("No reports match the current filters.")
            for report in reports:
                print(format_card(build_report_card(report, context.client)))
            return 0

        if args.command == "stats":
            print(format_analytics(build_analytics(await context.queries.fetch_stats())))
            return 0

        if args.command == "show":
            report = await context.queries.fetch_report(args.report_id)
            card = build_report_card(report, context.client)
            print(format_card(card))
            print(card.description)
            if card.photo_url:
                print(f"Photo: {card.photo_url}")
            return 0

        if args.command == "submit":
            return await _submit(args, context)

        if args.command == "update":
            patch = ReportPatch(status=args.status, inspector_notes=args.notes)
            updated = await context.mutations.update(args.report_id, patch)
            print(f"Updated report {args.report_id}: {getattr(updated, 'status', updated)}")
            return 0
    except NotFoundError:
        print(f"ERROR: report {getattr(args, 'report_id', '')!s} not found.")
        return 1
    except (TransportError, ReportValidationError) as exc:
        print(f"ERROR: {exc}")
        return 1

    print(f"ERROR: unknown command {args.command!r}")
    return 2


async def _submit(args: argparse.Namespace, context: AppContext) -> int:
    form = context.report_form()
    form.update(
        station_city=args.city,
        station_name=args.station,
        issue_category=args.category,
        description=args.description,
        urgency_level=args.urgency,
        reporter_contact=args.contact,
    )
    if args.photo:
        try:
            photo = PhotoAttachment.from_path(args.photo, max_bytes=context.submissions.max_photo_bytes)
        except PhotoTooLargeError:
            print(f"ERROR: {PHOTO_TOO_LARGE_MESSAGE}")
            return 1
        except OSError as exc:
            print(f"ERROR: cannot read photo {args.photo}: {exc.strerror or exc}")
            return 1
        if not form.select_photo(photo):
            print(f"ERROR: {form.error}")
            return 1
    created = await form.submit()
    if created is None:
        print(f"ERROR: {form.error}")
        return 1
    print(f"Submitted report {getattr(created, 'id', created)}")
    return 0


async def _main(args: argparse.Namespace, settings: Settings) -> int:
    context = create_app_context(settings)
    try:
        return await run(args, context)
    finally:
        await context.close()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(_main(args, settings)))


if __name__ == "__main__":
    main()
