from __future__ import annotations

import argparse
import asyncio
import os
from pathlib import Path

from dotenv import load_dotenv

from config import DEFAULT_OUTPUT_DIR, EXPORT_FILENAME_PREFIX
from display_utils import load_label_tables
from logging_config import configure_logging
from png_utils import save_segment_pngs
from summary_session import ItinerarySession, SummaryExporter


def _resolve_path(value: str | None) -> Path | None:
    return Path(value).expanduser() if value else None


def build_session(inputs: list[Path], labels_file: Path | None) -> ItinerarySession:
    session = ItinerarySession(labels=load_label_tables(labels_file))
    for path in inputs:
        print(f"Reading {path} ...")
        if not session.ingest_bytes(path.read_bytes()):
            raise SystemExit(f"{path.name}: {session.last_error}")
    return session


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Merge ticket list exports and render a shareable visit summary PNG."
    )
    parser.add_argument("inputs", nargs="+", type=Path, help="Ticket list JSON, saved HTML or web archive files, merged in order.")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=_resolve_path(os.getenv("EXPO_SUMMARY_OUTPUT_DIR")) or Path(DEFAULT_OUTPUT_DIR),
        help="Directory for the rendered images.",
    )
    parser.add_argument(
        "--labels",
        type=Path,
        default=_resolve_path(os.getenv("EXPO_LABELS_FILE")),
        help="JSON file with 'pavilions' and 'ticket_types' label tables.",
    )
    parser.add_argument("--no-details", action="store_true", help="Leave the ticket and visit lists out of the image.")
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="TICKET_ID",
        help="Leave a ticket out of the summary (repeatable).",
    )
    parser.add_argument("--strips", action="store_true", help="Also write the on-screen preview strips.")
    parser.add_argument("--verbose", action="store_true", help="Log debug details.")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    session = build_session(args.inputs, args.labels)
    session.show_details = not args.no_details
    for ticket_key in args.exclude:
        session.set_included(ticket_key.strip(), False)

    payload = session.payload
    print(
        f"Loaded {len(payload.tickets)} ticket(s): "
        f"{payload.entrance_count} entrance / {payload.event_count} pavilion reservation(s)."
    )
    if not session.included_tickets():
        print("[WARN] Every ticket is excluded; nothing to render.")
        return

    if args.strips:
        layout = session.plan_layout()
        paths = save_segment_pngs(layout, args.output_dir, f"{EXPORT_FILENAME_PREFIX}_preview")
        print(f"Wrote {len(paths)} preview strip(s) to {args.output_dir}.")

    dest = asyncio.run(SummaryExporter(session).save(args.output_dir))
    print(f"Saved summary image to {dest}.")


if __name__ == "__main__":
    main()
