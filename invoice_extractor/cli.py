"""
Command-line batch runner.

Example:
    invoice-extractor scans/a.jpg scans/b.jpg -o InvoiceData.xlsx
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from invoice_extractor.config import get_config, update_config
from invoice_extractor.models.invoice import SelectedFile
from invoice_extractor.pipeline.session import ExtractionSession

logger = logging.getLogger(__name__)

TABLE_COLUMNS = ["Invoice", "Invoice Number", "Company Number", "Date", "Total Amount"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="invoice-extractor",
        description="Extract invoice fields from images with Gemini and export them to Excel.",
    )
    parser.add_argument("images", nargs="+", help="Invoice image files (up to 10)")
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Excel output path (default: InvoiceData.xlsx)",
    )
    parser.add_argument("--model", default=None, help="Gemini model name")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def format_table(rows: Sequence[dict]) -> str:
    """Render rows as a fixed-width text table."""
    widths = {
        col: max([len(col)] + [len(str(row[col])) for row in rows])
        for col in TABLE_COLUMNS
    }
    lines = [
        "  ".join(col.ljust(widths[col]) for col in TABLE_COLUMNS),
        "  ".join("-" * widths[col] for col in TABLE_COLUMNS),
    ]
    for row in rows:
        lines.append("  ".join(str(row[col]).ljust(widths[col]) for col in TABLE_COLUMNS))
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = get_config()
    if args.model:
        update_config(model=args.model)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    files = []
    for image in args.images:
        try:
            files.append(SelectedFile.from_path(image))
        except OSError as e:
            print(f"Cannot open {image}: {e}", file=sys.stderr)
            return 2

    session = ExtractionSession(config=config)
    session.add_files(files)
    if session.error:
        print(f"Error: {session.error}", file=sys.stderr)
        return 2

    records = asyncio.run(session.process())
    if session.error:
        print(f"Error: {session.error}", file=sys.stderr)
        return 1

    print(format_table([r.to_display_row() for r in records]))

    path = session.export(args.output)
    if path is None:
        print(f"Error: {session.error}", file=sys.stderr)
        return 1

    print(f"\nExported {len(records)} record(s) to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
