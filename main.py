"""
Process Document Exporter — CLI Entry Point

Usage:
    python main.py -t "Setup Guide" -i steps.md -o out/
    python main.py -t "Setup Guide" -i steps.md -s shot1.png -s shot2.png -f pdf -v
"""

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from process_doc.errors import ExportError
from process_doc.exporter import DocumentExporter
from process_doc.models import ExportFormat, PageGeometry, ProcessDocument
from process_doc.raster_backend import PillowBackend


def setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%H:%M:%S")


def run_export(title: str, body_path: str, screenshot_paths: list[str], output_dir: str,
               fmt: ExportFormat, geometry: PageGeometry, backend: PillowBackend) -> str:
    logger = logging.getLogger("export")
    total_start = time.time()

    logger.info("=" * 60)
    logger.info("STAGE 1: Reading inputs")
    logger.info("=" * 60)
    with open(body_path, "r", encoding="utf-8") as handle:
        body = handle.read()
    screenshots = []
    for path in screenshot_paths:
        with open(path, "rb") as handle:
            screenshots.append(handle.read())
    logger.info(f"  Body: {len(body.splitlines())} lines, screenshots: {len(screenshots)}")

    logger.info("")
    logger.info("=" * 60)
    logger.info(f"STAGE 2: Exporting {fmt.extension.upper()}")
    logger.info("=" * 60)
    exporter = DocumentExporter(backend=backend, geometry=geometry)
    artifact = exporter.export(ProcessDocument(title=title, body=body, screenshots=screenshots), fmt)

    logger.info("")
    logger.info("=" * 60)
    logger.info("STAGE 3: Saving artifact")
    logger.info("=" * 60)
    os.makedirs(output_dir, exist_ok=True)
    output_path = os.path.join(output_dir, artifact.filename)
    with open(output_path, "wb") as handle:
        handle.write(artifact.data)

    logger.info("")
    logger.info("=" * 60)
    logger.info("EXPORT COMPLETE")
    logger.info("=" * 60)
    logger.info(f"  Output file: {os.path.abspath(output_path)}")
    logger.info(f"  Size:        {len(artifact.data)} bytes")
    logger.info(f"  Total time:  {time.time() - total_start:.1f}s")
    return output_path


def main():
    parser = argparse.ArgumentParser(
        description="Export a generated process description as a paginated PDF or flat text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Examples:\n  python main.py -t \"Setup Guide\" -i steps.md\n  python main.py -t \"Setup Guide\" -i steps.md -s shot.png -f txt -o out/")
    parser.add_argument("-t", "--title", required=True, help="Document title")
    parser.add_argument("-i", "--input", required=True, help="Path to the documentation body (markdown-like text)")
    parser.add_argument("-s", "--screenshot", action="append", default=[], help="Screenshot image to append (repeatable)")
    parser.add_argument("-f", "--format", choices=[f.value for f in ExportFormat], default="pdf", help="Output format (default: pdf)")
    parser.add_argument("-o", "--output-dir", default=".", help="Directory for the exported file (default: .)")
    parser.add_argument("--scale", type=int, default=2, help="Rasterization supersampling factor (default: 2)")
    parser.add_argument("--margin-mm", type=float, default=20.0, help="Page margin in millimetres (default: 20)")
    parser.add_argument("--font", type=Path, default=None, help="Regular TrueType font file")
    parser.add_argument("--bold-font", type=Path, default=None, help="Bold TrueType font file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()
    setup_logging(args.verbose)
    if not os.path.isfile(args.input):
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)
    for path in args.screenshot:
        if not os.path.isfile(path):
            print(f"Error: Screenshot not found: {path}", file=sys.stderr)
            sys.exit(1)
    if args.scale < 2:
        print("Error: --scale must be at least 2", file=sys.stderr)
        sys.exit(1)
    try:
        geometry = PageGeometry(margin_mm=args.margin_mm, scale=args.scale)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    backend = PillowBackend(regular_font=args.font, bold_font=args.bold_font)
    try:
        run_export(title=args.title, body_path=args.input, screenshot_paths=args.screenshot,
                   output_dir=args.output_dir, fmt=ExportFormat(args.format),
                   geometry=geometry, backend=backend)
    except ExportError as e:
        print(f"Error ({e.kind}): {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
