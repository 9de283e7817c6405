#!/usr/bin/env python3
"""
Simple script to run an extraction against a live page and debug the results.
"""

import argparse
import asyncio
import sys
from collections import Counter
from pathlib import Path

# Add parent directory to path
sys.path.append(str(Path(__file__).parent))

from svg_extraction.core import ExtractionConfig, SvgExtractor


def print_summary(svgs):
    """Print one line per extracted SVG, followed by its parts."""
    print(f"Extracted {len(svgs)} SVGs:")
    for i, svg in enumerate(svgs, start=1):
        size = f"{svg.width}x{svg.height}" if svg.width and svg.height else "unknown size"
        print(f"  {i}. [{svg.source_kind}] {svg.label} - {size} - {len(svg.content)} chars")
        for part in svg.parts:
            print(f"       {part.id}: <{part.tag}> {part.label} - {len(part.content)} chars")

    kinds = Counter(svg.source_kind for svg in svgs)
    print(f"\nBy source: {dict(kinds)}")


def write_files(svgs, output_dir: Path):
    """Save every SVG (and its parts) to ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    for svg in svgs:
        path = output_dir / f"{svg.id}-{svg.suggested_filename()}"
        path.write_text(svg.content, encoding="utf-8")
        for part in svg.parts:
            (output_dir / f"{part.id}.svg").write_text(part.content, encoding="utf-8")
    print(f"Wrote files to {output_dir}")


async def run(args):
    config = ExtractionConfig(
        settle_delay_ms=args.settle_delay,
        decompose_parts=not args.no_parts,
    )
    extractor = SvgExtractor(config)
    try:
        svgs = await extractor.extract_from_url(args.url)
    except Exception as e:
        print(f"Extraction failed: {e}")
        return 1

    print_summary(svgs)
    if args.output:
        write_files(svgs, Path(args.output))
    return 0


def main():
    parser = argparse.ArgumentParser(description="Extract SVGs from a web page and print a summary")
    parser.add_argument("url", help="Page URL")
    parser.add_argument("--output", "-o", help="Directory to write the extracted SVG files to")
    parser.add_argument("--settle-delay", type=int, default=1500, help="Extra wait after load, in ms")
    parser.add_argument("--no-parts", action="store_true", help="Skip splitting inline SVGs into parts")

    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
