#!/usr/bin/env python3
"""Re-anchor SVG text elements whose id encodes a horizontal alignment."""

import argparse
import sys
from pathlib import Path
from xml.etree import ElementTree as ET

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from svg_text_anchor.anchor import (
    AnchorRule,
    NumeralError,
    anchor_svg_tree,
    format_anchor_report,
    parse_anchor_rule_file,
    parse_scale_correction,
)
from svg_text_anchor.metrics import GlyphMetrics
from svg_text_anchor.utils import parse_svg, serialize_svg


def build_rule(args: argparse.Namespace) -> AnchorRule:
    """Build the anchor rule from the rule file and command-line overrides.

    Raises:
        ValueError: If the rule file or an override is invalid.
    """
    rule = parse_anchor_rule_file(args.rule) if args.rule else AnchorRule()
    if args.family is not None:
        rule.font.family = args.family
        rule.font.path = None
    if args.font is not None:
        rule.font.path = str(args.font)
    if args.scale_correction is not None:
        rule.font.scale_correction = parse_scale_correction(args.scale_correction)
    return rule


def main() -> int:
    """Main entry point.

    Returns:
        Exit code:
        - 0: Success (skipped runs are reported as warnings)
        - 1: I/O, XML or font error
        - 2: Rule file error
        - 3: Malformed numeric attribute
    """
    parser = argparse.ArgumentParser(
        description="Re-anchor SVG text elements whose id ends in left/center/right.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Filter stdin to stdout
  %(prog)s < input.svg > output.svg

  # Process a file with a specific font
  %(prog)s input.svg --font OpenSans.ttf --output output.svg

  # Preview changes without writing
  %(prog)s input.svg --rule anchor.yaml --dry-run
""",
    )
    parser.add_argument(
        "svg_file",
        type=Path,
        nargs="?",
        help="Path to SVG file to process (default: read stdin)",
    )
    parser.add_argument("--rule", "-r", type=Path, help="Path to YAML rule file")
    parser.add_argument(
        "--output", "-o", type=Path, help="Output SVG file (default: stdout)"
    )
    parser.add_argument("--font", "-f", type=Path, help="Font file to measure with")
    parser.add_argument("--family", help="Font family to look up with fc-match")
    parser.add_argument(
        "--scale-correction",
        help="Font scale correction factor, or 'auto' to derive it from the font",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report changes without writing output",
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true", help="Omit per-run lines from the report"
    )

    args = parser.parse_args()

    # Validate input files exist
    if args.svg_file is not None and not args.svg_file.exists():
        print(f"Error: SVG file not found: {args.svg_file}", file=sys.stderr)
        return 1

    if args.rule is not None and not args.rule.exists():
        print(f"Error: Rule file not found: {args.rule}", file=sys.stderr)
        return 1

    # Parse rule file
    try:
        rule = build_rule(args)
    except Exception as e:
        print(f"Error: Failed to parse rule file: {e}", file=sys.stderr)
        return 2

    # Load font before touching the document
    try:
        metrics = GlyphMetrics.from_config(rule.font)
    except Exception as e:
        print(f"Error: Failed to load font: {e}", file=sys.stderr)
        return 1

    try:
        tree = parse_svg(args.svg_file if args.svg_file else sys.stdin.buffer)
    except (OSError, ET.ParseError) as e:
        print(f"Error: Failed to parse SVG: {e}", file=sys.stderr)
        return 1

    try:
        report = anchor_svg_tree(tree, metrics, rule, apply=not args.dry_run)
    except NumeralError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 3
    report.file_path = args.svg_file or Path("<stdin>")

    # Report goes to stderr so stdout carries only the document
    print(format_anchor_report(report, verbose=not args.quiet), file=sys.stderr)

    if args.dry_run:
        return 0

    try:
        output = serialize_svg(tree)
        if args.output:
            args.output.write_text(output, encoding="utf-8")
            if not args.quiet:
                print(f"\nOutput written to: {args.output}", file=sys.stderr)
        else:
            sys.stdout.write(output)
    except Exception as e:
        print(f"Error: Failed to write output: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
