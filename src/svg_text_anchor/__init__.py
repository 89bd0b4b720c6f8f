"""SVG Text Anchor - re-anchor SVG text runs from alignment-encoding ids."""

__version__ = "0.1.0"

from .anchor import (
    AnchorReport,
    AnchorRule,
    ElementConfig,
    NumeralError,
    RunResult,
    anchor_svg,
    anchor_svg_tree,
    format_anchor_report,
    parse_anchor_rule_file,
)
from .classify import Alignment, classify_identifier, strip_numeric_suffix
from .metrics import FontConfig, GlyphMetrics

__all__ = [
    # Anchor
    "AnchorReport",
    "AnchorRule",
    "ElementConfig",
    "NumeralError",
    "RunResult",
    "anchor_svg",
    "anchor_svg_tree",
    "format_anchor_report",
    "parse_anchor_rule_file",
    # Classify
    "Alignment",
    "classify_identifier",
    "strip_numeric_suffix",
    # Metrics
    "FontConfig",
    "GlyphMetrics",
]
