"""Text anchoring module.

Re-anchors ``<text>`` elements whose id encodes a horizontal alignment
(``*_left``, ``*_center``, ``*_right``). Upstream tools emit every text run
anchored at its left edge; this pass measures each run with real font
metrics, shifts its ``x`` to the requested anchor point and sets
``text-anchor`` accordingly.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Literal
from xml.etree import ElementTree as ET

import yaml

from .classify import Alignment, classify_identifier
from .metrics import DEFAULT_FONT_SIZE, FontConfig, GlyphMetrics
from .utils import (
    find_attribute_key,
    format_number,
    get_attribute,
    get_local_name,
    is_svg_tag,
    iter_child_nodes,
    parse_number,
    parse_svg,
)

TEXT_TAG = "text"
RUN_TAG = "tspan"
ANCHOR_ATTRIBUTE = "text-anchor"

# Upstream default that fights re-anchored text; removed on exact match only
PRESERVE_WHITESPACE_STYLE = "white-space: pre"

ANCHOR_VALUES: dict[Alignment, str] = {
    "left": "start",
    "center": "middle",
    "right": "end",
}


class NumeralError(ValueError):
    """Raised when a numeric attribute is present but not a valid numeral."""

    def __init__(self, attribute: str, value: str, element_id: str) -> None:
        super().__init__(
            f"Invalid {attribute} value {value!r} on element '{element_id}'"
        )
        self.attribute = attribute
        self.value = value
        self.element_id = element_id


@dataclass
class ElementConfig:
    """Local names of the elements taking part in the pass."""

    text: str = TEXT_TAG
    run: str = RUN_TAG


@dataclass
class AnchorRule:
    """Complete anchoring configuration."""

    font: FontConfig = field(default_factory=FontConfig)
    elements: ElementConfig = field(default_factory=ElementConfig)


RunStatus = Literal["aligned", "skipped"]


@dataclass
class RunResult:
    """Outcome for a single qualifying run."""

    element_id: str
    alignment: Alignment
    status: RunStatus
    text: str = ""
    font_size: float = DEFAULT_FONT_SIZE
    width: float = 0.0
    x_before: float | None = None
    x_after: float | None = None
    anchor: str | None = None
    style_removed: bool = False
    message: str = ""

    @property
    def is_skipped(self) -> bool:
        """Check if the run was left untouched."""
        return self.status == "skipped"


@dataclass
class AnchorReport:
    """Complete anchoring report."""

    file_path: Path
    results: list[RunResult] = field(default_factory=list)
    text_elements: int = 0
    unclassified: int = 0

    @property
    def aligned_count(self) -> int:
        """Number of runs that were re-anchored."""
        return sum(1 for r in self.results if not r.is_skipped)

    @property
    def skipped_count(self) -> int:
        """Number of runs skipped because of malformed content."""
        return sum(1 for r in self.results if r.is_skipped)

    @property
    def warnings(self) -> list[str]:
        """Diagnostic messages for skipped runs."""
        return [r.message for r in self.results if r.is_skipped]

    @property
    def has_warnings(self) -> bool:
        """Check if any run was skipped."""
        return self.skipped_count > 0


def read_numeral(element: ET.Element, name: str, element_id: str) -> float | None:
    """Read a numeric attribute by local name.

    Returns:
        The parsed value, or None if the attribute is absent.

    Raises:
        NumeralError: If the attribute is present but malformed.
    """
    value = get_attribute(element, name)
    if value is None:
        return None
    try:
        return parse_number(value)
    except ValueError as e:
        raise NumeralError(name, value, element_id) from e


def run_text_content(run: ET.Element) -> tuple[str | None, str]:
    """Extract the single text node of a qualifying run.

    Returns:
        Tuple of (text, problem). ``text`` is None when the run does not
        hold exactly one text node, and ``problem`` then describes why.
    """
    nodes = list(iter_child_nodes(run))
    if not nodes:
        return None, "has no children"
    if len(nodes) > 1:
        return None, "has more than one child"
    if not isinstance(nodes[0], str):
        return None, "has a non-text child"
    return nodes[0], ""


def compute_anchor_x(x: float, width: float, alignment: Alignment) -> float:
    """Move a left-edge x coordinate to the anchor point of the alignment."""
    if alignment == "center":
        return x + width / 2
    if alignment == "right":
        return x + width
    return x


def align_run(
    element: ET.Element,
    run: ET.Element,
    alignment: Alignment,
    metrics: GlyphMetrics,
    default_size: float = DEFAULT_FONT_SIZE,
    apply: bool = True,
) -> RunResult:
    """Re-anchor one qualifying run of an alignment-bearing element.

    Reads ``font-size`` and ``style`` from ``element`` and ``x`` from
    ``run``; writes ``x`` and ``text-anchor`` on ``run`` and may remove
    ``style`` from ``element``.

    Args:
        element: The alignment-bearing text element.
        run: Child run whose content is measured.
        alignment: Alignment intent of ``element``.
        metrics: Glyph metrics provider.
        default_size: Font size used when ``font-size`` is absent.
        apply: Whether to mutate the tree.

    Returns:
        RunResult describing what was (or would be) changed.

    Raises:
        NumeralError: If ``font-size`` or ``x`` is malformed.
    """
    element_id = get_attribute(element, "id") or ""
    result = RunResult(element_id=element_id, alignment=alignment, status="skipped")

    text, problem = run_text_content(run)
    if text is None:
        result.message = (
            f"{element_id}: {get_local_name(run.tag)} element {problem}, skipping"
        )
        return result

    font_size = read_numeral(element, "font-size", element_id)
    if font_size is None:
        font_size = default_size
    x_before = read_numeral(run, "x", element_id)

    width = metrics.measure(text, font_size)
    anchor = ANCHOR_VALUES[alignment]

    result.status = "aligned"
    result.text = text
    result.font_size = font_size
    result.width = width
    result.anchor = anchor
    result.x_before = x_before
    if x_before is not None:
        result.x_after = compute_anchor_x(x_before, width, alignment)

    style_key = find_attribute_key(element, "style")
    result.style_removed = (
        style_key is not None
        and element.attrib[style_key] == PRESERVE_WHITESPACE_STYLE
    )

    if apply:
        if result.x_after is not None:
            run.set(find_attribute_key(run, "x"), format_number(result.x_after))
        run.set(find_attribute_key(run, ANCHOR_ATTRIBUTE) or ANCHOR_ATTRIBUTE, anchor)
        if result.style_removed:
            del element.attrib[style_key]

    return result


def align_text_element(
    element: ET.Element,
    alignment: Alignment,
    metrics: GlyphMetrics,
    rule: AnchorRule,
    apply: bool = True,
) -> list[RunResult]:
    """Re-anchor every qualifying run directly under a text element."""
    results: list[RunResult] = []
    for child in element:
        if is_svg_tag(child.tag, rule.elements.run):
            results.append(
                align_run(
                    element,
                    child,
                    alignment,
                    metrics,
                    default_size=rule.font.default_size,
                    apply=apply,
                )
            )
    return results


def iter_text_elements(root: ET.Element, text_tag: str = TEXT_TAG) -> Iterator[ET.Element]:
    """Iterate over text elements in document order (depth-first, pre-order).

    Args:
        root: Element to search, included in the search itself.
        text_tag: Local name of the elements to yield.

    Yields:
        Each SVG (or unqualified) element named ``text_tag``.
    """
    for elem in root.iter():
        if is_svg_tag(elem.tag, text_tag):
            yield elem


def anchor_svg_tree(
    tree: ET.ElementTree,
    metrics: GlyphMetrics,
    rule: AnchorRule | None = None,
    apply: bool = True,
) -> AnchorReport:
    """Re-anchor all alignment-bearing text elements of an ElementTree.

    Args:
        tree: ElementTree to process (modified in-place if apply=True).
        metrics: Glyph metrics provider shared by every measurement.
        rule: Anchoring configuration; defaults are used when None.
        apply: Whether to apply changes to the SVG.

    Returns:
        AnchorReport with results.

    Raises:
        NumeralError: If a ``font-size`` or ``x`` value is malformed. The
            pass stops at the first such value.

    Note:
        The file_path in the returned report will be empty Path("").
        Callers should set it if needed.
    """
    if rule is None:
        rule = AnchorRule()

    report = AnchorReport(file_path=Path(""))
    for elem in iter_text_elements(tree.getroot(), rule.elements.text):
        report.text_elements += 1
        identifier = get_attribute(elem, "id")
        if identifier is None:
            report.unclassified += 1
            continue
        alignment = classify_identifier(identifier)
        if alignment is None:
            report.unclassified += 1
            continue
        report.results.extend(
            align_text_element(elem, alignment, metrics, rule, apply=apply)
        )

    return report


def anchor_svg(
    svg_path: Path,
    metrics: GlyphMetrics,
    rule: AnchorRule | None = None,
    apply: bool = True,
) -> tuple[ET.ElementTree, AnchorReport]:
    """Re-anchor text elements of an SVG file.

    Args:
        svg_path: Path to SVG file.
        metrics: Glyph metrics provider.
        rule: Anchoring configuration.
        apply: Whether to apply changes to the SVG.

    Returns:
        Tuple of (ElementTree, AnchorReport).
    """
    tree = parse_svg(svg_path)
    report = anchor_svg_tree(tree, metrics, rule, apply)
    report.file_path = svg_path
    return tree, report


def parse_anchor_rule_file(rule_path: Path) -> AnchorRule:
    """Parse a YAML anchor rule file.

    Args:
        rule_path: Path to the YAML rule file.

    Returns:
        Parsed AnchorRule.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the rule format is invalid.
    """
    with open(rule_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    # An empty file selects all defaults
    if data is None:
        return AnchorRule()
    if not isinstance(data, dict):
        raise ValueError("Rule file must be a YAML dictionary")

    rule = AnchorRule()

    font_data = data.get("font")
    if font_data is not None:
        if not isinstance(font_data, dict):
            raise ValueError("'font' section must be a dictionary")
        if "family" in font_data:
            rule.font.family = str(font_data["family"])
        if "path" in font_data:
            rule.font.path = str(font_data["path"])
        if "scale_correction" in font_data:
            rule.font.scale_correction = parse_scale_correction(
                font_data["scale_correction"]
            )
        if "default_size" in font_data:
            default_size = float(font_data["default_size"])
            if default_size <= 0:
                raise ValueError(
                    f"font.default_size must be positive, got {default_size}"
                )
            rule.font.default_size = default_size

    elements_data = data.get("elements")
    if elements_data is not None:
        if not isinstance(elements_data, dict):
            raise ValueError("'elements' section must be a dictionary")
        for name in ("text", "run"):
            if name in elements_data:
                value = elements_data[name]
                if not isinstance(value, str) or not value:
                    raise ValueError(f"elements.{name} must be a non-empty string")
                setattr(rule.elements, name, value)

    return rule


def parse_scale_correction(value) -> float | None:
    """Parse a scale correction setting: a positive number or "auto".

    Raises:
        ValueError: If the value is neither.
    """
    if isinstance(value, str) and value.strip().lower() == "auto":
        return None
    correction = float(value)
    if correction <= 0:
        raise ValueError(f"scale_correction must be positive, got {correction}")
    return correction


def format_anchor_report(report: AnchorReport, verbose: bool = True) -> str:
    """Format anchor report as text.

    Args:
        report: Anchor report.
        verbose: Include one line per aligned run.

    Returns:
        Formatted text.
    """
    lines: list[str] = []
    lines.append(f"File: {report.file_path}")
    lines.append(f"Text elements scanned: {report.text_elements}")
    lines.append(f"Without alignment: {report.unclassified}")
    lines.append("")

    for result in report.results:
        if result.is_skipped:
            lines.append(f"  [WARNING] {result.message}")
        elif verbose:
            if result.x_after is None:
                position = "no x"
            else:
                position = (
                    f"x {format_number(result.x_before)} -> "
                    f"{format_number(result.x_after)}"
                )
            line = (
                f'  [{result.anchor.upper()}] {result.element_id}: "{result.text}" '
                f"width={result.width:.2f} size={format_number(result.font_size)} "
                f"{position}"
            )
            if result.style_removed:
                line += " (style removed)"
            lines.append(line)

    if report.results:
        lines.append("")

    lines.append("Summary:")
    lines.append(f"  Aligned runs: {report.aligned_count}")
    lines.append(f"  Skipped runs: {report.skipped_count}")

    return "\n".join(lines)
