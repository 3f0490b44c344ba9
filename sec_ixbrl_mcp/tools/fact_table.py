"""
Presentation table of facts lying near a target value.

Rows come from the dimensional search of a single filing. When that search
fails, rows are approximated from the SEC's company-facts aggregate, which
carries no dimensional breakdown; those rows are tagged ``api_aggregate``.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import httpx

from ..config import EdgarConfig
from ..core.client import EdgarClient
from ..utils.exceptions import AccessDeniedError, SECEdgarMCPError
from ..xbrl import get_dimensional_facts
from .dimensional import DEFAULT_TOLERANCE, resolve_filing, value_range_criteria
from .types import ToolResponse, get_option

logger = logging.getLogger(__name__)

GEOGRAPHIC_AXES = ("srt:StatementGeographicalAxis", "us-gaap:StatementGeographicalAxis")
SEGMENT_AXES = ("us-gaap:StatementBusinessSegmentsAxis",)
SUBSEGMENT_AXES = ("us-gaap:SubsegmentsAxis",)

AGGREGATE_CONCEPT = "RevenueFromContractWithCustomerExcludingAssessedTax"

# |deviation| below this counts as an exact match
EXACT_MATCH_THRESHOLD = 1_000
NEAR_MATCH_THRESHOLD = 30_000_000

SORT_KEYS = ("deviation", "value", "concept")


def format_millions(value: float) -> str:
    return f"${value / 1_000_000:.1f}M"


def format_deviation(deviation: float) -> str:
    sign = "+" if deviation >= 0 else "-"
    return f"{sign}${abs(deviation) / 1_000_000:.1f}M"


def member_display_name(member: str) -> str:
    """``jnj:ElectrophysiologyMember`` -> ``Electrophysiology``."""
    name = member.split(":", 1)[-1]
    if name.endswith("Member"):
        name = name[: -len("Member")]
    return name


def extract_dimension_value(dimensions: Optional[Dict[str, str]], axes: Sequence[str]) -> Optional[str]:
    """Display name of the member on the first of ``axes`` present in ``dimensions``."""
    if not dimensions:
        return None
    for axis in axes:
        if dimensions.get(axis):
            return member_display_name(dimensions[axis])
    return None


def _has_axis(dimensions: Optional[Dict[str, str]], axes: Sequence[str]) -> bool:
    return bool(dimensions) and any(dimensions.get(axis) for axis in axes)


def classify_fact(concept: Optional[str], dimensions: Optional[Dict[str, str]] = None) -> str:
    """Business classification of a fact from its concept name and dimensional axes."""
    if not concept:
        return "Unknown"

    concept = concept.lower()
    if "revenue" in concept:
        if _has_axis(dimensions, SUBSEGMENT_AXES):
            return "Subsegment Revenue"
        if _has_axis(dimensions, SEGMENT_AXES):
            return "Segment Revenue"
        if _has_axis(dimensions, GEOGRAPHIC_AXES):
            return "Geographic Revenue"
        return "Total Revenue"

    for keyword, label in (
        ("cost", "Cost"),
        ("expense", "Expense"),
        ("income", "Income"),
        ("asset", "Asset"),
        ("liability", "Liability"),
        ("equity", "Equity"),
    ):
        if keyword in concept:
            return label
    return "Other Financial"


def aggregate_facts(company_facts: Dict[str, Any], target_value: float, tolerance: float) -> List[Dict[str, Any]]:
    """Revenue values from the company-facts aggregate that fall within the target range."""
    concept = ((company_facts or {}).get("facts") or {}).get("us-gaap", {}).get(AGGREGATE_CONCEPT) or {}
    entries = (concept.get("units") or {}).get("USD") or []

    facts = []
    for index, entry in enumerate(entries):
        value = entry.get("val")
        if value is None or not (target_value - tolerance <= value <= target_value + tolerance):
            continue
        facts.append(
            {
                "concept": AGGREGATE_CONCEPT,
                "namespace": "us-gaap",
                "value": float(value),
                "context_ref": f"api_context_{index}",
                "unit_ref": "USD",
                "decimals": None,
                "scale": None,
                "period_type": "duration" if entry.get("start") else "instant",
                "period_start": entry.get("start") or entry.get("end"),
                "period_end": entry.get("end"),
                "dimensions": {},
                "fact_type": "api_aggregate",
                "form": entry.get("form"),
                "filed": entry.get("filed"),
                "accession_number": entry.get("accn"),
            }
        )
    return facts


def build_rows(facts: Iterable[Dict[str, Any]], target_value: float) -> List[Dict[str, Any]]:
    """One table row per numeric fact, numbered in input order."""
    rows = []
    for fact in facts:
        value = fact.get("value")
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            continue

        dimensions = fact.get("dimensions") or {}
        deviation = value - target_value
        rows.append(
            {
                "row_number": len(rows) + 1,
                "concept": fact.get("concept"),
                "namespace": fact.get("namespace") or "us-gaap",
                "value": value,
                "value_formatted": format_millions(value),
                "exact_match": abs(deviation) < EXACT_MATCH_THRESHOLD,
                "deviation_from_target": deviation,
                "deviation_formatted": format_deviation(deviation),
                "period_type": fact.get("period_type") or "unknown",
                "period_start": fact.get("period_start"),
                "period_end": fact.get("period_end"),
                "dimensions": dimensions,
                "dimension_count": len(dimensions),
                "has_geographic_dimension": _has_axis(dimensions, GEOGRAPHIC_AXES),
                "has_segment_dimension": _has_axis(dimensions, SEGMENT_AXES),
                "has_subsegment_dimension": _has_axis(dimensions, SUBSEGMENT_AXES),
                "business_classification": classify_fact(fact.get("concept"), dimensions),
                "context_ref": fact.get("context_ref"),
                "unit_ref": fact.get("unit_ref"),
                "decimals": fact.get("decimals"),
                "scale": fact.get("scale"),
                "fact_type": fact.get("fact_type"),
            }
        )
    return rows


def sort_rows(rows: List[Dict[str, Any]], sort_by: str = "deviation") -> List[Dict[str, Any]]:
    if sort_by == "value":
        return sorted(rows, key=lambda row: row["value"], reverse=True)
    if sort_by == "concept":
        return sorted(rows, key=lambda row: (row["concept"] or "").lower())
    return sorted(rows, key=lambda row: abs(row["deviation_from_target"]))


def _unique(values: Iterable[Any]) -> List[Any]:
    return list(dict.fromkeys(values))


def summarize_rows(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    summary: Dict[str, Any] = {
        "total_facts": len(rows),
        "exact_matches": sum(1 for row in rows if row["exact_match"]),
        "concept_types": _unique(row["concept"] for row in rows),
        "facts_with_geography": sum(1 for row in rows if row["has_geographic_dimension"]),
        "facts_with_segments": sum(1 for row in rows if row["has_segment_dimension"]),
        "facts_with_subsegments": sum(1 for row in rows if row["has_subsegment_dimension"]),
        "value_range": None,
        "business_types": {},
        "period_types": _unique(row["period_type"] for row in rows),
        "unique_periods": _unique(f"{row['period_start']} to {row['period_end']}" for row in rows),
    }

    if rows:
        low = min(row["value"] for row in rows)
        high = max(row["value"] for row in rows)
        summary["value_range"] = {
            "min": low,
            "max": high,
            "min_formatted": format_millions(low),
            "max_formatted": format_millions(high),
        }

    for row in rows:
        label = row["business_classification"]
        summary["business_types"][label] = summary["business_types"].get(label, 0) + 1
    return summary


def _match_marker(row: Dict[str, Any]) -> str:
    if row["exact_match"]:
        return "exact"
    if abs(row["deviation_from_target"]) < NEAR_MATCH_THRESHOLD:
        return "near"
    return ""


def format_fact_table(rows: List[Dict[str, Any]], show_dimensions: bool = True) -> str:
    """Fixed-width text rendering of table rows."""
    if not rows:
        return "No facts found in the specified range."

    header = (
        f"{'Row':<4}│ {'Concept':<28}│ {'Value':<10}│ {'Match':<6}│ {'Period':<12}│ "
        f"{'Geography':<14}│ {'Segment':<12}│ {'Subsegment':<18}│ Class"
    )
    lines = ["═" * len(header), header, "─" * len(header)]

    for row in rows:
        dimensions = row["dimensions"]
        geography = extract_dimension_value(dimensions, GEOGRAPHIC_AXES) or "N/A"
        segment = extract_dimension_value(dimensions, SEGMENT_AXES) or "N/A"
        subsegment = extract_dimension_value(dimensions, SUBSEGMENT_AXES) or "N/A"
        lines.append(
            f"{row['row_number']:<4}│ {(row['concept'] or '')[:27]:<28}│ {row['value_formatted']:<10}│ "
            f"{_match_marker(row):<6}│ {str(row['period_end'] or 'N/A'):<12}│ {geography[:13]:<14}│ "
            f"{segment[:11]:<12}│ {subsegment[:17]:<18}│ {row['business_classification']}"
        )
        if show_dimensions and dimensions:
            for axis, member in dimensions.items():
                lines.append(f"    │ {axis}: {member}")
            lines.append("    │")

    lines.append("═" * len(header))
    return "\n".join(lines)


class FactTableTools:
    """Tools that present dimensional facts around a target value as a table."""

    def __init__(self, config: EdgarConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport

    def _client(self) -> EdgarClient:
        return EdgarClient(self.config, transport=self.transport)

    async def build_fact_table(
        self,
        identifier: str,
        target_value: float,
        tolerance: float = DEFAULT_TOLERANCE,
        accession_number: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> ToolResponse:
        """Table of facts within ``tolerance`` of ``target_value`` with business classification.

        Options: ``max_rows`` (25), ``show_dimensions`` (True), ``sort_by``
        (``deviation``, ``value`` or ``concept``) and ``filters`` (concept and
        dimension filters).
        """
        try:
            max_rows = int(get_option(options, "max_rows", "maxRows", 25))
            show_dimensions = bool(get_option(options, "show_dimensions", "showDimensions", True))
            sort_by = get_option(options, "sort_by", "sortBy", "deviation")
            if sort_by not in SORT_KEYS:
                raise ValueError(f"sort_by must be one of {', '.join(SORT_KEYS)}, got '{sort_by}'")
            filters = get_option(options, "filters", "filters", {})

            criteria = value_range_criteria(target_value, tolerance, filters)
            search_range = {"min": target_value - tolerance, "max": target_value + tolerance}

            async with self._client() as client:
                cik = await client.resolve_cik(identifier)
                accession, primary_document = await resolve_filing(client, cik, accession_number)

                source = "SEC EDGAR XBRL Instance Document Analysis"
                try:
                    result = await get_dimensional_facts(client, cik, accession, criteria, primary_document)
                    facts = result["matching_facts"]
                except AccessDeniedError:
                    raise
                except SECEdgarMCPError as e:
                    logger.warning("Dimensional search failed for %s, using company facts: %s", accession, e)
                    source = "SEC EDGAR Company Facts API"
                    facts = aggregate_facts(await client.get_company_facts(cik), target_value, tolerance)

            rows = sort_rows(build_rows(facts, target_value), sort_by)
            response = {
                "success": True,
                "company": cik,
                "filing": accession,
                "target_value": target_value,
                "tolerance": tolerance,
                "search_range": search_range,
                "table": rows[:max_rows] if max_rows > 0 else rows,
                "summary": summarize_rows(rows),
                "source": source,
            }
            if show_dimensions:
                response["formatted_table"] = format_fact_table(response["table"], show_dimensions)
            return response
        except Exception as e:
            return {"success": False, "error": f"Failed to build fact table: {str(e)}"}
