"""
Quarter-by-quarter view of dimensional revenue facts across recent filings.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from ..config import EdgarConfig
from ..core.client import EdgarClient
from ..core.models import FilingInfo, filings_from_submissions
from ..utils.constants import PRIMARY_FORM_TYPES
from ..utils.exceptions import AccessDeniedError, SECEdgarMCPError
from ..xbrl import SearchCriteria, ValueRange, get_dimensional_facts
from .fact_table import format_millions, member_display_name
from .types import ToolResponse, get_option

logger = logging.getLogger(__name__)

DEFAULT_CONCEPT = "RevenueFromContractWithCustomerExcludingAssessedTax"
DEFAULT_PERIODS = 4
DEFAULT_MIN_VALUE = 100_000_000
MAX_VALUE = 10_000_000_000

US = "U.S."
INTERNATIONAL = "International"
WORLDWIDE = "Worldwide"
GEOGRAPHIES = (US, INTERNATIONAL, WORLDWIDE)


def quarter_label(filing_date: Optional[date]) -> str:
    """Calendar quarter of a date, e.g. ``Q1 2025``."""
    if filing_date is None:
        return "Unknown"
    return f"Q{(filing_date.month - 1) // 3 + 1} {filing_date.year}"


def geography_of(dimensions: Optional[Dict[str, str]]) -> str:
    """U.S., International or Worldwide from the geographical axis of a fact."""
    for axis, member in (dimensions or {}).items():
        if "geographical" not in axis.lower():
            continue
        name = member_display_name(member).lower()
        if name.startswith("nonus") or "international" in name:
            return INTERNATIONAL
        if name in ("us", "unitedstates", "domestic"):
            return US
        return INTERNATIONAL
    return WORLDWIDE


def _member_on_axis(dimensions: Optional[Dict[str, str]], axis_part: str) -> str:
    for axis, member in (dimensions or {}).items():
        if axis_part in axis.lower():
            return member_display_name(member)
    return "Total"


def segment_of(dimensions: Optional[Dict[str, str]]) -> str:
    return _member_on_axis(dimensions, "businesssegment")


def subsegment_of(dimensions: Optional[Dict[str, str]]) -> str:
    return _member_on_axis(dimensions, "subsegment")


def build_period_rows(
    facts: List[Dict[str, Any]], filing: FilingInfo, min_value: float, subsegment: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Rows for one filing's facts, keeping numeric values of at least ``min_value``."""
    rows = []
    for fact in facts:
        value = fact.get("value")
        if not isinstance(value, (int, float)) or value < min_value:
            continue
        dimensions = fact.get("dimensions") or {}
        fact_subsegment = subsegment_of(dimensions)
        if subsegment and subsegment.lower() not in fact_subsegment.lower():
            continue
        rows.append(
            {
                "period": quarter_label(filing.filing_date),
                "filing_date": filing.filing_date.isoformat() if filing.filing_date else None,
                "form_type": filing.form_type,
                "accession_number": filing.accession_number,
                "geography": geography_of(dimensions),
                "segment": segment_of(dimensions),
                "subsegment": fact_subsegment,
                "value": value,
                "value_formatted": format_millions(value),
                "concept": fact.get("concept"),
                "dimensions": dimensions,
                "period_start": fact.get("period_start"),
                "period_end": fact.get("period_end"),
            }
        )
    return rows


def sort_table(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Newest filing first, then by geography."""
    by_geography = sorted(rows, key=lambda row: row["geography"])
    return sorted(by_geography, key=lambda row: row["filing_date"] or "", reverse=True)


def _periods_newest_first(rows: List[Dict[str, Any]]) -> List[str]:
    return list(dict.fromkeys(row["period"] for row in sort_table(rows)))


def geographic_mix(rows: List[Dict[str, Any]]) -> Dict[str, Dict[str, Dict[str, float]]]:
    """Value and percentage share of each geography within each period."""
    mix: Dict[str, Dict[str, Dict[str, float]]] = {}
    for period in _periods_newest_first(rows):
        period_rows = [row for row in rows if row["period"] == period]
        total = sum(row["value"] for row in period_rows)
        shares: Dict[str, Dict[str, float]] = {}
        for row in period_rows:
            entry = shares.setdefault(row["geography"], {"value": 0.0, "percentage": 0.0})
            entry["value"] += row["value"]
        for entry in shares.values():
            entry["percentage"] = round(entry["value"] / total * 100, 1) if total else 0.0
        mix[period] = shares
    return mix


def growth_rates(rows: List[Dict[str, Any]], by_geography: bool = True) -> Dict[str, Dict[str, Dict[str, float]]]:
    """Period-over-period growth between consecutive periods, per geography or in total."""
    periods = _periods_newest_first(rows)
    groups = GEOGRAPHIES if by_geography else ("Total",)

    def total(period: str, group: str) -> float:
        return sum(
            row["value"] for row in rows if row["period"] == period and (group == "Total" or row["geography"] == group)
        )

    rates: Dict[str, Dict[str, Dict[str, float]]] = {}
    for current, prior in zip(periods, periods[1:]):
        comparison = {}
        for group in groups:
            current_value, prior_value = total(current, group), total(prior, group)
            if prior_value > 0:
                comparison[group] = {
                    "current": current_value,
                    "prior": prior_value,
                    "growth_rate": round((current_value - prior_value) / prior_value * 100, 1),
                }
        rates[f"{current}_vs_{prior}"] = comparison
    return rates


class TimeSeriesTools:
    """Tools that follow dimensional facts across a company's recent periodic filings."""

    def __init__(self, config: EdgarConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport

    def _client(self) -> EdgarClient:
        return EdgarClient(self.config, transport=self.transport)

    async def time_series_dimensional_analysis(
        self, identifier: str, options: Optional[Dict[str, Any]] = None
    ) -> ToolResponse:
        """Dimensional facts of one concept across the latest 10-Q/10-K filings.

        Options: ``concept``, ``subsegment`` (member name filter on the
        subsegment axis), ``periods`` (4), ``min_value`` (100M) and
        ``include_geography`` (True).
        """
        try:
            concept = get_option(options, "concept", "concept", DEFAULT_CONCEPT)
            subsegment = get_option(options, "subsegment", "subsegment", None)
            periods = int(get_option(options, "periods", "periods", DEFAULT_PERIODS))
            min_value = float(get_option(options, "min_value", "minValue", DEFAULT_MIN_VALUE))
            include_geography = bool(get_option(options, "include_geography", "includeGeography", True))

            criteria = SearchCriteria(concept=concept, value_range=ValueRange(min=min_value, max=MAX_VALUE))

            table: List[Dict[str, Any]] = []
            analysed: List[str] = []
            async with self._client() as client:
                cik = await client.resolve_cik(identifier)
                filings = [
                    filing
                    for filing in filings_from_submissions(await client.get_submissions(cik))
                    if filing.form_type in PRIMARY_FORM_TYPES
                ][:periods]

                for filing in filings:
                    try:
                        result = await get_dimensional_facts(
                            client, cik, filing.accession_number, criteria, filing.primary_document
                        )
                    except AccessDeniedError:
                        raise
                    except SECEdgarMCPError as e:
                        logger.warning("Skipping %s (%s): %s", filing.accession_number, filing.form_type, e)
                        continue

                    rows = build_period_rows(result["matching_facts"], filing, min_value, subsegment)
                    if rows:
                        table.extend(rows)
                        analysed.append(quarter_label(filing.filing_date))

            table = sort_table(table)
            analysis: Dict[str, Any] = {"growth_rates": growth_rates(table, by_geography=include_geography)}
            if include_geography:
                analysis["geographic_mix"] = geographic_mix(table)

            return {
                "success": True,
                "company": cik,
                "concept": concept,
                "subsegment": subsegment,
                "periods": list(dict.fromkeys(analysed)),
                "table": table,
                "analysis": analysis,
                "summary": {
                    "total_periods": len(set(analysed)),
                    "total_facts": len(table),
                    "geographic_breakdown": analysis.get("geographic_mix"),
                    "growth_trends": analysis["growth_rates"],
                },
            }
        except Exception as e:
            return {"success": False, "error": f"Failed to run time series analysis: {str(e)}"}
