from typing import Any, Dict, Iterable, List, Optional

from ..core.models import FilingInfo
from .types import ToolResponse


def _field(filing: Dict[str, Any], *names: str) -> Any:
    for name in names:
        if filing.get(name):
            return filing[name]
    return None


def _form(filing: Dict[str, Any]) -> Optional[str]:
    return _field(filing, "form_type", "form")


def _filing_date(filing: Dict[str, Any]) -> Optional[str]:
    value = _field(filing, "filing_date", "filingDate")
    return str(value)[:10] if value else None


def latest_filing(filings: Iterable[FilingInfo], form_type: str) -> Optional[FilingInfo]:
    """First filing of ``form_type`` in filing-history order (newest first)."""
    for filing in filings:
        if filing.form_type == form_type:
            return filing
    return None


class FilingsTools:
    """Tools for working with filing-history results."""

    def filter_filings(
        self,
        filings: List[Dict[str, Any]],
        form_type: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> ToolResponse:
        """Filter filings by form type and filing-date range.

        Form types match by case-insensitive substring, so ``"10-K"`` also keeps
        ``10-K/A``. Dates are ISO ``YYYY-MM-DD`` strings and both bounds are
        inclusive. Filings without a filing date are dropped by either bound.
        """
        try:
            filtered = list(filings or [])

            if form_type:
                wanted = form_type.lower()
                filtered = [f for f in filtered if _form(f) and wanted in _form(f).lower()]

            if start_date:
                filtered = [f for f in filtered if _filing_date(f) and _filing_date(f) >= start_date]

            if end_date:
                filtered = [f for f in filtered if _filing_date(f) and _filing_date(f) <= end_date]

            if limit and limit > 0:
                filtered = filtered[:limit]

            return {
                "success": True,
                "filings": filtered,
                "count": len(filtered),
                "total_input": len(filings or []),
            }
        except Exception as e:
            return {"success": False, "error": f"Failed to filter filings: {str(e)}"}
