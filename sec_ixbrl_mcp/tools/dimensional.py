import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from ..config import EdgarConfig
from ..core.client import EdgarClient
from ..core.models import filings_from_submissions
from ..utils.exceptions import FilingNotFoundError
from ..xbrl import SearchCriteria, ValueRange, get_dimensional_facts
from .filings import latest_filing
from .types import ToolResponse

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 50_000_000
DEFAULT_FORM_TYPE = "10-Q"


async def resolve_filing(
    client: EdgarClient, cik: str, accession_number: Optional[str], form_type: str = DEFAULT_FORM_TYPE
) -> Tuple[str, Optional[str]]:
    """Accession number and primary document to analyse.

    An explicit accession number is used as given; otherwise the newest filing
    of ``form_type`` in the company's filing history is picked.
    """
    if accession_number:
        return accession_number, None

    filing = latest_filing(filings_from_submissions(await client.get_submissions(cik)), form_type)
    if filing is None:
        raise FilingNotFoundError(f"Could not find recent {form_type} filing")

    logger.debug("Using %s filing %s filed %s", form_type, filing.accession_number, filing.filing_date)
    return filing.accession_number, filing.primary_document


def value_range_criteria(target_value: float, tolerance: float, filters: Optional[Dict[str, Any]] = None) -> SearchCriteria:
    """Criteria for ``target_value ± tolerance`` merged with concept and dimension filters."""
    criteria = SearchCriteria.from_dict(filters)
    if criteria.value_range is None:
        criteria.value_range = ValueRange(min=target_value - tolerance, max=target_value + tolerance)
    return criteria


class DimensionalTools:
    """Tools that search the facts embedded in a filing's iXBRL document."""

    def __init__(self, config: EdgarConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport

    def _client(self) -> EdgarClient:
        return EdgarClient(self.config, transport=self.transport)

    async def get_dimensional_facts(
        self,
        identifier: str,
        accession_number: Optional[str] = None,
        search_criteria: Optional[Dict[str, Any]] = None,
        primary_document: Optional[str] = None,
    ) -> ToolResponse:
        """Facts from one filing matching concept, value, value range and dimension filters."""
        try:
            criteria = SearchCriteria.from_dict(search_criteria)
            async with self._client() as client:
                cik = await client.resolve_cik(identifier)
                accession, latest_document = await resolve_filing(client, cik, accession_number)
                result = await get_dimensional_facts(
                    client, cik, accession, criteria, primary_document or latest_document
                )
            return {"success": True, **result, "total_matches": len(result["matching_facts"])}
        except Exception as e:
            return {"success": False, "error": f"Failed to get dimensional facts: {str(e)}"}

    async def search_facts_by_value(
        self,
        identifier: str,
        target_value: float,
        tolerance: float = DEFAULT_TOLERANCE,
        accession_number: Optional[str] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> ToolResponse:
        """Facts whose value lies within ``tolerance`` of ``target_value``.

        ``filters`` may carry ``concept`` and ``dimensions`` and a ``formType``
        choosing which kind of filing is searched when no accession number is given.
        """
        try:
            filters = dict(filters or {})
            form_type = filters.pop("formType", None) or filters.pop("form_type", None) or DEFAULT_FORM_TYPE
            criteria = value_range_criteria(target_value, tolerance, filters)

            async with self._client() as client:
                cik = await client.resolve_cik(identifier)
                accession, primary_document = await resolve_filing(client, cik, accession_number, form_type)
                result = await get_dimensional_facts(client, cik, accession, criteria, primary_document)

            return {
                "success": True,
                **result,
                "target_value": target_value,
                "tolerance": tolerance,
                "total_matches": len(result["matching_facts"]),
            }
        except Exception as e:
            return {"success": False, "error": f"Failed to search facts by value: {str(e)}"}
