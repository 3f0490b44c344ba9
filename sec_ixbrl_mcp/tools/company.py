from typing import Any, Dict, Optional

import httpx
from secedgar.core.rest import get_company_concepts, get_company_facts, get_xbrl_frames

from ..config import EdgarConfig
from ..core.client import EdgarClient
from ..core.models import CompanyInfo, filings_from_submissions
from ..utils.exceptions import CompanyNotFoundError
from .types import ToolResponse


class CompanyTools:
    """Tools for company lookup and the SEC's company-level JSON APIs."""

    def __init__(self, config: EdgarConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport

    def _client(self) -> EdgarClient:
        return EdgarClient(self.config, transport=self.transport)

    async def get_company_cik(self, ticker: str) -> ToolResponse:
        """Get the CIK for a company based on its ticker symbol."""
        try:
            async with self._client() as client:
                cik = await client.get_cik_by_ticker(ticker)
            if cik:
                return {
                    "success": True,
                    "ticker": ticker.upper(),
                    "cik": cik,
                    "found": True,
                    "source": "SEC EDGAR Company Tickers",
                }
            return {
                "success": False,
                "ticker": ticker.upper(),
                "found": False,
                "error": f"CIK not found for ticker: {ticker}",
            }
        except Exception as e:
            return {"success": False, "error": f"Failed to lookup CIK for ticker '{ticker}': {str(e)}"}

    async def search_companies(self, query: str, limit: int = 50) -> ToolResponse:
        """Search for companies by ticker or name."""
        try:
            async with self._client() as client:
                companies = await client.search_companies(query, limit=0)
            return {
                "success": True,
                "query": query,
                "companies": companies[:limit] if limit and limit > 0 else companies,
                "total_found": len(companies),
                "source": "SEC EDGAR Company Tickers",
            }
        except Exception as e:
            return {"success": False, "error": f"Failed to search companies: {str(e)}"}

    async def get_company_submissions(self, identifier: str) -> ToolResponse:
        """Company header and recent filing history from the submissions API."""
        try:
            async with self._client() as client:
                cik = await client.resolve_cik(identifier)
                data = await client.get_submissions(cik)
                url = client.submissions_url(cik)

            company = CompanyInfo.from_submissions(data)
            filings = [filing.to_dict() for filing in filings_from_submissions(data)]
            return {
                "success": True,
                **company.to_dict(),
                "recent_filings": filings,
                "total_filings": len(filings),
                "source": "SEC EDGAR Submissions API",
                "api_url": url,
            }
        except CompanyNotFoundError as e:
            return {"success": False, "error": str(e)}
        except Exception as e:
            return {"success": False, "error": f"Failed to get company submissions: {str(e)}"}

    def get_company_facts(self, identifier: str) -> ToolResponse:
        """All XBRL facts the SEC aggregates for a company."""
        try:
            data = get_company_facts(lookups=[identifier], user_agent=self.config.user_agent)
            return {"success": True, "identifier": identifier, "facts": _single_lookup(data, identifier)}
        except Exception as e:
            return {"success": False, "error": f"Failed to get company facts: {str(e)}"}

    def get_company_concept(self, identifier: str, concept_name: str) -> ToolResponse:
        """Every reported value of one us-gaap concept for a company."""
        try:
            data = get_company_concepts(
                lookups=[identifier],
                concept_name=concept_name,
                user_agent=self.config.user_agent,
            )
            return {
                "success": True,
                "identifier": identifier,
                "concept_name": concept_name,
                "concept": _single_lookup(data, identifier),
            }
        except Exception as e:
            return {"success": False, "error": f"Failed to get company concept: {str(e)}"}

    def get_xbrl_frames(
        self,
        concept_name: str,
        year: int,
        quarter: Optional[int] = None,
        currency: str = "USD",
        instantaneous: bool = False,
    ) -> ToolResponse:
        """One concept across all companies for a calendar year or quarter."""
        try:
            data = get_xbrl_frames(
                user_agent=self.config.user_agent,
                concept_name=concept_name,
                year=year,
                quarter=quarter,
                currency=currency,
                instantaneous=instantaneous,
            )
            return {
                "success": True,
                "concept_name": concept_name,
                "year": year,
                "quarter": quarter,
                "frames": data,
            }
        except Exception as e:
            return {"success": False, "error": f"Failed to get XBRL frames: {str(e)}"}


def _single_lookup(data: Dict[str, Any], identifier: str) -> Any:
    """secedgar keys results by lookup; unwrap the one we asked for."""
    if isinstance(data, dict) and identifier in data:
        return data[identifier]
    return data
