from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .exceptions import AccessDeniedError, APIError

if TYPE_CHECKING:
    from ..core.client import EdgarClient


class TickerCache:
    """Cache for the SEC company directory (ticker, CIK, name, exchange).

    Loaded lazily from ``company_tickers_exchange.json`` on first use and kept
    for the lifetime of the owning client.
    """

    def __init__(self, client: "EdgarClient"):
        self._client = client
        self._cache: Optional[Dict[str, int]] = None
        self._companies: List[Dict[str, Any]] = []

    async def get_cik(self, ticker: str) -> Optional[int]:
        """Get CIK for a ticker symbol."""
        if self._cache is None:
            await self._load_cache()

        return self._cache.get(ticker.strip().upper())

    async def search(self, query: str, limit: int = 50) -> List[Dict[str, Any]]:
        """Companies whose ticker or name contains ``query``; exact ticker hits first."""
        if self._cache is None:
            await self._load_cache()

        term = query.strip().lower()
        results = [
            company
            for company in self._companies
            if term in company["ticker"].lower() or term in company["name"].lower()
        ]
        # stable sort keeps directory order within each group
        results.sort(key=lambda company: company["ticker"].lower() != term)
        return results[:limit] if limit and limit > 0 else results

    async def _load_cache(self) -> None:
        """Load ticker to CIK mapping from SEC."""
        try:
            data = await self._client.get_json(self._client.config.tickers_url)
        except AccessDeniedError:
            raise
        except APIError as e:
            raise APIError(f"Failed to fetch ticker to CIK mapping: {str(e)}")

        self._cache = {}
        self._companies = []

        # Handle both dict and list formats
        data_items = data.get("data", data) if isinstance(data, dict) else data
        rows = data_items.values() if isinstance(data_items, dict) else data_items

        for company_data in rows:
            if isinstance(company_data, list) and len(company_data) >= 3:
                cik, name, ticker = company_data[0], company_data[1], company_data[2]
                exchange = company_data[3] if len(company_data) > 3 else None
            elif isinstance(company_data, dict) and "ticker" in company_data:
                # company_tickers.json layout
                cik = company_data.get("cik_str", company_data.get("cik"))
                name = company_data.get("title", company_data.get("name"))
                ticker = company_data.get("ticker")
                exchange = company_data.get("exchange")
            else:
                continue

            if not ticker or cik is None:
                continue
            self._cache.setdefault(ticker.upper(), cik)
            self._companies.append(
                {
                    "cik": str(cik).zfill(10),
                    "ticker": ticker.upper(),
                    "name": name or "",
                    "exchange": exchange or "N/A",
                }
            )
