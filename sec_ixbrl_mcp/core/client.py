import logging
from typing import Any, Dict, Optional

import httpx

from ..config import EdgarConfig
from ..utils.cache import TickerCache
from ..utils.constants import ACCESS_DENIED_MESSAGE, ACCESS_DENIED_STATUS_CODES
from ..utils.exceptions import AccessDeniedError, APIError, CompanyNotFoundError

logger = logging.getLogger(__name__)


def normalize_cik(cik: Any) -> str:
    """Zero-pad a CIK to the 10 digits used by the data.sec.gov APIs."""
    return str(int(str(cik).strip())).zfill(10)


def archive_cik(cik: Any) -> str:
    """CIK as it appears in Archives paths (no leading zeros)."""
    return str(int(str(cik).strip()))


def clean_accession(accession_number: str) -> str:
    """Accession number without dashes, as used in Archives paths."""
    return accession_number.strip().replace("-", "")


def dashed_accession(accession_number: str) -> str:
    """Accession number in ``0000200406-25-000119`` form."""
    digits = clean_accession(accession_number)
    if len(digits) == 18 and digits.isdigit():
        return f"{digits[:10]}-{digits[10:12]}-{digits[12:]}"
    return accession_number.strip()


class EdgarClient:
    """Async HTTP access to SEC EDGAR with the User-Agent the SEC requires.

    Use as an async context manager so the underlying connection pool is
    closed when the call that opened it is done::

        async with EdgarClient(config) as client:
            data = await client.get_submissions("320193")

    ``transport`` replaces the network layer (e.g. ``httpx.MockTransport``).
    """

    def __init__(self, config: EdgarConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._http = httpx.AsyncClient(
            headers=self._build_headers(),
            timeout=config.request_timeout,
            follow_redirects=True,
            transport=transport,
        )
        self._ticker_cache = TickerCache(self)

    def _build_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.config.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,application/json;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }

    async def __aenter__(self) -> "EdgarClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, timeout: Optional[float] = None) -> httpx.Response:
        """Issue one request and map failures onto the package exceptions."""
        logger.debug("%s %s", method, url)
        try:
            response = await self._http.request(
                method, url, timeout=timeout if timeout is not None else self.config.request_timeout
            )
        except httpx.TimeoutException as e:
            raise APIError(f"Request to {url} timed out: {str(e) or type(e).__name__}")
        except httpx.HTTPError as e:
            raise APIError(f"Request to {url} failed: {str(e) or type(e).__name__}")

        if response.status_code in ACCESS_DENIED_STATUS_CODES:
            raise AccessDeniedError(ACCESS_DENIED_MESSAGE, status_code=response.status_code)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError:
            raise APIError(
                f"SEC EDGAR request failed with HTTP {response.status_code}: {url}",
                status_code=response.status_code,
            )
        return response

    async def get_json(self, url: str, timeout: Optional[float] = None) -> Any:
        response = await self._request("GET", url, timeout)
        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON returned by {url}: {str(e)}")

    async def get_text(self, url: str, timeout: Optional[float] = None) -> str:
        response = await self._request("GET", url, timeout)
        return response.text

    async def is_reachable(self, url: str) -> bool:
        """HEAD check with the short reachability timeout.

        Access-denied responses are raised rather than reported as unreachable,
        since every following request would be rejected the same way.
        """
        try:
            await self._request("HEAD", url, timeout=self.config.reachability_timeout)
            return True
        except AccessDeniedError:
            raise
        except APIError as e:
            logger.debug("Not reachable: %s (%s)", url, e)
            return False

    def submissions_url(self, cik: Any) -> str:
        return f"{self.config.data_base_url}/submissions/CIK{normalize_cik(cik)}.json"

    def archive_url(self, cik: Any, accession_number: str, filename: str = "") -> str:
        base = f"{self.config.archives_base_url}/{archive_cik(cik)}/{clean_accession(accession_number)}"
        return f"{base}/{filename}" if filename else base

    async def get_submissions(self, cik: Any) -> Dict[str, Any]:
        """Filing history JSON (parallel arrays under ``filings.recent``)."""
        return await self.get_json(self.submissions_url(cik))

    async def get_company_facts(self, cik: Any) -> Dict[str, Any]:
        return await self.get_json(f"{self.config.data_base_url}/api/xbrl/companyfacts/CIK{normalize_cik(cik)}.json")

    async def get_cik_by_ticker(self, ticker: str) -> Optional[str]:
        """Get CIK by ticker symbol."""
        cik = await self._ticker_cache.get_cik(ticker)
        if cik is None:
            return None
        return normalize_cik(cik)

    async def resolve_cik(self, identifier: str) -> str:
        """Turn a CIK or ticker into a 10-digit CIK."""
        identifier = str(identifier).strip()
        if identifier.isdigit():
            return normalize_cik(identifier)

        cik = await self.get_cik_by_ticker(identifier)
        if not cik:
            raise CompanyNotFoundError(f"Could not find CIK for ticker: {identifier}")
        return cik

    async def search_companies(self, query: str, limit: int = 50) -> list:
        return await self._ticker_cache.search(query, limit)
