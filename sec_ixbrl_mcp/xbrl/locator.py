"""
Discovery of the primary iXBRL document of a filing.
"""

import logging
import re
from typing import Iterable, List, Optional, Set

from bs4 import BeautifulSoup

from ..core.client import EdgarClient, clean_accession, dashed_accession
from ..utils.exceptions import AccessDeniedError, APIError, DocumentNotFoundError

logger = logging.getLogger(__name__)

PRIMARY_FORM_PATTERN = re.compile(r"10-[QK]", re.IGNORECASE)
EXCLUDED_FILENAME_PARTS = ("ex", "exhibit", "table")
MAX_FILENAME_LENGTH = 50
CONVENTIONAL_FILENAMES = ["{accession}.htm", "{accession_clean}.htm", "primary_doc.htm", "document.htm"]


def _is_htm(filename: Optional[str]) -> bool:
    return bool(filename) and filename.lower().endswith(".htm")


def document_filename(href: str) -> str:
    """Filename part of an index link (handles ``/ix?doc=/Archives/...`` viewer links)."""
    if "?doc=" in href:
        href = href.split("?doc=", 1)[1]
    href = href.split("#", 1)[0].split("?", 1)[0]
    return href.rstrip("/").rsplit("/", 1)[-1]


def _htm_links(soup: BeautifulSoup):
    for anchor in soup.find_all("a", href=True):
        filename = document_filename(anchor["href"])
        if _is_htm(filename):
            yield anchor, filename


def _unique(filenames: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for filename in filenames:
        if filename not in seen:
            seen.add(filename)
            result.append(filename)
    return result


def find_primary_candidates(index_html: str) -> List[str]:
    """``.htm`` documents whose index row names a 10-K or 10-Q."""
    soup = BeautifulSoup(index_html, "html.parser")
    candidates = []
    for anchor, filename in _htm_links(soup):
        row = anchor.find_parent("tr") or anchor.parent
        if row is not None and PRIMARY_FORM_PATTERN.search(row.get_text(" ")):
            candidates.append(filename)
    return _unique(candidates)


def find_plausible_documents(index_html: str) -> List[str]:
    """Every ``.htm`` document in the index that does not look like an exhibit or table."""
    soup = BeautifulSoup(index_html, "html.parser")
    candidates = []
    for _, filename in _htm_links(soup):
        lowered = filename.lower()
        if any(part in lowered for part in EXCLUDED_FILENAME_PARTS):
            continue
        if len(filename) >= MAX_FILENAME_LENGTH:
            continue
        candidates.append(filename)
    return _unique(candidates)


class DocumentLocator:
    """Finds a reachable URL for the primary document of a filing.

    Strategies run in order and stop at the first URL that answers a HEAD
    request: the filing history's primary document, the caller's primary
    document, 10-K/10-Q rows of the filing index, any plausible ``.htm`` in the
    index, and finally conventional filenames.
    """

    def __init__(self, client: EdgarClient):
        self.client = client

    async def locate(self, accession_number: str, cik: str, primary_document: Optional[str] = None) -> str:
        tried: Set[str] = set()

        url = await self._from_filing_history(accession_number, cik, tried)
        if url:
            return url

        if _is_htm(primary_document):
            logger.debug("Trying caller-supplied primary document %s", primary_document)
            url = await self._verify(cik, accession_number, primary_document, tried)
            if url:
                return url

        index_html = await self._fetch_index(accession_number, cik)
        if index_html:
            url = await self._first_reachable(cik, accession_number, find_primary_candidates(index_html), tried)
            if url:
                return url
            url = await self._first_reachable(cik, accession_number, find_plausible_documents(index_html), tried)
            if url:
                return url

        names = {"accession": dashed_accession(accession_number), "accession_clean": clean_accession(accession_number)}
        conventional = [pattern.format(**names) for pattern in CONVENTIONAL_FILENAMES]
        url = await self._first_reachable(cik, accession_number, conventional, tried)
        if url:
            return url

        raise DocumentNotFoundError(accession_number)

    async def _verify(self, cik: str, accession_number: str, filename: str, tried: Set[str]) -> Optional[str]:
        if filename in tried:
            return None
        tried.add(filename)

        url = self.client.archive_url(cik, accession_number, filename)
        if await self.client.is_reachable(url):
            logger.debug("Found iXBRL document: %s", url)
            return url
        return None

    async def _first_reachable(
        self, cik: str, accession_number: str, filenames: List[str], tried: Set[str]
    ) -> Optional[str]:
        for filename in filenames:
            url = await self._verify(cik, accession_number, filename, tried)
            if url:
                return url
        return None

    async def _from_filing_history(self, accession_number: str, cik: str, tried: Set[str]) -> Optional[str]:
        try:
            submissions = await self.client.get_submissions(cik)
        except AccessDeniedError:
            raise
        except APIError as e:
            logger.debug("Filing history unavailable for CIK %s: %s", cik, e)
            return None

        recent = (submissions.get("filings") or {}).get("recent") or {}
        accessions = [clean_accession(a) for a in recent.get("accessionNumber") or []]
        wanted = clean_accession(accession_number)
        if wanted not in accessions:
            return None

        index = accessions.index(wanted)
        primary_documents = recent.get("primaryDocument") or []
        primary_document = primary_documents[index] if index < len(primary_documents) else None
        if not _is_htm(primary_document):
            return None

        logger.debug("Filing history names primary document %s", primary_document)
        return await self._verify(cik, accession_number, primary_document, tried)

    async def _fetch_index(self, accession_number: str, cik: str) -> Optional[str]:
        url = self.client.archive_url(cik, accession_number, f"{dashed_accession(accession_number)}-index.html")
        try:
            return await self.client.get_text(url)
        except AccessDeniedError:
            raise
        except APIError as e:
            logger.debug("Could not access filing index %s: %s", url, e)
            return None


async def locate_document(
    client: EdgarClient, accession_number: str, cik: str, primary_document: Optional[str] = None
) -> str:
    return await DocumentLocator(client).locate(accession_number, cik, primary_document)
