"""
Download a filing document and turn it into facts and contexts.
"""

import logging
from typing import Any, Dict, Optional

from ..core.client import EdgarClient
from ..utils.exceptions import AccessDeniedError, APIError, ParseError
from .contexts import extract_contexts
from .extractor import extract_annotations, extract_legacy_annotations
from .locator import locate_document
from .matcher import find_matches
from .models import ParsedDocument, SearchCriteria
from .patterns import INLINE_MARKER, INSTANCE_ROOT_MARKER

logger = logging.getLogger(__name__)

SOURCE_NAME = "SEC EDGAR XBRL Instance Document"


def is_standalone_instance(markup: str) -> bool:
    """True for a plain XBRL instance (an ``xbrl`` root and no inline ``ix:`` tags)."""
    return bool(markup) and not INLINE_MARKER.search(markup) and bool(INSTANCE_ROOT_MARKER.search(markup))


def parse_document(markup: str, source_url: Optional[str] = None) -> ParsedDocument:
    """Extract facts and contexts from inline XBRL or a standalone XBRL instance."""
    if is_standalone_instance(markup):
        facts = extract_legacy_annotations(markup)
        document_type = "XBRL"
    else:
        facts = extract_annotations(markup)
        document_type = "iXBRL"

    return ParsedDocument(
        facts=facts,
        contexts=extract_contexts(markup),
        source_url=source_url,
        document_type=document_type,
    )


async def download_and_parse(client: EdgarClient, url: str) -> ParsedDocument:
    """Fetch ``url`` with the download timeout and parse it.

    Raises:
        AccessDeniedError: the SEC rejected the request.
        ParseError: any other failure while fetching or parsing the document.
    """
    try:
        markup = await client.get_text(url, timeout=client.config.download_timeout)
    except AccessDeniedError:
        raise
    except APIError as e:
        raise ParseError(f"Failed to parse iXBRL instance: {str(e)}")

    try:
        document = parse_document(markup, source_url=url)
    except (ArithmeticError, ValueError) as e:
        raise ParseError(f"Failed to parse iXBRL instance: {str(e) or type(e).__name__}")
    logger.info(
        "Parsed %s document %s: %d facts, %d contexts",
        document.document_type,
        url,
        len(document.facts),
        len(document.contexts),
    )
    return document


async def get_dimensional_facts(
    client: EdgarClient,
    identifier: str,
    accession_number: str,
    criteria: Optional[SearchCriteria] = None,
    primary_document: Optional[str] = None,
) -> Dict[str, Any]:
    """Locate, download and parse a filing document, then return the facts matching ``criteria``."""
    criteria = criteria or SearchCriteria()
    cik = await client.resolve_cik(identifier)

    url = await locate_document(client, accession_number, cik, primary_document)
    document = await download_and_parse(client, url)
    matching = find_matches(document.facts, document.contexts, criteria)

    return {
        "cik": cik,
        "accession_number": accession_number,
        "document_url": url,
        "document_type": document.document_type,
        "criteria": criteria.to_dict(),
        "matching_facts": [fact.to_dict() for fact in matching],
        "total_annotations": len(document.facts),
        "total_contexts": len(document.contexts),
        "source": SOURCE_NAME,
    }
