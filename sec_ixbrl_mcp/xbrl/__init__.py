from .contexts import extract_contexts
from .extractor import DEFAULT_NAMESPACE, UNPARSABLE_NUMBER_DEFAULT, decode_number, extract_annotations
from .instance import download_and_parse, get_dimensional_facts, parse_document
from .locator import DocumentLocator, locate_document
from .matcher import find_matches
from .models import (
    ContextRecord,
    FactAnnotation,
    MatchedFact,
    ParsedDocument,
    Period,
    SearchCriteria,
    ValueRange,
)

__all__ = [
    "extract_contexts",
    "DEFAULT_NAMESPACE",
    "UNPARSABLE_NUMBER_DEFAULT",
    "decode_number",
    "extract_annotations",
    "download_and_parse",
    "get_dimensional_facts",
    "parse_document",
    "DocumentLocator",
    "locate_document",
    "find_matches",
    "ContextRecord",
    "FactAnnotation",
    "MatchedFact",
    "ParsedDocument",
    "Period",
    "SearchCriteria",
    "ValueRange",
]
