"""
Context resolution: period, entity and dimensional members of each context block.
"""

from typing import Dict, Iterable

from .models import DURATION, INSTANT, ContextRecord, Period
from .patterns import (
    CONTEXT_VOCABULARIES,
    END_DATE_MARKER,
    EXPLICIT_MEMBER_MARKER,
    IDENTIFIER_MARKER,
    INSTANT_MARKER,
    START_DATE_MARKER,
    ContextVocabulary,
    parse_attributes,
)


def extract_period(block: str) -> Period:
    instant = INSTANT_MARKER.search(block)
    if instant:
        return Period(period_type=INSTANT, instant=instant.group(1))

    start = START_DATE_MARKER.search(block)
    end = END_DATE_MARKER.search(block)
    if start and end:
        return Period(period_type=DURATION, start_date=start.group(1), end_date=end.group(1))

    return Period()


def extract_entity(block: str):
    identifier = IDENTIFIER_MARKER.search(block)
    return identifier.group(1) if identifier else None


def extract_dimensions(block: str) -> Dict[str, str]:
    """Explicit members keyed by axis; a repeated axis keeps its last member."""
    dimensions = {}
    for match in EXPLICIT_MEMBER_MARKER.finditer(block):
        axis = parse_attributes(match.group("attrs")).get("dimension")
        if axis:
            dimensions[axis] = match.group("member")
    return dimensions


def extract_contexts(
    markup: str, vocabularies: Iterable[ContextVocabulary] = CONTEXT_VOCABULARIES
) -> Dict[str, ContextRecord]:
    """Context records keyed by id.

    A context id declared twice keeps the record found last; the collision is
    not treated as an error.
    """
    contexts: Dict[str, ContextRecord] = {}
    if not markup:
        return contexts

    for vocabulary in vocabularies:
        for match in vocabulary.regex.finditer(markup):
            context_id = parse_attributes(match.group("attrs")).get("id")
            if not context_id:
                continue
            block = match.group("body")
            contexts[context_id] = ContextRecord(
                id=context_id,
                period=extract_period(block),
                entity=extract_entity(block),
                dimensions=extract_dimensions(block),
            )
    return contexts
