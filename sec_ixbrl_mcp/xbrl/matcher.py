"""
Join facts to their contexts and filter them by search criteria.

Dimensional filters are case-insensitive *substring* matches on the member
name. One member name can contain another: ``"usmember"`` matches both
``us-gaap:UsMember`` and ``us-gaap:NonUsMember``. Callers that need to tell
those apart should pass the distinguishing part (``"nonus"``) or the full
member name.
"""

from typing import Dict, Iterable, List, Optional

from .models import ContextRecord, FactAnnotation, MatchedFact, SearchCriteria, format_value, is_numeric


def _concept_matches(fact: FactAnnotation, concept: str) -> bool:
    return concept.lower() in fact.concept.lower()


def _value_matches(fact: FactAnnotation, value) -> bool:
    return format_value(fact.value) == format_value(value)


def _range_matches(fact: FactAnnotation, criteria: SearchCriteria) -> bool:
    return is_numeric(fact.value) and criteria.value_range.contains(fact.value)


def _dimensions_match(context: ContextRecord, dimensions: Dict[str, str]) -> bool:
    for axis, wanted in dimensions.items():
        member = context.dimensions.get(axis)
        if not member or wanted.lower() not in member.lower():
            return False
    return True


def matches(fact: FactAnnotation, context: Optional[ContextRecord], criteria: SearchCriteria) -> bool:
    """True when every check present in ``criteria`` passes for ``fact``."""
    if criteria.concept and not _concept_matches(fact, criteria.concept):
        return False
    if criteria.value is not None and not _value_matches(fact, criteria.value):
        return False
    if criteria.value_range is not None and not _range_matches(fact, criteria):
        return False
    if context is None:
        return False
    if criteria.dimensions and not _dimensions_match(context, criteria.dimensions):
        return False
    return True


def find_matches(
    annotations: Iterable[FactAnnotation],
    contexts: Dict[str, ContextRecord],
    criteria: Optional[SearchCriteria] = None,
) -> List[MatchedFact]:
    """Facts matching ``criteria``, joined with their context, in input order.

    Facts whose context reference is not in ``contexts`` are dropped.
    """
    criteria = criteria or SearchCriteria()
    return [
        MatchedFact(annotation=fact, context=contexts[fact.context_ref])
        for fact in annotations
        if matches(fact, contexts.get(fact.context_ref), criteria)
    ]
