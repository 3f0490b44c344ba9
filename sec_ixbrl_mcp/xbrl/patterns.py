"""
Markup patterns for inline and legacy XBRL.

Extraction and matching only see ``AnnotationPattern`` and
``ContextVocabulary`` objects, so supporting another tag vocabulary means
adding an entry here.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern

from .models import FRACTION, NUMERIC, TEXT

_FLAGS = re.IGNORECASE | re.DOTALL

_ATTRIBUTE = re.compile(r"""([\w:.-]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_TAG = re.compile(r"<[^>]+>")


def parse_attributes(attrs: str) -> Dict[str, str]:
    """Attribute string to a dict keyed by lower-cased attribute name."""
    result = {}
    for match in _ATTRIBUTE.finditer(attrs or ""):
        value = match.group(2) if match.group(2) is not None else match.group(3)
        result[match.group(1).lower()] = value
    return result


def strip_tags(markup: str) -> str:
    return _TAG.sub("", markup)


def _element(tag: str) -> Pattern:
    # (?<!/)> skips self-closing (nil) elements, which have no body
    return re.compile(rf"<(?P<tag>{tag})\b(?P<attrs>[^>]*?)(?<!/)>(?P<body>.*?)</{tag}\s*>", _FLAGS)


@dataclass(frozen=True)
class AnnotationPattern:
    """How one kind of fact element is recognised in markup."""

    fact_type: str
    value_kind: str
    regex: Pattern
    default_unit: Optional[str] = None
    # legacy instance facts are named by their element, inline facts by a name attribute
    name_from_tag: bool = False
    required_attributes: tuple = ("contextref",)


@dataclass(frozen=True)
class ContextVocabulary:
    name: str
    regex: Pattern


NON_FRACTION = AnnotationPattern(
    fact_type="nonFraction",
    value_kind=NUMERIC,
    regex=_element("ix:nonFraction"),
    default_unit="USD",
)

RATIO_FRACTION = AnnotationPattern(
    fact_type="fraction",
    value_kind=FRACTION,
    regex=_element("ix:fraction"),
    default_unit="pure",
)

NON_NUMERIC = AnnotationPattern(
    fact_type="nonNumeric",
    value_kind=TEXT,
    regex=_element("ix:nonNumeric"),
)

LEGACY_FACT = AnnotationPattern(
    fact_type="legacy",
    value_kind=NUMERIC,
    regex=re.compile(
        r"<(?P<tag>(?!ix:)(?:[\w-]+:)?[\w-]+)(?P<attrs>\s[^>]*?\bcontextRef\s*=[^>]*?)(?<!/)>(?P<body>[^<]*)</(?P=tag)\s*>",
        re.DOTALL,
    ),
    name_from_tag=True,
    required_attributes=("contextref", "decimals"),
)

INLINE_PATTERNS: List[AnnotationPattern] = [NON_FRACTION, RATIO_FRACTION, NON_NUMERIC]
LEGACY_PATTERNS: List[AnnotationPattern] = [LEGACY_FACT]

INLINE_CONTEXT = ContextVocabulary(
    name="ix",
    regex=re.compile(r"<ix:context\b(?P<attrs>[^>]*)>(?P<body>.*?)</ix:context\s*>", _FLAGS),
)

LEGACY_CONTEXT = ContextVocabulary(
    name="xbrli",
    regex=re.compile(r"<xbrli:context\b(?P<attrs>[^>]*)>(?P<body>.*?)</xbrli:context\s*>", _FLAGS),
)

# Scanned in order; a later vocabulary overwrites earlier records with the same id
CONTEXT_VOCABULARIES: List[ContextVocabulary] = [INLINE_CONTEXT, LEGACY_CONTEXT]

INSTANT_MARKER = re.compile(r"<(?:xbrli:)?instant>\s*([^<]*?)\s*</(?:xbrli:)?instant>", re.IGNORECASE)
START_DATE_MARKER = re.compile(r"<(?:xbrli:)?startDate>\s*([^<]*?)\s*</(?:xbrli:)?startDate>", re.IGNORECASE)
END_DATE_MARKER = re.compile(r"<(?:xbrli:)?endDate>\s*([^<]*?)\s*</(?:xbrli:)?endDate>", re.IGNORECASE)
IDENTIFIER_MARKER = re.compile(r"<(?:xbrli:)?identifier\b[^>]*>\s*([^<]*?)\s*</(?:xbrli:)?identifier>", re.IGNORECASE)
EXPLICIT_MEMBER_MARKER = re.compile(
    r"<xbrldi:explicitMember\b(?P<attrs>[^>]*)>\s*(?P<member>[^<]*?)\s*</xbrldi:explicitMember>",
    re.IGNORECASE,
)

INLINE_MARKER = re.compile(r"<ix:(?:nonFraction|nonNumeric|fraction|header)\b", re.IGNORECASE)
INSTANCE_ROOT_MARKER = re.compile(r"<(?:xbrli:)?xbrl[\s>]", re.IGNORECASE)
