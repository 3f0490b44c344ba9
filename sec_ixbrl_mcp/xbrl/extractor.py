"""
Fact extraction from inline XBRL (and legacy XBRL instance) markup.
"""

import html
import re
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional, Tuple

from .models import FRACTION, TEXT, FactAnnotation, FactValue
from .patterns import INLINE_PATTERNS, LEGACY_PATTERNS, AnnotationPattern, parse_attributes, strip_tags

# Namespace assigned to concept names that carry no prefix
DEFAULT_NAMESPACE = "default"

# Numeric text that cannot be parsed decodes to this instead of failing
UNPARSABLE_NUMBER_DEFAULT = Decimal(0)

_LEADING_NUMBER = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")


def parse_concept_name(name: str) -> Tuple[str, str]:
    """Split ``prefix:LocalName`` into ``(prefix, LocalName)``."""
    if ":" not in name:
        return DEFAULT_NAMESPACE, name
    namespace, local_name = name.split(":", 1)
    return namespace, local_name


def parse_scale(scale: Optional[str]) -> Optional[int]:
    if scale is None or not str(scale).strip():
        return None
    try:
        return int(str(scale).strip())
    except ValueError:
        return None


def decode_number(text: str, scale: Optional[str] = None) -> float:
    """Strip thousands separators, parse the leading decimal number and apply ``10 ** scale``.

    >>> decode_number("638", "6")
    638000000.0
    >>> decode_number("1,234.5")
    1234.5
    >>> decode_number("n/a")
    0.0
    """
    stripped = (text or "").replace(",", "")
    match = _LEADING_NUMBER.match(stripped)
    try:
        number = Decimal(match.group(0).strip()) if match else UNPARSABLE_NUMBER_DEFAULT
    except InvalidOperation:
        number = UNPARSABLE_NUMBER_DEFAULT

    exponent = parse_scale(scale)
    if exponent is not None:
        try:
            number = number.scaleb(exponent)
        except ArithmeticError:
            # scale beyond the decimal context limits
            number = UNPARSABLE_NUMBER_DEFAULT
    return float(number)


def _build_annotation(pattern: AnnotationPattern, match: "re.Match") -> Optional[FactAnnotation]:
    attrs = parse_attributes(match.group("attrs"))
    if any(not attrs.get(required) for required in pattern.required_attributes):
        return None

    name = match.group("tag") if pattern.name_from_tag else attrs.get("name")
    if not name:
        return None
    namespace, concept = parse_concept_name(name)

    raw_value = html.unescape(strip_tags(match.group("body")))
    scale = attrs.get("scale")

    value: FactValue
    if pattern.value_kind == TEXT:
        value = raw_value.strip()
        scale = None
    elif pattern.value_kind == FRACTION:
        value = decode_number(raw_value)
        scale = None
    else:
        value = decode_number(raw_value, scale)

    return FactAnnotation(
        namespace=namespace,
        concept=concept,
        full_name=name,
        value=value,
        raw_value=raw_value,
        context_ref=attrs["contextref"],
        fact_type=pattern.fact_type,
        value_kind=pattern.value_kind,
        unit_ref=attrs.get("unitref") or pattern.default_unit,
        decimals=attrs.get("decimals") if pattern.value_kind != TEXT else None,
        scale=scale,
    )


def extract_annotations(markup: str, patterns: Iterable[AnnotationPattern] = INLINE_PATTERNS) -> List[FactAnnotation]:
    """All facts in ``markup``, pattern by pattern, each in document order."""
    if not markup:
        return []

    facts = []
    for pattern in patterns:
        for match in pattern.regex.finditer(markup):
            fact = _build_annotation(pattern, match)
            if fact is not None:
                facts.append(fact)
    return facts


def extract_legacy_annotations(markup: str) -> List[FactAnnotation]:
    """Facts from a standalone XBRL instance document."""
    return extract_annotations(markup, LEGACY_PATTERNS)
