"""
Data model for inline XBRL facts, their contexts and search criteria.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

FactValue = Union[float, str]

# Value kinds
NUMERIC = "numeric"
FRACTION = "fraction"
TEXT = "text"

# Period kinds
INSTANT = "instant"
DURATION = "duration"
UNKNOWN = "unknown"


def format_value(value: Any) -> str:
    """String form used for exact-value comparison.

    Integral floats render without a trailing ``.0`` so a decoded
    ``638000000.0`` compares equal to a caller-supplied ``638000000``.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_numeric(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class FactAnnotation:
    """One fact embedded in a filing document."""

    namespace: str
    concept: str
    full_name: str
    value: FactValue
    raw_value: str
    context_ref: str
    fact_type: str
    value_kind: str
    unit_ref: Optional[str] = None
    decimals: Optional[str] = None
    scale: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "namespace": self.namespace,
            "concept": self.concept,
            "full_name": self.full_name,
            "value": self.value,
            "raw_value": self.raw_value,
            "value_kind": self.value_kind,
            "context_ref": self.context_ref,
            "unit_ref": self.unit_ref,
            "decimals": self.decimals,
            "scale": self.scale,
            "fact_type": self.fact_type,
        }


@dataclass
class Period:
    period_type: str = UNKNOWN
    instant: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @property
    def start(self) -> Optional[str]:
        return self.start_date or self.instant

    @property
    def end(self) -> Optional[str]:
        return self.end_date or self.instant

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.period_type}
        if self.period_type == INSTANT:
            result["instant"] = self.instant
        elif self.period_type == DURATION:
            result["start_date"] = self.start_date
            result["end_date"] = self.end_date
        return result


@dataclass
class ContextRecord:
    """The period, entity and dimensional breakdown a fact is reported against."""

    id: str
    period: Period = field(default_factory=Period)
    entity: Optional[str] = None
    dimensions: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "period": self.period.to_dict(),
            "entity": self.entity,
            "dimensions": dict(self.dimensions),
        }


@dataclass
class ValueRange:
    """Inclusive numeric range; a missing bound is open."""

    min: Optional[float] = None
    max: Optional[float] = None

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max}


@dataclass
class SearchCriteria:
    """Caller filter for facts. Every field is optional; empty criteria match everything."""

    concept: Optional[str] = None
    value: Optional[Any] = None
    value_range: Optional[ValueRange] = None
    dimensions: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SearchCriteria":
        """Build criteria from tool input (accepts ``valueRange`` or ``value_range``)."""
        data = data or {}
        raw_range = data.get("valueRange", data.get("value_range"))
        value_range = None
        if isinstance(raw_range, ValueRange):
            value_range = raw_range
        elif isinstance(raw_range, dict):
            low, high = raw_range.get("min"), raw_range.get("max")
            value_range = ValueRange(
                min=float(low) if low is not None else None,
                max=float(high) if high is not None else None,
            )

        value = data.get("value")
        if value == "":
            value = None

        return cls(
            concept=data.get("concept") or None,
            value=value,
            value_range=value_range,
            dimensions={str(axis): str(member) for axis, member in (data.get("dimensions") or {}).items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "concept": self.concept,
            "value": self.value,
            "value_range": self.value_range.to_dict() if self.value_range else None,
            "dimensions": dict(self.dimensions),
        }


@dataclass
class MatchedFact:
    """A fact joined with the context it references."""

    annotation: FactAnnotation
    context: ContextRecord

    @property
    def concept(self) -> str:
        return self.annotation.concept

    @property
    def namespace(self) -> str:
        return self.annotation.namespace

    @property
    def value(self) -> FactValue:
        return self.annotation.value

    @property
    def period(self) -> Period:
        return self.context.period

    @property
    def dimensions(self) -> Dict[str, str]:
        return self.context.dimensions

    def to_dict(self) -> Dict[str, Any]:
        result = self.annotation.to_dict()
        result.update(
            {
                "context": self.context.to_dict(),
                "period": self.period.to_dict(),
                "period_type": self.period.period_type,
                "period_start": self.period.start,
                "period_end": self.period.end,
                "entity": self.context.entity,
                "dimensions": dict(self.dimensions),
            }
        )
        return result


@dataclass
class ParsedDocument:
    facts: List[FactAnnotation]
    contexts: Dict[str, ContextRecord]
    source_url: Optional[str] = None
    document_type: str = "iXBRL"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "facts": [fact.to_dict() for fact in self.facts],
            "contexts": {context_id: context.to_dict() for context_id, context in self.contexts.items()},
            "source_url": self.source_url,
            "document_type": self.document_type,
        }
