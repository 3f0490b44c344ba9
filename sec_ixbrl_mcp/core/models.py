from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Dict, Any


def _parse_date(value: Any) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


@dataclass
class CompanyInfo:
    """Company header fields from the submissions API."""

    cik: str
    name: str
    tickers: List[str] = field(default_factory=list)
    exchanges: List[str] = field(default_factory=list)
    entity_type: Optional[str] = None
    sic: Optional[str] = None
    sic_description: Optional[str] = None
    fiscal_year_end: Optional[str] = None
    state_of_incorporation: Optional[str] = None

    @classmethod
    def from_submissions(cls, data: Dict[str, Any]) -> "CompanyInfo":
        return cls(
            cik=str(data.get("cik", "")).zfill(10),
            name=data.get("name", ""),
            tickers=data.get("tickers") or [],
            exchanges=data.get("exchanges") or [],
            entity_type=data.get("entityType"),
            sic=data.get("sic"),
            sic_description=data.get("sicDescription"),
            fiscal_year_end=data.get("fiscalYearEnd"),
            state_of_incorporation=data.get("stateOfIncorporation"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "cik": self.cik,
            "name": self.name,
            "tickers": self.tickers,
            "exchanges": self.exchanges,
            "entity_type": self.entity_type,
            "sic": self.sic,
            "sic_description": self.sic_description,
            "fiscal_year_end": self.fiscal_year_end,
            "state_of_incorporation": self.state_of_incorporation,
        }


@dataclass
class FilingInfo:
    """One row of a company's filing history."""

    accession_number: str
    filing_date: Optional[date]
    form_type: str
    report_date: Optional[date] = None
    primary_document: Optional[str] = None
    primary_doc_description: Optional[str] = None
    file_number: Optional[str] = None
    items: Optional[str] = None
    size: int = 0
    is_xbrl: bool = False
    is_inline_xbrl: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "accession_number": self.accession_number,
            "filing_date": self.filing_date.isoformat() if self.filing_date else None,
            "form_type": self.form_type,
            "report_date": self.report_date.isoformat() if self.report_date else None,
            "primary_document": self.primary_document,
            "primary_doc_description": self.primary_doc_description,
            "file_number": self.file_number,
            "items": self.items,
            "size": self.size,
            "is_xbrl": self.is_xbrl,
            "is_inline_xbrl": self.is_inline_xbrl,
        }


def filings_from_submissions(data: Dict[str, Any]) -> List[FilingInfo]:
    """Unzip the parallel arrays of ``filings.recent`` into FilingInfo rows."""
    recent = (data.get("filings") or {}).get("recent") or {}
    accessions = recent.get("accessionNumber") or []

    def column(name: str, index: int, default: Any = None) -> Any:
        values = recent.get(name) or []
        return values[index] if index < len(values) else default

    filings = []
    for i, accession_number in enumerate(accessions):
        filings.append(
            FilingInfo(
                accession_number=accession_number,
                filing_date=_parse_date(column("filingDate", i)),
                form_type=column("form", i, ""),
                report_date=_parse_date(column("reportDate", i)),
                primary_document=column("primaryDocument", i) or None,
                primary_doc_description=column("primaryDocDescription", i) or None,
                file_number=column("fileNumber", i) or None,
                items=column("items", i) or None,
                size=column("size", i, 0) or 0,
                is_xbrl=bool(column("isXBRL", i, 0)),
                is_inline_xbrl=bool(column("isInlineXBRL", i, 0)),
            )
        )
    return filings
