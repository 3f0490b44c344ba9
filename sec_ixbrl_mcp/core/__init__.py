from .client import EdgarClient, normalize_cik, clean_accession, dashed_accession
from .models import CompanyInfo, FilingInfo, filings_from_submissions

__all__ = [
    "EdgarClient",
    "normalize_cik",
    "clean_accession",
    "dashed_accession",
    "CompanyInfo",
    "FilingInfo",
    "filings_from_submissions",
]
