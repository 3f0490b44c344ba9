from .cache import TickerCache
from .exceptions import (
    SECEdgarMCPError,
    CompanyNotFoundError,
    FilingNotFoundError,
    DocumentNotFoundError,
    APIError,
    AccessDeniedError,
    ParseError,
)

__all__ = [
    "TickerCache",
    "SECEdgarMCPError",
    "CompanyNotFoundError",
    "FilingNotFoundError",
    "DocumentNotFoundError",
    "APIError",
    "AccessDeniedError",
    "ParseError",
]
