class SECEdgarMCPError(Exception):
    """Base exception for SEC iXBRL MCP."""
    pass


class CompanyNotFoundError(SECEdgarMCPError):
    """Raised when a ticker or CIK cannot be resolved."""
    pass


class FilingNotFoundError(SECEdgarMCPError):
    """Raised when a filing cannot be found."""
    pass


class DocumentNotFoundError(FilingNotFoundError):
    """Raised when no discovery strategy yields the primary iXBRL document of a filing."""

    def __init__(self, accession_number: str):
        self.accession_number = accession_number
        super().__init__(f"Could not find iXBRL document for accession {accession_number}")


class APIError(SECEdgarMCPError):
    """Raised when the SEC API returns an error or cannot be reached."""

    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)


class AccessDeniedError(APIError):
    """Raised when the SEC rejects a request as non-compliant (missing User-Agent, rate limited)."""
    pass


class ParseError(SECEdgarMCPError):
    """Raised when a filing document cannot be downloaded or parsed."""
    pass
