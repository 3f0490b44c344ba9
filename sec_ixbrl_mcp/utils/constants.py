DATA_BASE_URL = "https://data.sec.gov"
ARCHIVES_BASE_URL = "https://www.sec.gov/Archives/edgar/data"
TICKERS_URL = "https://www.sec.gov/files/company_tickers_exchange.json"

REQUEST_TIMEOUT = 30.0
REACHABILITY_TIMEOUT = 10.0
DOWNLOAD_TIMEOUT = 60.0

# Status codes the SEC uses to reject non-compliant clients
ACCESS_DENIED_STATUS_CODES = {403, 429}

ACCESS_DENIED_MESSAGE = (
    "SEC API access denied. Please ensure SEC_EDGAR_USER_AGENT contains a valid contact "
    "(e.g. 'Company Name admin@company.com') and that you are not exceeding rate limits."
)

PRIMARY_FORM_TYPES = ["10-Q", "10-K"]
