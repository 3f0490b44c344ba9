import os
from dataclasses import dataclass

from .utils.constants import (
    ARCHIVES_BASE_URL,
    DATA_BASE_URL,
    DOWNLOAD_TIMEOUT,
    REACHABILITY_TIMEOUT,
    REQUEST_TIMEOUT,
    TICKERS_URL,
)


@dataclass(frozen=True)
class EdgarConfig:
    """Settings shared by every component that talks to SEC EDGAR."""

    user_agent: str
    data_base_url: str = DATA_BASE_URL
    archives_base_url: str = ARCHIVES_BASE_URL
    tickers_url: str = TICKERS_URL
    request_timeout: float = REQUEST_TIMEOUT
    reachability_timeout: float = REACHABILITY_TIMEOUT
    download_timeout: float = DOWNLOAD_TIMEOUT
    log_level: str = "INFO"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got '{raw}'")


def initialize_config() -> EdgarConfig:
    """Initialize the SEC EDGAR configuration from the environment"""
    sec_edgar_user_agent = os.getenv("SEC_EDGAR_USER_AGENT")
    if not sec_edgar_user_agent:
        raise ValueError("SEC_EDGAR_USER_AGENT environment variable is not set.")

    return EdgarConfig(
        user_agent=sec_edgar_user_agent,
        request_timeout=_float_env("SEC_EDGAR_REQUEST_TIMEOUT", REQUEST_TIMEOUT),
        reachability_timeout=_float_env("SEC_EDGAR_REACHABILITY_TIMEOUT", REACHABILITY_TIMEOUT),
        download_timeout=_float_env("SEC_EDGAR_DOWNLOAD_TIMEOUT", DOWNLOAD_TIMEOUT),
        log_level=os.getenv("SEC_EDGAR_LOG_LEVEL", "INFO").upper(),
    )
