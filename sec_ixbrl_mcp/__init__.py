from sec_ixbrl_mcp.config import EdgarConfig, initialize_config
from sec_ixbrl_mcp.core import EdgarClient, CompanyInfo, FilingInfo
from sec_ixbrl_mcp.tools import CompanyTools, DimensionalTools, FactTableTools, FilingsTools, TimeSeriesTools
from sec_ixbrl_mcp.utils import TickerCache

__version__ = "1.0.0"

__all__ = [
    # Config
    "EdgarConfig",
    "initialize_config",

    # Core
    "EdgarClient",
    "CompanyInfo",
    "FilingInfo",

    # Tools
    "CompanyTools",
    "DimensionalTools",
    "FactTableTools",
    "FilingsTools",
    "TimeSeriesTools",

    # Utils
    "TickerCache",
]
