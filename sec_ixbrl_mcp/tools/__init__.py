from .company import CompanyTools
from .dimensional import DimensionalTools
from .fact_table import FactTableTools
from .filings import FilingsTools
from .time_series import TimeSeriesTools
from .types import ToolResponse

__all__ = ["CompanyTools", "DimensionalTools", "FactTableTools", "FilingsTools", "TimeSeriesTools", "ToolResponse"]
