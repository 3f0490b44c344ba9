import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

import httpx
from mcp.server.fastmcp import FastMCP

from .config import EdgarConfig, initialize_config
from .tools import CompanyTools, DimensionalTools, FactTableTools, FilingsTools, TimeSeriesTools
from .tools.dimensional import DEFAULT_TOLERANCE

logger = logging.getLogger(__name__)


def create_server(config: EdgarConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> FastMCP:
    """Build the MCP server with every tool bound to ``config``."""
    mcp = FastMCP("SEC iXBRL MCP", dependencies=["secedgar", "httpx", "beautifulsoup4"])

    company_tools = CompanyTools(config, transport)
    filings_tools = FilingsTools()
    dimensional_tools = DimensionalTools(config, transport)
    fact_table_tools = FactTableTools(config, transport)
    time_series_tools = TimeSeriesTools(config, transport)

    @mcp.tool("get_company_cik")
    async def get_company_cik_tool(ticker: str) -> Dict[str, Any]:
        """
        Get the CIK (Central Index Key) for a company based on its ticker symbol.

        Parameters:
            ticker (str): The ticker symbol of the company (e.g., "AAPL", "JNJ").

        Returns:
            Dict[str, Any]: The 10-digit CIK or an error message.
        """
        return await company_tools.get_company_cik(ticker)

    @mcp.tool("search_companies")
    async def search_companies_tool(query: str, limit: int = 50) -> Dict[str, Any]:
        """
        Search for companies by name or ticker symbol.

        Parameters:
            query (str): Company name or ticker fragment (e.g., "Apple", "AAPL").
            limit (int): Maximum number of companies to return (default: 50).

        Returns:
            Dict[str, Any]: Matching companies with CIK, ticker, name and exchange; exact ticker matches first.
        """
        return await company_tools.search_companies(query, limit)

    @mcp.tool("get_company_submissions")
    async def get_company_submissions_tool(identifier: str) -> Dict[str, Any]:
        """
        Retrieve a company's details and filing history.

        Parameters:
            identifier (str): Company CIK or ticker symbol.

        Returns:
            Dict[str, Any]: Company fields and recent filings (accession number, form type, dates, primary document).
        """
        return await company_tools.get_company_submissions(identifier)

    @mcp.tool("get_company_facts")
    def get_company_facts_tool(identifier: str) -> Dict[str, Any]:
        """
        Retrieve all XBRL facts the SEC aggregates for a company.

        Parameters:
            identifier (str): Company CIK or ticker symbol.

        Returns:
            Dict[str, Any]: Facts keyed by taxonomy and concept.
        """
        return company_tools.get_company_facts(identifier)

    @mcp.tool("get_company_concept")
    def get_company_concept_tool(identifier: str, concept_name: str) -> Dict[str, Any]:
        """
        Retrieve every reported value of a financial concept for a company.

        Parameters:
            identifier (str): Company CIK or ticker symbol.
            concept_name (str): The us-gaap concept (e.g., "AccountsPayableCurrent").

        Returns:
            Dict[str, Any]: Concept values by unit.
        """
        return company_tools.get_company_concept(identifier, concept_name)

    @mcp.tool("get_xbrl_frames")
    def get_xbrl_frames_tool(
        concept_name: str,
        year: int,
        quarter: Optional[int] = None,
        currency: str = "USD",
        instantaneous: bool = False,
    ) -> Dict[str, Any]:
        """
        Retrieve XBRL 'frames' data for a concept across companies for a calendar period.

        Parameters:
            concept_name (str): The financial concept to query (e.g., "Assets").
            year (int): Calendar year.
            quarter (Optional[int]): Quarter 1-4, or None for the whole year.
            currency (str): Reporting currency (default: "USD").
            instantaneous (bool): Instant values (True) or duration values (False).

        Returns:
            Dict[str, Any]: Frame data for the concept and period.
        """
        return company_tools.get_xbrl_frames(concept_name, year, quarter, currency, instantaneous)

    @mcp.tool("filter_filings")
    def filter_filings_tool(
        filings: List[Dict[str, Any]],
        form_type: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Filter filings (typically from get_company_submissions) by form type and date range.

        Parameters:
            filings (List[Dict]): Filing records to filter.
            form_type (Optional[str]): Form type substring, case-insensitive (e.g., "10-K").
            start_date (Optional[str]): Earliest filing date, YYYY-MM-DD, inclusive.
            end_date (Optional[str]): Latest filing date, YYYY-MM-DD, inclusive.
            limit (Optional[int]): Maximum number of filings to return.

        Returns:
            Dict[str, Any]: The filtered filings.
        """
        return filings_tools.filter_filings(filings, form_type, start_date, end_date, limit)

    @mcp.tool("get_dimensional_facts")
    async def get_dimensional_facts_tool(
        identifier: str,
        accession_number: Optional[str] = None,
        search_criteria: Optional[Dict[str, Any]] = None,
        primary_document: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get XBRL facts with their dimensional context (geography, segment, product line) from a filing.

        Parameters:
            identifier (str): Company CIK or ticker symbol.
            accession_number (Optional[str]): Filing accession number (default: most recent 10-Q).
            search_criteria (Optional[Dict]): Any of "concept" (substring of the concept name),
                "value" (exact value), "valueRange" ({"min", "max"}) and "dimensions"
                ({axis: member substring}, e.g. {"srt:StatementGeographicalAxis": "NonUs"}).
            primary_document (Optional[str]): Primary document filename, if known.

        Returns:
            Dict[str, Any]: Matching facts with period, entity and dimensions.
        """
        return await dimensional_tools.get_dimensional_facts(
            identifier, accession_number, search_criteria, primary_document
        )

    @mcp.tool("search_facts_by_value")
    async def search_facts_by_value_tool(
        identifier: str,
        target_value: float,
        tolerance: float = DEFAULT_TOLERANCE,
        accession_number: Optional[str] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Find facts whose value lies around a target value.

        Parameters:
            identifier (str): Company CIK or ticker symbol.
            target_value (float): Target value in dollars (e.g., 638000000).
            tolerance (float): Allowed distance from the target in dollars (default: 50,000,000).
            accession_number (Optional[str]): Filing accession number (default: most recent filing of formType).
            filters (Optional[Dict]): "concept", "dimensions" and "formType" (default "10-Q").

        Returns:
            Dict[str, Any]: Matching facts with dimensional context.
        """
        return await dimensional_tools.search_facts_by_value(
            identifier, target_value, tolerance, accession_number, filters
        )

    @mcp.tool("build_fact_table")
    async def build_fact_table_tool(
        identifier: str,
        target_value: float,
        tolerance: float = DEFAULT_TOLERANCE,
        accession_number: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Build a table of facts around a target value with dimensional and business classification.

        Parameters:
            identifier (str): Company CIK or ticker symbol.
            target_value (float): Target value in dollars.
            tolerance (float): Allowed distance from the target in dollars (default: 50,000,000).
            accession_number (Optional[str]): Filing accession number (default: most recent 10-Q).
            options (Optional[Dict]): "max_rows" (25), "show_dimensions" (true),
                "sort_by" ("deviation", "value" or "concept") and "filters".

        Returns:
            Dict[str, Any]: Table rows, summary statistics and a formatted text table.
        """
        return await fact_table_tools.build_fact_table(identifier, target_value, tolerance, accession_number, options)

    @mcp.tool("time_series_dimensional_analysis")
    async def time_series_dimensional_analysis_tool(
        identifier: str, options: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Analyse a concept's dimensional facts across recent quarterly and annual filings.

        Parameters:
            identifier (str): Company CIK or ticker symbol.
            options (Optional[Dict]): "concept", "subsegment" (e.g. "Electrophysiology"),
                "periods" (4), "min_value" (100,000,000) and "include_geography" (true).

        Returns:
            Dict[str, Any]: Time-series table, geographic mix and period-over-period growth rates.
        """
        return await time_series_tools.time_series_dimensional_analysis(identifier, options)

    return mcp


def main() -> None:
    parser = argparse.ArgumentParser(description="SEC iXBRL MCP Server")
    parser.add_argument(
        "--transport",
        type=str,
        default="stdio",
        choices=["streamable-http", "sse", "stdio"],
        help="Transport protocol to use (default: stdio)",
    )
    args = parser.parse_args()

    config = initialize_config()

    # stdout carries the stdio transport
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting SEC iXBRL MCP server (%s transport)", args.transport)

    create_server(config).run(transport=args.transport)


if __name__ == "__main__":
    main()
