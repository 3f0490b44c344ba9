"""
Tests for MCP server assembly.
"""

from conftest import SUBMISSIONS_URL, run, submissions

from sec_ixbrl_mcp.server import create_server

TOOL_NAMES = {
    "get_company_cik",
    "search_companies",
    "get_company_submissions",
    "get_company_facts",
    "get_company_concept",
    "get_xbrl_frames",
    "filter_filings",
    "get_dimensional_facts",
    "search_facts_by_value",
    "build_fact_table",
    "time_series_dimensional_analysis",
}


def test_every_tool_is_registered(config):
    tools = run(create_server(config).list_tools())
    assert {tool.name for tool in tools} == TOOL_NAMES


def test_tools_describe_their_parameters(config):
    tools = {tool.name: tool for tool in run(create_server(config).list_tools())}

    schema = tools["build_fact_table"].inputSchema
    assert set(schema["required"]) == {"identifier", "target_value"}
    assert "options" in schema["properties"]
    assert tools["get_dimensional_facts"].description


def test_filter_filings_tool(config):
    filings = [{"form_type": "10-Q", "filing_date": "2025-04-29"}, {"form_type": "8-K", "filing_date": "2025-04-15"}]
    result = run(create_server(config).call_tool("filter_filings", {"filings": filings, "form_type": "10-Q"}))
    assert "10-Q" in str(result)
    assert "8-K" not in str(result)


def test_tool_call_goes_through_transport(config, fake_sec):
    fake_sec.add_json(SUBMISSIONS_URL, submissions([]))
    server = create_server(config, transport=fake_sec.transport)

    result = run(server.call_tool("get_company_submissions", {"identifier": "200406"}))

    assert "JOHNSON & JOHNSON" in str(result)
    assert fake_sec.urls() == [SUBMISSIONS_URL]
