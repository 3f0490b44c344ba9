"""
Pytest configuration and shared fixtures.

HTTP never leaves the process: ``FakeSEC`` serves canned responses through
``httpx.MockTransport`` and records every request it sees.
"""

import asyncio
import json

import httpx
import pytest

from sec_ixbrl_mcp.config import EdgarConfig

CIK = "0000200406"
ACCESSION = "0000200406-25-000119"
ARCHIVE_DIR = "https://www.sec.gov/Archives/edgar/data/200406/000020040625000119"
SUBMISSIONS_URL = f"https://data.sec.gov/submissions/CIK{CIK}.json"
COMPANY_FACTS_URL = f"https://data.sec.gov/api/xbrl/companyfacts/CIK{CIK}.json"
TICKERS_URL = "https://www.sec.gov/files/company_tickers_exchange.json"


def run(coro):
    """Drive a coroutine from a synchronous test."""
    return asyncio.run(coro)


class FakeSEC:
    """Routes (method, url) to canned responses; anything else is a 404.

    HEAD requests fall back to the status of the GET route for the same URL.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, url, body="", status=200, method="GET", json_body=None, error=None):
        self.routes[(method, url)] = (status, body, json_body, error)
        return self

    def add_json(self, url, data, status=200):
        return self.add(url, json_body=data, status=status)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        route = self.routes.get((request.method, url))
        if route is None and request.method == "HEAD":
            route = self.routes.get(("GET", url))
        if route is None:
            return httpx.Response(404, text="Not Found")

        status, body, json_body, error = route
        if error is not None:
            raise error(f"simulated failure for {url}", request=request)
        if request.method == "HEAD":
            return httpx.Response(status)
        if json_body is not None:
            return httpx.Response(status, text=json.dumps(json_body), headers={"Content-Type": "application/json"})
        return httpx.Response(status, text=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def urls(self, method=None):
        return [str(r.url) for r in self.requests if method is None or r.method == method]


@pytest.fixture
def config():
    return EdgarConfig(user_agent="Test Suite tests@example.com")


@pytest.fixture
def fake_sec():
    return FakeSEC()


def submissions(filings):
    """Submissions JSON with the given (accession, form, filing_date, primary_document) rows."""
    return {
        "cik": "200406",
        "name": "JOHNSON & JOHNSON",
        "tickers": ["JNJ"],
        "exchanges": ["NYSE"],
        "entityType": "operating",
        "sic": "2834",
        "sicDescription": "Pharmaceutical Preparations",
        "fiscalYearEnd": "1231",
        "stateOfIncorporation": "NJ",
        "filings": {
            "recent": {
                "accessionNumber": [f[0] for f in filings],
                "form": [f[1] for f in filings],
                "filingDate": [f[2] for f in filings],
                "reportDate": [f[2] for f in filings],
                "primaryDocument": [f[3] for f in filings],
                "isXBRL": [1 for _ in filings],
                "isInlineXBRL": [1 for _ in filings],
            }
        },
    }


TICKERS = {
    "fields": ["cik", "name", "ticker", "exchange"],
    "data": [
        [320193, "Apple Inc.", "AAPL", "Nasdaq"],
        [200406, "JOHNSON & JOHNSON", "JNJ", "NYSE"],
        [1800, "ABBOTT LABORATORIES", "ABT", "NYSE"],
        [1000045, "NOVAVAX INC", "NVAX", "Nasdaq"],
        [1403161, "VISA INC.", "V", "NYSE"],
    ],
}


def context(context_id, members=None, start="2025-01-01", end="2025-03-30", instant=None):
    explicit = "".join(
        f'<xbrldi:explicitMember dimension="{axis}">{member}</xbrldi:explicitMember>'
        for axis, member in (members or {}).items()
    )
    segment = f"<xbrli:segment>{explicit}</xbrli:segment>" if explicit else ""
    if instant:
        period = f"<xbrli:instant>{instant}</xbrli:instant>"
    else:
        period = f"<xbrli:startDate>{start}</xbrli:startDate><xbrli:endDate>{end}</xbrli:endDate>"
    return (
        f'<xbrli:context id="{context_id}"><xbrli:entity>'
        f'<xbrli:identifier scheme="http://www.sec.gov/CIK">{CIK}</xbrli:identifier>{segment}'
        f"</xbrli:entity><xbrli:period>{period}</xbrli:period></xbrli:context>"
    )


def revenue(context_ref, value, scale="6", name="us-gaap:RevenueFromContractWithCustomerExcludingAssessedTax"):
    return (
        f'<ix:nonFraction name="{name}" contextRef="{context_ref}" unitRef="usd" '
        f'decimals="-6" scale="{scale}" format="ixt:num-dot-decimal">{value}</ix:nonFraction>'
    )


def inline_document(contexts, facts):
    return (
        '<html xmlns:ix="http://www.xbrl.org/2013/inlineXBRL"><body>'
        '<div style="display:none"><ix:header><ix:resources>'
        + "".join(contexts)
        + "</ix:resources></ix:header></div><table><tr><td>"
        + "</td><td>".join(facts)
        + "</td></tr></table></body></html>"
    )


GEO = "srt:StatementGeographicalAxis"
SEGMENT = "us-gaap:StatementBusinessSegmentsAxis"
SUBSEGMENT = "us-gaap:SubsegmentsAxis"


@pytest.fixture
def segment_document():
    """A quarterly report with total, geographic and subsegment revenue."""
    return inline_document(
        [
            context("c0"),
            context("c1", {GEO: "us-gaap:NonUsMember"}),
            context("c2", {GEO: "us-gaap:UsMember"}),
            context(
                "c3",
                {GEO: "us-gaap:NonUsMember", SEGMENT: "jnj:MedTechMember", SUBSEGMENT: "jnj:ElectrophysiologyMember"},
            ),
            context(
                "c4",
                {GEO: "us-gaap:UsMember", SEGMENT: "jnj:MedTechMember", SUBSEGMENT: "jnj:ElectrophysiologyMember"},
            ),
            context("i1", instant="2025-03-30"),
        ],
        [
            revenue("c0", "21,893"),
            revenue("c1", "9,681"),
            revenue("c2", "12,212"),
            revenue("c3", "638"),
            revenue("c4", "645"),
            '<ix:nonFraction name="us-gaap:Assets" contextRef="i1" unitRef="usd" decimals="-6" scale="6">'
            "193,408</ix:nonFraction>",
            '<ix:nonNumeric name="dei:DocumentType" contextRef="c0">10-Q</ix:nonNumeric>',
        ],
    )


@pytest.fixture
def scenario_a_document():
    return inline_document(
        [context("c1", {GEO: "us-gaap:NonUsMember"})],
        [revenue("c1", "638")],
    )
