"""
Tests for fact extraction from inline XBRL markup.
"""

from conftest import context, inline_document, revenue

from sec_ixbrl_mcp.xbrl.extractor import (
    DEFAULT_NAMESPACE,
    decode_number,
    extract_annotations,
    extract_legacy_annotations,
    parse_concept_name,
)
from sec_ixbrl_mcp.xbrl.models import FRACTION, NUMERIC, TEXT


class TestDecodeNumber:
    """Numeric decoding of raw fact text."""

    def test_no_scale_is_plain_decimal(self):
        assert decode_number("1234.5") == 1234.5

    def test_scale_multiplies_by_power_of_ten(self):
        assert decode_number("638", "6") == 638_000_000

    def test_thousands_separators_are_stripped(self):
        assert decode_number("21,893", "6") == 21_893_000_000

    def test_negative_scale(self):
        assert decode_number("25", "-2") == 0.25

    def test_unparsable_text_decodes_to_zero(self):
        assert decode_number("—") == 0
        assert decode_number("n/a", "6") == 0

    def test_leading_number_is_used(self):
        assert decode_number("12.5 million") == 12.5

    def test_blank_scale_is_ignored(self):
        assert decode_number("42", " ") == 42

    def test_scale_beyond_decimal_limits_decodes_to_zero(self):
        assert decode_number("1", "1000000") == 0
        assert decode_number("1", "99999999") == 0


class TestConceptNames:
    """Splitting concept names into namespace and local name."""

    def test_prefixed_name(self):
        assert parse_concept_name("us-gaap:Revenues") == ("us-gaap", "Revenues")

    def test_unprefixed_name_gets_default_namespace(self):
        assert parse_concept_name("Revenues") == (DEFAULT_NAMESPACE, "Revenues")
        assert DEFAULT_NAMESPACE == "default"

    def test_only_first_colon_splits(self):
        assert parse_concept_name("a:b:c") == ("a", "b:c")


class TestExtractAnnotations:
    """Extraction of the three inline fact kinds."""

    def test_non_fraction_fact(self, scenario_a_document):
        facts = extract_annotations(scenario_a_document)

        assert len(facts) == 1
        fact = facts[0]
        assert fact.namespace == "us-gaap"
        assert fact.concept == "RevenueFromContractWithCustomerExcludingAssessedTax"
        assert fact.full_name == "us-gaap:RevenueFromContractWithCustomerExcludingAssessedTax"
        assert fact.value == 638_000_000
        assert fact.raw_value == "638"
        assert fact.context_ref == "c1"
        assert fact.unit_ref == "usd"
        assert fact.decimals == "-6"
        assert fact.scale == "6"
        assert fact.fact_type == "nonFraction"
        assert fact.value_kind == NUMERIC

    def test_unit_defaults_to_usd(self):
        markup = '<ix:nonFraction name="us-gaap:Revenues" contextRef="c1">5</ix:nonFraction>'
        fact = extract_annotations(markup)[0]
        assert fact.unit_ref == "USD"
        assert fact.scale is None
        assert fact.value == 5

    def test_attribute_order_does_not_matter(self):
        markup = "<ix:nonFraction scale='3' contextRef='c9' decimals='-3' name='us-gaap:Revenues'>7</ix:nonFraction>"
        fact = extract_annotations(markup)[0]
        assert fact.context_ref == "c9"
        assert fact.value == 7000

    def test_nested_markup_is_stripped(self):
        markup = '<ix:nonFraction name="us-gaap:Revenues" contextRef="c1"><span><b>1,250</b></span></ix:nonFraction>'
        fact = extract_annotations(markup)[0]
        assert fact.raw_value == "1,250"
        assert fact.value == 1250

    def test_fraction_fact(self):
        markup = '<ix:fraction name="us-gaap:PayoutRatio" contextRef="c1">0.25</ix:fraction>'
        fact = extract_annotations(markup)[0]
        assert fact.fact_type == "fraction"
        assert fact.value_kind == FRACTION
        assert fact.unit_ref == "pure"
        assert fact.value == 0.25

    def test_non_numeric_fact_is_trimmed_text(self):
        markup = '<ix:nonNumeric name="dei:DocumentType" contextRef="c1">\n  10-Q &amp; more \n</ix:nonNumeric>'
        fact = extract_annotations(markup)[0]
        assert fact.value_kind == TEXT
        assert fact.value == "10-Q & more"
        assert fact.unit_ref is None
        assert fact.decimals is None

    def test_unprefixed_name(self):
        markup = '<ix:nonFraction name="Revenues" contextRef="c1">1</ix:nonFraction>'
        fact = extract_annotations(markup)[0]
        assert fact.namespace == "default"
        assert fact.concept == "Revenues"

    def test_nil_facts_are_skipped(self):
        markup = '<ix:nonFraction name="us-gaap:Revenues" contextRef="c1" xsi:nil="true"/>'
        assert extract_annotations(markup) == []

    def test_fact_without_context_ref_is_skipped(self):
        markup = '<ix:nonFraction name="us-gaap:Revenues">1</ix:nonFraction>'
        assert extract_annotations(markup) == []

    def test_patterns_are_concatenated_in_pattern_order(self):
        markup = (
            '<ix:nonNumeric name="dei:DocumentType" contextRef="c1">10-Q</ix:nonNumeric>'
            '<ix:fraction name="us-gaap:Ratio" contextRef="c1">0.5</ix:fraction>'
            '<ix:nonFraction name="us-gaap:Revenues" contextRef="c1">1</ix:nonFraction>'
            '<ix:nonFraction name="us-gaap:Assets" contextRef="c1">2</ix:nonFraction>'
        )
        facts = extract_annotations(markup)
        assert [f.fact_type for f in facts] == ["nonFraction", "nonFraction", "fraction", "nonNumeric"]
        assert [f.concept for f in facts[:2]] == ["Revenues", "Assets"]

    def test_out_of_range_scale_does_not_abort_extraction(self):
        markup = inline_document(
            [context("c1")],
            [revenue("c1", "1", scale="1000000"), revenue("c1", "2", scale="99999999"), revenue("c1", "638")],
        )
        facts = extract_annotations(markup)
        assert [f.value for f in facts] == [0, 0, 638_000_000]

    def test_extraction_is_idempotent(self, segment_document):
        first = extract_annotations(segment_document)
        second = extract_annotations(segment_document)
        assert first == second
        assert len(first) == 7

    def test_empty_markup(self):
        assert extract_annotations("") == []
        assert extract_annotations(None) == []


class TestLegacyAnnotations:
    """Facts from standalone XBRL instance documents."""

    def test_legacy_facts_need_decimals(self):
        markup = (
            '<xbrli:xbrl xmlns:xbrli="http://www.xbrl.org/2003/instance">'
            + context("FY2024", instant="2024-12-31")
            + '<us-gaap:Assets contextRef="FY2024" unitRef="usd" decimals="-6">1500000000</us-gaap:Assets>'
            + '<dei:DocumentType contextRef="FY2024">10-K</dei:DocumentType>'
            + "</xbrli:xbrl>"
        )
        facts = extract_legacy_annotations(markup)

        assert len(facts) == 1
        assert facts[0].full_name == "us-gaap:Assets"
        assert facts[0].value == 1_500_000_000
        assert facts[0].fact_type == "legacy"

    def test_inline_facts_are_not_legacy_facts(self):
        markup = inline_document([context("c1")], [revenue("c1", "5")])
        assert extract_legacy_annotations(markup) == []
