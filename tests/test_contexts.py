"""
Tests for context resolution.
"""

from conftest import CIK, GEO, SEGMENT, context

from sec_ixbrl_mcp.xbrl.contexts import extract_contexts, extract_dimensions, extract_period


class TestPeriods:
    """Period classification of context blocks."""

    def test_instant(self):
        period = extract_period("<xbrli:period><xbrli:instant>2025-03-30</xbrli:instant></xbrli:period>")
        assert period.period_type == "instant"
        assert period.instant == "2025-03-30"
        assert period.start == period.end == "2025-03-30"

    def test_duration(self):
        period = extract_period(
            "<xbrli:period><xbrli:startDate>2025-01-01</xbrli:startDate>"
            "<xbrli:endDate>2025-03-30</xbrli:endDate></xbrli:period>"
        )
        assert period.period_type == "duration"
        assert (period.start_date, period.end_date) == ("2025-01-01", "2025-03-30")

    def test_unprefixed_markers(self):
        period = extract_period("<period><instant>2024-12-31</instant></period>")
        assert period.period_type == "instant"

    def test_no_markers_is_unknown(self):
        period = extract_period("<xbrli:period><xbrli:forever/></xbrli:period>")
        assert period.period_type == "unknown"
        assert period.instant is None
        assert period.start_date is None
        assert period.end_date is None

    def test_start_without_end_is_unknown(self):
        period = extract_period("<xbrli:startDate>2025-01-01</xbrli:startDate>")
        assert period.period_type == "unknown"


class TestDimensions:
    """Axis to member mapping."""

    def test_explicit_members(self):
        block = (
            f'<xbrldi:explicitMember dimension="{GEO}">us-gaap:NonUsMember</xbrldi:explicitMember>'
            f'<xbrldi:explicitMember dimension="{SEGMENT}"> jnj:MedTechMember </xbrldi:explicitMember>'
        )
        assert extract_dimensions(block) == {GEO: "us-gaap:NonUsMember", SEGMENT: "jnj:MedTechMember"}

    def test_repeated_axis_keeps_last_member(self):
        block = (
            f'<xbrldi:explicitMember dimension="{GEO}">us-gaap:UsMember</xbrldi:explicitMember>'
            f'<xbrldi:explicitMember dimension="{GEO}">us-gaap:NonUsMember</xbrldi:explicitMember>'
        )
        assert extract_dimensions(block) == {GEO: "us-gaap:NonUsMember"}

    def test_no_members(self):
        assert extract_dimensions("<xbrli:entity></xbrli:entity>") == {}


class TestExtractContexts:
    """Context records keyed by id."""

    def test_context_record(self):
        contexts = extract_contexts(context("c1", {GEO: "us-gaap:NonUsMember"}))

        record = contexts["c1"]
        assert record.id == "c1"
        assert record.entity == CIK
        assert record.period.period_type == "duration"
        assert record.dimensions == {GEO: "us-gaap:NonUsMember"}

    def test_inline_context_vocabulary(self):
        markup = '<ix:context id="x1"><xbrli:period><xbrli:instant>2025-03-30</xbrli:instant></xbrli:period></ix:context>'
        contexts = extract_contexts(markup)
        assert list(contexts) == ["x1"]
        assert contexts["x1"].period.instant == "2025-03-30"

    def test_duplicate_id_last_write_wins(self):
        markup = context("c1", instant="2024-12-31") + context("c1", {GEO: "us-gaap:UsMember"})
        contexts = extract_contexts(markup)

        assert len(contexts) == 1
        assert contexts["c1"].period.period_type == "duration"
        assert contexts["c1"].dimensions == {GEO: "us-gaap:UsMember"}

    def test_xbrli_vocabulary_overwrites_ix(self):
        markup = (
            '<ix:context id="c1"><xbrli:instant>2020-01-01</xbrli:instant></ix:context>'
            + context("c1", instant="2025-03-30")
        )
        assert extract_contexts(markup)["c1"].period.instant == "2025-03-30"

    def test_context_without_identifier(self):
        markup = '<xbrli:context id="c5"><xbrli:period><xbrli:instant>2025-03-30</xbrli:instant></xbrli:period></xbrli:context>'
        assert extract_contexts(markup)["c5"].entity is None

    def test_empty_markup(self):
        assert extract_contexts("") == {}
