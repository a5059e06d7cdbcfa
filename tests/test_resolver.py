"""
Tests for chart query resolution.
"""

import pytest

from zdc_ref.charts import ChartCandidate, ChartQuery, ChartType
from zdc_ref.resolver import (
    ACCEPTANCE_FLOOR,
    FULL_MATCH_BONUS,
    TYPE_MATCH_BONUS,
    Ambiguous,
    NoMatch,
    SingleMatch,
    rank,
    resolve,
    score_title,
)


ILS_28R = ChartCandidate(title="ILS OR LOC RWY 28R", pdf_ref="a.pdf")
RNAV_01 = ChartCandidate(title="RNAV (GPS) RWY 01", pdf_ref="b.pdf")


class TestDegenerateInput:
    """Empty candidates or queries fall back to NoMatch."""

    def test_no_candidates(self):
        assert isinstance(resolve([], ["ILS"]), NoMatch)

    def test_no_query_tokens(self):
        assert isinstance(resolve([ILS_28R, RNAV_01], []), NoMatch)

    def test_punctuation_only_query(self):
        assert isinstance(resolve([ILS_28R], ["-", "()"]), NoMatch)

    def test_empty_title_does_not_crash(self):
        blank = ChartCandidate(title="", pdf_ref="x.pdf")
        result = resolve([blank, ILS_28R], ["ILS", "28R"])

        assert isinstance(result, SingleMatch)
        assert result.candidate == ILS_28R

    def test_no_match_echoes_normalized_query(self):
        result = resolve([RNAV_01], ["v.o.r"])

        assert isinstance(result, NoMatch)
        assert result.query_words == ("VOR",)


class TestScenarios:
    """Behavior for typical queries."""

    def test_all_tokens_present_in_one_title(self):
        result = resolve([ILS_28R, RNAV_01], ["ILS", "28R"])

        assert isinstance(result, SingleMatch)
        assert result.candidate == ILS_28R

    def test_partial_runway_is_ambiguous_in_input_order(self):
        a = ChartCandidate(title="ILS RWY 28R", pdf_ref="a.pdf")
        c = ChartCandidate(title="ILS RWY 28L", pdf_ref="c.pdf")

        result = resolve([a, c], ["ILS", "28"])

        assert isinstance(result, Ambiguous)
        assert result.candidates == [a, c]

    def test_unrelated_query_is_no_match(self):
        result = resolve([ChartCandidate(title="RNAV RWY 01", pdf_ref="x")], ["VOR"])
        assert isinstance(result, NoMatch)

    def test_full_runway_beats_sibling_runway(self):
        left = ChartCandidate(title="ILS RWY 28L", pdf_ref="l.pdf")
        right = ChartCandidate(title="ILS RWY 28R", pdf_ref="r.pdf")

        result = resolve([left, right], ["ILS", "28R"])

        assert isinstance(result, SingleMatch)
        assert result.candidate == right

    def test_exact_title_beats_longer_variant(self):
        cat = ChartCandidate(title="ILS RWY 28R (SA CAT I)", pdf_ref="cat.pdf")
        plain = ChartCandidate(title="ILS RWY 28R", pdf_ref="plain.pdf")

        result = resolve([cat, plain], ["ILS", "RWY", "28R"])

        assert isinstance(result, SingleMatch)
        assert result.candidate == plain

    def test_reordered_query(self):
        result = resolve([RNAV_01, ILS_28R], ["28R", "ILS"])

        assert isinstance(result, SingleMatch)
        assert result.candidate == ILS_28R

    def test_single_digit_runway_matches_padded_title(self):
        result = resolve([ILS_28R, RNAV_01], ["RNAV", "1"])

        assert isinstance(result, SingleMatch)
        assert result.candidate == RNAV_01

    def test_runway_spelled_out(self):
        result = resolve([ILS_28R, RNAV_01], ["ILS", "RUNWAY", "28R"])

        assert isinstance(result, SingleMatch)
        assert result.candidate == ILS_28R

    def test_glued_query_token(self):
        result = resolve([RNAV_01, ILS_28R], ["ILS28R"])

        assert isinstance(result, SingleMatch)
        assert result.candidate == ILS_28R

    def test_ambiguous_excludes_distant_candidates(self):
        y = ChartCandidate(title="RNAV (GPS) Y RWY 28R", pdf_ref="y.pdf")
        ils = ChartCandidate(title="ILS RWY 28R", pdf_ref="ils.pdf")
        z = ChartCandidate(title="RNAV (GPS) Z RWY 28R", pdf_ref="z.pdf")

        result = resolve([y, ils, z], ["RNAV", "28R"])

        assert isinstance(result, Ambiguous)
        assert result.candidates == [y, z]

    def test_typo_tolerance(self):
        star = ChartCandidate(title="CAPSS THREE", pdf_ref="capss.pdf")
        sid = ChartCandidate(title="JCOBY FOUR", pdf_ref="jcoby.pdf")

        result = resolve([sid, star], ["CAPS", "THREE"])

        assert isinstance(result, SingleMatch)
        assert result.candidate == star


class TestNormalizationInvariance:
    """Case and punctuation never change the outcome."""

    def test_case_insensitive(self):
        candidates = [ILS_28R, RNAV_01]
        assert resolve(candidates, ["ils"]) == resolve(candidates, ["ILS"])

    def test_hyphen_insensitive(self):
        candidates = [ILS_28R, RNAV_01]
        assert resolve(candidates, ["28-R"]) == resolve(candidates, ["28R"])

    def test_identical_titles_are_never_single(self):
        first = ChartCandidate(title="ILS RWY 28R", pdf_ref="1.pdf")
        second = ChartCandidate(title="ils rwy 28-R", pdf_ref="2.pdf")

        result = resolve([first, second], ["ILS", "28R"])

        assert isinstance(result, Ambiguous)
        assert result.candidates == [first, second]

    def test_deterministic(self):
        candidates = [
            ChartCandidate(title="ILS RWY 28R", pdf_ref="a.pdf"),
            ChartCandidate(title="ILS RWY 28L", pdf_ref="b.pdf"),
            ChartCandidate(title="ILS RWY 28C", pdf_ref="c.pdf"),
        ]
        assert resolve(candidates, ["ILS", "28"]) == resolve(candidates, ["ILS", "28"])


class TestScoring:
    """Composite score tiers."""

    def test_full_match_tier(self):
        score = score_title(["ILS", "28R"], "ILS OR LOC RWY 28R")
        # 2 shared words out of 5 distinct
        assert score == pytest.approx(FULL_MATCH_BONUS + 0.4)

    def test_partial_match_stays_below_full_tier(self):
        score = score_title(["ILS", "28"], "ILS RWY 28R")
        assert ACCEPTANCE_FLOOR <= score < FULL_MATCH_BONUS

    def test_type_bonus(self):
        plain = score_title(["ILS"], "ILS RWY 01")
        boosted = score_title(["ILS"], "ILS RWY 01", ChartType.IAP, ChartType.IAP)
        assert boosted == pytest.approx(plain + TYPE_MATCH_BONUS)

    def test_no_type_bonus_for_unknown_query(self):
        plain = score_title(["CNDEL"], "CNDEL FIVE")
        assert score_title(
            ["CNDEL"], "CNDEL FIVE", ChartType.UNKNOWN, ChartType.UNKNOWN
        ) == pytest.approx(plain)

    def test_empty_title_scores_zero(self):
        assert score_title(["ILS"], "") == 0.0

    def test_rank_is_stable(self):
        a = ChartCandidate(title="VOR RWY 19", pdf_ref="a.pdf")
        b = ChartCandidate(title="VOR RWY 19", pdf_ref="b.pdf")
        ranked = rank([a, b], ["VOR", "19"])
        assert [m.chart for m in ranked] == [a, b]

    def test_type_bonus_breaks_tie(self):
        approach = ChartCandidate(title="LDA RWY 19", pdf_ref="a.pdf", chart_code="IAP")
        other = ChartCandidate(title="LDA RWY 19", pdf_ref="b.pdf", chart_code="GEN")

        result = resolve([other, approach], ["LDA", "RWY", "19"])

        # Type bonus alone is smaller than the separation margin
        assert isinstance(result, Ambiguous)
        assert result.candidates == [approach, other]


class TestParsedQueries:
    """Queries go through ChartQuery.parse before resolution."""

    def test_glued_single_digit_runway(self):
        ils_04 = ChartCandidate(title="ILS RWY 04", pdf_ref="a.pdf", chart_code="IAP")
        ils_22 = ChartCandidate(title="ILS RWY 22", pdf_ref="b.pdf", chart_code="IAP")
        query = ChartQuery.parse("BWI", ["ILS4"])

        result = resolve([ils_04, ils_22], query.tokens)

        assert isinstance(result, SingleMatch)
        assert result.candidate == ils_04

    def test_procedure_digit_still_spelled_out(self):
        star = ChartCandidate(title="CNDEL FIVE", pdf_ref="a.pdf", chart_code="STAR")
        approach = ChartCandidate(title="VOR RWY 05", pdf_ref="b.pdf", chart_code="IAP")

        result = resolve([approach, star], ChartQuery.parse("IAD", ["CNDEL5"]).tokens)

        assert isinstance(result, SingleMatch)
        assert result.candidate == star
