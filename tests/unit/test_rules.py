"""Tests for core/rules.py."""

from __future__ import annotations

import pytest

from vantage.core.rules import (
    DefaultKeywordScorer,
    evaluate_count,
    evaluate_keywords,
    evaluate_mapping,
    evaluate_rating,
    evaluate_rule,
    parse_count_range,
)
from vantage.errors import RuleEvaluationError
from vantage.models.template import CountBucketRule, KeywordRule, MappingRule, RatingRule


@pytest.fixture
def yes_no() -> MappingRule:
    return MappingRule(mapping={"Yes": 5, "Partial": 3, "No": 0})


@pytest.fixture
def controls() -> CountBucketRule:
    return CountBucketRule(ranges={"0": 0, "1-2": 2, "3-4": 4, "5+": 5})


class TestMappingRule:
    def test_exact_option(self, yes_no):
        assert evaluate_mapping(yes_no, "Yes") == 100.0
        assert evaluate_mapping(yes_no, "Partial") == pytest.approx(60.0)
        assert evaluate_mapping(yes_no, "No") == 0.0

    def test_case_insensitive_fallback(self, yes_no):
        assert evaluate_mapping(yes_no, "yes") == 100.0

    def test_boolean_answer_maps_to_yes_no(self, yes_no):
        assert evaluate_mapping(yes_no, True) == 100.0
        assert evaluate_mapping(yes_no, False) == 0.0

    def test_multiselect_scores_mean(self, yes_no):
        assert evaluate_mapping(yes_no, ["Yes", "No"]) == 50.0

    def test_unknown_option_raises(self, yes_no):
        with pytest.raises(RuleEvaluationError):
            evaluate_mapping(yes_no, "Maybe")

    def test_yaml_boolean_keys_stringified(self):
        rule = MappingRule.model_validate({"mapping": {True: 5, False: 0}})
        assert rule.mapping == {"Yes": 5, "No": 0}

    def test_numeric_option(self):
        rule = MappingRule(mapping={"1": 1, "2": 5})
        assert evaluate_mapping(rule, 2) == 100.0
        assert evaluate_mapping(rule, 2.0) == 100.0


class TestKeywordRule:
    def test_base_score_without_hits(self):
        rule = KeywordRule(positive=["annual"], negative=["never"])
        assert evaluate_keywords(rule, "We review things", DefaultKeywordScorer()) == pytest.approx(50.0)

    def test_positive_hits_raise_score(self):
        rule = KeywordRule(positive=["annual", "documented"])
        assert evaluate_keywords(rule, "Annual, documented review", DefaultKeywordScorer()) == pytest.approx(70.0)

    def test_negative_hits_lower_score(self):
        rule = KeywordRule(negative=["never"])
        assert evaluate_keywords(rule, "never reviewed", DefaultKeywordScorer()) == pytest.approx(35.0)

    def test_clamped(self):
        rule = KeywordRule(negative=["a", "b", "c", "d"])
        assert evaluate_keywords(rule, "a b c d", DefaultKeywordScorer()) == 0.0

    def test_blank_text_scores_zero(self):
        assert evaluate_keywords(KeywordRule(), "   ", DefaultKeywordScorer()) == 0.0

    def test_pluggable_scorer(self):
        rule = KeywordRule()
        assert evaluate_rule(rule, "anything", keyword_scorer=lambda r, text: r.scale) == 100.0

    def test_non_text_raises(self):
        with pytest.raises(RuleEvaluationError):
            evaluate_keywords(KeywordRule(), 42, DefaultKeywordScorer())

    def test_scorer_from_config(self):
        scorer = DefaultKeywordScorer.from_config({"scoring": {"keyword": {"base_fraction": 0.2}}})
        assert scorer.base_fraction == 0.2
        assert scorer.positive_step == 0.1


class TestCountRule:
    def test_parse_ranges(self):
        assert parse_count_range("3") == (3, 3)
        assert parse_count_range("1-2") == (1, 2)
        assert parse_count_range("7+") == (7, None)

    def test_malformed_range(self):
        with pytest.raises(RuleEvaluationError):
            parse_count_range("lots")

    def test_counts_selections(self, controls):
        assert evaluate_count(controls, ["MFA", "EDR"]) == pytest.approx(40.0)
        assert evaluate_count(controls, ["a", "b", "c", "d", "e", "f"]) == 100.0

    def test_exclusive_option_not_counted(self, controls):
        assert evaluate_count(controls, ["None"]) == 0.0

    def test_integer_answer(self, controls):
        assert evaluate_count(controls, 3) == pytest.approx(80.0)

    def test_uncovered_count_raises(self):
        rule = CountBucketRule(ranges={"1-2": 5})
        with pytest.raises(RuleEvaluationError):
            evaluate_count(rule, 4)


class TestRatingRule:
    def test_points_on_scale(self):
        assert evaluate_rating(RatingRule(), 4) == pytest.approx(80.0)
        assert evaluate_rating(RatingRule(scale=10), "5") == 50.0

    def test_out_of_range_raises(self):
        with pytest.raises(RuleEvaluationError):
            evaluate_rating(RatingRule(), 6)

    def test_not_a_number_raises(self):
        with pytest.raises(RuleEvaluationError):
            evaluate_rating(RatingRule(), "excellent")
