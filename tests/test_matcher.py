"""Test single-term matching."""

import pytest

from fuzzy_search.core.matcher import EPSILON, FuzzyMatcher
from fuzzy_search.models.config import SearchConfig, SearchField


def ids(results):
    return [result.record["id"] for result in results]


class TestFuzzyMatcher:
    """Test FuzzyMatcher scoring and options."""

    @pytest.fixture
    def name_fields(self):
        return [SearchField(name="name")]

    def test_exact_word_scores_epsilon(self, lodge_records, name_fields):
        results = FuzzyMatcher().match(lodge_records, "alpine", name_fields)

        assert ids(results) == [1, 2]
        assert all(result.score == pytest.approx(EPSILON) for result in results)

    def test_approximate_word_score(self, lodge_records, name_fields):
        results = FuzzyMatcher().match(lodge_records, "lodge", name_fields)

        # "lodge" vs "ridge" has ratio 60
        assert ids(results) == [2, 1]
        assert results[1].score == pytest.approx(0.4)

    def test_threshold_excludes_weak_matches(self, lodge_records, name_fields):
        results = FuzzyMatcher(threshold=0.3).match(lodge_records, "lodge", name_fields)
        assert ids(results) == [2]

    def test_unrelated_record_excluded(self, lodge_records, name_fields):
        results = FuzzyMatcher().match(lodge_records, "alpine", name_fields)
        assert 3 not in ids(results)

    def test_short_terms_never_match(self, lodge_records, name_fields):
        assert FuzzyMatcher().match(lodge_records, "al", name_fields) == []

    def test_min_match_char_length_configurable(self, lodge_records, name_fields):
        results = FuzzyMatcher(min_match_char_length=1, threshold=0.0).match(
            [{"id": 9, "name": "B and B"}], "b", name_fields
        )
        assert ids(results) == [9]

    def test_punctuation_only_term(self, lodge_records, name_fields):
        assert FuzzyMatcher().match(lodge_records, "---", name_fields) == []

    def test_case_sensitive_matching(self, lodge_records, name_fields):
        assert FuzzyMatcher(ignore_case=False).match(lodge_records, "ALPINE", name_fields) == []
        assert len(FuzzyMatcher().match(lodge_records, "ALPINE", name_fields)) == 2

    def test_limit(self, lodge_records, name_fields):
        results = FuzzyMatcher().match(lodge_records, "alpine", name_fields, limit=1)
        assert ids(results) == [1]

    def test_unsorted_keeps_input_order(self, lodge_records, name_fields):
        results = FuzzyMatcher(should_sort=False).match(lodge_records, "lodge", name_fields)

        assert ids(results) == [1, 2]
        assert [result.ref_index for result in results] == [0, 1]

    def test_ref_index(self, lodge_records, name_fields):
        results = FuzzyMatcher().match(lodge_records, "lodge", name_fields)
        assert [result.ref_index for result in results] == [1, 0]

    def test_records_not_mutated(self, lodge_records, name_fields):
        snapshot = [dict(record) for record in lodge_records]
        FuzzyMatcher(include_matches=True).match(lodge_records, "alpine", name_fields)
        assert lodge_records == snapshot

    def test_empty_inputs(self, lodge_records, name_fields):
        assert FuzzyMatcher().match([], "alpine", name_fields) == []
        assert FuzzyMatcher().match(lodge_records, "alpine", []) == []

    def test_multi_word_term(self, lodge_records, name_fields):
        results = FuzzyMatcher().match(lodge_records, "alpine lodge", name_fields)

        assert ids(results) == [2, 1]
        assert results[0].score == pytest.approx(EPSILON)

    def test_list_field(self, property_records):
        results = FuzzyMatcher().match(property_records, "historic", [SearchField(name="tags")])
        assert ids(results) == ["p1", "p4"]

    def test_missing_and_none_values_skipped(self, property_records):
        results = FuzzyMatcher().match(property_records, "harbor", [SearchField("rooms"), SearchField("nope")])
        assert results == []

    def test_more_matched_fields_rank_higher(self, property_records):
        fields = [SearchField("name"), SearchField("city")]
        results = FuzzyMatcher().match(property_records, "portland", fields)

        # p3 matches name and city, p1 only city
        assert ids(results) == ["p3", "p1"]
        assert results[1].score == pytest.approx(EPSILON ** 0.5)

    def test_heavier_field_ranks_higher(self):
        records = [
            {"id": 1, "title": "zzz", "body": "lodge"},
            {"id": 2, "title": "lodge", "body": "zzz"},
        ]
        fields = [SearchField("title", weight=3.0), SearchField("body", weight=1.0)]

        results = FuzzyMatcher().match(records, "lodge", fields)

        assert ids(results) == [2, 1]
        assert results[0].score == pytest.approx(EPSILON ** 0.75)
        assert results[1].score == pytest.approx(EPSILON ** 0.25)

    def test_scores_within_unit_interval(self, property_records):
        fields = [SearchField("name"), SearchField("city", 2.0), SearchField("tags")]
        results = FuzzyMatcher(threshold=1.0).match(property_records, "harbour", fields)

        assert results
        assert all(0.0 <= result.score <= 1.0 for result in results)


class TestMatchDiagnostics:
    """Test match position reporting."""

    def test_no_diagnostics_by_default(self, lodge_records):
        results = FuzzyMatcher().match(lodge_records, "lodge", [SearchField("name")])
        assert all(result.matches is None for result in results)

    def test_diagnostic_span(self, lodge_records):
        results = FuzzyMatcher(include_matches=True).match(lodge_records, "lodge", [SearchField("name")])
        diagnostic = results[0].matches[0]

        assert diagnostic.key == "name"
        assert diagnostic.value == "Alpine Lodge"
        assert diagnostic.indices == [(7, 12)]
        assert diagnostic.term == "lodge"

    def test_find_all_matches(self):
        records = [{"id": 1, "name": "Harbor Harbour"}]
        fields = [SearchField("name")]

        best_only = FuzzyMatcher(include_matches=True).match(records, "harbor", fields)
        every = FuzzyMatcher(include_matches=True, find_all_matches=True).match(records, "harbor", fields)

        assert best_only[0].matches[0].indices == [(0, 6)]
        assert every[0].matches[0].indices == [(0, 6), (7, 14)]
        assert best_only[0].score == every[0].score


class TestExtendedSearch:
    """Test extended term operators."""

    @pytest.fixture
    def matcher(self):
        return FuzzyMatcher(use_extended_search=True, include_matches=True)

    @pytest.fixture
    def name_fields(self):
        return [SearchField(name="name")]

    def test_prefix(self, matcher, lodge_records, name_fields):
        assert ids(matcher.match(lodge_records, "^alp", name_fields)) == [1, 2]

    def test_suffix(self, matcher, lodge_records, name_fields):
        results = matcher.match(lodge_records, "view$", name_fields)

        assert ids(results) == [3]
        assert results[0].matches[0].indices == [(8, 12)]

    def test_equals(self, matcher, lodge_records, name_fields):
        assert ids(matcher.match(lodge_records, "=alpine lodge", name_fields)) == [2]
        assert matcher.match(lodge_records, "=alpine", name_fields) == []

    def test_includes(self, matcher, lodge_records, name_fields):
        results = matcher.match(lodge_records, "'odge", name_fields)

        assert ids(results) == [2]
        assert results[0].matches[0].indices == [(8, 12)]
        assert results[0].score == pytest.approx(EPSILON)

    def test_inverse(self, matcher, lodge_records, name_fields):
        assert ids(matcher.match(lodge_records, "!alpine", name_fields)) == [3]

    def test_plain_term_still_fuzzy(self, matcher, lodge_records, name_fields):
        assert ids(matcher.match(lodge_records, "lodge", name_fields)) == [2, 1]

    def test_operators_ignored_without_extended_search(self, lodge_records, name_fields):
        # Punctuation is stripped, so "!alpine" is a plain fuzzy term
        assert ids(FuzzyMatcher().match(lodge_records, "!alpine", name_fields)) == [1, 2]

    def test_from_config(self):
        config = SearchConfig(threshold=0.2, use_extended_search=True, include_matches=True, should_sort=False)
        matcher = FuzzyMatcher.from_config(config)

        assert matcher.threshold == 0.2
        assert matcher.use_extended_search is True
        assert matcher.include_matches is True
        assert matcher.should_sort is False
