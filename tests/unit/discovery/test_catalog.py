"""
Unit tests for catalog filtering and ranking.
"""

import pytest

from ticket_classifier.discovery.catalog import (
    best_model_id,
    filter_and_rank,
    is_active,
    is_chat_model,
    is_free_model,
    ranking_score,
)


class TestPredicates:
    """Test suite for the free / chat / active predicates."""

    def test_free_by_suffix(self):
        assert is_free_model({"id": "vendor/model:free", "pricing": {"prompt": "0.01"}})

    def test_free_by_zero_pricing(self):
        assert is_free_model({"id": "vendor/model", "pricing": {"prompt": "0", "completion": "0.0"}})

    def test_paid_model(self):
        assert not is_free_model({"id": "vendor/model", "pricing": {"prompt": "0.000001", "completion": "0"}})

    def test_no_pricing_is_not_free(self):
        assert not is_free_model({"id": "vendor/model"})

    def test_chat_modality(self):
        assert is_chat_model({"architecture": {"modality": "text->text"}})
        assert is_chat_model({})
        assert not is_chat_model({"architecture": {"modality": "text+image->text"}})

    def test_inactive_markers(self):
        assert is_active({"pricing": {"prompt": "0"}})
        assert not is_active({"active": False})
        assert not is_active({"pricing": {"prompt": "-1"}})
        assert not is_active({"pricing": {"prompt": -1}})


class TestRankingScore:
    """Test suite for the ranking formula."""

    def test_context_and_completion(self):
        model = {"context_length": 128000, "top_provider": {"max_completion_tokens": 4096}}
        # 128 + 40.96
        assert ranking_score(model) == 168

    def test_popularity_capped(self):
        model = {"context_length": 0, "pricing": {"requests": 50_000_000}}
        assert ranking_score(model) == 100

    def test_missing_fields_score_zero(self):
        assert ranking_score({"id": "x"}) == 0


class TestFilterAndRank:
    """Test suite for filter_and_rank on a realistic catalog."""

    def test_sample_catalog(self, sample_catalog):
        ranked = filter_and_rank(sample_catalog, min_ranking=50, max_models=10)

        assert [d.id for d in ranked] == [
            "google/gemini-2.0-flash-exp:free",
            "qwen/qwen3-coder:free",
            "meta-llama/llama-3.2-3b-instruct:free",
            "community/zero-priced",
        ]
        assert ranked[0].display_name == "Google: Gemini 2.0 Flash Experimental (free)"
        assert ranked[0].ranking_score == 1130
        assert ranked[0].context_length == 1048576

    def test_scores_descending(self, sample_catalog):
        ranked = filter_and_rank(sample_catalog)
        scores = [d.ranking_score for d in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_max_models_truncates(self, sample_catalog):
        ranked = filter_and_rank(sample_catalog, max_models=2)
        assert [d.id for d in ranked] == ["google/gemini-2.0-flash-exp:free", "qwen/qwen3-coder:free"]

    def test_min_ranking_filters(self, sample_catalog):
        ranked = filter_and_rank(sample_catalog, min_ranking=200)
        assert [d.id for d in ranked] == ["google/gemini-2.0-flash-exp:free", "qwen/qwen3-coder:free"]

    def test_ties_keep_catalog_order(self):
        models = [
            {"id": f"vendor/m{i}:free", "context_length": 100_000} for i in range(3)
        ]
        ranked = filter_and_rank(models, min_ranking=0)
        assert [d.id for d in ranked] == ["vendor/m0:free", "vendor/m1:free", "vendor/m2:free"]

    def test_larger_context_ranks_first(self):
        common = {"pricing": {"prompt": "0", "completion": "0"}, "top_provider": {"max_completion_tokens": 1024}}
        models = [
            {"id": "vendor/small:free", "context_length": 2048, **common},
            {"id": "vendor/large:free", "context_length": 8192, **common},
        ]

        ranked = filter_and_rank(models, min_ranking=0)

        assert [d.id for d in ranked] == ["vendor/large:free", "vendor/small:free"]
        assert ranked[0].ranking_score > ranked[1].ranking_score

    @pytest.mark.parametrize("catalog", [[], [None, "junk", {"name": "no id"}]])
    def test_empty_or_malformed(self, catalog):
        assert filter_and_rank(catalog) == []

    def test_entries_with_bad_types_are_skipped(self):
        models = [
            {"id": 12345, "context_length": 200000, "pricing": {"prompt": "0", "completion": "0"}},
            {"id": "", "context_length": 200000},
            {"id": "vendor/listname:free", "name": {"en": "x"}, "context_length": 200000},
        ]

        ranked = filter_and_rank(models, min_ranking=0)

        assert [d.id for d in ranked] == ["vendor/listname:free"]
        assert ranked[0].display_name == "vendor/listname:free"

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan"), "Infinity"])
    def test_non_finite_numbers_score_zero(self, value):
        model = {"id": "vendor/m:free", "context_length": value, "top_provider": {"max_completion_tokens": value}}

        assert ranking_score(model) == 0
        assert filter_and_rank([model], min_ranking=0)[0].context_length == 0


def test_best_model_id(sample_catalog):
    assert best_model_id(filter_and_rank(sample_catalog)) == "google/gemini-2.0-flash-exp:free"
    assert best_model_id([]) is None
