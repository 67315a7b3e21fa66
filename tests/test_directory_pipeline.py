"""
Tests for the search, filter, sort and paginate pipeline.
"""

import math

import polars as pl
import pytest

from directory_pipeline import (
    industry_filter, location_filter, paginate, run_pipeline, sort_companies,
    text_filter, total_pages,
)
from directory_state import QueryState, set_industry_filter, set_location_filter, toggle_sort


def names(frame):
    return frame.get_column("name").to_list()


@pytest.fixture
def mixed_case():
    return pl.DataFrame([
        {"id": 1, "name": "beta", "industry": "Tech", "location": "NY", "employees": 5, "website": "x"},
        {"id": 2, "name": "Alpha", "industry": "Finance", "location": "ny", "employees": 5, "website": "x"},
        {"id": 3, "name": "Charlie", "industry": "Tech", "location": "Paris", "employees": 20, "website": "x"},
        {"id": 4, "name": "alpha", "industry": "Retail", "location": "NY", "employees": 1, "website": "x"},
    ])


class TestTextFilter:
    def test_empty_text_keeps_everything(self, mixed_case):
        assert text_filter(mixed_case, "").equals(mixed_case)

    def test_case_insensitive_over_name_industry_location(self, mixed_case):
        assert names(text_filter(mixed_case, "ALPHA")) == ["Alpha", "alpha"]
        assert names(text_filter(mixed_case, "tech")) == ["beta", "Charlie"]
        assert names(text_filter(mixed_case, "pAris")) == ["Charlie"]

    def test_matches_across_the_separator(self, mixed_case):
        # name + " " + industry + " " + location
        assert names(text_filter(mixed_case, "beta tech")) == ["beta"]

    def test_null_field_does_not_hide_row(self):
        frame = pl.DataFrame([
            {"id": 1, "name": "Acme", "industry": None, "location": "NY", "employees": 5, "website": "x"},
            {"id": 2, "name": "Beta", "industry": "Tech", "location": None, "employees": 5, "website": "x"},
        ])
        assert names(text_filter(frame, "acme")) == ["Acme"]
        assert names(text_filter(frame, "ny")) == ["Acme"]
        assert names(text_filter(frame, "beta tech")) == ["Beta"]

    def test_regex_characters_are_literal(self, mixed_case):
        assert text_filter(mixed_case, ".*").height == 0

    def test_result_is_subset_and_contains_text(self, companies_25):
        result = text_filter(companies_25, "1")
        assert set(result.get_column("id").to_list()) <= set(companies_25.get_column("id").to_list())
        for row in result.to_dicts():
            haystack = " ".join([row["name"], row["industry"], row["location"]]).lower()
            assert "1" in haystack


class TestCategoricalFilters:
    def test_unset_filter_keeps_everything(self, mixed_case):
        assert location_filter(mixed_case, None).height == 4
        assert industry_filter(mixed_case, "").height == 4

    def test_location_is_exact_and_case_sensitive(self, mixed_case):
        assert names(location_filter(mixed_case, "NY")) == ["beta", "alpha"]
        assert names(location_filter(mixed_case, "ny")) == ["Alpha"]

    def test_industry_filter(self, mixed_case):
        assert names(industry_filter(mixed_case, "Tech")) == ["beta", "Charlie"]


class TestSort:
    def test_strings_ignore_case(self, mixed_case):
        assert names(sort_companies(mixed_case, "name", "asc")) == ["Alpha", "alpha", "beta", "Charlie"]

    def test_ties_keep_input_order_in_both_directions(self, mixed_case):
        assert names(sort_companies(mixed_case, "employees", "asc")) == ["alpha", "beta", "Alpha", "Charlie"]
        assert names(sort_companies(mixed_case, "employees", "desc")) == ["Charlie", "beta", "Alpha", "alpha"]

    def test_descending_strings(self, mixed_case):
        assert names(sort_companies(mixed_case, "name", "desc")) == ["Charlie", "beta", "Alpha", "alpha"]

    def test_numbers_use_native_order(self):
        frame = pl.DataFrame({"name": ["a", "b", "c"], "employees": [100, 9, 20]})
        assert sort_companies(frame, "employees", "asc").get_column("employees").to_list() == [9, 20, 100]

    @pytest.mark.parametrize("key", ["name", "industry", "location", "employees"])
    @pytest.mark.parametrize("direction", ["asc", "desc"])
    def test_permutation_and_idempotent(self, companies_25, key, direction):
        once = sort_companies(companies_25, key, direction)
        twice = sort_companies(once, key, direction)
        assert sorted(once.get_column("id").to_list()) == sorted(companies_25.get_column("id").to_list())
        assert twice.equals(once)

    def test_unknown_key_leaves_order(self, mixed_case):
        assert sort_companies(mixed_case, "revenue", "asc").equals(mixed_case)


class TestPagination:
    @pytest.mark.parametrize("count", [0, 1, 9, 10, 11, 25, 30])
    def test_total_pages(self, count):
        assert total_pages(count) == math.ceil(count / 10)

    def test_page_slices(self, companies_factory):
        frame = companies_factory(25)
        pages = [paginate(frame, page) for page in range(1, 4)]
        assert [p.height for p in pages] == [10, 10, 5]
        ids = [i for p in pages for i in p.get_column("id").to_list()]
        assert ids == list(range(1, 26))

    def test_out_of_range_page_is_empty(self, companies_factory):
        frame = companies_factory(5)
        assert paginate(frame, 2).height == 0
        assert paginate(frame, 0).height == 0


class TestRunPipeline:
    def test_default_state_orders_by_name(self, acme_beta):
        result = run_pipeline(acme_beta, QueryState())
        assert names(result.rows) == ["Acme", "Beta"]
        assert result.total_pages == 1

    def test_location_then_industry_filter(self, acme_beta):
        state = set_location_filter(QueryState(), "NY")
        assert names(run_pipeline(acme_beta, state).rows) == ["Acme", "Beta"]

        state = set_industry_filter(state, "Finance")
        result = run_pipeline(acme_beta, state)
        assert names(result.rows) == ["Beta"]
        assert result.total_pages == 1

    def test_twenty_five_records(self, companies_25):
        page_1 = run_pipeline(companies_25, QueryState())
        assert page_1.total_pages == 3
        assert page_1.rows.get_column("id").to_list() == list(range(1, 11))

        page_3 = run_pipeline(companies_25, QueryState(current_page=3))
        assert page_3.rows.get_column("id").to_list() == list(range(21, 26))

    def test_employees_double_click_reverses_rows(self, companies_factory):
        # Ten companies with distinct head counts, so one page holds them all
        frame = companies_factory(10)
        state = toggle_sort(QueryState(), "employees")
        asc_ids = run_pipeline(frame, state).rows.get_column("id").to_list()
        assert run_pipeline(frame, state).rows.get_column("employees").is_sorted()

        state = toggle_sort(state, "employees")
        desc_ids = run_pipeline(frame, state).rows.get_column("id").to_list()
        assert state.sort_direction == "desc"
        assert desc_ids == asc_ids[::-1]

    def test_search_uses_debounced_text_only(self, acme_beta):
        state = QueryState(search_text="beta", debounced_search_text="")
        assert run_pipeline(acme_beta, state).filtered_count == 2
        state = QueryState(search_text="beta", debounced_search_text="beta")
        assert names(run_pipeline(acme_beta, state).rows) == ["Beta"]

    def test_no_matches(self, acme_beta):
        result = run_pipeline(acme_beta, QueryState(debounced_search_text="zzz"))
        assert result.filtered_count == 0
        assert result.total_pages == 0
        assert result.rows.height == 0

    def test_stale_page_is_not_corrected(self, companies_25):
        state = QueryState(current_page=3, location_filter="NY")
        result = run_pipeline(companies_25, state)
        assert result.total_pages == 1
        assert result.rows.height == 0
