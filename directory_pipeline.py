import math
from dataclasses import dataclass

import polars as pl

from directory_state import PAGE_SIZE, SORT_DESC, QueryState

SEARCH_COLUMNS = ["name", "industry", "location"]


@dataclass
class PipelineResult:
    rows: pl.DataFrame
    filtered_count: int
    total_pages: int


# --- Filtering ---
def _search_text_expr() -> pl.Expr:
    # A missing field contributes an empty string, the row stays searchable
    fields = [pl.col(c).cast(pl.Utf8).fill_null("") for c in SEARCH_COLUMNS]
    return pl.concat_str(fields, separator=" ").str.to_lowercase()


def _text_filter(lf: pl.LazyFrame, text: str) -> pl.LazyFrame:
    if not text:
        return lf
    # Literal match, the search box is not a regex
    return lf.filter(_search_text_expr().str.contains(text.lower(), literal=True))


def _equals_filter(lf: pl.LazyFrame, column: str, value) -> pl.LazyFrame:
    if not value:
        return lf
    return lf.filter(pl.col(column) == value)


def text_filter(records: pl.DataFrame, text: str) -> pl.DataFrame:
    """Rows whose name, industry and location contain `text`, ignoring case."""
    return _text_filter(records.lazy(), text).collect()


def location_filter(records: pl.DataFrame, value) -> pl.DataFrame:
    return _equals_filter(records.lazy(), "location", value).collect()


def industry_filter(records: pl.DataFrame, value) -> pl.DataFrame:
    return _equals_filter(records.lazy(), "industry", value).collect()


# --- Sorting ---
def _sort(lf: pl.LazyFrame, key: str, direction: str) -> pl.LazyFrame:
    column_names = lf.collect_schema().names()
    if key not in column_names:
        print(f"Warning: Sort column '{key}' not found in LazyFrame.")
        return lf
    sort_expr = pl.col(key)
    if lf.collect_schema()[key] == pl.Utf8:
        sort_expr = sort_expr.str.to_lowercase()
    return lf.sort(sort_expr, descending=direction == SORT_DESC, nulls_last=True, maintain_order=True)


def sort_companies(records: pl.DataFrame, key: str, direction: str) -> pl.DataFrame:
    """Stable sort on `key`, strings compared case-insensitively."""
    return _sort(records.lazy(), key, direction).collect()


# --- Pagination ---
def total_pages(count: int) -> int:
    return math.ceil(count / PAGE_SIZE)


def paginate(records: pl.DataFrame, page: int) -> pl.DataFrame:
    """The PAGE_SIZE rows of 1-based `page`; empty when the page is out of range."""
    if page < 1:
        return records.clear()
    return records.slice((page - 1) * PAGE_SIZE, PAGE_SIZE)


def apply_filters_and_sort(lf: pl.LazyFrame, state: QueryState) -> pl.LazyFrame:
    """Applies the search text, both dropdown filters and the sort to a LazyFrame."""
    lf = _text_filter(lf, state.debounced_search_text)
    lf = _equals_filter(lf, "location", state.location_filter)
    lf = _equals_filter(lf, "industry", state.industry_filter)
    return _sort(lf, state.sort_key, state.sort_direction)


def run_pipeline(records: pl.DataFrame, state: QueryState) -> PipelineResult:
    filtered = apply_filters_and_sort(records.lazy(), state).collect()
    return PipelineResult(
        rows=paginate(filtered, state.current_page),
        filtered_count=filtered.height,
        total_pages=total_pages(filtered.height),
    )
