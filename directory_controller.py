import threading
from dataclasses import dataclass

from directory_data import RecordSource
from directory_pipeline import run_pipeline
from directory_state import (
    PAGE_SIZE, SEARCH_DEBOUNCE_SECONDS, Debouncer, QueryState, reset_query_state,
    set_debounced_search_text, set_industry_filter, set_location_filter,
    set_search_text, toggle_sort,
)
from directory_table import (
    COMPANY_COLUMNS, generate_pagination_html, generate_table_html, header_clicked,
    page_control_clicked, pagination_controls,
)

EVENT_TYPES = ("search", "location", "industry", "sort", "page")


@dataclass
class DirectoryView:
    rows: list
    filtered_count: int
    total_pages: int
    header_html: str
    rows_html: str
    pagination_html: str
    summary: str
    locations: list
    industries: list
    state: QueryState


def results_summary(current_page: int, filtered_count: int) -> str:
    if filtered_count == 0:
        return "No companies found"
    first = (current_page - 1) * PAGE_SIZE + 1
    last = min(current_page * PAGE_SIZE, filtered_count)
    if first > filtered_count:
        return f"Showing 0 of {filtered_count}"
    return f"Showing {first}–{last} of {filtered_count}"


class DirectoryController:
    """
    Owns the record source and the query state of one directory session.

    Interaction handlers replace `state`; view() runs the pipeline and the
    renderers over the current state. The raw search box text is applied to
    the pipeline through a debouncer, commit_search() applies text that has
    already settled (the browser side debounces the page's search box).
    """

    def __init__(self, source, columns=None, debounce_seconds=SEARCH_DEBOUNCE_SECONDS,
                 timer_factory=threading.Timer):
        self.record_source = source if isinstance(source, RecordSource) else RecordSource(source)
        self.columns = columns or COMPANY_COLUMNS
        self.state = QueryState()
        self._lock = threading.Lock()
        self._debouncer = Debouncer(debounce_seconds, self._settle_search, timer_factory=timer_factory)

    # --- Record source ---
    def load(self):
        self.record_source.load()
        return self.record_source

    @property
    def loaded(self) -> bool:
        return self.record_source.records is not None

    # --- Interaction handlers ---
    # Every state change goes through _update; the debouncer is never called
    # while _lock is held, since the settle step takes _lock from its timer thread.
    def _update(self, change, *args) -> QueryState:
        with self._lock:
            self.state = change(self.state, *args)
            return self.state

    def search_input(self, text: str):
        self._update(set_search_text, text)
        self._debouncer.trigger(text)

    def _settle_search(self, text: str):
        self._update(set_debounced_search_text, text)

    def commit_search(self, text: str):
        self._debouncer.cancel()
        self._update(lambda state: set_debounced_search_text(set_search_text(state, text), text))

    def select_location(self, value):
        self._update(set_location_filter, value)

    def select_industry(self, value):
        self._update(set_industry_filter, value)

    def sort_by(self, key: str) -> bool:
        return header_clicked(self.columns, key, lambda k: self._update(toggle_sort, k))

    def click_page(self, label: str, total_pages: int) -> bool:
        """Applies a click on the pagination control labelled `label` ("Prev", "Next" or a page number)."""
        with self._lock:
            for control in pagination_controls(self.state.current_page, total_pages):
                if control.label == str(label):
                    before = self.state
                    self.state = page_control_clicked(self.state, control)
                    return self.state is not before
            return False

    def reset(self):
        self._debouncer.cancel()
        self._update(lambda state: reset_query_state())

    def handle_event(self, event, total_pages: int) -> bool:
        """
        Applies one event reported by the browser component.

        Returns False, leaving the state untouched, for malformed events.
        """
        if not isinstance(event, dict) or event.get("type") not in EVENT_TYPES:
            print(f"Warning: Ignoring malformed component event: {event!r}")
            return False
        event_type, value = event["type"], event.get("value")
        if event_type == "search":
            if not isinstance(value, str):
                print(f"Warning: Ignoring search event with value {value!r}")
                return False
            self.commit_search(value)
            return True
        if event_type in ("location", "industry"):
            if value is not None and not isinstance(value, str):
                print(f"Warning: Ignoring {event_type} event with value {value!r}")
                return False
            if event_type == "location":
                self.select_location(value)
            else:
                self.select_industry(value)
            return True
        if event_type == "sort":
            return self.sort_by(str(value))
        return self.click_page(str(value), total_pages)

    # --- Rendering ---
    def view(self) -> DirectoryView:
        if not self.loaded:
            raise RuntimeError("Company records are not loaded")
        records = self.record_source.records
        state = self.state
        result = run_pipeline(records, state)
        rows = result.rows.to_dicts()
        header_html, rows_html = generate_table_html(
            rows, self.columns, state.sort_key, state.sort_direction
        )
        return DirectoryView(
            rows=rows,
            filtered_count=result.filtered_count,
            total_pages=result.total_pages,
            header_html=header_html,
            rows_html=rows_html,
            pagination_html=generate_pagination_html(state.current_page, result.total_pages),
            summary=results_summary(state.current_page, result.filtered_count),
            locations=self.record_source.locations,
            industries=self.record_source.industries,
            state=state,
        )

    def close(self):
        self._debouncer.close()
