import threading
from dataclasses import dataclass, asdict, replace
from typing import Optional

# --- Constants ---
PAGE_SIZE = 10
SEARCH_DEBOUNCE_MS = 300
SEARCH_DEBOUNCE_SECONDS = SEARCH_DEBOUNCE_MS / 1000

SORT_ASC = "asc"
SORT_DESC = "desc"
SORTABLE_KEYS = ("name", "industry", "location", "employees")


@dataclass(frozen=True)
class QueryState:
    """Search text, filters, sort and page of one directory session."""
    search_text: str = ""
    debounced_search_text: str = ""
    location_filter: Optional[str] = None
    industry_filter: Optional[str] = None
    sort_key: str = "name"
    sort_direction: str = SORT_ASC
    current_page: int = 1

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "QueryState":
        # Unknown keys are dropped
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


def reset_query_state() -> QueryState:
    return QueryState()


# --- Update functions ---
# Each returns a new state; search and filter changes go back to page 1.

def set_search_text(state: QueryState, text: str) -> QueryState:
    return replace(state, search_text=text, current_page=1)


def set_debounced_search_text(state: QueryState, text: str) -> QueryState:
    return replace(state, debounced_search_text=text)


def _normalize_filter(value):
    return value if value else None


def set_location_filter(state: QueryState, value: Optional[str]) -> QueryState:
    return replace(state, location_filter=_normalize_filter(value), current_page=1)


def set_industry_filter(state: QueryState, value: Optional[str]) -> QueryState:
    return replace(state, industry_filter=_normalize_filter(value), current_page=1)


def toggle_sort(state: QueryState, key: str) -> QueryState:
    """Same column flips the direction, a new column starts ascending."""
    if key == state.sort_key:
        direction = SORT_DESC if state.sort_direction == SORT_ASC else SORT_ASC
        return replace(state, sort_direction=direction)
    return replace(state, sort_key=key, sort_direction=SORT_ASC)


def set_page(state: QueryState, page: int) -> QueryState:
    return replace(state, current_page=page)


# --- Debounce ---
class Debouncer:
    """
    Holds at most one pending delayed call.

    Every trigger() cancels the pending call and schedules a new one, so the
    callback only runs once the input has been quiet for `delay` seconds.
    close() cancels the pending call and ignores later triggers.
    """

    def __init__(self, delay, callback, timer_factory=threading.Timer):
        self.delay = delay
        self.callback = callback
        self._timer_factory = timer_factory
        self._timer = None
        self._generation = 0
        self._closed = False
        self._lock = threading.RLock()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def trigger(self, *args):
        with self._lock:
            if self._closed:
                return
            self._cancel_locked()
            self._generation += 1
            timer = self._timer_factory(self.delay, self._fire, args=(self._generation, args))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def _fire(self, generation, args):
        with self._lock:
            # A timer cancelled after it started running must not fire
            if self._closed or generation != self._generation:
                return
            self._timer = None
            # Runs under the lock so close() and trigger() wait for it
            self.callback(*args)

    def _cancel_locked(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def cancel(self):
        with self._lock:
            self._cancel_locked()

    def close(self):
        with self._lock:
            self._closed = True
            self._cancel_locked()
