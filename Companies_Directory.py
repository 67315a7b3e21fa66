import json
import os
import time

import streamlit as st

from directory_component import create_directory_component
from directory_controller import DirectoryController
from directory_state import SEARCH_DEBOUNCE_MS

# --- Constants ---
COMPANIES_SOURCE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "companies.json")

st.set_page_config(
    layout="wide",
    page_icon="🏢",
    page_title="Companies Directory",
    initial_sidebar_state="collapsed"
)

st.markdown("## Companies Directory")


# --- Initialize Session State ---
if 'controller' not in st.session_state:
    st.session_state.controller = DirectoryController(COMPANIES_SOURCE)
if 'last_event_seq' not in st.session_state:
    st.session_state.last_event_seq = 0

controller = st.session_state.controller


# --- Load Records (once per session) ---
if controller.record_source.loading:
    placeholder = st.empty()
    with placeholder.container():
        with st.spinner("Loading companies..."):
            start_load_time = time.time()
            controller.load()
            print(f"Company load finished with status '{controller.record_source.status}' "
                  f"(took {time.time() - start_load_time:.2f}s)")
    placeholder.empty()

if controller.record_source.error:
    print(f"Load failure: {controller.record_source.failure!r} (cause: {controller.record_source.failure.__cause__!r})")
    st.error(controller.record_source.error)
    st.stop()


# --- Reset Button Callback Function ---
def reset_app_state():
    """Restores the default search, filters, sort and page."""
    print("--- Reset Button Clicked: Resetting Query State ---")
    st.session_state.controller.reset()


st.button("Reset Filters", on_click=reset_app_state, key="native_reset_button")


# --- Apply the latest component event ---
table_component = create_directory_component()

# The component value is available under its key before the component is drawn
component_event = st.session_state.get("directory_event")
if isinstance(component_event, dict) and component_event.get("seq") != st.session_state.last_event_seq:
    print(f"Received component event: {json.dumps(component_event)}")
    st.session_state.last_event_seq = component_event.get("seq")
    # Search events arrive already debounced, so the page goes back to 1 when
    # the search settles rather than on each keystroke
    # Page clicks are checked against the page count the user was looking at
    previous_total_pages = st.session_state.get("total_pages", 0)
    if not controller.handle_event(component_event, previous_total_pages):
        print("Component event was not applied.")
else:
    print("No new component event. Using existing query state.")

print(f"State for Calculations: {json.dumps(controller.state.to_dict())}")


# --- Run Pipeline and Render ---
start_pipeline_time = time.time()
view = controller.view()
st.session_state.total_pages = view.total_pages
print(f"Pipeline: {view.filtered_count} matches, page {view.state.current_page}/{view.total_pages} "
      f"(took {time.time() - start_pipeline_time:.3f}s)")

component_data_payload = {
    "state": view.state.to_dict(),
    "header_html": view.header_html,
    "rows_html": view.rows_html,
    "pagination_html": view.pagination_html,
    "summary": view.summary,
    "locations": view.locations,
    "industries": view.industries,
    "debounce_ms": SEARCH_DEBOUNCE_MS,
    "last_seq": st.session_state.last_event_seq,
}

table_component(
    component_data=component_data_payload,
    key="directory_event",
    default=None
)
