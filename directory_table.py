import html
from dataclasses import dataclass
from typing import Callable, Optional

from directory_state import SORT_ASC, QueryState, set_page

ASC_ICON = "&#9650;"
DESC_ICON = "&#9660;"


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    sortable: bool = False
    render: Optional[Callable[[dict], str]] = None

    def cell_html(self, row: dict) -> str:
        if self.render is not None:
            return self.render(row)
        value = row.get(self.key)
        return html.escape(str(value)) if value is not None else ""


def render_website(row: dict) -> str:
    url = row.get("website") or "#"
    return (
        f'<a href="{html.escape(url)}" target="_blank" rel="noreferrer" '
        f'class="website-link" title="{html.escape(url)}">Visit &#8599;</a>'
    )


COMPANY_COLUMNS = [
    Column("name", "Name", sortable=True),
    Column("industry", "Industry", sortable=True),
    Column("location", "Location", sortable=True),
    Column("employees", "Employees", sortable=True),
    Column("website", "Website", sortable=False, render=render_website),
]


# --- Table ---
def _header_cell(column: Column, sort_key: str, sort_direction: str) -> str:
    label = html.escape(column.label)
    if not column.sortable:
        return f'<th scope="col">{label}</th>'
    icon = ""
    if column.key == sort_key:
        icon = ASC_ICON if sort_direction == SORT_ASC else DESC_ICON
        icon = f'<span class="sort-icon">{icon}</span>'
    return (
        f'<th scope="col" class="sortable-column" data-key="{html.escape(column.key)}">'
        f'<span>{label}{icon}</span></th>'
    )


def generate_table_html(rows, columns, sort_key: str, sort_direction: str):
    """
    Renders `rows` (dicts, already sorted and paginated) as table header and
    body HTML.

    Returns (header_html, rows_html). Rows keep their input order.
    """
    header_html = "".join(_header_cell(col, sort_key, sort_direction) for col in columns)
    if not rows:
        return header_html, f'<tr><td colspan="{len(columns)}">No companies match the current filters.</td></tr>'

    rows_html = ""
    for row in rows:
        cells = "".join(f"<td>{col.cell_html(row)}</td>" for col in columns)
        rows_html += f'<tr class="table-row" data-id="{html.escape(str(row.get("id", "")))}">{cells}</tr>'
    return header_html, rows_html


def header_clicked(columns, key: str, on_sort) -> bool:
    """Calls on_sort(key) for a sortable column. Returns whether it was called."""
    for col in columns:
        if col.key == key:
            if col.sortable:
                on_sort(key)
                return True
            return False
    return False


# --- Pagination ---
@dataclass(frozen=True)
class PageControl:
    label: str
    page: int
    disabled: bool = False
    active: bool = False


def pagination_controls(current_page: int, total_pages: int) -> list:
    controls = [PageControl("Prev", current_page - 1, disabled=current_page == 1)]
    for page in range(1, total_pages + 1):
        controls.append(PageControl(str(page), page, active=page == current_page))
    next_disabled = total_pages == 0 or current_page == total_pages
    controls.append(PageControl("Next", current_page + 1, disabled=next_disabled))
    return controls


def generate_pagination_html(current_page: int, total_pages: int) -> str:
    buttons = []
    for control in pagination_controls(current_page, total_pages):
        classes = ["page-btn"]
        if control.label in ("Prev", "Next"):
            classes.append(f"page-{control.label.lower()}")
        else:
            classes.append("page-number")
        if control.active:
            classes.append("active")
        disabled = " disabled" if control.disabled else ""
        buttons.append(
            f'<button class="{" ".join(classes)}" data-page="{control.page}"{disabled}>'
            f'{html.escape(control.label)}</button>'
        )
    return "".join(buttons)


def page_control_clicked(state: QueryState, control: PageControl) -> QueryState:
    # Disabled Prev/Next are the only guard against leaving 1..total_pages
    if control.disabled:
        return state
    return set_page(state, control.page)
