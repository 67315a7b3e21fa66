import os
import tempfile

import streamlit.components.v1 as components


# --- Component Generation ---
# Minimal copy of the Streamlit component messaging API, inlined in the HTML shell.
def generate_component(name, template="", script=""):
    component_dir = f"{tempfile.gettempdir()}/{name}"
    os.makedirs(component_dir, exist_ok=True)
    fname = f"{component_dir}/index.html"
    with open(fname, 'w', encoding='utf-8') as f:
        f.write(f"""
            <!DOCTYPE html>
            <html lang="en">
            <head>
                <meta charset="UTF-8" />
                <title>{name}</title>
                <script>
                    function sendMessageToStreamlitClient(type, data) {{
                        const outData = Object.assign({{
                            isStreamlitMessage: true,
                            type: type,
                        }}, data);
                        window.parent.postMessage(outData, "*");
                    }}

                    const Streamlit = {{
                        setComponentReady: function() {{
                            sendMessageToStreamlitClient("streamlit:componentReady", {{apiVersion: 1}});
                        }},
                        setFrameHeight: function(height) {{
                            sendMessageToStreamlitClient("streamlit:setFrameHeight", {{height: height}});
                        }},
                        setComponentValue: function(value) {{
                            sendMessageToStreamlitClient("streamlit:setComponentValue", {{value: value}});
                        }},
                        RENDER_EVENT: "streamlit:render",
                        events: {{
                            addEventListener: function(type, callback) {{
                                window.addEventListener("message", function(event) {{
                                    if (event.data.type === type) {{
                                        event.detail = event.data
                                        callback(event);
                                    }}
                                }});
                            }}
                        }}
                    }}
                </script>
                {template}
            </head>
            <body>
                <div id="component-root"></div>
            </body>
            <script>
                {script}
            </script>
            </html>
        """)

    _component_func = components.declare_component(name, path=component_dir)

    def component_wrapper(component_data, key=None, default=None):
        return _component_func(component_data=component_data, key=key, default=default)
    return component_wrapper


css = """
<style>
    body {
        font-family: 'Source Sans Pro', sans-serif;
        margin: 0;
        color: #212529;
    }
    .directory-card {
        background: white;
        border-radius: 8px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.08);
        padding: 16px;
    }
    .table-controls {
        display: flex;
        flex-wrap: wrap;
        gap: 12px;
        margin-bottom: 16px;
    }
    .table-controls input,
    .table-controls select {
        flex: 1 1 220px;
        padding: 8px 12px;
        border: 1px solid #ced4da;
        border-radius: 6px;
        font-size: 14px;
    }
    .table-wrapper {
        overflow-x: auto;
    }
    table {
        width: 100%;
        border-collapse: collapse;
        font-size: 14px;
    }
    th, td {
        border: 1px solid #dee2e6;
        padding: 8px 12px;
        text-align: left;
    }
    thead th {
        background: #cfe2ff;
        user-select: none;
    }
    tbody tr:nth-child(odd) {
        background: #f8f9fa;
    }
    .sortable-column {
        cursor: pointer;
    }
    .sortable-column:hover {
        background: #b6d4fe;
    }
    .sort-icon {
        margin-left: 6px;
        color: #0d6efd;
        font-size: 11px;
    }
    .website-link {
        color: #6c757d;
        font-weight: 600;
        text-decoration: none;
    }
    .results-summary {
        margin-top: 12px;
        color: #6c757d;
        font-size: 13px;
        text-align: center;
    }
    .pagination {
        display: flex;
        flex-wrap: wrap;
        justify-content: center;
        gap: 4px;
        margin-top: 12px;
    }
    .page-btn {
        border: 1px solid #dee2e6;
        background: white;
        color: #0d6efd;
        border-radius: 4px;
        padding: 6px 12px;
        cursor: pointer;
    }
    .page-btn.active {
        background: #0d6efd;
        border-color: #0d6efd;
        color: white;
    }
    .page-btn:disabled {
        color: #adb5bd;
        cursor: default;
    }
</style>
"""

script = """
function debounce(func, wait) {
    let timeout;
    return function executedFunction(...args) {
        const later = () => {
            clearTimeout(timeout);
            func.apply(this, args);
        };
        clearTimeout(timeout);
        timeout = setTimeout(later, wait);
    };
}

function escapeHtml(text) {
    const div = document.createElement('div');
    div.textContent = text;
    return div.innerHTML;
}

class DirectoryManager {
    constructor(initialData) {
        this.componentRoot = document.getElementById('component-root');
        // Continue numbering after the last event Python applied
        this.seq = initialData.last_seq || 0;
        this.renderHTMLStructure();
        this.bindStaticElements(initialData.debounce_ms || 300);
        this.update(initialData);
    }

    renderHTMLStructure() {
        this.componentRoot.innerHTML = `
            <div class="directory-card">
                <div class="table-controls">
                    <input id="table-search" type="text" placeholder="Search Companies..." autocomplete="off">
                    <select id="location-filter"></select>
                    <select id="industry-filter"></select>
                </div>
                <div class="table-wrapper">
                    <table>
                        <thead><tr id="table-header"></tr></thead>
                        <tbody id="table-body"></tbody>
                    </table>
                </div>
                <div id="results-summary" class="results-summary"></div>
                <nav id="pagination" class="pagination"></nav>
            </div>
        `;
    }

    bindStaticElements(debounceMs) {
        this.searchInput = document.getElementById('table-search');
        this.searchInput.addEventListener('input', debounce((e) => {
            this.sendEvent('search', e.target.value);
        }, debounceMs));

        this.locationSelect = document.getElementById('location-filter');
        this.locationSelect.addEventListener('change', (e) => {
            this.sendEvent('location', e.target.value || null);
        });
        this.industrySelect = document.getElementById('industry-filter');
        this.industrySelect.addEventListener('change', (e) => {
            this.sendEvent('industry', e.target.value || null);
        });

        document.getElementById('table-header').addEventListener('click', (e) => {
            const th = e.target.closest('th.sortable-column');
            if (th) {
                this.sendEvent('sort', th.dataset.key);
            }
        });

        document.getElementById('pagination').addEventListener('click', (e) => {
            const button = e.target.closest('button.page-btn');
            if (button && !button.disabled) {
                this.sendEvent('page', button.textContent.trim());
            }
        });
    }

    fillSelect(select, allLabel, options, selected) {
        const items = [`<option value="">${allLabel}</option>`].concat(
            options.map(opt => `<option value="${escapeHtml(opt)}">${escapeHtml(opt)}</option>`)
        );
        select.innerHTML = items.join('');
        select.value = selected || '';
    }

    update(data) {
        const state = data.state || {};
        // Leave the box alone while the user is typing in it
        if (document.activeElement !== this.searchInput) {
            this.searchInput.value = state.search_text || '';
        }
        this.fillSelect(this.locationSelect, 'All Locations', data.locations || [], state.location_filter);
        this.fillSelect(this.industrySelect, 'All Industries', data.industries || [], state.industry_filter);

        document.getElementById('table-header').innerHTML = data.header_html || '';
        document.getElementById('table-body').innerHTML = data.rows_html || '';
        document.getElementById('results-summary').textContent = data.summary || '';
        document.getElementById('pagination').innerHTML = data.pagination_html || '';
        this.adjustHeight();
    }

    sendEvent(type, value) {
        this.seq += 1;
        const event = {seq: this.seq, type: type, value: value};
        console.log("Sending event:", event);
        Streamlit.setComponentValue(event);
    }

    adjustHeight() {
        requestAnimationFrame(() => {
            Streamlit.setFrameHeight(this.componentRoot.scrollHeight + 20);
        });
    }
}

function onRender(event) {
    const data = event.detail.args.component_data;
    if (!data) {
        console.warn("onRender called with no data. Skipping update.");
        return;
    }
    if (!window.directoryManager) {
        window.directoryManager = new DirectoryManager(data);
    } else {
        window.directoryManager.update(data);
    }
}

Streamlit.events.addEventListener(Streamlit.RENDER_EVENT, onRender);
Streamlit.setComponentReady();
"""


def create_directory_component():
    return generate_component('companies_directory', template=css, script=script)
