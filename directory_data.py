import json
import os

import polars as pl
import requests

RECORD_FIELDS = ("id", "name", "industry", "location", "employees", "website")
TEXT_COLUMNS = ("name", "industry", "location", "website")
LOAD_FAILURE_MESSAGE = "Failed to load companies"

STATUS_PENDING = "pending"
STATUS_LOADED = "loaded"
STATUS_FAILED = "failed"


class LoadFailure(Exception):
    """The company list could not be retrieved or was not a valid record list."""


def _read_payload(source: str) -> bytes:
    if source.startswith(("http://", "https://")):
        try:
            response = requests.get(source)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise LoadFailure(f"Cannot load {source}") from e
        return response.content

    if not os.path.exists(source):
        raise LoadFailure(f"Data source not found at '{source}'")
    try:
        with open(source, "rb") as f:
            return f.read()
    except OSError as e:
        raise LoadFailure(f"Cannot read {source}") from e


def fetch_companies(source: str) -> pl.DataFrame:
    """Retrieves the JSON array of company records at `source` as a DataFrame."""
    payload = _read_payload(source)

    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LoadFailure(f"Error decoding JSON from '{source}'") from e
    if not isinstance(data, list):
        raise LoadFailure(f"Expected a JSON array of companies in '{source}'")

    if not data:
        return pl.DataFrame(schema={
            "id": pl.Int64, "name": pl.Utf8, "industry": pl.Utf8,
            "location": pl.Utf8, "employees": pl.Int64, "website": pl.Utf8,
        })

    if not all(isinstance(item, dict) for item in data):
        raise LoadFailure(f"Expected company objects in '{source}'")
    missing = [col for col in RECORD_FIELDS if not all(col in item for item in data)]
    if missing:
        raise LoadFailure(f"Company records in '{source}' are missing fields: {missing}")

    # Keep only the known fields, in a fixed column order
    rows = [{col: item[col] for col in RECORD_FIELDS} for item in data]
    try:
        records = pl.DataFrame(rows, infer_schema_length=None)
    except (pl.exceptions.PolarsError, TypeError, ValueError) as e:
        raise LoadFailure(f"Company records in '{source}' have mixed field types") from e

    schema = records.schema
    if not schema["employees"].is_integer():
        raise LoadFailure(f"Company 'employees' in '{source}' must be integers")
    if any(schema[col] != pl.Utf8 for col in TEXT_COLUMNS):
        raise LoadFailure(f"Company text fields in '{source}' must be strings")

    if records.get_column("id").n_unique() != records.height:
        raise LoadFailure(f"Company records in '{source}' contain duplicate ids")
    return records


def distinct_values(records: pl.DataFrame, column: str) -> list:
    """Distinct values of `column` over the full record set, in first-seen order."""
    return records.get_column(column).unique(maintain_order=True).drop_nulls().to_list()


class RecordSource:
    """
    One-shot holder for the company list.

    Starts pending; load() retrieves once and ends either loaded (records
    available) or failed (error holds the user-facing message). Later load()
    calls do nothing, there is no retry.
    """

    def __init__(self, source: str, fetch=fetch_companies):
        self.source = source
        self._fetch = fetch
        self.status = STATUS_PENDING
        self.records = None
        self.error = None
        self.failure = None

    @property
    def loading(self) -> bool:
        return self.status == STATUS_PENDING

    def load(self):
        if self.status != STATUS_PENDING:
            return self
        try:
            self.records = self._fetch(self.source)
        except LoadFailure as e:
            self.failure = e
            self.error = LOAD_FAILURE_MESSAGE
            self.status = STATUS_FAILED
        else:
            self.status = STATUS_LOADED
        return self

    @property
    def locations(self) -> list:
        return distinct_values(self.records, "location") if self.records is not None else []

    @property
    def industries(self) -> list:
        return distinct_values(self.records, "industry") if self.records is not None else []
