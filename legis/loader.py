"""
Dataset loader (CSV -> LegisRecord list)
========================================

This module reads the legislation CSV export and converts each row into a
`LegisRecord`.

Key ideas:
- Every cell is read as text; pandas handles the quoting rules.
- Column names are matched exactly first, then by a normalized form, so a
  header like "descricao" still resolves to "Descrição".
- Filterable columns are split on ';' and trimmed; an empty cell becomes an
  empty tuple, never ("",).
- A non-integer item in an INTEGER column fails the whole load.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
import logging
import os
import re
from types import MappingProxyType
import unicodedata

import pandas as pd

from .catalog import FILTERS, REQUIRED_COLUMNS
from .models import FilterDefinition, LegisRecord

LOGGER = logging.getLogger(__name__)

SEPARATOR = ";"


class LoadError(Exception):
    """The dataset file could not be read or does not have the expected shape."""


class FieldParseError(LoadError):
    """A cell of a typed column holds an item that cannot be converted."""

    def __init__(self, row: int, column: str, item: str) -> None:
        # row is the record id; the header is line 1 of the file
        super().__init__(
            f"Record {row} (line {row + 2}), column {column!r}: cannot parse {item!r} as integer"
        )
        self.row = row
        self.column = column
        self.item = item


def _to_str(x) -> str:
    if x is None:
        return ""
    try:
        if pd.isna(x):
            return ""
    except (TypeError, ValueError):
        pass
    return str(x).strip()


def _norm(s: str) -> str:
    s = unicodedata.normalize("NFKD", str(s))
    s = "".join(c for c in s if not unicodedata.combining(c))
    return re.sub(r"[^a-z0-9]+", "", s.lower())


def _col(columns: Sequence[str], name: str) -> Optional[str]:
    if name in columns:
        return name
    norm_map = {_norm(c): c for c in columns}
    return norm_map.get(_norm(name))


def split_field(raw: Any) -> List[str]:
    """Split a multi-valued cell on ';' and trim each item.

    >>> split_field(" A; B ;C")
    ['A', 'B', 'C']
    >>> split_field("")
    []
    """
    text = _to_str(raw)
    if text == "":
        return []
    return [part.strip() for part in text.split(SEPARATOR)]


def normalize_field(raw: Any, definition: FilterDefinition) -> tuple:
    return tuple(definition.field_type.coerce(item) for item in split_field(raw))


def normalize_record(
    row: Mapping[str, Any],
    record_id: int,
    catalog: Sequence[FilterDefinition] = FILTERS,
) -> LegisRecord:
    """Build one `LegisRecord` from a raw row (column -> cell text)."""
    fields: Dict[str, Any] = {str(k): _to_str(v) for k, v in row.items()}
    for f in catalog:
        items = split_field(row.get(f.source))
        values = []
        for item in items:
            try:
                values.append(f.field_type.coerce(item))
            except ValueError:
                raise FieldParseError(record_id, f.source, item) from None
        fields[f.source] = tuple(values)
    return LegisRecord(record_id=record_id, fields=MappingProxyType(fields))


def normalize_records(
    rows: Iterable[Mapping[str, Any]],
    catalog: Sequence[FilterDefinition] = FILTERS,
) -> List[LegisRecord]:
    """Normalize rows in load order; each record's id is its position."""
    return [normalize_record(row, i, catalog) for i, row in enumerate(rows)]


def read_table(path: str) -> pd.DataFrame:
    """Read the raw table as text. `.xlsx` files go through openpyxl."""
    if not os.path.exists(path):
        raise LoadError(f"Dataset file not found: {path}")
    try:
        if path.lower().endswith((".xlsx", ".xlsm")):
            df = pd.read_excel(path, engine="openpyxl", dtype=str)
            df = df.fillna("")
        else:
            df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError, ValueError, OSError) as e:
        raise LoadError(f"Could not read {path}: {e}") from e
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
    return df


def resolve_columns(df: pd.DataFrame, required: Sequence[str] = REQUIRED_COLUMNS) -> pd.DataFrame:
    """Rename near-matching headers to their canonical names.

    Raises LoadError listing every required column that is missing.
    """
    cols = list(df.columns)
    renames: Dict[str, str] = {}
    missing: List[str] = []
    for name in required:
        found = _col(cols, name)
        if found is None:
            missing.append(name)
        elif found != name:
            renames[found] = name
    if missing:
        raise LoadError(f"Missing required column(s): {missing}. Available={cols}")
    if renames:
        LOGGER.debug("Renaming columns %s", renames)
        df = df.rename(columns=renames)
    return df


def load_records(
    path: str,
    catalog: Sequence[FilterDefinition] = FILTERS,
    required: Sequence[str] = REQUIRED_COLUMNS,
) -> List[LegisRecord]:
    """Load and normalize the legislation dataset.

    Required columns are the documented ones plus every catalog source.
    """
    df = read_table(path)
    needed = list(required) + [f.source for f in catalog if f.source not in required]
    df = resolve_columns(df, needed)
    records = normalize_records(df.to_dict(orient="records"), catalog)
    LOGGER.info("Loaded %d records from %s", len(records), path)
    return records
