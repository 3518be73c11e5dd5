"""
Core engine
===========

The browser works like a tiny offline "analytics engine":

1) Load dataset -> list of LegisRecord records (immutable)
2) Hold the current selection per filter in a FilterState
3) Apply the active filters to get the matching records
4) Derive the option list of each filter control from the records
5) Export or report on the current result set

`apply_filters` and `get_filter_options` are pure functions; `LegisBrowser`
is the session object that owns one FilterState.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple
import csv
import json
import logging

from .catalog import FILTERS, filter_by_name
from .models import ALL, FilterDefinition, LegisRecord

LOGGER = logging.getLogger(__name__)


class FilterState(Mapping[str, Any]):
    """Current selection per filter, keyed by source column.

    Every catalog entry starts at `ALL`. Only known keys can be written.
    """

    def __init__(self, sources: Sequence[str]) -> None:
        self._values: Dict[str, Any] = {s: ALL for s in sources}

    @classmethod
    def initial(cls, catalog: Sequence[FilterDefinition] = FILTERS) -> "FilterState":
        return cls([f.source for f in catalog])

    def __getitem__(self, source: str) -> Any:
        return self._values[source]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"FilterState({self._values!r})"

    def select(self, source: str, value: Any) -> None:
        if source not in self._values:
            raise KeyError(f"Unknown filter field: {source!r}")
        self._values[source] = value

    def clear(self, source: str) -> None:
        self.select(source, ALL)

    def reset(self) -> None:
        for s in self._values:
            self._values[s] = ALL

    def active(self) -> Dict[str, Any]:
        """Only the filters that currently constrain the result."""
        return {s: v for s, v in self._values.items() if v != ALL}


def apply_filters(
    records: Sequence[LegisRecord],
    state: Mapping[str, Any],
    catalog: Sequence[FilterDefinition] = FILTERS,
) -> List[LegisRecord]:
    """Return the records that satisfy every active filter, in input order.

    A filter is active when its state value is not `ALL`; it matches when the
    record's normalized values contain the selected value. State keys that
    are not in the catalog add no constraint.
    """
    active: List[Tuple[str, Any]] = []
    for f in catalog:
        v = state.get(f.source, ALL)
        if v != ALL:
            active.append((f.source, v))

    if not active:
        return list(records)

    out: List[LegisRecord] = []
    for r in records:
        for source, v in active:
            if v not in r.values(source):
                break
        else:
            out.append(r)
    return out


def get_filter_options(definition: FilterDefinition, records: Sequence[LegisRecord]) -> List[Any]:
    """Distinct values of a filter's column, in first-seen order (unsorted)."""
    options: List[Any] = []
    for r in records:
        for v in r.values(definition.source):
            # equality, not str(); 5 and "5" stay distinct
            if v not in options:
                options.append(v)
    return options


def sorted_filter_options(definition: FilterDefinition, records: Sequence[LegisRecord]) -> List[Any]:
    """Option list sorted in the definition's order, ready for a control."""
    return definition.sort_options(get_filter_options(definition, records))


@dataclass
class LegisBrowser:
    """Legislation browser session.

    The session stores:
    - records: all LegisRecord rows, in load order
    - catalog: the filter definitions driving controls and matching
    - state: current selection per filter

    Filters update `state` only; `results()` re-applies them on demand.
    """
    records: List[LegisRecord]
    catalog: List[FilterDefinition] = field(default_factory=lambda: list(FILTERS))
    dataset_path: Optional[str] = None
    # Stores CLI commands (for reproducibility in reports)
    command_log: List[str] = field(default_factory=list)
    state: FilterState = field(init=False)

    def __post_init__(self) -> None:
        self.state = FilterState.initial(self.catalog)

    def definition(self, name: str) -> FilterDefinition:
        return filter_by_name(name, self.catalog)

    # ---------------- Filters ----------------
    def select(self, name: str, value: Any) -> FilterDefinition:
        """Set a filter from a control value, coerced to the column type."""
        f = self.definition(name)
        try:
            typed = f.coerce(value)
        except ValueError:
            raise ValueError(f"Filter {f.name!r} expects an integer, got {value!r}") from None
        self.state.select(f.source, typed)
        LOGGER.debug("Filter %s = %r", f.source, typed)
        return f

    def clear(self, name: str) -> FilterDefinition:
        f = self.definition(name)
        self.state.clear(f.source)
        return f

    def reset(self) -> None:
        """Reset every filter to `ALL`."""
        self.state.reset()

    # ---------------- Output operations ----------------
    def results(self) -> List[LegisRecord]:
        out = apply_filters(self.records, self.state, self.catalog)
        LOGGER.debug("Filters %s matched %d of %d records", self.state.active(), len(out), len(self.records))
        return out

    def options(self, name: str) -> List[Any]:
        """Sorted options of one control over the full dataset."""
        return sorted_filter_options(self.definition(name), self.records)

    def counts(self, name: str) -> Dict[Any, int]:
        """How many of the current results carry each option of a filter."""
        f = self.definition(name)
        c: Counter = Counter()
        for r in self.results():
            c.update(set(r.values(f.source)))
        return {opt: c[opt] for opt in f.sort_options(c.keys())}

    def _columns(self) -> List[str]:
        cols: List[str] = []
        for r in self.records:
            for k in r.fields:
                if k not in cols:
                    cols.append(k)
        return cols

    def export_csv(self, path: str) -> None:
        """Write the current result set, joining multi-valued fields with ';'."""
        rows = self.results()
        columns = self._columns()
        sources = {f.source for f in self.catalog}
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=["_id"] + columns)
            w.writeheader()
            for r in rows:
                row: Dict[str, Any] = {"_id": r.record_id}
                for k in columns:
                    v = r.fields.get(k, "")
                    row[k] = ";".join(str(x) for x in v) if k in sources else v
                w.writerow(row)

    def export_json(self, path: str) -> None:
        """Export the current result set to a JSON file.

        Multi-valued fields stay lists, so years remain integers.
        """
        sources = {f.source for f in self.catalog}
        payload = []
        for r in self.results():
            item: Dict[str, Any] = {"_id": r.record_id}
            for k, v in r.fields.items():
                item[k] = list(v) if k in sources else v
            payload.append(item)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
