"""
Data model (LegisRecord, FilterDefinition)
==========================================

Each row of the legislation CSV is converted into a `LegisRecord`.
Records are immutable (`frozen=True`) so that:
- nothing edits the dataset after loading, and
- filters operate by selecting records rather than changing them.

Filterable columns hold several values separated by ';' in the source file.
After loading they are tuples of typed values (str or int), never raw strings.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import re
from typing import Any, Iterable, List, Mapping, Tuple

# Selecting this value in a control means "no filter"
ALL = "_all"

_INTEGER_RE = re.compile(r"-?[0-9]+")


class FieldType(Enum):
    """Value type of a filterable column."""
    TEXT = "text"
    INTEGER = "integer"

    def coerce(self, raw: Any) -> Any:
        """Convert one item (already trimmed) into the typed value.

        Raises ValueError when an INTEGER item is not a whole number.
        """
        if self is FieldType.INTEGER:
            if isinstance(raw, bool):
                raise ValueError(f"Not an integer: {raw!r}")
            if isinstance(raw, int):
                return raw
            text = str(raw).strip()
            # int() alone also takes "+1", "1_000" and non-ASCII digits
            if not _INTEGER_RE.fullmatch(text):
                raise ValueError(f"Not an integer: {raw!r}")
            return int(text, 10)
        return str(raw).strip()


class SortOrder(Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class FilterDefinition:
    """Static descriptor of one filterable column.

    `source` is the column name in the input file; `name` is the control name
    used by the presentation layer and the CLI.
    """
    label: str
    name: str
    source: str
    field_type: FieldType = FieldType.TEXT
    order: SortOrder = SortOrder.ASCENDING

    def coerce(self, value: Any) -> Any:
        """Coerce a control value into the column type. `ALL` passes through."""
        if value == ALL:
            return ALL
        return self.field_type.coerce(value)

    def sort_options(self, options: Iterable[Any]) -> List[Any]:
        return sorted(options, reverse=self.order is SortOrder.DESCENDING)


# Column names of the single-valued fields shown on each card
DOCUMENT_TYPE = "Tipo de documento"
LEGISLATION_TYPE = "Tipo de Legislação"
DESCRIPTION = "Descrição"
EXCERPT = "Trecho da Lei"
LINK = "Link"


@dataclass(frozen=True)
class LegisRecord:
    """One legislation row after normalization."""
    record_id: int
    fields: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def values(self, source: str) -> Tuple[Any, ...]:
        """Normalized values of a multi-valued column (empty tuple if missing)."""
        v = self.fields.get(source)
        if v is None:
            return ()
        return tuple(v)

    def get(self, column: str, default: str = "") -> Any:
        return self.fields.get(column, default)

    @property
    def document_type(self) -> str:
        return self.get(DOCUMENT_TYPE)

    @property
    def legislation_type(self) -> str:
        return self.get(LEGISLATION_TYPE)

    @property
    def description(self) -> str:
        return self.get(DESCRIPTION)

    @property
    def excerpt(self) -> str:
        return self.get(EXCERPT)

    @property
    def link(self) -> str:
        return self.get(LINK)
