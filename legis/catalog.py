"""
Filter catalog
==============

The five filterable columns of the legislation dataset. This is plain
configuration: the engine and the option lists are generic over any
sequence of `FilterDefinition`.
"""

from __future__ import annotations
from typing import List, Sequence

from .models import (
    FieldType, FilterDefinition, SortOrder,
    DOCUMENT_TYPE, LEGISLATION_TYPE, DESCRIPTION, EXCERPT, LINK,
)

FILTERS: List[FilterDefinition] = [
    FilterDefinition(
        label="elemento",
        name="elemento",
        source="Elementos",
        field_type=FieldType.TEXT,
        order=SortOrder.ASCENDING,
    ),
    FilterDefinition(
        label="aspecto",
        name="aspecto",
        source="Aspectos",
        field_type=FieldType.TEXT,
        order=SortOrder.ASCENDING,
    ),
    FilterDefinition(
        label="esfera de governo",
        name="esfera-de-governo",
        source="Esfera de Governo",
        field_type=FieldType.TEXT,
        order=SortOrder.ASCENDING,
    ),
    FilterDefinition(
        label="local",
        name="local",
        source="Local",
        field_type=FieldType.TEXT,
        order=SortOrder.ASCENDING,
    ),
    FilterDefinition(
        label="ano",
        name="ano",
        source="Ano",
        field_type=FieldType.INTEGER,
        order=SortOrder.DESCENDING,
    ),
]

REQUIRED_COLUMNS: List[str] = [
    DOCUMENT_TYPE,
    "Aspectos",
    "Elementos",
    "Esfera de Governo",
    "Local",
    "Ano",
    LEGISLATION_TYPE,
    DESCRIPTION,
    EXCERPT,
    LINK,
]


def filter_by_name(name: str, catalog: Sequence[FilterDefinition] = FILTERS) -> FilterDefinition:
    """Find a filter by control name, label or source column (case-insensitive)."""
    key = name.strip().lower()
    for f in catalog:
        if key in (f.name.lower(), f.label.lower(), f.source.lower()):
            return f
    names = ", ".join(f.name for f in catalog)
    raise KeyError(f"Unknown filter {name!r}. Available: {names}")
