from pathlib import Path

import pandas as pd
import pytest

from conftest import write_csv
from legis.catalog import FILTERS, REQUIRED_COLUMNS, filter_by_name
from legis.loader import (
    FieldParseError,
    LoadError,
    load_records,
    normalize_field,
    normalize_record,
    normalize_records,
    split_field,
)


def test_split_field_trims_and_handles_empty():
    assert split_field(" A; B ;C") == ["A", "B", "C"]
    assert split_field("") == []
    assert split_field(None) == []
    assert split_field("   ") == []


def test_normalize_field_parses_integers():
    ano = filter_by_name("ano")
    assert normalize_field("1999; 2001", ano) == (1999, 2001)
    assert normalize_field("", ano) == ()


def test_catalog_fields_are_always_tuples(records):
    """Every catalog field is a tuple after normalization, never a raw string."""
    for r in records:
        for f in FILTERS:
            assert isinstance(r.fields[f.source], tuple)


def test_normalize_record_types_and_identity(records):
    first, second, _ = records
    assert first.values("Aspectos") == ("Saneamento", "Drenagem")
    assert first.values("Ano") == (2001,)
    assert second.values("Aspectos") == ()
    assert second.values("Ano") == (1999, 2001)
    # single-valued columns stay strings
    assert first.document_type == "Lei"
    assert first.legislation_type == "Ordinária"
    assert [r.record_id for r in records] == [0, 1, 2]


def test_missing_catalog_column_becomes_empty_tuple():
    r = normalize_record({"Elementos": "A;B"}, 7)
    assert r.record_id == 7
    assert r.values("Elementos") == ("A", "B")
    assert r.values("Local") == ()
    assert r.values("Ano") == ()


def test_non_integer_year_fails_the_load():
    with pytest.raises(FieldParseError) as exc:
        normalize_records([{"Ano": "2001"}, {"Ano": "2001; abc"}])
    assert exc.value.row == 1
    assert exc.value.column == "Ano"
    assert exc.value.item == "abc"


def test_load_records_from_csv(sample_csv):
    records = load_records(str(sample_csv))
    assert len(records) == 3
    # quoted cell containing the delimiter survives intact
    assert records[0].description == "Política municipal de saneamento, drenagem e resíduos"
    assert records[1].values("Esfera de Governo") == ("Estadual", "Municipal")


def test_load_records_resolves_near_matching_headers(tmp_path, rows):
    header = [("descricao" if c == "Descrição" else c) for c in REQUIRED_COLUMNS]
    for r in rows:
        r["descricao"] = r.pop("Descrição")
    path = write_csv(Path(tmp_path) / "alt.csv", rows, header=header)

    records = load_records(str(path))

    assert records[2].description == "Diretrizes nacionais"


def test_load_records_missing_column(tmp_path, rows):
    header = [c for c in REQUIRED_COLUMNS if c != "Local"]
    path = write_csv(Path(tmp_path) / "bad.csv", rows, header=header)

    with pytest.raises(LoadError, match="Local"):
        load_records(str(path))


def test_load_records_missing_file(tmp_path):
    with pytest.raises(LoadError):
        load_records(str(Path(tmp_path) / "nope.csv"))


def test_load_records_empty_file(tmp_path):
    path = Path(tmp_path) / "empty.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(LoadError):
        load_records(str(path))


def test_load_records_from_xlsx(tmp_path, rows):
    path = Path(tmp_path) / "data.xlsx"
    pd.DataFrame(rows, columns=REQUIRED_COLUMNS).to_excel(path, index=False)

    records = load_records(str(path))

    assert [r.values("Ano") for r in records] == [(2001,), (1999, 2001), (2010,)]
    assert records[1].values("Aspectos") == ()


def test_records_are_read_only(records):
    with pytest.raises(TypeError):
        records[0].fields["Ano"] = ()


@pytest.mark.parametrize("item", ["2_001", "+1999", "٢٠١٠", "2001.0", "20 01"])
def test_year_must_be_plain_ascii_digits(item):
    """int() alone would accept some of these; the load must not."""
    with pytest.raises(FieldParseError) as exc:
        normalize_records([{"Ano": item}])
    assert exc.value.item == item


def test_negative_and_padded_years_still_parse():
    records = normalize_records([{"Ano": " -5 ; 0042"}])
    assert records[0].values("Ano") == (-5, 42)


def test_parse_error_names_record_and_file_line():
    with pytest.raises(FieldParseError, match=r"Record 0 \(line 2\), column 'Ano'"):
        normalize_records([{"Ano": "abc"}])
