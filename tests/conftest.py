import csv
from pathlib import Path

import pytest

from legis.catalog import REQUIRED_COLUMNS
from legis.loader import normalize_records


ROWS = [
    {
        "Tipo de documento": "Lei",
        "Aspectos": "Saneamento; Drenagem",
        "Elementos": "Água;Solo",
        "Esfera de Governo": "Municipal",
        "Local": "São Paulo",
        "Ano": "2001",
        "Tipo de Legislação": "Ordinária",
        "Descrição": "Política municipal de saneamento, drenagem e resíduos",
        "Trecho da Lei": "Art. 1º Fica instituída a política municipal.",
        "Link": "http://example.org/lei/1",
    },
    {
        "Tipo de documento": "Decreto",
        "Aspectos": "",
        "Elementos": "Solo",
        "Esfera de Governo": "Estadual; Municipal",
        "Local": "Rio de Janeiro",
        "Ano": "1999; 2001",
        "Tipo de Legislação": "Regulamentar",
        "Descrição": "Uso do solo urbano",
        "Trecho da Lei": "Art. 2º O uso do solo observará o zoneamento.",
        "Link": "http://example.org/decreto/2",
    },
    {
        "Tipo de documento": "Lei",
        "Aspectos": "Drenagem",
        "Elementos": "Água potável",
        "Esfera de Governo": "Federal",
        "Local": "Brasil",
        "Ano": "2010",
        "Tipo de Legislação": "Ordinária",
        "Descrição": "Diretrizes nacionais",
        "Trecho da Lei": "Art. 3º <b>Diretrizes</b> & princípios.",
        "Link": "http://example.org/lei/3?a=1&b=2",
    },
]


def write_csv(path: Path, rows, header=None) -> Path:
    header = header or REQUIRED_COLUMNS
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=header)
        w.writeheader()
        for r in rows:
            w.writerow({k: r.get(k, "") for k in header})
    return path


@pytest.fixture
def rows():
    return [dict(r) for r in ROWS]


@pytest.fixture
def records(rows):
    return normalize_records(rows)


@pytest.fixture
def sample_csv(tmp_path, rows):
    return write_csv(Path(tmp_path) / "data.csv", rows)
