from __future__ import annotations

"""
Legislation report generator
----------------------------
This module generates a DOCX document from a list of LegisRecord objects:
the active filters, two summary charts and one list item per record.

Design goals:
- Keep the browser usable even if report dependencies are missing (lazy imports).
- Skip charts that carry no information for the current result set
  (e.g. a single year).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
import os
import tempfile
from collections import Counter

from .models import LegisRecord


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Legislação"
    subtitle: str = "Registros filtrados"
    dataset_name: str = "legislation CSV"
    file_name: Optional[str] = None

    # How many categories to show in bar charts
    top_n: int = 10

    # Optional: list of CLI commands used to create the current result set
    command_log: List[str] = field(default_factory=list)


def _count_values(records: Sequence[LegisRecord], source: str) -> Counter:
    c: Counter = Counter()
    for r in records:
        c.update(set(r.values(source)))
    return c


def generate_docx_report(
    records: Sequence[LegisRecord],
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
    active_filters: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Generate a DOCX report + charts for a list of legislation records.

    The dataset file is never modified; the report reflects the in-memory
    selection only.
    """
    config = config or ReportConfig()
    active_filters = dict(active_filters or {})

    # Lazy imports: only required when "report" is used.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install with: python -m pip install matplotlib"
        ) from e

    if not records:
        raise ValueError("No records to report on (result set is empty).")

    # -----------------------------
    # 1) Counts
    # -----------------------------
    c_year = _count_values(records, "Ano")
    c_element = _count_values(records, "Elementos")
    years = sorted(c_year)

    # -----------------------------
    # 2) Charts
    # -----------------------------
    tmp = tempfile.TemporaryDirectory(prefix="legis_report_")
    tmpdir = tmp.name
    chart_paths: List[Tuple[str, str]] = []

    def _save(filename: str) -> str:
        path = os.path.join(tmpdir, filename)
        plt.tight_layout()
        plt.savefig(path, dpi=200)
        plt.close()
        return path

    def _bar(title: str, labels: List[str], values: List[int], filename: str) -> None:
        plt.figure()
        plt.bar(labels, values)
        plt.xticks(rotation=45, ha="right")
        plt.title(title)
        plt.ylabel("Registros")
        chart_paths.append((title, _save(filename)))

    if len(years) > 1:
        _bar(
            "Registros por ano",
            [str(y) for y in years],
            [c_year[y] for y in years],
            "bar_years.png",
        )

    if len(c_element) > 1:
        top = c_element.most_common(config.top_n)
        _bar(
            f"Top {config.top_n} elementos",
            [str(k) for k, _ in top],
            [v for _, v in top],
            "top_elements.png",
        )

    # -----------------------------
    # 3) Build DOCX
    # -----------------------------
    doc = Document()

    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    _kv("Dataset", config.dataset_name)
    if config.file_name:
        _kv("Arquivo", config.file_name)
    _kv("Registros", str(len(records)))
    if years:
        _kv("Anos", f"{years[0]} a {years[-1]}")

    doc.add_heading("Filtros aplicados", level=1)
    if active_filters:
        for source, value in active_filters.items():
            doc.add_paragraph(f"{source}: {value}", style="List Bullet")
    else:
        doc.add_paragraph("Nenhum (todos os registros).")

    if chart_paths:
        doc.add_heading("Gráficos", level=1)
        for title, path in chart_paths:
            doc.add_paragraph(title)
            doc.add_picture(path, width=Inches(6.0))
    # add_picture has read the PNGs into the document
    tmp.cleanup()

    doc.add_heading("Legislação", level=1)
    for r in records:
        p = doc.add_paragraph(style="List Number")
        head = p.add_run(r.description or r.document_type or f"#{r.record_id}")
        head.bold = True
        tags: List[str] = [r.document_type, r.legislation_type]
        tags += [", ".join(str(v) for v in r.values(s)) for s in ("Aspectos", "Elementos", "Local", "Ano")]
        esfera = ", ".join(r.values("Esfera de Governo"))
        if esfera:
            tags.append(f"Esfera {esfera}")
        doc.add_paragraph(" | ".join(t for t in tags if t))
        if r.excerpt:
            q = doc.add_paragraph(r.excerpt)
            q.paragraph_format.left_indent = Inches(0.3)
        if r.link:
            doc.add_paragraph(f"Saiba mais: {r.link}")

    # -----------------------------
    # Reproducibility footer
    # -----------------------------
    doc.add_paragraph("")
    doc.add_heading("Reproducibility footer", level=1)

    from . import __version__ as legis_version
    from datetime import datetime as _dt
    generated_at = _dt.now().isoformat(timespec="seconds")

    doc.add_paragraph(f"legis version: {legis_version}")
    doc.add_paragraph(f"Report generated at: {generated_at}")

    if config.command_log:
        doc.add_paragraph("Commands used (log):")
        for line in config.command_log:
            doc.add_paragraph(line, style="List Bullet")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path


def summarize(records: Sequence[LegisRecord], sources: Sequence[str]) -> Dict[str, int]:
    """Distinct value count per column over a record set."""
    return {s: len(_count_values(records, s)) for s in sources}
