"""
HTML rendering
==============

The presentation side of the browser: select controls for each filter and
one card per matching record. Nothing in the engine depends on this module.

`EntryList` keeps the cards keyed by `record_id`, so a re-render only adds
the entering cards and drops the exiting ones instead of rebuilding the list.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Sequence
import html
import logging

from .models import ALL, LegisRecord

LOGGER = logging.getLogger(__name__)

FilterChangeCallback = Callable[[str, Any], None]


class Presenter(Protocol):
    """What the browser needs from a front end."""

    def render(self, records: Sequence[LegisRecord]) -> None: ...

    def on_filter_change(self, callback: FilterChangeCallback) -> None: ...


def _esc(value: Any) -> str:
    return html.escape(str(value), quote=True)


def _join(values: Iterable[Any]) -> str:
    return ", ".join(str(v) for v in values)


def render_option_html(value: Any, label: Optional[str] = None, selected: bool = False) -> str:
    sel = " selected" if selected else ""
    return f'<option value="{_esc(value)}"{sel}>{_esc(value if label is None else label)}</option>'


def render_entry_html(record: LegisRecord) -> str:
    """Inner HTML of one legislation card."""
    r = record
    return "".join([
        '<div class="legis-info">',
        f'<div class="legis-tipo-doc">{_esc(r.document_type)}</div>',
        f'<div class="legis-aspecto">{_esc(_join(r.values("Aspectos")))}</div>',
        f'<div class="legis-elemento">{_esc(_join(r.values("Elementos")))}</div>',
        f'<div class="legis-esfera">Esfera {_esc(_join(r.values("Esfera de Governo")))}</div>',
        f'<div class="legis-local">{_esc(_join(r.values("Local")))}</div>',
        f'<div class="legis-ano">{_esc(_join(r.values("Ano")))}</div>',
        f'<div class="legis-tipo-legis">{_esc(r.legislation_type)}</div>',
        '</div>',
        '<div class="legis-details">',
        f'<h3>{_esc(r.description)}</h3>',
        f'<p>{_esc(r.excerpt)}</p>',
        f'<a target="_blank" href="{_esc(r.link)}">saiba mais</a>',
        '</div>',
    ])


def render_controls_html(browser) -> str:
    """One `<select>` per filter, `_all` first, then the sorted options."""
    parts = ['<form id="legis-controls">']
    for f in browser.catalog:
        current = browser.state.get(f.source, ALL)
        parts.append(f'<label>{_esc(f.label)} <select name="{_esc(f.name)}">')
        parts.append(render_option_html(ALL, "todos", selected=current == ALL))
        for opt in browser.options(f.name):
            parts.append(render_option_html(opt, selected=current == opt))
        parts.append("</select></label>")
    parts.append("</form>")
    return "\n".join(parts)


@dataclass(frozen=True)
class RenderDiff:
    entered: List[int]
    exited: List[int]


@dataclass
class EntryList:
    """Cards currently on screen, keyed by record id."""
    entries: Dict[int, str] = field(default_factory=dict)
    order: List[int] = field(default_factory=list)

    def update(self, records: Sequence[LegisRecord]) -> RenderDiff:
        """Join new data onto the list and return what changed.

        Cards that stay are kept as-is; only entering records are rendered.
        """
        new_ids = [r.record_id for r in records]
        keep = set(new_ids)
        exited = [i for i in self.order if i not in keep]
        entered: List[int] = []
        for i in exited:
            del self.entries[i]
        for r in records:
            if r.record_id not in self.entries:
                self.entries[r.record_id] = render_entry_html(r)
                entered.append(r.record_id)
        self.order = new_ids
        LOGGER.debug("render entries: +%d -%d (%d shown)", len(entered), len(exited), len(new_ids))
        return RenderDiff(entered=entered, exited=exited)

    def html(self) -> str:
        items = [
            f'<li class="entry" data-id="{i}">{self.entries[i]}</li>'
            for i in self.order
        ]
        return '<ul id="legis-entries">\n' + "\n".join(items) + "\n</ul>"


def render_page(
    browser,
    limit: Optional[int] = None,
    title: str = "Legislação",
    entries: Optional[EntryList] = None,
) -> str:
    """Standalone HTML page with the controls and the current result cards.

    Pass the session's `entries` to reuse cards already rendered.
    """
    records = browser.results()
    if limit is not None:
        records = records[:limit]
    if entries is None:
        entries = EntryList()
    entries.update(records)
    return f"""<!DOCTYPE html>
<html lang="pt-BR">
<head>
<meta charset="utf-8">
<title>{_esc(title)}</title>
</head>
<body>
<h1>{_esc(title)}</h1>
{render_controls_html(browser)}
{entries.html()}
</body>
</html>
"""
