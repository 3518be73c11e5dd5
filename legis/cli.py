"""
Legislation browser Command Line Interface (CLI)
================================================

This file provides the interactive terminal program you run like:

    python -m legis.cli --csv "path/to/data.csv"

It is the terminal front end of the browser:
- Argument parsing (argparse)
- A REPL loop (Read-Eval-Print Loop) for commands
- Each filter change re-applies every filter and re-renders the list

The CLI DOES NOT modify your dataset file. It loads it once and keeps the
filter selection in memory.
"""

from __future__ import annotations
from typing import Any, Callable, List, Optional, Sequence
import argparse
import logging
import os
import shlex
import sys

from .engine import LegisBrowser
from .loader import LoadError, load_records
from .models import ALL, LegisRecord
from .render import EntryList, RenderDiff
from .report import summarize

HELP = """
Commands:
  help
  filters                          list filters and their current value
  options <filter>                 values available for a filter
  set <filter> "<value>"           (example: set local "São Paulo")
  clear <filter>                   set a filter back to _all
  reset                            clear every filter
  show [n]                         print the first n matching records (default 10)
  stats

  export csv "<out.csv>"
  export json "<out.json>"
  export html "<out.html>"
  report "<out.docx>"

  quit

Filters: elemento, aspecto, esfera-de-governo, local, ano
"""


class TerminalPresenter:
    """Presenter that prints records as short text cards.

    It keeps one `EntryList` for the whole session, so each re-render
    reports which record ids entered and left the list.
    """

    def __init__(self, limit: int = 10, out: Callable[[str], None] = print) -> None:
        self.limit = limit
        self.out = out
        self.entries = EntryList()
        self.last_diff: Optional[RenderDiff] = None
        self._callbacks: List[Callable[[str, Any], None]] = []

    def on_filter_change(self, callback: Callable[[str, Any], None]) -> None:
        self._callbacks.append(callback)

    def change(self, name: str, value: Any) -> None:
        for cb in self._callbacks:
            cb(name, value)

    def render(self, records: Sequence[LegisRecord]) -> None:
        diff = self.entries.update(records)
        self.last_diff = diff
        self.out(f"{len(records)} matching record(s). (+{len(diff.entered)} -{len(diff.exited)})")
        for r in records[:self.limit]:
            self.out(_format_row(r))
        if len(records) > self.limit:
            self.out(f"... ({len(records)} total, showing {self.limit})")


def _format_row(r: LegisRecord) -> str:
    years = ", ".join(str(y) for y in r.values("Ano"))
    places = ", ".join(r.values("Local"))
    return f"[{r.record_id}] {r.document_type} | {r.legislation_type} | {places} | {years} | {r.description}"


def bind(browser: LegisBrowser, presenter: TerminalPresenter) -> None:
    """Wire control changes to the browser: write the filter, re-render."""
    def _changed(name: str, value: Any) -> None:
        if value == ALL:
            browser.clear(name)
        else:
            browser.select(name, value)
        presenter.render(browser.results())
    presenter.on_filter_change(_changed)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the legislation browser CLI.

    1) Load dataset
    2) Show the first records
    3) Start an interactive REPL
    """
    ap = argparse.ArgumentParser(description="Browse and filter legislation records")
    ap.add_argument("--csv", required=True, help="Path to the legislation CSV (or .xlsx)")
    ap.add_argument("--show", type=int, default=10, help="Records shown after each change")
    ap.add_argument("--verbose", action="store_true", help="Log at DEBUG instead of INFO")
    args = ap.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    print("Loading dataset...")
    try:
        records = load_records(args.csv)
    except LoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    browser = LegisBrowser(records=records, dataset_path=args.csv)
    presenter = TerminalPresenter(limit=args.show)
    bind(browser, presenter)

    print(f"Loaded {len(records)} records. Type 'help' for commands.")
    presenter.render(browser.results())
    while True:
        try:
            line = input("legis> ")
        except EOFError:
            break
        # Keep a lightweight log of commands for the report (reproducibility).
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.lower() in ("quit", "exit"):
            break
        if stripped.split()[0].lower() in ("set", "clear", "reset"):
            browser.command_log.append(stripped)
        try:
            handle(browser, presenter, stripped)
        except Exception as e:
            print(f"Error: {e}")
    return 0


def handle(browser: LegisBrowser, presenter: TerminalPresenter, line: str, out: Callable[..., None] = print) -> None:
    """Handle one CLI command line.

    This parses the command and calls the appropriate browser method.
    """
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        out(HELP)
        return

    if cmd == "filters":
        for f in browser.catalog:
            out(f"{f.name:<20} {f.source:<20} = {browser.state[f.source]}")
        return

    if cmd == "options":
        if len(parts) < 2:
            raise ValueError("usage: options <filter>")
        counts = browser.counts(parts[1])
        for opt in browser.options(parts[1]):
            out(f"{opt}  ({counts.get(opt, 0)})")
        return

    if cmd == "set":
        if len(parts) < 3:
            raise ValueError('usage: set <filter> "<value>"')
        presenter.change(parts[1], " ".join(parts[2:]))
        return

    if cmd == "clear":
        if len(parts) < 2:
            raise ValueError("usage: clear <filter>")
        presenter.change(parts[1], ALL)
        return

    if cmd == "reset":
        browser.reset()
        out("Filters reset.")
        presenter.render(browser.results())
        return

    if cmd == "show":
        n = int(parts[1]) if len(parts) >= 2 else presenter.limit
        rows = browser.results()
        for r in rows[:n]:
            out(_format_row(r))
        return

    if cmd == "stats":
        rows = browser.results()
        out(f"Current result size: {len(rows)} of {len(browser.records)}")
        out(f"Active filters: {browser.state.active() or 'none'}")
        distinct = summarize(rows, [f.source for f in browser.catalog])
        out(" | ".join(f"{k}: {v}" for k, v in distinct.items()))
        return

    if cmd == "export":
        if len(parts) < 3:
            out('Usage: export csv|json|html "<path>"')
            return
        fmt, out_path = parts[1].lower(), parts[2]
        if fmt == "csv":
            browser.export_csv(out_path)
        elif fmt == "json":
            browser.export_json(out_path)
        elif fmt == "html":
            from .render import render_page
            with open(out_path, "w", encoding="utf-8") as f:
                f.write(render_page(browser, entries=presenter.entries))
        else:
            raise ValueError("Unknown export format. Use: csv, json or html")
        out(f"Exported {fmt.upper()} to {out_path}")
        return

    if cmd == "report":
        from .report import generate_docx_report, ReportConfig
        if len(parts) < 2:
            raise ValueError('usage: report "<out.docx>"')
        path = parts[1]
        cfg = ReportConfig(
            file_name=os.path.basename(browser.dataset_path) if browser.dataset_path else None,
            command_log=list(browser.command_log),
        )
        generate_docx_report(browser.results(), path, config=cfg, active_filters=browser.state.active())
        out(f"Report written to {path}")
        return

    out("Unknown command. Type 'help'.")


if __name__ == "__main__":
    sys.exit(main())
