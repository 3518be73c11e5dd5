from legis.engine import LegisBrowser
from legis.render import (
    EntryList,
    render_controls_html,
    render_entry_html,
    render_option_html,
    render_page,
)


def test_entry_html_escapes_text(records):
    out = render_entry_html(records[2])
    assert "&lt;b&gt;Diretrizes&lt;/b&gt; &amp; princípios." in out
    assert 'href="http://example.org/lei/3?a=1&amp;b=2"' in out
    assert "<b>" not in out


def test_entry_html_joins_multi_valued_fields(records):
    out = render_entry_html(records[1])
    assert '<div class="legis-esfera">Esfera Estadual, Municipal</div>' in out
    assert '<div class="legis-ano">1999, 2001</div>' in out
    assert '<div class="legis-aspecto"></div>' in out
    assert "saiba mais" in out


def test_option_html():
    assert render_option_html(2001) == '<option value="2001">2001</option>'
    assert render_option_html("_all", "todos", selected=True) == '<option value="_all" selected>todos</option>'


def test_entry_list_update_is_keyed_by_record_id(records):
    entries = EntryList()
    diff = entries.update(records[:2])
    assert diff.entered == [0, 1]
    assert diff.exited == []

    diff = entries.update(records[1:])
    assert diff.entered == [2]
    assert diff.exited == [0]
    assert entries.order == [1, 2]

    diff = entries.update(records[1:])
    assert diff.entered == [] and diff.exited == []


def test_entry_list_html(records):
    entries = EntryList()
    entries.update(records[:1])
    out = entries.html()
    assert out.startswith('<ul id="legis-entries">')
    assert out.count('<li class="entry"') == 1
    assert 'data-id="0"' in out


def test_controls_list_all_first_then_sorted_options(records):
    browser = LegisBrowser(records=records)
    browser.select("ano", "2001")
    out = render_controls_html(browser)

    assert out.count("<select") == 5
    ano = out[out.index('name="ano"'):]
    assert ano.index('value="_all"') < ano.index('value="2010"') < ano.index('value="2001"') < ano.index('value="1999"')
    assert '<option value="2001" selected>2001</option>' in out


def test_render_page_respects_filters_and_limit(records):
    browser = LegisBrowser(records=records)
    page = render_page(browser, limit=2)
    assert page.count('<li class="entry"') == 2

    browser.select("local", "Brasil")
    page = render_page(browser)
    assert page.count('<li class="entry"') == 1
    assert "Diretrizes nacionais" in page


def test_render_page_reuses_session_entries(records):
    browser = LegisBrowser(records=records)
    entries = EntryList()
    entries.update(records)

    browser.select("local", "Brasil")
    page = render_page(browser, entries=entries)

    assert entries.order == [2]
    assert page.count('<li class="entry"') == 1
