"""Read-only listing of matched embedded links."""

from __future__ import annotations

import html
from typing import List, Optional, Sequence

from .links import find_candidate_links
from .models import ReportSection
from .store import TARGETS, RecordStore, view_url


def build_report(
    store: RecordStore,
    table: str,
    field: str,
    match: str,
    exceptions: Sequence[str] | None = None,
    wwwroot: str = "",
) -> List[ReportSection]:
    """List matching links per record without fetching or changing anything."""
    sections: List[ReportSection] = []
    for record in store.find_records(table, field, match):
        links = list(find_candidate_links(record.text, match, exceptions))
        sections.append(
            ReportSection(
                record=record,
                links=links,
                view_url=view_url(wwwroot, table, record),
            )
        )
    return sections


def render_report_text(sections: Sequence[ReportSection]) -> str:
    lines: List[str] = []
    for section in sections:
        heading = section.record.name
        if section.view_url:
            heading = f"{heading} <{section.view_url}>"
        lines.append(heading)
        for link in section.links:
            lines.append(f"  {link.kind}: {link.url}")
    return "\n".join(lines) + ("\n" if lines else "")


def render_form(selected: str = "", match: str = "", exclude: str = "") -> str:
    """Render the settings form used to request a report."""
    esc = html.escape
    options = []
    for target in TARGETS:
        attr = ' selected="selected"' if target.key == selected else ""
        options.append(f'<option value="{esc(target.key)}"{attr}>{esc(target.label)}</option>')
    return (
        '<form method="post" action="." id="settingsform"><div>'
        '<label for="table"> Content area</label> '
        f'<select name="table" id="table">{"".join(options)}</select> '
        '<label for="match"> Match</label> '
        f'<input type="text" name="match" id="match" value="{esc(match)}" /> '
        '<label for="exclude"> Exclude</label> '
        f'<input type="text" name="exclude" id="exclude" value="{esc(exclude)}" /> '
        '<input type="submit" id="settingssubmit" value="Get report" />'
        "</div></form>"
    )


def render_report_html(
    sections: Optional[Sequence[ReportSection]],
    selected: str = "",
    match: str = "",
    exclude: str = "",
) -> str:
    """Render the form followed by one heading and link list per record."""
    esc = html.escape
    parts = [render_form(selected, match, exclude)]
    for section in sections or []:
        name = esc(section.record.name)
        if section.view_url:
            parts.append(f'<p><a href="{esc(section.view_url)}">{name}</a></p>')
        else:
            parts.append(f"<p>{name}</p>")
        parts.append("<ul>")
        for link in section.links:
            url = esc(link.url)
            parts.append(f'<li>{esc(link.kind)}: <a href="{url}">{url}</a></li>')
        parts.append("</ul>")
    return "\n".join(parts) + "\n"
