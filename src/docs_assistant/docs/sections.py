"""Split a flat markdown document into top-level sections."""

from __future__ import annotations

from docs_assistant.types import DocumentSection

SECTION_MARKER = "## "


def split_into_sections(markdown: str) -> list[DocumentSection]:
    """Split on `## ` headings.

    Every line after a heading (blank lines and deeper headings included) is
    kept in the body, newline-terminated. Text before the first heading is
    dropped.
    """

    sections: list[DocumentSection] = []
    title: str | None = None
    body: list[str] = []

    for line in markdown.split("\n"):
        if line.startswith(SECTION_MARKER):
            if title is not None:
                sections.append(DocumentSection(title=title, body="".join(body)))
            title = line[len(SECTION_MARKER):].strip()
            body = []
        elif title is not None:
            body.append(line + "\n")

    if title is not None:
        sections.append(DocumentSection(title=title, body="".join(body)))
    return sections
