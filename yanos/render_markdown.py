"""Convert Markdown to HTML while collecting headings and preview text."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List

import mistune

from yanos.toc import TocHeading

START = "start"
END = "end"
TEXT = "text"


@dataclass(frozen=True)
class Event:
    """One structural event from a left-to-right walk of the token tree."""

    kind: str
    tag: str = ""
    level: int = 0
    text: str = ""


@dataclass
class ConvertedMarkdown:
    content: str
    headings: List[TocHeading]
    preview_text: str


class PreviewState(enum.Enum):
    SEARCHING = "searching"
    READING = "reading"
    COMPLETE = "complete"


@dataclass
class ScanState:
    in_heading: bool = False
    current_heading: str = ""
    headings: List[TocHeading] = field(default_factory=list)
    preview: PreviewState = PreviewState.SEARCHING
    preview_text: str = ""

    def feed(self, event: Event) -> None:
        if event.kind == START and event.tag == "heading":
            self.in_heading = True
            self.current_heading = ""
        elif event.kind == END and event.tag == "heading":
            self.in_heading = False
            if self.current_heading:
                prev_level = self.headings[-1].level if self.headings else None
                self.headings.append(TocHeading(event.level, prev_level, self.current_heading))
        elif event.kind == START and event.tag == "paragraph":
            if self.preview is PreviewState.SEARCHING:
                self.preview = PreviewState.READING
        elif event.kind == END and event.tag == "paragraph":
            if self.preview is PreviewState.READING:
                self.preview = PreviewState.COMPLETE
        elif event.kind == TEXT:
            if self.in_heading:
                self.current_heading += event.text
            if self.preview is PreviewState.READING:
                self.preview_text += event.text


def iter_events(tokens: Iterable[Dict[str, Any]]) -> Iterator[Event]:
    """Flatten mistune's AST into start/end/text events without touching it."""
    for token in tokens:
        tag = token["type"]
        if tag == "text":
            yield Event(TEXT, tag, text=token["raw"])
            continue
        attrs = token.get("attrs") or {}
        level = attrs.get("level", 0) if tag == "heading" else 0
        yield Event(START, tag, level)
        yield from iter_events(token.get("children") or ())
        yield Event(END, tag, level)


def convert_markdown(markdown: str) -> ConvertedMarkdown:
    """Convert ``markdown`` to HTML in a single pass over its events.

    Text inside a heading (including emphasis or links nested in it) is
    collected into a :class:`TocHeading`; the text of the first paragraph
    becomes the preview. Raw HTML in the source is passed through unescaped.
    """
    parser = mistune.create_markdown(renderer="ast")
    tokens, state = parser.parse(markdown)

    scan = ScanState()
    for event in iter_events(tokens):
        scan.feed(event)

    renderer = mistune.HTMLRenderer(escape=False)
    html = renderer(tokens, state)

    return ConvertedMarkdown(
        content=html,
        headings=scan.headings,
        preview_text=scan.preview_text,
    )
