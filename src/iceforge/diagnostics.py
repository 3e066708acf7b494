"""Renders a ``ConfigError`` as compiler-style text pointing into the manifest."""

from __future__ import annotations

from dataclasses import dataclass

from iceforge.models.errors import ConfigError, SourceSpan


@dataclass
class Location:
    """1-based line/column of a byte offset, plus the text of that line."""

    line: int
    column: int
    text: str
    width: int  # bytes of the span that fall on this line


def locate(source: str, span: SourceSpan) -> Location:
    data = source.encode("utf-8")
    start = min(span.start, len(data))
    line_start = data.rfind(b"\n", 0, start) + 1
    line_end = data.find(b"\n", start)
    if line_end == -1:
        line_end = len(data)
    end = min(max(span.end, start), line_end)
    return Location(
        line=data.count(b"\n", 0, start) + 1,
        column=len(data[line_start:start].decode("utf-8", errors="replace")) + 1,
        text=data[line_start:line_end].decode("utf-8", errors="replace").rstrip("\r"),
        width=len(data[start:end].decode("utf-8", errors="replace")),
    )


def render_error(error: ConfigError, source: str | None, filename: str) -> str:
    """Format ``error`` with the offending source lines underlined.

    Without source text or a span, only the headline is produced.
    """
    lines = [f"error[{error.error_type}]: {error.message}"]
    if source is not None and error.span is not None:
        primary = locate(source, error.span)
        labels = [(primary, "^", error.message)]
        if error.additional_info is not None:
            secondary = locate(source, error.additional_info.span)
            labels.append((secondary, "-", error.additional_info.message))

        gutter = len(str(max(label[0].line for label in labels)))
        pad = " " * gutter
        lines.append(f"{pad}--> {filename}:{primary.line}:{primary.column}")
        lines.append(f"{pad} |")
        for location, marker, message in sorted(labels, key=lambda label: label[0].line):
            underline = " " * (location.column - 1) + marker * max(location.width, 1)
            lines.append(f"{location.line:>{gutter}} | {location.text}")
            lines.append(f"{pad} | {underline} {message}")
        lines.append(f"{pad} |")
    elif error.additional_info is not None:
        lines.append(f"  = note: {error.additional_info.message}")
    if error.suggestions:
        lines.append(f"  = help: did you mean {', '.join(repr(s) for s in error.suggestions)}?")
    return "\n".join(lines)
