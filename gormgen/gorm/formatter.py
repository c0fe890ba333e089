"""Pretty-printer and sanity check for generated Go source.

This is not a Go parser. It checks what the model template can get wrong
(delimiters, string literals, identifiers) and applies the layout gofmt
would: tab indentation, aligned struct fields, no trailing whitespace and
no runs of blank lines.
"""

import re
from typing import List

from ..errors import FormatError

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
STRUCT_START_RE = re.compile(r"^type\s+(\S*)\s*struct\s*\{$")
FIELD_RE = re.compile(
    r"^(?P<name>\S+)\s+(?P<type>\S+)"
    r"(?:\s+(?P<tag>`[^`]*`))?"
    r"(?:\s+(?P<comment>//.*))?$"
)

_CLOSERS = {")": "(", "]": "[", "}": "{"}


def format_go_source(source: str) -> str:
    """Validate and lay out rendered Go source.

    Raises:
        FormatError: with the offending line when the text is malformed.
    """
    check_delimiters(source)

    lines = [line.rstrip() for line in source.replace("\r\n", "\n").split("\n")]
    lines = _collapse_blank_lines(lines)
    lines = _format_structs(lines)

    return "\n".join(lines).strip("\n") + "\n"


def check_delimiters(source: str):
    """Check that brackets balance and literals and comments are terminated."""
    stack = []  # (char, line)
    line = 1
    i = 0
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == "\n":
            line += 1
        elif ch == "/" and source.startswith("//", i):
            end = source.find("\n", i)
            i = n if end == -1 else end
            continue
        elif ch == "/" and source.startswith("/*", i):
            end = source.find("*/", i + 2)
            if end == -1:
                raise FormatError("unterminated block comment", line=line)
            line += source.count("\n", i, end)
            i = end + 2
            continue
        elif ch == "`":
            end = source.find("`", i + 1)
            if end == -1:
                raise FormatError("unterminated raw string literal", line=line)
            line += source.count("\n", i, end)
            i = end + 1
            continue
        elif ch in "\"'":
            i = _skip_quoted(source, i, line)
            continue
        elif ch in "([{":
            stack.append((ch, line))
        elif ch in _CLOSERS:
            if not stack or stack[-1][0] != _CLOSERS[ch]:
                raise FormatError(f"unexpected {ch!r}", line=line)
            stack.pop()
        i += 1

    if stack:
        opener, opened_at = stack[-1]
        raise FormatError(f"unclosed {opener!r}", line=opened_at)


def _skip_quoted(source: str, start: int, line: int) -> int:
    quote = source[start]
    i = start + 1
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "\n":
            break
        if ch == quote:
            return i + 1
        i += 1
    kind = "string" if quote == '"' else "rune"
    raise FormatError(f"unterminated {kind} literal", line=line)


def _collapse_blank_lines(lines: List[str]) -> List[str]:
    result = []
    for line in lines:
        if not line and result and not result[-1]:
            continue
        result.append(line)
    return result


def _format_structs(lines: List[str]) -> List[str]:
    result = []
    i = 0
    while i < len(lines):
        line = lines[i]
        match = STRUCT_START_RE.match(line.strip())
        if not match:
            result.append(line)
            i += 1
            continue

        name = match.group(1)
        if not IDENTIFIER_RE.match(name):
            raise FormatError(f"invalid type name {name!r}", line=i + 1)
        result.append(f"type {name} struct {{")
        i += 1

        section = []
        while i < len(lines) and lines[i].strip() != "}":
            body = lines[i].strip()
            if not body or body.startswith("//"):
                result.extend(_align_fields(section))
                section = []
                result.append(f"\t{body}" if body else "")
            else:
                section.append(_parse_field(body, i + 1))
            i += 1
        result.extend(_align_fields(section))
        if i < len(lines):
            result.append("}")
            i += 1
    return result


def _parse_field(body: str, line: int) -> List[str]:
    match = FIELD_RE.match(body)
    if not match:
        raise FormatError(f"malformed struct field {body!r}", line=line)
    name = match.group("name")
    if match.group("type").startswith("`"):
        raise FormatError(f"struct field without a name or type: {body!r}", line=line)
    if not IDENTIFIER_RE.match(name):
        raise FormatError(f"invalid field name {name!r}", line=line)
    return [part for part in match.group("name", "type", "tag", "comment") if part]


def _align_fields(rows: List[List[str]]) -> List[str]:
    """Align cells like text/tabwriter with one space of padding.

    Every cell except the last on a line is a column cell; a column is
    aligned over the consecutive lines that have a cell in it.
    """
    if not rows:
        return []
    widths = [[0] * (len(row) - 1) for row in rows]
    _measure(rows, widths, 0, len(rows), 0)
    return [
        "\t" + "".join(cell.ljust(width) for cell, width in zip(row, widths[idx])) + row[-1]
        for idx, row in enumerate(rows)
    ]


def _measure(rows, widths, start, end, column):
    line = start
    while line < end:
        if len(rows[line]) - 1 <= column:
            line += 1
            continue
        block_start = line
        width = 0
        while line < end and len(rows[line]) - 1 > column:
            width = max(width, len(rows[line][column]))
            line += 1
        for idx in range(block_start, line):
            widths[idx][column] = width + 1
        _measure(rows, widths, block_start, line, column + 1)
