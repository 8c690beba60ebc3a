# preprocessor/csv_parser.py
"""
Line-oriented CSV parsing for uploaded sensor data.

Cells may be wrapped in double quotes to protect embedded commas; a doubled
quote inside a quoted cell is a literal quote. Records never span lines, so
quoted newlines are not supported.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass
class ParsedTable:
    headers: List[str] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)

    def head(self, n=8):
        return self.rows[:n]

    def __len__(self):
        return len(self.rows)


def split_csv_line(line: str) -> List[str]:
    """
    Tokenize one line into trimmed cells.
    """
    cells = []
    current = []
    in_quotes = False
    i = 0

    while i < len(line):
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            cells.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    cells.append("".join(current))
    return [c.strip() for c in cells]


def parse_csv_text(text: str) -> ParsedTable:
    """
    Raw CSV text -> ParsedTable.

    - Blank lines are dropped wherever they appear
    - First line is the header row
    - Short rows are padded with "", extra cells are ignored
    """
    lines = [l for l in _LINE_BREAK_RE.split(text) if l.strip()]
    if not lines:
        return ParsedTable()

    headers = split_csv_line(lines[0])
    rows = []
    for line in lines[1:]:
        cols = split_csv_line(line)
        if len(cols) < len(headers):
            cols += [""] * (len(headers) - len(cols))
        rows.append({h: cols[i] for i, h in enumerate(headers)})

    return ParsedTable(headers=headers, rows=rows)


def _quote_cell(value) -> str:
    s = "" if value is None else str(value)
    if "\n" in s or "\r" in s:
        raise ValueError(f"Cell contains a line break and cannot be written: {s!r}")
    if "," in s or '"' in s:
        return '"' + s.replace('"', '""') + '"'
    return s


def _join_cells(cells) -> str:
    line = ",".join(_quote_cell(c) for c in cells)
    # a blank line would be skipped on read; quote the lone empty cell
    return line if line or not cells else '""'


def to_csv_text(headers, rows) -> str:
    """
    Write headers + row mappings back to CSV text readable by parse_csv_text.
    Missing keys are written as empty cells.
    """
    lines = [_join_cells(headers)]
    for row in rows:
        lines.append(_join_cells([row.get(h, "") for h in headers]))
    return "\n".join(lines) + "\n"
